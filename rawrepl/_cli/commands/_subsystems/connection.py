# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

from __future__ import annotations
import os
import typing
import inspect
import logging
import argparse
import rawrepl
from rawrepl.session import Session
from rawrepl.webrepl import BoardRegistry
from ._base import SubsystemFactory
from .registry import add_registry_argument


_logger = logging.getLogger(__name__)


_ENV_VAR_NAME = "RAWREPL_CLI_CONNECTION"

DEFAULT_HANDSHAKE_ATTEMPTS = 10

PRELUDE = "import os"


class ConnectionFactory(SubsystemFactory):
    """
    Constructs the session with the board. The session is not initialized;
    the command is expected to do that in its event loop.
    """

    def register_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--connection",
            "-C",
            metavar="EXPRESSION",
            help=f"""
A Python expression that yields a transport instance upon evaluation. If the expression fails to evaluate or yields
anything that is not a transport instance, the command fails. If neither this argument nor --board is provided,
the connection configuration will be picked up from the environment variable {_ENV_VAR_NAME}.

All nested submodules under "rawrepl.transport" are imported before the expression is evaluated, so the expression
itself does not need to explicitly import anything. Transports whose dependencies are not installed are silently
skipped. All classes that implement "rawrepl.transport.Transport" are available under their original name but
without the shared "Transport" suffix.

Examples:
    Serial('/dev/ttyUSB0', baudrate=115200)
    Serial('COM9')
    Serial('socket://192.168.1.20:2217')
    WebREPL('ws://192.168.1.23:8266', 'secret')

It is often more convenient to use the environment variable instead of typing the argument:
    export {_ENV_VAR_NAME}="Serial('/dev/ttyUSB0', baudrate=115200)"
""".strip(),
        )
        parser.add_argument(
            "--board",
            "-B",
            metavar="NAME",
            help="""
Connect over the WebREPL to the board saved earlier under this name (see commands "webrepl-setup" and "boards").
""".strip(),
        )
        add_registry_argument(parser)
        parser.add_argument(
            "--handshake-attempts",
            metavar="COUNT",
            type=int,
            default=DEFAULT_HANDSHAKE_ATTEMPTS,
            help="""
How many times to try bringing the board into the raw REPL mode before giving up.
Zero means keep trying until the board responds.
Default: %(default)s
""".strip(),
        )

    def construct_subsystem(self, args: argparse.Namespace) -> Session:
        if args.connection is not None and args.board is not None:
            raise ValueError("The connection expression and the board name are mutually exclusive")

        if args.board is not None:
            registry = BoardRegistry(args.registry)
            rec = registry.find(args.board)
            if rec is None:
                raise ValueError(f"Board {args.board!r} is not found in {registry.path}")
            from rawrepl.transport.webrepl import WebREPLTransport

            _logger.info("Connecting to the saved board %r at %s", rec.name, rec.url)
            transport: rawrepl.transport.Transport = WebREPLTransport(rec.url, rec.password)
        else:
            expression = args.connection
            if expression is None:
                _logger.info(
                    "Command line arguments do not specify the connection; trying the environment variable %s instead",
                    _ENV_VAR_NAME,
                )
                expression = os.environ.get(_ENV_VAR_NAME, None)
            if not expression:
                raise ValueError(f"No connection specified; use --connection, --board, or {_ENV_VAR_NAME}")
            transport = _evaluate_transport_expr(expression, _make_evaluation_context())

        _logger.info("Resulting transport: %r", transport)
        attempts = args.handshake_attempts if args.handshake_attempts > 0 else None
        return Session(transport, max_handshake_attempts=attempts, prelude=PRELUDE)


def _evaluate_transport_expr(expression: str, context: typing.Dict[str, typing.Any]) -> rawrepl.transport.Transport:
    out = eval(expression, context)
    _logger.debug("Expression %r yields %r", expression, out)
    if isinstance(out, rawrepl.transport.Transport):
        return out
    raise ValueError(
        f"The expression {expression!r} yields an instance of {type(out).__name__!r}. "
        f"Expected an instance of rawrepl.transport.Transport."
    )


def _make_evaluation_context() -> typing.Dict[str, typing.Any]:
    def handle_import_error(parent_module_name: str, ex: ImportError) -> None:
        try:
            tr = parent_module_name.split(".")[2]
        except LookupError:
            tr = parent_module_name
        _logger.info("Transport %r is not available due to the missing dependency %r", tr, ex.name)

    # noinspection PyTypeChecker
    rawrepl.util.import_submodules(rawrepl.transport, error_handler=handle_import_error)

    context: typing.Dict[str, typing.Any] = {
        "rawrepl": rawrepl,
    }

    for name, module in inspect.getmembers(rawrepl.transport, inspect.ismodule):
        if not name.startswith("_"):
            context[name] = module

    transport_base = rawrepl.transport.Transport
    # Suppressing MyPy false positive: https://github.com/python/mypy/issues/5374
    for cls in rawrepl.util.iter_descendants(transport_base):  # type: ignore
        if not cls.__name__.startswith("_") and cls.__name__.endswith(transport_base.__name__):
            name = cls.__name__.rpartition(transport_base.__name__)[0]
            if name:
                context[name] = cls

    _logger.debug("Transport expression evaluation context (on the next line):\n%r", context)
    return context


def _unittest_evaluation_context() -> None:
    from rawrepl.transport.serial import SerialTransport

    context = _make_evaluation_context()
    assert context["Serial"] is SerialTransport
    assert context["rawrepl"] is rawrepl
    assert "serial" in context
