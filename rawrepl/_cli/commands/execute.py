# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

from __future__ import annotations
import sys
import typing
import signal
import asyncio
import logging
import argparse
from rawrepl.session import Session, INTERRUPT
from . import _subsystems, _util
from ._base import Command, SubsystemFactory


# MicroPython prints this line first when reporting an unhandled exception.
_TRACEBACK_MARKER = b"Traceback (most recent call last):"


_logger = logging.getLogger(__name__)


class ExecCommand(Command):
    @property
    def names(self) -> typing.Sequence[str]:
        return ["exec", "x"]

    @property
    def help(self) -> str:
        return """
Execute Python code on the board and print its output.

By default, the output is streamed as it arrives; pressing Ctrl-C interrupts the program running on the board
(the board then reports a KeyboardInterrupt). In the batch mode, the output is printed once the program has
completed; the standard error of the board goes into the standard error of this tool.

The exit status is 1 if the code has raised an unhandled exception on the board.
""".strip()

    @property
    def examples(self) -> typing.Optional[str]:
        return """
rawrepl exec "print(2 + 2)"
rawrepl exec --file blink.py
rawrepl -v exec --batch "import os; print(os.uname())"
""".strip()

    @property
    def subsystem_factories(self) -> typing.Sequence[SubsystemFactory]:
        return [
            _subsystems.connection.ConnectionFactory(),
        ]

    def register_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "code",
            metavar="CODE",
            nargs="?",
            help="""
The code to execute. Mutually exclusive with --file.
""".strip(),
        )
        parser.add_argument(
            "--file",
            "-f",
            metavar="PATH",
            help="""
Read the code to execute from the local file.
""".strip(),
        )
        parser.add_argument(
            "--batch",
            "-b",
            action="store_true",
            help="""
Wait for the program to complete instead of streaming its output.
""".strip(),
        )

    def execute(self, args: argparse.Namespace, subsystems: typing.Sequence[object]) -> int:
        (session,) = subsystems
        assert isinstance(session, Session)
        if (args.code is None) == (args.file is None):
            session.close()
            raise ValueError("Either the code or the file shall be specified, but not both")
        if args.file is not None:
            with open(args.file, "r", encoding="utf8") as f:
                code = f.read()
        else:
            code = args.code

        if args.batch:
            return _util.run_with_session(session, lambda: _run_batch(session, code))
        return _util.run_with_session(session, lambda: _run_streaming(session, code, sys.stdout.buffer))


async def _run_batch(session: Session, code: str) -> int:
    result = await session.execute(code)
    sys.stdout.write(result.output)
    sys.stdout.flush()
    if result.failed:
        sys.stderr.write(result.error)
        sys.stderr.flush()
        return 1
    return 0


async def _run_streaming(session: Session, code: str, output: typing.BinaryIO) -> int:
    loop = asyncio.get_event_loop()
    interrupt_handler_installed = False
    window = bytearray()
    failed = False
    try:
        loop.add_signal_handler(signal.SIGINT, lambda: loop.create_task(_interrupt(session)))
        interrupt_handler_installed = True
    except (NotImplementedError, RuntimeError, ValueError) as ex:  # pragma: no cover
        _logger.info("Ctrl-C will not be forwarded to the board: %s", ex)
    try:
        async for chunk in session.execute_interactive(code):
            output.write(chunk)
            output.flush()
            window += chunk
            failed = failed or _TRACEBACK_MARKER in window
            del window[: -len(_TRACEBACK_MARKER)]
    finally:
        if interrupt_handler_installed:
            loop.remove_signal_handler(signal.SIGINT)
    return 1 if failed else 0


async def _interrupt(session: Session) -> None:
    _logger.info("Interrupting the program running on the board")
    await session.dangerously_write(INTERRUPT)
