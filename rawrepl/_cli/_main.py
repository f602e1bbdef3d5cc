# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

import sys
import time
import typing
import asyncio
import logging
import argparse
from . import commands


_logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(process)5d %(levelname)-8s %(name)s: %(message)s"


def main(argv: typing.Optional[typing.Sequence[str]] = None) -> None:
    logging.basicConfig(format=_LOG_FORMAT)  # Using the default log level; it will be overridden later.

    try:
        sys.exit(_main_impl(argv))
    except KeyboardInterrupt:
        _logger.info("Interrupted")
        _logger.debug("Stack trace where the program has been interrupted", exc_info=True)
        sys.exit(1)
    except AssertionError:
        raise  # Re-raise directly in order to have the stack trace printed. The user is not expected to see this.
    except Exception as ex:
        print("Error: %s:" % type(ex).__name__, ex, file=sys.stderr)
        _logger.info("Unhandled exception: %s", ex, exc_info=True)
        sys.exit(1)


def _main_impl(argv: typing.Optional[typing.Sequence[str]]) -> int:
    command_instances: typing.Sequence[commands.Command] = [cls() for cls in commands.get_available_command_classes()]

    args = _construct_argument_parser(command_instances).parse_args(argv)

    _configure_logging(args.verbose)

    _logger.debug("Available commands: %s", command_instances)
    _logger.debug("Parsed args: %s", args)

    if hasattr(args, "func"):
        # The transports bind to the current event loop upon construction, so it has to exist beforehand.
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        started_at = time.monotonic()
        try:
            result = args.func(args)
        finally:
            asyncio.set_event_loop(None)
            loop.close()
        _logger.debug("Command executed in %.1f seconds", time.monotonic() - started_at)
        assert isinstance(result, int)
        return result
    else:
        print("No command specified, nothing to do. Run with --help for usage help.", file=sys.stderr)
        print("Available commands:", file=sys.stderr)
        for cmd in command_instances:
            text = f"\t{cmd.names[0]}"
            if len(cmd.names) > 1:
                text += f' (aliases: {", ".join(cmd.names[1:])})'
            print(text, file=sys.stderr)
        return 1


def _construct_argument_parser(command_instances: typing.Sequence[commands.Command]) -> argparse.ArgumentParser:
    from rawrepl import __version__

    root_parser = argparse.ArgumentParser(
        prog="rawrepl",
        formatter_class=argparse.RawTextHelpFormatter,
        description="""
rawrepl -- a command line tool for running code on MicroPython boards and managing their files
over the raw REPL protocol, via a serial port or the WebREPL.

This tool is designed for use either directly by humans or from automation scripts.
""".strip(
            "\r\n"
        ),
    )

    # Register common arguments
    root_parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=f"%(prog)s {__version__}",
        help="""
Print the version string and exit. The tool is versioned synchronously with the rawrepl library.
""".strip(),
    )
    root_parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        help="Increase the verbosity of the output. Twice for extra verbosity.",
    )

    # Register commands
    subparsers = root_parser.add_subparsers()
    for cmd in command_instances:
        if cmd.examples:
            epilog = "Examples:\n" + cmd.examples
        else:
            epilog = ""

        parser = subparsers.add_parser(
            cmd.names[0],
            help=cmd.help,
            epilog=epilog,
            aliases=cmd.names[1:],
            formatter_class=argparse.RawTextHelpFormatter,
        )
        cmd.register_arguments(parser)
        for sf in cmd.subsystem_factories:
            sf.register_arguments(parser)

        parser.set_defaults(func=_make_executor(cmd))

    return root_parser


def _make_executor(cmd: commands.Command) -> typing.Callable[[argparse.Namespace], int]:
    def execute(args: argparse.Namespace) -> int:
        subsystems: typing.List[object] = []
        for sf in cmd.subsystem_factories:
            try:
                ss = sf.construct_subsystem(args)
            except Exception as ex:
                raise RuntimeError(
                    f"Subsystem factory {type(sf).__name__!r} for command {cmd.names[0]!r} has failed: {ex}"
                ) from ex
            else:
                subsystems.append(ss)
        _logger.debug("Invoking %r with subsystems %r and arguments %r", cmd, subsystems, args)
        return cmd.execute(args, subsystems)

    return execute


def _configure_logging(verbosity_level: typing.Optional[int]) -> None:
    """
    Until this function is invoked we're running the bootstrap default configuration.
    This function changes the configuration to use the correct production settings as specified.
    """
    log_level = {
        0: logging.WARNING,
        1: logging.INFO,
        2: logging.DEBUG,
    }.get(verbosity_level or 0, logging.DEBUG)

    logging.root.setLevel(log_level)

    try:
        import coloredlogs

        # The level spec applies to the handler, not the root logger! This is different from basicConfig().
        coloredlogs.install(level=log_level, fmt=_LOG_FORMAT)
    except Exception as ex:
        _logger.debug("Colored logs are not available: %s: %s", type(ex), ex)
        _logger.info('Consider installing "coloredlogs" from PyPI to make log messages look better')
