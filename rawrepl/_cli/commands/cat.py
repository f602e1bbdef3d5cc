# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

import sys
import typing
import logging
import argparse
from rawrepl.session import Session
from rawrepl.fs import RemoteFileSystem, DEFAULT_CHUNK_SIZE
from . import _subsystems, _util
from ._base import Command, SubsystemFactory


_logger = logging.getLogger(__name__)


class CatCommand(Command):
    @property
    def names(self) -> typing.Sequence[str]:
        return ["cat", "get"]

    @property
    def help(self) -> str:
        return """
Download a file from the board and print it into stdout or save it into a local file.
""".strip()

    @property
    def examples(self) -> typing.Optional[str]:
        return """
rawrepl cat /boot.py
rawrepl get /data/log.csv --output log.csv
""".strip()

    @property
    def subsystem_factories(self) -> typing.Sequence[SubsystemFactory]:
        return [
            _subsystems.connection.ConnectionFactory(),
        ]

    def register_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("path", metavar="PATH", help="The remote file to read.")
        parser.add_argument(
            "--output",
            "-o",
            metavar="LOCAL_PATH",
            help="Save the content into this local file instead of printing it.",
        )
        parser.add_argument(
            "--chunk-size",
            metavar="BYTES",
            type=int,
            default=DEFAULT_CHUNK_SIZE,
            help="""
How many bytes to transfer per request. Larger chunks are faster but may exhaust the heap of small boards.
Default: %(default)s
""".strip(),
        )

    def execute(self, args: argparse.Namespace, subsystems: typing.Sequence[object]) -> int:
        (session,) = subsystems
        assert isinstance(session, Session)

        async def run() -> int:
            content = await RemoteFileSystem(session, chunk_size=args.chunk_size).read_file(args.path)
            _logger.info("Received %d bytes from %r", len(content), args.path)
            if args.output is not None:
                with open(args.output, "wb") as f:
                    f.write(content)
            else:
                sys.stdout.buffer.write(content)
                sys.stdout.buffer.flush()
            return 0

        return _util.run_with_session(session, run)
