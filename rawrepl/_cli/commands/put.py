# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

import typing
import logging
import argparse
import posixpath
from rawrepl.session import Session
from rawrepl.fs import RemoteFileSystem, DEFAULT_CHUNK_SIZE
from . import _subsystems, _util
from ._base import Command, SubsystemFactory


_logger = logging.getLogger(__name__)


class PutCommand(Command):
    @property
    def names(self) -> typing.Sequence[str]:
        return ["put"]

    @property
    def help(self) -> str:
        return """
Upload a local file onto the board. If the remote path is not given, the file is stored in the root directory
of the board under its local name. The progress is reported into stderr if it is a terminal.
""".strip()

    @property
    def examples(self) -> typing.Optional[str]:
        return """
rawrepl put main.py
rawrepl put lib/ssd1306.py /lib/ssd1306.py --no-overwrite
""".strip()

    @property
    def subsystem_factories(self) -> typing.Sequence[SubsystemFactory]:
        return [
            _subsystems.connection.ConnectionFactory(),
        ]

    def register_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("local_path", metavar="LOCAL_PATH", help="The local file to upload.")
        parser.add_argument("path", metavar="PATH", nargs="?", help="The remote destination.")
        parser.add_argument(
            "--no-overwrite",
            action="store_true",
            help="Fail if the remote file exists.",
        )
        parser.add_argument(
            "--append",
            "-a",
            action="store_true",
            help="Append to the remote file instead of replacing its content.",
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
        with open(args.local_path, "rb") as f:
            content = f.read()
        path = args.path or posixpath.join("/", posixpath.basename(args.local_path.replace("\\", "/")))

        async def run() -> int:
            await RemoteFileSystem(session, chunk_size=args.chunk_size).write_file(
                path,
                content,
                overwrite=not args.no_overwrite,
                append=args.append,
                on_progress=_util.print_progress,
            )
            _logger.info("%d bytes written into %r", len(content), path)
            return 0

        return _util.run_with_session(session, run)
