# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

import typing
import argparse
from rawrepl.session import Session
from rawrepl.fs import RemoteFileSystem
from . import _subsystems, _util
from ._base import Command, SubsystemFactory


class RemoveCommand(Command):
    @property
    def names(self) -> typing.Sequence[str]:
        return ["rm"]

    @property
    def help(self) -> str:
        return """
Delete a file or a directory on the board. Non-empty directories can only be deleted recursively.
""".strip()

    @property
    def examples(self) -> typing.Optional[str]:
        return """
rawrepl rm /main.py
rawrepl rm -r /lib
""".strip()

    @property
    def subsystem_factories(self) -> typing.Sequence[SubsystemFactory]:
        return [
            _subsystems.connection.ConnectionFactory(),
        ]

    def register_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("path", metavar="PATH", help="The remote path to delete.")
        parser.add_argument(
            "--recursive",
            "-r",
            action="store_true",
            help="Delete directories along with their content.",
        )

    def execute(self, args: argparse.Namespace, subsystems: typing.Sequence[object]) -> int:
        (session,) = subsystems
        assert isinstance(session, Session)

        async def run() -> int:
            await RemoteFileSystem(session).delete(args.path, recursive=args.recursive)
            return 0

        return _util.run_with_session(session, run)
