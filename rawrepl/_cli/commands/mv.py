# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

import typing
import argparse
from rawrepl.session import Session
from rawrepl.fs import RemoteFileSystem
from . import _subsystems, _util
from ._base import Command, SubsystemFactory


class MoveCommand(Command):
    @property
    def names(self) -> typing.Sequence[str]:
        return ["mv"]

    @property
    def help(self) -> str:
        return "Rename or move a file or a directory on the board."

    @property
    def examples(self) -> typing.Optional[str]:
        return "rawrepl mv /main.py /main.py.bak"

    @property
    def subsystem_factories(self) -> typing.Sequence[SubsystemFactory]:
        return [
            _subsystems.connection.ConnectionFactory(),
        ]

    def register_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("old_path", metavar="OLD_PATH", help="The remote path to rename.")
        parser.add_argument("new_path", metavar="NEW_PATH", help="The new remote path.")
        parser.add_argument(
            "--force",
            "-f",
            action="store_true",
            help="Replace the destination if it exists.",
        )

    def execute(self, args: argparse.Namespace, subsystems: typing.Sequence[object]) -> int:
        (session,) = subsystems
        assert isinstance(session, Session)

        async def run() -> int:
            await RemoteFileSystem(session).rename(args.old_path, args.new_path, overwrite=args.force)
            return 0

        return _util.run_with_session(session, run)
