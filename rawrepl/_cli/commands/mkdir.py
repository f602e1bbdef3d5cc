# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

import typing
import argparse
from rawrepl.session import Session
from rawrepl.fs import RemoteFileSystem
from . import _subsystems, _util
from ._base import Command, SubsystemFactory


class MakeDirectoryCommand(Command):
    @property
    def names(self) -> typing.Sequence[str]:
        return ["mkdir"]

    @property
    def help(self) -> str:
        return "Create a directory on the board. The parent directory shall exist."

    @property
    def examples(self) -> typing.Optional[str]:
        return "rawrepl mkdir /lib"

    @property
    def subsystem_factories(self) -> typing.Sequence[SubsystemFactory]:
        return [
            _subsystems.connection.ConnectionFactory(),
        ]

    def register_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("path", metavar="PATH", help="The remote directory to create.")

    def execute(self, args: argparse.Namespace, subsystems: typing.Sequence[object]) -> int:
        (session,) = subsystems
        assert isinstance(session, Session)

        async def run() -> int:
            await RemoteFileSystem(session).mkdir(args.path)
            return 0

        return _util.run_with_session(session, run)
