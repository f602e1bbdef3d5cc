# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

import typing
import argparse
from rawrepl.session import Session
from rawrepl.fs import RemoteFileSystem
from . import _subsystems, _util
from ._base import Command, SubsystemFactory


class ListCommand(Command):
    @property
    def names(self) -> typing.Sequence[str]:
        return ["ls"]

    @property
    def help(self) -> str:
        return """
List the entries of a directory on the board.
The output is a mapping of the entry names to their types ("file" or "directory").
""".strip()

    @property
    def examples(self) -> typing.Optional[str]:
        return """
rawrepl ls
rawrepl ls /lib --format=json
""".strip()

    @property
    def subsystem_factories(self) -> typing.Sequence[SubsystemFactory]:
        return [
            _subsystems.connection.ConnectionFactory(),
            _subsystems.formatter.FormatterFactory(),
        ]

    def register_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "path",
            metavar="PATH",
            nargs="?",
            default="/",
            help="The remote directory to list. Default: %(default)s",
        )

    def execute(self, args: argparse.Namespace, subsystems: typing.Sequence[object]) -> int:
        session, formatter = subsystems
        assert isinstance(session, Session)
        assert callable(formatter)

        async def run() -> int:
            entries = await RemoteFileSystem(session).listdir(args.path)
            print(formatter({name: kind.name.lower() for name, kind in entries}), end="")
            return 0

        return _util.run_with_session(session, run)
