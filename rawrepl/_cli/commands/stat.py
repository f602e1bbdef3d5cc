# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

import typing
import argparse
from rawrepl.session import Session
from rawrepl.fs import RemoteFileSystem
from . import _subsystems, _util
from ._base import Command, SubsystemFactory


class StatCommand(Command):
    @property
    def names(self) -> typing.Sequence[str]:
        return ["stat"]

    @property
    def help(self) -> str:
        return """
Show the type, the size, and the timestamps of a file or a directory on the board.
The timestamps are in seconds since the epoch of the board, which is not necessarily the Unix epoch.
""".strip()

    @property
    def examples(self) -> typing.Optional[str]:
        return """
rawrepl stat /main.py
""".strip()

    @property
    def subsystem_factories(self) -> typing.Sequence[SubsystemFactory]:
        return [
            _subsystems.connection.ConnectionFactory(),
            _subsystems.formatter.FormatterFactory(),
        ]

    def register_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("path", metavar="PATH", help="The remote path.")

    def execute(self, args: argparse.Namespace, subsystems: typing.Sequence[object]) -> int:
        session, formatter = subsystems
        assert isinstance(session, Session)
        assert callable(formatter)

        async def run() -> int:
            st = await RemoteFileSystem(session).stat(args.path)
            out = {
                args.path: {
                    "type": st.type.name.lower(),
                    "size": st.size,
                    "ctime": st.ctime,
                    "mtime": st.mtime,
                }
            }
            print(formatter(out), end="")
            return 0

        return _util.run_with_session(session, run)
