# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

import typing
import argparse
from rawrepl.session import Session
from rawrepl.webrepl import get_webrepl_url
from . import _subsystems, _util
from ._base import Command, SubsystemFactory


class WebREPLURLCommand(Command):
    @property
    def names(self) -> typing.Sequence[str]:
        return ["webrepl-url"]

    @property
    def help(self) -> str:
        return """
Start the WebREPL server on the board unless it is running already and print its URL.
The board shall be connected to a network.
""".strip()

    @property
    def examples(self) -> typing.Optional[str]:
        return "rawrepl webrepl-url --connection=\"Serial('/dev/ttyUSB0')\""

    @property
    def subsystem_factories(self) -> typing.Sequence[SubsystemFactory]:
        return [
            _subsystems.connection.ConnectionFactory(),
        ]

    def register_arguments(self, parser: argparse.ArgumentParser) -> None:
        del parser

    def execute(self, args: argparse.Namespace, subsystems: typing.Sequence[object]) -> int:
        (session,) = subsystems
        assert isinstance(session, Session)

        async def run() -> int:
            print(await get_webrepl_url(session))
            return 0

        return _util.run_with_session(session, run)
