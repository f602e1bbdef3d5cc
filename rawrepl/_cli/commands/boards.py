# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

import typing
import argparse
from rawrepl.webrepl import BoardRegistry
from . import _subsystems
from ._base import Command, SubsystemFactory


class BoardsCommand(Command):
    @property
    def names(self) -> typing.Sequence[str]:
        return ["boards"]

    @property
    def help(self) -> str:
        return """
List the boards saved for connecting over the WebREPL. The passwords are not shown unless requested.
""".strip()

    @property
    def examples(self) -> typing.Optional[str]:
        return """
rawrepl boards
rawrepl boards --show-passwords --format=json
""".strip()

    @property
    def subsystem_factories(self) -> typing.Sequence[SubsystemFactory]:
        return [
            _subsystems.registry.RegistryFactory(),
            _subsystems.formatter.FormatterFactory(),
        ]

    def register_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--show-passwords",
            action="store_true",
            help="Include the WebREPL passwords in the output.",
        )

    def execute(self, args: argparse.Namespace, subsystems: typing.Sequence[object]) -> int:
        registry, formatter = subsystems
        assert isinstance(registry, BoardRegistry)
        assert callable(formatter)
        out: typing.Dict[str, typing.Dict[str, str]] = {}
        for rec in registry.boards:
            item = {"url": rec.url, "date": rec.date}
            if args.show_passwords:
                item["password"] = rec.password
            out[rec.name] = item
        if out:
            print(formatter(out), end="")
        return 0
