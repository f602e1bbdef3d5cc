# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

from __future__ import annotations
import enum
import typing
import logging
import argparse
from rawrepl._yaml import YAMLDumper
from .._argparse_helpers import make_enum_action
from ._base import SubsystemFactory


Formatter = typing.Callable[[typing.Any], str]

_logger = logging.getLogger(__name__)


class FormatterFactory(SubsystemFactory):
    def register_arguments(self, parser: argparse.ArgumentParser) -> None:
        # noinspection PyTypeChecker
        parser.add_argument(
            "--format",
            "-F",
            default=next(iter(_Format)),
            action=make_enum_action(_Format),
            help="""
The format of the data printed into stdout.

YAML is the default option as it is easy to process for humans and other machines alike. Each YAML-formatted object
is separated from its siblings by an explicit document start marker: "---".

JSON output is optimized for machine parsing, strictly one object per line.

Default: %(default)s
""".strip(),
        )

    def construct_subsystem(self, args: argparse.Namespace) -> Formatter:
        return {
            _Format.YAML: _make_yaml_formatter,
            _Format.JSON: _make_json_formatter,
        }[args.format]()


class _Format(enum.Enum):
    YAML = enum.auto()
    JSON = enum.auto()


def _make_yaml_formatter() -> Formatter:
    dumper = YAMLDumper(explicit_start=True)
    return lambda data: dumper.dumps(data)


def _make_json_formatter() -> Formatter:
    # simplejson is preferred over the standard json because it preserves the ordering of dicts on all versions
    # and serializes Decimal natively.
    import simplejson as json

    return lambda data: json.dumps(data, ensure_ascii=False, separators=(",", ":")) + "\n"


def _unittest_formatter() -> None:
    obj = {
        "main.py": {
            "type": "file",
            "size": 1024,
        },
        "lib": {
            "type": "directory",
            "entries": ["umqtt", "ssd1306.py"],
        },
    }
    assert (
        FormatterFactory().construct_subsystem(argparse.Namespace(format=_Format.YAML))(obj)
        == """---
main.py:
  type: file
  size: 1024
lib:
  type: directory
  entries:
  - umqtt
  - ssd1306.py
"""
    )
    assert (
        FormatterFactory().construct_subsystem(argparse.Namespace(format=_Format.JSON))(obj)
        == '{"main.py":{"type":"file","size":1024},"lib":{"type":"directory","entries":["umqtt","ssd1306.py"]}}\n'
    )
