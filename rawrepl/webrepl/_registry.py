# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

from __future__ import annotations
import os
import sys
import typing
import logging
import pathlib
import datetime
import dataclasses
from rawrepl._yaml import YAMLDumper, YAMLLoader


DEFAULT_REGISTRY_PATH: pathlib.Path
"""
Where the saved boards are stored unless specified otherwise. The location is platform-dependent.
"""

if hasattr(sys, "getwindowsversion"):  # pragma: no cover
    _appdata_env = os.getenv("LOCALAPPDATA") or os.getenv("APPDATA")
    assert _appdata_env, "Cannot determine the location of the app data directory"
    DEFAULT_REGISTRY_PATH = pathlib.Path(_appdata_env, "rawrepl", "boards.yaml")
else:
    DEFAULT_REGISTRY_PATH = pathlib.Path("~/.rawrepl/boards.yaml").expanduser()

_DATE_FORMAT = "%Y-%m-%d %H:%M"


_logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class BoardRecord:
    name: str
    url: str
    password: str
    date: str = dataclasses.field(default_factory=lambda: datetime.datetime.now().strftime(_DATE_FORMAT))


class BoardRegistry:
    """
    The list of the boards reachable over the WebREPL, persisted in a YAML file.
    The file is re-read on every access, so that concurrent invocations of the command-line tool
    see the changes made by each other.

    >>> import tempfile
    >>> reg = BoardRegistry(pathlib.Path(tempfile.mkdtemp(), 'boards.yaml'))
    >>> reg.boards
    []
    >>> reg.add(BoardRecord('kitchen', 'ws://192.168.1.23:8266', 'secret', date='2022-05-01 10:00'))
    >>> reg.find('kitchen')
    BoardRecord(name='kitchen', url='ws://192.168.1.23:8266', password='secret', date='2022-05-01 10:00')
    >>> reg.find('garage') is None
    True
    """

    def __init__(self, path: typing.Union[str, pathlib.Path] = DEFAULT_REGISTRY_PATH):
        self._path = pathlib.Path(path)

    @property
    def path(self) -> pathlib.Path:
        return self._path

    @property
    def boards(self) -> typing.List[BoardRecord]:
        """
        The saved boards in the order of addition.
        """
        if not self._path.exists():
            return []
        data = YAMLLoader().load(self._path.read_text(encoding="utf8")) or []
        if not isinstance(data, list):
            raise ValueError(f"{self._path}: Expected a list of boards, got {type(data).__name__}")
        return [BoardRecord(**{k: str(v) for k, v in item.items()}) for item in data]

    def add(self, record: BoardRecord) -> None:
        """
        Saves the board. A board saved earlier under the same name is replaced.
        """
        records = [x for x in self.boards if x.name != record.name]
        records.append(record)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(YAMLDumper().dumps([dataclasses.asdict(x) for x in records]), encoding="utf8")
        _logger.info("%s: Board %r saved (%d in total)", self, record.name, len(records))

    def find(self, name: str) -> typing.Optional[BoardRecord]:
        for rec in self.boards:
            if rec.name == name:
                return rec
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self._path)!r})"
