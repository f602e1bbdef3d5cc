# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

"""
The YAML library we use is API-unstable at the time of writing, so the rest of the code talks to it through
this facade. PyYAML is not used because it does not preserve the ordering of mappings on round trip.
"""

import io
import typing
import ruamel.yaml


class YAMLDumper:
    """
    YAML generation facade.
    """

    def __init__(self, explicit_start: bool = False):
        # The roundtrip representer retains the ordering of mappings, which matters for human-edited files.
        self._impl = ruamel.yaml.YAML(typ="rt")
        self._impl.explicit_start = explicit_start  # type: ignore
        self._impl.default_flow_style = False

    def dump(self, data: typing.Any, stream: typing.TextIO) -> None:
        self._impl.dump(data, stream)

    def dumps(self, data: typing.Any) -> str:
        s = io.StringIO()
        self.dump(data, s)
        return s.getvalue()


class YAMLLoader:
    """
    YAML parsing facade.
    """

    def __init__(self) -> None:
        self._impl = ruamel.yaml.YAML(typ="safe")

    def load(self, text: str) -> typing.Any:
        return self._impl.load(text)


def _unittest_yaml() -> None:
    ref = YAMLDumper(explicit_start=True).dumps(
        {
            "name": "kitchen",
            "boards": [
                {"url": "ws://192.168.1.23:8266", "size": 4096},
            ],
        }
    )
    assert (
        ref
        == """---
name: kitchen
boards:
- url: ws://192.168.1.23:8266
  size: 4096
"""
    )
    assert YAMLLoader().load(ref) == {
        "name": "kitchen",
        "boards": [{"url": "ws://192.168.1.23:8266", "size": 4096}],
    }
    assert YAMLLoader().load("") is None
