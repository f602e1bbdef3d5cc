# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

import enum
import typing
import argparse


def make_enum_action(enum_type: typing.Type[enum.Enum]) -> typing.Type[argparse.Action]:
    """
    Constructs an argparse action that accepts the lowercase names of the enumeration members
    and stores the corresponding member.

    >>> class Color(enum.Enum):
    ...     RED = enum.auto()
    ...     GREEN = enum.auto()
    >>> parser = argparse.ArgumentParser()
    >>> _ = parser.add_argument('--color', default=Color.RED, action=make_enum_action(Color))
    >>> parser.parse_args(['--color', 'green']).color
    <Color.GREEN: 2>
    >>> parser.parse_args([]).color
    <Color.RED: 1>
    """
    mapping: typing.Dict[str, enum.Enum] = {e.name.lower(): e for e in enum_type}

    class ArgparseEnumAction(argparse.Action):
        def __init__(self, option_strings: typing.Sequence[str], dest: str, **kwargs: typing.Any):
            kwargs.setdefault("choices", list(mapping))
            kwargs.setdefault("metavar", "{" + ",".join(mapping) + "}")
            super().__init__(option_strings, dest, **kwargs)

        def __call__(
            self,
            parser: argparse.ArgumentParser,
            namespace: argparse.Namespace,
            values: typing.Union[str, typing.Sequence[typing.Any], None],
            option_string: typing.Optional[str] = None,
        ) -> None:
            setattr(namespace, self.dest, mapping[str(values)])

    return ArgparseEnumAction
