# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

import typing
import rawrepl.util
from ._base import Command as Command, SubsystemFactory as SubsystemFactory


def get_available_command_classes() -> typing.Sequence[typing.Type[Command]]:
    import rawrepl._cli

    # noinspection PyTypeChecker
    rawrepl.util.import_submodules(rawrepl._cli)
    # https://github.com/python/mypy/issues/5374
    return list(rawrepl.util.iter_descendants(Command))  # type: ignore
