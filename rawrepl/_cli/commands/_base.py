# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

import abc
import typing
import argparse
import rawrepl.util
from ._subsystems import SubsystemFactory as SubsystemFactory


class Command(abc.ABC):
    """
    One subcommand of the ``rawrepl`` tool, like ``exec`` or ``put``.
    Every concrete subclass found in the :mod:`rawrepl._cli` package is registered automatically;
    therefore, the constructor shall accept no arguments.

    Most commands talk to the board; such commands list the connection factory among their subsystems
    and receive a ready :class:`rawrepl.session.Session` in :meth:`execute`.
    """

    @property
    @abc.abstractmethod
    def names(self) -> typing.Sequence[str]:
        """
        The subcommand name followed by its aliases, e.g., ``["exec", "x"]``.
        """
        raise NotImplementedError

    @property
    @abc.abstractmethod
    def help(self) -> str:
        """
        Shown by ``rawrepl <command> --help``. Keep the lines within 80 columns.
        """
        raise NotImplementedError

    @property
    @abc.abstractmethod
    def examples(self) -> typing.Optional[str]:
        """
        Sample invocations appended to the help text, or None.
        """
        raise NotImplementedError

    @property
    @abc.abstractmethod
    def subsystem_factories(self) -> typing.Sequence[SubsystemFactory]:
        """
        The factories contribute their own options to the parser of the command (e.g., ``--connection``, ``--format``)
        and build the objects passed into :meth:`execute`, in the same order.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def register_arguments(self, parser: argparse.ArgumentParser) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def execute(self, args: argparse.Namespace, subsystems: typing.Sequence[object]) -> int:
        """
        Returns the exit status of the tool. Exceptions are reported by the caller as ``Error: <type>: <text>``
        with the exit status 1.
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return rawrepl.util.repr_attributes(self, names=self.names)
