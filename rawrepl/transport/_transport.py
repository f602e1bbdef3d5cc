# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

from __future__ import annotations
import abc
import typing
import rawrepl.util


DEFAULT_READ_TIMEOUT = 10.0
"""
The per-read timeout used by transports when the caller does not specify one, in seconds.
"""


class _DefaultTimeout:
    def __repr__(self) -> str:
        return "DEFAULT"


DEFAULT = _DefaultTimeout()
"""
Sentinel for :meth:`Transport.read` meaning "use the per-read timeout configured on the transport".
It is distinct from None, which means "wait forever".
"""

Timeout = typing.Union[float, None, _DefaultTimeout]


class Transport(abc.ABC):
    """
    An abstract byte-stream channel to the board. Please read the module documentation for details.

    A transport is not a protocol participant: it moves bytes and nothing else.
    Exactly one :class:`rawrepl.session.Session` owns a transport instance; when the session is closed,
    the transport is closed as well.

    Implementations should ensure that properties do not raise exceptions.
    """

    @property
    @abc.abstractmethod
    def address(self) -> str:
        """
        A stable human-readable string identifying the endpoint, like ``/dev/ttyUSB0`` or ``ws://192.168.4.1:8266``.
        """
        raise NotImplementedError

    @property
    @abc.abstractmethod
    def kind(self) -> str:
        """
        The immutable connection kind tag for display purposes, like ``serial`` or ``webrepl``.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def available_bytes(self) -> int:
        """
        The number of received bytes that can be read immediately without blocking.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def read(self, size: int, timeout: Timeout = DEFAULT) -> bytes:
        """
        Returns exactly ``size`` bytes once they are available.

        :param size: Number of bytes to read.

        :param timeout: How long to wait for the data, in seconds.
            If not specified, the per-read timeout configured on the transport is used.
            None means wait forever.

        :raises: :class:`rawrepl.transport.ReadTimeoutError` if the data has not arrived in time.
            :class:`rawrepl.transport.ResourceClosedError` if the transport is closed.
            :class:`rawrepl.transport.TransportError` if the underlying channel has failed.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def write(self, data: bytes) -> None:
        """
        Delivers the data to the board. Returns only after the data is flushed into the channel.

        :raises: :class:`rawrepl.transport.ResourceClosedError` if the transport is closed.
            :class:`rawrepl.transport.TransportError` if the underlying channel has failed.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def close(self) -> None:
        """
        Releases the underlying resources.
        After a transport is closed, its I/O methods raise :class:`rawrepl.transport.ResourceClosedError`.
        Subsequent calls to close() will have no effect.
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return rawrepl.util.repr_attributes_noexcept(self, repr(self.address), kind=repr(self.kind))
