# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

from __future__ import annotations
import typing
import asyncio
import logging
from .._error import ReadTimeoutError


_logger = logging.getLogger(__name__)


class ReceiveBuffer:
    """
    Accumulates the data received by the reader thread of a transport and hands it out to the coroutines
    running on the event loop.

    The methods are not thread-safe: the reader thread shall deliver the data via
    ``loop.call_soon_threadsafe(buffer.push, data)``.

    >>> import asyncio
    >>> async def demo() -> bytes:
    ...     buf = ReceiveBuffer()
    ...     buf.push(b"raw REPL")
    ...     return await buf.read(3, timeout=1.0)
    >>> asyncio.run(demo())
    b'raw'
    """

    def __init__(self) -> None:
        self._data = bytearray()
        self._event = asyncio.Event()
        self._error: typing.Optional[Exception] = None

    def __len__(self) -> int:
        return len(self._data)

    def push(self, data: bytes) -> None:
        if data:
            self._data += data
            self._event.set()

    def fail(self, error: Exception) -> None:
        """
        Latches the error; it will be raised from every subsequent read that cannot be satisfied from the buffer.
        Only the first error is retained.
        """
        if self._error is None:
            _logger.debug("Receive buffer failure latched: %r", error)
            self._error = error
        self._event.set()

    async def read(self, size: int, timeout: typing.Optional[float]) -> bytes:
        loop = asyncio.get_event_loop()
        deadline = None if timeout is None else loop.time() + timeout
        while len(self._data) < size:
            if self._error is not None:
                raise self._error
            self._event.clear()
            if deadline is None:
                await self._event.wait()
                continue
            remaining = deadline - loop.time()
            if remaining <= 0:
                raise ReadTimeoutError(
                    f"Expected {size} bytes within {timeout:.3f} s but only {len(self._data)} arrived"
                )
            try:
                await asyncio.wait_for(self._event.wait(), remaining)
            except asyncio.TimeoutError:
                pass  # The deadline is checked at the next iteration.
        out = bytes(self._data[:size])
        del self._data[:size]
        return out
