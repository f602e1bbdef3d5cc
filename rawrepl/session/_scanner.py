# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

"""
The board communicates exclusively through recognizable textual markers, so the response boundaries are
found by scanning the incoming stream one byte at a time and comparing the tail of the accumulated data
against the expected sentinel.
"""

from __future__ import annotations
import typing
import logging
from rawrepl.transport import Transport, ReadTimeoutError


DEFAULT_SCAN_PERIOD = 0.001
"""
How long a budgeted scan iteration waits for its byte, in seconds.
"""


_logger = logging.getLogger(__name__)


async def read_until(
    transport: Transport,
    suffix: bytes,
    budget: typing.Optional[int] = None,
    *,
    period: float = DEFAULT_SCAN_PERIOD,
) -> bytes:
    """
    Reads the transport until the accumulated data ends with ``suffix``.
    Returns the accumulated data without the suffix; the result may be empty.

    :param transport: The transport to read from.

    :param suffix: The sentinel.

    :param budget: The number of scan iterations after which the scan is abandoned.
        One iteration consumes at most one byte and waits at most ``period`` seconds for it,
        so the budget bounds the number of bytes and the waiting time simultaneously.
        If None, the scan continues until the sentinel is found, each byte read being bounded only by the
        per-read timeout of the transport.

    :raises: :class:`rawrepl.transport.ReadTimeoutError` if the budget is exhausted.
    """
    if not suffix:
        raise ValueError("The sentinel shall not be empty")
    remaining = budget
    accumulator = bytearray()
    while True:
        if remaining is None:
            accumulator += await transport.read(1)
        else:
            if remaining <= 0:
                raise ReadTimeoutError(
                    f"Sentinel {suffix!r} not seen in {budget} iterations; received: {bytes(accumulator[-80:])!r}"
                )
            remaining -= 1
            try:
                accumulator += await transport.read(1, timeout=period)
            except ReadTimeoutError:
                continue
        if accumulator.endswith(suffix):
            out = bytes(accumulator[: -len(suffix)])
            _logger.debug("Sentinel %r found after %d bytes", suffix, len(out))
            return out


async def read_until_iter(
    transport: Transport,
    suffix: bytes,
    budget: typing.Optional[int] = None,
    *,
    period: float = DEFAULT_SCAN_PERIOD,
) -> typing.AsyncIterator[bytes]:
    """
    The streaming counterpart of :func:`read_until`: yields every byte preceding the sentinel as soon as it is
    known not to be a part of the sentinel. Single-byte sentinels incur no delay.

    The parameters are the same as those of :func:`read_until`.
    """
    if not suffix:
        raise ValueError("The sentinel shall not be empty")
    remaining = budget
    pending = bytearray()
    while True:
        if remaining is None:
            pending += await transport.read(1)
        else:
            if remaining <= 0:
                raise ReadTimeoutError(f"Sentinel {suffix!r} not seen in {budget} iterations")
            remaining -= 1
            try:
                pending += await transport.read(1, timeout=period)
            except ReadTimeoutError:
                continue
        if pending.endswith(suffix):
            return
        while len(pending) >= len(suffix):
            yield bytes(pending[:1])
            del pending[:1]
