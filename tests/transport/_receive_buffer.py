# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

import asyncio
import pytest
from rawrepl.transport import ReadTimeoutError, ResourceClosedError, TransportError
from rawrepl.transport.commons import ReceiveBuffer

pytestmark = pytest.mark.asyncio


async def _unittest_receive_buffer() -> None:
    buf = ReceiveBuffer()
    assert len(buf) == 0
    with pytest.raises(ReadTimeoutError):
        await buf.read(1, timeout=0.05)

    buf.push(b"OK")
    buf.push(b"")
    assert len(buf) == 2
    assert await buf.read(1, timeout=0) == b"O"
    assert await buf.read(1, timeout=None) == b"K"

    # The reader is woken up by the data that arrives later.
    loop = asyncio.get_event_loop()
    loop.call_later(0.05, buf.push, b"\x04")
    loop.call_later(0.1, buf.push, b"\x04>")
    assert await buf.read(2, timeout=1.0) == b"\x04\x04"
    assert len(buf) == 1

    # The buffered data is still available after a failure; the error is raised once it is exhausted.
    buf.fail(TransportError("unplugged"))
    buf.fail(ResourceClosedError("closed"))  # Only the first error is retained.
    assert await buf.read(1, timeout=None) == b">"
    with pytest.raises(TransportError, match="unplugged"):
        await buf.read(1, timeout=None)


async def _unittest_receive_buffer_failure_wakes_reader() -> None:
    buf = ReceiveBuffer()
    asyncio.get_event_loop().call_later(0.05, buf.fail, ResourceClosedError("closed"))
    with pytest.raises(ResourceClosedError):
        await buf.read(1, timeout=None)
