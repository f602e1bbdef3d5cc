# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

import asyncio
import pytest
from rawrepl.transport import ReadTimeoutError
from rawrepl.session import read_until, read_until_iter, SingleFlightLock
from tests.mock import MockTransport

pytestmark = pytest.mark.asyncio


async def _unittest_read_until() -> None:
    tr = MockTransport(greeting=b"raw REPL; CTRL-B to exit\r\n>OK\x04\x04tail")
    assert await read_until(tr, b"raw REPL; CTRL-B to exit\r\n") == b""
    assert await read_until(tr, b"OK", 10) == b">"
    # Empty prefixes are valid.
    assert await read_until(tr, b"\x04") == b""
    assert await read_until(tr, b"\x04") == b""
    # The scan consumes exactly the bytes up to and including the sentinel.
    assert tr.available_bytes() == len(b"tail")

    with pytest.raises(ReadTimeoutError):
        await read_until(tr, b"\x04", 10)  # The budget is exhausted.
    # Everything that has been scanned is consumed.
    assert tr.available_bytes() == 0

    with pytest.raises(ValueError):
        await read_until(tr, b"")


async def _unittest_read_until_budget_is_iterations() -> None:
    tr = MockTransport(greeting=b"")
    loop = asyncio.get_event_loop()
    started_at = loop.time()
    with pytest.raises(ReadTimeoutError):
        await read_until(tr, b">", 20, period=0.01)
    # Each of the 20 iterations waits for its byte for 10 ms.
    assert 0.15 < loop.time() - started_at < 2.0

    # The budget is not reset by incoming bytes; it bounds the scan length as well.
    tr = MockTransport(greeting=b"0123456789" * 10 + b">")
    with pytest.raises(ReadTimeoutError):
        await read_until(tr, b">", 50)


async def _unittest_read_until_unbounded_uses_transport_timeout() -> None:
    tr = MockTransport(greeting=b"abc", read_timeout=0.2)
    with pytest.raises(ReadTimeoutError):
        await read_until(tr, b">")


async def _unittest_read_until_iter() -> None:
    tr = MockTransport(greeting=b"hello\x04world\x04")
    assert [x async for x in read_until_iter(tr, b"\x04")] == [b"h", b"e", b"l", b"l", b"o"]
    assert b"".join([x async for x in read_until_iter(tr, b"\x04")]) == b"world"

    # Multi-byte sentinels are never leaked into the output even partially.
    tr = MockTransport(greeting=b"a>b>>c>>>")
    assert b"".join([x async for x in read_until_iter(tr, b">>>")]) == b"a>b>>c"

    tr = MockTransport(greeting=b"")
    with pytest.raises(ReadTimeoutError):
        _ = [x async for x in read_until_iter(tr, b"\x04", 5)]


async def _unittest_single_flight_lock() -> None:
    lock = SingleFlightLock()
    assert not lock.busy
    log = []

    async def op(name: str, fail: bool = False) -> str:
        assert lock.busy
        log.append(name + "+")
        await asyncio.sleep(0.01)
        log.append(name + "-")
        if fail:
            raise RuntimeError(name)
        return name

    results = await asyncio.gather(
        lock.run(lambda: op("a")),
        lock.run(lambda: op("b", fail=True)),
        lock.run(lambda: op("c")),
        return_exceptions=True,
    )
    assert results[0] == "a" and results[2] == "c"
    assert isinstance(results[1], RuntimeError)
    # No overlap, and a failed operation does not wedge the lock.
    assert log == ["a+", "a-", "b+", "b-", "c+", "c-"]
    assert not lock.busy

    async with lock:
        assert lock.busy
    assert not lock.busy
    assert "busy=False" in repr(lock)
