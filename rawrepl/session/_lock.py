# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

from __future__ import annotations
import typing
import asyncio
import rawrepl.util


T = typing.TypeVar("T")


class SingleFlightLock:
    """
    Admits at most one logical operation on the transport at a time.
    Waiters are woken as soon as the lock is released; the lock is released even if the operation fails.

    >>> async def demo() -> typing.List[str]:
    ...     lock = SingleFlightLock()
    ...     log: typing.List[str] = []
    ...     async def op(name: str) -> str:
    ...         log.append(name + '+')
    ...         await asyncio.sleep(0.01)
    ...         log.append(name + '-')
    ...         return name
    ...     await asyncio.gather(lock.run(lambda: op('a')), lock.run(lambda: op('b')))
    ...     return log
    >>> asyncio.run(demo())
    ['a+', 'a-', 'b+', 'b-']
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def run(self, fn: typing.Callable[[], typing.Awaitable[T]]) -> T:
        async with self._lock:
            return await fn()

    async def __aenter__(self) -> SingleFlightLock:
        await self._lock.acquire()
        return self

    async def __aexit__(self, *_: typing.Any) -> None:
        self._lock.release()

    def __repr__(self) -> str:
        return rawrepl.util.repr_attributes(self, busy=self.busy)
