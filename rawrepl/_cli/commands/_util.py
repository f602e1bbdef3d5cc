# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

from __future__ import annotations
import sys
import typing
import asyncio
import logging
from rawrepl.session import Session


T = typing.TypeVar("T")


_logger = logging.getLogger(__name__)


def run_with_session(session: Session, fn: typing.Callable[[], typing.Awaitable[T]]) -> T:
    """
    Initializes the session, runs the function, and closes the session regardless of the outcome.
    The function is executed on the current event loop.
    """

    async def go() -> T:
        async with session:
            await session.initialize()
            _logger.info("Connected: %r", session)
            return await fn()

    return asyncio.get_event_loop().run_until_complete(go())


def print_progress(done: int, total: int) -> None:
    if sys.stderr.isatty():
        percent = done * 100 // total if total > 0 else 100
        end = "\n" if done >= total else ""
        print(f"\r{done}/{total} bytes ({percent}%)", end=end, file=sys.stderr, flush=True)
