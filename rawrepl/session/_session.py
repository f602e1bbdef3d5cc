# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

from __future__ import annotations
import ast
import enum
import typing
import asyncio
import logging
import dataclasses
import rawrepl.util
from rawrepl.transport import Transport, TransportError, ResourceClosedError
from ._error import HandshakeError, RemoteExecutionError
from ._lock import SingleFlightLock
from ._scanner import read_until, read_until_iter, DEFAULT_SCAN_PERIOD


T = typing.TypeVar("T")

INTERRUPT = b"\r\x03\x03"
"""
Terminates a partially entered line and aborts the running program, if any.
"""

ENTER_RAW_MODE = b"\x01"

RAW_MODE_BANNER = b"raw REPL; CTRL-B to exit\r\n"
"""
Printed by the board upon entering the raw REPL mode; it is followed by the prompt.
"""

PROMPT = b">"

ACKNOWLEDGMENT = b"OK"
"""
Printed by the board once the submission has been accepted and the execution has begun.
"""

END_OF_TRANSMISSION = b"\x04"
"""
Terminates the submission (triggering its execution); also terminates each of the output channels.
"""

DEFAULT_HANDSHAKE_BUDGET = 1000
"""
The number of scan iterations allotted to the raw mode banner per handshake attempt.
"""

_HANDSHAKE_RETRY_INTERVAL = 0.05


_logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    UNSYNCED = enum.auto()
    """The state of the board is unknown. This is the initial state and the state after a failure."""

    HANDSHAKE_SENT = enum.auto()
    """The interrupt and the raw mode request have been sent; awaiting the banner."""

    READY = enum.auto()
    """The board is in the raw REPL mode and is ready to accept submissions."""

    CLOSED = enum.auto()
    """The session and its transport are closed. This state is terminal."""


@dataclasses.dataclass(frozen=True)
class ExecutionResult:
    """
    The text printed by the board while executing one submission.
    The output and the error are mutually exclusive in normal operation: if the error is not empty,
    the code has raised an exception.

    >>> ExecutionResult('4\\r\\n', '').failed
    False
    >>> ExecutionResult('', 'ZeroDivisionError: division by zero\\r\\n').raise_for_error()
    Traceback (most recent call last):
      ...
    rawrepl.session._error.RemoteExecutionError: ZeroDivisionError: division by zero
    """

    output: str
    error: str

    @property
    def failed(self) -> bool:
        return bool(self.error)

    def raise_for_error(self) -> None:
        """
        :raises: :class:`RemoteExecutionError` if the error text is not empty.
        """
        if self.error:
            raise RemoteExecutionError(self.error)


class Session:
    """
    The raw REPL protocol driver. It owns a transport exclusively and serializes all operations on it.

    Before the code can be executed, the board has to be brought into the raw REPL mode using :meth:`initialize`.
    Any failure of an operation is treated as a loss of protocol synchronization: the session re-runs the
    handshake and then re-raises the original exception, so that the failed request is reported to its caller
    while the next request starts clean. The failed request itself is not retried.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        handshake_budget: int = DEFAULT_HANDSHAKE_BUDGET,
        ack_budget: typing.Optional[int] = None,
        max_handshake_attempts: typing.Optional[int] = None,
        prelude: typing.Optional[str] = None,
        scan_period: float = DEFAULT_SCAN_PERIOD,
    ):
        """
        :param transport: The transport to drive. The session takes ownership of it;
            when the session is closed, the transport is closed as well.

        :param handshake_budget: The number of scan iterations allotted to the raw mode banner per handshake attempt.

        :param ack_budget: The number of scan iterations allotted to the prompt and to the acknowledgment
            of each submission. None means that only the per-read timeout of the transport applies.

        :param max_handshake_attempts: The number of handshake attempts after which :class:`HandshakeError` is raised.
            None (default) means that the handshake is retried until the board responds.

        :param prelude: The code to execute after every successful handshake, like ``import os``.
            An exception raised by it on the board is logged but does not fail the handshake;
            a transport failure while it runs fails the handshake attempt.

        :param scan_period: How long one budgeted scan iteration waits for its byte, in seconds.
        """
        if not isinstance(transport, Transport):
            raise TypeError(f"Expected a transport, got {type(transport).__name__}")
        if int(handshake_budget) < 1:
            raise ValueError(f"Invalid handshake budget: {handshake_budget}")
        if max_handshake_attempts is not None and int(max_handshake_attempts) < 1:
            raise ValueError(f"Invalid handshake attempt limit: {max_handshake_attempts}")

        self._transport = transport
        self._handshake_budget = int(handshake_budget)
        self._ack_budget = int(ack_budget) if ack_budget is not None else None
        self._max_handshake_attempts = int(max_handshake_attempts) if max_handshake_attempts is not None else None
        self._prelude = prelude
        self._scan_period = float(scan_period)

        self._lock = SingleFlightLock()
        self._state = SessionState.UNSYNCED

    @property
    def address(self) -> str:
        return self._transport.address

    @property
    def kind(self) -> str:
        return self._transport.kind

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def busy(self) -> bool:
        """
        True while an operation holds the single-flight lock.
        """
        return self._lock.busy

    async def initialize(self) -> None:
        """
        Forces the board into the raw REPL mode, whatever its current state.
        The interrupt and the raw mode request are repeated until the board responds with the raw mode banner
        or until the configured number of attempts is exhausted.

        :raises: :class:`HandshakeError` if the attempt limit is configured and has been exhausted.
            :class:`rawrepl.transport.ResourceClosedError` if the transport has been closed.
        """
        self._ensure_not_closed()
        await self._lock.run(self._handshake)

    async def execute(self, code: str) -> ExecutionResult:
        """
        Submits the code to the board and waits for the execution to complete.
        The error text in the result is not empty if the code has raised an exception on the board;
        this is not considered a failure of the session.

        Empty code yields an empty result without any communication with the board.
        The code shall not contain the end-of-transmission character (0x04).
        """
        self._ensure_not_closed()
        _check_code(code)
        if not code:
            return ExecutionResult("", "")
        return await self.transaction(lambda: self._execute_unlocked(code))

    async def execute_interactive(self, code: str) -> typing.AsyncIterator[bytes]:
        """
        Like :meth:`execute`, but the output is streamed as it arrives.

        The first item is always empty; it is yielded once the session is ready to submit the code,
        before any communication with the board takes place.
        The following items are the bytes of the standard output, one by one, followed by the bytes of the
        standard error, in the order of arrival. Empty code yields nothing.

        The running program can be interrupted by writing :data:`INTERRUPT` with :meth:`dangerously_write`
        from another task. Closing the iterator before it is exhausted, or cancelling the task that consumes it,
        abandons the execution: the session is resynchronized before the closure completes.
        """
        self._ensure_not_closed()
        _check_code(code)
        if not code:
            return
        async with self._lock:
            yield b""
            try:
                await self._submit(code)
                for _ in range(2):
                    channel = read_until_iter(self._transport, END_OF_TRANSMISSION)
                    try:
                        async for item in channel:
                            yield item
                    finally:
                        await channel.aclose()
            except BaseException as ex:  # GeneratorExit and CancelledError abandon the execution as well.
                await self._recover(ex)
                raise

    async def evaluate(self, expression: str) -> typing.Any:
        """
        Evaluates a Python expression on the board and returns its value.
        The value is transferred via its :func:`repr`, so it shall be a literal:
        a number, a string, bytes, a tuple, a list, a dict, a set, a boolean, or None.

        :raises: :class:`RemoteExecutionError` if the evaluation has raised an exception on the board.
        """
        result = await self.execute(f"print(repr({expression}))")
        result.raise_for_error()
        return ast.literal_eval(result.output.strip())

    async def transaction(self, fn: typing.Callable[[], typing.Awaitable[T]]) -> T:
        """
        Runs ``fn`` under the single-flight lock applying the failure recovery policy:
        if ``fn`` fails, the session is resynchronized before the exception is propagated.
        Within ``fn``, use :meth:`dangerously_execute` instead of :meth:`execute`, because the lock is not reentrant.

        :class:`RemoteExecutionError` raised by ``fn`` is propagated without recovery,
        because an exception on the board does not affect the protocol synchronization.
        Cancellation of the calling task (e.g., by :func:`asyncio.wait_for`) is a failure like any other.

        The lock is held until the recovery is finished, so that the operations queued behind the failed one
        never observe the desynchronized stream.
        """
        self._ensure_not_closed()
        async with self._lock:
            try:
                return await fn()
            except RemoteExecutionError:
                raise
            except BaseException as ex:
                await self._recover(ex)
                raise

    async def with_lock(self, fn: typing.Callable[[], typing.Awaitable[T]]) -> T:
        """
        Runs ``fn`` under the single-flight lock and returns its result. The lock is released even if ``fn`` fails.
        No recovery is performed; see :meth:`transaction`.
        """
        self._ensure_not_closed()
        return await self._lock.run(fn)

    async def dangerously_execute(self, code: str) -> ExecutionResult:
        """
        Same as :meth:`execute` but without acquiring the lock and without recovery.
        Only valid inside :meth:`transaction` or :meth:`with_lock`.
        """
        self._ensure_not_closed()
        _check_code(code)
        if not code:
            return ExecutionResult("", "")
        return await self._execute_unlocked(code)

    async def dangerously_write(self, data: bytes) -> None:
        """
        Writes directly into the transport without acquiring the lock and without expecting a response.
        This is intended for delivering the interrupt sequence while a streaming execution is in progress.
        """
        self._ensure_not_closed()
        await self._transport.write(data)

    def close(self) -> None:
        """
        Closes the transport regardless of the lock state. Subsequent operations will raise
        :class:`rawrepl.transport.ResourceClosedError`. Double-close is not an error.
        """
        if self._state == SessionState.CLOSED:
            return
        self._state = SessionState.CLOSED
        _logger.info("%s: Closing", self)
        self._transport.close()

    async def __aenter__(self) -> Session:
        return self

    async def __aexit__(self, *_: typing.Any) -> None:
        self.close()

    async def _handshake(self) -> None:
        attempt = 0
        while True:
            attempt += 1
            if self._max_handshake_attempts is not None and attempt > self._max_handshake_attempts:
                self._mark_unsynced()
                raise HandshakeError(
                    f"{self}: The board did not enter the raw REPL mode in {self._max_handshake_attempts} attempts"
                )
            try:
                await self._transport.write(INTERRUPT)
                stale = self._transport.available_bytes()
                if stale > 0:
                    dropped = await self._transport.read(stale)
                    _logger.debug("%s: Dropped %d stale bytes: %r", self, stale, dropped)
                await self._transport.write(ENTER_RAW_MODE)
                self._state = SessionState.HANDSHAKE_SENT
                await read_until(self._transport, RAW_MODE_BANNER, self._handshake_budget, period=self._scan_period)
                self._state = SessionState.READY
                # The prelude is a part of the attempt; a transport failure during it restarts the handshake.
                if self._prelude:
                    result = await self._execute_unlocked(self._prelude)
                    if result.failed:
                        _logger.warning("%s: Prelude %r has failed: %s", self, self._prelude, result.error.strip())
            except ResourceClosedError:
                self._mark_unsynced()
                raise
            except TransportError as ex:
                self._mark_unsynced()
                _logger.warning("%s: Handshake attempt %d failed, starting over: %s", self, attempt, ex)
                await asyncio.sleep(_HANDSHAKE_RETRY_INTERVAL)
            except BaseException:
                self._mark_unsynced()
                raise
            else:
                break
        _logger.info("%s: Raw REPL mode entered in %d attempt(s)", self, attempt)

    async def _submit(self, code: str) -> None:
        await read_until(self._transport, PROMPT, self._ack_budget, period=self._scan_period)
        await self._transport.write(code.encode("utf8") + END_OF_TRANSMISSION)
        await read_until(self._transport, ACKNOWLEDGMENT, self._ack_budget, period=self._scan_period)

    async def _execute_unlocked(self, code: str) -> ExecutionResult:
        _logger.debug("%s: Executing %r", self, code)
        await self._submit(code)
        output = await read_until(self._transport, END_OF_TRANSMISSION)
        error = await read_until(self._transport, END_OF_TRANSMISSION)
        result = ExecutionResult(output.decode("utf8", "replace"), error.decode("utf8", "replace"))
        _logger.debug("%s: %r", self, result)
        return result

    async def _recover(self, cause: BaseException) -> None:
        """
        Shall be invoked by the lock holder. A repeated cancellation abandons the recovery;
        the session is then left unsynchronized and the cancellation is propagated.
        """
        if self._state == SessionState.CLOSED:
            return
        _logger.warning("%s: Resynchronizing after failure: %r", self, cause)
        self._state = SessionState.UNSYNCED
        try:
            await self._handshake()
        except Exception as ex:
            _logger.exception("%s: Could not resynchronize: %s", self, ex)

    def _mark_unsynced(self) -> None:
        if self._state != SessionState.CLOSED:
            self._state = SessionState.UNSYNCED

    def _ensure_not_closed(self) -> None:
        if self._state == SessionState.CLOSED:
            raise ResourceClosedError(f"{self} is closed")

    def __repr__(self) -> str:
        return rawrepl.util.repr_attributes_noexcept(
            self, repr(self._transport.address), kind=repr(self._transport.kind), state=self._state.name
        )


def _check_code(code: str) -> None:
    if not isinstance(code, str):
        raise TypeError(f"Expected the code as str, got {type(code).__name__}")
    if END_OF_TRANSMISSION.decode() in code:
        raise ValueError("The code shall not contain the end-of-transmission character")
