# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

from __future__ import annotations
import time
import typing
import asyncio
import logging
import threading
import concurrent.futures
import websocket
from rawrepl.transport import Transport, Timeout, DEFAULT, DEFAULT_READ_TIMEOUT
from rawrepl.transport import TransportError, InvalidTransportConfigurationError, ResourceClosedError
from rawrepl.transport.commons import ReceiveBuffer


LOGIN_PROMPT = "Password: "
LOGIN_SUCCESS = "\r\nWebREPL connected\r\n>>> "
LOGIN_DENIED = "Access denied"

_WEBSOCKET_POLL_TIMEOUT = 1.0


_logger = logging.getLogger(__name__)


class WebREPLTransport(Transport):
    """
    A transport over the MicroPython WebREPL protocol. Please read the module documentation for details.
    """

    def __init__(
        self,
        url: str,
        password: str,
        *,
        login_timeout: float = 10.0,
        read_timeout: typing.Optional[float] = DEFAULT_READ_TIMEOUT,
        connection: typing.Optional[websocket.WebSocket] = None,
        loop: typing.Optional[asyncio.AbstractEventLoop] = None,
    ):
        """
        :param url: The WebSocket URL of the board, like ``ws://192.168.4.1:8266``.
            The URL can be obtained from a board connected over serial using :func:`rawrepl.webrepl.get_webrepl_url`.

        :param password: The WebREPL password configured on the board (4 to 9 characters).

        :param login_timeout: How long to wait for the connection and the login exchange to complete, in seconds.

        :param read_timeout: The per-read timeout applied when the reader does not specify one, in seconds.
            None means wait forever.

        :param connection: An already connected WebSocket to use instead of connecting to ``url``.
            The login exchange is performed on it as usual.
            The new instance takes ownership of the connection.

        :param loop: The event loop to use. Defaults to :func:`asyncio.get_event_loop`.

        :raises: :class:`rawrepl.transport.InvalidTransportConfigurationError` if the board is unreachable
            or the password is rejected.
        """
        self._loop = loop if loop is not None else asyncio.get_event_loop()
        self._url = str(url)
        self._read_timeout = float(read_timeout) if read_timeout is not None else None
        self._closed = False

        if connection is None:
            try:
                connection = websocket.create_connection(self._url, timeout=login_timeout)
            except (websocket.WebSocketException, OSError) as ex:
                raise InvalidTransportConfigurationError(f"Could not connect to {self._url}: {ex}") from ex
        self._ws = connection

        try:
            self._ws.settimeout(_WEBSOCKET_POLL_TIMEOUT)
            _login(self._ws, password, login_timeout)
        except Exception:
            self._ws.close()
            raise
        _logger.info("%s: Logged in", self)

        self._rx = ReceiveBuffer()
        self._background_executor = concurrent.futures.ThreadPoolExecutor(max_workers=1)

        self._reader_thread = threading.Thread(target=self._reader_thread_func, daemon=True)
        self._reader_thread.start()

    @property
    def address(self) -> str:
        return self._url

    @property
    def kind(self) -> str:
        return "webrepl"

    def available_bytes(self) -> int:
        return len(self._rx)

    async def read(self, size: int, timeout: Timeout = DEFAULT) -> bytes:
        self._ensure_not_closed()
        if isinstance(timeout, (int, float)) or timeout is None:
            return await self._rx.read(size, timeout)
        return await self._rx.read(size, self._read_timeout)

    async def write(self, data: bytes) -> None:
        self._ensure_not_closed()
        data = bytes(data)
        try:
            await self._loop.run_in_executor(self._background_executor, self._ws.send, data, websocket.ABNF.OPCODE_TEXT)
        except (websocket.WebSocketException, OSError) as ex:
            if self._closed:
                raise ResourceClosedError(f"{self} is closed, transmission aborted") from ex
            raise TransportError(f"{self}: WebSocket send failed: {ex}") from ex
        _logger.debug("%s: Sent %r", self, data)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._rx.fail(ResourceClosedError(f"{self} is closed"))
        try:
            self._ws.close()
        except (websocket.WebSocketException, OSError) as ex:
            _logger.debug("%s: WebSocket close error ignored: %r", self, ex)
        self._background_executor.shutdown(wait=False)

    def _reader_thread_func(self) -> None:
        try:
            while not self._closed:
                try:
                    opcode, data = self._ws.recv_data()
                except websocket.WebSocketTimeoutException:
                    continue
                if opcode == websocket.ABNF.OPCODE_CLOSE:
                    raise TransportError("The WebREPL connection has been closed by the board")
                if opcode in (websocket.ABNF.OPCODE_TEXT, websocket.ABNF.OPCODE_BINARY) and data:
                    chunk = bytes(data)
                    _logger.debug("%s: Received %r", self, chunk)
                    self._loop.call_soon_threadsafe(self._rx.push, chunk)

        except Exception as ex:
            if self._closed:
                _logger.debug("%s: The connection is closed, exception ignored: %r", self, ex)
            else:
                _logger.exception("%s: Reader thread has failed, the buffered data remains readable: %s", self, ex)
                error = ex if isinstance(ex, TransportError) else TransportError(f"WebREPL failure: {ex}")
                self._loop.call_soon_threadsafe(self._rx.fail, error)
                self._ws.close()

        finally:
            _logger.debug("%s: Reader thread is exiting", self)

    def _ensure_not_closed(self) -> None:
        if self._closed:
            raise ResourceClosedError(f"{self} is closed")


def _login(ws: websocket.WebSocket, password: str, timeout: float) -> None:
    """
    The board sends the password prompt immediately after the WebSocket handshake.
    On success it prints the banner followed by the regular REPL prompt; otherwise, it closes the connection.
    """
    deadline = time.monotonic() + timeout

    def receive_until(marker: str) -> None:
        text = ""
        while not text.endswith(marker):
            if time.monotonic() > deadline:
                raise InvalidTransportConfigurationError(f"WebREPL login timed out waiting for {marker!r}: {text!r}")
            try:
                opcode, data = ws.recv_data()
            except websocket.WebSocketTimeoutException:
                continue
            except (websocket.WebSocketException, OSError) as ex:
                raise InvalidTransportConfigurationError(f"WebREPL login failed: {ex}") from ex
            if opcode == websocket.ABNF.OPCODE_TEXT:
                text += bytes(data).decode("utf8", "replace")
            if LOGIN_DENIED in text:
                raise InvalidTransportConfigurationError("WebREPL password rejected by the board")
            if opcode == websocket.ABNF.OPCODE_CLOSE:
                raise InvalidTransportConfigurationError(f"The board closed the connection during login: {text!r}")

    receive_until(LOGIN_PROMPT)
    ws.send(password + "\r\n")
    receive_until(LOGIN_SUCCESS)
