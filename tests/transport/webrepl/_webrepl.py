# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

from __future__ import annotations
import queue
import typing
import asyncio
import pytest
import websocket
from rawrepl.transport import TransportError, InvalidTransportConfigurationError, ResourceClosedError
from rawrepl.transport.webrepl import WebREPLTransport

pytestmark = pytest.mark.asyncio


class FakeWebSocket:
    """
    Plays the WebREPL server of the board: asks for the password, then passes the REPL traffic through.
    """

    def __init__(self, password: str = "secret", prompt: bool = True) -> None:
        self._password = password
        self._frames: queue.Queue[typing.Tuple[int, bytes]] = queue.Queue()
        self._timeout: typing.Optional[float] = None
        self.sent: typing.List[typing.Tuple[typing.Any, int]] = []
        self.closed = False
        if prompt:
            self.feed(b"Password: ")

    def feed(self, data: bytes, opcode: int = websocket.ABNF.OPCODE_TEXT) -> None:
        self._frames.put((opcode, data))

    def settimeout(self, timeout: typing.Optional[float]) -> None:
        self._timeout = timeout

    def recv_data(self) -> typing.Tuple[int, bytes]:
        if self.closed:
            raise websocket.WebSocketConnectionClosedException("closed")
        try:
            return self._frames.get(timeout=self._timeout)
        except queue.Empty:
            raise websocket.WebSocketTimeoutException("timed out") from None

    def send(self, data: typing.Any, opcode: int = websocket.ABNF.OPCODE_TEXT) -> None:
        if self.closed:
            raise websocket.WebSocketConnectionClosedException("closed")
        self.sent.append((data, opcode))
        if data == self._password + "\r\n":
            self.feed(b"\r\nWebREPL connected\r\n>>> ")
        elif isinstance(data, str):
            self.feed(b"\r\nAccess denied\r\n")
            self.feed(b"", websocket.ABNF.OPCODE_CLOSE)

    def close(self) -> None:
        self.closed = True


async def _unittest_webrepl_transport() -> None:
    ws = FakeWebSocket()
    tr = WebREPLTransport("ws://192.168.1.23:8266", "secret", connection=ws, read_timeout=0.5)
    assert ws.sent == [("secret\r\n", websocket.ABNF.OPCODE_TEXT)]
    assert tr.address == "ws://192.168.1.23:8266"
    assert tr.kind == "webrepl"
    assert tr.available_bytes() == 0

    await tr.write(b"\r\x03\x03")
    assert ws.sent[-1] == (b"\r\x03\x03", websocket.ABNF.OPCODE_TEXT)

    ws.feed(b"raw REPL; ")
    ws.feed(b"CTRL-B to exit\r\n>", websocket.ABNF.OPCODE_BINARY)
    assert await tr.read(27, timeout=2.0) == b"raw REPL; CTRL-B to exit\r\n>"

    # The board closing the connection fails the pending and the subsequent reads.
    ws.feed(b"OK")
    ws.feed(b"", websocket.ABNF.OPCODE_CLOSE)
    assert await tr.read(2, timeout=2.0) == b"OK"
    with pytest.raises(TransportError):
        await tr.read(1, timeout=2.0)
    assert ws.closed

    tr.close()
    with pytest.raises(ResourceClosedError):
        await tr.write(b"\x01")


async def _unittest_webrepl_transport_close() -> None:
    ws = FakeWebSocket()
    tr = WebREPLTransport("ws://192.168.1.23:8266", "secret", connection=ws)
    task = asyncio.ensure_future(tr.read(1, timeout=None))
    await asyncio.sleep(0.1)
    tr.close()
    tr.close()
    assert ws.closed
    with pytest.raises(ResourceClosedError):
        await asyncio.wait_for(task, 1.0)


async def _unittest_webrepl_transport_login_failure() -> None:
    ws = FakeWebSocket()
    with pytest.raises(InvalidTransportConfigurationError, match="rejected"):
        _ = WebREPLTransport("ws://192.168.1.23:8266", "wrong", connection=ws)
    assert ws.closed

    ws = FakeWebSocket(prompt=False)
    with pytest.raises(InvalidTransportConfigurationError, match="timed out"):
        _ = WebREPLTransport("ws://192.168.1.23:8266", "secret", connection=ws, login_timeout=0.5)
    assert ws.closed


async def _unittest_webrepl_transport_unreachable() -> None:
    # Nothing is listening on the discard port of the loopback interface.
    with pytest.raises(InvalidTransportConfigurationError):
        _ = WebREPLTransport("ws://127.0.0.1:9", "secret", login_timeout=1.0)
