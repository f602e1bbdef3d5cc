# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

from __future__ import annotations
import io
import typing
import builtins
import contextlib
import dataclasses
import rawrepl.transport
from rawrepl.transport import Timeout, DEFAULT
from rawrepl.transport.commons import ReceiveBuffer
from ._fs import MockFileSystem


BOOT_GREETING = b"MicroPython v1.19.1 on 2022-06-18; ESP32 module with ESP32\r\nType \"help()\" for more information.\r\n>>> "
BANNER = b"raw REPL; CTRL-B to exit\r\n"

_INTERRUPTED_TAIL = (
    b"\x04Traceback (most recent call last):\r\n"
    b'  File "<stdin>", line 1, in <module>\r\n'
    b"KeyboardInterrupt: \r\n\x04>"
)


@dataclasses.dataclass(frozen=True)
class Hang:
    """
    A scripted response: the program prints the output and keeps running until interrupted.
    """

    output: str = ""


Response = typing.Union[typing.Tuple[str, str], Hang]


class MockTransport(rawrepl.transport.Transport):
    """
    Models the transport together with the board behind it. The board reacts to the data synchronously
    from within :meth:`write`, like a board with zero latency would.

    Unless the code is scripted in :attr:`scripts`, it is executed by the host interpreter in a persistent namespace
    where ``os`` refers to an in-memory file system and the errors are reported in the MicroPython format.
    """

    def __init__(
        self,
        *,
        greeting: bytes = BOOT_GREETING,
        read_timeout: float = 1.0,
        fs: typing.Optional[MockFileSystem] = None,
    ) -> None:
        self._rx = ReceiveBuffer()
        self._read_timeout = read_timeout
        self._closed = False
        self._raw = False
        self._running: typing.Optional[Hang] = None
        self._submission = bytearray()

        self.banner_enabled = True
        self.fs = fs if fs is not None else MockFileSystem()
        self.modules: typing.Dict[str, object] = {"os": self.fs}
        self.scripts: typing.Dict[str, Response] = {}
        self.executed: typing.List[str] = []
        self.ops: typing.List[typing.Tuple[str, bytes]] = []

        self.raise_on_write_once: typing.Optional[Exception] = None
        self.raise_on_read_once: typing.Optional[Exception] = None

        self._namespace = self._make_namespace()
        self._rx.push(greeting)

    @property
    def address(self) -> str:
        return "mock"

    @property
    def kind(self) -> str:
        return "mock"

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def raw_mode(self) -> bool:
        return self._raw

    @property
    def writes(self) -> typing.List[bytes]:
        return [data for op, data in self.ops if op == "w"]

    def available_bytes(self) -> int:
        return len(self._rx)

    async def read(self, size: int, timeout: Timeout = DEFAULT) -> bytes:
        if self._closed:
            raise rawrepl.transport.ResourceClosedError(f"{self} is closed")
        if self.raise_on_read_once:
            self.raise_on_read_once, ex = None, self.raise_on_read_once
            raise ex
        effective = timeout if isinstance(timeout, (int, float)) or timeout is None else self._read_timeout
        data = await self._rx.read(size, effective)
        self.ops.append(("r", data))
        return data

    async def write(self, data: bytes) -> None:
        if self._closed:
            raise rawrepl.transport.ResourceClosedError(f"{self} is closed")
        if self.raise_on_write_once:
            self.raise_on_write_once, ex = None, self.raise_on_write_once
            raise ex
        self.ops.append(("w", bytes(data)))
        for b in bytes(data):
            self._feed(b)

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._rx.fail(rawrepl.transport.ResourceClosedError(f"{self} is closed"))

    def _feed(self, b: int) -> None:
        if self._running is not None:
            if b == 0x03:
                self._running = None
                self._rx.push(_INTERRUPTED_TAIL)
            return
        if b == 0x01:
            self._raw = True
            self._submission.clear()
            if self.banner_enabled:
                self._rx.push(BANNER + b">")
        elif b == 0x02:
            self._raw = False
            self._rx.push(b"\r\n>>> ")
        elif b == 0x03:
            self._submission.clear()
            if not self._raw:
                self._rx.push(b"\r\n>>> ")
        elif self._raw and b == 0x04:
            code = self._submission.decode("utf8")
            self._submission.clear()
            self._execute(code)
        elif self._raw:
            self._submission.append(b)

    def _execute(self, code: str) -> None:
        self.executed.append(code)
        response = self.scripts.get(code)
        if response is None:
            response = self._interpret(code)
        if isinstance(response, Hang):
            self._running = response
            self._rx.push(b"OK" + response.output.encode("utf8"))
        else:
            output, error = response
            self._rx.push(b"OK" + output.encode("utf8") + b"\x04" + error.encode("utf8") + b"\x04>")

    def _interpret(self, code: str) -> typing.Tuple[str, str]:
        out = io.StringIO()
        try:
            with contextlib.redirect_stdout(out):
                exec(compile(code, "<stdin>", "exec"), self._namespace)  # pylint: disable=exec-used
        except Exception as ex:  # pylint: disable=broad-except
            name = "OSError" if isinstance(ex, OSError) else type(ex).__name__
            error = f'Traceback (most recent call last):\n  File "<stdin>", line 1, in <module>\n{name}: {ex}\n'
            return _crlf(out.getvalue()), _crlf(error)
        return _crlf(out.getvalue()), ""

    def _make_namespace(self) -> typing.Dict[str, typing.Any]:
        def import_hook(name: str, *args: typing.Any, **kwargs: typing.Any) -> typing.Any:
            try:
                return self.modules[name]
            except LookupError:
                pass
            raise ImportError(f"no module named '{name}'")

        env = dict(vars(builtins))
        env["__import__"] = import_hook
        env["open"] = self.fs.open
        return {"__builtins__": env}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(raw={self._raw}, closed={self._closed})"


def _crlf(text: str) -> str:
    return text.replace("\n", "\r\n")
