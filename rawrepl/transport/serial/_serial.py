# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

import typing
import asyncio
import logging
import threading
import concurrent.futures
import serial
import rawrepl.util
from rawrepl.transport import Transport, Timeout, DEFAULT, DEFAULT_READ_TIMEOUT
from rawrepl.transport import TransportError, InvalidTransportConfigurationError, ResourceClosedError
from rawrepl.transport.commons import ReceiveBuffer


_SERIAL_PORT_READ_TIMEOUT = 1.0


_logger = logging.getLogger(__name__)


class SerialTransport(Transport):
    """
    A transport over a serial port or anything PySerial can open via :func:`serial.serial_for_url`.
    Please read the module documentation for details.
    """

    def __init__(
        self,
        serial_port: typing.Union[str, serial.SerialBase],
        *,
        baudrate: typing.Optional[int] = None,
        read_timeout: typing.Optional[float] = DEFAULT_READ_TIMEOUT,
        loop: typing.Optional[asyncio.AbstractEventLoop] = None,
    ):
        """
        :param serial_port: The serial port instance to communicate over, or its name.
            In the latter case, the port will be constructed via :func:`serial.serial_for_url`
            (refer to the PySerial docs for the background).
            The new instance takes ownership of the port; when the instance is closed, its port will also be closed.
            Examples:

            - ``/dev/ttyUSB0`` -- a USB-UART bridge on GNU/Linux (most ESP32 development boards).
            - ``/dev/ttyACM0`` -- a native USB CDC ACM port on GNU/Linux (e.g., Raspberry Pi Pico).
            - ``COM9`` -- likewise, on Windows.
            - ``socket://192.168.1.20:2217`` -- a TCP/IP tunnel instead of a physical port.
            - ``spy:///dev/ttyUSB0?file=dump.txt`` -- open a regular port and dump all data exchange into a text file.

        :param baudrate: If not None, the specified baud rate will be configured on the serial port.
            Otherwise, the baudrate will be left unchanged.

        :param read_timeout: The per-read timeout applied when the reader does not specify one, in seconds.
            None means wait forever.

        :param loop: The event loop to use. Defaults to :func:`asyncio.get_event_loop`.
        """
        self._loop = loop if loop is not None else asyncio.get_event_loop()
        self._read_timeout = float(read_timeout) if read_timeout is not None else None

        # The is_open flag is unreliable because close() is non-atomic on most serial port classes,
        # which leads to spurious errors in the reader thread. A simple explicit flag is reliable.
        self._closed = False

        if not isinstance(serial_port, serial.SerialBase):
            try:
                serial_port = serial.serial_for_url(serial_port)
            except (serial.SerialException, ValueError) as ex:
                raise InvalidTransportConfigurationError(f"Could not open serial port {serial_port!r}: {ex}") from ex
        assert isinstance(serial_port, serial.SerialBase)
        if not serial_port.is_open:
            raise InvalidTransportConfigurationError("The serial port instance is not open")
        serial_port.timeout = _SERIAL_PORT_READ_TIMEOUT
        self._serial_port = serial_port
        if baudrate is not None:
            self._serial_port.baudrate = int(baudrate)

        self._rx = ReceiveBuffer()
        self._background_executor = concurrent.futures.ThreadPoolExecutor(max_workers=1)

        self._reader_thread = threading.Thread(target=self._reader_thread_func, daemon=True)
        self._reader_thread.start()

    @property
    def address(self) -> str:
        return str(self._serial_port.name)

    @property
    def kind(self) -> str:
        return "serial"

    @property
    def serial_port(self) -> serial.SerialBase:
        assert isinstance(self._serial_port, serial.SerialBase)
        return self._serial_port

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
            await self._loop.run_in_executor(self._background_executor, self._write_blocking, data)
        except (serial.SerialException, OSError) as ex:
            if self._closed:
                raise ResourceClosedError(f"{self} is closed, transmission aborted") from ex
            raise TransportError(f"{self}: Port write failed: {ex}") from ex
        _logger.debug("%s: Sent %r", self, data)

    def close(self) -> None:
        if self._closed:
            return  # Double-close is not an error.
        self._closed = True
        self._rx.fail(ResourceClosedError(f"{self} is closed"))
        if self._serial_port.is_open:
            self._serial_port.close()
        self._background_executor.shutdown(wait=False)

    def _write_blocking(self, data: bytes) -> None:
        self._serial_port.write(data)
        self._serial_port.flush()

    def _reader_thread_func(self) -> None:
        try:
            while not self._closed and self._serial_port.is_open:
                chunk = self._serial_port.read(max(1, self._serial_port.in_waiting))
                if chunk:
                    _logger.debug("%s: Received %r", self, chunk)
                    self._loop.call_soon_threadsafe(self._rx.push, chunk)

        except Exception as ex:  # pragma: no cover
            if self._closed or not self._serial_port.is_open:
                _logger.debug("%s: The serial port is closed, exception ignored: %r", self, ex)
            else:
                _logger.exception("%s: Reader thread has failed, the buffered data remains readable: %s", self, ex)
                self._loop.call_soon_threadsafe(self._rx.fail, TransportError(f"Serial port failure: {ex}"))
                self._serial_port.close()

        finally:
            _logger.debug("%s: Reader thread is exiting", self)

    def _ensure_not_closed(self) -> None:
        if self._closed:
            raise ResourceClosedError(f"{self} is closed")

    def __repr__(self) -> str:
        return rawrepl.util.repr_attributes_noexcept(
            self, repr(self._serial_port.name), baudrate=self._serial_port.baudrate
        )
