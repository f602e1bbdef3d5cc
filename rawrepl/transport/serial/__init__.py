# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

"""
Serial transport
++++++++++++++++

The serial transport is designed for byte-level communication channels, such as:

- UART, RS-232 (typically via a USB-UART bridge on the board);
- USB CDC ACM (native USB boards);
- TCP/IP tunnels.

The media abstraction is handled directly by the `PySerial <https://pypi.org/project/pyserial>`_
library and the underlying operating system.

Usage
+++++

..  doctest::
    :hide:

    >>> import asyncio

>>> from rawrepl.transport.serial import SerialTransport
>>> async def demo() -> bytes:
...     tr = SerialTransport('loop://', baudrate=115200)   # The loopback port echoes everything back.
...     try:
...         await tr.write(b'\x03\x03')
...         return await tr.read(2, timeout=1.0)
...     finally:
...         tr.close()
>>> asyncio.run(demo())
b'\x03\x03'


TCP/IP tunneling
++++++++++++++++

PySerial supports tunneling of raw serial data over TCP connections: use ``socket://host:port`` as the port name.
This is convenient for boards hosted behind a serial-to-network bridge or for the MicroPython Unix port
exposed via ``ncat``.
"""

from ._serial import SerialTransport as SerialTransport
