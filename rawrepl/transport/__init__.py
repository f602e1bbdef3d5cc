# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

"""
Abstract transport model
++++++++++++++++++++++++

A transport is a half-duplex byte-stream channel to the board: a serial line, a TCP tunnel, or a WebREPL socket.
Transports know nothing about the raw REPL protocol; they only move bytes.
The protocol logic lives in :mod:`rawrepl.session`.

The concrete transports are not auto-imported because they pull in third-party dependencies:

- :class:`rawrepl.transport.serial.SerialTransport` -- PySerial-based;
  supports regular serial ports, ``socket://`` TCP tunnels, ``rfc2217://`` and the ``loop://`` self-test port.
- :class:`rawrepl.transport.webrepl.WebREPLTransport` -- MicroPython WebREPL over a WebSocket.

The reader side of every concrete transport runs in a dedicated daemon thread that feeds a
:class:`rawrepl.transport.commons.ReceiveBuffer` on the event loop, so that a coroutine awaiting
a byte never blocks the loop.


Exceptions
++++++++++

All library runtime errors derive from :class:`TransportError`.
"""

from ._transport import Transport as Transport
from ._transport import Timeout as Timeout
from ._transport import DEFAULT as DEFAULT
from ._transport import DEFAULT_READ_TIMEOUT as DEFAULT_READ_TIMEOUT

from ._error import TransportError as TransportError
from ._error import InvalidTransportConfigurationError as InvalidTransportConfigurationError
from ._error import ReadTimeoutError as ReadTimeoutError
from ._error import ResourceClosedError as ResourceClosedError

from . import commons as commons
