# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

"""
WebREPL transport
+++++++++++++++++

MicroPython boards with a network interface (ESP8266, ESP32, Pico W, etc.) can expose their REPL
over a WebSocket, known as WebREPL. It is enabled on the board with ``import webrepl; webrepl.start()``
and is protected with a password stored in ``webrepl_cfg.py``; see :mod:`rawrepl.webrepl` for provisioning helpers.

The transport performs the login exchange on construction and then behaves like a plain byte stream:
the terminal data is exchanged in WebSocket text frames. The WebREPL file transfer protocol
(binary frames) is not used; files are accessed through the raw REPL instead, see :mod:`rawrepl.fs`.

The WebSocket client is provided by `websocket-client <https://pypi.org/project/websocket-client>`_.
"""

from ._webrepl import WebREPLTransport as WebREPLTransport
