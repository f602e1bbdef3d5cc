# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

"""
WebREPL provisioning
++++++++++++++++++++

Helpers for moving a board from the serial link to the network.
The usual flow is to connect over the serial port, run :func:`configure_webrepl` to make the board join the
wireless network and start the WebREPL server on every boot, store the resulting URL in the :class:`BoardRegistry`,
and then connect to the board by name using :class:`rawrepl.transport.webrepl.WebREPLTransport`.

The host is assumed to be connected to the same network already.
"""

from ._provisioning import get_webrepl_url as get_webrepl_url
from ._provisioning import configure_webrepl as configure_webrepl
from ._provisioning import WebREPLNotStartedError as WebREPLNotStartedError
from ._provisioning import WEBREPL_CONFIG_FILE as WEBREPL_CONFIG_FILE
from ._provisioning import BOOT_FILE as BOOT_FILE

from ._registry import BoardRecord as BoardRecord
from ._registry import BoardRegistry as BoardRegistry
from ._registry import DEFAULT_REGISTRY_PATH as DEFAULT_REGISTRY_PATH
