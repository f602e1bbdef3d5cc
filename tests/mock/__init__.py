# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

"""
A simulated MicroPython board for testing the protocol stack without hardware.
"""

from ._transport import MockTransport as MockTransport
from ._transport import Hang as Hang
from ._fs import MockFileSystem as MockFileSystem
from ._fs import MockNetwork as MockNetwork
