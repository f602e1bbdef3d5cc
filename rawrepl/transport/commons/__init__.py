# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

"""
This module contains implementation details shared by the concrete transports.
"""

from ._receive_buffer import ReceiveBuffer as ReceiveBuffer
