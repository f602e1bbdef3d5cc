# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

from ._main import main as main

from . import commands as commands
