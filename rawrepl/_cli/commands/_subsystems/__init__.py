# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

from ._base import SubsystemFactory as SubsystemFactory

from . import formatter as formatter
from . import registry as registry
from . import connection as connection
