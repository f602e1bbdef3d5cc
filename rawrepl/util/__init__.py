# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

"""
The util package contains various entities that are commonly useful across the library and its tools.
"""

from ._introspect import import_submodules as import_submodules
from ._introspect import iter_descendants as iter_descendants

from ._repr import repr_attributes as repr_attributes
from ._repr import repr_attributes_noexcept as repr_attributes_noexcept
