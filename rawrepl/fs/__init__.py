# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

"""
Remote file system
++++++++++++++++++

Projects the file system of the board onto host-side operations. Every operation is translated into a short
Python snippet executed through the raw REPL, so it works identically over every transport.

Paths are interpreted by the board; on most ports the root of the internal flash is ``/``.
Errors reported by the board are mapped onto the standard host exceptions where there is an obvious counterpart
(:class:`FileNotFoundError`, :class:`FileExistsError`, :class:`IsADirectoryError`, :class:`NotADirectoryError`);
other remote failures are reported as :class:`rawrepl.session.RemoteExecutionError`.
"""

from ._fs import RemoteFileSystem as RemoteFileSystem
from ._fs import FileType as FileType
from ._fs import FileStat as FileStat
from ._fs import DEFAULT_CHUNK_SIZE as DEFAULT_CHUNK_SIZE
