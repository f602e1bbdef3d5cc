# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

from __future__ import annotations
import ast
import enum
import typing
import logging
import posixpath
import dataclasses
import rawrepl.util
from rawrepl.session import Session, RemoteExecutionError


DEFAULT_CHUNK_SIZE = 128
"""
The number of bytes transferred per submission. Larger chunks are faster but may exhaust the heap of small boards.
"""

_S_IFREG = 0x8000

# The errno values of MicroPython do not depend on the host platform.
_ERRNO_TO_EXCEPTION: typing.Dict[int, typing.Type[OSError]] = {
    2: FileNotFoundError,
    17: FileExistsError,
    20: NotADirectoryError,
    21: IsADirectoryError,
}

ProgressCallback = typing.Callable[[int, int], None]


_logger = logging.getLogger(__name__)


class FileType(enum.Enum):
    FILE = enum.auto()
    DIRECTORY = enum.auto()


@dataclasses.dataclass(frozen=True)
class FileStat:
    type: FileType
    ctime: int
    mtime: int
    size: int


class RemoteFileSystem:
    """
    File operations on the board, built on top of a :class:`rawrepl.session.Session`.
    The session shall be initialized before use.
    """

    def __init__(self, session: Session, *, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if int(chunk_size) < 1:
            raise ValueError(f"Invalid chunk size: {chunk_size}")
        self._session = session
        self._chunk_size = int(chunk_size)

    @property
    def session(self) -> Session:
        return self._session

    async def stat(self, path: str) -> FileStat:
        """
        :raises: :class:`FileNotFoundError` if the path does not exist.
        """
        output = await self._execute(
            f"import os\nf=os.stat({path!r})\n"
            f"print('{{}}/{{}}/{{}}/{{}}'.format('f' if f[0]&{_S_IFREG:#x} else 'd',f[9],f[8],f[6]))",
            path,
        )
        kind, ctime, mtime, size = output.strip().split("/")
        return FileStat(
            type=FileType.FILE if kind == "f" else FileType.DIRECTORY,
            ctime=int(ctime),
            mtime=int(mtime),
            size=int(size),
        )

    async def exists(self, path: str) -> bool:
        try:
            await self.stat(path)
        except FileNotFoundError:
            return False
        return True

    async def listdir(self, path: str) -> typing.List[typing.Tuple[str, FileType]]:
        """
        Returns the names of the entries of the directory along with their types.

        :raises: :class:`NotADirectoryError` if the path is a file. :class:`FileNotFoundError` if it does not exist.
        """
        if (await self.stat(path)).type != FileType.DIRECTORY:
            raise NotADirectoryError(20, "Not a directory", path)
        output = await self._execute(
            f"import os\nfor f in os.ilistdir({path!r}):\n"
            f" print('{{}}/{{}}'.format(f[0],'f' if f[1]&{_S_IFREG:#x} else 'd'))",
            path,
        )
        out: typing.List[typing.Tuple[str, FileType]] = []
        for line in output.splitlines():
            if line.strip():
                name, kind = line.rstrip("\r").rsplit("/", 1)
                out.append((name, FileType.FILE if kind == "f" else FileType.DIRECTORY))
        return out

    async def mkdir(self, path: str) -> None:
        """
        :raises: :class:`FileExistsError` if the path exists.
        """
        if await self.exists(path):
            raise FileExistsError(17, "File exists", path)
        await self._execute(f"import os\nos.mkdir({path!r})", path)

    async def read_file(self, path: str) -> bytes:
        """
        :raises: :class:`IsADirectoryError` if the path is a directory. :class:`FileNotFoundError` if it does not exist.
        """
        if (await self.stat(path)).type == FileType.DIRECTORY:
            raise IsADirectoryError(21, "Is a directory", path)

        async def download() -> bytes:
            (await self._session.dangerously_execute(f"f=open({path!r},'rb')\nr=f.read")).raise_for_error()
            chunks: typing.List[bytes] = []
            try:
                while True:
                    result = await self._session.dangerously_execute(f"print(repr(r({self._chunk_size})))")
                    result.raise_for_error()
                    chunk = _parse_bytes(result.output)
                    if not chunk:
                        break
                    chunks.append(chunk)
            except RemoteExecutionError:
                await self._session.dangerously_execute("f.close()")
                raise
            (await self._session.dangerously_execute("f.close()")).raise_for_error()
            return b"".join(chunks)

        try:
            return await self._session.transaction(download)
        except RemoteExecutionError as ex:
            _raise_translated(ex, path)
            raise

    async def write_file(
        self,
        path: str,
        content: bytes,
        *,
        create: bool = True,
        overwrite: bool = True,
        append: bool = False,
        on_progress: typing.Optional[ProgressCallback] = None,
    ) -> None:
        """
        Writes the content into the file in chunks within one transaction, so that other operations cannot
        interleave with the transfer.

        :param create: Whether the file may be created if it does not exist.
        :param overwrite: Whether an existing file may be overwritten when ``create`` is set.
        :param append: Append to the file instead of truncating it.
        :param on_progress: Invoked after every chunk with the number of bytes written so far and the total.

        :raises: :class:`IsADirectoryError` if the path is a directory.
            :class:`FileNotFoundError` if the file does not exist and ``create`` is not set.
            :class:`FileExistsError` if the file exists, ``create`` is set, and ``overwrite`` is not.
        """
        content = bytes(content)
        try:
            st: typing.Optional[FileStat] = await self.stat(path)
        except FileNotFoundError:
            st = None
        if st is not None and st.type == FileType.DIRECTORY:
            raise IsADirectoryError(21, "Is a directory", path)
        if st is None and not create:
            raise FileNotFoundError(2, "No such file or directory", path)
        if st is not None and create and not overwrite:
            raise FileExistsError(17, "File exists", path)

        mode = "ab" if append else "wb"
        total = len(content)

        async def upload() -> None:
            (await self._session.dangerously_execute(f"f=open({path!r},{mode!r})\nw=f.write")).raise_for_error()
            try:
                for offset in range(0, total, self._chunk_size):
                    chunk = content[offset : offset + self._chunk_size]
                    (await self._session.dangerously_execute(f"w({chunk!r})")).raise_for_error()
                    if on_progress is not None:
                        on_progress(offset + len(chunk), total)
            except RemoteExecutionError:
                await self._session.dangerously_execute("f.close()")
                raise
            (await self._session.dangerously_execute("f.close()")).raise_for_error()

        _logger.info("%s: Writing %d bytes into %r (mode %r)", self, total, path, mode)
        try:
            await self._session.transaction(upload)
        except RemoteExecutionError as ex:
            _raise_translated(ex, path)
            raise

    async def delete(self, path: str, *, recursive: bool = False) -> None:
        """
        :raises: :class:`IsADirectoryError` if the path is a directory and ``recursive`` is not set.
        """
        if (await self.stat(path)).type != FileType.DIRECTORY:
            await self._execute(f"import os\nos.remove({path!r})", path)
            return
        if not recursive:
            raise IsADirectoryError(21, "Is a directory", path)
        for name, _ in await self.listdir(path):
            await self.delete(posixpath.join(path, name), recursive=True)
        await self._execute(f"import os\nos.rmdir({path!r})", path)

    async def rename(self, old_path: str, new_path: str, *, overwrite: bool = False) -> None:
        """
        :raises: :class:`FileExistsError` if the destination exists and ``overwrite`` is not set.
        """
        if not overwrite and await self.exists(new_path):
            raise FileExistsError(17, "File exists", new_path)
        await self._execute(f"import os\nos.rename({old_path!r},{new_path!r})", old_path)

    async def _execute(self, code: str, path: str) -> str:
        result = await self._session.execute(code)
        try:
            result.raise_for_error()
        except RemoteExecutionError as ex:
            _raise_translated(ex, path)
            raise
        return result.output

    def __repr__(self) -> str:
        return rawrepl.util.repr_attributes(self, self._session, chunk_size=self._chunk_size)


def _parse_bytes(output: str) -> bytes:
    """
    >>> _parse_bytes("b'raw\\\\x00REPL'\\r\\n")
    b'raw\\x00REPL'
    >>> _parse_bytes("b''\\r\\n")
    b''
    """
    value = ast.literal_eval(output.strip())
    if not isinstance(value, bytes):
        raise ValueError(f"Expected a bytes literal from the board, got {output!r}")
    return value


def _raise_translated(ex: RemoteExecutionError, path: str) -> None:
    """
    Raises the host counterpart of the remote OSError, if there is one; otherwise, does nothing.

    >>> _raise_translated(RemoteExecutionError("OSError: [Errno 2] ENOENT"), "/main.py")
    Traceback (most recent call last):
      ...
    FileNotFoundError: [Errno 2] OSError: [Errno 2] ENOENT: '/main.py'
    >>> _raise_translated(RemoteExecutionError("MemoryError: memory allocation failed"), "/main.py")
    """
    code = ex.errno
    if code is not None and code in _ERRNO_TO_EXCEPTION:
        raise _ERRNO_TO_EXCEPTION[code](code, str(ex), path) from ex
