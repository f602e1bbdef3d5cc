# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

import typing
import pytest
from rawrepl.session import Session, RemoteExecutionError
from rawrepl.fs import RemoteFileSystem, FileType, FileStat
from tests.mock import MockTransport
from tests.mock._fs import TIMESTAMP

pytestmark = pytest.mark.asyncio


async def _make_fs(chunk_size: int = 16) -> typing.Tuple[RemoteFileSystem, MockTransport]:
    tr = MockTransport()
    ses = Session(tr, handshake_budget=50, prelude="import os")
    await ses.initialize()
    return RemoteFileSystem(ses, chunk_size=chunk_size), tr


async def _unittest_fs_read_write() -> None:
    fs, tr = await _make_fs()
    content = bytes(range(256)) * 2  # Control characters included, EOT among them.

    progress: typing.List[typing.Tuple[int, int]] = []
    await fs.write_file("/data.bin", content, on_progress=lambda done, total: progress.append((done, total)))
    assert tr.fs.files["/data.bin"] == content
    assert progress[0] == (16, 512)
    assert progress[-1] == (512, 512)
    assert len(progress) == 512 // 16

    assert await fs.read_file("/data.bin") == content
    assert await fs.stat("/data.bin") == FileStat(FileType.FILE, ctime=TIMESTAMP, mtime=TIMESTAMP + 1, size=512)

    await fs.write_file("/data.bin", b"tail", append=True)
    assert tr.fs.files["/data.bin"] == content + b"tail"
    await fs.write_file("/data.bin", b"new")
    assert await fs.read_file("/data.bin") == b"new"

    await fs.write_file("/empty.txt", b"")
    assert (await fs.stat("/empty.txt")).size == 0
    assert await fs.read_file("/empty.txt") == b""

    # The files are closed on the board after every transfer.
    assert tr.executed[-1] == "f.close()"
    assert not fs.session.busy
    assert "RemoteFileSystem" in repr(fs)


async def _unittest_fs_write_flags() -> None:
    fs, tr = await _make_fs()
    with pytest.raises(FileNotFoundError):
        await fs.write_file("/main.py", b"print(1)", create=False)
    assert "/main.py" not in tr.fs.files

    await fs.write_file("/main.py", b"print(1)")
    with pytest.raises(FileExistsError):
        await fs.write_file("/main.py", b"print(2)", overwrite=False)
    assert tr.fs.files["/main.py"] == b"print(1)"

    # Not creating means the existing file may be overwritten.
    await fs.write_file("/main.py", b"print(3)", create=False)
    assert tr.fs.files["/main.py"] == b"print(3)"

    with pytest.raises(IsADirectoryError):
        await fs.write_file("/", b"")
    with pytest.raises(FileNotFoundError):
        await fs.write_file("/no/such/dir.py", b"")


async def _unittest_fs_directories() -> None:
    fs, tr = await _make_fs()
    assert await fs.listdir("/") == []
    await fs.mkdir("/lib")
    await fs.mkdir("lib/umqtt")
    await fs.write_file("/lib/umqtt/simple.py", b"# MQTT")
    await fs.write_file("/boot.py", b"# boot")

    assert await fs.listdir("/") == [("lib", FileType.DIRECTORY), ("boot.py", FileType.FILE)]
    assert await fs.listdir("/lib") == [("umqtt", FileType.DIRECTORY)]
    assert (await fs.stat("/lib")).type == FileType.DIRECTORY
    assert await fs.exists("/lib/umqtt/simple.py")
    assert not await fs.exists("/lib/umqtt/robust.py")

    with pytest.raises(FileExistsError):
        await fs.mkdir("/lib")
    with pytest.raises(NotADirectoryError):
        await fs.listdir("/boot.py")
    with pytest.raises(FileNotFoundError):
        await fs.listdir("/nonexistent")
    with pytest.raises(IsADirectoryError):
        await fs.read_file("/lib")
    with pytest.raises(FileNotFoundError):
        await fs.read_file("/nonexistent")
    with pytest.raises(FileNotFoundError):
        await fs.stat("/nonexistent")


async def _unittest_fs_delete_rename() -> None:
    fs, tr = await _make_fs()
    await fs.mkdir("/lib")
    await fs.mkdir("/lib/drivers")
    await fs.write_file("/lib/drivers/ssd1306.py", b"# display")
    await fs.write_file("/lib/config.json", b"{}")
    await fs.write_file("/main.py", b"import config")

    await fs.rename("/main.py", "/app.py")
    assert await fs.read_file("/app.py") == b"import config"
    with pytest.raises(FileExistsError):
        await fs.rename("/app.py", "/lib/config.json")
    await fs.rename("/app.py", "/lib/config.json", overwrite=True)
    assert tr.fs.files["/lib/config.json"] == b"import config"
    with pytest.raises(FileNotFoundError):
        await fs.rename("/nonexistent", "/other")

    with pytest.raises(IsADirectoryError):
        await fs.delete("/lib")
    await fs.delete("/lib/config.json")
    assert not await fs.exists("/lib/config.json")
    await fs.delete("/lib", recursive=True)
    assert tr.fs.dirs == {"/"}
    assert tr.fs.files == {}
    with pytest.raises(FileNotFoundError):
        await fs.delete("/lib")


async def _unittest_fs_unmapped_error() -> None:
    fs, tr = await _make_fs()
    await fs.mkdir("/lib")
    # EPERM has no dedicated host exception, so the remote error is propagated as is.
    with pytest.raises(RemoteExecutionError) as ex_info:
        await fs.rename("/lib", "/lib2")
    assert ex_info.value.errno == 1
    assert ex_info.value.exception_name == "OSError"
    assert "/lib" in tr.fs.dirs


async def _unittest_fs_invalid_chunk_size() -> None:
    fs, _ = await _make_fs()
    with pytest.raises(ValueError):
        RemoteFileSystem(fs.session, chunk_size=0)
