# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

from __future__ import annotations
import re
import asyncio
import logging
from rawrepl.session import Session
from rawrepl.fs import RemoteFileSystem


WEBREPL_CONFIG_FILE = "webrepl_cfg.py"
BOOT_FILE = "boot.py"

_PASSWORD_LENGTH_RANGE = range(4, 10)

_URL_PATTERN = re.compile(r"(?:ws|http)://(\d+\.\d+\.\d+\.\d+):(\d+)")

_CONNECT_POLL_INTERVAL = 0.5


_logger = logging.getLogger(__name__)


class WebREPLNotStartedError(RuntimeError):
    """
    The WebREPL server is not running on the board, or it is not reachable from the network
    because the board is not connected to one (the server is bound to ``0.0.0.0``).
    """


async def get_webrepl_url(session: Session) -> str:
    """
    Starts the WebREPL server on the board (no-op if it is running already) and returns its URL,
    like ``ws://192.168.1.23:8266``.

    :raises: :class:`WebREPLNotStartedError` if the URL could not be determined.
    """
    result = await session.execute("import webrepl\nwebrepl.start()")
    result.raise_for_error()
    match = _URL_PATTERN.search(result.output)
    if match is None:
        raise WebREPLNotStartedError(f"The board did not report the WebREPL address: {result.output.strip()!r}")
    address, port = match.groups()
    if address == "0.0.0.0":
        raise WebREPLNotStartedError("The WebREPL server is not bound to a network interface")
    return f"ws://{address}:{port}"


async def configure_webrepl(
    fs: RemoteFileSystem,
    lan_ssid: str,
    lan_password: str,
    webrepl_password: str,
    *,
    connect_timeout: float = 10.0,
) -> str:
    """
    Makes the board join the wireless network and start the WebREPL server, now and on every boot.
    Returns the URL of the WebREPL server.

    :param fs: The file system of the board; its session is used for the remote commands.
    :param lan_ssid: The name of the wireless network.
    :param lan_password: The password of the wireless network; may be empty for open networks.
    :param webrepl_password: The password protecting the WebREPL, 4 to 9 characters long.
    :param connect_timeout: How long to wait for the board to join the network, in seconds.

    :raises: :class:`ValueError` if the WebREPL password is of an invalid length.
        :class:`TimeoutError` if the board did not join the network in time.
        :class:`WebREPLNotStartedError` if the server could not be started.
    """
    if len(webrepl_password) not in _PASSWORD_LENGTH_RANGE:
        raise ValueError("The WebREPL password shall be 4 to 9 characters long")
    if not lan_ssid:
        raise ValueError("The network name shall not be empty")

    await fs.write_file(WEBREPL_CONFIG_FILE, f"PASS = {webrepl_password!r}\n".encode("utf8"))
    _logger.info("WebREPL password written into %r", WEBREPL_CONFIG_FILE)

    connect = _make_connect_snippet(lan_ssid, lan_password)
    (await fs.session.execute(connect)).raise_for_error()
    deadline = asyncio.get_running_loop().time() + connect_timeout
    while not await fs.session.evaluate("w.isconnected()"):
        if asyncio.get_running_loop().time() >= deadline:
            raise TimeoutError(f"The board did not join the network {lan_ssid!r} in {connect_timeout} seconds")
        await asyncio.sleep(_CONNECT_POLL_INTERVAL)

    url = await get_webrepl_url(fs.session)
    await fs.write_file(BOOT_FILE, _make_boot_snippet(connect).encode("utf8"), append=True)
    _logger.info("WebREPL started at %s; %r updated to start it on boot", url, BOOT_FILE)
    return url


def _make_connect_snippet(lan_ssid: str, lan_password: str) -> str:
    """
    >>> print(_make_connect_snippet('home', 'p@ss'))
    import network
    w=network.WLAN(network.STA_IF)
    w.active(True)
    if w.isconnected():
     w.disconnect()
    w.connect('home','p@ss')
    """
    return "\n".join(
        [
            "import network",
            "w=network.WLAN(network.STA_IF)",
            "w.active(True)",
            "if w.isconnected():",
            " w.disconnect()",
            f"w.connect({lan_ssid!r},{lan_password!r})",
        ]
    )


def _make_boot_snippet(connect: str) -> str:
    # Appended to the existing boot file, hence the leading newline.
    # The board waits for the network for up to 4.5 seconds before giving up on the WebREPL.
    return "\n".join(
        [
            "",
            connect,
            "import webrepl",
            "import time",
            "t=9",
            "while t>0:",
            " if w.isconnected():",
            "  webrepl.start()",
            "  break",
            " t=t-1",
            " time.sleep_ms(500)",
            "",
        ]
    )


def _unittest_url_pattern() -> None:
    assert _URL_PATTERN.search("WebREPL daemon started on ws://192.168.1.23:8266\r\n")
    assert _URL_PATTERN.search("Started webrepl in normal mode\r\nhttp://10.0.0.5:8266\r\n")
    assert not _URL_PATTERN.search("WebREPL is not configured, run 'import webrepl_setup'\r\n")
