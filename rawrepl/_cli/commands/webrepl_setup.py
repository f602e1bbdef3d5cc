# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

import typing
import getpass
import logging
import argparse
from rawrepl.session import Session
from rawrepl.fs import RemoteFileSystem
from rawrepl.webrepl import configure_webrepl, BoardRegistry, BoardRecord
from . import _subsystems, _util
from ._base import Command, SubsystemFactory


_logger = logging.getLogger(__name__)


class WebREPLSetupCommand(Command):
    @property
    def names(self) -> typing.Sequence[str]:
        return ["webrepl-setup"]

    @property
    def help(self) -> str:
        return """
Configure the board to join a wireless network and start the WebREPL server on every boot.
The board is usually connected over the serial port for this. The host is assumed to be on the same network.

The WebREPL password is written into webrepl_cfg.py on the board, and the network setup code is appended to boot.py.
If a board name is given, the board is saved locally so that it can be reached later with --board=NAME.
Passwords that are not given in the arguments are prompted for.
""".strip()

    @property
    def examples(self) -> typing.Optional[str]:
        return """
rawrepl webrepl-setup HomeWiFi --name=kitchen --connection="Serial('/dev/ttyUSB0')"
""".strip()

    @property
    def subsystem_factories(self) -> typing.Sequence[SubsystemFactory]:
        return [
            _subsystems.connection.ConnectionFactory(),
        ]

    def register_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("lan_ssid", metavar="SSID", help="The name of the wireless network to join.")
        parser.add_argument(
            "--lan-password",
            metavar="PASSWORD",
            help="The password of the wireless network; empty for open networks.",
        )
        parser.add_argument(
            "--webrepl-password",
            metavar="PASSWORD",
            help="The password protecting the WebREPL, 4 to 9 characters long.",
        )
        parser.add_argument(
            "--name",
            "-N",
            metavar="NAME",
            help="Save the board under this name.",
        )
        parser.add_argument(
            "--connect-timeout",
            metavar="SECONDS",
            type=float,
            default=10.0,
            help="How long to wait for the board to join the network. Default: %(default)s",
        )

    def execute(self, args: argparse.Namespace, subsystems: typing.Sequence[object]) -> int:
        (session,) = subsystems
        assert isinstance(session, Session)
        lan_password = args.lan_password
        if lan_password is None:
            lan_password = getpass.getpass(f"Password of {args.lan_ssid!r}: ")
        webrepl_password = args.webrepl_password
        if webrepl_password is None:
            webrepl_password = getpass.getpass("WebREPL password (4-9 characters): ")

        async def run() -> str:
            return await configure_webrepl(
                RemoteFileSystem(session),
                args.lan_ssid,
                lan_password,
                webrepl_password,
                connect_timeout=args.connect_timeout,
            )

        url = _util.run_with_session(session, run)
        print(url)
        if args.name:
            BoardRegistry(args.registry).add(BoardRecord(args.name, url, webrepl_password))
            _logger.info("Board %r saved; connect to it using --board=%s", args.name, args.name)
        return 0
