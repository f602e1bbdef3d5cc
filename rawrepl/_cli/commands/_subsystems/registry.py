# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

from __future__ import annotations
import argparse
from rawrepl.webrepl import BoardRegistry, DEFAULT_REGISTRY_PATH
from ._base import SubsystemFactory


class RegistryFactory(SubsystemFactory):
    """
    Provides the registry of the boards saved for connecting over the WebREPL.
    """

    def register_arguments(self, parser: argparse.ArgumentParser) -> None:
        add_registry_argument(parser)

    def construct_subsystem(self, args: argparse.Namespace) -> BoardRegistry:
        return BoardRegistry(args.registry)


def add_registry_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--registry",
        metavar="PATH",
        default=DEFAULT_REGISTRY_PATH,
        help="""
The YAML file where the boards reachable over the WebREPL are saved.
Default: %(default)s
""".strip(),
    )
