# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

import sys
import logging
import pytest


GIBIBYTE = 1024 ** 3

MEMORY_LIMIT = 2 * GIBIBYTE
"""
The test suite artificially limits the amount of consumed memory in order to avoid triggering the OOM killer
should a test go crazy and eat all memory (e.g., a scanner accumulating a never-ending stream).
"""

_logger = logging.getLogger(__name__)


@pytest.fixture(scope="session", autouse=True)  # type: ignore
def _configure_host_environment() -> None:
    if sys.platform.startswith("linux"):
        import resource

        _logger.info("Limiting process memory usage to %.1f GiB", MEMORY_LIMIT / GIBIBYTE)
        resource.setrlimit(resource.RLIMIT_AS, (MEMORY_LIMIT, MEMORY_LIMIT))


@pytest.fixture()  # type: ignore
def registry_path(tmp_path):  # type: ignore
    """
    A board registry location that is guaranteed to be empty and isolated from the user's real registry.
    """
    return tmp_path / "registry" / "boards.yaml"
