# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

r"""
Driver for the raw REPL protocol of MicroPython boards over serial lines and WebREPL sockets.

Submodule import policy
+++++++++++++++++++++++

The following submodules are auto-imported when the root module ``rawrepl`` is imported:

- :mod:`rawrepl.util`
- :mod:`rawrepl.transport`, but not concrete transport implementation submodules.
- :mod:`rawrepl.session`

Submodules :mod:`rawrepl.fs` and :mod:`rawrepl.webrepl` are built on top of the session
and have to be imported explicitly.


Log level override
++++++++++++++++++

The environment variable ``RAWREPL_LOGLEVEL`` can be set to one of the following values to override
the library log level:

- ``CRITICAL``
- ``FATAL``
- ``ERROR``
- ``WARNING``
- ``INFO``
- ``DEBUG``
"""

import os as _os


from ._version import __version__ as __version__

__version_info__ = tuple(map(int, __version__.split(".")[:3]))
__license__ = "MIT"


_log_level_from_env = _os.environ.get("RAWREPL_LOGLEVEL")
if _log_level_from_env is not None:
    import logging as _logging

    _logging.basicConfig(
        format="%(asctime)s %(process)5d %(levelname)-8s %(name)s: %(message)s", level=_log_level_from_env
    )
    _logging.getLogger(__name__).setLevel(_log_level_from_env)
    _logging.getLogger(__name__).info("Log config from env var; level: %r", _log_level_from_env)


# The sub-packages are imported in the order of their interdependency.
import rawrepl.util as util  # pylint: disable=R0402,C0413  # noqa
import rawrepl.transport as transport  # pylint: disable=R0402,C0413  # noqa
import rawrepl.session as session  # pylint: disable=R0402,C0413  # noqa
