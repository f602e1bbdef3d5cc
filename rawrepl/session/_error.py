# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

from __future__ import annotations
import re
import typing
from rawrepl.transport import TransportError


class HandshakeError(TransportError):
    """
    The board could not be brought into the raw REPL mode within the configured number of attempts.
    Either the board is unreachable or it is not running MicroPython.
    """


class RemoteExecutionError(RuntimeError):
    """
    The code submitted to the board raised an exception there. This is not a transport fault:
    the session remains synchronized and can be used further.

    :meth:`rawrepl.session.Session.execute` returns the error text as data;
    this exception is raised by the higher-level helpers, see :meth:`rawrepl.session.ExecutionResult.raise_for_error`.

    >>> ex = RemoteExecutionError('Traceback (most recent call last):\\r\\n  File "<stdin>", line 1, in <module>\\r\\n'
    ...                           'OSError: [Errno 2] ENOENT\\r\\n')
    >>> ex.exception_name
    'OSError'
    >>> ex.errno
    2
    >>> str(ex)
    'OSError: [Errno 2] ENOENT'
    >>> RemoteExecutionError('ZeroDivisionError: division by zero').errno is None
    True
    """

    def __init__(self, traceback: str) -> None:
        self._traceback = str(traceback)
        lines = [x.strip() for x in self._traceback.splitlines() if x.strip()]
        self._summary = lines[-1] if lines else ""
        super().__init__(self._summary)

    @property
    def traceback(self) -> str:
        """
        The full error text as printed by the board.
        """
        return self._traceback

    @property
    def exception_name(self) -> str:
        """
        The type name of the exception raised on the board, like ``ZeroDivisionError``.
        """
        return self._summary.split(":", 1)[0].strip()

    @property
    def errno(self) -> typing.Optional[int]:
        """
        The error code of an ``OSError`` raised on the board, if present; None otherwise.
        """
        match = _ERRNO_PATTERN.search(self._summary)
        if match is None:
            return None
        return int(match.group(1) or match.group(2))


# Ports built without the errno names print the bare number, like "OSError: 2".
_ERRNO_PATTERN = re.compile(r"\[Errno (\d+)\]|^OSError: (\d+)$")
