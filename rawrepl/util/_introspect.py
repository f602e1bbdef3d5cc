# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

import types
import typing
import pkgutil
import importlib


T = typing.TypeVar("T", bound=object)  # https://github.com/python/mypy/issues/5374


def iter_descendants(ty: typing.Type[T]) -> typing.Iterable[typing.Type[T]]:
    """
    Yields the subclasses of the argument depth-first, the argument itself excluded.
    Only the classes defined in the modules that have been imported are visible, hence :func:`import_submodules`.

    >>> import rawrepl.transport
    >>> class _Tap(rawrepl.transport.Transport): pass
    >>> class _LoggingTap(_Tap): pass
    >>> [t.__name__ for t in iter_descendants(_Tap)]
    ['_LoggingTap']
    >>> rawrepl.util.import_submodules(rawrepl.transport)
    >>> sorted(t.__name__ for t in iter_descendants(rawrepl.transport.Transport) if not t.__name__.startswith('_'))
    [...'SerialTransport'...'WebREPLTransport'...]
    """
    for t in ty.__subclasses__():
        yield t
        yield from iter_descendants(t)


def import_submodules(
    root_module: types.ModuleType, error_handler: typing.Optional[typing.Callable[[str, ImportError], None]] = None
) -> None:
    """
    Imports every module of the package recursively, so that the classes defined there become discoverable
    via :func:`iter_descendants`. The command-line tool uses this to find its commands and the transports
    that can be named in a connection expression.

    :param root_module: The package to walk.

    :param error_handler: Invoked with the name of the module and the :class:`ImportError` when a module cannot be
        imported, e.g., because the third-party library it depends on is not installed; the walk then continues.
        If None, the first import error is raised.
    """
    for _, module_name, _ in pkgutil.walk_packages(root_module.__path__, root_module.__name__ + "."):  # type: ignore
        try:
            importlib.import_module(module_name)
        except ImportError as ex:
            if error_handler is None:
                raise
            error_handler(module_name, ex)
