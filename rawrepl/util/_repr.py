# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.


def repr_attributes(obj: object, *anonymous_elements: object, **named_elements: object) -> str:
    """
    Constructs a :func:`repr` form of an object; used by transports, sessions and commands.
    String representations will be obtained by invoking :func:`str` on each value.

    >>> class Board: pass
    >>> assert repr_attributes(Board()) == 'Board()'
    >>> assert repr_attributes(Board(), "'COM9'") == "Board('COM9')"
    >>> assert repr_attributes(Board(), baudrate=115200) == 'Board(baudrate=115200)'
    >>> repr_attributes(Board(), repr('/dev/ttyUSB0'), kind=repr('serial'), busy=False)
    "Board('/dev/ttyUSB0', kind='serial', busy=False)"
    """
    fld = list(map(str, anonymous_elements)) + list(f"{name}={value}" for name, value in named_elements.items())
    return f"{type(obj).__name__}(" + ", ".join(fld) + ")"


def repr_attributes_noexcept(obj: object, *anonymous_elements: object, **named_elements: object) -> str:
    """
    A variant of :meth:`repr_attributes` that never raises; used where the object may be half-closed.

    >>> class Board: pass
    >>> class Port:
    ...     def __repr__(self) -> str:
    ...         raise OSError('device disconnected')
    >>> repr_attributes_noexcept(Board(), port=Port())
    "<REPR FAILED: OSError('device disconnected')>"
    """
    try:
        return repr_attributes(obj, *anonymous_elements, **named_elements)
    except Exception as ex:
        # noinspection PyBroadException
        try:
            return f"<REPR FAILED: {ex!r}>"
        except Exception:
            return "<REPR FAILED: UNKNOWN ERROR>"
