# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.


class TransportError(RuntimeError):
    """
    This is the root exception class for all transport-related errors.
    Exception types defined at the higher layers (e.g., the session driver) also inherit from this type,
    so the application may use this type as the base exception type for all communication errors
    that occur at runtime.

    Exceptions raised by the code running on the board are not transport errors;
    see :class:`rawrepl.session.RemoteExecutionError`.
    """


class InvalidTransportConfigurationError(TransportError):
    """
    The transport could not be initialized because the specified configuration is invalid;
    e.g., the serial port is not open or the WebREPL password has been rejected.
    """


class ReadTimeoutError(TransportError):
    """
    The expected data did not arrive in time.
    At the protocol level this usually means that the board is out of sync with the driver.
    """


class ResourceClosedError(TransportError):
    """
    The requested operation could not be performed because an associated resource has already been terminated.
    Double-close should not raise exceptions.
    """
