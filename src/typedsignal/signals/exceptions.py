"""Exceptions raised by signals."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from typedsignal.signals.core import Connection


class SignalError(Exception):
    """Base class for all signal errors."""


class ConnectionStateError(SignalError):
    """A (receiver, method) pair is in the wrong connection state."""

    def __init__(self, message: str, *, receiver: Any, method_name: str):
        super().__init__(message)
        self.receiver = receiver
        self.method_name = method_name


class AlreadyConnectedError(ConnectionStateError):
    """The method of this receiver is already connected."""


class NotConnectedError(ConnectionStateError):
    """The method of this receiver is not connected."""


class MethodResolutionError(SignalError):
    """A method name could not be bound to a handler of the signal's signature."""

    def __init__(
        self,
        message: str,
        *,
        receiver_type: type | None = None,
        method_name: str | None = None,
        parameter_types: tuple[Any, ...] = (),
    ):
        super().__init__(message)
        self.receiver_type = receiver_type
        self.method_name = method_name
        self.parameter_types = parameter_types


class MethodNotFoundError(MethodResolutionError, AttributeError):
    """The receiver's class has no method with that name."""


class MethodInaccessibleError(MethodResolutionError):
    """The method exists but is not public."""


class ParameterMismatchError(MethodResolutionError, TypeError):
    """Handler parameters or emitted arguments don't match the signature."""


class InvocationError(SignalError):
    """A connected method raised while the signal was being emitted.

    The original exception is available as ``__cause__``.
    """

    def __init__(self, message: str, *, connection: Connection):
        super().__init__(message)
        self.connection = connection
