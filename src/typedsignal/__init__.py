"""TypedSignal: typed in-process signals for connecting receiver methods."""

__version__ = "0.1.0"

from typedsignal.signals import (
    AlreadyConnectedError,
    Connection,
    DispatchConfig,
    InvocationError,
    MethodInaccessibleError,
    MethodNotFoundError,
    NotConnectedError,
    ParameterMismatchError,
    Signal,
    SignalDescriptor,
    SignalError,
    SynchronizedSignal,
)

__all__ = [
    # Signals
    "Connection",
    "Signal",
    "SignalDescriptor",
    "SynchronizedSignal",
    # Configuration
    "DispatchConfig",
    # Errors
    "AlreadyConnectedError",
    "InvocationError",
    "MethodInaccessibleError",
    "MethodNotFoundError",
    "NotConnectedError",
    "ParameterMismatchError",
    "SignalError",
]
