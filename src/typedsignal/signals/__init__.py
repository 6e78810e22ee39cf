"""Typed signals connecting receiver methods by name.

A signal is declared with the parameter types it carries. Methods are
connected by receiver and name, validated against those types, and called in
connection order whenever the signal is emitted.

Example:
    class Printer:
        def on_message(self, text: str) -> None:
            print(text)

    message = Signal(str)
    message.connect(Printer(), "on_message")
    message.emit("hello")
"""

from __future__ import annotations

from .config import DispatchConfig, ErrorPolicy
from .core import Connection, Signal
from .descriptor import SignalDescriptor
from .exceptions import (
    AlreadyConnectedError,
    ConnectionStateError,
    InvocationError,
    MethodInaccessibleError,
    MethodNotFoundError,
    MethodResolutionError,
    NotConnectedError,
    ParameterMismatchError,
    SignalError,
)
from .synchronized import SynchronizedSignal

__all__ = [
    "AlreadyConnectedError",
    "Connection",
    "ConnectionStateError",
    "DispatchConfig",
    "ErrorPolicy",
    "InvocationError",
    "MethodInaccessibleError",
    "MethodNotFoundError",
    "MethodResolutionError",
    "NotConnectedError",
    "ParameterMismatchError",
    "Signal",
    "SignalDescriptor",
    "SignalError",
    "SynchronizedSignal",
]
