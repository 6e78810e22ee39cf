"""Core signal classes: a typed connection registry and its dispatcher."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVarTuple

from typedsignal.signals.config import DEFAULT_CONFIG, DispatchConfig
from typedsignal.signals.exceptions import (
    AlreadyConnectedError,
    InvocationError,
    NotConnectedError,
)
from typedsignal.signals.resolution import (
    check_arguments,
    format_parameter_types,
    normalize_parameter_types,
    resolve_method,
)


if TYPE_CHECKING:
    from collections.abc import Callable


logger = logging.getLogger(__name__)

Ts = TypeVarTuple("Ts")


@dataclass(frozen=True, slots=True, eq=False)
class Connection:
    """One receiver method bound to a signal.

    Connections compare and hash by identity, like their receivers.
    """

    receiver: Any
    method_name: str
    method: Callable[..., Any] = field(repr=False, compare=False)

    def matches(self, receiver: Any, method_name: str) -> bool:
        """Whether this is the connection of ``receiver.method_name``."""
        return self.receiver is receiver and self.method_name == method_name


class Signal(Generic[*Ts]):
    """Typed signal dispatching to connected receiver methods.

    The parameter types given at construction define which methods can be
    connected: a signal created with a single ``str`` parameter only accepts
    methods taking exactly one ``str``. When the signal is emitted, every
    connected method is called with the emitted arguments, in the order the
    connections were made. Return values are ignored.

    Not thread-safe; see ``SynchronizedSignal``.

    Example:
        changed = Signal(str)
        changed.connect(label, "set_text")
        changed.emit("hello")
    """

    __slots__ = ("_config", "_connections", "_name", "_parameter_types")

    def __init__(
        self,
        *parameter_types: Any,
        name: str | None = None,
        config: DispatchConfig | None = None,
    ) -> None:
        self._parameter_types = normalize_parameter_types(parameter_types)
        self._name = name
        self._config = config if config is not None else DEFAULT_CONFIG
        self._connections: list[Connection] = []

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} {self._name or 'anonymous'!r} "
            f"{format_parameter_types(self._parameter_types)} "
            f"connections={len(self._connections)}>"
        )

    def __len__(self) -> int:
        return len(self._connections)

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def parameter_types(self) -> tuple[Any, ...]:
        """Types every connected method accepts and every emission passes."""
        return self._parameter_types

    @property
    def config(self) -> DispatchConfig:
        return self._config

    @property
    def connections(self) -> tuple[Connection, ...]:
        return self.get_connections()

    def _label(self) -> str:
        return f"Signal {self._name!r}" if self._name else "Signal"

    def connect(self, receiver: Any, method_name: str) -> None:
        """Connect ``receiver.method_name`` to the signal.

        The same method of the same receiver can only be connected once.

        Args:
            receiver: The object instance to connect.
            method_name: Name of a public method of the receiver's class
                taking exactly the signal's parameter types.

        Raises:
            TypeError: If ``receiver`` is None.
            AlreadyConnectedError: The method of this receiver is already connected.
            MethodNotFoundError: The receiver's class has no such method.
            MethodInaccessibleError: The method is not public.
            ParameterMismatchError: The method doesn't take the signal's parameters.
        """
        if receiver is None:
            msg = "Cannot connect a method of None"
            raise TypeError(msg)
        if self.is_connected(receiver, method_name):
            msg = (
                f"The method {method_name!r} in class "
                f"{type(receiver).__qualname__!r} is already connected"
            )
            raise AlreadyConnectedError(msg, receiver=receiver, method_name=method_name)

        method = resolve_method(
            receiver,
            method_name,
            self._parameter_types,
            strict=self._config.strict_annotations,
        )
        self._connections.append(Connection(receiver, method_name, method))
        logger.debug("Connected %s.%s to %r", type(receiver).__qualname__, method_name, self)

    def disconnect(self, receiver: Any, method_name: str) -> None:
        """Disconnect ``receiver.method_name`` from the signal.

        Raises:
            NotConnectedError: The method of this receiver is not connected.
        """
        for index, connection in enumerate(self._connections):
            if connection.matches(receiver, method_name):
                del self._connections[index]
                logger.debug(
                    "Disconnected %s.%s from %r", type(receiver).__qualname__, method_name, self
                )
                return
        msg = (
            f"The method {method_name!r} in class "
            f"{type(receiver).__qualname__!r} is not connected"
        )
        raise NotConnectedError(msg, receiver=receiver, method_name=method_name)

    def disconnect_all(self) -> None:
        """Disconnect all methods from the signal."""
        self._connections.clear()
        logger.debug("Disconnected all methods from %r", self)

    def is_connected(self, receiver: Any, method_name: str) -> bool:
        """Return True if ``receiver.method_name`` is connected.

        Receivers are compared by identity, so equal but distinct objects
        have separate connections.
        """
        return any(c.matches(receiver, method_name) for c in self._connections)

    def get_connections(self) -> tuple[Connection, ...]:
        """Return the current connections in dispatch order."""
        return tuple(self._connections)

    def emit(self, *args: *Ts) -> None:
        """Call every connected method with ``args``.

        Arguments are checked against the signature once, before anything is
        called. Methods connected or disconnected by a handler during the
        emission don't affect the emission in progress.

        Raises:
            ParameterMismatchError: ``args`` don't match the signal's parameters.
            InvocationError: A connected method raised. Under the default
                ``abort`` policy the remaining methods are not called.
            ExceptionGroup: With the ``collect`` policy, the InvocationErrors
                of all failing methods.
        """
        if self._config.validate_emit:
            check_arguments(args, self._parameter_types, self._label())
        self._dispatch(self.get_connections(), args)

    def _dispatch(self, connections: tuple[Connection, ...], args: tuple[Any, ...]) -> None:
        logger.debug("Emitting %r to %d connection(s)", self, len(connections))
        errors: list[InvocationError] = []
        for connection in connections:
            try:
                connection.method(*args)
            except Exception as e:
                error = self._invocation_error(connection, e)
                if self._config.error_policy == "abort":
                    raise error from e
                errors.append(error)
        if errors:
            msg = f"{len(errors)} connected method(s) of {self._label()} failed"
            raise ExceptionGroup(msg, errors)

    def _invocation_error(self, connection: Connection, exc: Exception) -> InvocationError:
        msg = (
            f"The method {connection.method_name!r} in class "
            f"{type(connection.receiver).__qualname__!r} raised "
            f"{type(exc).__name__}: {exc}"
        )
        error = InvocationError(msg, connection=connection)
        error.__cause__ = exc
        return error
