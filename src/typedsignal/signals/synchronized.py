"""Thread-safe signal variant."""

from __future__ import annotations

from threading import RLock
from typing import TYPE_CHECKING, Any

from typedsignal.signals.core import Connection, Signal, Ts


if TYPE_CHECKING:
    from typedsignal.signals.config import DispatchConfig


class SynchronizedSignal(Signal[*Ts]):
    """Signal whose registry is guarded by a single re-entrant lock.

    Connecting, disconnecting, querying and taking the emission snapshot are
    serialized. Connected methods run outside the lock, so they may connect,
    disconnect or emit again from any thread.
    """

    __slots__ = ("_lock",)

    def __init__(
        self,
        *parameter_types: Any,
        name: str | None = None,
        config: DispatchConfig | None = None,
    ) -> None:
        super().__init__(*parameter_types, name=name, config=config)
        self._lock = RLock()

    def __len__(self) -> int:
        with self._lock:
            return super().__len__()

    def connect(self, receiver: Any, method_name: str) -> None:
        with self._lock:
            super().connect(receiver, method_name)

    def disconnect(self, receiver: Any, method_name: str) -> None:
        with self._lock:
            super().disconnect(receiver, method_name)

    def disconnect_all(self) -> None:
        with self._lock:
            super().disconnect_all()

    def is_connected(self, receiver: Any, method_name: str) -> bool:
        with self._lock:
            return super().is_connected(receiver, method_name)

    def get_connections(self) -> tuple[Connection, ...]:
        with self._lock:
            return super().get_connections()
