"""Class-level signal declarations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, Self, TypeVarTuple, overload
import weakref

from typedsignal.signals.core import Signal
from typedsignal.signals.resolution import normalize_parameter_types
from typedsignal.signals.synchronized import SynchronizedSignal


if TYPE_CHECKING:
    from typedsignal.signals.config import DispatchConfig


Ts = TypeVarTuple("Ts")


class SignalDescriptor(Generic[*Ts]):
    """Descriptor: declare at class level, get one Signal per instance.

    Signals are created on first access and kept per owner instance, keyed by
    identity so equal or unhashable owners still get their own signal. An
    entry is dropped when its owner is garbage collected, so owners must
    support weak references.

    Example:
        class Document:
            saved = SignalDescriptor(str)

        doc = Document()
        doc.saved.connect(window, "on_saved")
        doc.saved.emit("/tmp/doc.txt")
    """

    __slots__ = ("_attribute", "_config", "_name", "_parameter_types", "_signals", "_synchronized")

    def __init__(
        self,
        *parameter_types: Any,
        config: DispatchConfig | None = None,
        synchronized: bool = False,
    ) -> None:
        self._parameter_types = normalize_parameter_types(parameter_types)
        self._config = config
        self._synchronized = synchronized
        self._attribute: str = ""
        self._name: str = ""
        self._signals: dict[int, Signal[*Ts]] = {}

    def __set_name__(self, owner: type, name: str) -> None:
        self._attribute = name
        self._name = f"{owner.__qualname__}.{name}"

    @overload
    def __get__(self, obj: None, owner: type | None = None) -> Self: ...

    @overload
    def __get__(self, obj: object, owner: type | None = None) -> Signal[*Ts]: ...

    def __get__(self, obj: object | None, owner: type | None = None) -> Self | Signal[*Ts]:
        if obj is None:
            # Class-level access returns the declaration for introspection
            return self
        if not self._attribute:
            msg = "SignalDescriptor must be assigned in a class body"
            raise TypeError(msg)
        key = id(obj)
        signal = self._signals.get(key)
        if signal is None:
            try:
                weakref.finalize(obj, self._signals.pop, key, None)
            except TypeError as e:
                msg = (
                    f"{type(obj).__qualname__!r} instances must support weak references "
                    f"to hold {self._name!r}; add '__weakref__' to __slots__"
                )
                raise TypeError(msg) from e
            signal = self._signals[key] = self._create_signal()
        return signal

    def _create_signal(self) -> Signal[*Ts]:
        if self._synchronized:
            return SynchronizedSignal(*self._parameter_types, name=self._name, config=self._config)
        return Signal(*self._parameter_types, name=self._name, config=self._config)

    @property
    def name(self) -> str:
        return self._name

    @property
    def parameter_types(self) -> tuple[Any, ...]:
        return self._parameter_types
