"""Tests for class-level signal declarations."""

from __future__ import annotations

from dataclasses import dataclass, field
import gc

import pytest

from typedsignal import DispatchConfig, Signal, SignalDescriptor, SynchronizedSignal


@dataclass
class Document:
    path: str
    saved = SignalDescriptor(str)
    renamed = SignalDescriptor(str, str, synchronized=True)
    strict = SignalDescriptor(str, config=DispatchConfig(strict_annotations=True))


@dataclass
class Window:
    titles: list[str] = field(default_factory=list)

    def on_saved(self, path: str) -> None:
        self.titles.append(path)

    def on_renamed(self, old: str, new: str) -> None:
        self.titles.append(f"{old} -> {new}")


def test_class_access_returns_descriptor():
    descriptor = Document.saved

    assert isinstance(descriptor, SignalDescriptor)
    assert descriptor.name == "Document.saved"
    assert descriptor.parameter_types == (str,)


def test_instance_access_returns_same_signal():
    doc = Document("a.txt")

    assert isinstance(doc.saved, Signal)
    assert doc.saved is doc.saved
    assert doc.saved.name == "Document.saved"


def test_equal_instances_get_separate_signals():
    first, second = Document("a.txt"), Document("a.txt")
    window = Window()
    assert first == second

    first.saved.connect(window, "on_saved")
    second.saved.emit("second")
    first.saved.emit("first")

    assert first.saved is not second.saved
    assert window.titles == ["first"]


def test_synchronized_declaration():
    doc = Document("a.txt")
    window = Window()

    assert isinstance(doc.renamed, SynchronizedSignal)
    doc.renamed.connect(window, "on_renamed")
    doc.renamed.emit("a.txt", "b.txt")

    assert window.titles == ["a.txt -> b.txt"]


def test_config_is_passed_on():
    doc = Document("a.txt")

    assert doc.strict.config.strict_annotations
    assert not doc.saved.config.strict_annotations


def test_descriptor_outside_class_body():
    loose = SignalDescriptor(int)

    with pytest.raises(TypeError):
        loose.__get__(Window())


class SlottedDocument:
    __slots__ = ("__weakref__", "path")

    saved = SignalDescriptor(str)

    def __init__(self, path: str) -> None:
        self.path = path


class SealedDocument:
    __slots__ = ("path",)

    saved = SignalDescriptor(str)


def test_slotted_owner():
    doc = SlottedDocument("a.txt")
    window = Window()

    doc.saved.connect(window, "on_saved")
    doc.saved.emit("a.txt")

    assert doc.saved is doc.saved
    assert window.titles == ["a.txt"]


def test_owner_without_weak_references():
    with pytest.raises(TypeError, match="__weakref__"):
        SealedDocument().saved  # noqa: B018


def test_signals_are_released_with_their_owner():
    descriptor = Document.saved
    doc = Document("a.txt")
    doc.saved.emit("a.txt")
    assert len(descriptor._signals) >= 1

    key = id(doc)
    del doc
    gc.collect()

    assert key not in descriptor._signals
