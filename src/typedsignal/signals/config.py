"""Dispatch configuration for signals."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


ErrorPolicy = Literal["abort", "collect"]


class DispatchConfig(BaseModel):
    """Behaviour switches shared by a signal's connect and emit operations."""

    error_policy: ErrorPolicy = Field(
        default="abort",
        title="Error Policy",
        examples=["abort", "collect"],
    )
    """What to do when a connected method raises during emission.

    ``abort`` stops at the first failing connection and raises its
    ``InvocationError``. ``collect`` invokes every connection and raises an
    ``ExceptionGroup`` of all ``InvocationError``s afterwards.
    """

    strict_annotations: bool = Field(default=False, title="Strict Annotations")
    """Reject handlers with unannotated parameters."""

    validate_emit: bool = Field(default=True, title="Validate Emitted Arguments")
    """Check emitted argument types against the signature before dispatching."""

    model_config = ConfigDict(use_attribute_docstrings=True, extra="forbid", frozen=True)


DEFAULT_CONFIG = DispatchConfig()
