################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Structured configuration schema for the transform subsystem."""

from __future__ import annotations

import math
from dataclasses import dataclass
from dataclasses import field
from dataclasses import fields
from dataclasses import replace
from typing import Any
from typing import Mapping

from oasis_tf.math_utils.orthogonalize import ORTHOGONALIZATION_MAX_ITERATIONS
from oasis_tf.math_utils.orthogonalize import ORTHOGONALIZATION_THRESHOLD


# Maximum age of a buffered transform relative to the newest one, in seconds
BUFFER_HORIZON_SEC: float = 2.0
# Maximum time distance for a time-based lookup to succeed, in seconds
TF_MATCH_THRESHOLD_SEC: float = 0.1
# Maximum number of transforms kept per frame pair (None means unlimited)
BUFFER_MAX_ENTRIES: int | None = None


class TfParamsError(Exception):
    """Raised when transform parameter validation fails."""


def _require_number(value: Any, name: str) -> None:
    """Require a finite real number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TfParamsError(f"{name} must be a number")
    if not math.isfinite(value):
        raise TfParamsError(f"{name} must be finite")


def _require_positive(value: float, name: str) -> None:
    """Require a positive value."""
    _require_number(value, name)
    if value <= 0.0:
        raise TfParamsError(f"{name} must be positive")


def _require_non_negative(value: float, name: str) -> None:
    """Require a non-negative value."""
    _require_number(value, name)
    if value < 0.0:
        raise TfParamsError(f"{name} must be non-negative")


def _require_positive_int(value: int, name: str) -> None:
    """Require a positive integer value."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TfParamsError(f"{name} must be an int")
    if value <= 0:
        raise TfParamsError(f"{name} must be positive")


def _validate_optional_positive_int(value: int | None, name: str) -> None:
    """Validate an optional positive integer value."""
    if value is None:
        return
    _require_positive_int(value, name)


@dataclass(frozen=True)
class BufferParams:
    """Retention and lookup policy of the transform buffer."""

    # Maximum age relative to the newest transform in seconds
    horizon_sec: float = BUFFER_HORIZON_SEC
    # Maximum time distance for a time-based lookup in seconds
    match_threshold_sec: float = TF_MATCH_THRESHOLD_SEC
    # Maximum transforms per frame pair, 1 keeps only the latest
    max_entries: int | None = BUFFER_MAX_ENTRIES

    def validate(self) -> None:
        """Validate buffer parameters."""
        _require_non_negative(self.horizon_sec, "buffer.horizon_sec")
        _require_non_negative(self.match_threshold_sec, "buffer.match_threshold_sec")
        _validate_optional_positive_int(self.max_entries, "buffer.max_entries")


@dataclass(frozen=True)
class OrthogonalizationParams:
    """Matrix correction settings used when building rotations from matrices."""

    # Maximum number of correction steps
    max_iterations: int = ORTHOGONALIZATION_MAX_ITERATIONS
    # Convergence threshold on the change of the correction norm
    threshold: float = ORTHOGONALIZATION_THRESHOLD

    def validate(self) -> None:
        """Validate orthogonalization parameters."""
        _require_positive_int(self.max_iterations, "orthogonalization.max_iterations")
        _require_positive(self.threshold, "orthogonalization.threshold")


@dataclass(frozen=True)
class TfParams:
    """Complete configuration tree for the transform subsystem."""

    buffer: BufferParams = field(default_factory=BufferParams)
    orthogonalization: OrthogonalizationParams = field(
        default_factory=OrthogonalizationParams
    )

    @classmethod
    def defaults(cls) -> TfParams:
        """Return the default parameter tree."""
        return cls(
            buffer=BufferParams(),
            orthogonalization=OrthogonalizationParams(),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TfParams:
        """
        Build a parameter tree from a nested mapping

        Missing namespaces and keys keep their defaults. Unknown namespaces
        or keys are rejected. The returned tree is validated.
        """
        if not isinstance(data, Mapping):
            raise TfParamsError("parameters must be a mapping")

        namespaces: dict[str, type] = {
            item.name: type(getattr(cls.defaults(), item.name)) for item in fields(cls)
        }
        unknown: list[str] = sorted(set(data) - set(namespaces))
        if unknown:
            raise TfParamsError(f"unknown parameter namespaces: {', '.join(unknown)}")

        overrides: dict[str, Any] = {}
        for name, namespace_type in namespaces.items():
            section: Any = data.get(name)
            if section is None:
                continue
            if not isinstance(section, Mapping):
                raise TfParamsError(f"{name} must be a mapping")

            keys: set[str] = {item.name for item in fields(namespace_type)}
            unknown = sorted(set(section) - keys)
            if unknown:
                raise TfParamsError(
                    f"unknown parameters in {name}: {', '.join(unknown)}"
                )
            overrides[name] = namespace_type(**section)

        params: TfParams = cls.defaults().replace(**overrides)
        params.validate()
        return params

    def validate(self) -> None:
        """Validate parameter invariants and constraints."""
        self.buffer.validate()
        self.orthogonalization.validate()

    def replace(self, **namespace_overrides: Any) -> TfParams:
        """Return a modified copy of the parameters."""
        return replace(self, **namespace_overrides)

    def as_nested_dict(self) -> dict[str, Any]:
        """Return a nested dict representation."""
        return _dataclass_to_dict(self)


def _dataclass_to_dict(value: Any) -> Any:
    """Convert dataclasses into plain Python values."""
    if hasattr(value, "__dataclass_fields__"):
        return {
            item.name: _dataclass_to_dict(getattr(value, item.name))
            for item in fields(value)
        }
    return value
