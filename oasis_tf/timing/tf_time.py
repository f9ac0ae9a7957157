################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""
Timestamps of buffered transforms
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass


# Nanoseconds per second for converting transform timestamps
_NS_PER_S: int = 1_000_000_000


class TfTimeError(Exception):
    """Raised when a timestamp cannot be represented."""


@dataclass(frozen=True, order=True)
class TfTime:
    """
    Transform timestamp stored as seconds and nanoseconds

    Nanoseconds outside [0, 1e9) are carried into the seconds field, so equal
    instants always compare equal.

    Fields:
        sec: Whole seconds since the time reference
        nanosec: Sub-second remainder in nanoseconds [0, 1e9)
    """

    sec: int
    nanosec: int

    def __post_init__(self) -> None:
        """Validate the fields and normalize the nanosecond remainder."""
        if not _is_int(self.sec):
            raise TfTimeError(f"sec must be an int, got {type(self.sec).__name__}")
        if not _is_int(self.nanosec):
            raise TfTimeError(
                f"nanosec must be an int, got {type(self.nanosec).__name__}"
            )

        carry: int
        nanosec: int
        carry, nanosec = divmod(int(self.nanosec), _NS_PER_S)
        object.__setattr__(self, "sec", int(self.sec) + carry)
        object.__setattr__(self, "nanosec", nanosec)


def _is_int(value: object) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def to_ns(t: TfTime) -> int:
    return t.sec * _NS_PER_S + t.nanosec


def from_ns(ns: int) -> TfTime:
    sec, nanosec = divmod(ns, _NS_PER_S)
    return TfTime(sec=sec, nanosec=nanosec)


def to_seconds(t: TfTime) -> float:
    return float(t.sec) + float(t.nanosec) / _NS_PER_S


def from_seconds(seconds: float) -> TfTime:
    if not math.isfinite(seconds):
        raise TfTimeError(f"seconds must be finite, got {seconds}")
    total_ns: int = int(round(seconds * _NS_PER_S))
    return from_ns(total_ns)


def diff_sec(a: TfTime, b: TfTime) -> float:
    """Return a - b in seconds."""
    return float(to_ns(a) - to_ns(b)) / _NS_PER_S
