################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Tests for transform timestamps."""

from __future__ import annotations

import numpy as np
import pytest

from oasis_tf.timing.tf_time import TfTime
from oasis_tf.timing.tf_time import TfTimeError
from oasis_tf.timing.tf_time import diff_sec
from oasis_tf.timing.tf_time import from_ns
from oasis_tf.timing.tf_time import from_seconds
from oasis_tf.timing.tf_time import to_ns
from oasis_tf.timing.tf_time import to_seconds


def test_nanosec_is_normalized() -> None:
    """Nanosecond overflow and underflow carry into the seconds."""
    assert TfTime(1, 1_500_000_000) == TfTime(2, 500_000_000)
    t: TfTime = TfTime(1, -1)
    assert t.sec == 0
    assert t.nanosec == 999_999_999


def test_ordering() -> None:
    """Timestamps are ordered by instant."""
    assert TfTime(1, 999_999_999) < TfTime(2, 0)
    assert max(TfTime(3, 0), TfTime(2, 999)) == TfTime(3, 0)


def test_conversions() -> None:
    """Conversions between representations agree."""
    t: TfTime = from_seconds(1.25)
    assert t == TfTime(1, 250_000_000)
    assert to_seconds(t) == 1.25
    assert to_ns(t) == 1_250_000_000
    assert from_ns(to_ns(t)) == t


def test_diff_sec() -> None:
    """Differences are signed and exact to the nanosecond."""
    a: TfTime = TfTime(2, 500_000_000)
    b: TfTime = TfTime(0, 0)
    assert diff_sec(a, b) == 2.5
    assert diff_sec(b, a) == -2.5


def test_numpy_integer_fields() -> None:
    """Numpy integers are accepted and stored as Python ints."""
    t: TfTime = TfTime(np.int64(3), np.int32(1_000_000_005))
    assert t == TfTime(4, 5)
    assert type(t.sec) is int
    assert type(t.nanosec) is int
    with pytest.raises(TfTimeError):
        TfTime(np.float64(1.0), 0)  # type: ignore[arg-type]


def test_invalid_fields_raise() -> None:
    """Non-integer fields and non-finite seconds are rejected."""
    with pytest.raises(TfTimeError):
        TfTime(1.5, 0)  # type: ignore[arg-type]
    with pytest.raises(TfTimeError):
        TfTime(True, 0)  # type: ignore[arg-type]
    with pytest.raises(TfTimeError):
        from_seconds(float("nan"))
