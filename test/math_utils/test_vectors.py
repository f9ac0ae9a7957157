################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Tests for vector helpers."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.typing import NDArray

from oasis_tf.math_utils.vectors import PLUS_I
from oasis_tf.math_utils.vectors import as_vector3
from oasis_tf.math_utils.vectors import orthogonal


@pytest.mark.parametrize(
    "v",
    [
        [1.0, 0.0, 0.0],
        [0.0, 2.0, 0.0],
        [0.0, 0.0, -3.0],
        [1.0, 1.0, 1.0],
        [0.1, -4.0, 2.5],
    ],
)
def test_orthogonal_is_unit_and_orthogonal(v: list[float]) -> None:
    """The helper returns a unit vector orthogonal to its input."""
    vec: NDArray[np.float64] = np.array(v)
    w: NDArray[np.float64] = orthogonal(vec)
    assert np.isclose(np.linalg.norm(w), 1.0)
    assert np.isclose(np.dot(w, vec), 0.0)


def test_orthogonal_rejects_zero() -> None:
    """A zero vector has no orthogonal direction."""
    with pytest.raises(ValueError):
        orthogonal(np.zeros(3))


def test_as_vector3_copies() -> None:
    """Coercion returns a new writable array."""
    vec: NDArray[np.float64] = as_vector3(PLUS_I, "v")
    vec[0] = 5.0
    assert PLUS_I[0] == 1.0


def test_as_vector3_rejects_invalid() -> None:
    """Wrong shapes and non-finite values are rejected."""
    with pytest.raises(ValueError):
        as_vector3([1.0, 2.0], "v")
    with pytest.raises(ValueError):
        as_vector3([1.0, np.inf, 0.0], "v")


def test_basis_is_read_only() -> None:
    """Shared basis vectors cannot be modified."""
    with pytest.raises(ValueError):
        PLUS_I[0] = 2.0
