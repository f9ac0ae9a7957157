################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Vector helpers shared by the rotation algebra."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


def _basis(x: float, y: float, z: float) -> NDArray[np.float64]:
    vec: NDArray[np.float64] = np.array([x, y, z], dtype=float)
    vec.setflags(write=False)
    return vec


# Canonical basis vectors, read-only
PLUS_I: NDArray[np.float64] = _basis(1.0, 0.0, 0.0)
PLUS_J: NDArray[np.float64] = _basis(0.0, 1.0, 0.0)
PLUS_K: NDArray[np.float64] = _basis(0.0, 0.0, 1.0)

# Fraction of the norm below which a component counts as "small" when picking
# an orthogonal direction
_ORTHOGONAL_THRESHOLD_RATIO: float = 0.6


def assert_finite(x: NDArray[np.float64], name: str) -> None:
    """Raise ValueError when the array contains non-finite values."""
    if not np.all(np.isfinite(x)):
        raise ValueError(f"{name} must be finite")


def as_vector3(v: object, name: str) -> NDArray[np.float64]:
    """Coerce an array-like to a new finite float64 vector of shape (3,)."""
    vec: NDArray[np.float64] = np.array(v, dtype=float)
    if vec.shape != (3,):
        raise ValueError(f"{name} must be shape (3,)")
    assert_finite(vec, name)
    return vec


def orthogonal(v: NDArray[np.float64]) -> NDArray[np.float64]:
    """Return a unit vector orthogonal to v.

    The component of v with the smallest magnitude relative to 0.6 * |v| is
    zeroed, so the result is deterministic and well conditioned.
    """
    vec: NDArray[np.float64] = as_vector3(v, "v")
    threshold: float = _ORTHOGONAL_THRESHOLD_RATIO * float(np.linalg.norm(vec))
    if threshold == 0.0:
        raise ValueError("v must have non-zero magnitude")

    x: float = float(vec[0])
    y: float = float(vec[1])
    z: float = float(vec[2])

    inverse: float
    if -threshold <= x <= threshold:
        inverse = 1.0 / float(np.sqrt(y * y + z * z))
        return np.array([0.0, inverse * z, -inverse * y], dtype=float)
    if -threshold <= y <= threshold:
        inverse = 1.0 / float(np.sqrt(x * x + z * z))
        return np.array([-inverse * z, 0.0, inverse * x], dtype=float)

    inverse = 1.0 / float(np.sqrt(x * x + y * y))
    return np.array([inverse * y, -inverse * x, 0.0], dtype=float)
