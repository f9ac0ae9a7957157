################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Cardan and Euler angle extraction from rotations.

Every order follows the same recipe: one canonical basis vector is rotated by
the rotation, another by its inverse, and the three angles are read back from
the coordinates of these two images. The middle angle is recovered from a
single coordinate of the second image, which is also the one tested for the
representation singularity.

Angle intervals:

* Cardan orders: the middle angle lies in [-pi/2, pi/2]
* Euler orders: the middle angle lies in [0, pi]
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING
from typing import Callable
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from .rotation_order import RotationOrder
from .vectors import PLUS_I
from .vectors import PLUS_J
from .vectors import PLUS_K


if TYPE_CHECKING:
    from .rotation import Rotation


# Angle triple (alpha1, alpha2, alpha3) in radians
EulerAngles = tuple[float, float, float]

# Absolute value of the tested coordinate above which angles are unrecoverable
SINGULARITY_LIMIT: float = 1.0 - 1e-10

# Coordinate indices
_X: int = 0
_Y: int = 1
_Z: int = 2

_Formula = Callable[[NDArray[np.float64], NDArray[np.float64]], EulerAngles]


@dataclass(frozen=True)
class _Extraction:
    """
    Recipe for recovering one order's angles

    Fields:
        v1_basis: Basis vector rotated with apply_to
        v2_basis: Basis vector rotated with apply_inverse_to
        singular_index: Coordinate of the second image tested for singularity
        formula: Maps the two images to the angle triple
    """

    v1_basis: NDArray[np.float64]
    v2_basis: NDArray[np.float64]
    singular_index: int
    formula: _Formula


_EXTRACTIONS: dict[RotationOrder, _Extraction] = {
    # r(+K) = (sin(theta), -cos(theta) sin(phi), cos(theta) cos(phi))
    # r^-1(+I) = (cos(psi) cos(theta), -sin(psi) cos(theta), sin(theta))
    RotationOrder.XYZ: _Extraction(
        PLUS_K,
        PLUS_I,
        _Z,
        lambda v1, v2: (
            math.atan2(-v1[_Y], v1[_Z]),
            math.asin(v2[_Z]),
            math.atan2(-v2[_Y], v2[_X]),
        ),
    ),
    # r(+J) = (-sin(psi), cos(psi) cos(phi), cos(psi) sin(phi))
    # r^-1(+I) = (cos(theta) cos(psi), -sin(psi), sin(theta) cos(psi))
    RotationOrder.XZY: _Extraction(
        PLUS_J,
        PLUS_I,
        _Y,
        lambda v1, v2: (
            math.atan2(v1[_Z], v1[_Y]),
            -math.asin(v2[_Y]),
            math.atan2(v2[_Z], v2[_X]),
        ),
    ),
    # r(+K) = (cos(phi) sin(theta), -sin(phi), cos(phi) cos(theta))
    # r^-1(+J) = (sin(psi) cos(phi), cos(psi) cos(phi), -sin(phi))
    RotationOrder.YXZ: _Extraction(
        PLUS_K,
        PLUS_J,
        _Z,
        lambda v1, v2: (
            math.atan2(v1[_X], v1[_Z]),
            -math.asin(v2[_Z]),
            math.atan2(v2[_X], v2[_Y]),
        ),
    ),
    # r(+I) = (cos(psi) cos(theta), sin(psi), -cos(psi) sin(theta))
    # r^-1(+J) = (sin(psi), cos(phi) cos(psi), -sin(phi) cos(psi))
    RotationOrder.YZX: _Extraction(
        PLUS_I,
        PLUS_J,
        _X,
        lambda v1, v2: (
            math.atan2(-v1[_Z], v1[_X]),
            math.asin(v2[_X]),
            math.atan2(-v2[_Z], v2[_Y]),
        ),
    ),
    # r(+J) = (-cos(phi) sin(psi), cos(phi) cos(psi), sin(phi))
    # r^-1(+K) = (-sin(theta) cos(phi), sin(phi), cos(theta) cos(phi))
    RotationOrder.ZXY: _Extraction(
        PLUS_J,
        PLUS_K,
        _Y,
        lambda v1, v2: (
            math.atan2(-v1[_X], v1[_Y]),
            math.asin(v2[_Y]),
            math.atan2(-v2[_X], v2[_Z]),
        ),
    ),
    # r(+I) = (cos(theta) cos(psi), cos(theta) sin(psi), -sin(theta))
    # r^-1(+K) = (-sin(theta), sin(phi) cos(theta), cos(phi) cos(theta))
    RotationOrder.ZYX: _Extraction(
        PLUS_I,
        PLUS_K,
        _X,
        lambda v1, v2: (
            math.atan2(v1[_Y], v1[_X]),
            -math.asin(v2[_X]),
            math.atan2(v2[_Y], v2[_Z]),
        ),
    ),
    # r(+I) = (cos(theta), sin(phi1) sin(theta), -cos(phi1) sin(theta))
    # r^-1(+I) = (cos(theta), sin(theta) sin(phi2), sin(theta) cos(phi2))
    RotationOrder.XYX: _Extraction(
        PLUS_I,
        PLUS_I,
        _X,
        lambda v1, v2: (
            math.atan2(v1[_Y], -v1[_Z]),
            math.acos(v2[_X]),
            math.atan2(v2[_Y], v2[_Z]),
        ),
    ),
    # r(+I) = (cos(psi), cos(phi1) sin(psi), sin(phi1) sin(psi))
    # r^-1(+I) = (cos(psi), -sin(psi) cos(phi2), sin(psi) sin(phi2))
    RotationOrder.XZX: _Extraction(
        PLUS_I,
        PLUS_I,
        _X,
        lambda v1, v2: (
            math.atan2(v1[_Z], v1[_Y]),
            math.acos(v2[_X]),
            math.atan2(v2[_Z], -v2[_Y]),
        ),
    ),
    # r(+J) = (sin(theta1) sin(phi), cos(phi), cos(theta1) sin(phi))
    # r^-1(+J) = (sin(phi) sin(theta2), cos(phi), -sin(phi) cos(theta2))
    RotationOrder.YXY: _Extraction(
        PLUS_J,
        PLUS_J,
        _Y,
        lambda v1, v2: (
            math.atan2(v1[_X], v1[_Z]),
            math.acos(v2[_Y]),
            math.atan2(v2[_X], -v2[_Z]),
        ),
    ),
    # r(+J) = (-cos(theta1) sin(psi), cos(psi), sin(theta1) sin(psi))
    # r^-1(+J) = (sin(psi) cos(theta2), cos(psi), sin(psi) sin(theta2))
    RotationOrder.YZY: _Extraction(
        PLUS_J,
        PLUS_J,
        _Y,
        lambda v1, v2: (
            math.atan2(v1[_Z], -v1[_X]),
            math.acos(v2[_Y]),
            math.atan2(v2[_Z], v2[_X]),
        ),
    ),
    # r(+K) = (sin(psi1) sin(phi), -cos(psi1) sin(phi), cos(phi))
    # r^-1(+K) = (sin(phi) sin(psi2), sin(phi) cos(psi2), cos(phi))
    RotationOrder.ZXZ: _Extraction(
        PLUS_K,
        PLUS_K,
        _Z,
        lambda v1, v2: (
            math.atan2(v1[_X], -v1[_Y]),
            math.acos(v2[_Z]),
            math.atan2(v2[_X], v2[_Y]),
        ),
    ),
    # r(+K) = (cos(psi1) sin(theta), sin(psi1) sin(theta), cos(theta))
    # r^-1(+K) = (-sin(theta) cos(psi2), sin(theta) sin(psi2), cos(theta))
    RotationOrder.ZYZ: _Extraction(
        PLUS_K,
        PLUS_K,
        _Z,
        lambda v1, v2: (
            math.atan2(v1[_Y], v1[_X]),
            math.acos(v2[_Z]),
            math.atan2(v2[_Y], -v2[_X]),
        ),
    ),
}


def is_singular(rotation: Rotation, order: RotationOrder) -> bool:
    """Return True if the angles of the given order cannot be recovered."""
    extraction: _Extraction = _EXTRACTIONS[order]
    v2: NDArray[np.float64] = rotation.apply_inverse_to(extraction.v2_basis)
    return abs(float(v2[extraction.singular_index])) > SINGULARITY_LIMIT


def extract_angles(rotation: Rotation, order: RotationOrder) -> Optional[EulerAngles]:
    """
    Recover the angle triple of a rotation for the given order

    Returns:
        The angles (alpha1, alpha2, alpha3) in radians, or None near the
        singularity of the order
    """
    extraction: _Extraction = _EXTRACTIONS[order]

    v1: NDArray[np.float64] = rotation.apply_to(extraction.v1_basis)
    v2: NDArray[np.float64] = rotation.apply_inverse_to(extraction.v2_basis)

    if abs(float(v2[extraction.singular_index])) > SINGULARITY_LIMIT:
        return None

    alpha1, alpha2, alpha3 = extraction.formula(v1, v2)
    return (float(alpha1), float(alpha2), float(alpha3))
