################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Tests for Cardan and Euler angle extraction."""

from __future__ import annotations

import math

import numpy as np
import pytest

from oasis_tf.math_utils.euler_codec import EulerAngles
from oasis_tf.math_utils.euler_codec import extract_angles
from oasis_tf.math_utils.euler_codec import is_singular
from oasis_tf.math_utils.rotation import Rotation
from oasis_tf.math_utils.rotation_order import RotationOrder


CARDAN_ORDERS: list[RotationOrder] = [
    order for order in RotationOrder if not order.is_euler
]
EULER_ORDERS: list[RotationOrder] = [order for order in RotationOrder if order.is_euler]


@pytest.mark.parametrize("order", CARDAN_ORDERS)
@pytest.mark.parametrize("alpha2", [-1.2, -0.4, 0.0, 0.4, 1.5])
def test_cardan_roundtrip(order: RotationOrder, alpha2: float) -> None:
    """Cardan angles are recovered away from gimbal lock."""
    r: Rotation = Rotation.from_euler_angles(order, 0.3, alpha2, -0.7)
    angles: EulerAngles | None = r.euler_angles(order)
    assert angles is not None
    assert np.allclose(angles, (0.3, alpha2, -0.7), atol=1e-8)


@pytest.mark.parametrize("order", EULER_ORDERS)
@pytest.mark.parametrize("alpha2", [0.1, 0.8, 1.6, 2.5, 3.0])
def test_euler_roundtrip(order: RotationOrder, alpha2: float) -> None:
    """Euler angles are recovered away from the singular middle angles."""
    r: Rotation = Rotation.from_euler_angles(order, -2.1, alpha2, 1.2)
    angles: EulerAngles | None = extract_angles(r, order)
    assert angles is not None
    assert np.allclose(angles, (-2.1, alpha2, 1.2), atol=1e-8)


@pytest.mark.parametrize("order", CARDAN_ORDERS)
def test_cardan_gimbal_lock(order: RotationOrder) -> None:
    """A quarter turn about the middle axis has no Cardan angles."""
    r: Rotation = Rotation.from_euler_angles(order, 0.2, math.pi / 2.0, 0.1)
    assert is_singular(r, order)
    assert r.euler_angles(order) is None


@pytest.mark.parametrize("order", EULER_ORDERS)
@pytest.mark.parametrize("alpha2", [0.0, math.pi])
def test_euler_singularity(order: RotationOrder, alpha2: float) -> None:
    """Middle angles of 0 or pi have no Euler angles."""
    r: Rotation = Rotation.from_euler_angles(order, 0.2, alpha2, 0.1)
    assert r.euler_angles(order) is None


def test_single_axis_rotation() -> None:
    """A pure yaw shows up in the first angle of ZYX."""
    r: Rotation = Rotation.from_axis_angle(np.array([0.0, 0.0, 1.0]), 0.9)
    angles: EulerAngles | None = r.euler_angles(RotationOrder.ZYX)
    assert angles is not None
    assert np.allclose(angles, (0.9, 0.0, 0.0))


def test_rotation_order_axes() -> None:
    """Orders expose their axes and kind."""
    order: RotationOrder = RotationOrder.ZYX
    assert np.allclose(order.a1, [0.0, 0.0, 1.0])
    assert np.allclose(order.a2, [0.0, 1.0, 0.0])
    assert np.allclose(order.a3, [1.0, 0.0, 0.0])
    assert not order.is_euler
    assert RotationOrder.ZXZ.is_euler
    assert str(RotationOrder.XYX) == "XYX"
    assert len(CARDAN_ORDERS) == 6
    assert len(EULER_ORDERS) == 6
