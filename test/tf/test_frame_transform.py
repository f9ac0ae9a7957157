################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Tests for frame transforms and frame ids."""

from __future__ import annotations

import math

import numpy as np
import pytest
from numpy.typing import NDArray

from oasis_tf.math_utils.rotation import Rotation
from oasis_tf.tf.frame_ids import FrameIdError
from oasis_tf.tf.frame_ids import canonical_frame_id
from oasis_tf.tf.frame_ids import relative_frame_id
from oasis_tf.tf.frame_transform import FrameTransform
from oasis_tf.tf.frame_transform import FrameTransformError
from oasis_tf.timing.tf_time import TfTime


def _make_transform() -> FrameTransform:
    return FrameTransform(
        parent_frame="map",
        child_frame="base_link",
        translation=np.array([1.0, 2.0, 0.5]),
        rotation=Rotation.from_axis_angle(np.array([0.0, 0.0, 1.0]), math.pi / 2.0),
        stamp=TfTime(10, 0),
    )


def test_frame_ids() -> None:
    """Frame ids convert between relative and absolute form."""
    assert canonical_frame_id("map") == "/map"
    assert canonical_frame_id("/map") == "/map"
    assert relative_frame_id("/base_link") == "base_link"
    assert relative_frame_id("base_link") == "base_link"
    with pytest.raises(FrameIdError):
        canonical_frame_id("")
    with pytest.raises(FrameIdError):
        canonical_frame_id(None)  # type: ignore[arg-type]


def test_frames_are_canonical() -> None:
    """Frame names are stored with a leading separator."""
    transform: FrameTransform = _make_transform()
    assert transform.parent_frame == "/map"
    assert transform.child_frame == "/base_link"
    assert transform.frame_pair == ("/map", "/base_link")
    assert transform.child_frame_relative() == "base_link"


def test_translation_is_copied_and_read_only() -> None:
    """The stored translation is detached from the caller's array."""
    source: NDArray[np.float64] = np.array([1.0, 2.0, 3.0])
    transform: FrameTransform = FrameTransform(
        parent_frame="a",
        child_frame="b",
        translation=source,
        rotation=Rotation.identity(),
        stamp=TfTime(0, 0),
    )
    source[0] = 9.0
    assert transform.translation[0] == 1.0
    with pytest.raises(ValueError):
        transform.translation[0] = 5.0


def test_transform_point_and_inverse() -> None:
    """The inverse maps transformed points back."""
    transform: FrameTransform = _make_transform()
    point: NDArray[np.float64] = np.array([1.0, 0.0, 0.0])
    mapped: NDArray[np.float64] = transform.transform_point(point)
    assert np.allclose(mapped, [1.0, 3.0, 0.5])

    inverse: FrameTransform = transform.inverse()
    assert inverse.parent_frame == "/base_link"
    assert inverse.child_frame == "/map"
    assert np.allclose(inverse.transform_point(mapped), point)


def test_transform_vector_ignores_translation() -> None:
    """Directions are only rotated."""
    transform: FrameTransform = _make_transform()
    assert np.allclose(transform.transform_vector(np.array([1.0, 0.0, 0.0])), [0, 1, 0])


def test_yaw() -> None:
    """Yaw is the heading of the child x axis."""
    assert math.isclose(_make_transform().yaw(), math.pi / 2.0)


def test_invalid_fields_raise() -> None:
    """Malformed translations, rotations and stamps are rejected."""
    with pytest.raises(FrameTransformError):
        FrameTransform("a", "b", np.zeros(2), Rotation.identity(), TfTime(0, 0))
    with pytest.raises(FrameTransformError):
        FrameTransform(
            "a", "b", np.array([0.0, np.nan, 0.0]), Rotation.identity(), TfTime(0, 0)
        )
    with pytest.raises(FrameTransformError):
        FrameTransform(
            "a",
            "b",
            np.zeros(3),
            None,  # type: ignore[arg-type]
            TfTime(0, 0),
        )
    with pytest.raises(FrameTransformError):
        FrameTransform(
            "a",
            "b",
            np.zeros(3),
            Rotation.identity(),
            1.0,  # type: ignore[arg-type]
        )
    with pytest.raises(FrameIdError):
        FrameTransform("", "b", np.zeros(3), Rotation.identity(), TfTime(0, 0))
