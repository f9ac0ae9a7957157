################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Timestamped rigid transforms between named frames."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from oasis_tf.math_utils.rotation import Rotation
from oasis_tf.math_utils.vectors import PLUS_I
from oasis_tf.tf.frame_ids import canonical_frame_id
from oasis_tf.tf.frame_ids import relative_frame_id
from oasis_tf.timing.tf_time import TfTime


class FrameTransformError(Exception):
    """Raised when transform fields are invalid."""


@dataclass(frozen=True)
class FrameTransform:
    """
    Pose of a child frame expressed in its parent frame

    Applying the transform to a point given in the child frame yields the
    same point in the parent frame.

    Fields:
        parent_frame: Canonical parent frame id
        child_frame: Canonical child frame id
        translation: Child origin in the parent frame, read-only
        rotation: Rotation from the child frame to the parent frame
        stamp: Source timestamp of the transform
    """

    parent_frame: str
    child_frame: str
    translation: NDArray[np.float64]
    rotation: Rotation
    stamp: TfTime

    def __post_init__(self) -> None:
        """Validate fields and normalize frame ids."""
        object.__setattr__(self, "parent_frame", canonical_frame_id(self.parent_frame))
        object.__setattr__(self, "child_frame", canonical_frame_id(self.child_frame))

        try:
            translation: NDArray[np.float64] = np.array(self.translation, dtype=float)
        except (TypeError, ValueError) as exc:
            raise FrameTransformError(f"invalid translation: {exc}") from exc
        if translation.shape != (3,):
            raise FrameTransformError("translation must be shape (3,)")
        if not np.all(np.isfinite(translation)):
            raise FrameTransformError("translation must be finite")
        translation.setflags(write=False)
        object.__setattr__(self, "translation", translation)

        if not isinstance(self.rotation, Rotation):
            raise FrameTransformError("rotation must be a Rotation")
        if not isinstance(self.stamp, TfTime):
            raise FrameTransformError("stamp must be a TfTime")

    @staticmethod
    def identity(parent_frame: str, child_frame: str, stamp: TfTime) -> FrameTransform:
        """Return a transform with no translation and no rotation."""
        return FrameTransform(
            parent_frame=parent_frame,
            child_frame=child_frame,
            translation=np.zeros(3, dtype=float),
            rotation=Rotation.identity(),
            stamp=stamp,
        )

    @property
    def frame_pair(self) -> tuple[str, str]:
        """Return the (parent, child) key of this transform."""
        return (self.parent_frame, self.child_frame)

    def child_frame_relative(self) -> str:
        """Return the child frame id without its leading separator."""
        return relative_frame_id(self.child_frame)

    def transform_point(self, x: NDArray[np.float64]) -> NDArray[np.float64]:
        """Map a point from the child frame into the parent frame."""
        vec: NDArray[np.float64] = np.asarray(x, dtype=float)
        if vec.shape != (3,):
            raise FrameTransformError("x must be shape (3,)")
        return self.rotation.apply_to(vec) + self.translation

    def transform_vector(self, v: NDArray[np.float64]) -> NDArray[np.float64]:
        """Rotate a direction from the child frame into the parent frame."""
        vec: NDArray[np.float64] = np.asarray(v, dtype=float)
        if vec.shape != (3,):
            raise FrameTransformError("v must be shape (3,)")
        return self.rotation.apply_to(vec)

    def inverse(self) -> FrameTransform:
        """Return the transform from the child frame back to the parent frame."""
        rotation_inv: Rotation = self.rotation.revert()
        translation_inv: NDArray[np.float64] = -rotation_inv.apply_to(self.translation)
        return FrameTransform(
            parent_frame=self.child_frame,
            child_frame=self.parent_frame,
            translation=translation_inv,
            rotation=rotation_inv,
            stamp=self.stamp,
        )

    def yaw(self) -> float:
        """Return the heading of the child x axis in the parent xy plane."""
        heading: NDArray[np.float64] = self.rotation.apply_to(PLUS_I)
        return math.atan2(float(heading[1]), float(heading[0]))
