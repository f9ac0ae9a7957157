################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Chaining of frame transforms."""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from oasis_tf.math_utils.rotation import Rotation
from oasis_tf.tf.frame_transform import FrameTransform
from oasis_tf.timing.tf_time import TfTime


_LOG: logging.Logger = logging.getLogger(__name__)


def combine(
    t1: Optional[FrameTransform], t2: Optional[FrameTransform]
) -> Optional[FrameTransform]:
    """
    Chain two transforms

    If t1 maps frame B into frame A and t2 maps frame C into frame B, the
    result maps frame C into frame A. The stamp of the result is the older
    of the two stamps.

    Args:
        t1: Transform A <- B
        t2: Transform B <- C

    Returns:
        The transform A <- C, or None if either input is None
    """
    if t1 is None or t2 is None:
        return None

    if t1.child_frame != t2.parent_frame:
        _LOG.debug(
            "Combining %s -> %s with %s -> %s: frames do not chain",
            t1.parent_frame,
            t1.child_frame,
            t2.parent_frame,
            t2.child_frame,
        )

    translation: NDArray[np.float64] = t1.translation + t1.rotation.apply_to(
        t2.translation
    )
    rotation: Rotation = t1.rotation.apply_to_rotation(t2.rotation)
    stamp: TfTime = min(t1.stamp, t2.stamp)

    return FrameTransform(
        parent_frame=t1.parent_frame,
        child_frame=t2.child_frame,
        translation=translation,
        rotation=rotation,
        stamp=stamp,
    )
