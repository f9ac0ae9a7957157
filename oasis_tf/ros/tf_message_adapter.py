################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Helpers for buffering transforms from TF messages"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from oasis_tf.math_utils.rotation import Rotation
from oasis_tf.math_utils.rotation import RotationError
from oasis_tf.tf.frame_ids import FrameIdError
from oasis_tf.tf.frame_transform import FrameTransform
from oasis_tf.tf.frame_transform import FrameTransformError
from oasis_tf.tf.transform_buffer import TransformBuffer
from oasis_tf.timing.tf_time import TfTime
from oasis_tf.timing.tf_time import TfTimeError


if TYPE_CHECKING:
    from builtin_interfaces.msg import Time as TimeMsg
    from geometry_msgs.msg import TransformStamped as TransformStampedMsg
    from tf2_msgs.msg import TFMessage as TFMessageMsg


_LOG: logging.Logger = logging.getLogger(__name__)


def _time_from_msg(stamp: TimeMsg) -> TfTime:
    return TfTime(sec=int(stamp.sec), nanosec=int(stamp.nanosec))


def transform_from_msg(msg: TransformStampedMsg) -> FrameTransform:
    translation: np.ndarray = np.array(
        [
            msg.transform.translation.x,
            msg.transform.translation.y,
            msg.transform.translation.z,
        ],
        dtype=np.float64,
    )
    rotation: Rotation = Rotation.from_xyzw(
        float(msg.transform.rotation.x),
        float(msg.transform.rotation.y),
        float(msg.transform.rotation.z),
        float(msg.transform.rotation.w),
    )

    return FrameTransform(
        parent_frame=msg.header.frame_id,
        child_frame=msg.child_frame_id,
        translation=translation,
        rotation=rotation,
        stamp=_time_from_msg(msg.header.stamp),
    )


def ingest_tf_message(buffer: TransformBuffer, msg: TFMessageMsg) -> int:
    """
    Buffer every valid transform of a TF message

    Invalid records are skipped with a warning. The valid ones are inserted
    in one batch.

    Returns:
        The number of transforms inserted
    """
    transforms: list[FrameTransform] = []

    for record in msg.transforms:
        try:
            transforms.append(transform_from_msg(record))
        except (
            FrameIdError,
            FrameTransformError,
            RotationError,
            TfTimeError,
            TypeError,
            ValueError,
        ) as exc:
            _LOG.warning(
                "Skipping transform %r -> %r: %s",
                getattr(record.header, "frame_id", None),
                getattr(record, "child_frame_id", None),
                exc,
            )

    return buffer.insert_many(transforms)
