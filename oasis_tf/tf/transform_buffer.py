################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Thread-safe, time-windowed store of frame transforms.

Transforms are kept per (parent, child) frame pair, newest first. On every
insert the oldest entries of the pair are evicted while they are more than
the horizon older than the newly inserted one. Timestamps are assumed to
arrive in non-decreasing order per pair; an older sample arriving late is
stored at the head and eviction compares against it.
"""

from __future__ import annotations

import logging
import math
import threading
from collections import deque
from typing import Iterable
from typing import Optional
from typing import Union

import numpy as np
from numpy.typing import NDArray

from oasis_tf.config.tf_params import BufferParams
from oasis_tf.config.tf_params import TfParamsError
from oasis_tf.math_utils.rotation import Rotation
from oasis_tf.math_utils.rotation import RotationError
from oasis_tf.tf.frame_ids import FrameIdError
from oasis_tf.tf.frame_ids import canonical_frame_id
from oasis_tf.tf.frame_transform import FrameTransform
from oasis_tf.tf.frame_transform import FrameTransformError
from oasis_tf.timing.tf_time import TfTime
from oasis_tf.timing.tf_time import TfTimeError
from oasis_tf.timing.tf_time import diff_sec
from oasis_tf.timing.tf_time import from_seconds


_LOG: logging.Logger = logging.getLogger(__name__)


# Key of a buffered sequence
FramePair = tuple[str, str]

# Timestamps accepted at the buffer surface
StampLike = Union[TfTime, tuple[int, int]]


class TransformBufferError(Exception):
    """Raised when a transform cannot be buffered."""


class TransformBuffer:
    """
    Store recent transforms per frame pair and look them up by time

    All operations hold one lock for their whole duration, so the buffer can
    be fed from one thread and queried from others.
    """

    def __init__(self, params: Optional[BufferParams] = None) -> None:
        buffer_params: BufferParams = params if params is not None else BufferParams()
        try:
            buffer_params.validate()
        except TfParamsError as exc:
            raise TransformBufferError(str(exc)) from exc

        self._params: BufferParams = buffer_params
        self._lock: threading.Lock = threading.Lock()
        self._transforms: dict[FramePair, deque[FrameTransform]] = {}

    @property
    def params(self) -> BufferParams:
        return self._params

    def __len__(self) -> int:
        """Return the number of known frame pairs."""
        with self._lock:
            return len(self._transforms)

    ############################################################################
    # Insertion
    ############################################################################

    def insert(
        self,
        parent_frame_id: str,
        child_frame_id: str,
        translation: NDArray[np.float64],
        rotation_xyzw: NDArray[np.float64],
        stamp: StampLike,
    ) -> FrameTransform:
        """
        Buffer one decoded pose record

        Args:
            parent_frame_id: Parent frame, relative or absolute
            child_frame_id: Child frame, relative or absolute
            translation: Child origin in the parent frame, XYZ order
            rotation_xyzw: Rotation quaternion in ROS (x, y, z, w) order
            stamp: Source timestamp as a TfTime or (sec, nanosec)

        Returns:
            The buffered transform

        Raises:
            TransformBufferError: If the record is malformed
        """
        transform: FrameTransform = _build_transform(
            parent_frame_id, child_frame_id, translation, rotation_xyzw, stamp
        )
        self.insert_transform(transform)
        return transform

    def insert_transform(self, transform: FrameTransform) -> None:
        """Buffer an already constructed transform."""
        if not isinstance(transform, FrameTransform):
            raise TransformBufferError("transform must be a FrameTransform")

        with self._lock:
            self._insert_locked(transform)

    def insert_many(self, transforms: Iterable[FrameTransform]) -> int:
        """
        Buffer a batch of transforms atomically

        Returns:
            The number of transforms inserted
        """
        batch: list[FrameTransform] = list(transforms)
        for transform in batch:
            if not isinstance(transform, FrameTransform):
                raise TransformBufferError("transforms must be FrameTransforms")

        with self._lock:
            for transform in batch:
                self._insert_locked(transform)

        return len(batch)

    def _insert_locked(self, transform: FrameTransform) -> None:
        key: FramePair = transform.frame_pair

        sequence: Optional[deque[FrameTransform]] = self._transforms.get(key)
        if sequence is None:
            sequence = deque()
            self._transforms[key] = sequence
            _LOG.debug("New frame pair %s -> %s", key[0], key[1])

        sequence.appendleft(transform)

        evicted: int = 0
        while (
            len(sequence) > 1
            and diff_sec(sequence[0].stamp, sequence[-1].stamp)
            > self._params.horizon_sec
        ):
            sequence.pop()
            evicted += 1

        max_entries: Optional[int] = self._params.max_entries
        if max_entries is not None:
            while len(sequence) > max_entries:
                sequence.pop()
                evicted += 1

        if evicted:
            _LOG.debug(
                "Evicted %d transforms for %s -> %s, %d remain",
                evicted,
                key[0],
                key[1],
                len(sequence),
            )

    ############################################################################
    # Lookup
    ############################################################################

    def lookup_latest(
        self, parent_frame_id: str, child_frame_id: str
    ) -> Optional[FrameTransform]:
        """
        Return the transform with the newest stamp for a frame pair

        Returns:
            The newest transform, or None if the pair is unknown
        """
        key: FramePair = _frame_pair(parent_frame_id, child_frame_id)

        with self._lock:
            sequence: Optional[deque[FrameTransform]] = self._transforms.get(key)
            if not sequence:
                return None

            latest: FrameTransform = sequence[0]
            for transform in sequence:
                if transform.stamp > latest.stamp:
                    latest = transform

            return latest

    def lookup_at_time(
        self,
        parent_frame_id: str,
        child_frame_id: str,
        query_time: Union[TfTime, float],
    ) -> Optional[FrameTransform]:
        """
        Return the transform closest in time to query_time

        Args:
            parent_frame_id: Parent frame, relative or absolute
            child_frame_id: Child frame, relative or absolute
            query_time: Time as a TfTime or in seconds

        Returns:
            The closest transform, or None if the pair is unknown or no
            transform lies within the match threshold
        """
        key: FramePair = _frame_pair(parent_frame_id, child_frame_id)
        query: TfTime = _as_query_time(query_time)

        with self._lock:
            sequence: Optional[deque[FrameTransform]] = self._transforms.get(key)
            if not sequence:
                return None

            best: Optional[FrameTransform] = None
            best_diff: float = math.inf
            for transform in sequence:
                time_diff: float = abs(diff_sec(transform.stamp, query))
                if time_diff < best_diff:
                    best = transform
                    best_diff = time_diff

            if best_diff > self._params.match_threshold_sec:
                return None

            return best

    def history(
        self, parent_frame_id: str, child_frame_id: str
    ) -> list[FrameTransform]:
        """Return the buffered transforms of a frame pair, newest first."""
        key: FramePair = _frame_pair(parent_frame_id, child_frame_id)

        with self._lock:
            return list(self._transforms.get(key, ()))

    ############################################################################
    # Management
    ############################################################################

    def frame_pairs(self) -> list[FramePair]:
        """Return the known (parent, child) frame pairs, sorted."""
        with self._lock:
            return sorted(self._transforms)

    def log_frame_pairs(self) -> None:
        """Log the known frame pairs and their number of transforms."""
        with self._lock:
            snapshot: list[tuple[FramePair, int]] = sorted(
                (key, len(sequence)) for key, sequence in self._transforms.items()
            )

        _LOG.info("Buffered frame pairs: %d", len(snapshot))
        for key, count in snapshot:
            _LOG.info("  %s -> %s (%d transforms)", key[0], key[1], count)

    def remove_pair(self, parent_frame_id: str, child_frame_id: str) -> bool:
        """
        Forget all transforms of a frame pair

        Returns:
            True if the pair was known
        """
        key: FramePair = _frame_pair(parent_frame_id, child_frame_id)

        with self._lock:
            return self._transforms.pop(key, None) is not None

    def clear(self) -> None:
        """Forget all transforms."""
        with self._lock:
            self._transforms.clear()


def _frame_pair(parent_frame_id: str, child_frame_id: str) -> FramePair:
    return (canonical_frame_id(parent_frame_id), canonical_frame_id(child_frame_id))


def _as_stamp(stamp: StampLike) -> TfTime:
    if isinstance(stamp, TfTime):
        return stamp
    if isinstance(stamp, tuple) and len(stamp) == 2:
        return TfTime(sec=stamp[0], nanosec=stamp[1])
    raise TfTimeError("stamp must be a TfTime or (sec, nanosec)")


def _as_query_time(query_time: Union[TfTime, float]) -> TfTime:
    if isinstance(query_time, TfTime):
        return query_time
    if isinstance(query_time, bool) or not isinstance(query_time, (int, float)):
        raise TransformBufferError("query_time must be a TfTime or seconds")
    try:
        return from_seconds(float(query_time))
    except TfTimeError as exc:
        raise TransformBufferError(str(exc)) from exc


def _build_transform(
    parent_frame_id: str,
    child_frame_id: str,
    translation: NDArray[np.float64],
    rotation_xyzw: NDArray[np.float64],
    stamp: StampLike,
) -> FrameTransform:
    try:
        quat: NDArray[np.float64] = np.asarray(rotation_xyzw, dtype=float)
        if quat.shape != (4,):
            raise TransformBufferError("rotation_xyzw must be shape (4,)")

        rotation: Rotation = Rotation.from_xyzw(quat[0], quat[1], quat[2], quat[3])

        return FrameTransform(
            parent_frame=parent_frame_id,
            child_frame=child_frame_id,
            translation=translation,
            rotation=rotation,
            stamp=_as_stamp(stamp),
        )
    except (
        FrameIdError,
        FrameTransformError,
        RotationError,
        TfTimeError,
        TypeError,
        ValueError,
    ) as exc:
        raise TransformBufferError(f"invalid transform record: {exc}") from exc
