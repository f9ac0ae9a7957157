################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Frame id normalization.

Frame ids are stored in canonical absolute form with a leading "/" so that
"base_link" and "/base_link" name the same frame.
"""

from __future__ import annotations


# Separator marking an absolute frame id
FRAME_SEPARATOR: str = "/"


class FrameIdError(ValueError):
    """Raised when a frame id is empty or not a string."""


def canonical_frame_id(frame_id: str) -> str:
    """Return frame_id with a leading separator."""
    _require_frame_id(frame_id)
    if frame_id.startswith(FRAME_SEPARATOR):
        return frame_id
    return FRAME_SEPARATOR + frame_id


def relative_frame_id(frame_id: str) -> str:
    """Return frame_id with one leading separator removed."""
    _require_frame_id(frame_id)
    if frame_id.startswith(FRAME_SEPARATOR):
        return frame_id[len(FRAME_SEPARATOR) :]
    return frame_id


def _require_frame_id(frame_id: object) -> None:
    if not isinstance(frame_id, str):
        raise FrameIdError(f"frame id must be a str, got {type(frame_id).__name__}")
    if frame_id == "" or frame_id == FRAME_SEPARATOR:
        raise FrameIdError("frame id must be non-empty")
