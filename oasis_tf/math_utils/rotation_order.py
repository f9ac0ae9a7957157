################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Axis sequences for Cardan and Euler angle representations."""

from __future__ import annotations

import enum

import numpy as np
from numpy.typing import NDArray

from .vectors import PLUS_I
from .vectors import PLUS_J
from .vectors import PLUS_K


_AXES: dict[str, NDArray[np.float64]] = {
    "X": PLUS_I,
    "Y": PLUS_J,
    "Z": PLUS_K,
}


class RotationOrder(enum.Enum):
    """
    Enumerates the supported three-axis rotation sequences

    Cardan orders use three distinct axes. Euler orders reuse the first axis
    as the third one.

    Attributes:
        XYZ, XZY, YXZ, YZX, ZXY, ZYX: Cardan orders
        XYX, XZX, YXY, YZY, ZXZ, ZYZ: Euler orders
    """

    XYZ = "XYZ"
    XZY = "XZY"
    YXZ = "YXZ"
    YZX = "YZX"
    ZXY = "ZXY"
    ZYX = "ZYX"
    XYX = "XYX"
    XZX = "XZX"
    YXY = "YXY"
    YZY = "YZY"
    ZXZ = "ZXZ"
    ZYZ = "ZYZ"

    @property
    def a1(self) -> NDArray[np.float64]:
        """Axis of the first rotation."""
        return _AXES[self.value[0]]

    @property
    def a2(self) -> NDArray[np.float64]:
        """Axis of the second rotation."""
        return _AXES[self.value[1]]

    @property
    def a3(self) -> NDArray[np.float64]:
        """Axis of the third rotation."""
        return _AXES[self.value[2]]

    @property
    def is_euler(self) -> bool:
        """Return True when the first and third axes are the same."""
        return self.value[0] == self.value[2]

    def __str__(self) -> str:
        return self.value
