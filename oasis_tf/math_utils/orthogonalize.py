################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Iterative correction of nearly orthogonal 3x3 matrices."""

from __future__ import annotations

from typing import Optional

import numpy as np
from numpy.typing import NDArray


# Maximum number of correction steps before giving up
ORTHOGONALIZATION_MAX_ITERATIONS: int = 10

# Default convergence threshold on the change of the squared Frobenius norm of
# the correction between two successive steps
ORTHOGONALIZATION_THRESHOLD: float = 1e-10


def orthogonalize_matrix(
    m: NDArray[np.float64],
    threshold: float = ORTHOGONALIZATION_THRESHOLD,
    max_iterations: int = ORTHOGONALIZATION_MAX_ITERATIONS,
) -> Optional[NDArray[np.float64]]:
    """
    Compute the orthogonal matrix closest to m

    Iterates X(n+1) = X(n) - 0.5 * (X(n) M^T X(n) - M) starting from M. The
    correction X(n+1) - M is tracked through its squared Frobenius norm, and
    the iteration stops once that norm changes by at most threshold.

    Args:
        m: Nearly orthogonal 3x3 matrix
        threshold: Convergence threshold on the change of the correction norm
        max_iterations: Maximum number of correction steps

    Returns:
        The corrected matrix, or None if it did not converge
    """
    mat: NDArray[np.float64] = np.asarray(m, dtype=float)
    if mat.shape != (3, 3):
        raise ValueError("m must be shape (3, 3)")

    x: NDArray[np.float64] = mat.copy()
    fn: float = 0.0

    for _ in range(max_iterations):
        # Mt.Xn
        mx: NDArray[np.float64] = mat.T @ x

        x_next: NDArray[np.float64] = x - 0.5 * (x @ mx - mat)

        correction: NDArray[np.float64] = x_next - mat
        fn_next: float = float(np.sum(correction * correction))

        if abs(fn_next - fn) <= threshold:
            return x_next

        x = x_next
        fn = fn_next

    return None
