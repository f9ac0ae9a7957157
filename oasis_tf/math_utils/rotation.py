################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Unit quaternion rotations.

A rotation is stored as a unit quaternion (q0, q1, q2, q3) where q0 is the
scalar part. The vector part follows the axis-angle convention
q_vec = -sin(angle / 2) * axis, which makes apply_to an active right-handed
rotation: a positive angle about +Z maps +X onto +Y.

Quaternions arriving from ROS messages use the Hamilton (x, y, z, w) order
with q_vec = +sin(angle / 2) * axis, see from_xyzw() and to_xyzw().
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from oasis_tf.config.tf_params import OrthogonalizationParams

from .euler_codec import EulerAngles
from .euler_codec import extract_angles
from .orthogonalize import ORTHOGONALIZATION_MAX_ITERATIONS
from .orthogonalize import ORTHOGONALIZATION_THRESHOLD
from .orthogonalize import orthogonalize_matrix
from .rotation_order import RotationOrder
from .vectors import PLUS_I
from .vectors import as_vector3
from .vectors import orthogonal


# Branch selection limit for the matrix conversion, guarantees a divisor of
# at least 0.45 in magnitude
_MATRIX_BRANCH_LIMIT: float = -0.19

# Relative dot product below which two vectors are treated as antipodal
_ANTIPODAL_LIMIT: float = 2.0e-15 - 1.0

# Scalar magnitude above which the angle is computed from the vector part
_ANGLE_ASIN_LIMIT: float = 0.1


class RotationError(Exception):
    """Raised when a rotation cannot be constructed from its inputs."""


class InvalidRotationMatrixError(RotationError):
    """Raised when a matrix is not close enough to a proper rotation."""


class DegenerateVectorError(RotationError):
    """
    Raised when a vector-based constructor receives degenerate vectors

    Vectors are degenerate when they have zero magnitude, or when the two
    vectors of a pair passed to from_vector_pairs() are colinear.
    """


@dataclass(frozen=True)
class Rotation:
    """
    Rotation stored as a unit quaternion

    Fields:
        q0: Scalar part
        q1: First component of the vector part
        q2: Second component of the vector part
        q3: Third component of the vector part
    """

    q0: float
    q1: float
    q2: float
    q3: float

    def __post_init__(self) -> None:
        """Store the components as Python floats."""
        object.__setattr__(self, "q0", float(self.q0))
        object.__setattr__(self, "q1", float(self.q1))
        object.__setattr__(self, "q2", float(self.q2))
        object.__setattr__(self, "q3", float(self.q3))

    ############################################################################
    # Construction
    ############################################################################

    @staticmethod
    def identity() -> Rotation:
        """Return the identity rotation."""
        return Rotation(1.0, 0.0, 0.0, 0.0)

    @staticmethod
    def from_components(
        q0: float, q1: float, q2: float, q3: float, normalize: bool = False
    ) -> Rotation:
        """
        Create a rotation from quaternion components

        When normalize is set the components are divided by their Euclidean
        norm. The caller guarantees a non-zero norm; a zero norm yields NaN
        components rather than an exception.
        """
        if not normalize:
            return Rotation(q0, q1, q2, q3)

        q: NDArray[np.float64] = np.array([q0, q1, q2, q3], dtype=float)
        with np.errstate(divide="ignore", invalid="ignore"):
            q = q / np.sqrt(np.dot(q, q))

        return Rotation(q[0], q[1], q[2], q[3])

    @staticmethod
    def from_axis_angle(axis: NDArray[np.float64], angle: float) -> Rotation:
        """
        Create a rotation of angle radians about axis

        A zero-magnitude axis yields the identity rotation.
        """
        vec: NDArray[np.float64] = as_vector3(axis, "axis")

        norm: float = float(np.linalg.norm(vec))
        if norm == 0.0:
            return Rotation.identity()

        half_angle: float = -0.5 * float(angle)
        coeff: float = math.sin(half_angle) / norm

        return Rotation(
            math.cos(half_angle), coeff * vec[0], coeff * vec[1], coeff * vec[2]
        )

    @staticmethod
    def from_matrix(
        m: NDArray[np.float64],
        threshold: float = ORTHOGONALIZATION_THRESHOLD,
        max_iterations: int = ORTHOGONALIZATION_MAX_ITERATIONS,
    ) -> Rotation:
        """
        Create a rotation from a 3x3 matrix

        The matrix is first corrected to the closest orthogonal matrix, so
        slightly perturbed inputs are accepted. The result satisfies
        as_matrix() @ v == apply_to(v).

        Args:
            m: Rotation matrix, possibly slightly non-orthogonal
            threshold: Convergence threshold of the orthogonalization
            max_iterations: Maximum number of orthogonalization steps

        Raises:
            InvalidRotationMatrixError: If the matrix is not 3x3, is not
                finite, cannot be orthogonalized, or is a reflection
        """
        try:
            mat: NDArray[np.float64] = np.asarray(m, dtype=float)
        except (TypeError, ValueError) as exc:
            raise InvalidRotationMatrixError(f"invalid matrix: {exc}") from exc

        if mat.shape != (3, 3):
            raise InvalidRotationMatrixError(
                f"matrix must be shape (3, 3), got {mat.shape}"
            )
        if not np.all(np.isfinite(mat)):
            raise InvalidRotationMatrixError("matrix must be finite")

        ort: Optional[NDArray[np.float64]] = orthogonalize_matrix(
            mat, threshold, max_iterations
        )
        if ort is None:
            raise InvalidRotationMatrixError(
                f"unable to orthogonalize matrix in {max_iterations} iterations"
            )

        det: float = float(np.linalg.det(ort))
        if det < 0.0:
            raise InvalidRotationMatrixError(
                f"the closest orthogonal matrix has a negative determinant {det}"
            )

        # There are different ways to compute the quaternion. Each branch
        # computes one component first and divides by it for the others, so
        # pick the first one whose component is large enough
        q0: float
        q1: float
        q2: float
        q3: float
        inv: float

        s: float = float(ort[0, 0] + ort[1, 1] + ort[2, 2])
        if s > _MATRIX_BRANCH_LIMIT:
            q0 = 0.5 * math.sqrt(s + 1.0)
            inv = 0.25 / q0
            q1 = inv * float(ort[1, 2] - ort[2, 1])
            q2 = inv * float(ort[2, 0] - ort[0, 2])
            q3 = inv * float(ort[0, 1] - ort[1, 0])
            return Rotation(q0, q1, q2, q3)

        s = float(ort[0, 0] - ort[1, 1] - ort[2, 2])
        if s > _MATRIX_BRANCH_LIMIT:
            q1 = 0.5 * math.sqrt(s + 1.0)
            inv = 0.25 / q1
            q0 = inv * float(ort[1, 2] - ort[2, 1])
            q2 = inv * float(ort[0, 1] + ort[1, 0])
            q3 = inv * float(ort[0, 2] + ort[2, 0])
            return Rotation(q0, q1, q2, q3)

        s = float(ort[1, 1] - ort[0, 0] - ort[2, 2])
        if s > _MATRIX_BRANCH_LIMIT:
            q2 = 0.5 * math.sqrt(s + 1.0)
            inv = 0.25 / q2
            q0 = inv * float(ort[2, 0] - ort[0, 2])
            q1 = inv * float(ort[0, 1] + ort[1, 0])
            q3 = inv * float(ort[2, 1] + ort[1, 2])
            return Rotation(q0, q1, q2, q3)

        s = float(ort[2, 2] - ort[0, 0] - ort[1, 1])
        q3 = 0.5 * math.sqrt(s + 1.0)
        inv = 0.25 / q3
        q0 = inv * float(ort[0, 1] - ort[1, 0])
        q1 = inv * float(ort[0, 2] + ort[2, 0])
        q2 = inv * float(ort[2, 1] + ort[1, 2])
        return Rotation(q0, q1, q2, q3)

    @staticmethod
    def from_matrix_with_params(
        m: NDArray[np.float64], params: OrthogonalizationParams
    ) -> Rotation:
        """Create a rotation from a 3x3 matrix with configured correction settings."""
        return Rotation.from_matrix(
            m, threshold=params.threshold, max_iterations=params.max_iterations
        )

    @staticmethod
    def from_vector_pairs(
        u1: NDArray[np.float64],
        u2: NDArray[np.float64],
        v1: NDArray[np.float64],
        v2: NDArray[np.float64],
    ) -> Rotation:
        """
        Create the rotation mapping the pair (u1, u2) onto (v1, v2)

        The pairs only need to match up to scale: v1 is rescaled to the norm
        of u1 and v2 is adjusted so that both pairs span the same angle. If
        the inputs are mutually colinear the identity rotation is returned.

        Raises:
            DegenerateVectorError: If a vector has zero magnitude or a pair
                is colinear
        """
        u1_vec: NDArray[np.float64] = as_vector3(u1, "u1")
        u2_vec: NDArray[np.float64] = as_vector3(u2, "u2")
        v1_vec: NDArray[np.float64] = as_vector3(v1, "v1")
        v2_vec: NDArray[np.float64] = as_vector3(v2, "v2")

        u1u1: float = float(np.dot(u1_vec, u1_vec))
        u2u2: float = float(np.dot(u2_vec, u2_vec))
        v1v1: float = float(np.dot(v1_vec, v1_vec))
        v2v2: float = float(np.dot(v2_vec, v2_vec))
        if u1u1 == 0.0 or u2u2 == 0.0 or v1v1 == 0.0 or v2v2 == 0.0:
            raise DegenerateVectorError("vectors must have non-zero magnitude")

        # Rescale v1 so that |v1| = |u1|
        v1_vec = math.sqrt(u1u1 / v1v1) * v1_vec

        # Adjust v2 so that (u1|u2) = (v1|v2) and (v2|v2) = (u2|u2)
        u1u2: float = float(np.dot(u1_vec, u2_vec))
        v1v2: float = float(np.dot(v1_vec, v2_vec))
        coeff_u: float = u1u2 / u1u1
        coeff_v: float = v1v2 / u1u1
        numerator: float = u2u2 - u1u2 * coeff_u
        denominator: float = v2v2 - v1v2 * coeff_v
        if denominator <= 0.0 or numerator <= 0.0:
            raise DegenerateVectorError("vector pairs must not be colinear")
        beta: float = math.sqrt(numerator / denominator)
        alpha: float = coeff_u - beta * coeff_v
        v2_vec = alpha * v1_vec + beta * v2_vec

        u_ref: NDArray[np.float64] = u1_vec
        v_ref: NDArray[np.float64] = v1_vec
        d1: NDArray[np.float64] = v1_vec - u1_vec
        d2: NDArray[np.float64] = v2_vec - u2_vec
        k: NDArray[np.float64] = np.cross(d1, d2)
        c: float = float(np.dot(k, np.cross(u1_vec, u2_vec)))

        if c <= 0.0:
            # The axis lies in the (u1, u2) plane, use the third pair
            u3: NDArray[np.float64] = np.cross(u1_vec, u2_vec)
            v3: NDArray[np.float64] = np.cross(v1_vec, v2_vec)
            d3: NDArray[np.float64] = v3 - u3
            k = np.cross(d1, d3)
            c = float(np.dot(k, np.cross(u1_vec, u3)))

            if c <= 0.0:
                k = np.cross(d2, d3)
                c = float(np.dot(k, np.cross(u2_vec, u3)))

                if c <= 0.0:
                    # Inputs are colinear, any rotation about them fits
                    return Rotation.identity()

                u_ref = u2_vec
                v_ref = v2_vec

        # Vector part
        c = math.sqrt(c)
        q_vec: NDArray[np.float64] = k / (c + c)

        # Scalar part
        k = np.cross(u_ref, q_vec)
        c = float(np.dot(k, k))
        q0: float = float(np.dot(v_ref, k)) / (c + c)

        return Rotation(q0, q_vec[0], q_vec[1], q_vec[2])

    @staticmethod
    def from_vectors(u: NDArray[np.float64], v: NDArray[np.float64]) -> Rotation:
        """
        Create the smallest rotation mapping u onto the direction of v

        Raises:
            DegenerateVectorError: If u or v has zero magnitude
        """
        u_vec: NDArray[np.float64] = as_vector3(u, "u")
        v_vec: NDArray[np.float64] = as_vector3(v, "v")

        norm_product: float = float(np.linalg.norm(u_vec) * np.linalg.norm(v_vec))
        if norm_product == 0.0:
            raise DegenerateVectorError("vectors must have non-zero magnitude")

        dot: float = float(np.dot(u_vec, v_vec))

        if dot < _ANTIPODAL_LIMIT * norm_product:
            # Special case u = -v, half turn about any orthogonal axis
            w: NDArray[np.float64] = orthogonal(u_vec)
            return Rotation(0.0, -w[0], -w[1], -w[2])

        q0: float = math.sqrt(0.5 * (1.0 + dot / norm_product))
        coeff: float = 1.0 / (2.0 * q0 * norm_product)
        q_vec: NDArray[np.float64] = coeff * np.cross(v_vec, u_vec)

        return Rotation(q0, q_vec[0], q_vec[1], q_vec[2])

    @staticmethod
    def from_euler_angles(
        order: RotationOrder, alpha1: float, alpha2: float, alpha3: float
    ) -> Rotation:
        """
        Create a rotation from three elementary rotations

        The rotations about the axes of order are applied right to left: the
        rotation about the third axis first.
        """
        r1: Rotation = Rotation.from_axis_angle(order.a1, alpha1)
        r2: Rotation = Rotation.from_axis_angle(order.a2, alpha2)
        r3: Rotation = Rotation.from_axis_angle(order.a3, alpha3)

        return r1.apply_to_rotation(r2.apply_to_rotation(r3))

    @staticmethod
    def from_xyzw(x: float, y: float, z: float, w: float) -> Rotation:
        """
        Create a rotation from a ROS (x, y, z, w) quaternion

        The message quaternion is normalized.

        Raises:
            RotationError: If the quaternion is not finite or has zero norm
        """
        q: NDArray[np.float64] = np.array([w, -x, -y, -z], dtype=float)
        if not np.all(np.isfinite(q)):
            raise RotationError("quaternion must be finite")

        norm: float = float(np.linalg.norm(q))
        if norm == 0.0:
            raise RotationError("quaternion must have non-zero norm")

        q = q / norm
        return Rotation(q[0], q[1], q[2], q[3])

    ############################################################################
    # Queries
    ############################################################################

    def to_xyzw(self) -> tuple[float, float, float, float]:
        """Return the ROS (x, y, z, w) quaternion of this rotation."""
        return (-self.q1, -self.q2, -self.q3, self.q0)

    def as_array(self) -> NDArray[np.float64]:
        """Return the components as (q0, q1, q2, q3)."""
        return np.array([self.q0, self.q1, self.q2, self.q3], dtype=float)

    def revert(self) -> Rotation:
        """Return the inverse rotation."""
        return Rotation(-self.q0, self.q1, self.q2, self.q3)

    def axis(self) -> NDArray[np.float64]:
        """Return the unit rotation axis, +X for the identity rotation."""
        squared_sine: float = self.q1 * self.q1 + self.q2 * self.q2 + self.q3 * self.q3
        if squared_sine == 0.0:
            return PLUS_I.copy()

        inverse: float
        if self.q0 < 0.0:
            inverse = 1.0 / math.sqrt(squared_sine)
        else:
            inverse = -1.0 / math.sqrt(squared_sine)

        return np.array(
            [inverse * self.q1, inverse * self.q2, inverse * self.q3], dtype=float
        )

    def angle(self) -> float:
        """Return the rotation angle in [0, pi]."""
        if self.q0 < -_ANGLE_ASIN_LIMIT or self.q0 > _ANGLE_ASIN_LIMIT:
            sine: float = math.sqrt(
                self.q1 * self.q1 + self.q2 * self.q2 + self.q3 * self.q3
            )
            return 2.0 * math.asin(min(sine, 1.0))
        if self.q0 < 0.0:
            return 2.0 * math.acos(-self.q0)
        return 2.0 * math.acos(self.q0)

    def euler_angles(self, order: RotationOrder) -> Optional[EulerAngles]:
        """
        Return the angles of this rotation for the given order

        Returns:
            The angles (alpha1, alpha2, alpha3) in radians, or None at the
            singularity of the order
        """
        return extract_angles(self, order)

    def as_matrix(self) -> NDArray[np.float64]:
        """Return the 3x3 matrix M with M @ v == apply_to(v)."""
        q0: float = self.q0
        q1: float = self.q1
        q2: float = self.q2
        q3: float = self.q3

        q0q0: float = q0 * q0
        q0q1: float = q0 * q1
        q0q2: float = q0 * q2
        q0q3: float = q0 * q3
        q1q1: float = q1 * q1
        q1q2: float = q1 * q2
        q1q3: float = q1 * q3
        q2q2: float = q2 * q2
        q2q3: float = q2 * q3
        q3q3: float = q3 * q3

        return np.array(
            [
                [
                    2.0 * (q0q0 + q1q1) - 1.0,
                    2.0 * (q1q2 + q0q3),
                    2.0 * (q1q3 - q0q2),
                ],
                [
                    2.0 * (q1q2 - q0q3),
                    2.0 * (q0q0 + q2q2) - 1.0,
                    2.0 * (q2q3 + q0q1),
                ],
                [
                    2.0 * (q1q3 + q0q2),
                    2.0 * (q2q3 - q0q1),
                    2.0 * (q0q0 + q3q3) - 1.0,
                ],
            ],
            dtype=float,
        )

    ############################################################################
    # Application
    ############################################################################

    def apply_to(self, v: NDArray[np.float64]) -> NDArray[np.float64]:
        """Return v rotated by this rotation."""
        return self._rotate(self.q0, v)

    def apply_inverse_to(self, v: NDArray[np.float64]) -> NDArray[np.float64]:
        """Return v rotated by the inverse of this rotation."""
        return self._rotate(-self.q0, v)

    def _rotate(self, m0: float, v: NDArray[np.float64]) -> NDArray[np.float64]:
        vec: NDArray[np.float64] = as_vector3(v, "v")
        x: float = float(vec[0])
        y: float = float(vec[1])
        z: float = float(vec[2])

        q1: float = self.q1
        q2: float = self.q2
        q3: float = self.q3

        s: float = q1 * x + q2 * y + q3 * z

        return np.array(
            [
                2.0 * (m0 * (x * m0 - (q2 * z - q3 * y)) + s * q1) - x,
                2.0 * (m0 * (y * m0 - (q3 * x - q1 * z)) + s * q2) - y,
                2.0 * (m0 * (z * m0 - (q1 * y - q2 * x)) + s * q3) - z,
            ],
            dtype=float,
        )

    def apply_to_rotation(self, r: Rotation) -> Rotation:
        """
        Compose this rotation with r

        Applying the result to a vector is the same as applying r first and
        then this rotation.
        """
        return Rotation(
            r.q0 * self.q0 - (r.q1 * self.q1 + r.q2 * self.q2 + r.q3 * self.q3),
            r.q1 * self.q0 + r.q0 * self.q1 + (r.q2 * self.q3 - r.q3 * self.q2),
            r.q2 * self.q0 + r.q0 * self.q2 + (r.q3 * self.q1 - r.q1 * self.q3),
            r.q3 * self.q0 + r.q0 * self.q3 + (r.q1 * self.q2 - r.q2 * self.q1),
        )

    def apply_inverse_to_rotation(self, r: Rotation) -> Rotation:
        """
        Compose the inverse of this rotation with r

        Applying the result to a vector is the same as applying r first and
        then the inverse of this rotation.
        """
        return Rotation(
            -r.q0 * self.q0 - (r.q1 * self.q1 + r.q2 * self.q2 + r.q3 * self.q3),
            -r.q1 * self.q0 + r.q0 * self.q1 + (r.q2 * self.q3 - r.q3 * self.q2),
            -r.q2 * self.q0 + r.q0 * self.q2 + (r.q3 * self.q1 - r.q1 * self.q3),
            -r.q3 * self.q0 + r.q0 * self.q3 + (r.q1 * self.q2 - r.q2 * self.q1),
        )

    def __mul__(self, other: Rotation) -> Rotation:
        """Return this rotation applied after other."""
        return self.apply_to_rotation(other)

    @staticmethod
    def distance(r1: Rotation, r2: Rotation) -> float:
        """
        Return the angle of the rotation between r1 and r2

        The distance lies in [0, pi] and is zero for identical rotations,
        including a quaternion and its negation.
        """
        return r1.apply_inverse_to_rotation(r2).angle()

    def almost_equal(self, other: Rotation, atol: float = 1e-9) -> bool:
        """Return True if both quaternions describe the same rotation."""
        a: NDArray[np.float64] = self.as_array()
        b: NDArray[np.float64] = other.as_array()
        return bool(np.allclose(a, b, atol=atol) or np.allclose(a, -b, atol=atol))
