"""
Vector helpers shared by the estimators and the normal field mutations.

All functions operate row-wise on arrays whose last axis holds xyz components, so
that a whole normal field can be processed in a single vectorized call.
"""

import numpy as np
from numpy.typing import NDArray

from utils.constants import ANTIPARALLEL_TOLERANCE, CAMERA_AXIS


def normalize_vectors(
    vectors: NDArray[np.floating], fallback: NDArray[np.floating] = CAMERA_AXIS
) -> tuple[NDArray[np.floating], int]:
    """
    Normalize vectors along the last axis.

    Zero-length vectors have no direction; they are replaced by `fallback`.

    :param vectors: Array of shape (..., 3).
    :param fallback: Unit vector substituted for zero-length rows.
    :returns: Tuple of the normalized array and the number of substituted rows.
    """
    norms = np.linalg.norm(vectors, axis=-1, keepdims=True)
    degenerate = norms[..., 0] == 0.0
    normalized = np.divide(
        vectors, norms, out=np.zeros_like(vectors, dtype=np.float64), where=norms > 0
    )
    normalized[degenerate] = fallback
    return normalized, int(np.count_nonzero(degenerate))


def normalize(vector: NDArray[np.floating]) -> NDArray[np.floating] | None:
    """Return the unit vector of `vector`, or `None` if it has zero length."""
    norm = np.linalg.norm(vector)
    if norm == 0.0:
        return None
    return vector / norm


def _cross_product_matrix(vectors: NDArray[np.floating]) -> NDArray[np.floating]:
    """Skew-symmetric matrices [v]x for every vector in an (N, 3) array."""
    x, y, z = vectors[:, 0], vectors[:, 1], vectors[:, 2]
    zeros = np.zeros_like(x)
    return np.stack(
        [
            np.stack([zeros, -z, y], axis=-1),
            np.stack([z, zeros, -x], axis=-1),
            np.stack([-y, x, zeros], axis=-1),
        ],
        axis=-2,
    )


def rotations_onto(
    vectors: NDArray[np.floating], target: NDArray[np.floating] = CAMERA_AXIS
) -> tuple[NDArray[np.floating], NDArray[np.bool_]]:
    """
    Compute the rotations mapping each unit vector onto `target`.

    Uses Rodrigues' formula R = I + [v]x + [v]x² / (1 + c) with v = a × b and c = a · b.
    A vector antiparallel to the target has no unique rotation; the identity is used for it.

    :param vectors: Unit vectors of shape (N, 3).
    :param target: Unit vector of shape (3,).
    :returns: Tuple of the rotation matrices (N, 3, 3) and a mask of the antiparallel rows.
    """
    axes = np.cross(vectors, target)
    cosines = vectors @ target
    antiparallel = (1.0 + cosines) <= ANTIPARALLEL_TOLERANCE

    skew = _cross_product_matrix(axes)
    scale = np.divide(
        1.0, 1.0 + cosines, out=np.zeros_like(cosines), where=~antiparallel
    )
    rotations = np.eye(3) + skew + (skew @ skew) * scale[:, np.newaxis, np.newaxis]
    rotations[antiparallel] = np.eye(3)
    return rotations, antiparallel


def rotation_between(
    source: NDArray[np.floating], target: NDArray[np.floating] = CAMERA_AXIS
) -> NDArray[np.floating] | None:
    """
    Compute the rotation matrix mapping unit vector `source` onto unit vector `target`.

    :returns: A (3, 3) rotation matrix, the identity for parallel vectors, or `None`
        when the vectors are antiparallel and the rotation axis is undefined.
    """
    rotations, antiparallel = rotations_onto(source[np.newaxis, :], target)
    if antiparallel[0]:
        return None
    return rotations[0]


def angular_deviation(
    vectors: NDArray[np.floating], reference: NDArray[np.floating] = CAMERA_AXIS
) -> NDArray[np.floating]:
    """
    Angle in degrees between unit vectors (last axis) and `reference`.

    `reference` is either a single vector or one vector per row of `vectors`.
    """
    cosines = np.clip(np.sum(vectors * reference, axis=-1), -1.0, 1.0)
    return np.degrees(np.arccos(cosines))
