"""Boundary flattening mutations.

These mutations assume that the photographed surface is flat and faces the camera
along the image boundary. Reference normals are measured on the boundary, blended
bilinearly into a "flat" estimate for every pixel, and each pixel normal is rotated
by the rotation that maps its estimate onto the camera axis.

A single pass only approaches flatness; passes are meant to be repeated, each one
followed by a :class:`~mutations.orientation.Reorient`.

.. seealso::

    :class:`EdgeFlatten`
        References are the mean normals of the four image edges.
    :class:`CornerFlatten`
        References are the summed normals of the edge halves around each corner.
"""

from abc import abstractmethod
from typing import NamedTuple, override

import numpy as np
from loguru import logger
from numpy.typing import NDArray

from computations.vectors import normalize_vectors, rotations_onto
from container_models.base import Pair
from container_models.normal_field import NormalField
from mutations.base import NormalFieldMutation
from utils.constants import CAMERA_AXIS


class EdgeReferences(NamedTuple):
    """Unit mean normals of the image edges."""

    top: NDArray[np.floating]
    bottom: NDArray[np.floating]
    left: NDArray[np.floating]
    right: NDArray[np.floating]


class CornerReferences(NamedTuple):
    """Unit reference normals of the image corners."""

    upper_left: NDArray[np.floating]
    upper_right: NDArray[np.floating]
    lower_left: NDArray[np.floating]
    lower_right: NDArray[np.floating]


def _normalize_references(*vectors: NDArray[np.floating]) -> list[NDArray]:
    normalized, substituted = normalize_vectors(np.stack(vectors))
    if substituted:
        logger.debug(f"{substituted} boundary reference(s) replaced by the camera axis")
    return list(normalized)


def fractional_coordinates(field: NormalField) -> Pair[NDArray[np.floating]]:
    """
    Pixel coordinates as a fraction of the image size, x / width and y / height.

    :returns: A `Pair` of arrays of shape (H, W, 1), broadcastable against vectors.
    """
    y_indices, x_indices = np.meshgrid(
        np.arange(field.height), np.arange(field.width), indexing="ij"
    )
    return Pair(
        (x_indices / field.width)[..., np.newaxis],
        (y_indices / field.height)[..., np.newaxis],
    )


def edge_references(field: NormalField) -> EdgeReferences:
    data = field.data
    return EdgeReferences(
        *_normalize_references(
            data[0, :].mean(axis=0),
            data[-1, :].mean(axis=0),
            data[:, 0].mean(axis=0),
            data[:, -1].mean(axis=0),
        )
    )


def corner_references(field: NormalField) -> CornerReferences:
    """
    Reference normals per corner: the sum of the halves of the two adjacent edges
    nearest to the corner, normalized.
    """
    data = field.data
    half_width, half_height = field.width // 2, field.height // 2
    top, bottom = data[0, :], data[-1, :]
    left, right = data[:, 0], data[:, -1]
    return CornerReferences(
        *_normalize_references(
            top[:half_width].sum(axis=0) + left[:half_height].sum(axis=0),
            top[half_width:].sum(axis=0) + right[:half_height].sum(axis=0),
            bottom[:half_width].sum(axis=0) + left[half_height:].sum(axis=0),
            bottom[half_width:].sum(axis=0) + right[half_height:].sum(axis=0),
        )
    )


class _BoundaryFlatten(NormalFieldMutation):
    @abstractmethod
    def alignment_targets(self, field: NormalField) -> NDArray[np.floating]:
        """Estimated "flat" direction for every pixel. Shape: (H, W, 3), not normalized."""

    @override
    def apply_on_field(self, field: NormalField) -> NormalField:
        """
        Rotate every normal by the rotation mapping its flat estimate onto the camera
        axis. Pixels whose estimate is antiparallel to the camera axis are left as is.
        """
        targets, _ = normalize_vectors(self.alignment_targets(field).reshape(-1, 3))
        rotations, antiparallel = rotations_onto(targets, CAMERA_AXIS)
        if n_antiparallel := int(np.count_nonzero(antiparallel)):
            logger.debug(f"Identity rotation used for {n_antiparallel} pixel(s)")
        rotated = np.einsum("nij,nj->ni", rotations, field.flat)
        return NormalField.from_vectors(rotated, field.dimensions)


class EdgeFlatten(_BoundaryFlatten):
    @override
    def alignment_targets(self, field: NormalField) -> NDArray[np.floating]:
        """Blend the edge means: left·(1-fx) + right·fx + top·(1-fy) + bottom·fy."""
        references = edge_references(field)
        fx, fy = fractional_coordinates(field)
        return (
            references.left * (1 - fx)
            + references.right * fx
            + references.top * (1 - fy)
            + references.bottom * fy
        )


class CornerFlatten(_BoundaryFlatten):
    @override
    def alignment_targets(self, field: NormalField) -> NDArray[np.floating]:
        """Bilinear interpolation between the four corner references."""
        references = corner_references(field)
        fx, fy = fractional_coordinates(field)
        return (references.upper_left * (1 - fx) + references.upper_right * fx) * (
            1 - fy
        ) + (references.lower_left * (1 - fx) + references.lower_right * fx) * fy
