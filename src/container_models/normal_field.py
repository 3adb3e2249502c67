"""Normal field container.

::

    +--------------------------------------+
    |             NormalField              |
    |--------------------------------------|
    | data : VectorField (H, W, 3)         |
    +--------------------------------------+
    | from_vectors(vectors, dims) -> cls   |
    | dome(width, height) -> cls           |
    | flat -> (N, 3)                       |
    | mean_normal -> (3,)                  |
    +--------------------------------------+

- Every vector is unit length; construction fails otherwise.
- Instances are immutable: estimators and mutations produce new fields.
"""

from __future__ import annotations

import numpy as np
from loguru import logger
from numpy.typing import NDArray
from pydantic import field_validator

from computations.vectors import normalize_vectors
from utils.constants import UNIT_LENGTH_TOLERANCE

from .base import ConfigBaseModel, Dimensions, Pair, VectorField


class NormalField(ConfigBaseModel):
    """
    Unit surface normals per pixel.

    Components (nx, ny, nz) are stored in the last dimension. Shape: (height, width, 3).
    """

    data: VectorField

    @field_validator("data")
    @classmethod
    def validate_unit_vectors(cls, data: VectorField) -> VectorField:
        if data.shape[0] == 0 or data.shape[1] == 0:
            raise ValueError("Normal field cannot be empty")
        if not np.all(np.isfinite(data)):
            raise ValueError("Normal field contains non-finite values")
        lengths = np.linalg.norm(data, axis=-1)
        if not np.allclose(lengths, 1.0, atol=UNIT_LENGTH_TOLERANCE):
            raise ValueError(
                "All normals must be unit length, largest deviation: "
                f"{float(np.max(np.abs(lengths - 1.0))):.3g}"
            )
        data = data.copy()
        data.setflags(write=False)
        return data

    @property
    def width(self) -> int:
        return self.data.shape[1]

    @property
    def height(self) -> int:
        return self.data.shape[0]

    @property
    def dimensions(self) -> Dimensions:
        return Pair(self.width, self.height)

    @property
    def flat(self) -> NDArray[np.floating]:
        """Row-major view of the normals with shape (N, 3)."""
        return self.data.reshape(-1, 3)

    @property
    def mean_normal(self) -> NDArray[np.floating]:
        """The (unnormalized) average of all normals."""
        return self.flat.mean(axis=0)

    @classmethod
    def from_vectors(
        cls, vectors: NDArray[np.floating], dimensions: Dimensions
    ) -> NormalField:
        """
        Build a normal field from raw direction vectors by normalizing them.

        Zero-length vectors are replaced by the camera axis.

        :param vectors: Vectors of shape (N, 3) in row-major pixel order, or (H, W, 3).
        :param dimensions: The (width, height) of the field.
        """
        width, height = dimensions
        normalized, substituted = normalize_vectors(
            np.asarray(vectors, dtype=np.float64).reshape(height, width, 3)
        )
        if substituted:
            logger.warning(
                f"{substituted} zero-length normal(s) replaced by the camera axis"
            )
        return cls(data=normalized)

    @classmethod
    def dome(cls, width: int, height: int) -> NormalField:
        """
        Synthetic hemispherical seed.

        Every normal points from the image center through its pixel towards an apex
        above the image plane, at a height of the largest image dimension.
        """
        if width < 1 or height < 1:
            raise ValueError(f"Invalid dome dimensions: {width}x{height}")
        y_indices, x_indices = np.meshgrid(
            np.arange(height), np.arange(width), indexing="ij"
        )
        vectors = np.stack(
            [
                x_indices - width / 2,
                y_indices - height / 2,
                np.full((height, width), max(width, height), dtype=np.float64),
            ],
            axis=-1,
        )
        return cls.from_vectors(vectors, Pair(width, height))
