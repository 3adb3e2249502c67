from pathlib import Path
from typing import Self

import numpy as np
from numpy.typing import NDArray
from pydantic import Field, field_validator

from utils.constants import CAMERA_AXIS, UNIT_LENGTH_TOLERANCE

from .base import ConfigBaseModel, Dimensions, LuminanceMap, Pair, UnitVector


class RadianceSample(ConfigBaseModel):
    """
    The luminance of one photograph together with its estimated lighting direction.

    Luminance values are grey levels normalized to [0, 1]. Shape: (height, width).
    The lighting direction starts at the camera axis and is replaced (never mutated)
    by every refinement round, see :meth:`with_lighting_direction`.
    """

    luminance: LuminanceMap
    lighting_direction: UnitVector = Field(default_factory=CAMERA_AXIS.copy)
    source: Path | None = None

    @field_validator("luminance")
    @classmethod
    def validate_luminance_range(cls, luminance: LuminanceMap) -> LuminanceMap:
        if luminance.size == 0:
            raise ValueError("Luminance map cannot be empty")
        if not np.all(np.isfinite(luminance)):
            raise ValueError("Luminance map contains non-finite values")
        if luminance.min() < 0.0 or luminance.max() > 1.0:
            raise ValueError("Luminance values must lie in the [0, 1] range")
        return luminance

    @field_validator("lighting_direction")
    @classmethod
    def validate_unit_length(cls, direction: UnitVector) -> UnitVector:
        if not np.isclose(np.linalg.norm(direction), 1.0, atol=UNIT_LENGTH_TOLERANCE):
            raise ValueError(
                f"Lighting direction must be a unit vector, got {direction.tolist()}"
            )
        return direction

    @property
    def width(self) -> int:
        """The image width in pixels."""
        return self.luminance.shape[1]

    @property
    def height(self) -> int:
        """The image height in pixels."""
        return self.luminance.shape[0]

    @property
    def dimensions(self) -> Dimensions:
        return Pair(self.width, self.height)

    @property
    def pixel_count(self) -> int:
        return self.luminance.size

    @property
    def flat_luminance(self) -> NDArray[np.floating]:
        """Row-major luminance vector of shape (N,)."""
        return self.luminance.reshape(-1)

    def with_lighting_direction(self, direction: NDArray[np.floating]) -> Self:
        """Return a copy of this sample carrying a new lighting direction."""
        return self.model_validate(
            {
                "luminance": self.luminance,
                "lighting_direction": direction,
                "source": self.source,
            }
        )

    def with_luminance(self, luminance: NDArray[np.floating]) -> Self:
        """Return a copy of this sample carrying new luminance data."""
        return self.model_validate(
            {
                "luminance": luminance,
                "lighting_direction": self.lighting_direction,
                "source": self.source,
            }
        )
