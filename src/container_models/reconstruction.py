from functools import cached_property

import numpy as np
from numpy.typing import NDArray

from .base import ConfigBaseModel, Dimensions
from .light_source import LightSource
from .normal_field import NormalField
from .radiance_sample import RadianceSample


class RefinementResult(ConfigBaseModel):
    """
    Outcome of the alternating refinement loop.

    :param normal_field: The stabilized normal field after the last round.
    :param samples: The radiance samples carrying their final lighting estimates.
    """

    normal_field: NormalField
    samples: tuple[RadianceSample, ...]

    @property
    def dimensions(self) -> Dimensions:
        return self.normal_field.dimensions

    @cached_property
    def lighting_directions(self) -> NDArray[np.floating]:
        """Estimated lighting directions, one row per sample. Shape: (k, 3)."""
        return np.stack([sample.lighting_direction for sample in self.samples])

    @property
    def light_sources(self) -> tuple[LightSource, ...]:
        return tuple(
            LightSource.from_unit_vector(direction)
            for direction in self.lighting_directions
        )


class Reconstruction(ConfigBaseModel):
    """
    Final result of a normal map reconstruction.

    :param normal_map: The flattened normal field ready to be encoded as an image.
    :param refinement: The refinement outcome the normal map was derived from.
    """

    normal_map: NormalField
    refinement: RefinementResult
