from functools import cached_property
from typing import Self

import numpy as np
from numpy.typing import NDArray
from pydantic import Field

from .base import ConfigBaseModel, UnitVector


class LightSource(ConfigBaseModel):
    """
    Representation of a light source using an angular direction (azimuth and elevation)
    together with a derived 3D unit direction vector.
    """

    azimuth: float = Field(
        ...,
        description="Horizontal angle in degrees measured from the –x axis in the x–y plane. "
        "0° is –x direction, 90° is +y direction, 180° is +x direction.",
        examples=[90, 45, 180],
        ge=0,
        le=360,
    )
    elevation: float = Field(
        ...,
        description="Vertical angle in degrees measured from the x–y plane. "
        "0° is horizontal, +90° is towards the camera (+z), –90° is away from it (–z).",
        examples=[90, 45, 60],
        ge=-90,
        le=90,
    )

    @cached_property
    def unit_vector(self) -> UnitVector:
        """
        Returns the unit direction vector [x, y, z] corresponding to the azimuth and
        elevation angles.
        """
        azimuth = np.deg2rad(self.azimuth)
        elevation = np.deg2rad(self.elevation)
        vec = np.array(
            [
                -np.cos(azimuth) * np.cos(elevation),
                np.sin(azimuth) * np.cos(elevation),
                np.sin(elevation),
            ]
        )
        vec.setflags(write=False)
        return vec

    @classmethod
    def from_unit_vector(cls, vector: NDArray[np.floating]) -> Self:
        """
        Describe a (estimated) lighting direction by its azimuth and elevation.

        The azimuth of a vector along the camera axis is undefined and reported as 0°.
        """
        x, y, z = vector / np.linalg.norm(vector)
        elevation = np.rad2deg(np.arcsin(np.clip(z, -1.0, 1.0)))
        azimuth = np.rad2deg(np.arctan2(y, -x)) % 360.0 if np.hypot(x, y) > 0 else 0.0
        return cls(azimuth=float(azimuth), elevation=float(elevation))

    def __str__(self) -> str:
        return f"azimuth={self.azimuth:.1f}°, elevation={self.elevation:.1f}°"
