from pathlib import Path
from typing import Final

import numpy as np
from PIL.Image import Image, fromarray
from returns.io import impure_safe
from returns.result import safe

from container_models.base import ImageRGB
from container_models.normal_field import NormalField
from utils.logger import log_railway_function

# A component c in [-1, 1] is stored as round(c * 128 + 128); c = 1 is clipped to 255.
_COMPONENT_SCALE: Final[float] = 128.0
_COMPONENT_OFFSET: Final[float] = 128.0


def normal_field_to_rgb(field: NormalField) -> ImageRGB:
    """
    Encode the (x, y, z) components of every normal as (red, green, blue) bytes.

    :param field: The normal field to encode.
    :returns: Array with the encoded normals in 8-bit RGB format. Shape: (H, W, 3).
    """
    encoded = np.round(field.data * _COMPONENT_SCALE + _COMPONENT_OFFSET)
    return np.clip(encoded, 0, 255).astype(np.uint8)


@log_railway_function("Failed to convert normal field to image")
@safe
def normal_field_to_image(field: NormalField) -> Image:
    return fromarray(normal_field_to_rgb(field))


@log_railway_function("Failed to convert albedo to image")
@safe
def albedo_to_image(albedo: ImageRGB) -> Image:
    if albedo.ndim != 3 or albedo.shape[-1] != 3:
        raise ValueError(f"Expected an RGB array of shape (H, W, 3), got {albedo.shape}")
    return fromarray(np.asarray(albedo, dtype=np.uint8))


@log_railway_function("Failed to save image")
@impure_safe
def save_image(image: Image, output_path: Path) -> Path:
    image.save(output_path)
    return output_path
