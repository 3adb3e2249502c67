"""
Rendering of reconstruction results to images.

- Normal maps are encoded with one byte per component, (x, y, z) as (red, green, blue).
- Albedo maps are averaged photographs with balanced corner brightness.

Conversions return Result containers and writing returns IOResult containers, all
decorated with logging, for use in railway-oriented pipelines.
"""

from .albedo import generate_albedo
from .image_io import albedo_to_image, normal_field_to_image, normal_field_to_rgb, save_image


__all__ = (
    "albedo_to_image",
    "generate_albedo",
    "normal_field_to_image",
    "normal_field_to_rgb",
    "save_image",
)
