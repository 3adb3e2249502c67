"""Albedo map estimation.

The albedo is approximated by the average of all photographs. Uneven illumination
across the image is then reduced by repeatedly comparing the brightness around the
four image corners and dividing it out with a bilinear brightness ramp.
"""

from collections.abc import Sequence
from typing import NamedTuple

import numpy as np
from loguru import logger
from numpy.typing import NDArray
from PIL.Image import fromarray
from returns.result import safe

from container_models.base import ImageRGB
from exceptions import ImageShapeMismatchError
from utils.constants import DEFAULT_ALBEDO_PASSES
from utils.logger import log_railway_function


class CornerIntensities(NamedTuple):
    """Relative brightness at the image corners."""

    upper_left: float
    upper_right: float
    lower_left: float
    lower_right: float


def average_images(images: Sequence[ImageRGB]) -> ImageRGB:
    """Pixel-wise mean of RGB images of identical size, truncated to bytes."""
    if not images:
        raise ValueError("At least one image is required to compute an average")
    shape = images[0].shape
    if any(image.shape != shape for image in images):
        raise ImageShapeMismatchError("Images to average have different dimensions")
    stacked = np.stack([np.asarray(image, dtype=np.float64) for image in images])
    return stacked.mean(axis=0).astype(np.uint8)


def _relative_intensity(
    height: int, width: int, corners: CornerIntensities
) -> NDArray[np.floating]:
    fy, fx = np.meshgrid(
        np.arange(height) / height, np.arange(width) / width, indexing="ij"
    )
    return (corners.upper_left * (1 - fx) + corners.upper_right * fx) * (1 - fy) + (
        corners.lower_left * (1 - fx) + corners.lower_right * fx
    ) * fy


def brightness_tilt(image: ImageRGB, corners: CornerIntensities) -> ImageRGB:
    """
    Divide every pixel by a brightness ramp interpolated between the four corners.

    Results are capped at 255; a pixel with zero intensity on the ramp becomes white.
    """
    height, width = image.shape[:2]
    intensity = _relative_intensity(height, width, corners)[..., np.newaxis]
    with np.errstate(divide="ignore", invalid="ignore"):
        scaled = image.astype(np.float64) / intensity
    scaled = np.nan_to_num(scaled, nan=255.0, posinf=255.0)
    return np.clip(scaled, 0.0, 255.0).astype(np.uint8)


def _grey_levels(image: ImageRGB) -> NDArray[np.floating]:
    return np.asarray(fromarray(image).convert("L"), dtype=np.float64)


def corner_weights(image: ImageRGB) -> CornerIntensities | None:
    """
    Weighted grey level sum of every image quadrant, relative to their mean.

    The weight of a pixel is its Manhattan distance from the outer corner of its
    quadrant. Returns `None` when all quadrant sums are zero.
    """
    grey = _grey_levels(image)
    height, width = grey.shape
    half_height, half_width = height // 2, width // 2
    dy, dx = np.meshgrid(np.arange(half_height), np.arange(half_width), indexing="ij")
    quadrants = (
        (grey[:half_height, :half_width], dx + dy),
        (grey[:half_height, half_width : 2 * half_width], dx[:, ::-1] + dy),
        (grey[half_height : 2 * half_height, :half_width], dx + dy[::-1]),
        (
            grey[half_height : 2 * half_height, half_width : 2 * half_width],
            dx[:, ::-1] + dy[::-1],
        ),
    )
    sums = np.array([float(np.sum(pixels * weight)) for pixels, weight in quadrants])
    average = sums.mean()
    if average == 0.0:
        return None
    return CornerIntensities(*(sums / average).tolist())


def corner_weight_flatten(image: ImageRGB) -> ImageRGB:
    """
    Balance the brightness of the image corners in one pass.

    A single pass only approaches an even brightness, so it is meant to be repeated.
    """
    weights = corner_weights(image)
    if weights is None:
        logger.warning("Image corners carry no brightness, albedo left unchanged")
        return image
    return brightness_tilt(image, weights)


@log_railway_function(
    "Failed to generate the albedo map",
    "Successfully generated the albedo map",
)
@safe
def generate_albedo(
    images: Sequence[ImageRGB], passes: int = DEFAULT_ALBEDO_PASSES
) -> ImageRGB:
    """
    Estimate the albedo of the photographed surface.

    :param images: RGB photographs of identical size.
    :param passes: Number of corner balancing passes applied to the average.
    :returns: The albedo as an 8-bit RGB array.
    """
    albedo = average_images(images)
    for _ in range(passes):
        albedo = corner_weight_flatten(albedo)
    return albedo
