from collections.abc import Sequence
from pathlib import Path

import numpy as np
from PIL import Image
from returns.io import impure_safe
from returns.result import safe

from container_models.base import ImageRGB
from container_models.radiance_sample import RadianceSample
from exceptions import ImageShapeMismatchError, InsufficientSamplesError
from utils.constants import MINIMUM_SAMPLES
from utils.logger import log_railway_function

MAX_GREY_LEVEL = 255.0


@log_railway_function(
    "Failed to load radiance sample",
    "Successfully loaded radiance sample",
)
@impure_safe
def load_radiance_sample(image_file: Path) -> RadianceSample:
    """
    Load a photograph as a radiance sample.

    The image is converted to 8-bit grey levels and scaled to the [0, 1] interval.
    The lighting direction of the sample starts at the camera axis.

    :param image_file: Path to any image format Pillow can decode.
    :returns: A `RadianceSample` with the grey levels of the image.
    """
    with Image.open(image_file) as image:
        grey = np.asarray(image.convert("L"), dtype=np.float64)
    return RadianceSample(luminance=grey / MAX_GREY_LEVEL, source=Path(image_file))


@log_railway_function("Failed to load RGB image")
@impure_safe
def load_rgb_image(image_file: Path) -> ImageRGB:
    """Load a photograph as an 8-bit RGB array of shape (H, W, 3)."""
    with Image.open(image_file) as image:
        return np.asarray(image.convert("RGB"), dtype=np.uint8)


@safe
def validate_radiance_samples(
    samples: Sequence[RadianceSample],
) -> tuple[RadianceSample, ...]:
    """
    Check that the samples can be used for a reconstruction.

    :raises InsufficientSamplesError: If fewer than three samples are given.
    :raises ImageShapeMismatchError: If the samples differ in size.
    """
    if not samples:
        raise InsufficientSamplesError(count=0, required=MINIMUM_SAMPLES)
    reference = samples[0]
    for sample in samples[1:]:
        if sample.dimensions != reference.dimensions:
            raise ImageShapeMismatchError(
                f"Image {sample.source or ''} has size {tuple(sample.dimensions)}, "
                f"expected {tuple(reference.dimensions)} as {reference.source or ''}"
            )
    if len(samples) < MINIMUM_SAMPLES:
        raise InsufficientSamplesError(count=len(samples), required=MINIMUM_SAMPLES)
    return tuple(samples)
