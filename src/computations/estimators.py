"""
Linear estimators of the alternating least-squares reconstruction.

Both estimators model the observed luminance with Lambertian shading,
luminance = normal · light, and fix one of the two unknowns to solve for the other:

- :func:`estimate_lighting_directions` fixes the normal field and solves one
  (N x 3) system per radiance sample, N being the pixel count.
- :func:`estimate_normals` fixes the lighting directions and solves one (k x 3)
  system per pixel, k being the number of samples.

All pixels share the same (k x 3) lighting matrix, and all samples share the same
(N x 3) normal matrix, so every independent solve of one estimator is evaluated at
once as a multi-column right-hand side of a single least-squares system.
"""

from collections.abc import Sequence

import numpy as np
from loguru import logger
from numpy.typing import NDArray

from computations.least_squares import solve_least_squares
from computations.vectors import normalize_vectors
from container_models.base import Pair
from container_models.normal_field import NormalField
from container_models.radiance_sample import RadianceSample
from exceptions import (
    ImageShapeMismatchError,
    InsufficientSamplesError,
    UnderconstrainedSystemError,
)
from utils.constants import CAMERA_AXIS, MINIMUM_SAMPLES, SingularSystemPolicy


def _luminance_matrix(
    samples: Sequence[RadianceSample], normal_field: NormalField
) -> NDArray[np.floating]:
    """Stack the row-major luminance of every sample as columns. Shape: (N, k)."""
    for sample in samples:
        if sample.dimensions != normal_field.dimensions:
            raise ImageShapeMismatchError(
                f"Radiance sample of size {tuple(sample.dimensions)} does not match "
                f"normal field of size {tuple(normal_field.dimensions)}"
            )
    return np.stack([sample.flat_luminance for sample in samples], axis=-1)


def estimate_lighting_directions(
    normal_field: NormalField,
    samples: Sequence[RadianceSample],
    policy: SingularSystemPolicy = SingularSystemPolicy.FAIL,
) -> NDArray[np.floating]:
    """
    Estimate the lighting direction of every radiance sample from a normal field.

    Solves `normals · light = luminance` for each sample and normalizes the solution.

    :param normal_field: The current normal field.
    :param samples: The radiance samples, all with the dimensions of `normal_field`.
    :param policy: What to do with an unsolvable system. With
        `SingularSystemPolicy.CAMERA_AXIS` the previous lighting direction of each
        sample is kept.
    :returns: Unit lighting directions of shape (k, 3), in the order of `samples`.
    :raises UnderconstrainedSystemError: If the system is singular and the policy is
        `SingularSystemPolicy.FAIL`.
    """
    if not samples:
        raise InsufficientSamplesError(count=0, required=1)
    previous = np.stack([sample.lighting_direction for sample in samples])
    luminances = _luminance_matrix(samples, normal_field)

    try:
        solutions = solve_least_squares(normal_field.flat, luminances).T
    except UnderconstrainedSystemError:
        if policy is SingularSystemPolicy.FAIL:
            raise
        logger.warning(
            "Lighting directions could not be estimated, keeping previous estimates"
        )
        return previous

    degenerate = np.linalg.norm(solutions, axis=-1) == 0.0
    if np.any(degenerate):
        indices = np.flatnonzero(degenerate).tolist()
        if policy is SingularSystemPolicy.FAIL:
            raise UnderconstrainedSystemError(
                f"Lighting direction of sample(s) {indices} is undefined (zero solution)"
            )
        logger.warning(
            f"Lighting direction of sample(s) {indices} is undefined, "
            "keeping previous estimates"
        )
    directions, _ = normalize_vectors(solutions)
    directions[degenerate] = previous[degenerate]
    return directions


def estimate_lighting_direction(
    normal_field: NormalField,
    sample: RadianceSample,
    policy: SingularSystemPolicy = SingularSystemPolicy.FAIL,
) -> NDArray[np.floating]:
    """
    Estimate the lighting direction of a single radiance sample.

    :raises UnderconstrainedSystemError: If the direction cannot be determined and
        the policy is `SingularSystemPolicy.FAIL`.
    """
    return estimate_lighting_directions(normal_field, [sample], policy=policy)[0]


def estimate_normals(
    samples: Sequence[RadianceSample],
    policy: SingularSystemPolicy = SingularSystemPolicy.FAIL,
) -> NormalField:
    """
    Estimate the normal of every pixel from the lighting directions of the samples.

    Solves `lighting_directions · normal = luminances` per pixel and normalizes the
    solution. A pixel that is black in every sample has no direction and receives the
    camera axis.

    :param samples: At least three radiance samples with identical dimensions.
    :param policy: What to do when the lighting directions are collinear. With
        `SingularSystemPolicy.CAMERA_AXIS` every pixel receives the camera axis.
    :returns: A new normal field.
    :raises InsufficientSamplesError: If fewer than three samples are given.
    :raises UnderconstrainedSystemError: If the lighting directions do not span three
        dimensions and the policy is `SingularSystemPolicy.FAIL`.
    """
    if len(samples) < MINIMUM_SAMPLES:
        raise InsufficientSamplesError(count=len(samples), required=MINIMUM_SAMPLES)
    width, height = samples[0].dimensions
    dimensions = Pair(width, height)
    if any(sample.dimensions != dimensions for sample in samples):
        raise ImageShapeMismatchError("Radiance samples have different dimensions")

    lighting_directions = np.stack([sample.lighting_direction for sample in samples])
    luminances = np.stack([sample.flat_luminance for sample in samples])

    try:
        solutions = solve_least_squares(lighting_directions, luminances).T
    except UnderconstrainedSystemError:
        if policy is SingularSystemPolicy.FAIL:
            raise
        logger.warning(
            "Lighting directions are degenerate, substituting the camera axis "
            f"for all {width * height} normals"
        )
        return NormalField(
            data=np.broadcast_to(CAMERA_AXIS, (height, width, 3)).copy()
        )

    return NormalField.from_vectors(solutions, dimensions)
