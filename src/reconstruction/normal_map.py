"""Normal map reconstruction from radiance samples."""

from collections.abc import Sequence

from returns.result import ResultE, safe

from container_models.radiance_sample import RadianceSample
from container_models.reconstruction import Reconstruction, RefinementResult
from parsers.loaders import validate_radiance_samples
from settings import Settings
from utils.logger import log_railway_function

from .flattening import flatten_boundaries
from .radiance import balance_radiances
from .refinement import refine


@safe
def _refine(samples: Sequence[RadianceSample], settings: Settings) -> RefinementResult:
    if settings.balance_radiances:
        samples = balance_radiances(samples)
    return refine(
        samples,
        rounds=settings.refinement_rounds,
        policy=settings.singular_system_policy,
    )


def _flatten(refinement: RefinementResult, settings: Settings) -> ResultE[Reconstruction]:
    return flatten_boundaries(
        refinement.normal_field,
        passes=settings.flattening_passes,
        strategy=settings.flattening_strategy,
    ).map(
        lambda normal_map: Reconstruction(normal_map=normal_map, refinement=refinement)
    )


@log_railway_function(
    "Failed to reconstruct the normal map",
    "Successfully reconstructed the normal map",
)
def reconstruct_normal_map(
    samples: Sequence[RadianceSample], settings: Settings
) -> ResultE[Reconstruction]:
    """
    Reconstruct a normal map from photographs of the same surface under different,
    unknown lighting.

    The samples are validated, optionally balanced, refined by alternating lighting
    and normal estimation and finally flattened along the image boundary.

    :param samples: At least three radiance samples with identical dimensions.
    :param settings: The reconstruction settings.
    :returns: The reconstruction, or a `Failure` holding the error that aborted it.
    """
    return (
        validate_radiance_samples(samples)
        .bind(lambda validated: _refine(validated, settings))
        .bind(lambda refinement: _flatten(refinement, settings))
    )
