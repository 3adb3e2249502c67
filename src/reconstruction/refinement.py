"""Alternating least-squares refinement of lighting directions and normals.

Every round reads one consistent snapshot of the previous round::

    normal field (r) ──► lighting directions (r+1) ──► normal field (r+1) ──► reorient

All lighting directions of a round are estimated from the same normal field before
any normal is re-estimated, and nothing is updated in place.
"""

from collections.abc import Sequence
from typing import NamedTuple

import numpy as np
from loguru import logger

from computations.estimators import estimate_lighting_directions, estimate_normals
from computations.vectors import angular_deviation
from container_models.normal_field import NormalField
from container_models.radiance_sample import RadianceSample
from container_models.reconstruction import RefinementResult
from mutations.orientation import reorient_normals
from utils.constants import DEFAULT_REFINEMENT_ROUNDS, SingularSystemPolicy


class RefinementState(NamedTuple):
    """Snapshot between two rounds."""

    round_index: int
    normal_field: NormalField
    samples: tuple[RadianceSample, ...]


def initial_state(samples: Sequence[RadianceSample]) -> RefinementState:
    """Seed the refinement with the dome normal field."""
    width, height = samples[0].dimensions
    return RefinementState(
        round_index=0,
        normal_field=NormalField.dome(width, height),
        samples=tuple(samples),
    )


def refinement_round(
    state: RefinementState,
    policy: SingularSystemPolicy = SingularSystemPolicy.FAIL,
) -> RefinementState:
    """
    Run one round: estimate all lighting directions from the current normal field,
    re-estimate the normals from those directions and reorient the result.

    :raises UnderconstrainedSystemError: If a system of the round is singular and
        the policy is `SingularSystemPolicy.FAIL`.
    """
    directions = estimate_lighting_directions(
        state.normal_field, state.samples, policy=policy
    )
    samples = tuple(
        sample.with_lighting_direction(direction)
        for sample, direction in zip(state.samples, directions, strict=True)
    )
    normal_field = reorient_normals(estimate_normals(samples, policy=policy))

    change = angular_deviation(normal_field.flat, state.normal_field.flat)
    logger.debug(
        f"Round {state.round_index + 1}: mean normal change {float(np.mean(change)):.3f}°, "
        f"max {float(np.max(change)):.3f}°"
    )
    return RefinementState(state.round_index + 1, normal_field, samples)


def refine(
    samples: Sequence[RadianceSample],
    rounds: int = DEFAULT_REFINEMENT_ROUNDS,
    policy: SingularSystemPolicy = SingularSystemPolicy.FAIL,
) -> RefinementResult:
    """
    Alternately estimate lighting directions and normals, starting from the dome.

    :param samples: Validated radiance samples (at least three, same dimensions).
    :param rounds: The number of rounds, at least one.
    :param policy: How unsolvable systems are handled.
    :returns: The normal field and the samples with their final lighting directions.
    """
    if rounds < 1:
        raise ValueError(f"At least one refinement round is required, got {rounds}")

    state = initial_state(samples)
    for _ in range(rounds):
        state = refinement_round(state, policy)

    result = RefinementResult(normal_field=state.normal_field, samples=state.samples)
    for sample, light in zip(result.samples, result.light_sources, strict=True):
        logger.info(f"Estimated lighting for {sample.source or 'sample'}: {light}")
    return result
