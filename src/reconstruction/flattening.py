"""Repeated boundary flattening of a refined normal field."""

from loguru import logger
from returns.pipeline import flow
from returns.pointfree import bind
from returns.result import ResultE, Success

from computations.vectors import angular_deviation
from container_models.normal_field import NormalField
from mutations import CornerFlatten, EdgeFlatten, Reorient
from mutations.base import NormalFieldMutation
from utils.constants import DEFAULT_FLATTENING_PASSES, FlatteningStrategy

FLATTENING_MUTATIONS: dict[FlatteningStrategy, type[NormalFieldMutation]] = {
    FlatteningStrategy.CORNER: CornerFlatten,
    FlatteningStrategy.EDGE: EdgeFlatten,
}


def flattening_pass(
    field: NormalField, strategy: FlatteningStrategy = FlatteningStrategy.CORNER
) -> ResultE[NormalField]:
    """One boundary flattening mutation followed by a reorientation."""
    return flow(
        Success(field),
        bind(FLATTENING_MUTATIONS[strategy]()),
        bind(Reorient()),
    )


def flatten_boundaries(
    field: NormalField,
    passes: int = DEFAULT_FLATTENING_PASSES,
    strategy: FlatteningStrategy = FlatteningStrategy.CORNER,
) -> ResultE[NormalField]:
    """
    Flatten the boundary of `field` in `passes` passes.

    A single pass only approaches a flat boundary, repeating it converges further.
    Zero passes return the field unchanged.
    """
    result: ResultE[NormalField] = Success(field)
    for _ in range(passes):
        result = result.bind(lambda current: flattening_pass(current, strategy))

    def _log_deviation(flattened: NormalField) -> NormalField:
        logger.debug(
            f"Mean deviation from the camera axis after {passes} {strategy} pass(es): "
            f"{float(angular_deviation(flattened.flat).mean()):.3f}°"
        )
        return flattened

    return result.map(_log_deviation)
