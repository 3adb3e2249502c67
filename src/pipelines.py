"""
Railway-oriented programming pipeline utilities.

This module provides a simplified interface for executing functional pipelines using
railway-oriented programming (ROP) patterns, abstracting away the complexity of working
directly with the returns library's container types (IOResultE, ResultE, etc.).

Each operation either continues on the success track or switches to the failure track,
propagating errors automatically without explicit error checking at each step.

The main entry point, `run_pipeline`, composes operations and unwraps the outcome:

- Handles both raw values and Container types as input
- Binds operations together using monadic composition
- Unwraps the final result or raises a `ReconstructionError` on failure
"""

from collections.abc import Callable
from typing import Any

from returns.interfaces.container import ContainerN
from returns.io import IOFailure, IOResultE, IOSuccess
from returns.pipeline import flow
from returns.pointfree import bind
from returns.result import Failure, ResultE, Success

from exceptions import ReconstructionError


def _capture_result_value[T](result: IOResultE[T] | ResultE[T], error_message: str) -> T:
    match result:
        case IOSuccess(Success(value)) | Success(value):
            return value
        case IOFailure(Failure(error)) | Failure(error) if isinstance(error, Exception):
            raise ReconstructionError(error_message) from error
        case _:
            raise ReconstructionError(error_message)


def _pipeline_flow[T](
    entry_value: Any | ContainerN, *pipeline: Callable[..., Any]
) -> IOResultE[T] | ResultE[T]:
    first_function = None
    pipeline_tasks: Any = pipeline
    if not isinstance(entry_value, ContainerN):
        first_function, *pipeline_tasks = pipeline

    return flow(
        entry_value,
        *((first_function,) if first_function else ()),
        *[bind(task) for task in pipeline_tasks],
    )


def run_pipeline(
    entry_value: Any | ContainerN, *tasks: Callable[[Any], Any], error_message: str
) -> Any:
    """
    Execute a series of tasks in a functional pipeline and return the final result.

    :param entry_value: The initial value to pass into the pipeline. This may be a
        raw value, in which case the first task receives it directly, or a Container
        from the ``returns`` library (e.g. ``IOResultE``, ``ResultE``).
    :param tasks: Tasks executed sequentially. Each task accepts the output of the
        previous task and returns a Container.
    :param error_message: Message of the ``ReconstructionError`` raised when the
        pipeline fails at any step.

    :returns: The unwrapped success value of the final pipeline result.
    :raises ReconstructionError: If any task returns a failure Container. The
        original error is chained as the cause.

    :examples
    --------
    >>> from renders import normal_field_to_image, save_image
    >>> run_pipeline(
    ...     reconstruction.normal_map,
    ...     normal_field_to_image,
    ...     lambda image: save_image(image, Path("normal_map.png")),
    ...     error_message="Could not write the normal map",
    ... )
    PosixPath('normal_map.png')
    """
    if not tasks and not isinstance(entry_value, ContainerN):
        raise ValueError("A pipeline on a raw value needs at least one task")
    return _capture_result_value(
        _pipeline_flow(entry_value, *tasks),
        error_message,
    )
