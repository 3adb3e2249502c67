from __future__ import annotations
from collections.abc import Sequence
from functools import partial
from typing import Annotated, NamedTuple

from numpy import array, floating, float64, number, uint8
from numpy.typing import DTypeLike, NDArray
from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict


class Pair[T](NamedTuple):
    x: T
    y: T


type Dimensions = Pair[int]  # (width, height)


class ConfigBaseModel(BaseModel):
    """Frozen base model for containers holding numpy arrays."""

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra="forbid",
        regex_engine="rust-regex",
    )


def coerce_to_array[T: number](
    dtype: DTypeLike, value: Sequence[T] | NDArray[T] | None
) -> NDArray[T] | None:
    """
    Coerce input to dtype numpy array.

    Nested sequences (e.g. parsed JSON or hand-written test vectors) are converted,
    arrays are cast when their dtype differs.
    """
    if isinstance(value, Sequence):
        try:
            return array(value, dtype=dtype)
        except OverflowError as ofe:
            raise ValueError("Array's value(s) out of range") from ofe
    if hasattr(value, "dtype") and value.dtype != dtype:
        return value.astype(dtype)
    return value


def validate_shape(n_dims: int, value: NDArray) -> NDArray:
    if (array_dims := len(value.shape)) != n_dims:
        raise ValueError(
            f"Array shape mismatch, expected {n_dims} dimension(s), but got {array_dims}"
        )
    return value


def validate_last_axis(length: int, value: NDArray) -> NDArray:
    if value.shape[-1] != length:
        raise ValueError(
            f"Array shape mismatch, expected {length} component(s) in the last axis, "
            f"but got {value.shape[-1]}"
        )
    return value


# Tier 1: Base types
type FloatArray = Annotated[
    NDArray[floating], BeforeValidator(partial(coerce_to_array, float64))
]
type UInt8Array = Annotated[NDArray[uint8], BeforeValidator(partial(coerce_to_array, uint8))]

# Tier 2: Shape and data types
type FloatArray1D = Annotated[FloatArray, AfterValidator(partial(validate_shape, 1))]
type FloatArray2D = Annotated[FloatArray, AfterValidator(partial(validate_shape, 2))]
type FloatArray3D = Annotated[FloatArray, AfterValidator(partial(validate_shape, 3))]
type UInt8Array3D = Annotated[UInt8Array, AfterValidator(partial(validate_shape, 3))]

# Tier 3: Semantic context
type UnitVector = Annotated[
    FloatArray1D, AfterValidator(partial(validate_last_axis, 3))
]  # Shape: (3,)
type LuminanceMap = FloatArray2D  # Shape: (H, W)
type VectorField = Annotated[
    FloatArray3D, AfterValidator(partial(validate_last_axis, 3))
]  # Shape: (H, W, 3)
type ImageRGB = UInt8Array3D  # Shape: (H, W, 3)
