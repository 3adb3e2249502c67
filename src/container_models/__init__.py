"""
Immutable data container models for railway-oriented programming pipelines.

This module provides Pydantic-based data models that are propagated through railway
functions in the reconstruction pipeline: the luminance of every input photograph,
the per-pixel normal field and the results of the estimation rounds.

Notes
-----
These models are frozen. Every estimation step and every mutation consumes one
instance and produces a new one, so a round always reads a consistent snapshot of
the previous round and a failed step never leaves partially updated state behind.
"""

from .light_source import LightSource
from .normal_field import NormalField
from .radiance_sample import RadianceSample
from .reconstruction import Reconstruction, RefinementResult


__all__ = [
    "LightSource",
    "NormalField",
    "RadianceSample",
    "Reconstruction",
    "RefinementResult",
]
