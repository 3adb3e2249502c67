"""
Normal Field Mutations Module
=============================

This package contains all available `NormalFieldMutation` implementations.

Each mutation represents a single, well-defined geometric transformation that can
be applied to a `NormalField`. Mutations are designed to be composable and can be
chained together using a pipeline (e.g. `returns.pipeline.flow` with `bind`).
"""

from .flattening import CornerFlatten, EdgeFlatten
from .orientation import Reorient, reorient_normals


__all__ = ["CornerFlatten", "EdgeFlatten", "Reorient", "reorient_normals"]
