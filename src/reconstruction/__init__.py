"""
Reconstruction of normal maps from shading.

The reconstruction alternates between two linear estimators until the lighting
directions and the normal field agree, then flattens the image boundary:

1. :func:`refine` seeds a dome shaped normal field and runs refinement rounds.
2. :func:`flatten_boundaries` removes large scale curvature left by the seed.
3. :func:`reconstruct_normal_map` chains validation, optional brightness balancing,
   refinement and flattening into a single railway function.
"""

from .flattening import flatten_boundaries, flattening_pass
from .normal_map import reconstruct_normal_map
from .radiance import balance_radiances
from .refinement import RefinementState, refine, refinement_round


__all__ = [
    "RefinementState",
    "balance_radiances",
    "flatten_boundaries",
    "flattening_pass",
    "reconstruct_normal_map",
    "refine",
    "refinement_round",
]
