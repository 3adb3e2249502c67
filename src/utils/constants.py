from enum import StrEnum
from typing import Final

import numpy as np

CAMERA_AXIS: Final = np.array([0.0, 0.0, 1.0])
CAMERA_AXIS.setflags(write=False)

UNIT_LENGTH_TOLERANCE: Final[float] = 1e-5
ANTIPARALLEL_TOLERANCE: Final[float] = 1e-9
MINIMUM_SAMPLES: Final[int] = 3

DEFAULT_REFINEMENT_ROUNDS: Final[int] = 4
DEFAULT_FLATTENING_PASSES: Final[int] = 10
DEFAULT_ALBEDO_PASSES: Final[int] = 10


class FlatteningStrategy(StrEnum):
    CORNER = "corner"
    EDGE = "edge"


class SingularSystemPolicy(StrEnum):
    FAIL = "fail"
    CAMERA_AXIS = "camera-axis"
