"""Global orientation mutations.

.. seealso::

    :class:`Reorient`
        Rotate a whole normal field so that its mean normal faces the camera.
"""

from typing import override

import numpy as np
from loguru import logger
from numpy.typing import NDArray

from computations.vectors import normalize, rotation_between
from container_models.normal_field import NormalField
from mutations.base import NormalFieldMutation
from utils.constants import CAMERA_AXIS


class Reorient(NormalFieldMutation):
    def __init__(self, target: NDArray[np.floating] = CAMERA_AXIS) -> None:
        self.target = target

    @override
    def apply_on_field(self, field: NormalField) -> NormalField:
        """
        Apply the single rotation that maps the mean normal onto the target axis.

        If the mean normal is zero or antiparallel to the target, the rotation is
        undefined and the field is returned unchanged.
        """
        mean_normal = normalize(field.mean_normal)
        if mean_normal is None:
            logger.warning("Mean normal has zero length, field left unchanged")
            return field
        rotation = rotation_between(mean_normal, self.target)
        if rotation is None:
            logger.warning(
                "Mean normal is antiparallel to the target axis, field left unchanged"
            )
            return field
        return NormalField.from_vectors(field.flat @ rotation.T, field.dimensions)


def reorient_normals(field: NormalField) -> NormalField:
    """Rotate `field` so that its mean normal points along the camera axis."""
    return Reorient().apply_on_field(field)
