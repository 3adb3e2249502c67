import numpy as np
from loguru import logger
from numpy.typing import NDArray

from exceptions import UnderconstrainedSystemError


def _validate_system(design_matrix: NDArray, targets: NDArray) -> None:
    if design_matrix.ndim != 2 or design_matrix.shape[0] < 1:
        raise ValueError(
            f"Design matrix must be 2D with at least one row, got shape {design_matrix.shape}"
        )
    if targets.ndim not in (1, 2) or targets.shape[0] != design_matrix.shape[0]:
        raise ValueError(
            f"Targets of shape {targets.shape} do not match design matrix of shape "
            f"{design_matrix.shape}"
        )
    if not (np.all(np.isfinite(design_matrix)) and np.all(np.isfinite(targets))):
        raise ValueError("Least-squares system contains non-finite values")


def solve_least_squares(design_matrix: NDArray, targets: NDArray) -> NDArray:
    """
    Solve A x = b in the least-squares sense through the normal equations x = (AᵗA)⁻¹Aᵗb.

    The inverse of AᵗA is computed once, so `targets` may hold several right-hand sides
    as columns; every column is solved against the same design matrix.

    :param design_matrix: The matrix A of shape (n, m), one row per observation.
    :param targets: The vector b of shape (n,) or a matrix of shape (n, r).
    :returns: The solution x of shape (m,) or (m, r).
    :raises UnderconstrainedSystemError: If AᵗA is singular, e.g. when fewer than m
        independent observations are available.
    :raises ValueError: If the shapes do not match or the input is not finite.
    """
    _validate_system(design_matrix, targets)
    transposed = design_matrix.T
    normal_matrix = transposed @ design_matrix

    rank = int(np.linalg.matrix_rank(normal_matrix))
    if rank < normal_matrix.shape[0]:
        logger.debug(
            f"Normal equations are rank deficient: rank {rank} < {normal_matrix.shape[0]}"
        )
        raise UnderconstrainedSystemError(
            f"Least-squares system is underconstrained (rank {rank} of "
            f"{normal_matrix.shape[0]})",
            rank=rank,
        )

    return np.linalg.inv(normal_matrix) @ (transposed @ targets)
