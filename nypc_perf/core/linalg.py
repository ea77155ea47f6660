"""
Linear solve for the Newton step.
"""

import logging
from typing import Optional

import numpy as np

from ..exceptions import IdentifiabilityError

logger = logging.getLogger(__name__)

# Floor for the curvature of constrained players whose p(1 - p) underflowed
MIN_CURVATURE = 1e-12


def _cholesky_solve(matrix: np.ndarray, rhs: np.ndarray) -> np.ndarray:
    lower = np.linalg.cholesky(matrix)
    y = np.linalg.solve(lower, rhs)
    return np.linalg.solve(lower.T, y)


def solve_newton_system(info: np.ndarray, gradient: np.ndarray,
                        mask: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Solve ``info @ step = gradient`` for the Newton ascent step.

    ``info`` is the negated Hessian, so ``values + step`` moves towards the
    likelihood maximum. Rows outside ``mask`` belong to players without any
    data; they are left out of the system and get a zero step. The diagonal
    of the remaining rows is floored at ``MIN_CURVATURE``.

    Args:
        info: Symmetric positive semi-definite information matrix (m, m)
        gradient: Log-likelihood gradient (m,)
        mask: Rows to solve for; defaults to rows with a positive diagonal

    Returns:
        Step of shape (m,)

    Raises:
        IdentifiabilityError: If the reduced system is singular
    """
    step = np.zeros_like(gradient, dtype=float)
    if mask is None:
        mask = np.diag(info) > 0
    mask = np.asarray(mask, dtype=bool)
    if not mask.any():
        return step

    matrix = info[np.ix_(mask, mask)]
    diagonal = np.arange(len(matrix))
    matrix[diagonal, diagonal] = np.maximum(matrix[diagonal, diagonal], MIN_CURVATURE)
    rhs = gradient[mask]
    try:
        solution = _cholesky_solve(matrix, rhs)
    except np.linalg.LinAlgError:
        logger.debug("Information matrix is not positive definite, falling back to LU solve")
        try:
            solution = np.linalg.solve(matrix, rhs)
        except np.linalg.LinAlgError as exc:
            raise IdentifiabilityError(
                "Newton system is singular: some ratings are not identifiable",
                players=[],
            ) from exc

    if not np.all(np.isfinite(solution)):
        raise IdentifiabilityError("Newton step is not finite: some ratings are not identifiable")

    step[mask] = solution
    return step
