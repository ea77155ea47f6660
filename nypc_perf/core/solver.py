"""
Newton-Raphson iteration for Bradley-Terry performance ratings.
"""

import logging
from dataclasses import dataclass, replace
from typing import Callable, Optional, Sequence

import numpy as np

from ..exceptions import IdentifiabilityError
from .graph import find_unanchored
from .linalg import solve_newton_system
from .model import BattleTable, aggregate_battles, constrained_mask, evaluate, log_likelihood
from .types import BattleResult, Rating, SolverConfig

logger = logging.getLogger(__name__)

MAX_STEP_HALVINGS = 30
# Largest change of any single rating in one iteration
MAX_STEP = 4.0


@dataclass
class SolveOutcome:
    """
    Terminal state of one solve.

    ``iterations`` is set when the run converged, ``error`` when it stopped
    at the iteration limit.
    """

    values: np.ndarray
    iterations: Optional[int] = None
    error: Optional[float] = None


class PerfCalc:
    """
    Maximum-likelihood performance calculator.

    Each call to :meth:`run` is self-contained: the ratings are copied in,
    iterated on a private array and returned in the outcome.

    The error metric is the largest absolute gradient component over the
    free players, measured before each step. The run converges as soon as
    it drops below ``epsilon``; inputs that are already optimal (no free
    players, no games) converge after zero iterations.
    """

    def __init__(self, config: Optional[SolverConfig] = None):
        self.config = config or SolverConfig()

    def max_iters(self, max_iterations: int) -> "PerfCalc":
        return PerfCalc(replace(self.config, max_iterations=max_iterations))

    def epsilon(self, epsilon: float) -> "PerfCalc":
        return PerfCalc(replace(self.config, epsilon=epsilon))

    def prior_variance(self, prior_variance: Optional[float]) -> "PerfCalc":
        return PerfCalc(replace(self.config, prior_variance=prior_variance))

    def run(
        self,
        ratings: Sequence[Rating],
        battles: Sequence[BattleResult],
        callback: Optional[Callable[[int, float, np.ndarray], None]] = None,
    ) -> SolveOutcome:
        """
        Iterate Newton steps until convergence or the iteration limit.

        Args:
            ratings: Initial ratings; fixed ones never change
            battles: Battle records between players
            callback: Called as ``callback(iteration, error, values)``
                for every computed error metric, with a copy of the ratings
                the error was measured at

        Returns:
            SolveOutcome with the final values

        Raises:
            IdentifiabilityError: If some free players are connected to no
                fixed player and no prior is configured
        """
        config = self.config
        values = np.array([float(r.value) for r in ratings], dtype=float)
        fixed = [bool(r.fixed) for r in ratings]
        free = [k for k, is_fixed in enumerate(fixed) if not is_fixed]
        table = aggregate_battles(battles)

        if config.prior_variance is None:
            unanchored = find_unanchored(fixed, table)
            if unanchored:
                raise IdentifiabilityError(
                    f"Players {unanchored} are not connected to any fixed rating",
                    players=unanchored,
                )

        mask = constrained_mask(table, free, config.prior_variance)
        iteration = 0
        while True:
            gradient, info = evaluate(values, table, free, config.prior_variance)
            error = float(np.max(np.abs(gradient))) if len(gradient) else 0.0
            if callback is not None:
                callback(iteration, error, values.copy())

            if error < config.epsilon:
                logger.debug("Converged after %d iterations (error %.3e)", iteration, error)
                return SolveOutcome(values=values, iterations=iteration)
            if iteration >= config.max_iterations:
                logger.warning("Did not converge after %d iterations, final error %.3e",
                               iteration, error)
                return SolveOutcome(values=values, error=error)

            step = solve_newton_system(info, gradient, mask)
            values, scale = self._damped_update(values, step, free, table)
            iteration += 1
            logger.debug("Iteration %d: error %.3e, step scale %g", iteration, error, scale)

    def _damped_update(self, values: np.ndarray, step: np.ndarray, free: Sequence[int],
                       table: BattleTable):
        """
        Apply the Newton step, halving it until the likelihood does not drop.

        The step is first scaled down so that no rating moves by more than
        ``MAX_STEP``. If no halving is accepted the ratings are kept.

        Returns:
            Tuple of (new values, applied step scale)
        """
        prior = self.config.prior_variance
        current = log_likelihood(values, table, prior, free)
        tolerance = 1e-12 * (1.0 + abs(current))

        largest = float(np.max(np.abs(step))) if len(step) else 0.0
        scale = MAX_STEP / largest if largest > MAX_STEP else 1.0
        for _ in range(MAX_STEP_HALVINGS):
            candidate = values.copy()
            candidate[free] += scale * step
            if log_likelihood(candidate, table, prior, free) >= current - tolerance:
                return candidate, scale
            scale *= 0.5
        logger.debug("No step size increased the likelihood, keeping ratings")
        return values, 0.0
