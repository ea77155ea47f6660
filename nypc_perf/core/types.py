"""
Data types shared by the solver and the caller-facing layer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

DEFAULT_MAX_ITERATIONS = 100
DEFAULT_EPSILON = 1e-6


@dataclass
class Rating:
    """
    A player's performance rating.

    Attributes:
        value: Log-scale strength, higher is better
        fixed: Whether the rating stays constant during calculation.
            Fixed ratings anchor the otherwise translation-invariant scale.
    """

    value: float
    fixed: bool = False


@dataclass
class BattleResult:
    """
    Win tallies between two players.

    Attributes:
        i: Index of the first player (0-based)
        j: Index of the second player (0-based)
        wij: Number of wins by player i against player j
        wji: Number of wins by player j against player i
    """

    i: int
    j: int
    wij: float
    wji: float


@dataclass
class CalcOptions:
    """
    Partially specified solver options; unset fields fall back to defaults.
    """

    max_iterations: Optional[int] = None
    epsilon: Optional[float] = None
    prior_variance: Optional[float] = None

    def resolve(self) -> "SolverConfig":
        """
        Apply the default constants field by field.

        Returns:
            A fully populated SolverConfig
        """
        return SolverConfig(
            max_iterations=DEFAULT_MAX_ITERATIONS if self.max_iterations is None else int(self.max_iterations),
            epsilon=DEFAULT_EPSILON if self.epsilon is None else float(self.epsilon),
            prior_variance=self.prior_variance,
        )


@dataclass(frozen=True)
class SolverConfig:
    """Resolved configuration for one solve."""

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    epsilon: float = DEFAULT_EPSILON
    prior_variance: Optional[float] = None


@dataclass
class CalcResult:
    """
    Result of a performance calculation.

    Exactly one of ``iterations`` and ``error`` is set: ``iterations`` when the
    solver converged, ``error`` (the final error metric) when it ran out of
    iterations. ``ratings`` holds the updated values in input order either way.
    """

    ratings: List[float] = field(default_factory=list)
    iterations: Optional[int] = None
    error: Optional[float] = None

    @property
    def converged(self) -> bool:
        return self.iterations is not None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "ratings": list(self.ratings),
            "iterations": self.iterations,
            "error": self.error,
        }
