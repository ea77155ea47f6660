"""
nypc-perf - Bradley-Terry performance ratings from pairwise battle results.
"""

from .calc import calc_perf, solve
from .core import (
    DEFAULT_EPSILON,
    DEFAULT_MAX_ITERATIONS,
    BattleResult,
    CalcOptions,
    CalcResult,
    PerfCalc,
    Rating,
)
from .exceptions import IdentifiabilityError, InvalidInputError, PerfCalcError

__all__ = [
    "calc_perf",
    "solve",
    "BattleResult",
    "CalcOptions",
    "CalcResult",
    "PerfCalc",
    "Rating",
    "DEFAULT_EPSILON",
    "DEFAULT_MAX_ITERATIONS",
    "PerfCalcError",
    "InvalidInputError",
    "IdentifiabilityError",
]
