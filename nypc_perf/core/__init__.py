"""
Core Bradley-Terry solver; expects already validated input.
"""

from .types import (
    DEFAULT_EPSILON,
    DEFAULT_MAX_ITERATIONS,
    BattleResult,
    CalcOptions,
    CalcResult,
    Rating,
    SolverConfig,
)
from .model import BattleTable, aggregate_battles, evaluate, log_likelihood, win_probability
from .graph import find_unanchored
from .linalg import solve_newton_system
from .solver import PerfCalc, SolveOutcome
from .report import build_result
