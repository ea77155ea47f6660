"""
Packaging of solver outcomes into results.
"""

from .types import CalcResult


def build_result(outcome) -> CalcResult:
    """
    Turn a SolveOutcome into a CalcResult.

    Args:
        outcome: Terminal state returned by PerfCalc.run

    Returns:
        CalcResult with ratings in input order and exactly one of
        ``iterations`` (converged) or ``error`` (iteration limit reached)
    """
    ratings = [float(v) for v in outcome.values]
    if outcome.iterations is not None:
        return CalcResult(ratings=ratings, iterations=int(outcome.iterations))
    return CalcResult(ratings=ratings, error=float(outcome.error))
