"""
Caller-facing entry point: marshals and validates input, then runs the solver.
"""

import math
import numbers
from typing import Any, Mapping, Sequence, Union

import numpy as np

from .core import BattleResult, CalcOptions, CalcResult, PerfCalc, Rating, build_result
from .exceptions import InvalidInputError

_MISSING = object()


def _extract_field(obj: Any, field: str, default: Any = _MISSING) -> Any:
    """
    Extract a field from an object, handling different object types.

    Args:
        obj: Object or mapping to extract field from
        field: Field name to extract
        default: Value returned if the field is missing; if omitted a missing
            field is an error

    Returns:
        Value of the field
    """
    try:
        return getattr(obj, field)
    except (AttributeError, TypeError):
        try:
            return obj[field]
        except (KeyError, TypeError, IndexError):
            if default is _MISSING:
                raise InvalidInputError(f"Missing field '{field}'") from None
            return default


def _is_finite_number(value: Any) -> bool:
    try:
        return math.isfinite(value)
    except TypeError:
        return False


def _to_rating(obj: Any) -> Rating:
    if isinstance(obj, Rating):
        value, fixed = obj.value, obj.fixed
    else:
        value = _extract_field(obj, "value")
        fixed = _extract_field(obj, "fixed", False)
    if isinstance(value, bool) or not _is_finite_number(value):
        raise InvalidInputError("Invalid rating value")
    if not isinstance(fixed, (bool, np.bool_)):
        raise InvalidInputError("Invalid rating fixed flag")
    return Rating(value=float(value), fixed=bool(fixed))


def _to_battle(obj: Any, num_players: int) -> BattleResult:
    i, j = _extract_field(obj, "i"), _extract_field(obj, "j")
    wij, wji = _extract_field(obj, "wij"), _extract_field(obj, "wji")
    for index in (i, j):
        if isinstance(index, bool) or not isinstance(index, numbers.Integral) or not 0 <= index < num_players:
            raise InvalidInputError("Invalid player index")
    for wins in (wij, wji):
        if isinstance(wins, bool) or not _is_finite_number(wins) or wins < 0:
            raise InvalidInputError("Invalid battle result")
    return BattleResult(i=int(i), j=int(j), wij=float(wij), wji=float(wji))


def _to_options(options: Union[CalcOptions, Mapping[str, Any], None]) -> CalcOptions:
    if options is None:
        return CalcOptions()
    if isinstance(options, CalcOptions):
        parsed = options
    else:
        parsed = CalcOptions(
            max_iterations=_extract_field(options, "max_iterations", None),
            epsilon=_extract_field(options, "epsilon", None),
            prior_variance=_extract_field(options, "prior_variance", None),
        )

    max_iterations = parsed.max_iterations
    if max_iterations is not None and (
        isinstance(max_iterations, bool) or not isinstance(max_iterations, numbers.Integral) or max_iterations < 1
    ):
        raise InvalidInputError("Max iterations must be greater than 0")
    epsilon = parsed.epsilon
    if epsilon is not None and not (_is_finite_number(epsilon) and epsilon > 0):
        raise InvalidInputError("Epsilon must be greater than 0")
    prior_variance = parsed.prior_variance
    if prior_variance is not None and not (_is_finite_number(prior_variance) and prior_variance > 0):
        raise InvalidInputError("Prior variance must be greater than 0")
    return parsed


def calc_perf(
    ratings: Sequence[Any],
    battles: Sequence[Any],
    options: Union[CalcOptions, Mapping[str, Any], None] = None,
) -> CalcResult:
    """
    Calculate player performance ratings using the Bradley-Terry model.

    Finds the ratings of the free players that maximise the likelihood of
    the observed head-to-head results. At least one rating should be fixed
    to anchor the scale.

    Args:
        ratings: Initial ratings, as Rating objects, mappings or objects with
            ``value`` and ``fixed`` fields
        battles: Battle records with fields ``i``, ``j``, ``wij``, ``wji``
        options: CalcOptions or mapping; missing fields use the defaults
            (100 iterations, epsilon 1e-6, no prior). Without a prior the
            result is the plain maximum-likelihood estimate; a prior pulls
            free ratings towards 0 and gives different values

    Returns:
        CalcResult with the updated ratings and either the number of
        iterations (converged) or the final error (not converged)

    Raises:
        InvalidInputError: If the input is rejected before solving
        IdentifiabilityError: If some free ratings are not determined by the data

    Example:
        >>> result = calc_perf(
        ...     [{"value": 0.0, "fixed": True}, {"value": 0.0}],
        ...     [{"i": 0, "j": 1, "wij": 1.0, "wji": 1.0}],
        ... )
        >>> result.iterations
        0
    """
    parsed_ratings = [_to_rating(r) for r in ratings]
    parsed_battles = [_to_battle(b, len(parsed_ratings)) for b in battles]
    config = _to_options(options).resolve()

    outcome = PerfCalc(config).run(parsed_ratings, parsed_battles)
    return build_result(outcome)


solve = calc_perf
