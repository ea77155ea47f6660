"""
Bradley-Terry model evaluation.

Under the Bradley-Terry model the probability that player i beats player j is

    p_ij = exp(pi_i) / (exp(pi_i) + exp(pi_j)) = logistic(pi_i - pi_j)

This module aggregates battle records into per-pair win totals and computes
the log-likelihood, its gradient and its curvature restricted to the free
(non-fixed) players. The curvature is returned as the information matrix
``A = -H``, which is symmetric positive semi-definite.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence, Tuple

import numpy as np

from .types import BattleResult

logger = logging.getLogger(__name__)


@dataclass
class BattleTable:
    """
    Win totals aggregated per unordered pair of players.

    For pair ``k`` the players are ``first[k] < second[k]``; ``wins_first[k]``
    counts wins of ``first[k]`` over ``second[k]`` and ``wins_second[k]`` the
    reverse. Only pairs with at least one recorded game are stored.
    """

    first: np.ndarray
    second: np.ndarray
    wins_first: np.ndarray
    wins_second: np.ndarray

    @property
    def games(self) -> np.ndarray:
        return self.wins_first + self.wins_second

    def __len__(self) -> int:
        return len(self.first)


def aggregate_battles(battles: Iterable[BattleResult]) -> BattleTable:
    """
    Sum the win counts of all battle records per unordered pair.

    Records with ``i == j`` carry no information about relative strength and
    are dropped, as are pairs whose total game count is zero.

    Args:
        battles: Battle records with valid indices and non-negative counts

    Returns:
        BattleTable with pairs in ascending (first, second) order
    """
    totals: Dict[Tuple[int, int], list] = defaultdict(lambda: [0.0, 0.0])
    for battle in battles:
        i, j = int(battle.i), int(battle.j)
        if i == j:
            continue
        if i < j:
            entry = totals[(i, j)]
            entry[0] += battle.wij
            entry[1] += battle.wji
        else:
            entry = totals[(j, i)]
            entry[0] += battle.wji
            entry[1] += battle.wij

    pairs = sorted(key for key, (a, b) in totals.items() if a + b > 0)
    return BattleTable(
        first=np.array([a for a, _ in pairs], dtype=np.intp),
        second=np.array([b for _, b in pairs], dtype=np.intp),
        wins_first=np.array([totals[p][0] for p in pairs], dtype=float),
        wins_second=np.array([totals[p][1] for p in pairs], dtype=float),
    )


def win_probability(diff):
    """
    Logistic function of the rating difference, stable for large gaps.

    Args:
        diff: pi_i - pi_j, scalar or array

    Returns:
        Probability that player i beats player j
    """
    diff = np.asarray(diff, dtype=float)
    e = np.exp(-np.abs(diff))
    return np.where(diff >= 0, 1.0 / (1.0 + e), e / (1.0 + e))


def log_likelihood(values: np.ndarray, table: BattleTable, prior_variance: Optional[float] = None,
                   free: Optional[Sequence[int]] = None) -> float:
    """
    Log-likelihood of the observed win totals at the given ratings.

    Args:
        values: Rating values of all players
        table: Aggregated battles
        prior_variance: Variance of the zero-mean Gaussian prior on free
            ratings, or None for plain maximum likelihood
        free: Indices of free players (needed only with a prior)

    Returns:
        L(pi), plus the log prior density of the free ratings if a prior is set
    """
    diff = values[table.first] - values[table.second]
    # log(p) = -log(1 + exp(-d)), log(1 - p) = -log(1 + exp(d))
    ll = -float(np.sum(table.wins_first * np.logaddexp(0.0, -diff)
                       + table.wins_second * np.logaddexp(0.0, diff)))
    if prior_variance is not None and free is not None and len(free):
        ll -= float(np.sum(values[np.asarray(free)] ** 2)) / (2.0 * prior_variance)
    return ll


def evaluate(values: np.ndarray, table: BattleTable, free: Sequence[int],
             prior_variance: Optional[float] = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    Gradient and information matrix of the log-likelihood over free players.

    For free player k:

        g_k  = sum_j [w_kj - (w_kj + w_jk) p_kj]
        A_kk = sum_j (w_kj + w_jk) p_kj (1 - p_kj)
        A_kl = -(w_kl + w_lk) p_kl (1 - p_kl)

    Fixed players only enter through the probabilities.

    Args:
        values: Rating values of all players
        table: Aggregated battles
        free: Indices of free players, in the order used for the output
        prior_variance: Optional Gaussian prior variance on free ratings

    Returns:
        Tuple of (gradient of shape (m,), information matrix of shape (m, m))
        where m = len(free)
    """
    n = len(values)
    free = np.asarray(free, dtype=np.intp)
    m = len(free)

    p = win_probability(values[table.first] - values[table.second])
    games = table.games
    residual = table.wins_first - games * p
    weight = games * p * (1.0 - p)

    grad_all = (np.bincount(table.first, weights=residual, minlength=n)
                - np.bincount(table.second, weights=residual, minlength=n))
    diag_all = (np.bincount(table.first, weights=weight, minlength=n)
                + np.bincount(table.second, weights=weight, minlength=n))

    position = np.full(n, -1, dtype=np.intp)
    position[free] = np.arange(m)

    gradient = grad_all[free]
    info = np.zeros((m, m))
    info[np.arange(m), np.arange(m)] = diag_all[free]

    both_free = (position[table.first] >= 0) & (position[table.second] >= 0)
    rows = position[table.first[both_free]]
    cols = position[table.second[both_free]]
    np.add.at(info, (rows, cols), -weight[both_free])
    np.add.at(info, (cols, rows), -weight[both_free])

    if prior_variance is not None:
        gradient = gradient - values[free] / prior_variance
        info[np.arange(m), np.arange(m)] += 1.0 / prior_variance

    return gradient, info


def constrained_mask(table: BattleTable, free: Sequence[int],
                     prior_variance: Optional[float] = None) -> np.ndarray:
    """
    Mark free players whose rating is constrained by any data.

    A free player is constrained if it has at least one recorded game or a
    prior is set. Unconstrained players have an all-zero row in the
    information matrix; their rating is left unchanged.

    Args:
        table: Aggregated battles
        free: Indices of free players
        prior_variance: Optional Gaussian prior variance on free ratings

    Returns:
        Boolean array of shape (len(free),)
    """
    free = np.asarray(free, dtype=np.intp)
    if prior_variance is not None:
        return np.ones(len(free), dtype=bool)
    played = np.zeros(int(free.max()) + 1 if len(free) else 0, dtype=bool)
    played[table.first[table.first < len(played)]] = True
    played[table.second[table.second < len(played)]] = True
    mask = played[free]
    if not mask.all():
        logger.debug("Excluding %d unconstrained free player(s) from the Newton step",
                     int((~mask).sum()))
    return mask
