"""
Basic usage example for nypc-perf.
"""

import logging

from nypc_perf import BattleResult, CalcOptions, Rating, calc_perf


def main():
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    ratings = [
        Rating(value=0.0),
        Rating(value=0.0),
        Rating(value=0.0),
        Rating(value=0.0, fixed=True),  # anchor
    ]
    battles = [
        BattleResult(i=0, j=1, wij=7, wji=3),
        BattleResult(i=0, j=2, wij=4, wji=4),
        BattleResult(i=1, j=3, wij=2, wji=6),
        BattleResult(i=2, j=3, wij=5, wji=1),
        BattleResult(i=1, j=0, wij=1, wji=2),
    ]

    result = calc_perf(ratings, battles, CalcOptions(epsilon=1e-9))

    if result.converged:
        print(f"Converged in {result.iterations} iterations")
    else:
        print(f"Did not converge, final error {result.error:.3e}")

    ranking = sorted(enumerate(result.ratings), key=lambda x: x[1], reverse=True)
    for rank, (player, value) in enumerate(ranking, 1):
        print(f"{rank:2} | player {player} | {value:+.4f}")


if __name__ == "__main__":
    main()
