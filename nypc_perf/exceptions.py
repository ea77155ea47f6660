"""
Exceptions raised by the performance calculator.
"""

from typing import List, Optional


class PerfCalcError(Exception):
    """Base class for all performance calculation errors."""


class InvalidInputError(PerfCalcError, ValueError):
    """
    Raised when ratings, battles or options are rejected before solving.
    """


class IdentifiabilityError(PerfCalcError):
    """
    Raised when the ratings of some free players are not determined by the data.

    This happens when a group of players only ever battled each other and
    none of them is fixed, so the whole group could be shifted by a constant
    without changing any win probability.
    """

    def __init__(self, message: str, players: Optional[List[int]] = None):
        super().__init__(message)
        self.players = list(players or [])
