"""
Comparison-graph checks for identifiability of free ratings.
"""

from typing import List, Sequence

from .model import BattleTable


class _DisjointSet:
    def __init__(self, size: int):
        self.parent = list(range(size))

    def find(self, x: int) -> int:
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, a: int, b: int) -> None:
        ra, rb = self.find(a), self.find(b)
        if ra != rb:
            self.parent[rb] = ra


def find_unanchored(fixed: Sequence[bool], table: BattleTable) -> List[int]:
    """
    Find free players whose ratings the data cannot pin down.

    Players are nodes and every pair with at least one recorded game is an
    edge. A free player that has played but whose connected component holds
    no fixed player can be shifted together with its component without
    changing the likelihood. Free players with no games at all are not
    reported; their ratings are simply left unchanged.

    Args:
        fixed: Fixed flag for each player
        table: Aggregated battles

    Returns:
        Sorted indices of unanchored free players
    """
    n = len(fixed)
    components = _DisjointSet(n)
    played = [False] * n
    for a, b in zip(table.first.tolist(), table.second.tolist()):
        components.union(a, b)
        played[a] = played[b] = True

    anchored = {components.find(k) for k in range(n) if fixed[k]}
    return [k for k in range(n)
            if not fixed[k] and played[k] and components.find(k) not in anchored]
