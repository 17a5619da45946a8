"""
Depth-limited minimax with alpha-beta pruning.

The search knows nothing about any particular game. A SearchProblem supplies
the children of a node, a static evaluation and the scores of finished or
stuck nodes, all from the point of view of one fixed side.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional, Protocol, Tuple, TypeVar

N = TypeVar("N")
M = TypeVar("M")


class SearchProblem(Protocol[N, M]):
    def terminal_score(self, node: N) -> Optional[float]:
        """Score for a finished node, or None if play continues."""
        ...

    def evaluate(self, node: N) -> float:
        """Static evaluation at the depth horizon."""
        ...

    def children(self, node: N) -> Iterable[Tuple[M, N]]:
        """(move, resulting node) pairs for the side to move."""
        ...

    def dead_end_score(self, node: N) -> float:
        """Score when an unfinished node has no children."""
        ...


class SearchStats:
    """Node counter, handy when logging how much work a bot did."""

    __slots__ = ("nodes",)

    def __init__(self):
        self.nodes = 0


def alphabeta(
    problem: SearchProblem[N, M],
    node: N,
    depth: int,
    alpha: float = -math.inf,
    beta: float = math.inf,
    maximizing: bool = True,
    stats: Optional[SearchStats] = None,
) -> Tuple[float, Optional[M]]:
    """
    Return (score, best move) for `node` searched `depth` plies deep.

    Terminal nodes are scored before the depth check. Among equally scored
    moves the first one generated wins.
    """
    if stats is not None:
        stats.nodes += 1

    terminal = problem.terminal_score(node)
    if terminal is not None:
        return terminal, None
    if depth == 0:
        return problem.evaluate(node), None

    best_move: Optional[M] = None
    best = -math.inf if maximizing else math.inf
    searched = False

    for move, child in problem.children(node):
        score, _ = alphabeta(problem, child, depth - 1, alpha, beta, not maximizing, stats)
        if not searched or (score > best if maximizing else score < best):
            best, best_move = score, move
        searched = True

        if maximizing:
            alpha = max(alpha, best)
        else:
            beta = min(beta, best)
        if alpha >= beta:
            break

    if not searched:
        return problem.dead_end_score(node), None
    return best, best_move
