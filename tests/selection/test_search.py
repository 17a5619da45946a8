"""
Tests for tabletop.selection.search

A hand-built game tree stands in for a real game.
"""

import math

from tabletop.selection.search import SearchStats, alphabeta


class TreeProblem:
    """Nodes are nested dicts (move -> child); leaves are numbers."""

    def __init__(self, terminals=None, dead_end=-99):
        self.terminals = terminals or {}
        self.dead_end = dead_end

    def terminal_score(self, node):
        return self.terminals.get(id(node))

    def evaluate(self, node):
        return node if isinstance(node, (int, float)) else 0

    def children(self, node):
        if isinstance(node, dict):
            yield from node.items()

    def dead_end_score(self, node):
        return self.dead_end


# Classic two-ply tree: max picks the branch whose min is largest
TREE = {
    "a": {"a1": 3, "a2": 12, "a3": 8},
    "b": {"b1": 2, "b2": 4, "b3": 6},
    "c": {"c1": 14, "c2": 5, "c3": 2},
}


class TestAlphaBeta:

    def test_minimax_value(self):
        score, move = alphabeta(TreeProblem(), TREE, 2)
        assert (score, move) == (3, "a")

    def test_minimizing_root(self):
        score, move = alphabeta(TreeProblem(), TREE["a"], 1, maximizing=False)
        assert (score, move) == (3, "a1")

    def test_pruning_visits_fewer_nodes(self):
        stats = SearchStats()
        alphabeta(TreeProblem(), TREE, 2, stats=stats)
        # 13 nodes without pruning; b2 and b3 are cut off
        assert stats.nodes < 13

    def test_first_move_wins_ties(self):
        score, move = alphabeta(TreeProblem(), {"x": 1, "y": 1, "z": 1}, 1)
        assert (score, move) == (1, "x")

    def test_depth_zero_evaluates(self):
        assert alphabeta(TreeProblem(), 7, 0) == (7, None)

    def test_horizon_cuts_search(self):
        """Below the depth limit the static evaluation replaces the subtree."""
        tree = {"deep": {"x": 100}, "shallow": 1}
        assert alphabeta(TreeProblem(), tree, 1) == (1, "shallow")
        assert alphabeta(TreeProblem(), tree, 2) == (100, "deep")

    def test_terminal_checked_before_depth(self):
        won = {"never": -5}
        problem = TreeProblem(terminals={id(won): math.inf})
        score, move = alphabeta(problem, {"lose": 0, "win": won}, 1)
        assert (score, move) == (math.inf, "win")

    def test_dead_end(self):
        assert alphabeta(TreeProblem(dead_end=-42), {}, 3) == (-42, None)
