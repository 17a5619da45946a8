"""
Selection module - move search shared by the bots.
"""

from tabletop.selection.search import SearchProblem, SearchStats, alphabeta

__all__ = [
    "SearchProblem",
    "SearchStats",
    "alphabeta",
]
