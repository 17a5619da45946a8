"""
Tabletop - turn-based board games, puzzles and their bots.

Stateless engines over immutable states, with heuristic and alpha-beta
search opponents, a unique-solution Sudoku generator, and a seeded RNG for
reproducible play.

Quick Start:
    from tabletop import TicTacToe, History, Difficulty, create_rng, play

    game = TicTacToe()
    history = History.start(game.create_initial_state())
    history = play(game, history, game.parse_move(history.present, "1,1"))
    reply = game.choose_bot_move(history.present, 2, Difficulty.HARD, create_rng(7))

Modules:
    core       - Errors, enums, seeded RNG, undo/redo history, board hashing
    games      - The engines (tic-tac-toe, checkers, go, chess, sudoku, number guess)
    selection  - Minimax with alpha-beta pruning
    storage    - Key-value stores for the best score
    utils      - Game registry, configuration, factories, text formatting
"""

from tabletop.api import run, play_board_game, play_sudoku, play_number_guess
from tabletop.core import Difficulty, GameKind, History, create_rng
from tabletop.games import (
    Checkers,
    ChessVariant,
    Go,
    NumberGuess,
    Sudoku,
    TicTacToe,
    play,
)
from tabletop.utils.config import Config

__version__ = "1.0.0"

__all__ = [
    # Main API
    "run",
    "play_board_game",
    "play_sudoku",
    "play_number_guess",
    "Config",
    # Engines
    "TicTacToe",
    "Checkers",
    "Go",
    "ChessVariant",
    "Sudoku",
    "NumberGuess",
    "play",
    # Types
    "Difficulty",
    "GameKind",
    "History",
    "create_rng",
]
