"""
Game engines.

Board games share the GameEngine protocol (see game_base). Sudoku and the
number-guessing game are single-player and expose the same state-threading
style without a bot.
"""

from tabletop.games.game_base import GameEngine, play
from tabletop.games.game_state import BoardValue, GameState
from tabletop.games.tic_tac_toe import TicTacToe
from tabletop.games.checkers import Checkers
from tabletop.games.go import Go
from tabletop.games.chess_variant import ChessVariant
from tabletop.games.sudoku import Sudoku
from tabletop.games.number_guess import NumberGuess

__all__ = [
    "GameEngine",
    "play",
    "BoardValue",
    "GameState",
    "TicTacToe",
    "Checkers",
    "Go",
    "ChessVariant",
    "Sudoku",
    "NumberGuess",
]
