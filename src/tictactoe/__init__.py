"""Tic-tac-toe package exposing game logic, the AI, score keeping, and the web application."""

from .ai import MoveSelector, NoMovesAvailable
from .game import DRAW, Mark, TicTacToeGame
from .score import ScoreStats, ScoreTracker
from .ui import app

__all__ = [
    "DRAW",
    "Mark",
    "MoveSelector",
    "NoMovesAvailable",
    "ScoreStats",
    "ScoreTracker",
    "TicTacToeGame",
    "app",
]
