"""Beatable heuristic AI: win, block, center, corner, with random mistakes."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import random
from typing import List, Optional, Protocol, Sequence

from .game import WINNING_LINES, Board, Coord, Mark, TicTacToeGame, copy_board

logger = logging.getLogger(__name__)


MISTAKE_CHANCE = 0.2
CENTER: Coord = (1, 1)
CORNERS: Sequence[Coord] = ((0, 0), (0, 2), (2, 0), (2, 2))


class RandomSource(Protocol):
    """The part of ``random.Random`` the AI relies on."""

    def random(self) -> float: ...

    def choice(self, seq: Sequence[Coord]) -> Coord: ...


class NoMovesAvailable(RuntimeError):
    """Raised when a move is requested on a finished or full board."""


@dataclass
class MoveSelector:
    """AI player choosing moves for whichever mark is to move.

    With probability ``mistake_chance`` it plays a uniformly random legal
    move; otherwise it walks a fixed priority list. ``rng`` is anything with
    ``random()`` and ``choice()``, e.g. a seeded ``random.Random``.
    """

    mistake_chance: float = MISTAKE_CHANCE
    rng: RandomSource = field(default_factory=random.Random, repr=False)

    # ---- public API ----

    def calculate_move(self, game: TicTacToeGame) -> Coord:
        moves = game.available_moves()
        if not moves:
            raise NoMovesAvailable("No valid moves available")

        if self.rng.random() < self.mistake_chance:
            move = self.rng.choice(moves)
            logger.debug("Mistake branch: random move %s", move)
            return move
        return self._smart_move(game.get_board(), game.current_player, moves)

    # ---- heuristics ----

    def _smart_move(self, board: Board, me: Mark, moves: List[Coord]) -> Coord:
        opp = me.opponent()

        # 1) Win now, 2) block
        for player, reason in ((me, "win"), (opp, "block")):
            move = self._find_winning_move(board, player, moves)
            if move is not None:
                logger.debug("Heuristic %s at %s", reason, move)
                return move

        # 3) Center, 4) first open corner
        if CENTER in moves:
            return CENTER
        for corner in CORNERS:
            if corner in moves:
                return corner

        # 5) Anything
        return moves[0]

    def _find_winning_move(
        self, board: Board, player: Mark, moves: List[Coord]
    ) -> Optional[Coord]:
        for row, col in moves:
            trial = copy_board(board)
            trial[row][col] = player
            # Only lines through the new mark can have been completed by it.
            for line in WINNING_LINES:
                if (row, col) in line and all(trial[r][c] == player for r, c in line):
                    return row, col
        return None
