"""Core rules for classic 3x3 tic-tac-toe."""

from __future__ import annotations

from enum import Enum
import logging
from typing import List, Optional, Tuple, Union

logger = logging.getLogger(__name__)


class Mark(str, Enum):
    """The two symbols; ``X`` always moves first."""

    X = "X"
    O = "O"

    def opponent(self) -> "Mark":
        return Mark.O if self is Mark.X else Mark.X


DRAW = "Draw"
SIZE = 3

Cell = Optional[Mark]  # None means empty
Board = List[List[Cell]]
Coord = Tuple[int, int]
Line = Tuple[Coord, Coord, Coord]
Outcome = Union[Mark, str, None]  # Mark, DRAW, or None while in progress

# Evaluation order: rows top->bottom, columns left->right, main diagonal,
# anti-diagonal. The first match is the winning line.
WINNING_LINES: Tuple[Line, ...] = (
    ((0, 0), (0, 1), (0, 2)),
    ((1, 0), (1, 1), (1, 2)),
    ((2, 0), (2, 1), (2, 2)),
    ((0, 0), (1, 0), (2, 0)),
    ((0, 1), (1, 1), (2, 1)),
    ((0, 2), (1, 2), (2, 2)),
    ((0, 0), (1, 1), (2, 2)),
    ((0, 2), (1, 1), (2, 0)),
)


def empty_board() -> Board:
    return [[None] * SIZE for _ in range(SIZE)]


def copy_board(board: Board) -> Board:
    return [row.copy() for row in board]


def find_winning_line(board: Board) -> Optional[Line]:
    """Return the first line holding three identical marks, if any."""
    for line in WINNING_LINES:
        (r1, c1), (r2, c2), (r3, c3) = line
        v = board[r1][c1]
        if v is not None and v == board[r2][c2] == board[r3][c3]:
            return line
    return None


def in_bounds(row: int, col: int) -> bool:
    return 0 <= row < SIZE and 0 <= col < SIZE


class TicTacToeGame:
    """Board, turn order and outcome of a single game.

    The board is only ever changed by :meth:`make_move` and :meth:`reset`;
    :meth:`get_board` hands out copies so callers can't reach the internal
    state.
    """

    def __init__(self) -> None:
        self.reset()

    # ---- API used by UI & AI ----

    @property
    def current_player(self) -> Mark:
        # Still answers once the game is over: the mark that would move next.
        return self._current_player

    @property
    def winner(self) -> Outcome:
        return self._winner

    @property
    def winning_cells(self) -> Optional[Line]:
        return self._winning_cells

    def get_board(self) -> Board:
        return copy_board(self._board)

    def is_game_over(self) -> bool:
        return self._winner is not None

    def available_moves(self) -> List[Coord]:
        """Empty cells in row-major order."""
        return [
            (row, col)
            for row in range(SIZE)
            for col in range(SIZE)
            if self._board[row][col] is None
        ]

    def make_move(self, row: int, col: int) -> bool:
        """Place the current mark; returns False (and changes nothing) if illegal."""
        if not in_bounds(row, col):
            return False
        if self._winner is not None:
            return False
        if self._board[row][col] is not None:
            return False

        mark = self._current_player
        self._board[row][col] = mark
        self._update_outcome()
        self._current_player = mark.opponent()
        return True

    def reset(self) -> None:
        self._board: Board = empty_board()
        self._current_player: Mark = Mark.X
        self._winner: Outcome = None
        self._winning_cells: Optional[Line] = None

    # ---- helpers ----

    def _update_outcome(self) -> None:
        line = find_winning_line(self._board)
        if line is not None:
            row, col = line[0]
            self._winner = self._board[row][col]
            self._winning_cells = line
            logger.debug("%s wins on %s", self._winner.value, line)
            return
        if all(cell is not None for r in self._board for cell in r):
            self._winner = DRAW
            self._winning_cells = None
            logger.debug("Board full, game drawn")

    def __repr__(self) -> str:
        rows = ["".join(c.value if c else "." for c in r) for r in self._board]
        return (
            f"TicTacToeGame(board={'/'.join(rows)!r}, "
            f"current_player={self._current_player.value!r}, winner={self._winner!r})"
        )
