"""Running win/draw tally across games in one session."""

from __future__ import annotations

from dataclasses import dataclass

from .game import DRAW, Mark, Outcome


@dataclass(frozen=True)
class ScoreStats:
    human_wins: int = 0
    computer_wins: int = 0
    draws: int = 0


@dataclass
class ScoreTracker:
    """Counts finished games.

    Not idempotent: the caller records each concluded game exactly once,
    typically when the outcome changes from ``None`` to something else.
    A new game does not reset the tally; only :meth:`reset` does.
    """

    human: Mark = Mark.X
    computer: Mark = Mark.O
    human_wins: int = 0
    computer_wins: int = 0
    draws: int = 0

    def record_result(self, outcome: Outcome) -> None:
        if outcome is None:
            return
        if outcome == self.human:
            self.human_wins += 1
        elif outcome == self.computer:
            self.computer_wins += 1
        elif outcome == DRAW:
            self.draws += 1
        else:
            raise ValueError(f"Unknown game outcome {outcome!r}")

    def get_stats(self) -> ScoreStats:
        return ScoreStats(
            human_wins=self.human_wins,
            computer_wins=self.computer_wins,
            draws=self.draws,
        )

    def reset(self) -> None:
        self.human_wins = 0
        self.computer_wins = 0
        self.draws = 0
