"""
Undo/Redo Controller.

A scoring session keeps the balls it applied, in order, and a redo stack
of balls it took back. Undo inverts the latest delivery exactly,
including an innings break or match completion the delivery caused.
The match itself is always passed in; the session never holds it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from scorebook.config import PerformanceConfig
from scorebook.data.ball_event import Ball
from scorebook.engine.delivery import reverse_ball
from scorebook.engine.scoring import (
    DeliveryOutcome,
    InningsTransition,
    line_up_for,
    record_delivery,
    reopen_match,
    revert_second_innings,
)
from scorebook.state.match_state import Match

logger = logging.getLogger(__name__)


@dataclass
class HistoryEntry:
    ball: Ball
    transition: Optional[InningsTransition] = None
    completed_match: bool = False


class ScoringSession:
    """Per-session action history with undo and redo."""

    def __init__(self, performance: Optional[PerformanceConfig] = None):
        self._performance = performance
        self._history: list[HistoryEntry] = []
        self._redo: list[Ball] = []

    @property
    def can_undo(self) -> bool:
        return bool(self._history)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def history(self) -> list[Ball]:
        return [entry.ball for entry in self._history]

    @property
    def redo_stack(self) -> list[Ball]:
        """Balls available to redo, next one last."""
        return list(self._redo)

    def record(self, match: Match, ball: Ball) -> DeliveryOutcome:
        """Score a new ball. Any pending redo is discarded."""
        outcome = self._apply(match, ball)
        self._redo.clear()
        return outcome

    def _apply(self, match: Match, ball: Ball) -> DeliveryOutcome:
        outcome = record_delivery(match, ball, self._performance)
        self._history.append(
            HistoryEntry(
                ball=ball,
                transition=outcome.transition,
                completed_match=outcome.match_complete,
            )
        )
        return outcome

    def undo(self, match: Match) -> Optional[Ball]:
        """Take back the latest ball. No-op returning None when there is none."""
        if not self._history:
            return None

        entry = self._history[-1]
        if not match.balls or match.balls[-1].ball_id != entry.ball.ball_id:
            raise RuntimeError(
                "Ledger and session history disagree; was the match changed elsewhere?"
            )

        if entry.completed_match:
            reopen_match(match)
        if entry.transition is not None:
            revert_second_innings(match, entry.transition)

        reverse_ball(match)
        match.awaiting_bowler = False
        match.awaiting_batter = False

        self._history.pop()
        self._redo.append(entry.ball)
        logger.info(
            "Undone %s (%s): %s",
            entry.ball.over_ball_str, entry.ball.commentary, match.batting_team.summary,
        )
        return entry.ball

    def redo(self, match: Match) -> Optional[DeliveryOutcome]:
        """Re-apply the most recently undone ball.

        Pending selections are made from the ball itself (its bowler after
        an over, its new batter after a wicket, its openers after the
        innings break). A ball that disagrees with a selection the scorer
        has made since the undo is refused and stays on the redo stack.
        """
        if not self._redo:
            return None
        ball = self._redo[-1]
        line_up_for(match, ball)
        outcome = self._apply(match, ball)
        self._redo.pop()
        logger.info("Redone %s (%s)", ball.over_ball_str, ball.commentary)
        return outcome

    def clear(self) -> None:
        self._history.clear()
        self._redo.clear()
