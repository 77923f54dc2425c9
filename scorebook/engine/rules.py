"""
Procedural rules of limited-overs cricket.

Pure predicates over a match: no function in this module mutates state.
The scoring flow and the UI both poll them after every delivery.

Rules enforced
--------------
1. Over length      - an over is six legal deliveries; wides and no-balls
                      do not count towards it.
2. Innings end      - overs limit reached, ten wickets down, or (second
                      innings only) the chasing side has passed the
                      first-innings total.
3. Strike rotation  - odd runs swap the batters, and so does the end of
                      every over.
4. No-consecutive   - nobody bowls the over straight after their own.
"""

from __future__ import annotations

import logging
from typing import Optional

from scorebook.config import BALLS_PER_OVER, MAX_WICKETS
from scorebook.data.ball_event import Ball
from scorebook.data.roster import Player
from scorebook.state.match_state import Match

logger = logging.getLogger(__name__)


class BowlerRuleViolation(ValueError):
    """A bowler selection that the laws do not allow."""


class RosterExhaustedError(RuntimeError):
    """No one on the bowling side may bowl the next over."""


def is_over_complete(match: Match) -> bool:
    """True once the over of the latest delivery holds six legal balls."""
    balls = match.innings_balls()
    if not balls:
        return False
    over_number = balls[-1].over_number
    legal = sum(1 for b in balls if b.over_number == over_number and b.is_legal_delivery)
    return legal >= BALLS_PER_OVER


def is_innings_complete(match: Match) -> bool:
    batting = match.batting_team

    if batting.overs >= match.total_overs:
        logger.debug("Innings complete: all %d overs bowled", match.total_overs)
        return True

    if batting.wickets >= MAX_WICKETS:
        logger.debug("Innings complete: all out")
        return True

    # Strictly greater: drawing level is not a win
    if (
        match.is_second_innings
        and match.first_innings_score is not None
        and batting.score > match.first_innings_score
    ):
        logger.debug("Innings complete: target of %d passed", match.target)
        return True

    return False


def should_rotate_strike(ball: Ball, over_just_completed: bool) -> bool:
    # One run of a wide/no-ball is the automatic extra, not a run taken
    if not ball.is_legal_delivery:
        return ball.runs > 1
    return ball.runs % 2 == 1 or over_just_completed


def previous_over_bowler(match: Match, next_over: int) -> Optional[str]:
    """Who bowled the over before ``next_over`` in the current innings."""
    if next_over <= 1:
        return None
    previous = match.over_balls(next_over - 1)
    if not previous:
        return None
    return previous[0].bowler_id


def can_bowl_next_over(bowler_id: str, match: Match) -> bool:
    """Whether this player may bowl the over after the last completed one.

    Compared by player id, so two players sharing a name never collide.
    """
    if not match.innings_balls():
        return True

    next_over = match.batting_team.overs + 1
    last_bowler = previous_over_bowler(match, next_over)
    if last_bowler == bowler_id:
        logger.info(
            "Rejected %s: bowled over %d and cannot bowl over %d",
            match.roster.name_of(bowler_id), next_over - 1, next_over,
        )
        return False
    return True


def eligible_bowlers(match: Match, next_over: int) -> list[Player]:
    """Bowling-side players allowed to bowl ``next_over``, in line-up order."""
    at_crease = {match.striker_id, match.non_striker_id}
    excluded = previous_over_bowler(match, next_over)

    eligible = [
        match.player(pid)
        for pid in match.bowling_team.players
        if pid not in at_crease and pid != excluded
    ]

    if not eligible:
        logger.warning(
            "No eligible bowlers for over %d of %s's innings",
            next_over, match.batting_team.name,
        )
    return eligible


def require_eligible_bowlers(match: Match) -> list[Player]:
    """Eligible bowlers for the upcoming over, raising when there are none."""
    next_over = match.batting_team.overs + 1
    eligible = eligible_bowlers(match, next_over)
    if not eligible:
        raise RosterExhaustedError(
            f"No eligible bowler for over {next_over}: "
            f"add a player to {match.bowling_team.name}"
        )
    return eligible
