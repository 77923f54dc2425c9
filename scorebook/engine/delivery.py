"""
Delivery Processor.

The core transition of the engine: ``process_ball`` applies one delivery
to a match, ``reverse_ball`` removes the latest one again. The two are
exact inverses, which is what undo/redo is built on.
"""

from __future__ import annotations

import logging
from typing import Optional

from scorebook.config import BALLS_PER_OVER
from scorebook.data.ball_event import Ball, ExtrasType
from scorebook.engine.rules import should_rotate_strike
from scorebook.state.match_state import Extras, FallOfWicket, Match, TeamInnings

logger = logging.getLogger(__name__)


def extras_credit(ball: Ball) -> tuple[Optional[ExtrasType], int]:
    """Which extras bucket a ball feeds, and by how much.

    A wide's runs already include the automatic extra, so the whole of
    them are wides. A no-ball adds one to the no-ball count. Byes and
    leg-byes take all the runs.
    """
    if ball.extras_type is None:
        return None, 0
    if ball.extras_type is ExtrasType.NO_BALL:
        return ExtrasType.NO_BALL, 1
    return ball.extras_type, ball.runs


def _adjust_extras(extras: Extras, kind: Optional[ExtrasType], amount: int) -> None:
    if kind is ExtrasType.WIDE:
        extras.wides += amount
    elif kind is ExtrasType.NO_BALL:
        extras.no_balls += amount
    elif kind is ExtrasType.BYE:
        extras.byes += amount
    elif kind is ExtrasType.LEG_BYE:
        extras.leg_byes += amount


def _swap_strike(match: Match) -> None:
    match.striker_id, match.non_striker_id = match.non_striker_id, match.striker_id


def _record_fall_of_wicket(match: Match, team: TeamInnings, ball: Ball) -> FallOfWicket:
    ball_in_over = team.balls + (1 if ball.is_legal_delivery else 0)
    record = FallOfWicket(
        wicket_number=team.wickets,
        score=team.score,
        batter=match.roster.name_of(ball.striker_id),
        over=f"{team.overs}.{ball_in_over}",
        bowler=match.roster.name_of(ball.bowler_id),
        wicket_type=ball.wicket_type,
    )
    team.fall_of_wickets.append(record)
    logger.info(
        "WICKET %d: %s %s, %d/%d at %s",
        record.wicket_number, record.batter, record.wicket_type.label,
        team.score, team.wickets, record.over,
    )
    return record


def process_ball(match: Match, ball: Ball) -> Match:
    """Apply one delivery to the match and return it.

    Assumes the striker, non-striker and bowler on the ball are the ones
    selected on the match; checking that is the caller's job.
    """
    team = match.batting_team
    match.balls.append(ball)

    team.score += ball.runs
    kind, amount = extras_credit(ball)
    _adjust_extras(team.extras, kind, amount)

    if ball.is_wicket:
        team.wickets += 1
        _record_fall_of_wicket(match, team, ball)

    if ball.is_legal_delivery:
        team.balls += 1
        if team.balls >= BALLS_PER_OVER:
            team.overs += 1
            team.balls = 0
            _swap_strike(match)
            match.bowlers.end_over()
            logger.info(
                "Over %d complete: %s %d/%d",
                team.overs, team.name, team.score, team.wickets,
            )
        elif should_rotate_strike(ball, False):
            _swap_strike(match)
            logger.debug("Strike rotated mid-over: %s on strike", match.striker_id)
    elif should_rotate_strike(ball, False):
        _swap_strike(match)
        logger.debug("Strike rotated on extra: %s on strike", match.striker_id)

    return match


def completed_over(match: Match, ball: Ball) -> bool:
    """Whether ``ball``, the latest delivery applied, finished an over."""
    team = match.batting_team
    return ball.is_legal_delivery and team.balls == 0 and team.overs > 0


def reverse_ball(match: Match) -> Optional[Ball]:
    """Remove the latest delivery and undo everything it changed.

    Returns the removed ball, or None when the ledger is empty.
    """
    if not match.balls:
        return None

    ball = match.balls[-1]
    team = match.batting_team
    closed_over = completed_over(match, ball)

    match.balls.pop()
    team.score -= ball.runs
    kind, amount = extras_credit(ball)
    _adjust_extras(team.extras, kind, -amount)

    if ball.is_wicket:
        team.wickets -= 1
        if team.fall_of_wickets:
            team.fall_of_wickets.pop()

    if ball.is_legal_delivery:
        if team.balls == 0 and team.overs > 0:
            team.overs -= 1
            team.balls = BALLS_PER_OVER - 1
        else:
            team.balls -= 1

    if closed_over:
        match.bowlers.current = ball.bowler_id
        match.bowlers.previous = None

    # The ball remembers who stood where before it was bowled
    match.striker_id = ball.striker_id
    match.non_striker_id = ball.non_striker_id

    logger.debug("Reversed %s: %s", ball.over_ball_str, ball.commentary)
    return ball
