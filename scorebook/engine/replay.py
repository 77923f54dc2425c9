"""
Ledger replay.

Rebuilds a match from a recorded ledger by feeding every ball back
through the live scoring path, with the selections each ball implies
(openers, next bowler, incoming batter) made along the way. Every
aggregate is re-derived, so a replay doubles as an audit of a ledger.
"""

from __future__ import annotations

import logging
from typing import Optional

from scorebook.config import PerformanceConfig
from scorebook.data.ball_event import Ball
from scorebook.data.ledger_io import LedgerInfo
from scorebook.data.roster import Roster
from scorebook.engine.history import ScoringSession
from scorebook.engine.scoring import ScoringStateError, end_innings, line_up_for
from scorebook.state.match_state import Match, create_match

logger = logging.getLogger(__name__)


def _line_up_for(match: Match, ball: Ball) -> None:
    """Make the match's selections agree with the ball about to be scored."""
    try:
        line_up_for(match, ball)
    except ScoringStateError as e:
        raise ValueError(f"Ledger out of step at {ball.over_ball_str}: {e}") from e

    if {match.striker_id, match.non_striker_id} != {ball.striker_id, ball.non_striker_id}:
        raise ValueError(f"Ledger out of step at {ball.over_ball_str}: unexpected batters")
    if match.striker_id != ball.striker_id:
        logger.debug("Ledger has ends swapped at %s; following the ledger", ball.over_ball_str)
        match.striker_id, match.non_striker_id = ball.striker_id, ball.non_striker_id
    if match.bowlers.current != ball.bowler_id:
        raise ValueError(f"Ledger out of step at {ball.over_ball_str}: bowler changed mid-over")


def replay_ledger(
    info: LedgerInfo,
    roster: Roster,
    balls: list[Ball],
    total_overs: Optional[int] = None,
    performance: Optional[PerformanceConfig] = None,
) -> tuple[Match, ScoringSession]:
    """Score ``balls`` into a fresh match.

    The overs limit defaults to the highest over seen in the ledger.
    Returns the match and the session, whose history holds every ball.
    """
    match = create_match(
        info.batting_first,
        info.fielding_first,
        total_overs or max(info.max_over, 1),
        roster,
        team1_players=info.batting_first_players,
        team2_players=info.fielding_first_players,
        match_id=info.match_id,
    )
    session = ScoringSession(performance)

    for ball in balls:
        if match.is_completed:
            logger.warning(
                "Ledger continues after the match ended; %d balls ignored",
                len(balls) - len(match.balls),
            )
            break
        if ball.innings > match.current_innings:
            end_innings(match, performance)
        _line_up_for(match, ball)
        session.record(match, ball)

    logger.info(
        "Replayed %d deliveries: %s",
        len(match.balls), match.result or match.batting_team.summary,
    )
    return match, session
