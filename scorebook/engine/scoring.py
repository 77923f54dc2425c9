"""
Live scoring flow.

Wraps the Delivery Processor with everything that happens around a
ball on the scoring screen: building the ball from the current
selections, checking for the end of the innings or match after it,
raising the "pick a new bowler/batter" prompts, and the innings break.

Usage
-----
    match = create_match("Thunder", "Strikers", 20, roster, ...)
    start_innings(match, striker_id, non_striker_id, bowler_id)

    outcome = record_delivery(match, new_ball(match, runs=1))
    if outcome.over_complete:
        options = eligible_bowlers(match, match.batting_team.overs + 1)
        select_bowler(match, chosen.player_id)
    if outcome.wicket:
        select_new_batter(match, next_batter_id)
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from scorebook.analysis.performance import select_player_of_match
from scorebook.analysis.result import match_result
from scorebook.config import PerformanceConfig
from scorebook.data.ball_event import Ball, ExtrasType, WicketType, describe_delivery
from scorebook.engine.delivery import completed_over, process_ball
from scorebook.engine.rules import (
    BowlerRuleViolation,
    can_bowl_next_over,
    eligible_bowlers,
    is_innings_complete,
)
from scorebook.state.match_state import BowlerSlots, Match, TeamInnings

logger = logging.getLogger(__name__)


class ScoringStateError(RuntimeError):
    """The match is not in a state where this action makes sense."""


@dataclass
class DeliveryOutcome:
    """What a delivery set in motion, for the caller to prompt on."""

    ball: Ball
    over_complete: bool = False
    wicket: bool = False
    innings_complete: bool = False
    match_complete: bool = False
    roster_exhausted: bool = False
    transition: Optional["InningsTransition"] = None


@dataclass
class InningsTransition:
    """Enough of the pre-break state to put the first innings back."""

    striker_id: Optional[str]
    non_striker_id: Optional[str]
    bowlers: BowlerSlots
    incoming: TeamInnings  # Chasing side's totals before they were reset
    awaiting_bowler: bool
    awaiting_batter: bool


def new_ball(
    match: Match,
    runs: int = 0,
    extras_type: Optional[ExtrasType] = None,
    wicket_type: Optional[WicketType] = None,
    fielder_id: Optional[str] = None,
) -> Ball:
    """Build the next delivery from the match's current selections."""
    if not (match.striker_id and match.non_striker_id and match.bowlers.current):
        raise ScoringStateError("Select striker, non-striker and bowler first")
    if fielder_id is not None and fielder_id not in match.roster:
        raise ValueError(f"Unknown player id: {fielder_id}")

    team = match.batting_team
    legal = extras_type not in (ExtrasType.WIDE, ExtrasType.NO_BALL)
    commentary = describe_delivery(
        runs,
        extras_type=extras_type,
        wicket_type=wicket_type,
        striker_name=match.roster.name_of(match.striker_id),
        fielder_name=match.roster.name_of(fielder_id) if fielder_id else None,
    )
    return Ball(
        innings=match.current_innings,
        over_number=team.overs + 1,
        ball_number=team.balls + (1 if legal else 0),
        bowler_id=match.bowlers.current,
        striker_id=match.striker_id,
        non_striker_id=match.non_striker_id,
        runs=runs,
        extras_type=extras_type,
        is_wicket=wicket_type is not None,
        wicket_type=wicket_type,
        fielder_id=fielder_id,
        commentary=commentary,
    )


def start_innings(
    match: Match,
    striker_id: str,
    non_striker_id: str,
    bowler_id: str,
) -> Match:
    """Put the opening pair and the opening bowler in place."""
    if match.is_completed:
        raise ScoringStateError("Match is already complete")
    if match.innings_balls():
        raise ScoringStateError(f"Innings {match.current_innings} is already under way")
    if striker_id == non_striker_id:
        raise ValueError("Striker and non-striker must be different players")
    if bowler_id in (striker_id, non_striker_id):
        raise BowlerRuleViolation("A batter cannot open the bowling")
    for pid in (striker_id, non_striker_id, bowler_id):
        match.roster.get(pid)

    match.batting_team.add_player(striker_id)
    match.batting_team.add_player(non_striker_id)
    match.bowling_team.add_player(bowler_id)

    match.striker_id = striker_id
    match.non_striker_id = non_striker_id
    match.bowlers.confirm(bowler_id)
    match.awaiting_bowler = False
    match.awaiting_batter = False

    logger.info(
        "Innings %d: %s batting, %s and %s opening, %s bowling",
        match.current_innings, match.batting_team.name,
        match.roster.name_of(striker_id), match.roster.name_of(non_striker_id),
        match.roster.name_of(bowler_id),
    )
    return match


def select_bowler(match: Match, bowler_id: str) -> Match:
    """Confirm the bowler for the next over.

    Rejected before anything changes if they bowled the previous over or
    are one of the batters at the crease.
    """
    match.roster.get(bowler_id)
    if bowler_id in (match.striker_id, match.non_striker_id):
        raise BowlerRuleViolation(
            f"{match.roster.name_of(bowler_id)} is batting and cannot bowl"
        )
    if not can_bowl_next_over(bowler_id, match):
        raise BowlerRuleViolation(
            f"{match.roster.name_of(bowler_id)} cannot bowl consecutive overs"
        )

    match.bowling_team.add_player(bowler_id)
    match.bowlers.confirm(bowler_id)
    match.awaiting_bowler = False
    logger.info(
        "%s to bowl over %d",
        match.roster.name_of(bowler_id), match.batting_team.overs + 1,
    )
    return match


def select_new_batter(match: Match, batter_id: str) -> Match:
    """Send in a batter for the one dismissed by the latest wicket."""
    if not match.awaiting_batter:
        raise ScoringStateError("No batter is out")
    match.roster.get(batter_id)
    if batter_id in (match.striker_id, match.non_striker_id):
        raise ValueError(f"{match.roster.name_of(batter_id)} is already batting")

    innings = match.innings_balls()
    dismissed = [b.striker_id for b in innings if b.is_wicket]
    if batter_id in dismissed:
        raise ValueError(f"{match.roster.name_of(batter_id)} is already out")

    out = dismissed[-1] if dismissed else match.striker_id
    if match.non_striker_id == out:
        match.non_striker_id = batter_id
    else:
        match.striker_id = batter_id

    match.batting_team.add_player(batter_id)
    match.awaiting_batter = False
    logger.info("New batter: %s", match.roster.name_of(batter_id))
    return match


def line_up_for(match: Match, ball: Ball) -> Match:
    """Make whatever selections a recorded ball implies that are still pending.

    Opens the innings from the ball when nobody is at the crease yet, sends
    in the ball's new batter after a wicket and confirms its bowler after
    the end of an over. Selections the caller already made are left alone;
    `record_delivery` rejects the ball if they disagree with it.
    """
    if not match.innings_balls() and match.striker_id is None:
        return start_innings(match, ball.striker_id, ball.non_striker_id, ball.bowler_id)

    incoming = None
    if match.awaiting_batter:
        at_crease = {match.striker_id, match.non_striker_id}
        new = [p for p in (ball.striker_id, ball.non_striker_id) if p not in at_crease]
        if len(new) != 1:
            raise ScoringStateError(f"Ball {ball.over_ball_str} does not bring in one new batter")
        incoming = new[0]

    if match.awaiting_bowler:
        select_bowler(match, ball.bowler_id)
    if incoming is not None:
        select_new_batter(match, incoming)
    return match


def begin_second_innings(match: Match) -> InningsTransition:
    """Close the first innings: swap sides, capture the total, clear the crease."""
    if match.is_second_innings:
        raise ScoringStateError("Second innings has already started")

    first = match.batting_team
    chasing = match.bowling_team
    transition = InningsTransition(
        striker_id=match.striker_id,
        non_striker_id=match.non_striker_id,
        bowlers=copy.copy(match.bowlers),
        incoming=copy.deepcopy(chasing),
        awaiting_bowler=match.awaiting_bowler,
        awaiting_batter=match.awaiting_batter,
    )

    chasing.reset_innings()
    match.batting_team, match.bowling_team = chasing, first
    match.first_innings_score = first.score
    match.current_innings = 2
    match.striker_id = None
    match.non_striker_id = None
    match.bowlers = BowlerSlots()
    match.awaiting_bowler = False
    match.awaiting_batter = False

    logger.info(
        "End of first innings: %s. %s need %d to win",
        first.summary, chasing.name, match.target,
    )
    return transition


def revert_second_innings(match: Match, transition: InningsTransition) -> Match:
    """Put the match back to the moment before ``begin_second_innings``."""
    chasing = match.batting_team
    first = match.bowling_team

    restored = transition.incoming
    chasing.players = restored.players
    chasing.score = restored.score
    chasing.wickets = restored.wickets
    chasing.overs = restored.overs
    chasing.balls = restored.balls
    chasing.extras = restored.extras
    chasing.fall_of_wickets = restored.fall_of_wickets

    match.batting_team, match.bowling_team = first, chasing
    match.first_innings_score = None
    match.current_innings = 1
    match.striker_id = transition.striker_id
    match.non_striker_id = transition.non_striker_id
    match.bowlers = copy.copy(transition.bowlers)
    match.awaiting_bowler = transition.awaiting_bowler
    match.awaiting_batter = transition.awaiting_batter
    logger.info("First innings reopened: %s", first.summary)
    return match


def complete_match(
    match: Match,
    performance: Optional[PerformanceConfig] = None,
) -> Match:
    """Close the match and work out the result and the standout player."""
    match.is_completed = True
    match.completed_at = datetime.now(timezone.utc)
    match.awaiting_bowler = False
    match.awaiting_batter = False
    match.result = match_result(match)

    standout = select_player_of_match(match, performance)
    match.player_of_match_id = standout.player_id if standout else None

    logger.info("MATCH COMPLETE: %s", match.result)
    if standout:
        logger.info("Player of the match: %s", standout.name)
    return match


def reopen_match(match: Match) -> Match:
    match.is_completed = False
    match.completed_at = None
    match.result = None
    match.player_of_match_id = None
    return match


def end_innings(
    match: Match,
    performance: Optional[PerformanceConfig] = None,
) -> Optional[InningsTransition]:
    """Close the current innings early on the scorer's say-so."""
    if match.is_completed:
        raise ScoringStateError("Match is already complete")
    logger.info("Innings %d ended manually", match.current_innings)
    if match.is_second_innings:
        complete_match(match, performance)
        return None
    return begin_second_innings(match)


def record_delivery(
    match: Match,
    ball: Ball,
    performance: Optional[PerformanceConfig] = None,
) -> DeliveryOutcome:
    """Score one ball and work through whatever it brings to an end."""
    if match.is_completed:
        raise ScoringStateError("Match is complete; no further deliveries")
    if match.awaiting_bowler or match.bowlers.current is None:
        raise ScoringStateError("A bowler must be selected for this over")
    if match.awaiting_batter:
        raise ScoringStateError("A new batter must come in first")
    if ball.innings != match.current_innings:
        raise ValueError(
            f"Ball is for innings {ball.innings}, match is in innings {match.current_innings}"
        )
    if ball.bowler_id != match.bowlers.current:
        raise ScoringStateError(
            f"Ball was bowled by {match.roster.name_of(ball.bowler_id)}, "
            f"but {match.roster.name_of(match.bowlers.current)} is bowling"
        )
    if (ball.striker_id, ball.non_striker_id) != (match.striker_id, match.non_striker_id):
        raise ScoringStateError(f"Ball {ball.over_ball_str} was faced by a different pair of batters")

    process_ball(match, ball)
    outcome = DeliveryOutcome(
        ball=ball,
        over_complete=completed_over(match, ball),
        wicket=ball.is_wicket,
    )

    if is_innings_complete(match):
        outcome.innings_complete = True
        if match.is_second_innings:
            complete_match(match, performance)
            outcome.match_complete = True
        else:
            outcome.transition = begin_second_innings(match)
        return outcome

    match.awaiting_bowler = outcome.over_complete
    match.awaiting_batter = outcome.wicket

    if outcome.over_complete:
        next_over = match.batting_team.overs + 1
        if not eligible_bowlers(match, next_over):
            outcome.roster_exhausted = True
            logger.warning(
                "Roster exhausted: add a bowler to %s before over %d",
                match.bowling_team.name, next_over,
            )
    return outcome
