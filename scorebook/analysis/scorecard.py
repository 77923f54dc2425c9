"""
Scorecard figures derived from the ball ledger.

Batting, bowling and fielding numbers for each player are recomputed
from the deliveries rather than tracked incrementally, so they can
never drift from the ledger. The performance scorer and the career
stats update both read from here.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional

from scorebook.config import BALLS_PER_OVER
from scorebook.data.ball_event import Ball, WicketType
from scorebook.data.roster import Player, PlayerStats
from scorebook.state.match_state import Match

logger = logging.getLogger(__name__)


@dataclass
class BattingFigures:
    player_id: str
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    dot_balls: int = 0
    dismissal: Optional[WicketType] = None

    @property
    def batted(self) -> bool:
        return self.balls > 0 or self.dismissal is not None

    @property
    def is_out(self) -> bool:
        return self.dismissal is not None

    @property
    def strike_rate(self) -> float:
        if self.balls == 0:
            return 0.0
        return self.runs / self.balls * 100

    @property
    def is_duck(self) -> bool:
        return self.is_out and self.runs == 0


@dataclass
class BowlingFigures:
    player_id: str
    balls: int = 0
    runs_conceded: int = 0
    wickets: int = 0
    dot_balls: int = 0
    maidens: int = 0

    @property
    def bowled(self) -> bool:
        return self.balls > 0

    @property
    def overs_str(self) -> str:
        return f"{self.balls // BALLS_PER_OVER}.{self.balls % BALLS_PER_OVER}"

    @property
    def economy_rate(self) -> float:
        if self.balls == 0:
            return 0.0
        return self.runs_conceded / self.balls * BALLS_PER_OVER

    @property
    def dot_ball_pct(self) -> float:
        if self.balls == 0:
            return 0.0
        return self.dot_balls / self.balls * 100

    @property
    def figures(self) -> str:
        return f"{self.wickets}/{self.runs_conceded}"


@dataclass
class FieldingFigures:
    player_id: str
    catches: int = 0
    run_outs: int = 0
    stumpings: int = 0


@dataclass
class InningsScorecard:
    team_name: str
    score: int
    wickets: int
    overs: str
    extras: int
    batting: list[BattingFigures] = field(default_factory=list)
    bowling: list[BowlingFigures] = field(default_factory=list)


def batting_figures(player_id: str, balls: Iterable[Ball]) -> BattingFigures:
    figures = BattingFigures(player_id=player_id)
    for ball in balls:
        if ball.striker_id != player_id:
            continue
        figures.runs += ball.runs_off_bat
        if ball.is_legal_delivery:
            figures.balls += 1
            if ball.runs_off_bat == 0:
                figures.dot_balls += 1
        if ball.runs_off_bat == 4:
            figures.fours += 1
        elif ball.runs_off_bat == 6:
            figures.sixes += 1
        if ball.is_wicket:
            figures.dismissal = ball.wicket_type
    return figures


def bowling_figures(player_id: str, balls: Iterable[Ball]) -> BowlingFigures:
    """Every run off a delivery counts against its bowler."""
    figures = BowlingFigures(player_id=player_id)
    per_over: dict[tuple[int, int], list[int]] = defaultdict(lambda: [0, 0])  # legal balls, runs

    for ball in balls:
        if ball.bowler_id != player_id:
            continue
        over = per_over[(ball.innings, ball.over_number)]
        if ball.is_legal_delivery:
            figures.balls += 1
            over[0] += 1
            if ball.runs == 0:
                figures.dot_balls += 1
        if ball.is_wicket and ball.wicket_type.credited_to_bowler:
            figures.wickets += 1
        figures.runs_conceded += ball.runs
        over[1] += ball.runs

    figures.maidens = sum(
        1 for legal, runs in per_over.values() if legal == BALLS_PER_OVER and runs == 0
    )
    return figures


def fielding_figures(player_id: str, balls: Iterable[Ball]) -> FieldingFigures:
    figures = FieldingFigures(player_id=player_id)
    for ball in balls:
        if not ball.is_wicket or ball.fielder_id != player_id:
            continue
        if ball.wicket_type is WicketType.CAUGHT:
            figures.catches += 1
        elif ball.wicket_type is WicketType.RUN_OUT:
            figures.run_outs += 1
        elif ball.wicket_type is WicketType.STUMPED:
            figures.stumpings += 1
    return figures


def innings_scorecard(match: Match, innings: int) -> InningsScorecard:
    team = match.team_for_innings(innings)
    balls = match.innings_balls(innings)

    batting = [batting_figures(pid, balls) for pid in team.players]
    bowler_ids: list[str] = []
    for ball in balls:
        if ball.bowler_id not in bowler_ids:
            bowler_ids.append(ball.bowler_id)

    return InningsScorecard(
        team_name=team.name,
        score=team.score,
        wickets=team.wickets,
        overs=team.overs_str,
        extras=team.extras.total,
        batting=[b for b in batting if b.batted],
        bowling=[bowling_figures(pid, balls) for pid in bowler_ids],
    )


def _better_figures(current: str, best: str) -> bool:
    current_wickets, current_runs = (int(x) for x in current.split("/"))
    best_wickets, best_runs = (int(x) for x in best.split("/"))
    if current_wickets != best_wickets:
        return current_wickets > best_wickets
    return current_runs < best_runs


def update_player_stats(player: Player, match: Match) -> PlayerStats:
    """Career stats with this match folded in. The player is not modified."""
    batting = batting_figures(player.player_id, match.balls)
    bowling = bowling_figures(player.player_id, match.balls)
    fielding = fielding_figures(player.player_id, match.balls)
    stats = replace(player.stats)

    stats.matches_played += 1

    stats.runs_scored += batting.runs
    stats.balls_faced += batting.balls
    stats.fours += batting.fours
    stats.sixes += batting.sixes
    stats.dot_balls += batting.dot_balls
    if batting.is_out:
        stats.times_out += 1
    if batting.is_duck:
        stats.ducks += 1
    if batting.runs >= 100:
        stats.hundreds += 1
    elif batting.runs >= 50:
        stats.fifties += 1
    stats.highest_score = max(stats.highest_score, batting.runs)

    stats.wickets_taken += bowling.wickets
    stats.balls_bowled += bowling.balls
    stats.runs_conceded += bowling.runs_conceded
    stats.maiden_overs += bowling.maidens
    if bowling.wickets > 0 and (
        stats.best_bowling_figures in ("", "0/0")
        or _better_figures(bowling.figures, stats.best_bowling_figures)
    ):
        stats.best_bowling_figures = bowling.figures

    stats.catches += fielding.catches
    stats.run_outs += fielding.run_outs
    stats.stumpings += fielding.stumpings

    if match.player_of_match_id == player.player_id:
        stats.motm_awards += 1
    return stats


def apply_career_stats(match: Match) -> list[Player]:
    """Fold a completed match into every participant's stats, in place."""
    if not match.is_completed:
        raise ValueError("Career stats are only updated for completed matches")

    players = match.players_in_order()
    for player in players:
        player.stats = update_player_stats(player, match)
        logger.debug(
            "Stats updated for %s: %d matches, %d runs, %d wickets",
            player.name, player.stats.matches_played,
            player.stats.runs_scored, player.stats.wickets_taken,
        )
    logger.info("Career stats updated for %d players", len(players))
    return players
