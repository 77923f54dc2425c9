"""Standout-performer scoring.

Each player gets three sub-scores (batting, bowling, fielding), each
zero unless the player took part in that phase. The total is their
plain sum and the highest total is the player of the match.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from scorebook.analysis.scorecard import (
    BattingFigures,
    BowlingFigures,
    FieldingFigures,
    batting_figures,
    bowling_figures,
    fielding_figures,
)
from scorebook.config import PerformanceConfig
from scorebook.data.roster import Player
from scorebook.state.match_state import Match

logger = logging.getLogger(__name__)

DEFAULT_PERFORMANCE = PerformanceConfig()


@dataclass
class PlayerPerformance:
    player_id: str
    batting_score: float
    bowling_score: float
    fielding_score: float
    runs_scored: int = 0
    balls_faced: int = 0
    wickets_taken: int = 0
    catches: int = 0
    run_outs: int = 0

    @property
    def total_score(self) -> float:
        return self.batting_score + self.bowling_score + self.fielding_score


def batting_score(bat: BattingFigures, cfg: PerformanceConfig = DEFAULT_PERFORMANCE) -> float:
    if bat.balls == 0:
        return 0.0

    score = bat.runs * cfg.run_weight

    sr = bat.strike_rate
    if sr >= cfg.fast_strike_rate:
        score += bat.runs * cfg.fast_strike_rate_bonus
    elif sr >= cfg.good_strike_rate:
        score += bat.runs * cfg.good_strike_rate_bonus
    elif sr < cfg.slow_strike_rate and bat.balls >= cfg.slow_strike_rate_min_balls:
        score -= bat.runs * cfg.slow_strike_rate_penalty

    if bat.runs >= 100:
        score += cfg.century_bonus
    elif bat.runs >= 50:
        score += cfg.half_century_bonus
    elif bat.runs >= 30:
        score += cfg.thirty_bonus

    score += bat.fours * cfg.four_bonus
    score += bat.sixes * cfg.six_bonus

    if not bat.is_out and bat.runs >= cfg.not_out_min_runs:
        score += cfg.not_out_bonus
    if bat.is_duck:
        score -= cfg.duck_penalty
    return score


def bowling_score(bowl: BowlingFigures, cfg: PerformanceConfig = DEFAULT_PERFORMANCE) -> float:
    if bowl.balls == 0:
        return 0.0

    score = bowl.wickets * cfg.wicket_weight

    economy = bowl.economy_rate
    if economy <= cfg.tight_economy:
        score += cfg.tight_economy_bonus
    elif economy <= cfg.good_economy:
        score += cfg.good_economy_bonus
    elif economy >= cfg.expensive_economy:
        score -= cfg.expensive_economy_penalty

    dots = bowl.dot_ball_pct
    if dots >= cfg.high_dot_pct:
        score += cfg.high_dot_bonus
    elif dots >= cfg.good_dot_pct:
        score += cfg.good_dot_bonus

    if bowl.wickets >= 5:
        score += cfg.five_wicket_bonus
    elif bowl.wickets >= 3:
        score += cfg.three_wicket_bonus
    return score


def fielding_score(fielding: FieldingFigures, cfg: PerformanceConfig = DEFAULT_PERFORMANCE) -> float:
    return (
        fielding.catches * cfg.catch_weight
        + fielding.run_outs * cfg.run_out_weight
        + fielding.stumpings * cfg.stumping_weight
    )


def calculate_player_performance(
    player_id: str,
    match: Match,
    config: Optional[PerformanceConfig] = None,
) -> PlayerPerformance:
    cfg = config or DEFAULT_PERFORMANCE
    bat = batting_figures(player_id, match.balls)
    bowl = bowling_figures(player_id, match.balls)
    fld = fielding_figures(player_id, match.balls)

    return PlayerPerformance(
        player_id=player_id,
        batting_score=batting_score(bat, cfg),
        bowling_score=bowling_score(bowl, cfg),
        fielding_score=fielding_score(fld, cfg),
        runs_scored=bat.runs,
        balls_faced=bat.balls,
        wickets_taken=bowl.wickets,
        catches=fld.catches,
        run_outs=fld.run_outs,
    )


def rank_performances(
    match: Match,
    config: Optional[PerformanceConfig] = None,
) -> list[PlayerPerformance]:
    """Performances of everyone who scored above zero, best first.

    The sort is stable, so equal totals keep line-up order (team 1 first).
    """
    performances = [
        calculate_player_performance(player.player_id, match, config)
        for player in match.players_in_order()
    ]
    ranked = [p for p in performances if p.total_score > 0]
    ranked.sort(key=lambda p: p.total_score, reverse=True)
    return ranked


def select_player_of_match(
    match: Match,
    config: Optional[PerformanceConfig] = None,
) -> Optional[Player]:
    if not match.is_completed:
        return None

    ranked = rank_performances(match, config)
    if not ranked:
        return None

    top = ranked[0]
    player = match.player(top.player_id)
    logger.info(
        "Standout: %s %.1f (bat %.1f, bowl %.1f, field %.1f)",
        player.name, top.total_score,
        top.batting_score, top.bowling_score, top.fielding_score,
    )
    return player
