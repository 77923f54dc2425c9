"""
Match state aggregates.

Holds everything a delivery can change: per-team innings totals, extras,
fall of wickets, the crease and bowler selections, and the flattened
ball ledger. The match is owned by the caller and handed to the engine
functions explicitly; nothing here keeps global state.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Optional

from scorebook.config import BALLS_PER_OVER, TossDecision
from scorebook.data.ball_event import Ball, WicketType
from scorebook.data.roster import Player, Roster


@dataclass
class Extras:
    byes: int = 0
    leg_byes: int = 0
    wides: int = 0
    no_balls: int = 0

    @property
    def total(self) -> int:
        return self.byes + self.leg_byes + self.wides + self.no_balls


@dataclass(frozen=True)
class FallOfWicket:
    """One dismissal with the score and over it happened at."""

    wicket_number: int
    score: int
    batter: str  # Display name at the time of dismissal
    over: str  # e.g. "4.3"
    bowler: str
    wicket_type: WicketType


@dataclass
class TeamInnings:
    """A team's line-up and its running innings totals."""

    name: str
    players: list[str] = field(default_factory=list)  # Player ids in batting/bowling order
    score: int = 0
    wickets: int = 0
    overs: int = 0  # Completed overs
    balls: int = 0  # Legal balls in the current over, 0-5
    extras: Extras = field(default_factory=Extras)
    fall_of_wickets: list[FallOfWicket] = field(default_factory=list)

    @property
    def legal_balls(self) -> int:
        return self.overs * BALLS_PER_OVER + self.balls

    @property
    def overs_str(self) -> str:
        return f"{self.overs}.{self.balls}"

    @property
    def run_rate(self) -> float:
        return self.score / self.legal_balls * BALLS_PER_OVER if self.legal_balls else 0.0

    @property
    def summary(self) -> str:
        return f"{self.name} {self.score}/{self.wickets} ({self.overs_str} ov)"

    def add_player(self, player_id: str) -> None:
        if player_id not in self.players:
            self.players.append(player_id)

    def reset_innings(self) -> None:
        self.score = 0
        self.wickets = 0
        self.overs = 0
        self.balls = 0
        self.extras = Extras()
        self.fall_of_wickets = []


@dataclass
class BowlerSlots:
    """Current bowler, plus the one who just finished an over.

    ``previous`` is only populated between the end of an over and the
    confirmation of the next bowler.
    """

    current: Optional[str] = None
    previous: Optional[str] = None

    def end_over(self) -> None:
        self.previous = self.current
        self.current = None

    def confirm(self, bowler_id: str) -> None:
        self.current = bowler_id
        self.previous = None


@dataclass
class Match:
    """Complete match state at any point during the game."""

    team1: TeamInnings
    team2: TeamInnings
    batting_team: TeamInnings
    bowling_team: TeamInnings
    total_overs: int
    roster: Roster = field(default_factory=Roster)
    match_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])

    toss_winner: str = ""
    toss_decision: TossDecision = TossDecision.BAT

    balls: list[Ball] = field(default_factory=list)  # Both innings, in order
    current_innings: int = 1

    striker_id: Optional[str] = None
    non_striker_id: Optional[str] = None
    bowlers: BowlerSlots = field(default_factory=BowlerSlots)

    # Raised by a delivery, cleared by the matching selection or by undo
    awaiting_bowler: bool = False
    awaiting_batter: bool = False

    first_innings_score: Optional[int] = None
    is_completed: bool = False
    result: Optional[str] = None
    player_of_match_id: Optional[str] = None

    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: Optional[datetime] = None

    @property
    def is_second_innings(self) -> bool:
        return self.current_innings == 2

    @property
    def target(self) -> Optional[int]:
        if self.first_innings_score is None:
            return None
        return self.first_innings_score + 1

    @property
    def current_bowler_id(self) -> Optional[str]:
        return self.bowlers.current

    def innings_balls(self, innings: Optional[int] = None) -> list[Ball]:
        """Ledger slice for one innings (default: the current one)."""
        innings = innings or self.current_innings
        return [b for b in self.balls if b.innings == innings]

    def over_balls(self, over_number: int, innings: Optional[int] = None) -> list[Ball]:
        return [b for b in self.innings_balls(innings) if b.over_number == over_number]

    def team_for_innings(self, innings: int) -> TeamInnings:
        """The team that batted in the given innings."""
        first = self.bowling_team if self.is_second_innings else self.batting_team
        if innings == 1:
            return first
        return self.team2 if first is self.team1 else self.team1

    def player(self, player_id: str) -> Player:
        return self.roster.get(player_id)

    def players_in_order(self) -> list[Player]:
        """Team 1 then team 2 line-ups, each player once.

        Anyone who appears in the ledger without being in a line-up (a
        substitute fielder, say) follows in order of first appearance.
        """
        in_ledger = []
        for b in self.balls:
            in_ledger.extend(
                pid for pid in (b.striker_id, b.non_striker_id, b.bowler_id, b.fielder_id) if pid
            )

        seen: set[str] = set()
        ordered = []
        for pid in self.team1.players + self.team2.players + in_ledger:
            if pid not in seen:
                seen.add(pid)
                ordered.append(self.roster.get(pid))
        return ordered


def create_match(
    team1_name: str,
    team2_name: str,
    total_overs: int,
    roster: Roster,
    team1_players: Iterable[str] = (),
    team2_players: Iterable[str] = (),
    toss_winner: str = "",
    toss_decision: TossDecision = TossDecision.BAT,
    match_id: Optional[str] = None,
) -> Match:
    """Build an empty match with batting order decided by the toss.

    The toss winner bats first when they choose to bat, otherwise the
    other side does. With no toss recorded, team 1 bats first.
    """
    if total_overs <= 0:
        raise ValueError(f"Overs per innings must be positive: {total_overs}")

    team1_players = list(team1_players)
    team2_players = list(team2_players)
    for pid in team1_players + team2_players:
        if pid not in roster:
            raise ValueError(f"Unknown player id: {pid}")

    team1 = TeamInnings(name=team1_name, players=team1_players)
    team2 = TeamInnings(name=team2_name, players=team2_players)

    team1_bats = True
    if toss_winner == team2_name:
        team1_bats = toss_decision is TossDecision.BOWL
    elif toss_winner == team1_name:
        team1_bats = toss_decision is TossDecision.BAT

    kwargs = {"match_id": match_id} if match_id else {}
    return Match(
        team1=team1,
        team2=team2,
        batting_team=team1 if team1_bats else team2,
        bowling_team=team2 if team1_bats else team1,
        total_overs=total_overs,
        roster=roster,
        toss_winner=toss_winner,
        toss_decision=toss_decision,
        **kwargs,
    )
