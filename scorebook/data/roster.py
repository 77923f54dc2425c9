"""
Players and the roster that owns them.

The roster is the single home of every Player; teams, balls and
fall-of-wicket records refer to players by id.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional


@dataclass
class PlayerStats:
    """Career totals, folded in after each completed match."""

    matches_played: int = 0
    runs_scored: int = 0
    balls_faced: int = 0
    fours: int = 0
    sixes: int = 0
    fifties: int = 0
    hundreds: int = 0
    highest_score: int = 0
    times_out: int = 0
    ducks: int = 0
    dot_balls: int = 0

    wickets_taken: int = 0
    balls_bowled: int = 0
    runs_conceded: int = 0
    maiden_overs: int = 0
    best_bowling_figures: str = "0/0"  # wickets/runs

    catches: int = 0
    run_outs: int = 0
    stumpings: int = 0
    motm_awards: int = 0

    @property
    def batting_average(self) -> float:
        if self.times_out == 0:
            return float(self.runs_scored)
        return self.runs_scored / self.times_out

    @property
    def strike_rate(self) -> float:
        if self.balls_faced == 0:
            return 0.0
        return self.runs_scored / self.balls_faced * 100

    @property
    def bowling_average(self) -> float:
        if self.wickets_taken == 0:
            return 0.0
        return self.runs_conceded / self.wickets_taken

    @property
    def economy_rate(self) -> float:
        if self.balls_bowled == 0:
            return 0.0
        return self.runs_conceded / self.balls_bowled * 6


@dataclass
class Player:
    name: str
    player_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    stats: PlayerStats = field(default_factory=PlayerStats)


class Roster:
    """Arena of players keyed by id, iterated in insertion order."""

    def __init__(self, players: Optional[Iterable[Player]] = None):
        self._players: dict[str, Player] = {}
        for player in players or ():
            self.add(player)

    def add(self, player: Player) -> Player:
        existing = self._players.get(player.player_id)
        if existing is not None and existing is not player:
            raise ValueError(f"Duplicate player id: {player.player_id}")
        self._players[player.player_id] = player
        return player

    def get(self, player_id: str) -> Player:
        try:
            return self._players[player_id]
        except KeyError:
            raise ValueError(f"Unknown player id: {player_id}") from None

    def name_of(self, player_id: Optional[str]) -> str:
        if player_id is None:
            return ""
        return self.get(player_id).name

    def __contains__(self, player_id: object) -> bool:
        return player_id in self._players

    def __iter__(self) -> Iterator[Player]:
        return iter(self._players.values())

    def __len__(self) -> int:
        return len(self._players)
