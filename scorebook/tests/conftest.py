"""Shared test fixtures for scoring engine tests."""

from __future__ import annotations

import pytest

from scorebook.data.roster import Player, Roster
from scorebook.engine.history import ScoringSession
from scorebook.engine.scoring import start_innings
from scorebook.state.match_state import Match, create_match

THUNDER = [f"t{i}" for i in range(1, 7)]
STRIKERS = [f"s{i}" for i in range(1, 7)]


@pytest.fixture
def roster() -> Roster:
    """Six Thunder players (t1-t6) and six Strikers (s1-s6)."""
    players = [Player(name=f"Thunder {i}", player_id=f"t{i}") for i in range(1, 7)]
    players += [Player(name=f"Strikers {i}", player_id=f"s{i}") for i in range(1, 7)]
    return Roster(players)


@pytest.fixture
def match(roster: Roster) -> Match:
    """Five-over match, Thunder batting first."""
    return create_match(
        "Thunder", "Strikers", 5, roster,
        team1_players=THUNDER, team2_players=STRIKERS,
    )


@pytest.fixture
def live_match(match: Match) -> Match:
    """First innings under way: t1 on strike, t2 non-striker, s6 bowling."""
    return start_innings(match, "t1", "t2", "s6")


@pytest.fixture
def session() -> ScoringSession:
    return ScoringSession()
