"""Match result text."""

from __future__ import annotations

from scorebook.config import MAX_WICKETS
from scorebook.state.match_state import Match


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def match_result(match: Match) -> str:
    if not match.is_completed:
        return "Match in progress"

    first = match.team_for_innings(1)
    chasing = match.team_for_innings(2)
    first_score = match.first_innings_score if match.first_innings_score is not None else first.score
    chasing_score = chasing.score if match.is_second_innings else 0

    if chasing_score > first_score:
        return f"{chasing.name} won by {_plural(MAX_WICKETS - chasing.wickets, 'wicket')}"
    if first_score > chasing_score:
        return f"{first.name} won by {_plural(first_score - chasing_score, 'run')}"
    return "Match tied"
