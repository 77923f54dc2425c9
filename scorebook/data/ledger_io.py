"""
Ball ledger CSV export and import.

Writes a match's ledger as one Cricsheet-style row per delivery for audit
and scorecard tooling, and reads such files back. A loaded ledger can be
replayed through the live scoring path to rebuild every aggregate.

Column layout follows Cricsheet's ball-by-ball CSV (innings, ball,
batting_team, bowling_team, striker, non_striker, bowler, runs_off_bat,
extras, wicket_type, player_dismissed) with extra columns for player
names, the extras kind, the fielder and the commentary.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from scorebook.data.ball_event import Ball, ExtrasType, WicketType
from scorebook.data.roster import Player, Roster
from scorebook.state.match_state import Match

logger = logging.getLogger(__name__)

FIELDNAMES = [
    "match_id", "innings", "ball", "over_number", "ball_number",
    "batting_team", "bowling_team",
    "striker", "striker_name", "non_striker", "non_striker_name",
    "bowler", "bowler_name",
    "runs_off_bat", "extras", "extras_type",
    "wicket_type", "player_dismissed", "fielder", "fielder_name",
    "commentary", "timestamp", "ball_id",
]

# Our own values plus Cricsheet's column names for the same kinds
EXTRAS_MAP = {
    "wide": ExtrasType.WIDE,
    "wides": ExtrasType.WIDE,
    "no_ball": ExtrasType.NO_BALL,
    "noballs": ExtrasType.NO_BALL,
    "bye": ExtrasType.BYE,
    "byes": ExtrasType.BYE,
    "leg_bye": ExtrasType.LEG_BYE,
    "legbyes": ExtrasType.LEG_BYE,
}

WICKET_MAP = {
    "bowled": WicketType.BOWLED,
    "caught": WicketType.CAUGHT,
    "caught and bowled": WicketType.CAUGHT,
    "lbw": WicketType.LBW,
    "run_out": WicketType.RUN_OUT,
    "run out": WicketType.RUN_OUT,
    "stumped": WicketType.STUMPED,
    "hit_wicket": WicketType.HIT_WICKET,
    "hit wicket": WicketType.HIT_WICKET,
}


@dataclass
class LedgerInfo:
    """Match metadata recovered from a ledger file."""

    match_id: str
    batting_first: str
    fielding_first: str
    batting_first_players: list[str] = field(default_factory=list)
    fielding_first_players: list[str] = field(default_factory=list)
    max_over: int = 0


def write_ledger_csv(match: Match, csv_path: Path) -> int:
    """Write the match's ledger to ``csv_path``. Returns rows written."""
    names = match.roster
    rows = []
    for b in match.balls:
        batting = match.team_for_innings(b.innings)
        bowling = match.team_for_innings(2 if b.innings == 1 else 1)
        extras = b.runs - b.runs_off_bat
        rows.append({
            "match_id": match.match_id,
            "innings": b.innings,
            "ball": b.over_ball_str,
            "over_number": b.over_number,
            "ball_number": b.ball_number,
            "batting_team": batting.name,
            "bowling_team": bowling.name,
            "striker": b.striker_id,
            "striker_name": names.name_of(b.striker_id),
            "non_striker": b.non_striker_id,
            "non_striker_name": names.name_of(b.non_striker_id),
            "bowler": b.bowler_id,
            "bowler_name": names.name_of(b.bowler_id),
            "runs_off_bat": b.runs_off_bat,
            "extras": extras,
            "extras_type": b.extras_type.value if b.extras_type else "",
            "wicket_type": b.wicket_type.value if b.wicket_type else "",
            "player_dismissed": b.striker_id if b.is_wicket else "",
            "fielder": b.fielder_id or "",
            "fielder_name": names.name_of(b.fielder_id),
            "commentary": b.commentary,
            "timestamp": b.timestamp.isoformat(),
            "ball_id": b.ball_id,
        })

    csv_path.parent.mkdir(parents=True, exist_ok=True)
    with open(csv_path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        writer.writerows(rows)

    logger.info("Wrote %d deliveries of match %s to %s", len(rows), match.match_id, csv_path)
    return len(rows)


def _remember(roster: Roster, player_id: str, name: str) -> None:
    if player_id and player_id not in roster:
        roster.add(Player(name=name or player_id, player_id=player_id))


def _append_once(ids: list[str], *player_ids: str) -> None:
    for pid in player_ids:
        if pid and pid not in ids:
            ids.append(pid)


def load_ledger_csv(csv_path: Path) -> tuple[LedgerInfo, Roster, list[Ball]]:
    """Load one match's ledger.

    Returns:
        Tuple of (LedgerInfo, Roster of every player named, Balls in order)
    """
    with open(csv_path, "r", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))

    if not rows:
        raise ValueError(f"Empty CSV file: {csv_path}")

    first = rows[0]
    info = LedgerInfo(
        match_id=first.get("match_id") or csv_path.stem,
        batting_first=first["batting_team"],
        fielding_first=first["bowling_team"],
    )
    roster = Roster()
    balls: list[Ball] = []

    for row in rows:
        innings = int(row["innings"])
        over_number, ball_number = _parse_position(row)

        extras_type = _extras_kind(row)
        runs_off_bat = int(row.get("runs_off_bat") or 0)
        extras = int(row.get("extras") or 0)

        wicket_str = (row.get("wicket_type") or "").strip().lower()
        wicket_type = WICKET_MAP.get(wicket_str) if wicket_str else None
        if wicket_str and wicket_type is None:
            raise ValueError(f"Unknown dismissal kind {wicket_str!r} in {csv_path}")

        striker = row["striker"]
        non_striker = row["non_striker"]
        bowler = row["bowler"]
        fielder = (row.get("fielder") or "").strip() or None

        _remember(roster, striker, row.get("striker_name", ""))
        _remember(roster, non_striker, row.get("non_striker_name", ""))
        _remember(roster, bowler, row.get("bowler_name", ""))
        if fielder:
            _remember(roster, fielder, row.get("fielder_name", ""))

        if innings == 1:
            _append_once(info.batting_first_players, striker, non_striker)
            _append_once(info.fielding_first_players, bowler, fielder)
        else:
            _append_once(info.fielding_first_players, striker, non_striker)
            _append_once(info.batting_first_players, bowler, fielder)
        info.max_over = max(info.max_over, over_number)

        kwargs = {}
        if row.get("timestamp"):
            kwargs["timestamp"] = datetime.fromisoformat(row["timestamp"])
        if row.get("ball_id"):
            kwargs["ball_id"] = row["ball_id"]

        balls.append(Ball(
            innings=innings,
            over_number=over_number,
            ball_number=ball_number,
            bowler_id=bowler,
            striker_id=striker,
            non_striker_id=non_striker,
            runs=runs_off_bat + extras,
            extras_type=extras_type,
            is_wicket=wicket_type is not None,
            wicket_type=wicket_type,
            fielder_id=fielder,
            commentary=row.get("commentary", ""),
            **kwargs,
        ))

    logger.info(
        "Loaded match %s: %s vs %s, %d deliveries",
        info.match_id, info.batting_first, info.fielding_first, len(balls),
    )
    return info, roster, balls


def load_ledgers_from_directory(
    directory: Path,
    max_matches: Optional[int] = None,
) -> list[tuple[LedgerInfo, Roster, list[Ball]]]:
    """Load every ledger CSV in a directory, skipping unreadable ones."""
    csv_files = sorted(directory.glob("*.csv"))
    if not csv_files:
        logger.warning("No CSV files found in %s", directory)
        return []

    ledgers = []
    for csv_file in csv_files:
        if max_matches and len(ledgers) >= max_matches:
            break
        try:
            ledgers.append(load_ledger_csv(csv_file))
        except (ValueError, KeyError) as e:
            logger.warning("Failed to load %s: %s", csv_file.name, e)
            continue

    logger.info("Loaded %d ledgers from %s", len(ledgers), directory)
    return ledgers


def _parse_position(row: dict) -> tuple[int, int]:
    """1-indexed over and ball-in-over, from explicit columns or 'over.ball'."""
    if row.get("over_number"):
        return int(row["over_number"]), int(row.get("ball_number") or 0)

    ball_str = row.get("ball", "0.0")
    if "." in ball_str:
        over, ball = ball_str.split(".", 1)
        return int(over) + 1, int(ball)
    return int(float(ball_str)) + 1, 0


def _extras_kind(row: dict) -> Optional[ExtrasType]:
    """Extras kind from our extras_type column or Cricsheet's per-kind columns."""
    kind = (row.get("extras_type") or "").strip().lower()
    if kind:
        if kind not in EXTRAS_MAP:
            raise ValueError(f"Unknown extras kind {kind!r}")
        return EXTRAS_MAP[kind]

    for column in ("wides", "noballs", "byes", "legbyes"):
        if int(row.get(column) or 0):
            return EXTRAS_MAP[column]
    return None
