"""
Cricket Scoring Engine Orchestrator.

Command-line entry point that drives the engine end to end:
Ball construction → Delivery Processor → Over/Innings rules → Result & Standout

Supports two modes:
1. Demo: Simulate a full match with random outcomes through the engine
2. Replay: Rebuild a match from a ledger CSV and print its scorecard

Usage:
    python -m scorebook.orchestrator --demo
    python -m scorebook.orchestrator --demo --overs 5 --seed 7 --export data/demo.csv
    python -m scorebook.orchestrator --replay data/demo.csv
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import Optional

from scorebook.config import EngineConfig, MatchFormat

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("scorebook.orchestrator")

# Simulated delivery outcomes and their cumulative probabilities
OUTCOMES = [
    (0.33, "dot"),
    (0.60, "single"),
    (0.68, "two"),
    (0.79, "four"),
    (0.84, "six"),
    (0.88, "wide"),
    (0.90, "no_ball"),
    (0.92, "leg_bye"),
    (0.93, "bye"),
    (1.00, "wicket"),
]


def print_scorecard(match) -> None:
    from scorebook.analysis.scorecard import innings_scorecard

    innings_played = 2 if match.is_second_innings else 1
    for innings in range(1, innings_played + 1):
        card = innings_scorecard(match, innings)
        print("\n" + "=" * 60)
        print(f"{card.team_name}: {card.score}/{card.wickets} ({card.overs} ov)")
        print("=" * 60)
        for bat in card.batting:
            how = bat.dismissal.label if bat.dismissal else "not out"
            print(
                f"  {match.roster.name_of(bat.player_id):<20} {how:<12} "
                f"{bat.runs:>4} ({bat.balls}) 4s:{bat.fours} 6s:{bat.sixes}"
            )
        print(f"  Extras: {card.extras}")
        print("  Bowling:")
        for bowl in card.bowling:
            print(
                f"  {match.roster.name_of(bowl.player_id):<20} {bowl.overs_str:>5} ov "
                f"{bowl.maidens}m {bowl.figures:>6}  econ {bowl.economy_rate:.2f}"
            )
        team = match.team_for_innings(innings)
        if team.fall_of_wickets:
            fow = ", ".join(f"{f.score}-{f.wicket_number} ({f.batter}, {f.over})" for f in team.fall_of_wickets)
            print(f"  FoW: {fow}")

    print()
    print(f"Result: {match.result or 'Match in progress'}")
    if match.player_of_match_id:
        print(f"Player of the match: {match.roster.name_of(match.player_of_match_id)}")


def _demo_roster(team: str, prefix: str, roster) -> list[str]:
    from scorebook.data.roster import Player

    ids = []
    for i in range(1, 12):
        player = roster.add(Player(name=f"{team} {i}", player_id=f"{prefix}{i:02d}"))
        ids.append(player.player_id)
    return ids


def _pick_bowler(match) -> str:
    from scorebook.engine.rules import require_eligible_bowlers

    eligible = require_eligible_bowlers(match)
    # The last five of each line-up are the specialist bowlers
    specialists = set(match.bowling_team.players[-5:])
    preferred = [p for p in eligible if p.player_id in specialists]
    return random.choice(preferred or eligible).player_id


def _next_batter(match) -> str:
    dismissed = {b.striker_id for b in match.innings_balls() if b.is_wicket}
    at_crease = {match.striker_id, match.non_striker_id}
    for pid in match.batting_team.players:
        if pid not in dismissed and pid not in at_crease:
            return pid
    raise RuntimeError(f"{match.batting_team.name} have no batters left")


def _simulate_ball(match):
    from scorebook.data.ball_event import ExtrasType, WicketType
    from scorebook.engine.scoring import new_ball

    r = random.random()
    outcome = next(name for cutoff, name in OUTCOMES if r < cutoff)

    if outcome == "wicket":
        kind = random.choice(list(WicketType))
        fielder = random.choice(match.bowling_team.players) if kind.needs_fielder else None
        return new_ball(match, 0, wicket_type=kind, fielder_id=fielder)
    if outcome == "wide":
        return new_ball(match, 1, extras_type=ExtrasType.WIDE)
    if outcome == "no_ball":
        return new_ball(match, 1, extras_type=ExtrasType.NO_BALL)
    if outcome == "leg_bye":
        return new_ball(match, random.choice([1, 2]), extras_type=ExtrasType.LEG_BYE)
    if outcome == "bye":
        return new_ball(match, 1, extras_type=ExtrasType.BYE)

    runs = {"dot": 0, "single": 1, "two": 2, "four": 4, "six": 6}[outcome]
    return new_ball(match, runs)


def run_demo(config: EngineConfig, seed: Optional[int] = None, export: Optional[Path] = None) -> None:
    """Simulate a complete match through the engine."""
    from scorebook.analysis.scorecard import apply_career_stats
    from scorebook.config import TossDecision
    from scorebook.data.ledger_io import write_ledger_csv
    from scorebook.data.roster import Roster
    from scorebook.engine.history import ScoringSession
    from scorebook.engine.scoring import select_bowler, select_new_batter, start_innings
    from scorebook.state.match_state import create_match

    if seed is not None:
        random.seed(seed)

    logger.info("=" * 60)
    logger.info("CRICKET SCORING ENGINE - DEMO MODE")
    logger.info("=" * 60)

    roster = Roster()
    thunder = _demo_roster("Thunder", "T", roster)
    strikers = _demo_roster("Strikers", "S", roster)

    toss_winner = random.choice(["Thunder", "Strikers"])
    decision = random.choice(list(TossDecision))
    match = create_match(
        "Thunder", "Strikers", config.overs_per_innings, roster,
        team1_players=thunder, team2_players=strikers,
        toss_winner=toss_winner, toss_decision=decision,
    )
    logger.info("%s won the toss and chose to %s", toss_winner, decision.value)

    session = ScoringSession(config.performance)

    while not match.is_completed:
        if not match.innings_balls():
            batting = match.batting_team.players
            start_innings(match, batting[0], batting[1], match.bowling_team.players[-1])

        outcome = session.record(match, _simulate_ball(match))

        if outcome.innings_complete:
            continue
        if match.awaiting_batter:
            select_new_batter(match, _next_batter(match))
        if match.awaiting_bowler:
            select_bowler(match, _pick_bowler(match))

    print_scorecard(match)
    apply_career_stats(match)

    if export is not None:
        if export.suffix.lower() != ".csv":
            export = export / f"{match.match_id}.csv"
        write_ledger_csv(match, export)
        print(f"Ledger written to {export}")


def run_replay(config: EngineConfig, ledger_path: Path, total_overs: Optional[int] = None) -> None:
    """Rebuild a match from its ledger and print the scorecard."""
    from scorebook.data.ledger_io import load_ledger_csv
    from scorebook.engine.replay import replay_ledger

    logger.info("=" * 60)
    logger.info("CRICKET SCORING ENGINE - REPLAY MODE")
    logger.info("=" * 60)
    if not ledger_path.exists() and not ledger_path.is_absolute():
        ledger_path = config.data_dir / ledger_path
    logger.info("Ledger: %s", ledger_path)

    info, roster, balls = load_ledger_csv(ledger_path)
    match, _ = replay_ledger(
        info, roster, balls,
        total_overs=total_overs,
        performance=config.performance,
    )
    print_scorecard(match)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Limited-overs Cricket Scoring Engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m scorebook.orchestrator --demo
  python -m scorebook.orchestrator --demo --format t10 --export data/demo.csv
  python -m scorebook.orchestrator --demo --export
  python -m scorebook.orchestrator --replay data/demo.csv
        """,
    )

    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--demo", action="store_true", help="Simulate a match with random outcomes")
    mode.add_argument(
        "--replay", type=Path, metavar="CSV",
        help="Replay a ledger CSV (relative names are also looked up in the data directory)",
    )

    parser.add_argument("--format", type=str, choices=[f.value for f in MatchFormat], help="Match format")
    parser.add_argument("--overs", type=int, help="Overs per innings (overrides the format)")
    parser.add_argument("--seed", type=int, help="Random seed for the demo")
    parser.add_argument(
        "--export", type=Path, nargs="?", const="", metavar="PATH",
        help="Write the demo ledger to this CSV or directory (default: the data directory)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    config = EngineConfig.from_env()
    logging.getLogger().setLevel(logging.DEBUG if args.verbose else config.log_level)

    config = EngineConfig(
        performance=config.performance,
        match_format=MatchFormat(args.format) if args.format else config.match_format,
        total_overs=args.overs if args.overs else config.total_overs,
        log_level=config.log_level,
        data_dir=config.data_dir,
    )

    try:
        if args.demo:
            export = config.data_dir if args.export == "" else args.export
            run_demo(config, seed=args.seed, export=export)
        elif args.replay:
            run_replay(config, args.replay, total_overs=args.overs)
    except (ValueError, RuntimeError, OSError) as e:
        logger.error("%s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
