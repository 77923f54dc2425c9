"""Tests for the delivery processor and the live scoring flow."""

from __future__ import annotations

from dataclasses import replace

import pytest

from scorebook.data.ball_event import ExtrasType, WicketType
from scorebook.engine.delivery import extras_credit, process_ball
from scorebook.engine.rules import BowlerRuleViolation
from scorebook.engine.scoring import (
    ScoringStateError,
    end_innings,
    new_ball,
    record_delivery,
    select_bowler,
    select_new_batter,
    start_innings,
)


def bowl(match, *runs):
    """Record plain deliveries, one per run value."""
    return [record_delivery(match, new_ball(match, r)) for r in runs]


class TestRunsAndStrike:
    def test_single_rotates_strike(self, live_match):
        record_delivery(live_match, new_ball(live_match, 1))
        assert live_match.striker_id == "t2"
        assert live_match.non_striker_id == "t1"
        assert live_match.batting_team.score == 1
        assert live_match.batting_team.balls == 1

    def test_even_runs_keep_strike(self, live_match):
        bowl(live_match, 2, 4, 6)
        assert live_match.striker_id == "t1"
        assert live_match.batting_team.score == 12

    def test_four_off_last_ball_swaps_for_new_over(self, live_match):
        outcomes = bowl(live_match, 0, 0, 0, 0, 0, 4)
        team = live_match.batting_team
        assert outcomes[-1].over_complete
        assert (team.overs, team.balls, team.score) == (1, 0, 4)
        assert live_match.striker_id == "t2"
        assert live_match.bowlers.current is None
        assert live_match.bowlers.previous == "s6"
        assert live_match.awaiting_bowler

    def test_last_ball_swaps_once_whatever_the_runs(self, live_match):
        bowl(live_match, 0, 0, 0, 0, 0, 1)
        assert live_match.striker_id == "t2"

    def test_process_ball_returns_match(self, live_match):
        ball = new_ball(live_match, 3)
        assert process_ball(live_match, ball) is live_match
        assert live_match.balls == [ball]


class TestExtras:
    def test_wide_does_not_count_as_ball(self, live_match):
        record_delivery(live_match, new_ball(live_match, 1, ExtrasType.WIDE))
        team = live_match.batting_team
        assert (team.score, team.balls, team.extras.wides) == (1, 0, 1)
        assert live_match.striker_id == "t1"

    def test_wide_with_runs_taken_rotates(self, live_match):
        record_delivery(live_match, new_ball(live_match, 2, ExtrasType.WIDE))
        assert live_match.batting_team.extras.wides == 2
        assert live_match.striker_id == "t2"

    def test_no_ball_credits_one_extra(self, live_match):
        record_delivery(live_match, new_ball(live_match, 3, ExtrasType.NO_BALL))
        team = live_match.batting_team
        assert team.score == 3
        assert team.extras.no_balls == 1
        assert team.balls == 0
        assert live_match.striker_id == "t2"

    def test_byes_and_leg_byes_count_as_balls(self, live_match):
        record_delivery(live_match, new_ball(live_match, 2, ExtrasType.BYE))
        record_delivery(live_match, new_ball(live_match, 1, ExtrasType.LEG_BYE))
        team = live_match.batting_team
        assert (team.extras.byes, team.extras.leg_byes) == (2, 1)
        assert team.balls == 2
        assert team.extras.total == 3
        assert live_match.striker_id == "t2"

    def test_extras_credit(self, live_match):
        assert extras_credit(new_ball(live_match, 3, ExtrasType.WIDE)) == (ExtrasType.WIDE, 3)
        assert extras_credit(new_ball(live_match, 5, ExtrasType.NO_BALL)) == (ExtrasType.NO_BALL, 1)
        assert extras_credit(new_ball(live_match, 4)) == (None, 0)

    def test_over_with_extras_has_more_than_six_deliveries(self, live_match):
        record_delivery(live_match, new_ball(live_match, 1, ExtrasType.WIDE))
        record_delivery(live_match, new_ball(live_match, 1, ExtrasType.NO_BALL))
        bowl(live_match, 0, 0, 0, 0, 0, 0)
        assert len(live_match.over_balls(1)) == 8
        assert live_match.batting_team.overs == 1

    def test_legal_ball_count_matches_ledger(self, live_match):
        record_delivery(live_match, new_ball(live_match, 1, ExtrasType.WIDE))
        bowl(live_match, 1, 0, 2)
        record_delivery(live_match, new_ball(live_match, 1, ExtrasType.LEG_BYE))
        record_delivery(live_match, new_ball(live_match, 1, ExtrasType.NO_BALL))
        bowl(live_match, 4, 0)
        select_bowler(live_match, "s5")
        bowl(live_match, 1)

        team = live_match.batting_team
        legal = sum(1 for b in live_match.innings_balls() if b.is_legal_delivery)
        assert team.overs * 6 + team.balls == legal == 7
        assert team.score == sum(b.runs for b in live_match.innings_balls())


class TestWickets:
    def test_wicket_records_fall_of_wicket(self, live_match):
        bowl(live_match, 4)
        outcome = record_delivery(live_match, new_ball(live_match, wicket_type=WicketType.BOWLED))

        assert outcome.wicket
        assert live_match.awaiting_batter
        team = live_match.batting_team
        assert team.wickets == 1
        fow = team.fall_of_wickets[0]
        assert fow.wicket_number == 1
        assert fow.score == 4
        assert fow.batter == "Thunder 1"
        assert fow.bowler == "Strikers 6"
        assert fow.over == "0.2"
        assert fow.wicket_type is WicketType.BOWLED

    def test_run_out_runs_count_towards_fall_score(self, live_match):
        bowl(live_match, 4)
        record_delivery(
            live_match,
            new_ball(live_match, 1, wicket_type=WicketType.RUN_OUT, fielder_id="s1"),
        )
        assert live_match.batting_team.fall_of_wickets[0].score == 5

    def test_new_batter_replaces_dismissed(self, live_match):
        record_delivery(live_match, new_ball(live_match, wicket_type=WicketType.LBW))
        select_new_batter(live_match, "t3")
        assert live_match.striker_id == "t3"
        assert live_match.non_striker_id == "t2"
        assert not live_match.awaiting_batter

    def test_new_batter_after_run_out_of_non_striker_end(self, live_match):
        # Batters crossed on a single before the striker was run out
        record_delivery(
            live_match,
            new_ball(live_match, 1, wicket_type=WicketType.RUN_OUT, fielder_id="s2"),
        )
        select_new_batter(live_match, "t3")
        assert {live_match.striker_id, live_match.non_striker_id} == {"t2", "t3"}
        assert "t1" not in (live_match.striker_id, live_match.non_striker_id)

    def test_dismissed_batter_cannot_return(self, live_match):
        record_delivery(live_match, new_ball(live_match, wicket_type=WicketType.BOWLED))
        with pytest.raises(ValueError):
            select_new_batter(live_match, "t1")

    def test_new_batter_needs_a_wicket(self, live_match):
        record_delivery(live_match, new_ball(live_match, 1))
        with pytest.raises(ScoringStateError):
            select_new_batter(live_match, "t3")
        assert (live_match.striker_id, live_match.non_striker_id) == ("t2", "t1")

    def test_second_new_batter_rejected(self, live_match):
        record_delivery(live_match, new_ball(live_match, wicket_type=WicketType.BOWLED))
        select_new_batter(live_match, "t3")
        record_delivery(live_match, new_ball(live_match, 0))
        with pytest.raises(ScoringStateError):
            select_new_batter(live_match, "t4")
        assert live_match.striker_id == "t3"

    def test_must_replace_batter_before_next_ball(self, live_match):
        record_delivery(live_match, new_ball(live_match, wicket_type=WicketType.BOWLED))
        with pytest.raises(ScoringStateError):
            record_delivery(live_match, new_ball(live_match, 1))

    def test_commentary_names_players(self, live_match):
        ball = new_ball(live_match, 0, wicket_type=WicketType.CAUGHT, fielder_id="s3")
        assert ball.commentary == "Thunder 1 caught by Strikers 3 for 0"


class TestScoringFlow:
    def test_new_ball_needs_selections(self, match):
        with pytest.raises(ScoringStateError):
            new_ball(match, 1)

    def test_new_ball_positions(self, live_match):
        bowl(live_match, 0, 0)
        wide = new_ball(live_match, 1, ExtrasType.WIDE)
        legal = new_ball(live_match, 1)
        assert (wide.over_number, wide.ball_number) == (1, 2)
        assert (legal.over_number, legal.ball_number) == (1, 3)
        assert legal.innings == 1

    def test_next_over_needs_a_bowler(self, live_match):
        bowl(live_match, 0, 0, 0, 0, 0, 0)
        with pytest.raises(ScoringStateError):
            new_ball(live_match, 1)

    def test_opening_bowler_cannot_be_batting(self, match):
        with pytest.raises(BowlerRuleViolation):
            start_innings(match, "t1", "t2", "t1")

    def test_openers_must_differ(self, match):
        with pytest.raises(ValueError):
            start_innings(match, "t1", "t1", "s6")

    def test_cannot_restart_innings(self, live_match):
        bowl(live_match, 1)
        with pytest.raises(ScoringStateError):
            start_innings(live_match, "t3", "t4", "s5")

    def test_innings_break_after_overs(self, live_match):
        live_match.total_overs = 1
        outcomes = bowl(live_match, 1, 1, 1, 1, 1, 1)

        final = outcomes[-1]
        assert final.innings_complete
        assert final.transition is not None
        assert not final.match_complete
        assert live_match.current_innings == 2
        assert live_match.first_innings_score == 6
        assert live_match.target == 7
        assert live_match.batting_team.name == "Strikers"
        assert live_match.striker_id is None
        assert not live_match.awaiting_bowler

    def test_chase_completes_match(self, live_match):
        live_match.total_overs = 1
        bowl(live_match, 0, 0, 0, 0, 0, 4)
        start_innings(live_match, "s1", "s2", "t6")

        outcome = bowl(live_match, 4)[-1]
        assert not outcome.innings_complete

        outcome = bowl(live_match, 1)[-1]
        assert outcome.match_complete
        assert live_match.is_completed
        assert live_match.result == "Strikers won by 10 wickets"
        assert live_match.player_of_match_id is not None

    def test_no_deliveries_after_completion(self, live_match):
        live_match.total_overs = 1
        bowl(live_match, 0, 0, 0, 0, 0, 0)
        start_innings(live_match, "s1", "s2", "t6")
        bowl(live_match, 1)
        assert live_match.is_completed
        with pytest.raises(ScoringStateError):
            record_delivery(live_match, new_ball(live_match, 1))

    def test_ball_from_another_bowler_rejected(self, live_match):
        ball = replace(new_ball(live_match, 1), bowler_id="s5")
        with pytest.raises(ScoringStateError):
            record_delivery(live_match, ball)
        assert live_match.balls == []

    def test_ball_faced_by_other_batters_rejected(self, live_match):
        ball = new_ball(live_match, 1)
        record_delivery(live_match, new_ball(live_match, 1))
        with pytest.raises(ScoringStateError):
            record_delivery(live_match, ball)
        assert len(live_match.balls) == 1

    def test_ball_for_wrong_innings_rejected(self, live_match):
        ball = new_ball(live_match, 1)
        live_match.total_overs = 1
        bowl(live_match, 0, 0, 0, 0, 0, 0)
        start_innings(live_match, "s1", "s2", "t6")
        with pytest.raises(ValueError):
            record_delivery(live_match, ball)

    def test_end_innings_manually(self, live_match):
        bowl(live_match, 4, 4)
        transition = end_innings(live_match)
        assert transition is not None
        assert live_match.first_innings_score == 8

        start_innings(live_match, "s1", "s2", "t6")
        bowl(live_match, 2)
        assert end_innings(live_match) is None
        assert live_match.is_completed
        assert live_match.result == "Thunder won by 6 runs"
