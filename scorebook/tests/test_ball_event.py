"""Tests for the delivery record and commentary."""

from __future__ import annotations

import pytest

from scorebook.data.ball_event import Ball, ExtrasType, WicketType, describe_delivery


def make_ball(runs: int = 0, extras_type=None, wicket_type=None) -> Ball:
    return Ball(
        innings=1,
        over_number=3,
        ball_number=4,
        bowler_id="s6",
        striker_id="t1",
        non_striker_id="t2",
        runs=runs,
        extras_type=extras_type,
        is_wicket=wicket_type is not None,
        wicket_type=wicket_type,
    )


class TestBall:
    def test_legal_delivery(self):
        assert make_ball(1).is_legal_delivery
        assert make_ball(1, ExtrasType.BYE).is_legal_delivery
        assert make_ball(1, ExtrasType.LEG_BYE).is_legal_delivery
        assert not make_ball(1, ExtrasType.WIDE).is_legal_delivery
        assert not make_ball(1, ExtrasType.NO_BALL).is_legal_delivery

    def test_runs_off_bat_exclude_extras(self):
        assert make_ball(4).runs_off_bat == 4
        assert make_ball(4, ExtrasType.BYE).runs_off_bat == 0
        assert make_ball(2, ExtrasType.WIDE).runs_off_bat == 0

    def test_extras_flags(self):
        ball = make_ball(2, ExtrasType.LEG_BYE)
        assert ball.is_leg_bye
        assert not (ball.is_bye or ball.is_wide or ball.is_no_ball)

    def test_over_ball_str(self):
        assert make_ball().over_ball_str == "2.4"

    def test_ball_is_immutable(self):
        ball = make_ball(1)
        with pytest.raises(AttributeError):
            ball.runs = 4

    def test_negative_runs_rejected(self):
        with pytest.raises(ValueError):
            make_ball(-1)

    def test_dismissal_kind_requires_wicket_flag(self):
        with pytest.raises(ValueError):
            Ball(
                innings=1, over_number=1, ball_number=1,
                bowler_id="s6", striker_id="t1", non_striker_id="t2",
                wicket_type=WicketType.BOWLED,
            )

    def test_wicket_requires_dismissal_kind(self):
        with pytest.raises(ValueError):
            Ball(
                innings=1, over_number=1, ball_number=1,
                bowler_id="s6", striker_id="t1", non_striker_id="t2",
                is_wicket=True,
            )


class TestWicketType:
    def test_run_out_not_credited_to_bowler(self):
        assert not WicketType.RUN_OUT.credited_to_bowler
        assert WicketType.CAUGHT.credited_to_bowler
        assert WicketType.HIT_WICKET.credited_to_bowler

    def test_fielder_kinds(self):
        needing = {w for w in WicketType if w.needs_fielder}
        assert needing == {WicketType.CAUGHT, WicketType.RUN_OUT, WicketType.STUMPED}


class TestCommentary:
    def test_runs(self):
        assert describe_delivery(0) == "Dot ball"
        assert describe_delivery(1) == "Single"
        assert describe_delivery(4) == "Four!"
        assert describe_delivery(6) == "Six!"
        assert describe_delivery(5) == "5 runs"

    def test_extras(self):
        assert describe_delivery(2, ExtrasType.WIDE) == "Wide, 2 runs"
        assert describe_delivery(1, ExtrasType.NO_BALL) == "No ball, 1 run"
        assert describe_delivery(1, ExtrasType.BYE) == "1 bye"
        assert describe_delivery(3, ExtrasType.LEG_BYE) == "3 leg byes"

    def test_wicket(self):
        text = describe_delivery(
            0, wicket_type=WicketType.CAUGHT,
            striker_name="Thunder 1", fielder_name="Strikers 2",
        )
        assert text == "Thunder 1 caught by Strikers 2 for 0"
