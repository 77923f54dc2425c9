"""
Ball-by-ball event data model.

Defines the immutable delivery record that is appended to a match's
ledger. Players are referenced by id only; display names live in the
roster and are resolved on demand.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class WicketType(Enum):
    BOWLED = "bowled"
    CAUGHT = "caught"
    LBW = "lbw"
    RUN_OUT = "run_out"
    STUMPED = "stumped"
    HIT_WICKET = "hit_wicket"

    @property
    def credited_to_bowler(self) -> bool:
        return self is not WicketType.RUN_OUT

    @property
    def needs_fielder(self) -> bool:
        return self in (WicketType.CAUGHT, WicketType.RUN_OUT, WicketType.STUMPED)

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


class ExtrasType(Enum):
    WIDE = "wide"
    NO_BALL = "no_ball"
    BYE = "bye"
    LEG_BYE = "leg_bye"


@dataclass(frozen=True)
class Ball:
    """A single delivery. Never mutated once it is in the ledger."""

    innings: int  # 1 or 2
    over_number: int  # 1-indexed over the ball belongs to
    ball_number: int  # Legal ball within the over this delivery is (1-6)
    bowler_id: str
    striker_id: str
    non_striker_id: str

    runs: int = 0  # Everything the delivery added to the team total
    extras_type: Optional[ExtrasType] = None  # At most one kind per ball

    is_wicket: bool = False
    wicket_type: Optional[WicketType] = None
    fielder_id: Optional[str] = None

    commentary: str = ""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    ball_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])

    def __post_init__(self) -> None:
        if self.runs < 0:
            raise ValueError(f"Runs cannot be negative: {self.runs}")
        if self.wicket_type is not None and not self.is_wicket:
            raise ValueError("Dismissal kind given for a ball that is not a wicket")
        if self.is_wicket and self.wicket_type is None:
            raise ValueError("Wicket ball needs a dismissal kind")

    @property
    def is_wide(self) -> bool:
        return self.extras_type is ExtrasType.WIDE

    @property
    def is_no_ball(self) -> bool:
        return self.extras_type is ExtrasType.NO_BALL

    @property
    def is_bye(self) -> bool:
        return self.extras_type is ExtrasType.BYE

    @property
    def is_leg_bye(self) -> bool:
        return self.extras_type is ExtrasType.LEG_BYE

    @property
    def is_legal_delivery(self) -> bool:
        return not (self.is_wide or self.is_no_ball)

    @property
    def runs_off_bat(self) -> int:
        """Runs credited to the striker's personal tally."""
        return 0 if self.extras_type is not None else self.runs

    @property
    def is_dot_ball(self) -> bool:
        return self.is_legal_delivery and self.runs == 0

    @property
    def over_ball_str(self) -> str:
        """Scorebook over.ball string, e.g. '5.3' for the 3rd ball of the 6th over."""
        return f"{self.over_number - 1}.{self.ball_number}"


def describe_delivery(
    runs: int,
    extras_type: Optional[ExtrasType] = None,
    wicket_type: Optional[WicketType] = None,
    striker_name: str = "",
    fielder_name: Optional[str] = None,
) -> str:
    """One-line commentary for a delivery."""
    if wicket_type is not None:
        by = f" by {fielder_name}" if fielder_name else ""
        return f"{striker_name} {wicket_type.label}{by} for {runs}".strip()
    if extras_type is ExtrasType.WIDE:
        return f"Wide, {runs} run{'s' if runs != 1 else ''}"
    if extras_type is ExtrasType.NO_BALL:
        return f"No ball, {runs} run{'s' if runs != 1 else ''}"
    if extras_type is ExtrasType.BYE:
        return f"{runs} bye{'s' if runs != 1 else ''}"
    if extras_type is ExtrasType.LEG_BYE:
        return f"{runs} leg bye{'s' if runs != 1 else ''}"

    named = {0: "Dot ball", 1: "Single", 2: "Two runs", 3: "Three runs", 4: "Four!", 6: "Six!"}
    return named.get(runs, f"{runs} runs")
