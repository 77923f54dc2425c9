"""
Configuration management for the Cricket Scoring Engine.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


class MatchFormat(Enum):
    T20 = "t20"
    T10 = "t10"
    FIVE_OVERS = "five_overs"
    CUSTOM = "custom"


class TossDecision(Enum):
    BAT = "bat"
    BOWL = "bowl"


# Laws of the game the engine treats as fixed
BALLS_PER_OVER = 6
MAX_WICKETS = 10


@dataclass(frozen=True)
class PerformanceConfig:
    """Weights and thresholds for the standout-performer score."""

    # Batting
    run_weight: float = 1.5
    fast_strike_rate: float = 150.0
    fast_strike_rate_bonus: float = 0.4  # per run
    good_strike_rate: float = 120.0
    good_strike_rate_bonus: float = 0.2  # per run
    slow_strike_rate: float = 80.0
    slow_strike_rate_penalty: float = 0.1  # per run
    slow_strike_rate_min_balls: int = 10
    century_bonus: float = 50.0
    half_century_bonus: float = 25.0
    thirty_bonus: float = 10.0
    four_bonus: float = 2.0
    six_bonus: float = 4.0
    not_out_bonus: float = 10.0
    not_out_min_runs: int = 20
    duck_penalty: float = 10.0

    # Bowling
    wicket_weight: float = 25.0
    tight_economy: float = 4.0
    tight_economy_bonus: float = 20.0
    good_economy: float = 6.0
    good_economy_bonus: float = 10.0
    expensive_economy: float = 10.0
    expensive_economy_penalty: float = 10.0
    high_dot_pct: float = 60.0
    high_dot_bonus: float = 15.0
    good_dot_pct: float = 40.0
    good_dot_bonus: float = 8.0
    five_wicket_bonus: float = 30.0
    three_wicket_bonus: float = 15.0

    # Fielding
    catch_weight: float = 8.0
    run_out_weight: float = 12.0
    stumping_weight: float = 10.0


@dataclass
class EngineConfig:
    """Top-level engine configuration."""
    performance: PerformanceConfig = field(default_factory=PerformanceConfig)

    match_format: MatchFormat = MatchFormat.T20
    total_overs: Optional[int] = None  # Required for CUSTOM, overrides otherwise
    log_level: str = "INFO"
    data_dir: Path = field(default_factory=lambda: Path("data"))

    @property
    def overs_per_innings(self) -> int:
        if self.total_overs is not None:
            return self.total_overs
        overs = FORMAT_OVERS.get(self.match_format)
        if overs is None:
            raise ValueError(
                f"Format {self.match_format.value} needs an explicit overs limit"
            )
        return overs

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Load configuration from environment variables."""
        overs = os.getenv("SCOREBOOK_OVERS", "")
        return cls(
            match_format=MatchFormat(os.getenv("SCOREBOOK_FORMAT", "t20").lower()),
            total_overs=int(overs) if overs else None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            data_dir=Path(os.getenv("SCOREBOOK_DATA_DIR", "data")),
        )


# Format-specific constants
FORMAT_OVERS: dict[MatchFormat, Optional[int]] = {
    MatchFormat.T20: 20,
    MatchFormat.T10: 10,
    MatchFormat.FIVE_OVERS: 5,
    MatchFormat.CUSTOM: None,  # Caller decides
}
