"""
Centralized configuration for the Poker Night analytics engine.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _parse_int(env_var: str, default: int) -> int:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float(env_var: str, default: float) -> float:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _parse_bool(env_var: str, default: bool) -> bool:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _parse_int_list(env_var: str, default: list[int]) -> list[int]:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return [int(x.strip()) for x in raw.split(",") if x.strip()]
    except ValueError:
        return default


CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "₪")

# Player activity
ACTIVE_PLAYER_DAYS = _parse_int("ACTIVE_PLAYER_DAYS", 60)  # Played within this many days = active
RANKING_ACTIVE_SHARE = _parse_float("RANKING_ACTIVE_SHARE", 0.33)  # Min share of period games to be ranked

# Milestone detection
MILESTONE_MAX_RESULTS = _parse_int("MILESTONE_MAX_RESULTS", 10)
MILESTONE_STREAK_THRESHOLD = _parse_int("MILESTONE_STREAK_THRESHOLD", 3)  # Shorter runs are too common to mention
LEADERBOARD_PASS_MAX_GAP = _parse_int("LEADERBOARD_PASS_MAX_GAP", 250)  # Adjacent-rank gap one big night can close
CLOSE_BATTLE_MAX_GAP = _parse_int("CLOSE_BATTLE_MAX_GAP", 30)
ROUND_NUMBER_STEP = _parse_int("ROUND_NUMBER_STEP", 500)  # Thresholds: 500, 1000, 1500, ...
ROUND_NUMBER_WINDOW = _parse_int("ROUND_NUMBER_WINDOW", 150)  # Max distance below a threshold
GAMES_MILESTONES = _parse_int_list("GAMES_MILESTONES", [10, 25, 50, 75, 100, 150, 200])
GAMES_MILESTONE_STEP_AFTER = _parse_int("GAMES_MILESTONE_STEP_AFTER", 50)  # Every 50 games past the list
RECOVERY_BAND = _parse_int("RECOVERY_BAND", 150)  # Year profit in (-150, 0) can recover in one night
RECOVERY_MIN_YEAR_GAMES = _parse_int("RECOVERY_MIN_YEAR_GAMES", 2)
WIN_RATE_MIN_GAMES = _parse_int("WIN_RATE_MIN_GAMES", 5)
WIN_RATE_THRESHOLDS = _parse_int_list("WIN_RATE_THRESHOLDS", [50, 60, 70])
SEASONAL_MILESTONES_ENABLED = _parse_bool("SEASONAL_MILESTONES_ENABLED", True)  # December/January storylines

# Forecast calibration
FORECAST_RECENT_GAMES = _parse_int("FORECAST_RECENT_GAMES", 5)  # Window for "recent form"
FORECAST_MIN_RECENT_GAMES = _parse_int("FORECAST_MIN_RECENT_GAMES", 3)  # Below this, use career average only
FORECAST_RECENT_WEIGHT = _parse_float("FORECAST_RECENT_WEIGHT", 0.7)
SURPRISE_MIN_GAMES = _parse_int("SURPRISE_MIN_GAMES", 5)
SURPRISE_MIN_MAGNITUDE = _parse_float("SURPRISE_MIN_MAGNITUDE", 10.0)  # "Meaningfully" positive/negative
SURPRISE_MAX_SHARE = _parse_float("SURPRISE_MAX_SHARE", 0.35)  # Max 35% of roster
SURPRISE_DAMPEN_MIN = _parse_float("SURPRISE_DAMPEN_MIN", 0.5)
SURPRISE_DAMPEN_MAX = _parse_float("SURPRISE_DAMPEN_MAX", 0.8)
FORECAST_JITTER_FLAT = _parse_float("FORECAST_JITTER_FLAT", 10.0)  # +/- flat units
FORECAST_JITTER_LOW = _parse_float("FORECAST_JITTER_LOW", 0.85)
FORECAST_JITTER_HIGH = _parse_float("FORECAST_JITTER_HIGH", 1.15)
BALANCE_WEIGHT_CONSTANT = _parse_float("BALANCE_WEIGHT_CONSTANT", 10.0)  # Added to |value| when redistributing

# Head-to-head dynamics
DYNAMICS_MIN_SHARED_GAMES = _parse_int("DYNAMICS_MIN_SHARED_GAMES", 3)
DYNAMICS_MIN_AVG_GAP = _parse_float("DYNAMICS_MIN_AVG_GAP", 20.0)
DYNAMICS_MIN_WIN_GAP = _parse_int("DYNAMICS_MIN_WIN_GAP", 2)
