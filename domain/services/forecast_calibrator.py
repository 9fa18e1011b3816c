"""
Forecast calibration domain service.

Turns the stats of tonight's roster into a zero-sum expected profit per
player: weighted baseline, streak ladder, contrarian surprises, bounded
jitter and a weighted rebalance onto exactly zero.
"""

import logging
import math
import random
from dataclasses import dataclass
from itertools import combinations

from config import (
    BALANCE_WEIGHT_CONSTANT,
    DYNAMICS_MIN_AVG_GAP,
    DYNAMICS_MIN_SHARED_GAMES,
    DYNAMICS_MIN_WIN_GAP,
    FORECAST_JITTER_FLAT,
    FORECAST_JITTER_HIGH,
    FORECAST_JITTER_LOW,
    FORECAST_MIN_RECENT_GAMES,
    FORECAST_RECENT_GAMES,
    FORECAST_RECENT_WEIGHT,
    SURPRISE_DAMPEN_MAX,
    SURPRISE_DAMPEN_MIN,
    SURPRISE_MAX_SHARE,
    SURPRISE_MIN_GAMES,
    SURPRISE_MIN_MAGNITUDE,
)
from domain.models.forecast import ForecastEntry, PlayerDynamic
from domain.models.player_stats import PlayerStats

logger = logging.getLogger("poker_night.domain.forecast")


def streak_multiplier(streak: int) -> float:
    """
    Monotonic ladder symmetric around 1.

    >= 4: 1.5, 3: 1.3, 2: 1.15, -1..1: 1.0, -2: 0.85, -3: 0.7, <= -4: 0.5
    """
    if streak >= 4:
        return 1.5
    if streak == 3:
        return 1.3
    if streak == 2:
        return 1.15
    if streak <= -4:
        return 0.5
    if streak == -3:
        return 0.7
    if streak == -2:
        return 0.85
    return 1.0


def weighted_baseline(stats: PlayerStats) -> float:
    """Blend recent and career form. New players sit at 0."""
    if stats.games_played == 0:
        return 0.0
    recent_games = min(len(stats.game_history), FORECAST_RECENT_GAMES)
    if recent_games >= FORECAST_MIN_RECENT_GAMES:
        recent = stats.recent_average(FORECAST_RECENT_GAMES)
        return FORECAST_RECENT_WEIGHT * recent + (1 - FORECAST_RECENT_WEIGHT) * stats.avg_profit
    return stats.avg_profit


def is_surprise_eligible(stats: PlayerStats) -> bool:
    """Career and recent averages point meaningfully in opposite directions."""
    if stats.games_played < SURPRISE_MIN_GAMES:
        return False
    career = stats.avg_profit
    recent = stats.recent_average(FORECAST_RECENT_GAMES)
    if abs(career) <= SURPRISE_MIN_MAGNITUDE or abs(recent) <= SURPRISE_MIN_MAGNITUDE:
        return False
    return (career > 0) != (recent > 0)


def balance_to_zero(values: list[float], weight_constant: float = BALANCE_WEIGHT_CONSTANT) -> list[int]:
    """
    Shift values so they sum to zero, then round to integers.

    The correction is shared in proportion to ``|value| + weight_constant``.
    Any rounding residual goes to the largest-magnitude entry.
    """
    total = sum(values)
    if total != 0:
        weights = [abs(v) + weight_constant for v in values]
        weight_sum = sum(weights)
        values = [v - total * w / weight_sum for v, w in zip(values, weights)]

    rounded = [int(round(v)) for v in values]
    residual = -sum(rounded)
    if residual:
        largest = max(range(len(rounded)), key=lambda i: abs(rounded[i]))
        rounded[largest] += residual
    return rounded


@dataclass
class _Draft:
    stats: PlayerStats
    baseline: float
    value: float
    is_surprise: bool = False


class ForecastCalibrator:
    """
    Pure domain service for tonight's expected-profit distribution.

    All randomness comes from the injected ``rng``; pass a seeded
    ``random.Random`` to make calibration reproducible.
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def calibrate(self, players: list[PlayerStats]) -> list[ForecastEntry]:
        """
        Forecast tonight's profit for the selected roster.

        Args:
            players: Stats of exactly the players sitting down tonight

        Returns:
            One entry per player, highest expected profit first, summing to 0

        Raises:
            ValueError: If fewer than 2 players or a player appears twice
        """
        if len(players) < 2:
            raise ValueError(f"Forecast needs at least 2 players, got {len(players)}")
        ids = [p.player_id for p in players]
        if len(set(ids)) != len(ids):
            duplicates = sorted({pid for pid in ids if ids.count(pid) > 1})
            raise ValueError(f"Duplicate players in roster: {', '.join(duplicates)}")

        drafts = []
        for p in players:
            baseline = weighted_baseline(p) * streak_multiplier(p.current_streak)
            drafts.append(_Draft(stats=p, baseline=baseline, value=baseline))

        self._apply_surprises(drafts)
        self._apply_jitter(drafts)

        final = balance_to_zero([d.value for d in drafts])
        entries = [
            ForecastEntry(
                player_id=d.stats.player_id,
                expected_profit=profit,
                is_surprise=d.is_surprise,
                player_name=d.stats.player_name,
                is_new_player=d.stats.is_new,
                baseline=d.baseline,
            )
            for d, profit in zip(drafts, final)
        ]
        entries.sort(key=lambda e: e.expected_profit, reverse=True)

        surprises = [e.player_id for e in entries if e.is_surprise]
        logger.info(
            f"Calibrated forecast for {len(entries)} players"
            + (f" (surprises: {', '.join(surprises)})" if surprises else "")
        )
        return entries

    def _apply_surprises(self, drafts: list[_Draft]) -> None:
        eligible = [d for d in drafts if is_surprise_eligible(d.stats)]
        if not eligible:
            return

        cap = max(1, math.floor(len(drafts) * SURPRISE_MAX_SHARE))
        count = self.rng.randint(1, min(len(eligible), cap))
        for d in self.rng.sample(eligible, count):
            d.value = -d.baseline * self.rng.uniform(SURPRISE_DAMPEN_MIN, SURPRISE_DAMPEN_MAX)
            d.is_surprise = True
            logger.debug(f"Surprise pick {d.stats.player_id}: {d.baseline:.1f} -> {d.value:.1f}")

    def _apply_jitter(self, drafts: list[_Draft]) -> None:
        for d in drafts:
            if d.is_surprise:
                continue
            factor = self.rng.uniform(FORECAST_JITTER_LOW, FORECAST_JITTER_HIGH)
            offset = self.rng.uniform(-FORECAST_JITTER_FLAT, FORECAST_JITTER_FLAT)
            d.value = d.value * factor + offset

    def find_player_dynamics(self, players: list[PlayerStats]) -> list[PlayerDynamic]:
        """
        Head-to-head records between roster players.

        Only pairs with enough shared games and a clear split are returned,
        biggest average gap first.
        """
        profits_by_player = {
            p.player_id: {r.game_id: r.profit for r in p.game_history} for p in players
        }

        dynamics = []
        for a, b in combinations(players, 2):
            a_games = profits_by_player[a.player_id]
            b_games = profits_by_player[b.player_id]
            shared = [gid for gid in a_games if gid in b_games]
            if len(shared) < DYNAMICS_MIN_SHARED_GAMES:
                continue

            dynamic = PlayerDynamic(
                player_a=a.player_id,
                player_b=b.player_id,
                shared_games=len(shared),
                avg_profit_a=sum(a_games[g] for g in shared) / len(shared),
                avg_profit_b=sum(b_games[g] for g in shared) / len(shared),
                wins_a=sum(1 for g in shared if a_games[g] > b_games[g]),
                wins_b=sum(1 for g in shared if b_games[g] > a_games[g]),
            )
            if (
                dynamic.avg_gap > DYNAMICS_MIN_AVG_GAP
                or abs(dynamic.wins_a - dynamic.wins_b) >= DYNAMICS_MIN_WIN_GAP
            ):
                dynamics.append(dynamic)

        dynamics.sort(key=lambda d: d.avg_gap, reverse=True)
        return dynamics
