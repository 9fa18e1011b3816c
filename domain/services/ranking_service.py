"""
Leaderboard ranking domain service.
"""

import logging
import math
from datetime import date, datetime

from config import RANKING_ACTIVE_SHARE
from domain.models import ranking
from domain.models.player_stats import PlayerStats, as_date
from domain.models.ranking import RankingEntry
from domain.services.stats_aggregator import half_of_year

logger = logging.getLogger("poker_night.domain.rankings")


def in_period(day: date, period: str, today: date) -> bool:
    if period == ranking.ALL_TIME:
        return True
    if day.year != today.year:
        return False
    if period == ranking.YEAR:
        return True
    if period == ranking.HALF:
        return half_of_year(day.month) == half_of_year(today.month)
    return day.month == today.month


def _period_totals(stats: PlayerStats, period: str) -> tuple[float, int]:
    if period == ranking.ALL_TIME:
        return stats.total_profit, stats.games_played
    if period == ranking.YEAR:
        return stats.year_profit, stats.year_games
    if period == ranking.HALF:
        return stats.half_profit, stats.half_games
    return stats.month_profit, stats.month_games


class RankingService:
    """Builds period leaderboards from aggregated stats."""

    def __init__(self, active_share: float = RANKING_ACTIVE_SHARE):
        self.active_share = active_share

    def build_rankings(
        self,
        players: list[PlayerStats],
        period: str,
        now: date | datetime,
    ) -> list[RankingEntry]:
        """
        Rank players by profit within a period.

        Only players who took part in at least ``active_share`` of the
        period's games (rounded up) are ranked. Equal profits share a rank.

        Raises:
            ValueError: If the period is unknown
        """
        if period not in ranking.PERIODS:
            raise ValueError(f"Unknown ranking period '{period}' (expected one of {', '.join(ranking.PERIODS)})")

        today = as_date(now)
        period_games = {
            r.game_id for p in players for r in p.game_history if in_period(r.date, period, today)
        }
        if not period_games:
            return []
        min_games = math.ceil(len(period_games) * self.active_share)

        rows = []
        for p in players:
            profit, games = _period_totals(p, period)
            if games > 0 and games >= min_games:
                rows.append((p, profit, games))
        rows.sort(key=lambda row: row[1], reverse=True)

        entries: list[RankingEntry] = []
        for index, (p, profit, games) in enumerate(rows):
            if entries and profit == entries[-1].profit:
                rank = entries[-1].rank
            else:
                rank = index + 1
            gap = entries[-1].profit - profit if entries else 0
            entries.append(
                RankingEntry(
                    rank=rank,
                    player_id=p.player_id,
                    player_name=p.player_name,
                    profit=profit,
                    games=games,
                    gap_to_above=gap,
                )
            )

        logger.debug(
            f"{period} rankings: {len(entries)} of {len(players)} players ranked "
            f"({len(period_games)} games, min {min_games})"
        )
        return entries
