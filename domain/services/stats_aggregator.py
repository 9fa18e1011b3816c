"""
Stats aggregation domain service.

Folds a player's completed game results into a single PlayerStats record.
"""

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Iterable

from domain.models.game import GameResult
from domain.models.player import Player
from domain.models.player_stats import PlayerStats, as_date

logger = logging.getLogger("poker_night.domain.stats")


def half_of_year(month: int) -> int:
    """Return 1 for January-June, 2 for July-December."""
    return 1 if month <= 6 else 2


def calculate_current_streak(history_newest_first: list[GameResult]) -> int:
    """
    Walk back from the most recent game while the outcome sign holds.

    A tie, or the first game contradicting the streak in progress, ends the
    walk. A tie as the most recent game gives 0.
    """
    streak = 0
    for result in history_newest_first:
        if result.profit > 0:
            if streak < 0:
                break
            streak += 1
        elif result.profit < 0:
            if streak > 0:
                break
            streak -= 1
        else:
            break
    return streak


def calculate_longest_streaks(history_oldest_first: list[GameResult]) -> tuple[int, int]:
    """Longest win and loss streaks over the full history. Ties reset both."""
    longest_win = 0
    longest_loss = 0
    wins = 0
    losses = 0

    for result in history_oldest_first:
        if result.profit > 0:
            wins += 1
            losses = 0
            longest_win = max(longest_win, wins)
        elif result.profit < 0:
            losses += 1
            wins = 0
            longest_loss = max(longest_loss, losses)
        else:
            wins = 0
            losses = 0

    return longest_win, longest_loss


class StatsAggregator:
    """
    Pure domain service for per-player statistics.

    Responsibilities:
    - Totals, rates and extremes
    - Current and longest streaks
    - Year / half-year / month buckets relative to an explicit "now"
    """

    def aggregate(
        self,
        player_id: str,
        results: Iterable[GameResult],
        now: date | datetime,
        player_name: str = "",
    ) -> PlayerStats:
        """
        Build stats for a single player.

        Args:
            player_id: Player the results belong to
            results: The player's game results, in any order
            now: Evaluation time for the period buckets
            player_name: Display name carried into the stats

        Returns:
            PlayerStats; fully zeroed when the player has no completed games

        Raises:
            ValueError: If a result belongs to a different player
        """
        results = list(results)
        foreign = [r for r in results if r.player_id != player_id]
        if foreign:
            raise ValueError(
                f"Cannot aggregate stats for {player_id}: got {len(foreign)} result(s) "
                f"belonging to other players (e.g. {foreign[0].player_id})"
            )

        completed = [r for r in results if r.completed]
        if not completed:
            return PlayerStats(player_id=player_id, player_name=player_name)

        # sorted() is stable, so same-day games keep their input order
        oldest_first = sorted(completed, key=lambda r: r.date)
        newest_first = oldest_first[::-1]

        profits = [r.profit for r in completed]
        games_played = len(completed)
        total_profit = sum(profits)
        win_count = sum(1 for p in profits if p > 0)
        loss_count = sum(1 for p in profits if p < 0)
        total_gains = sum(p for p in profits if p > 0)
        total_losses = abs(sum(p for p in profits if p < 0))
        total_rebuys = sum(r.rebuys for r in completed)

        longest_win, longest_loss = calculate_longest_streaks(oldest_first)

        stats = PlayerStats(
            player_id=player_id,
            player_name=player_name,
            games_played=games_played,
            total_profit=total_profit,
            avg_profit=total_profit / games_played,
            win_count=win_count,
            loss_count=loss_count,
            win_percentage=win_count / games_played * 100,
            biggest_win=max(max(profits), 0),
            biggest_loss=min(min(profits), 0),
            current_streak=calculate_current_streak(newest_first),
            longest_win_streak=longest_win,
            longest_loss_streak=longest_loss,
            total_gains=total_gains,
            total_losses=total_losses,
            avg_win=total_gains / win_count if win_count > 0 else 0,
            avg_loss=total_losses / loss_count if loss_count > 0 else 0,
            total_rebuys=total_rebuys,
            avg_rebuys_per_game=total_rebuys / games_played,
            game_history=newest_first,
        )
        self._fill_period_buckets(stats, as_date(now))
        return stats

    def aggregate_all(
        self,
        players: Iterable[Player],
        results: Iterable[GameResult],
        now: date | datetime,
    ) -> list[PlayerStats]:
        """
        Build stats for every known player from the full results log.

        Players without completed games get zeroed stats. Results for
        players that are not in ``players`` are ignored.
        """
        by_player: dict[str, list[GameResult]] = defaultdict(list)
        for result in results:
            by_player[result.player_id].append(result)

        stats = [
            self.aggregate(p.player_id, by_player.get(p.player_id, []), now, player_name=p.name)
            for p in players
        ]
        logger.debug(f"Aggregated stats for {len(stats)} players")
        return stats

    def _fill_period_buckets(self, stats: PlayerStats, today: date) -> None:
        """Sum profit and count games in the year, half and month containing today."""
        current_half = half_of_year(today.month)

        for result in stats.game_history:
            if result.date.year != today.year:
                continue
            stats.year_profit += result.profit
            stats.year_games += 1
            if half_of_year(result.date.month) == current_half:
                stats.half_profit += result.profit
                stats.half_games += 1
            if result.date.month == today.month:
                stats.month_profit += result.profit
                stats.month_games += 1
