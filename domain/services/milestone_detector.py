"""
Milestone detection domain service.

A rule engine: every rule is an independent function that looks at the
aggregated player set and returns zero or more candidate milestones. The
detector runs the rules in order, then ranks, deduplicates singular group
records and keeps the top N.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from itertools import combinations
from typing import Callable

from config import (
    CLOSE_BATTLE_MAX_GAP,
    CURRENCY_SYMBOL,
    GAMES_MILESTONE_STEP_AFTER,
    GAMES_MILESTONES,
    LEADERBOARD_PASS_MAX_GAP,
    MILESTONE_MAX_RESULTS,
    MILESTONE_STREAK_THRESHOLD,
    RECOVERY_BAND,
    RECOVERY_MIN_YEAR_GAMES,
    ROUND_NUMBER_STEP,
    ROUND_NUMBER_WINDOW,
    SEASONAL_MILESTONES_ENABLED,
    WIN_RATE_MIN_GAMES,
    WIN_RATE_THRESHOLDS,
)
from domain.models import milestone as category
from domain.models.milestone import Milestone
from domain.models.player_stats import PlayerStats, as_date

logger = logging.getLogger("poker_night.domain.milestones")

# Priority bands. Only the relative order between rule families matters:
# streak > leaderboard pass ~ tie ~ close battle > round number > games played > recovery > win rate
STREAK_PRIORITY = 90  # + streak length (capped), losing streaks one point lower
FIRE_VS_ICE_PRIORITY = 82
LEADERBOARD_PASS_PRIORITY = 80  # - rank depth (capped at 5)
EXACT_TIE_PRIORITY = 79
CLOSE_BATTLE_PRIORITY = 78
YEAR_BATTLE_PRIORITY = 77
LEADER_UNDER_PRESSURE_PRIORITY = 76
ROUND_NUMBER_PRIORITY = 70  # + threshold size (capped at 4)
YEAR_FINALE_PRIORITY = 72
NEW_YEAR_PRIORITY = 70
RECORD_CHASE_PRIORITY = 69
REVENGE_PRIORITY = 67
MONTH_LEADER_PRIORITY = 66
RISING_UNDERDOG_PRIORITY = 65
UPSET_PRIORITY = 64
GAMES_PLAYED_PRIORITY = 60  # + round number size (capped at 5)
HOT_FORM_PRIORITY = 63
COLD_FORM_PRIORITY = 62
ROLLER_COASTER_PRIORITY = 61
RECOVERY_PRIORITY = 58
WIN_RATE_PRIORITY = 50  # + threshold / 10
NEGATIVE_ROUND_NUMBER_PRIORITY = 53

YEAR_BATTLE_MAX_GAP = 120
YEAR_BATTLE_MIN_GAMES = 3
LEADER_PRESSURE_LAST_LOSS = -30
REVENGE_MIN_SWING = 50
REVENGE_MIN_GAMES = 5
UNDERDOG_MIN_LAST_WIN = 50
UPSET_MIN_GAMES = 5
UPSET_MIN_LAST_WIN = 30
RECORD_CHASE_MIN_STREAK = 2
RECORD_CHASE_MAX_GAP = 100
MONTH_LEADER_MAX_GAP = 100
FORM_MIN_GAMES = 5
FORM_MIN_DIFF = 40
ROLLER_COASTER_GAMES = 4
ROLLER_COASTER_MIN_SWING = 200
YEAR_FINALE_MIN_GAMES = 5


def format_amount(amount: float) -> str:
    return f"{round(abs(amount)):,}{CURRENCY_SYMBOL}"


def format_profit(amount: float) -> str:
    sign = "+" if amount >= 0 else "-"
    return f"{sign}{format_amount(amount)}"


def _name(stats: PlayerStats) -> str:
    return stats.player_name or stats.player_id


@dataclass
class MilestoneContext:
    """Shared, precomputed view of the players a rule set evaluates."""

    players: list[PlayerStats]
    today: date
    by_total: list[PlayerStats]  # All-time table, best first

    @classmethod
    def build(cls, players: list[PlayerStats], now: date | datetime) -> "MilestoneContext":
        active = [p for p in players if p.games_played > 0]
        by_total = sorted(active, key=lambda p: p.total_profit, reverse=True)
        return cls(players=active, today=as_date(now), by_total=by_total)

    def rank_of(self, stats: PlayerStats) -> int:
        """All-time rank; equal totals share the better rank."""
        return 1 + sum(1 for p in self.by_total if p.total_profit > stats.total_profit)


Rule = Callable[[MilestoneContext], list[Milestone]]


# ============ STREAKS ============


def streak_rule(ctx: MilestoneContext) -> list[Milestone]:
    """Players holding the group's longest current streak, if it is 3 or more."""
    if not ctx.players:
        return []
    longest = max(abs(p.current_streak) for p in ctx.players)
    if longest < MILESTONE_STREAK_THRESHOLD:
        return []

    leaders = [p for p in ctx.players if abs(p.current_streak) == longest]
    # Winning streaks are emitted first so they win priority ties
    leaders.sort(key=lambda p: p.current_streak < 0)
    bonus = min(longest, 9)

    milestones = []
    for p in leaders:
        if p.current_streak > 0:
            milestones.append(
                Milestone(
                    emoji="🔥",
                    title=f"{longest} wins in a row",
                    description=(
                        f"{_name(p)} has won {longest} straight games. "
                        f"A win tonight makes it {longest + 1}."
                    ),
                    priority=STREAK_PRIORITY + bonus,
                    category=category.STREAK,
                    kind="win_streak",
                    player_ids=(p.player_id,),
                    value=longest,
                )
            )
        else:
            milestones.append(
                Milestone(
                    emoji="❄️",
                    title=f"{longest} losses in a row",
                    description=(
                        f"{_name(p)} has lost {longest} straight games. "
                        f"Tonight is the chance to break the run."
                    ),
                    priority=STREAK_PRIORITY + bonus - 1,
                    category=category.STREAK,
                    kind="loss_streak",
                    player_ids=(p.player_id,),
                    value=-longest,
                )
            )
    return milestones


def fire_vs_ice_rule(ctx: MilestoneContext) -> list[Milestone]:
    """The hottest and the coldest streaker meet at the same table."""
    hot = [p for p in ctx.players if p.current_streak >= MILESTONE_STREAK_THRESHOLD]
    cold = [p for p in ctx.players if p.current_streak <= -MILESTONE_STREAK_THRESHOLD]
    if not hot or not cold:
        return []

    hottest = max(hot, key=lambda p: p.current_streak)
    coldest = min(cold, key=lambda p: p.current_streak)
    return [
        Milestone(
            emoji="⚡",
            title="Fire vs ice",
            description=(
                f"{_name(hottest)} ({hottest.current_streak} straight wins) faces "
                f"{_name(coldest)} ({abs(coldest.current_streak)} straight losses). "
                f"Who changes direction?"
            ),
            priority=FIRE_VS_ICE_PRIORITY,
            category=category.STREAK,
            kind="fire_vs_ice",
            player_ids=(hottest.player_id, coldest.player_id),
            value=hottest.current_streak - coldest.current_streak,
            record_key="fire_vs_ice",
        )
    ]


# ============ BATTLES ============


def leaderboard_pass_rule(ctx: MilestoneContext) -> list[Milestone]:
    """Adjacent players in the all-time table within one big night of each other."""
    milestones = []
    for i in range(1, len(ctx.by_total)):
        leader = ctx.by_total[i - 1]
        chaser = ctx.by_total[i]
        gap = leader.total_profit - chaser.total_profit
        if not 0 < gap <= LEADERBOARD_PASS_MAX_GAP:
            continue
        leader_rank = ctx.rank_of(leader)
        milestones.append(
            Milestone(
                emoji="📈",
                title=f"Fight for #{leader_rank}",
                description=(
                    f"{_name(chaser)} (#{ctx.rank_of(chaser)}) is {format_amount(gap)} behind "
                    f"{_name(leader)} (#{leader_rank}) in the all-time table. "
                    f"Win {format_amount(gap)} more than them tonight to pass."
                ),
                priority=LEADERBOARD_PASS_PRIORITY - min(leader_rank - 1, 5),
                category=category.BATTLE,
                kind="leaderboard_pass",
                player_ids=(chaser.player_id, leader.player_id),
                value=gap,
            )
        )
    return milestones


def close_battle_rule(ctx: MilestoneContext) -> list[Milestone]:
    """Any two players whose all-time totals are within a few units."""
    milestones = []
    for a, b in combinations(ctx.by_total, 2):
        gap = a.total_profit - b.total_profit
        if not 0 < gap <= CLOSE_BATTLE_MAX_GAP:
            continue
        milestones.append(
            Milestone(
                emoji="⚔️",
                title="Close battle",
                description=(
                    f"Only {format_amount(gap)} separate {_name(a)} "
                    f"({format_profit(a.total_profit)}) and {_name(b)} "
                    f"({format_profit(b.total_profit)}) all-time."
                ),
                priority=CLOSE_BATTLE_PRIORITY,
                category=category.BATTLE,
                kind="close_battle",
                player_ids=(a.player_id, b.player_id),
                value=gap,
            )
        )
    return milestones


def exact_tie_rule(ctx: MilestoneContext) -> list[Milestone]:
    """Players sharing the exact same nonzero all-time total."""
    groups: dict[float, list[PlayerStats]] = {}
    for p in ctx.by_total:
        if p.total_profit != 0:
            groups.setdefault(p.total_profit, []).append(p)

    milestones = []
    for total, tied in groups.items():
        if len(tied) < 2:
            continue
        names = " and ".join(_name(p) for p in tied)
        milestones.append(
            Milestone(
                emoji="🤝",
                title="Dead heat",
                description=f"{names} are tied all-time at exactly {format_profit(total)}.",
                priority=EXACT_TIE_PRIORITY,
                category=category.BATTLE,
                kind="exact_tie",
                player_ids=tuple(p.player_id for p in tied),
                value=total,
            )
        )
    return milestones


def year_battle_rule(ctx: MilestoneContext) -> list[Milestone]:
    """The top two of this year's table are close."""
    table = sorted(
        (p for p in ctx.players if p.year_games >= YEAR_BATTLE_MIN_GAMES),
        key=lambda p: p.year_profit,
        reverse=True,
    )
    if len(table) < 2:
        return []

    first, second = table[0], table[1]
    gap = first.year_profit - second.year_profit
    if not 0 < gap <= YEAR_BATTLE_MAX_GAP:
        return []
    return [
        Milestone(
            emoji="📅",
            title=f"Who leads {ctx.today.year}?",
            description=(
                f"{_name(first)} leads {ctx.today.year} with {format_profit(first.year_profit)}, "
                f"{_name(second)} chases with {format_profit(second.year_profit)}. "
                f"Gap: {format_amount(gap)}."
            ),
            priority=YEAR_BATTLE_PRIORITY,
            category=category.BATTLE,
            kind="year_battle",
            player_ids=(first.player_id, second.player_id),
            value=gap,
            record_key="year_lead",
        )
    ]


def leader_under_pressure_rule(ctx: MilestoneContext) -> list[Milestone]:
    if len(ctx.by_total) < 2:
        return []
    leader, second = ctx.by_total[0], ctx.by_total[1]
    if leader.last_game_profit >= LEADER_PRESSURE_LAST_LOSS:
        return []

    gap = leader.total_profit - second.total_profit
    return [
        Milestone(
            emoji="👀",
            title="Leader under pressure",
            description=(
                f"{_name(leader)} (#1) lost {format_amount(leader.last_game_profit)} last game. "
                f"The gap to {_name(second)} is {format_amount(gap)}."
            ),
            priority=LEADER_UNDER_PRESSURE_PRIORITY,
            category=category.DRAMA,
            kind="leader_under_pressure",
            player_ids=(leader.player_id, second.player_id),
            value=gap,
            record_key="all_time_leader",
        )
    ]


def revenge_rule(ctx: MilestoneContext) -> list[Milestone]:
    """Last game's biggest loser meets last game's biggest winner."""
    losers = [
        p
        for p in ctx.players
        if p.last_game_profit < -REVENGE_MIN_SWING and p.games_played >= REVENGE_MIN_GAMES
    ]
    winners = [p for p in ctx.players if p.last_game_profit > REVENGE_MIN_SWING]
    if not losers or not winners:
        return []

    loser = min(losers, key=lambda p: p.last_game_profit)
    winner = max(winners, key=lambda p: p.last_game_profit)
    return [
        Milestone(
            emoji="🔥",
            title="Revenge match",
            description=(
                f"{_name(loser)} ({format_profit(loser.last_game_profit)} last game) vs "
                f"{_name(winner)} ({format_profit(winner.last_game_profit)}). Tonight it's personal."
            ),
            priority=REVENGE_PRIORITY,
            category=category.BATTLE,
            kind="revenge",
            player_ids=(loser.player_id, winner.player_id),
            value=winner.last_game_profit - loser.last_game_profit,
            record_key="revenge",
        )
    ]


def rising_underdog_rule(ctx: MilestoneContext) -> list[Milestone]:
    """One of the bottom two all-time won big last game."""
    if len(ctx.by_total) < 3:
        return []
    risers = [p for p in ctx.by_total[-2:] if p.last_game_profit > UNDERDOG_MIN_LAST_WIN]
    if not risers:
        return []

    riser = max(risers, key=lambda p: p.last_game_profit)
    rank = ctx.rank_of(riser)
    return [
        Milestone(
            emoji="💪",
            title="Rising from the bottom",
            description=(
                f"{_name(riser)} (#{rank}) won {format_profit(riser.last_game_profit)} last game. "
                f"Start of a turnaround?"
            ),
            priority=RISING_UNDERDOG_PRIORITY,
            category=category.DRAMA,
            kind="rising_underdog",
            player_ids=(riser.player_id,),
            value=riser.last_game_profit,
            record_key="rising_underdog",
        )
    ]


def upset_rule(ctx: MilestoneContext) -> list[Milestone]:
    """A player who usually loses won solidly last game."""
    candidates = [
        p
        for p in ctx.players
        if p.games_played >= UPSET_MIN_GAMES
        and p.avg_profit < 0
        and p.last_game_profit > UPSET_MIN_LAST_WIN
    ]
    if not candidates:
        return []

    player = max(candidates, key=lambda p: p.last_game_profit)
    return [
        Milestone(
            emoji="🌟",
            title="Upset",
            description=(
                f"{_name(player)} averages {format_profit(player.avg_profit)} a night "
                f"but won {format_profit(player.last_game_profit)} last game. Can they do it again?"
            ),
            priority=UPSET_PRIORITY,
            category=category.DRAMA,
            kind="upset",
            player_ids=(player.player_id,),
            value=player.last_game_profit,
            record_key="upset",
        )
    ]


# ============ ROUND NUMBERS & COUNTS ============


def round_number_rule(ctx: MilestoneContext) -> list[Milestone]:
    """Players just below their next positive round-number total."""
    milestones = []
    for p in ctx.players:
        target = ROUND_NUMBER_STEP
        while target <= p.total_profit:
            target += ROUND_NUMBER_STEP
        # Only the nearest unreached threshold counts
        distance = target - p.total_profit
        if distance > ROUND_NUMBER_WINDOW:
            continue
        milestones.append(
            Milestone(
                emoji="🎯",
                title=f"Target {format_amount(target)}",
                description=(
                    f"{_name(p)} is at {format_profit(p.total_profit)} all-time. "
                    f"{format_amount(distance)} more crosses {format_amount(target)}."
                ),
                priority=ROUND_NUMBER_PRIORITY + min(target // ROUND_NUMBER_STEP, 4),
                category=category.MILESTONE,
                kind="round_number",
                player_ids=(p.player_id,),
                value=distance,
            )
        )
    return milestones


def negative_round_number_rule(ctx: MilestoneContext) -> list[Milestone]:
    """Players sliding toward the next negative round-number total."""
    milestones = []
    for p in ctx.players:
        if p.total_profit >= 0:
            continue
        threshold = -ROUND_NUMBER_STEP
        while threshold >= p.total_profit:
            threshold -= ROUND_NUMBER_STEP
        distance = p.total_profit - threshold
        if distance > ROUND_NUMBER_WINDOW:
            continue
        milestones.append(
            Milestone(
                emoji="⚠️",
                title=f"Danger zone {format_profit(threshold)}",
                description=(
                    f"{_name(p)} is at {format_profit(p.total_profit)} all-time. "
                    f"Losing {format_amount(distance)} tonight drops them past {format_profit(threshold)}."
                ),
                priority=NEGATIVE_ROUND_NUMBER_PRIORITY,
                category=category.MILESTONE,
                kind="negative_round_number",
                player_ids=(p.player_id,),
                value=distance,
            )
        )
    return milestones


def is_games_milestone(game_number: int) -> bool:
    if game_number in GAMES_MILESTONES:
        return True
    last = max(GAMES_MILESTONES, default=0)
    return game_number > last and (game_number - last) % GAMES_MILESTONE_STEP_AFTER == 0


def games_played_rule(ctx: MilestoneContext) -> list[Milestone]:
    """Players about to play a round-numbered game."""
    milestones = []
    for p in ctx.players:
        next_game = p.games_played + 1
        if not is_games_milestone(next_game):
            continue
        milestones.append(
            Milestone(
                emoji="🎮",
                title=f"Game #{next_game}",
                description=(
                    f"Tonight {_name(p)} plays game number {next_game}. "
                    f"Average so far: {format_profit(p.avg_profit)} per game."
                ),
                priority=GAMES_PLAYED_PRIORITY + min(next_game // 25, 5),
                category=category.MILESTONE,
                kind="games_played",
                player_ids=(p.player_id,),
                value=next_game,
            )
        )
    return milestones


def recovery_rule(ctx: MilestoneContext) -> list[Milestone]:
    """Players slightly negative for the year who can turn it around tonight."""
    milestones = []
    for p in ctx.players:
        if not -RECOVERY_BAND < p.year_profit < 0 or p.year_games < RECOVERY_MIN_YEAR_GAMES:
            continue
        needed = abs(p.year_profit)
        milestones.append(
            Milestone(
                emoji="🔄",
                title=f"Back to plus in {ctx.today.year}",
                description=(
                    f"{_name(p)} is at {format_profit(p.year_profit)} this year. "
                    f"A win of more than {format_amount(needed)} means a positive year."
                ),
                priority=RECOVERY_PRIORITY,
                category=category.MILESTONE,
                kind="recovery",
                player_ids=(p.player_id,),
                value=needed,
            )
        )
    return milestones


def win_rate_rule(ctx: MilestoneContext) -> list[Milestone]:
    """Players one win away from crossing a round win-rate percentage."""
    milestones = []
    for p in ctx.players:
        if p.games_played < WIN_RATE_MIN_GAMES:
            continue
        current = p.win_percentage
        after_win = (p.win_count + 1) * 100 / (p.games_played + 1)
        for threshold in sorted(WIN_RATE_THRESHOLDS, reverse=True):
            if current < threshold <= after_win:
                milestones.append(
                    Milestone(
                        emoji="📊",
                        title=f"{threshold}% win rate",
                        description=(
                            f"{_name(p)} wins {current:.0f}% of games. "
                            f"One more win lifts it to {after_win:.0f}%."
                        ),
                        priority=WIN_RATE_PRIORITY + threshold // 10,
                        category=category.MILESTONE,
                        kind="win_rate",
                        player_ids=(p.player_id,),
                        value=threshold,
                    )
                )
                break
    return milestones


# ============ RECORDS & FORM ============


def record_chase_rule(ctx: MilestoneContext) -> list[Milestone]:
    """
    A hot player within reach of the group's biggest single-night win.

    Only the strongest chaser is emitted: longest streak first, then the
    closest personal best.
    """
    if len(ctx.players) < 2:
        return []
    holder = max(ctx.players, key=lambda p: p.biggest_win)
    record = holder.biggest_win
    if record <= 0:
        return []

    chasers = [
        p
        for p in ctx.players
        if p.biggest_win < record
        and p.current_streak >= RECORD_CHASE_MIN_STREAK
        and record - p.biggest_win <= RECORD_CHASE_MAX_GAP
    ]
    if not chasers:
        return []

    chaser = max(chasers, key=lambda p: (p.current_streak, p.biggest_win))
    return [
        Milestone(
            emoji="🏆",
            title="Record chase",
            description=(
                f"Group record for one night: {format_profit(record)} ({_name(holder)}). "
                f"{_name(chaser)} is on {chaser.current_streak} straight wins with a best of "
                f"{format_profit(chaser.biggest_win)}."
            ),
            priority=RECORD_CHASE_PRIORITY,
            category=category.RECORD,
            kind="record_chase",
            player_ids=(chaser.player_id, holder.player_id),
            value=record - chaser.biggest_win,
            record_key="biggest_win_record",
        )
    ]


def month_leader_rule(ctx: MilestoneContext) -> list[Milestone]:
    table = sorted(
        (p for p in ctx.players if p.month_games >= 1),
        key=lambda p: p.month_profit,
        reverse=True,
    )
    if len(table) < 2 or table[0].month_games < 2:
        return []

    leader, second = table[0], table[1]
    gap = leader.month_profit - second.month_profit
    if not 0 < gap <= MONTH_LEADER_MAX_GAP:
        return []
    month_name = ctx.today.strftime("%B")
    return [
        Milestone(
            emoji="📆",
            title=f"Player of {month_name}",
            description=(
                f"{_name(leader)} leads {month_name} with {format_profit(leader.month_profit)}. "
                f"{_name(second)} is {format_amount(gap)} behind."
            ),
            priority=MONTH_LEADER_PRIORITY,
            category=category.SEASON,
            kind="month_leader",
            player_ids=(leader.player_id, second.player_id),
            value=gap,
            record_key="month_lead",
        )
    ]


def _form_candidates(ctx: MilestoneContext) -> list[tuple[PlayerStats, float, float]]:
    """(player, last-3 average, difference from career average) for players with enough games."""
    candidates = []
    for p in ctx.players:
        if p.games_played < FORM_MIN_GAMES or len(p.game_history) < 3:
            continue
        recent = p.recent_average(3)
        candidates.append((p, recent, recent - p.avg_profit))
    return candidates


def hot_form_rule(ctx: MilestoneContext) -> list[Milestone]:
    hot = [c for c in _form_candidates(ctx) if c[2] > FORM_MIN_DIFF]
    if not hot:
        return []
    p, recent, diff = max(hot, key=lambda c: c[2])
    return [
        Milestone(
            emoji="📈",
            title=f"{_name(p)} in form",
            description=(
                f"Last 3 games average {format_profit(recent)} vs {format_profit(p.avg_profit)} "
                f"career. Up {format_amount(diff)} per game."
            ),
            priority=HOT_FORM_PRIORITY,
            category=category.FORM,
            kind="hot_form",
            player_ids=(p.player_id,),
            value=diff,
            record_key="hot_form",
        )
    ]


def cold_form_rule(ctx: MilestoneContext) -> list[Milestone]:
    cold = [c for c in _form_candidates(ctx) if c[0].avg_profit > 0 and c[2] < -FORM_MIN_DIFF]
    if not cold:
        return []
    p, recent, diff = min(cold, key=lambda c: c[2])
    return [
        Milestone(
            emoji="📉",
            title=f"{_name(p)} below par",
            description=(
                f"Usually {format_profit(p.avg_profit)} per game, lately {format_profit(recent)}. "
                f"History says a comeback is due."
            ),
            priority=COLD_FORM_PRIORITY,
            category=category.FORM,
            kind="cold_form",
            player_ids=(p.player_id,),
            value=diff,
            record_key="cold_form",
        )
    ]


def roller_coaster_rule(ctx: MilestoneContext) -> list[Milestone]:
    swings = []
    for p in ctx.players:
        if len(p.game_history) < ROLLER_COASTER_GAMES:
            continue
        recent = [r.profit for r in p.game_history[:ROLLER_COASTER_GAMES]]
        swing = max(recent) - min(recent)
        if swing > ROLLER_COASTER_MIN_SWING:
            swings.append((p, swing, min(recent), max(recent)))
    if not swings:
        return []

    p, swing, low, high = max(swings, key=lambda s: s[1])
    return [
        Milestone(
            emoji="🎢",
            title="Roller coaster",
            description=(
                f"{_name(p)} swung from {format_profit(low)} to {format_profit(high)} "
                f"in the last {ROLLER_COASTER_GAMES} games. Which way tonight?"
            ),
            priority=ROLLER_COASTER_PRIORITY,
            category=category.DRAMA,
            kind="roller_coaster",
            player_ids=(p.player_id,),
            value=swing,
            record_key="roller_coaster",
        )
    ]


# ============ SEASON ============


def year_finale_rule(ctx: MilestoneContext) -> list[Milestone]:
    if not SEASONAL_MILESTONES_ENABLED or ctx.today.month != 12:
        return []
    table = [p for p in ctx.players if p.year_games >= YEAR_FINALE_MIN_GAMES]
    if not table:
        return []
    leader = max(table, key=lambda p: p.year_profit)
    return [
        Milestone(
            emoji="🎄",
            title=f"Champion of {ctx.today.year}?",
            description=(
                f"{_name(leader)} leads {ctx.today.year} with {format_profit(leader.year_profit)}. "
                f"December games decide it."
            ),
            priority=YEAR_FINALE_PRIORITY,
            category=category.SEASON,
            kind="year_finale",
            player_ids=(leader.player_id,),
            value=leader.year_profit,
            record_key="year_champion",
        )
    ]


def new_year_rule(ctx: MilestoneContext) -> list[Milestone]:
    if not SEASONAL_MILESTONES_ENABLED or ctx.today.month != 1 or not ctx.players:
        return []
    year_games = sum(p.year_games for p in ctx.players)
    if year_games > 1:
        return []
    return [
        Milestone(
            emoji="🎆",
            title=f"{ctx.today.year} begins",
            description=(
                f"New year, new table. {len(ctx.players)} players start from zero. "
                f"Who leads {ctx.today.year}?"
            ),
            priority=NEW_YEAR_PRIORITY,
            category=category.SEASON,
            kind="new_year",
            player_ids=tuple(p.player_id for p in ctx.players),
            value=len(ctx.players),
            record_key="new_year",
        )
    ]


DEFAULT_RULES: tuple[Rule, ...] = (
    streak_rule,
    fire_vs_ice_rule,
    leaderboard_pass_rule,
    close_battle_rule,
    exact_tie_rule,
    year_battle_rule,
    leader_under_pressure_rule,
    rising_underdog_rule,
    upset_rule,
    round_number_rule,
    games_played_rule,
    recovery_rule,
    win_rate_rule,
    negative_round_number_rule,
    record_chase_rule,
    revenge_rule,
    month_leader_rule,
    hot_form_rule,
    cold_form_rule,
    roller_coaster_rule,
    year_finale_rule,
    new_year_rule,
)


def select_milestones(candidates: list[Milestone], limit: int) -> list[Milestone]:
    """
    Rank candidates by priority and keep the top ``limit``.

    Ties keep rule-emission order. A singular record (same ``record_key``)
    is only ever kept once, for its highest-ranked candidate.
    """
    ranked = sorted(candidates, key=lambda m: m.priority, reverse=True)
    taken_records: set[str] = set()
    selected: list[Milestone] = []

    for m in ranked:
        if len(selected) >= limit:
            break
        if m.record_key is not None:
            if m.record_key in taken_records:
                continue
            taken_records.add(m.record_key)
        selected.append(m)

    return selected


class MilestoneDetector:
    """
    Pure domain service producing tonight's storylines.

    Rules run in a fixed order; each may emit any number of candidates.
    """

    def __init__(self, rules: list[Rule] | None = None, max_results: int = MILESTONE_MAX_RESULTS):
        """
        Initialize the detector.

        Args:
            rules: Ordered rule functions (defaults to DEFAULT_RULES)
            max_results: Maximum number of milestones returned
        """
        self.rules = list(rules) if rules is not None else list(DEFAULT_RULES)
        self.max_results = max_results

    def detect(self, players: list[PlayerStats], now: date | datetime) -> list[Milestone]:
        """
        Detect milestones for a set of players.

        Args:
            players: Aggregated stats of the players to evaluate
            now: Evaluation time (period buckets and seasonal rules)

        Returns:
            At most ``max_results`` milestones, highest priority first
        """
        if not players:
            return []

        ctx = MilestoneContext.build(players, now)
        candidates: list[Milestone] = []
        for rule in self.rules:
            emitted = rule(ctx)
            if emitted:
                logger.debug(f"{rule.__name__}: {len(emitted)} candidate(s)")
            candidates.extend(emitted)

        selected = select_milestones(candidates, self.max_results)
        logger.debug(
            f"Selected {len(selected)} of {len(candidates)} milestone candidates "
            f"for {len(ctx.players)} players"
        )
        return selected
