"""Reset Engine - Pure logic for daily and weekly rollover.

Daily rollover clears today's checklist: every task counter is dropped and
only each child's redemption accumulator survives. Weekly stats are left
alone so point totals carry across days within the week.

Weekly rollover archives the live week at the front of the history list
(capped, oldest dropped first) and starts a fresh, empty week.

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
Scheduling and persistence belong in ResetManager.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .. import const
from ..utils import dt_utils
from .ledger_engine import LedgerEngine, RedemptionDeduction
from .statistics_engine import StatisticsEngine

if TYPE_CHECKING:
    from datetime import datetime
    from zoneinfo import ZoneInfo

    from ..type_defs import (
        CompletionsData,
        WeeklyHistoryEntry,
        WeeklyStats,
    )


class ResetEngine:
    """Pure logic engine for reset boundaries and rollover transforms."""

    # =========================================================================
    # Due Checks
    # =========================================================================

    @staticmethod
    def is_daily_reset_due(
        last_daily_reset: str | None,
        tz: ZoneInfo | None = None,
        now: datetime | None = None,
    ) -> bool:
        """Return True when local midnight passed since the daily marker."""
        return dt_utils.should_reset_daily(last_daily_reset, tz, now)

    @staticmethod
    def is_weekly_reset_due(
        weekly_stats: WeeklyStats | None,
        tz: ZoneInfo | None = None,
        now: datetime | None = None,
    ) -> bool:
        """Return True when the live week does not start on the current Sunday."""
        week_start = (weekly_stats or {}).get(const.DATA_WEEK_START_DATE)
        return dt_utils.should_reset_weekly(week_start, tz, now)

    # =========================================================================
    # Transforms
    # =========================================================================

    @staticmethod
    def reset_daily_completions(completions: CompletionsData) -> CompletionsData:
        """Return a new completions mapping keeping only redemption accumulators.

        Children without a (nonzero) accumulator are dropped entirely.
        """
        result: CompletionsData = {}
        for child_id, child_completions in completions.items():
            kept = [
                entry
                for entry in LedgerEngine.parse_entries(child_completions)
                if isinstance(entry, RedemptionDeduction) and entry.amount
            ]
            if kept:
                result[child_id] = LedgerEngine.serialize_entries(kept)
        return result

    @staticmethod
    def archive_week(
        weekly_stats: WeeklyStats | None,
        history: list[WeeklyHistoryEntry],
        limit: int = const.DEFAULT_WEEKLY_HISTORY_LIMIT,
    ) -> tuple[list[WeeklyHistoryEntry], bool]:
        """Prepend the live week to history when it has a start date.

        Returns:
            (new_history, archived) - ``archived`` is False when the live record
            had no week start (nothing to keep).
        """
        week_start = (weekly_stats or {}).get(const.DATA_WEEK_START_DATE)
        if not week_start:
            return list(history), False

        archived: WeeklyHistoryEntry = {
            const.DATA_WEEK_START_DATE: week_start,
            const.DATA_WEEK_CHILDREN: (weekly_stats or {}).get(const.DATA_WEEK_CHILDREN, {}),
        }
        return [archived, *history][:limit], True

    @staticmethod
    def roll_week(
        weekly_stats: WeeklyStats | None,
        history: list[WeeklyHistoryEntry],
        new_week_start: str,
        limit: int = const.DEFAULT_WEEKLY_HISTORY_LIMIT,
    ) -> tuple[WeeklyStats, list[WeeklyHistoryEntry], bool]:
        """Archive the live week and start a fresh one.

        Returns:
            (fresh_stats, new_history, archived)
        """
        new_history, archived = ResetEngine.archive_week(weekly_stats, history, limit)
        return StatisticsEngine.new_weekly_stats(new_week_start), new_history, archived
