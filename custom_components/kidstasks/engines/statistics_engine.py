"""Statistics Engine - Weekly totals and per-day history for each child.

Design Principles:
    - Stateless: operates on the weekly stats record passed in
    - Never negative: undo floors every counter at 0
    - Day keys are civil dates (see utils.dt_utils)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .. import const

if TYPE_CHECKING:
    from ..type_defs import ChildWeeklyStats, DailyStat, WeeklyStats


class StatisticsEngine:
    """Engine for the live weekly stats record.

    Example:
        stats = StatisticsEngine.new_weekly_stats("2024-01-14")
        StatisticsEngine.record_completion(stats, "1", 10, "2024-01-15")
        StatisticsEngine.record_completion(stats, "1", 10, "2024-01-15", undo=True)
    """

    @staticmethod
    def new_weekly_stats(week_start_date: str | None = None) -> WeeklyStats:
        """Return a fresh, zeroed weekly stats record."""
        return {
            const.DATA_WEEK_START_DATE: week_start_date,
            const.DATA_WEEK_CHILDREN: {},
        }

    @staticmethod
    def ensure_child(stats: WeeklyStats, child_id: str) -> ChildWeeklyStats:
        """Return the child's weekly record, creating it zeroed if missing."""
        children = stats.setdefault(const.DATA_WEEK_CHILDREN, {})
        return children.setdefault(
            child_id,
            {
                const.DATA_WEEK_TASKS_COMPLETED: 0,
                const.DATA_WEEK_POINTS_EARNED: 0,
                const.DATA_WEEK_DAILY_HISTORY: {},
            },
        )

    @staticmethod
    def record_completion(
        stats: WeeklyStats,
        child_id: str,
        points: int,
        day_iso: str,
        undo: bool = False,
    ) -> WeeklyStats:
        """Add (or undo) one completion worth ``points`` in place.

        Args:
            stats: Live weekly stats record
            child_id: Child who completed the task
            points: Task point value
            day_iso: Civil date the completion belongs to
            undo: Subtract instead of add, flooring every counter at 0

        Returns:
            The same stats record, for convenience
        """
        child_stats = StatisticsEngine.ensure_child(stats, child_id)
        day: DailyStat = child_stats.setdefault(const.DATA_WEEK_DAILY_HISTORY, {}).setdefault(
            day_iso, {const.DATA_DAY_TASKS: 0, const.DATA_DAY_POINTS: 0}
        )

        if undo:
            child_stats[const.DATA_WEEK_TASKS_COMPLETED] = max(
                0, child_stats.get(const.DATA_WEEK_TASKS_COMPLETED, 0) - 1
            )
            child_stats[const.DATA_WEEK_POINTS_EARNED] = max(
                0, child_stats.get(const.DATA_WEEK_POINTS_EARNED, 0) - points
            )
            day[const.DATA_DAY_TASKS] = max(0, day.get(const.DATA_DAY_TASKS, 0) - 1)
            day[const.DATA_DAY_POINTS] = max(0, day.get(const.DATA_DAY_POINTS, 0) - points)
        else:
            child_stats[const.DATA_WEEK_TASKS_COMPLETED] = (
                child_stats.get(const.DATA_WEEK_TASKS_COMPLETED, 0) + 1
            )
            child_stats[const.DATA_WEEK_POINTS_EARNED] = (
                child_stats.get(const.DATA_WEEK_POINTS_EARNED, 0) + points
            )
            day[const.DATA_DAY_TASKS] = day.get(const.DATA_DAY_TASKS, 0) + 1
            day[const.DATA_DAY_POINTS] = day.get(const.DATA_DAY_POINTS, 0) + points

        return stats

    @staticmethod
    def get_child_totals(stats: WeeklyStats, child_id: str) -> tuple[int, int]:
        """Return (tasks_completed, points_earned) for the child, zeros if absent."""
        child_stats = stats.get(const.DATA_WEEK_CHILDREN, {}).get(child_id)
        if not child_stats:
            return 0, 0
        return (
            child_stats.get(const.DATA_WEEK_TASKS_COMPLETED, 0),
            child_stats.get(const.DATA_WEEK_POINTS_EARNED, 0),
        )
