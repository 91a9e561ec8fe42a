# File: managers/reset_manager.py
"""Reset Manager - Daily checklist and weekly stats rollover.

Timer owner for rollover checks. Resets are evaluated (daily first, then
weekly, each applied independently):
1. Once during setup (catch-up after downtime)
2. On a fixed interval tick
3. After the sync manager overwrote local records with remote data

Whatever runs, presentation layers get at most one change notification.

Signals Consumed:
- SIGNAL_SUFFIX_REMOTE_SYNCED: re-check boundaries against fresh remote data
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Any

from homeassistant.core import callback
from homeassistant.helpers.event import async_track_time_interval

from .. import const
from ..engines.reset_engine import ResetEngine
from ..utils import dt_utils
from .base_manager import BaseManager

if TYPE_CHECKING:
    from datetime import datetime

    from homeassistant.core import HomeAssistant

    from ..coordinator import KidsTasksDataCoordinator
    from ..type_defs import CompletionsData, WeeklyHistoryEntry, WeeklyStats


class ResetManager(BaseManager):
    """Manager for daily/weekly reset boundaries."""

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: KidsTasksDataCoordinator,
        check_interval: int = const.DEFAULT_RESET_CHECK_INTERVAL,
    ) -> None:
        """Initialize the reset manager.

        Args:
            hass: Home Assistant instance
            coordinator: Parent coordinator
            check_interval: Seconds between periodic boundary checks
        """
        super().__init__(hass, coordinator)
        self._check_interval = timedelta(seconds=check_interval)

    async def async_setup(self) -> None:
        """Register the periodic check, listen for inbound sync, catch up."""
        unsub = async_track_time_interval(
            self.hass,
            self._on_reset_tick,
            self._check_interval,
            name=f"{const.DOMAIN}_reset_check",
        )
        self.coordinator.config_entry.async_on_unload(unsub)

        self.listen(const.SIGNAL_SUFFIX_REMOTE_SYNCED, self._on_remote_synced)

        # Startup catch-up: apply any boundary crossed while offline
        self.check_resets()

        const.LOGGER.debug(
            "ResetManager initialized: checking every %s for entry %s",
            self._check_interval,
            self.entry_id,
        )

    @callback
    def _on_reset_tick(self, _: datetime) -> None:
        self.check_resets()

    @callback
    def _on_remote_synced(self, payload: dict[str, Any]) -> None:
        const.LOGGER.debug(
            "ResetManager: Remote sync wrote %s, re-checking boundaries",
            payload.get("keys"),
        )
        self.check_resets()

    # =========================================================================
    # Queries
    # =========================================================================

    def get_weekly_stats(self) -> WeeklyStats | None:
        """Live weekly stats record (None before the first weekly reset)."""
        return self.store.get_json(const.RECORD_WEEKLY_STATS, None)

    def get_weekly_history(self) -> list[WeeklyHistoryEntry]:
        """Archived weeks, most recent first."""
        return self.store.get_json(const.RECORD_WEEKLY_HISTORY, [])

    # =========================================================================
    # Reset Operations
    # =========================================================================

    @callback
    def check_resets(self, now: datetime | None = None) -> bool:
        """Apply every due reset, then notify once if anything changed.

        Args:
            now: Instant to evaluate boundaries at (default: current time)

        Returns:
            True if a daily or weekly reset ran.
        """
        tz = self.coordinator.time_zone
        changed = False

        if ResetEngine.is_daily_reset_due(
            self.store.get_text(const.RECORD_LAST_DAILY_RESET), tz, now
        ):
            self._apply_daily_reset(now)
            changed = True

        if ResetEngine.is_weekly_reset_due(self.get_weekly_stats(), tz, now):
            self._apply_weekly_reset(dt_utils.dt_week_start_iso(tz, now))
            changed = True

        if changed:
            self.notify()
        return changed

    @callback
    def reset_daily_tasks(self, now: datetime | None = None) -> CompletionsData:
        """Clear today's checklist, keeping each child's redemption accumulator."""
        completions = self._apply_daily_reset(now)
        self.notify()
        return completions

    @callback
    def reset_weekly_stats(self, new_week_start: str | None = None) -> WeeklyStats:
        """Archive the live week and start ``new_week_start`` (default: current week)."""
        stats = self._apply_weekly_reset(
            new_week_start or dt_utils.dt_week_start_iso(self.coordinator.time_zone)
        )
        self.notify()
        return stats

    # =========================================================================
    # Internals (no notification)
    # =========================================================================

    def _apply_daily_reset(self, now: datetime | None) -> CompletionsData:
        completions = ResetEngine.reset_daily_completions(
            self.store.get_json(const.RECORD_COMPLETIONS, {})
        )
        self.store.set_json(const.RECORD_COMPLETIONS, completions)
        self.store.set_text(const.RECORD_LAST_DAILY_RESET, dt_utils.dt_to_iso_utc(now))
        const.LOGGER.info("Daily reset: cleared task completions")
        return completions

    def _apply_weekly_reset(self, new_week_start: str) -> WeeklyStats:
        fresh, history, archived = ResetEngine.roll_week(
            self.get_weekly_stats(),
            self.get_weekly_history(),
            new_week_start,
        )
        if archived:
            self.store.set_json(const.RECORD_WEEKLY_HISTORY, history)
        self.store.set_json(const.RECORD_WEEKLY_STATS, fresh)
        self.store.set_text(const.RECORD_LAST_WEEKLY_RESET, new_week_start)
        const.LOGGER.info(
            "Weekly reset: started week %s (previous week archived: %s)",
            new_week_start,
            archived,
        )
        return fresh
