# File: managers/ledger_manager.py
"""Ledger Manager - Completion counts, balances and reward redemption.

This manager is the single writer of the completions ledger and the
redemption log. It also carries the weekly-stat side effect of a completion
so approval and instant verification can apply "complete + count it" as one
step without a second notification.

ARCHITECTURE:
- LedgerManager = "The Bank" (stateful, reads/writes the store)
- LedgerEngine = "The Calculator" (stateless arithmetic)

Public mutators notify once. The ``apply_*`` helpers never notify; callers
that compose several writes (ApprovalManager) notify when they are done.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.core import callback

from .. import const
from ..engines.ledger_engine import LedgerEngine
from ..engines.statistics_engine import StatisticsEngine
from ..utils import dt_utils
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import KidsTasksDataCoordinator
    from ..type_defs import (
        ChildData,
        CompletionsData,
        RedemptionRecord,
        RewardData,
        TaskData,
        WeeklyStats,
    )


class DuplicateCatalogIdError(ValueError):
    """Raised when a replacement catalog repeats an id."""


class LedgerManager(BaseManager):
    """Manager for task completions and point balances."""

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: KidsTasksDataCoordinator,
    ) -> None:
        """Initialize the ledger manager.

        Args:
            hass: Home Assistant instance
            coordinator: Parent coordinator
        """
        super().__init__(hass, coordinator)

    async def async_setup(self) -> None:
        """Nothing to subscribe to; the ledger only reacts to service calls."""
        const.LOGGER.debug("LedgerManager: Ready for entry %s", self.entry_id)

    # =========================================================================
    # Catalogs
    # =========================================================================

    @property
    def children(self) -> list[ChildData]:
        """Children catalog (defaults until a record exists)."""
        return self.store.get_json(const.RECORD_CHILDREN, const.DEFAULT_CHILDREN)

    @property
    def tasks(self) -> list[TaskData]:
        """Task catalog (defaults until a record exists)."""
        return self.store.get_json(const.RECORD_TASKS, const.DEFAULT_TASKS)

    @property
    def rewards(self) -> list[RewardData]:
        """Reward catalog (defaults until a record exists)."""
        return self.store.get_json(const.RECORD_REWARDS, const.DEFAULT_REWARDS)

    @callback
    def set_catalog(self, record_key: str, items: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Replace the children, tasks or rewards catalog and notify.

        Ledger entries of removed ids stay in place and count as zero.

        Raises:
            DuplicateCatalogIdError: Two entries share an id. Nothing changes.
        """
        if record_key not in const.CATALOG_RECORD_KEYS:
            raise ValueError(f"Not a catalog record: {record_key}")

        catalog = [{**item, const.DATA_ID: str(item[const.DATA_ID])} for item in items]
        ids = [item[const.DATA_ID] for item in catalog]
        duplicates = sorted({item_id for item_id in ids if ids.count(item_id) > 1})
        if duplicates:
            raise DuplicateCatalogIdError(
                const.ERROR_DUPLICATE_CATALOG_ID_FMT.format(", ".join(duplicates))
            )

        self.store.set_json(record_key, catalog)
        const.LOGGER.info("Replaced %s with %s entries", record_key, len(catalog))
        self.notify()
        return catalog

    def get_task(self, task_id: str) -> TaskData | None:
        """Look up a task by id."""
        return LedgerEngine.find_by_id(self.tasks, task_id)

    def get_reward(self, reward_id: str) -> RewardData | None:
        """Look up a reward by id."""
        return LedgerEngine.find_by_id(self.rewards, reward_id)

    def get_completions(self) -> CompletionsData:
        """Fresh copy of the completions ledger."""
        return self.store.get_json(const.RECORD_COMPLETIONS, {})

    # =========================================================================
    # Balances
    # =========================================================================

    def calculate_points(
        self, child_id: str, completions: CompletionsData | None = None
    ) -> int:
        """Balance for ``child_id`` against the current task catalog."""
        if completions is None:
            completions = self.get_completions()
        return LedgerEngine.calculate_points(child_id, completions, self.tasks)

    def get_balance(self, child_id: str) -> int:
        """Current balance for one child."""
        return self.calculate_points(child_id)

    def get_balances(self) -> dict[str, int]:
        """Current balance for every child in the catalog."""
        completions = self.get_completions()
        tasks = self.tasks
        return {
            str(child[const.DATA_ID]): LedgerEngine.calculate_points(
                str(child[const.DATA_ID]), completions, tasks
            )
            for child in self.children
        }

    def get_redemptions(self, child_id: str | None = None) -> list[RedemptionRecord]:
        """Redemption log, optionally filtered to one child."""
        redemptions: list[RedemptionRecord] = self.store.get_json(
            const.RECORD_REDEMPTIONS, []
        )
        if child_id is None:
            return redemptions
        return [
            record
            for record in redemptions
            if record.get(const.DATA_REDEMPTION_CHILD_ID) == child_id
        ]

    # =========================================================================
    # Composable helpers (no notification)
    # =========================================================================

    @callback
    def apply_completion(self, child_id: str, task_id: str) -> CompletionsData:
        """Increment the completion count and persist the ledger."""
        completions = LedgerEngine.complete_task(self.get_completions(), child_id, task_id)
        self.store.set_json(const.RECORD_COMPLETIONS, completions)
        return completions

    @callback
    def apply_weekly_stat(self, child_id: str, task_id: str, undo: bool = False) -> bool:
        """Count (or uncount) one completion in the live weekly stats.

        Skipped when the task is unknown.

        Returns:
            True if the weekly stats record was written.
        """
        task = self.get_task(task_id)
        if task is None:
            const.LOGGER.debug(
                "Task '%s' not in catalog, weekly stats for child '%s' unchanged",
                task_id,
                child_id,
            )
            return False

        tz = self.coordinator.time_zone
        stats: WeeklyStats = self.store.get_json(const.RECORD_WEEKLY_STATS, None) or (
            StatisticsEngine.new_weekly_stats(dt_utils.dt_week_start_iso(tz))
        )
        points = LedgerEngine.to_points(task.get(const.DATA_TASK_POINTS))
        StatisticsEngine.record_completion(
            stats, child_id, points, dt_utils.dt_today_iso(tz), undo=undo
        )
        self.store.set_json(const.RECORD_WEEKLY_STATS, stats)
        return True

    # =========================================================================
    # Operations
    # =========================================================================

    @callback
    def complete_task(self, child_id: str, task_id: str) -> CompletionsData:
        """Increment a task count by one and notify.

        No upper bound and no duplicate guard: every call counts.
        """
        if task_id == const.LEDGER_REDEMPTION_KEY:
            const.LOGGER.warning(
                "Ignoring completion of reserved ledger key for child '%s'", child_id
            )
            return self.get_completions()

        completions = self.apply_completion(child_id, task_id)
        const.LOGGER.debug("Child '%s' completed task '%s'", child_id, task_id)
        self.notify()
        return completions

    @callback
    def remove_completion(self, child_id: str, task_id: str) -> CompletionsData:
        """Decrement a task count by one, dropping the entry at zero.

        No-op (and no notification) when there is nothing to remove.
        """
        completions = self.get_completions()
        if not LedgerEngine.has_completion(completions, child_id, task_id):
            return completions

        LedgerEngine.remove_completion(completions, child_id, task_id)
        self.store.set_json(const.RECORD_COMPLETIONS, completions)
        const.LOGGER.debug("Removed one completion of task '%s' for child '%s'", task_id, child_id)
        self.notify()
        return completions

    @callback
    def record_completion(self, child_id: str, task_id: str) -> CompletionsData | None:
        """Complete a task directly and count it in the weekly stats.

        Returns:
            The updated ledger, or None when the task needs a parent
            (submit it for approval or verify it with the PIN instead).
        """
        task = self.get_task(task_id)
        if task is not None and task.get(const.DATA_TASK_REQUIRES_APPROVAL):
            const.LOGGER.debug(
                "Task '%s' requires approval, not completing directly for child '%s'",
                task_id,
                child_id,
            )
            return None
        if task_id == const.LEDGER_REDEMPTION_KEY:
            const.LOGGER.warning(
                "Ignoring completion of reserved ledger key for child '%s'", child_id
            )
            return None

        completions = self.apply_completion(child_id, task_id)
        self.apply_weekly_stat(child_id, task_id)
        self.notify()
        return completions

    @callback
    def undo_completion(self, child_id: str, task_id: str) -> bool:
        """Undo one completion and its weekly-stat contribution.

        Returns:
            True if a completion was removed.
        """
        completions = self.get_completions()
        if not LedgerEngine.has_completion(completions, child_id, task_id):
            const.LOGGER.debug(
                "Nothing to undo for task '%s' and child '%s'", task_id, child_id
            )
            return False

        LedgerEngine.remove_completion(completions, child_id, task_id)
        self.store.set_json(const.RECORD_COMPLETIONS, completions)
        self.apply_weekly_stat(child_id, task_id, undo=True)
        self.notify()
        return True

    @callback
    def redeem_reward(self, child_id: str, reward_id: str) -> RedemptionRecord | None:
        """Spend points on a reward.

        Returns:
            The appended redemption record, or None (no state change) when the
            reward is unknown or the balance does not cover its cost.
        """
        reward = self.get_reward(reward_id)
        if reward is None:
            const.LOGGER.warning(
                "Redemption declined: reward '%s' not found (child '%s')", reward_id, child_id
            )
            return None

        cost = LedgerEngine.to_points(reward.get(const.DATA_REWARD_COST))
        completions = self.get_completions()
        balance = self.calculate_points(child_id, completions)
        if not LedgerEngine.validate_sufficient_points(balance, cost):
            const.LOGGER.warning(
                "Redemption declined: child '%s' has %s points, '%s' costs %s",
                child_id,
                balance,
                reward.get(const.DATA_NAME),
                cost,
            )
            return None

        LedgerEngine.apply_redemption(completions, child_id, cost)
        record = LedgerEngine.create_redemption_record(child_id, reward)
        redemptions: list[dict[str, Any]] = self.store.get_json(const.RECORD_REDEMPTIONS, [])
        redemptions.append(record)

        self.store.set_json(const.RECORD_COMPLETIONS, completions)
        self.store.set_json(const.RECORD_REDEMPTIONS, redemptions)
        const.LOGGER.info(
            "Child '%s' redeemed '%s' for %s points", child_id, reward.get(const.DATA_NAME), cost
        )
        self.notify()
        return record
