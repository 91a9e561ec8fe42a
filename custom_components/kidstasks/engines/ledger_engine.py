"""Ledger Engine - Pure logic for completion counts and point balances.

This engine provides stateless, pure Python functions for:
- Reading a child's ledger as tagged entries (task completions vs. redemption)
- Point balance calculation against the task catalog
- Completion increment / undo arithmetic
- Sufficient points validation and redemption deductions

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in data.
State management belongs in LedgerManager.

Stored shape (kept for compatibility with the shared server file):
    {child_id: {task_id: count, ..., "redemption": -spent}}
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Any
import uuid

from .. import const
from ..utils.dt_utils import dt_now_iso_utc

if TYPE_CHECKING:
    from ..type_defs import CompletionsData, RedemptionRecord, RewardData, TaskData

_LOGGER = logging.getLogger(__name__)


# =============================================================================
# LEDGER ENTRY TYPES
# =============================================================================


@dataclass(frozen=True)
class TaskCompletion:
    """A task completed ``count`` times since the last daily reset."""

    task_id: str
    count: int


@dataclass(frozen=True)
class RedemptionDeduction:
    """Points spent on rewards. ``amount`` is zero or negative."""

    amount: int


LedgerEntry = TaskCompletion | RedemptionDeduction


def _coerce_count(value: Any) -> int | None:
    """Return an int count from a stored JSON value, None when unusable."""
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class LedgerEngine:
    """Pure logic engine for the completion ledger.

    All methods are static - no instance state. This enables easy unit testing
    without any Home Assistant mocking.

    Mutating helpers modify the passed mapping in place and return it for
    convenience; callers read a fresh copy from the store before mutating.
    """

    @staticmethod
    def to_points(value: Any) -> int:
        """Catalog points or cost as an int; unusable values count as zero."""
        return _coerce_count(value) or 0

    # =========================================================================
    # Entry Conversion
    # =========================================================================

    @staticmethod
    def parse_entries(child_completions: Mapping[str, Any] | None) -> list[LedgerEntry]:
        """Read one child's stored mapping as tagged ledger entries.

        Non-numeric counts are skipped rather than raised.
        """
        entries: list[LedgerEntry] = []
        for key, raw_value in (child_completions or {}).items():
            value = _coerce_count(raw_value)
            if value is None:
                _LOGGER.debug("Skipping non-numeric ledger value %r for '%s'", raw_value, key)
                continue
            if key == const.LEDGER_REDEMPTION_KEY:
                entries.append(RedemptionDeduction(amount=value))
            else:
                entries.append(TaskCompletion(task_id=key, count=value))
        return entries

    @staticmethod
    def serialize_entries(entries: Iterable[LedgerEntry]) -> dict[str, int]:
        """Write tagged ledger entries back to the stored mapping shape."""
        result: dict[str, int] = {}
        for entry in entries:
            if isinstance(entry, RedemptionDeduction):
                result[const.LEDGER_REDEMPTION_KEY] = entry.amount
            else:
                result[entry.task_id] = entry.count
        return result

    @staticmethod
    def find_by_id(
        catalog: Iterable[Mapping[str, Any]] | None, item_id: str
    ) -> Any | None:
        """Return the catalog entry with ``id == item_id``, or None."""
        for item in catalog or ():
            if str(item.get(const.DATA_ID)) == str(item_id):
                return item
        return None

    # =========================================================================
    # Balance
    # =========================================================================

    @staticmethod
    def calculate_points(
        child_id: str,
        completions: CompletionsData,
        tasks: Iterable[TaskData],
    ) -> int:
        """Calculate a child's point balance.

        Sum of ``task.points * count`` for every entry whose task resolves in
        the catalog, plus the (already negative) redemption accumulator.
        Unknown or deleted task ids contribute nothing.

        Args:
            child_id: Child whose balance is calculated
            completions: Full completions mapping
            tasks: Task catalog

        Returns:
            Point balance (may be negative after an undo that follows a redemption)
        """
        task_points = {
            str(task.get(const.DATA_ID)): LedgerEngine.to_points(task.get(const.DATA_TASK_POINTS))
            for task in tasks
        }
        total = 0
        for entry in LedgerEngine.parse_entries(completions.get(child_id)):
            if isinstance(entry, RedemptionDeduction):
                total += entry.amount
            elif entry.task_id in task_points:
                total += task_points[entry.task_id] * entry.count
        return total

    @staticmethod
    def get_count(completions: CompletionsData, child_id: str, task_id: str) -> int:
        """Return how many times a task was completed since the last daily reset."""
        value = _coerce_count(completions.get(child_id, {}).get(task_id))
        return value or 0

    @staticmethod
    def has_completion(completions: CompletionsData, child_id: str, task_id: str) -> bool:
        """Return True when the child has a positive count for the task."""
        return LedgerEngine.get_count(completions, child_id, task_id) > 0

    # =========================================================================
    # Completion Arithmetic
    # =========================================================================

    @staticmethod
    def complete_task(
        completions: CompletionsData, child_id: str, task_id: str
    ) -> CompletionsData:
        """Increment a task count by one, creating nested entries as needed.

        There is no upper bound; every call counts. The reserved redemption
        key is never treated as a task.
        """
        if task_id == const.LEDGER_REDEMPTION_KEY:
            _LOGGER.warning("Refusing to complete reserved ledger key '%s'", task_id)
            return completions

        child_entries = completions.setdefault(child_id, {})
        child_entries[task_id] = LedgerEngine.get_count(completions, child_id, task_id) + 1
        return completions

    @staticmethod
    def remove_completion(
        completions: CompletionsData, child_id: str, task_id: str
    ) -> CompletionsData:
        """Decrement a task count by one; the entry is deleted when it reaches 0.

        No-op when the task has no positive count.
        """
        if task_id == const.LEDGER_REDEMPTION_KEY:
            return completions

        count = LedgerEngine.get_count(completions, child_id, task_id)
        if count <= 0:
            return completions

        child_entries = completions[child_id]
        if count - 1 <= 0:
            del child_entries[task_id]
        else:
            child_entries[task_id] = count - 1
        return completions

    # =========================================================================
    # Redemption
    # =========================================================================

    @staticmethod
    def validate_sufficient_points(balance: int, cost: int) -> bool:
        """Return True if the balance covers the cost."""
        return balance >= cost

    @staticmethod
    def apply_redemption(
        completions: CompletionsData, child_id: str, cost: int
    ) -> CompletionsData:
        """Subtract ``cost`` from the child's redemption accumulator."""
        child_entries = completions.setdefault(child_id, {})
        current = _coerce_count(child_entries.get(const.LEDGER_REDEMPTION_KEY)) or 0
        child_entries[const.LEDGER_REDEMPTION_KEY] = current - cost
        return completions

    @staticmethod
    def create_redemption_record(
        child_id: str, reward: RewardData, date_iso: str | None = None
    ) -> RedemptionRecord:
        """Create the immutable log entry for a redemption."""
        return {
            const.DATA_REDEMPTION_ID: str(uuid.uuid4()),
            const.DATA_REDEMPTION_CHILD_ID: child_id,
            const.DATA_REDEMPTION_REWARD_ID: str(reward[const.DATA_ID]),
            const.DATA_REDEMPTION_REWARD_NAME: reward.get(const.DATA_NAME, ""),
            const.DATA_REDEMPTION_COST: LedgerEngine.to_points(reward.get(const.DATA_REWARD_COST)),
            const.DATA_REDEMPTION_DATE: date_iso or dt_now_iso_utc(),
        }
