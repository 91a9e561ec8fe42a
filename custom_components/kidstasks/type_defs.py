"""Type definitions for KidsTasks data structures.

TypedDict is used for records with fixed keys (catalog entries, redemption
records, weekly stats). Records keyed by runtime ids (completions, pending
approvals) are plain ``dict`` aliases.

The camelCase keys mirror the JSON documents stored on the shared server file,
so the same records round-trip between devices unchanged.

IMPORTANT: This file must NOT import from coordinator.py or any manager to
avoid circular dependencies.
"""

from typing import NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

ChildId = str
TaskId = str
RewardId = str
ISODatetime = str  # ISO 8601 datetime string "2026-01-18T12:30:00+00:00"
ISODate = str  # ISO 8601 date string (no time) "2026-01-18"

# completions[child_id][task_id] -> count ("redemption" holds the spent total)
CompletionsData = dict[ChildId, dict[str, int]]

# pending[child_id] -> task ids awaiting a parent, set semantics
PendingApprovalsData = dict[ChildId, list[TaskId]]


# =============================================================================
# Catalog Entries
# =============================================================================


class ChildData(TypedDict):
    """A child who can complete tasks."""

    id: ChildId
    name: str
    color: NotRequired[str]
    avatar: NotRequired[str]


class TaskData(TypedDict):
    """A chore worth a fixed number of points."""

    id: TaskId
    name: str
    points: int
    emoji: NotRequired[str]
    description: NotRequired[str]
    requiresApproval: NotRequired[bool]


class RewardData(TypedDict):
    """A reward that can be bought with points."""

    id: RewardId
    name: str
    cost: int
    emoji: NotRequired[str]
    description: NotRequired[str]


# =============================================================================
# Ledger Records
# =============================================================================


class RedemptionRecord(TypedDict):
    """Immutable log entry written when a reward is redeemed."""

    id: str
    childId: ChildId
    rewardId: RewardId
    rewardName: str
    cost: int
    date: ISODatetime


# =============================================================================
# Weekly Statistics
# =============================================================================


class DailyStat(TypedDict):
    """Tasks and points for one civil day."""

    tasks: int
    points: int


class ChildWeeklyStats(TypedDict):
    """Running weekly totals for one child."""

    tasksCompleted: int
    pointsEarned: int
    dailyHistory: dict[ISODate, DailyStat]


class WeeklyStats(TypedDict):
    """The live, currently accumulating week."""

    weekStartDate: ISODate | None
    children: dict[ChildId, ChildWeeklyStats]


class WeeklyHistoryEntry(TypedDict):
    """An archived week (most recent first in the history list)."""

    weekStartDate: ISODate
    children: dict[ChildId, ChildWeeklyStats]
