"""Approval Engine - Pure logic for the parent approval state machine.

States per (child, task) pair:

    NONE ──submit──▶ PENDING ──approve──▶ COMPLETED
      │                 │
      │                 └──reject──▶ NONE
      └──instant verify (parent PIN)──▶ COMPLETED

COMPLETED is terminal for a single action: the completion itself lives in the
ledger, so the pair reads as NONE again in the pending mapping.

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
State management belongs in ApprovalManager.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .. import const

if TYPE_CHECKING:
    from ..type_defs import PendingApprovalsData

# =============================================================================
# APPROVAL ACTION CONSTANTS
# =============================================================================

APPROVAL_ACTION_SUBMIT = "submit"
APPROVAL_ACTION_APPROVE = "approve"
APPROVAL_ACTION_REJECT = "reject"
APPROVAL_ACTION_VERIFY = "verify"


class ApprovalEngine:
    """Pure logic engine for pending approvals.

    All methods are static - no instance state.
    """

    # Valid state transitions matrix
    VALID_TRANSITIONS: dict[str, list[str]] = {
        const.APPROVAL_STATE_NONE: [
            const.APPROVAL_STATE_PENDING,  # Child submits
            const.APPROVAL_STATE_COMPLETED,  # Parent PIN at point of action
        ],
        const.APPROVAL_STATE_PENDING: [
            const.APPROVAL_STATE_COMPLETED,  # Approved
            const.APPROVAL_STATE_NONE,  # Rejected
        ],
        const.APPROVAL_STATE_COMPLETED: [],
    }

    ACTION_TARGETS: dict[str, str] = {
        APPROVAL_ACTION_SUBMIT: const.APPROVAL_STATE_PENDING,
        APPROVAL_ACTION_APPROVE: const.APPROVAL_STATE_COMPLETED,
        APPROVAL_ACTION_REJECT: const.APPROVAL_STATE_NONE,
        APPROVAL_ACTION_VERIFY: const.APPROVAL_STATE_COMPLETED,
    }

    # States each action may start from
    ACTION_SOURCES: dict[str, tuple[str, ...]] = {
        APPROVAL_ACTION_SUBMIT: (const.APPROVAL_STATE_NONE,),
        APPROVAL_ACTION_APPROVE: (const.APPROVAL_STATE_PENDING,),
        APPROVAL_ACTION_REJECT: (const.APPROVAL_STATE_PENDING,),
        APPROVAL_ACTION_VERIFY: (
            const.APPROVAL_STATE_NONE,
            const.APPROVAL_STATE_PENDING,
        ),
    }

    @staticmethod
    def can_transition(current_state: str, target_state: str) -> bool:
        """Check if a state transition is allowed."""
        return target_state in ApprovalEngine.VALID_TRANSITIONS.get(current_state, [])

    @staticmethod
    def get_state(pending: PendingApprovalsData, child_id: str, task_id: str) -> str:
        """Return PENDING when the pair awaits a parent, NONE otherwise."""
        if ApprovalEngine.is_pending(pending, child_id, task_id):
            return const.APPROVAL_STATE_PENDING
        return const.APPROVAL_STATE_NONE

    @staticmethod
    def can_apply(
        pending: PendingApprovalsData, child_id: str, task_id: str, action: str
    ) -> bool:
        """Return True when ``action`` is a legal transition for the pair.

        Approve and reject only act on a pending pair; instant verification
        is the only way from NONE straight to COMPLETED.
        """
        target = ApprovalEngine.ACTION_TARGETS.get(action)
        if target is None:
            return False
        current = ApprovalEngine.get_state(pending, child_id, task_id)
        if current not in ApprovalEngine.ACTION_SOURCES.get(action, ()):
            return False
        return ApprovalEngine.can_transition(current, target)

    # =========================================================================
    # Pending Set Operations
    # =========================================================================

    @staticmethod
    def is_pending(pending: PendingApprovalsData, child_id: str, task_id: str) -> bool:
        """Membership test for the pending set."""
        return task_id in pending.get(child_id, [])

    @staticmethod
    def add_pending(
        pending: PendingApprovalsData, child_id: str, task_id: str
    ) -> bool:
        """Add the pair to the pending set in place.

        Returns:
            True if the set changed, False when the pair was already pending.
        """
        child_pending = pending.setdefault(child_id, [])
        if task_id in child_pending:
            return False
        child_pending.append(task_id)
        return True

    @staticmethod
    def remove_pending(
        pending: PendingApprovalsData, child_id: str, task_id: str
    ) -> bool:
        """Remove every occurrence of the pair from the pending set in place.

        Returns:
            True if the set changed.
        """
        child_pending = pending.get(child_id)
        if not child_pending or task_id not in child_pending:
            return False
        pending[child_id] = [item for item in child_pending if item != task_id]
        return True

    @staticmethod
    def count_pending(pending: PendingApprovalsData) -> int:
        """Total number of pairs awaiting a parent."""
        return sum(len(task_ids) for task_ids in pending.values())
