# File: managers/approval_manager.py
"""Approval Manager - Parent approval workflow and the parent password.

Tasks flagged ``requiresApproval`` are either submitted by the child and
later approved/rejected by a parent, or verified on the spot with the parent
PIN. Approval and instant verification reach the same end state: one ledger
completion plus one weekly-stat increment, written together and announced
with a single notification.
"""

from __future__ import annotations

import hmac
from typing import TYPE_CHECKING

from homeassistant.core import callback

from .. import const
from ..engines.approval_engine import (
    APPROVAL_ACTION_APPROVE,
    APPROVAL_ACTION_REJECT,
    APPROVAL_ACTION_SUBMIT,
    ApprovalEngine,
)
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import KidsTasksDataCoordinator
    from ..type_defs import PendingApprovalsData


class InvalidParentPinError(Exception):
    """The supplied parent PIN did not match. Retry is allowed."""


class ParentPasswordTooShortError(ValueError):
    """A new parent password is shorter than the minimum length."""


class ApprovalManager(BaseManager):
    """Manager for pending approvals and parent verification."""

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: KidsTasksDataCoordinator,
    ) -> None:
        """Initialize the approval manager."""
        super().__init__(hass, coordinator)

    async def async_setup(self) -> None:
        """Nothing to subscribe to; approvals only react to service calls."""
        const.LOGGER.debug("ApprovalManager: Ready for entry %s", self.entry_id)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_pending(self) -> PendingApprovalsData:
        """Fresh copy of the pending approvals mapping."""
        return self.store.get_json(const.RECORD_PENDING_APPROVALS, {})

    def is_task_pending(self, child_id: str, task_id: str) -> bool:
        """Return True when the pair awaits a parent."""
        return ApprovalEngine.is_pending(self.get_pending(), child_id, task_id)

    # =========================================================================
    # Workflow
    # =========================================================================

    @callback
    def submit_task_for_approval(self, child_id: str, task_id: str) -> bool:
        """Mark a task as waiting for a parent.

        Idempotent: a second submission of the same pair changes nothing.

        Returns:
            True if the pair became pending.
        """
        pending = self.get_pending()
        if not ApprovalEngine.can_apply(pending, child_id, task_id, APPROVAL_ACTION_SUBMIT):
            const.LOGGER.debug(
                "Task '%s' already pending for child '%s'", task_id, child_id
            )
            return False

        ApprovalEngine.add_pending(pending, child_id, task_id)
        self.store.set_json(const.RECORD_PENDING_APPROVALS, pending)
        const.LOGGER.debug("Task '%s' submitted for approval by child '%s'", task_id, child_id)
        self.notify()
        return True

    @callback
    def approve_task(self, child_id: str, task_id: str) -> bool:
        """Approve a pending task.

        Removes the pair from pending, counts the completion in the weekly
        stats (when the task is known) and completes it in the ledger, then
        notifies once.

        Returns:
            True if the pair was pending and is now completed.
        """
        pending = self.get_pending()
        if not ApprovalEngine.can_apply(pending, child_id, task_id, APPROVAL_ACTION_APPROVE):
            const.LOGGER.debug(
                "Approve ignored: task '%s' not pending for child '%s'", task_id, child_id
            )
            return False

        ApprovalEngine.remove_pending(pending, child_id, task_id)
        self.store.set_json(const.RECORD_PENDING_APPROVALS, pending)

        ledger = self.coordinator.ledger_manager
        ledger.apply_weekly_stat(child_id, task_id)
        ledger.apply_completion(child_id, task_id)

        const.LOGGER.info("Approved task '%s' for child '%s'", task_id, child_id)
        self.notify()
        return True

    @callback
    def reject_task(self, child_id: str, task_id: str) -> bool:
        """Discard a pending task without crediting it.

        Returns:
            True if the pair was pending.
        """
        pending = self.get_pending()
        if not ApprovalEngine.can_apply(pending, child_id, task_id, APPROVAL_ACTION_REJECT):
            return False

        ApprovalEngine.remove_pending(pending, child_id, task_id)
        self.store.set_json(const.RECORD_PENDING_APPROVALS, pending)
        const.LOGGER.info("Rejected task '%s' for child '%s'", task_id, child_id)
        self.notify()
        return True

    @callback
    def verify_task_instantly(self, child_id: str, task_id: str, pin: str) -> None:
        """Complete an approval task on the spot with the parent PIN.

        The pair never visits PENDING; an existing pending entry is cleared.

        Raises:
            InvalidParentPinError: The PIN does not match. Nothing changes.
        """
        if not self.verify_parent_password(pin):
            const.LOGGER.warning(
                "Incorrect parent PIN for task '%s' (child '%s')", task_id, child_id
            )
            raise InvalidParentPinError(const.ERROR_INVALID_PIN)

        pending = self.get_pending()
        if ApprovalEngine.remove_pending(pending, child_id, task_id):
            self.store.set_json(const.RECORD_PENDING_APPROVALS, pending)

        ledger = self.coordinator.ledger_manager
        ledger.apply_completion(child_id, task_id)
        ledger.apply_weekly_stat(child_id, task_id)

        const.LOGGER.info("Parent verified task '%s' for child '%s'", task_id, child_id)
        self.notify()

    # =========================================================================
    # Parent password
    # =========================================================================

    def has_parent_password(self) -> bool:
        """Return True when a parent password has been set."""
        return bool(self.store.get_text(const.RECORD_PARENT_PASSWORD))

    def verify_parent_password(self, candidate: str | None) -> bool:
        """Compare ``candidate`` against the stored password.

        Until a password is set, any input is accepted.
        """
        stored = self.store.get_text(const.RECORD_PARENT_PASSWORD)
        if not stored:
            return True
        return hmac.compare_digest(stored.encode(), (candidate or "").encode())

    @callback
    def set_parent_password(self, password: str) -> None:
        """Store a new parent password.

        Raises:
            ParentPasswordTooShortError: Shorter than the minimum length.
        """
        if len(password) < const.MIN_PARENT_PASSWORD_LENGTH:
            raise ParentPasswordTooShortError(
                const.ERROR_PASSWORD_TOO_SHORT_FMT.format(const.MIN_PARENT_PASSWORD_LENGTH)
            )

        self.store.set_text(const.RECORD_PARENT_PASSWORD, password)
        const.LOGGER.info("Parent password updated")
        self.notify()
