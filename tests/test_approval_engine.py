"""Unit tests for ApprovalEngine - pending approval state machine."""

from __future__ import annotations

from custom_components.kidstasks import const
from custom_components.kidstasks.engines.approval_engine import (
    APPROVAL_ACTION_APPROVE,
    APPROVAL_ACTION_REJECT,
    APPROVAL_ACTION_SUBMIT,
    APPROVAL_ACTION_VERIFY,
    ApprovalEngine,
)


class TestTransitions:
    """Tests for the transition matrix."""

    def test_valid_transitions(self) -> None:
        """Only the documented edges are allowed."""
        none = const.APPROVAL_STATE_NONE
        pending = const.APPROVAL_STATE_PENDING
        completed = const.APPROVAL_STATE_COMPLETED

        assert ApprovalEngine.can_transition(none, pending)
        assert ApprovalEngine.can_transition(none, completed)
        assert ApprovalEngine.can_transition(pending, completed)
        assert ApprovalEngine.can_transition(pending, none)
        assert not ApprovalEngine.can_transition(pending, pending)
        assert not ApprovalEngine.can_transition(completed, none)

    def test_actions_depend_on_state(self) -> None:
        """Approve/reject need a pending pair, submit needs a fresh one."""
        pending: dict[str, list[str]] = {}

        assert ApprovalEngine.can_apply(pending, "c1", "t1", APPROVAL_ACTION_SUBMIT)
        assert ApprovalEngine.can_apply(pending, "c1", "t1", APPROVAL_ACTION_VERIFY)
        assert not ApprovalEngine.can_apply(pending, "c1", "t1", APPROVAL_ACTION_APPROVE)
        assert not ApprovalEngine.can_apply(pending, "c1", "t1", APPROVAL_ACTION_REJECT)

        ApprovalEngine.add_pending(pending, "c1", "t1")

        assert not ApprovalEngine.can_apply(pending, "c1", "t1", APPROVAL_ACTION_SUBMIT)
        assert ApprovalEngine.can_apply(pending, "c1", "t1", APPROVAL_ACTION_APPROVE)
        assert ApprovalEngine.can_apply(pending, "c1", "t1", APPROVAL_ACTION_REJECT)
        assert ApprovalEngine.can_apply(pending, "c1", "t1", APPROVAL_ACTION_VERIFY)

    def test_approve_needs_pending_even_though_verify_does_not(self) -> None:
        """NONE to COMPLETED is open to verification only."""
        pending: dict[str, list[str]] = {"c1": ["t1"]}

        assert not ApprovalEngine.can_apply(pending, "c2", "t1", APPROVAL_ACTION_APPROVE)
        assert ApprovalEngine.can_apply(pending, "c2", "t1", APPROVAL_ACTION_VERIFY)

        ApprovalEngine.remove_pending(pending, "c1", "t1")
        assert not ApprovalEngine.can_apply(pending, "c1", "t1", APPROVAL_ACTION_APPROVE)

    def test_unknown_action(self) -> None:
        """Unknown actions are never applicable."""
        assert not ApprovalEngine.can_apply({}, "c1", "t1", "teleport")


class TestPendingSet:
    """Tests for set semantics of the pending mapping."""

    def test_add_is_idempotent(self) -> None:
        """Adding twice keeps one entry."""
        pending: dict[str, list[str]] = {}
        assert ApprovalEngine.add_pending(pending, "c1", "t1") is True
        assert ApprovalEngine.add_pending(pending, "c1", "t1") is False
        assert pending == {"c1": ["t1"]}

    def test_remove(self) -> None:
        """Removing clears only the named pair."""
        pending = {"c1": ["t1", "t2"], "c2": ["t1"]}
        assert ApprovalEngine.remove_pending(pending, "c1", "t1") is True
        assert ApprovalEngine.remove_pending(pending, "c1", "t1") is False
        assert pending == {"c1": ["t2"], "c2": ["t1"]}

    def test_state_and_count(self) -> None:
        """State reflects membership and count spans children."""
        pending = {"c1": ["t1", "t2"], "c2": ["t1"]}
        assert ApprovalEngine.get_state(pending, "c1", "t2") == const.APPROVAL_STATE_PENDING
        assert ApprovalEngine.get_state(pending, "c2", "t2") == const.APPROVAL_STATE_NONE
        assert ApprovalEngine.count_pending(pending) == 3
