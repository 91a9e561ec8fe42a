"""Tests for ApprovalManager - submit/approve/reject, PIN verification, password."""

from __future__ import annotations

import pytest
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.dispatcher import async_dispatcher_connect

from custom_components.kidstasks import const
from custom_components.kidstasks.coordinator import KidsTasksDataCoordinator
from custom_components.kidstasks.engines.statistics_engine import StatisticsEngine
from custom_components.kidstasks.managers import (
    InvalidParentPinError,
    ParentPasswordTooShortError,
)


def _weekly_totals(coordinator: KidsTasksDataCoordinator, child_id: str) -> tuple[int, int]:
    return StatisticsEngine.get_child_totals(
        coordinator.reset_manager.get_weekly_stats(), child_id
    )


# =============================================================================
# Submit / approve / reject
# =============================================================================


async def test_duplicate_submission_is_idempotent(
    hass: HomeAssistant, coordinator: KidsTasksDataCoordinator
) -> None:
    """Submitting twice leaves one pending entry."""
    approvals = coordinator.approval_manager

    assert approvals.submit_task_for_approval("c1", "violin") is True
    assert approvals.submit_task_for_approval("c1", "violin") is False

    assert approvals.get_pending() == {"c1": ["violin"]}
    assert approvals.is_task_pending("c1", "violin")
    assert not approvals.is_task_pending("c2", "violin")


async def test_approve_applies_all_effects_with_one_notification(
    hass: HomeAssistant, coordinator: KidsTasksDataCoordinator
) -> None:
    """Approval clears pending, counts stats and completes the task together."""
    approvals = coordinator.approval_manager
    approvals.submit_task_for_approval("c1", "violin")

    calls: list[int] = []

    @callback
    def _on_change() -> None:
        calls.append(1)

    coordinator.config_entry.async_on_unload(
        async_dispatcher_connect(hass, coordinator.store.signal, _on_change)
    )

    assert approvals.approve_task("c1", "violin") is True

    assert calls == [1]
    assert not approvals.is_task_pending("c1", "violin")
    assert coordinator.ledger_manager.get_balance("c1") == 20
    assert _weekly_totals(coordinator, "c1") == (1, 20)


async def test_approve_not_pending_is_noop(
    hass: HomeAssistant, coordinator: KidsTasksDataCoordinator
) -> None:
    """Approving something never submitted changes nothing."""
    assert coordinator.approval_manager.approve_task("c1", "violin") is False
    assert coordinator.ledger_manager.get_completions() == {}


async def test_approve_twice_credits_once(
    hass: HomeAssistant, coordinator: KidsTasksDataCoordinator
) -> None:
    """A second approval, or one without submission, credits nothing."""
    approvals = coordinator.approval_manager
    approvals.submit_task_for_approval("c1", "violin")

    assert approvals.approve_task("c1", "violin") is True
    assert approvals.approve_task("c1", "violin") is False
    assert approvals.approve_task("c2", "violin") is False

    assert coordinator.ledger_manager.get_completions() == {"c1": {"violin": 1}}
    assert coordinator.ledger_manager.get_balances() == {"c1": 20, "c2": 0}
    assert _weekly_totals(coordinator, "c1") == (1, 20)
    assert _weekly_totals(coordinator, "c2") == (0, 0)


async def test_approve_unknown_task_skips_stats(
    hass: HomeAssistant, coordinator: KidsTasksDataCoordinator
) -> None:
    """A task removed from the catalog still completes, but adds no stats."""
    approvals = coordinator.approval_manager
    approvals.submit_task_for_approval("c1", "gone")

    assert approvals.approve_task("c1", "gone") is True
    assert coordinator.ledger_manager.get_completions() == {"c1": {"gone": 1}}
    assert _weekly_totals(coordinator, "c1") == (0, 0)


async def test_reject_has_no_ledger_or_stats_effect(
    hass: HomeAssistant, coordinator: KidsTasksDataCoordinator
) -> None:
    """Rejection only clears the pending entry."""
    approvals = coordinator.approval_manager
    approvals.submit_task_for_approval("c1", "violin")

    assert approvals.reject_task("c1", "violin") is True
    assert approvals.reject_task("c1", "violin") is False

    assert approvals.get_pending() == {"c1": []}
    assert coordinator.ledger_manager.get_completions() == {}
    assert _weekly_totals(coordinator, "c1") == (0, 0)


# =============================================================================
# Instant verification
# =============================================================================


async def test_verify_with_correct_pin(
    hass: HomeAssistant, coordinator: KidsTasksDataCoordinator
) -> None:
    """Correct PIN completes the task without visiting pending."""
    approvals = coordinator.approval_manager
    approvals.set_parent_password("1234")

    approvals.verify_task_instantly("c1", "violin", "1234")

    assert coordinator.ledger_manager.get_balance("c1") == 20
    assert _weekly_totals(coordinator, "c1") == (1, 20)
    assert approvals.get_pending() == {}


async def test_verify_wrong_pin_raises_and_changes_nothing(
    hass: HomeAssistant, coordinator: KidsTasksDataCoordinator
) -> None:
    """Wrong PIN is retryable and has no effect."""
    approvals = coordinator.approval_manager
    approvals.set_parent_password("1234")

    with pytest.raises(InvalidParentPinError):
        approvals.verify_task_instantly("c1", "violin", "0000")

    assert coordinator.ledger_manager.get_completions() == {}

    # Retry with the right PIN still works
    approvals.verify_task_instantly("c1", "violin", "1234")
    assert coordinator.ledger_manager.get_balance("c1") == 20


async def test_verify_clears_pending_entry(
    hass: HomeAssistant, coordinator: KidsTasksDataCoordinator
) -> None:
    """Verifying a pending task also resolves its approval."""
    approvals = coordinator.approval_manager
    approvals.submit_task_for_approval("c1", "violin")

    approvals.verify_task_instantly("c1", "violin", "anything")

    assert not approvals.is_task_pending("c1", "violin")
    assert coordinator.ledger_manager.get_balance("c1") == 20


# =============================================================================
# Parent password
# =============================================================================


async def test_password_accepts_anything_until_set(
    hass: HomeAssistant, coordinator: KidsTasksDataCoordinator
) -> None:
    """No stored password means verification always passes."""
    approvals = coordinator.approval_manager
    assert approvals.has_parent_password() is False
    assert approvals.verify_parent_password("") is True

    approvals.set_parent_password("secret")

    assert approvals.has_parent_password() is True
    assert approvals.verify_parent_password("secret") is True
    assert approvals.verify_parent_password("Secret") is False
    assert coordinator.store.get_raw(const.RECORD_PARENT_PASSWORD) == "secret"


async def test_password_minimum_length(
    hass: HomeAssistant, coordinator: KidsTasksDataCoordinator
) -> None:
    """Short passwords are refused."""
    with pytest.raises(ParentPasswordTooShortError):
        coordinator.approval_manager.set_parent_password("123")
    assert coordinator.approval_manager.has_parent_password() is False
