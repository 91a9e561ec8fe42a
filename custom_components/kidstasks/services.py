# File: services.py
"""Defines custom services for the KidsTasks integration.

These services allow direct actions through scripts or automations.
Every child/parent interaction of the tracker is available here.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant.core import (
    HomeAssistant,
    ServiceCall,
    ServiceResponse,
    SupportsResponse,
)
from homeassistant.exceptions import HomeAssistantError, ServiceValidationError
from homeassistant.helpers import config_validation as cv

from . import const
from . import kt_helpers as kh
from .coordinator import KidsTasksDataCoordinator
from .managers import (
    DuplicateCatalogIdError,
    InvalidParentPinError,
    ParentPasswordTooShortError,
)

# --- Service Schemas ---
CHILD_TASK_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_CHILD_ID): cv.string,
        vol.Required(const.FIELD_TASK_ID): cv.string,
    }
)

VERIFY_TASK_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_CHILD_ID): cv.string,
        vol.Required(const.FIELD_TASK_ID): cv.string,
        vol.Required(const.FIELD_PIN): cv.string,
    }
)

REDEEM_REWARD_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_CHILD_ID): cv.string,
        vol.Required(const.FIELD_REWARD_ID): cv.string,
    }
)

SET_PARENT_PASSWORD_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_PASSWORD): cv.string,
    }
)

RESET_WEEKLY_STATS_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_WEEK_START): cv.date,
    }
)

SYNC_NOW_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_RECONNECT, default=False): cv.boolean,
    }
)

IMPORT_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_DATA): dict,
    }
)

CHILD_ITEM_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_ID): cv.string,
        vol.Required(const.DATA_NAME): cv.string,
        vol.Optional(const.DATA_CHILD_COLOR): cv.string,
        vol.Optional(const.DATA_CHILD_AVATAR): cv.string,
    },
    extra=vol.ALLOW_EXTRA,
)

TASK_ITEM_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_ID): cv.string,
        vol.Required(const.DATA_NAME): cv.string,
        vol.Required(const.DATA_TASK_POINTS): vol.All(vol.Coerce(int), vol.Range(min=0)),
        vol.Optional(const.DATA_EMOJI): cv.string,
        vol.Optional(const.DATA_DESCRIPTION): cv.string,
        vol.Optional(const.DATA_TASK_REQUIRES_APPROVAL, default=False): cv.boolean,
    },
    extra=vol.ALLOW_EXTRA,
)

REWARD_ITEM_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_ID): cv.string,
        vol.Required(const.DATA_NAME): cv.string,
        vol.Required(const.DATA_REWARD_COST): vol.All(vol.Coerce(int), vol.Range(min=0)),
        vol.Optional(const.DATA_EMOJI): cv.string,
        vol.Optional(const.DATA_DESCRIPTION): cv.string,
    },
    extra=vol.ALLOW_EXTRA,
)

SET_CHILDREN_SCHEMA = vol.Schema(
    {vol.Required(const.FIELD_CHILDREN): vol.All(cv.ensure_list, [CHILD_ITEM_SCHEMA])}
)

SET_TASKS_SCHEMA = vol.Schema(
    {vol.Required(const.FIELD_TASKS): vol.All(cv.ensure_list, [TASK_ITEM_SCHEMA])}
)

SET_REWARDS_SCHEMA = vol.Schema(
    {vol.Required(const.FIELD_REWARDS): vol.All(cv.ensure_list, [REWARD_ITEM_SCHEMA])}
)

# Service -> (field carrying the list, catalog record it replaces)
CATALOG_FIELDS: dict[str, tuple[str, str]] = {
    const.SERVICE_SET_CHILDREN: (const.FIELD_CHILDREN, const.RECORD_CHILDREN),
    const.SERVICE_SET_TASKS: (const.FIELD_TASKS, const.RECORD_TASKS),
    const.SERVICE_SET_REWARDS: (const.FIELD_REWARDS, const.RECORD_REWARDS),
}


def _get_coordinator(hass: HomeAssistant, service: str) -> KidsTasksDataCoordinator:
    """Return the coordinator of the (single) KidsTasks entry."""
    coordinator = kh.get_kidstasks_coordinator(hass)
    if coordinator is None:
        const.LOGGER.warning("%s: %s", service, const.ERROR_NO_ENTRY_FOUND)
        raise HomeAssistantError(const.ERROR_NO_ENTRY_FOUND)
    return coordinator


def async_setup_services(hass: HomeAssistant) -> None:
    """Register KidsTasks services."""

    async def handle_complete_task(call: ServiceCall) -> None:
        """Handle a child ticking off a task that needs no approval."""
        coordinator = _get_coordinator(hass, const.SERVICE_COMPLETE_TASK)
        child_id = call.data[const.FIELD_CHILD_ID]
        task_id = call.data[const.FIELD_TASK_ID]

        if coordinator.ledger_manager.record_completion(child_id, task_id) is None:
            raise ServiceValidationError(
                f"Task '{task_id}' needs a parent: use submit_for_approval or verify_task"
            )

    async def handle_undo_task(call: ServiceCall) -> None:
        """Handle undoing one completion."""
        coordinator = _get_coordinator(hass, const.SERVICE_UNDO_TASK)
        coordinator.ledger_manager.undo_completion(
            call.data[const.FIELD_CHILD_ID], call.data[const.FIELD_TASK_ID]
        )

    async def handle_submit_for_approval(call: ServiceCall) -> None:
        """Handle a child asking a parent to approve a task."""
        coordinator = _get_coordinator(hass, const.SERVICE_SUBMIT_FOR_APPROVAL)
        coordinator.approval_manager.submit_task_for_approval(
            call.data[const.FIELD_CHILD_ID], call.data[const.FIELD_TASK_ID]
        )

    async def handle_approve_task(call: ServiceCall) -> None:
        """Handle a parent approving a pending task."""
        coordinator = _get_coordinator(hass, const.SERVICE_APPROVE_TASK)
        coordinator.approval_manager.approve_task(
            call.data[const.FIELD_CHILD_ID], call.data[const.FIELD_TASK_ID]
        )

    async def handle_reject_task(call: ServiceCall) -> None:
        """Handle a parent rejecting a pending task."""
        coordinator = _get_coordinator(hass, const.SERVICE_REJECT_TASK)
        coordinator.approval_manager.reject_task(
            call.data[const.FIELD_CHILD_ID], call.data[const.FIELD_TASK_ID]
        )

    async def handle_verify_task(call: ServiceCall) -> None:
        """Handle a parent verifying a task on the spot with the PIN."""
        coordinator = _get_coordinator(hass, const.SERVICE_VERIFY_TASK)
        try:
            coordinator.approval_manager.verify_task_instantly(
                call.data[const.FIELD_CHILD_ID],
                call.data[const.FIELD_TASK_ID],
                call.data[const.FIELD_PIN],
            )
        except InvalidParentPinError as err:
            raise ServiceValidationError(str(err)) from err

    async def handle_redeem_reward(call: ServiceCall) -> None:
        """Handle a child spending points on a reward."""
        coordinator = _get_coordinator(hass, const.SERVICE_REDEEM_REWARD)
        child_id = call.data[const.FIELD_CHILD_ID]
        reward_id = call.data[const.FIELD_REWARD_ID]

        if coordinator.ledger_manager.redeem_reward(child_id, reward_id) is None:
            raise ServiceValidationError(
                const.ERROR_INSUFFICIENT_POINTS_FMT.format(reward_id, child_id)
            )

    async def handle_set_parent_password(call: ServiceCall) -> None:
        """Handle setting the parent password."""
        coordinator = _get_coordinator(hass, const.SERVICE_SET_PARENT_PASSWORD)
        try:
            coordinator.approval_manager.set_parent_password(call.data[const.FIELD_PASSWORD])
        except ParentPasswordTooShortError as err:
            raise ServiceValidationError(str(err)) from err

    async def handle_reset_daily_tasks(call: ServiceCall) -> None:
        """Handle a manual daily reset."""
        coordinator = _get_coordinator(hass, const.SERVICE_RESET_DAILY_TASKS)
        coordinator.reset_manager.reset_daily_tasks()

    async def handle_reset_weekly_stats(call: ServiceCall) -> None:
        """Handle a manual weekly rollover."""
        coordinator = _get_coordinator(hass, const.SERVICE_RESET_WEEKLY_STATS)
        week_start = call.data.get(const.FIELD_WEEK_START)
        coordinator.reset_manager.reset_weekly_stats(
            week_start.isoformat() if week_start else None
        )

    async def handle_sync_now(call: ServiceCall) -> None:
        """Handle an immediate sync, optionally re-establishing the session."""
        coordinator = _get_coordinator(hass, const.SERVICE_SYNC_NOW)
        if call.data[const.FIELD_RECONNECT]:
            await coordinator.sync_manager.async_reconnect()
        else:
            await coordinator.sync_manager.async_sync()

    async def handle_export_data(call: ServiceCall) -> ServiceResponse:
        """Handle exporting a backup of catalogs and the ledger."""
        coordinator = _get_coordinator(hass, const.SERVICE_EXPORT_DATA)
        return coordinator.store.export_data()

    async def handle_import_data(call: ServiceCall) -> None:
        """Handle restoring a backup."""
        coordinator = _get_coordinator(hass, const.SERVICE_IMPORT_DATA)
        data: dict[str, Any] = call.data[const.FIELD_DATA]
        written = coordinator.store.import_data(data)
        if not written:
            raise ServiceValidationError("Backup contains no known sections")

    async def handle_set_catalog(call: ServiceCall) -> None:
        """Handle a parent replacing the children, tasks or rewards catalog."""
        coordinator = _get_coordinator(hass, call.service)
        field, record_key = CATALOG_FIELDS[call.service]
        try:
            coordinator.ledger_manager.set_catalog(record_key, call.data[field])
        except DuplicateCatalogIdError as err:
            raise ServiceValidationError(str(err)) from err

    # --- Register Services ---
    registrations = [
        (const.SERVICE_COMPLETE_TASK, handle_complete_task, CHILD_TASK_SCHEMA),
        (const.SERVICE_UNDO_TASK, handle_undo_task, CHILD_TASK_SCHEMA),
        (const.SERVICE_SUBMIT_FOR_APPROVAL, handle_submit_for_approval, CHILD_TASK_SCHEMA),
        (const.SERVICE_APPROVE_TASK, handle_approve_task, CHILD_TASK_SCHEMA),
        (const.SERVICE_REJECT_TASK, handle_reject_task, CHILD_TASK_SCHEMA),
        (const.SERVICE_VERIFY_TASK, handle_verify_task, VERIFY_TASK_SCHEMA),
        (const.SERVICE_REDEEM_REWARD, handle_redeem_reward, REDEEM_REWARD_SCHEMA),
        (const.SERVICE_SET_PARENT_PASSWORD, handle_set_parent_password, SET_PARENT_PASSWORD_SCHEMA),
        (const.SERVICE_RESET_DAILY_TASKS, handle_reset_daily_tasks, vol.Schema({})),
        (const.SERVICE_RESET_WEEKLY_STATS, handle_reset_weekly_stats, RESET_WEEKLY_STATS_SCHEMA),
        (const.SERVICE_SYNC_NOW, handle_sync_now, SYNC_NOW_SCHEMA),
        (const.SERVICE_IMPORT_DATA, handle_import_data, IMPORT_DATA_SCHEMA),
        (const.SERVICE_SET_CHILDREN, handle_set_catalog, SET_CHILDREN_SCHEMA),
        (const.SERVICE_SET_TASKS, handle_set_catalog, SET_TASKS_SCHEMA),
        (const.SERVICE_SET_REWARDS, handle_set_catalog, SET_REWARDS_SCHEMA),
    ]
    for service, handler, schema in registrations:
        hass.services.async_register(const.DOMAIN, service, handler, schema=schema)

    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_EXPORT_DATA,
        handle_export_data,
        schema=vol.Schema({}),
        supports_response=SupportsResponse.ONLY,
    )

    const.LOGGER.debug("KidsTasks services have been registered successfully")


async def async_unload_services(hass: HomeAssistant) -> None:
    """Unregister KidsTasks services when unloading the integration."""
    services = [
        const.SERVICE_COMPLETE_TASK,
        const.SERVICE_UNDO_TASK,
        const.SERVICE_SUBMIT_FOR_APPROVAL,
        const.SERVICE_APPROVE_TASK,
        const.SERVICE_REJECT_TASK,
        const.SERVICE_VERIFY_TASK,
        const.SERVICE_REDEEM_REWARD,
        const.SERVICE_SET_PARENT_PASSWORD,
        const.SERVICE_RESET_DAILY_TASKS,
        const.SERVICE_RESET_WEEKLY_STATS,
        const.SERVICE_SYNC_NOW,
        const.SERVICE_EXPORT_DATA,
        const.SERVICE_IMPORT_DATA,
        const.SERVICE_SET_CHILDREN,
        const.SERVICE_SET_TASKS,
        const.SERVICE_SET_REWARDS,
    ]

    for service in services:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.debug("KidsTasks services have been unregistered")
