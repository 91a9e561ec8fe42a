# File: __init__.py
"""Initialization file for the KidsTasks integration.

Handles setting up the integration, including loading configuration entries,
initializing data storage, and preparing the coordinator for data handling.

Key Features:
- Config entry setup and unload support.
- Coordinator initialization (store, remote sync, reset timers).
- Service registration.
"""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from . import const
from .coordinator import KidsTasksDataCoordinator
from .services import async_setup_services, async_unload_services
from .utils import dt_utils


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info("Starting setup for KidsTasks entry: %s", entry.entry_id)

    coordinator = KidsTasksDataCoordinator(hass, entry)

    # Boundary math everywhere uses the configured civil timezone
    dt_utils.set_default_timezone(coordinator.time_zone)

    await coordinator.async_initialize()

    hass.data.setdefault(const.DOMAIN, {})[entry.entry_id] = {
        const.COORDINATOR: coordinator,
    }

    async_setup_services(hass)

    await hass.config_entries.async_forward_entry_setups(entry, const.PLATFORMS)

    const.LOGGER.info("KidsTasks setup complete for entry: %s", entry.entry_id)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    const.LOGGER.info("Unloading KidsTasks entry: %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, const.PLATFORMS)

    if unload_ok:
        data = hass.data[const.DOMAIN].pop(entry.entry_id)
        coordinator: KidsTasksDataCoordinator = data[const.COORDINATOR]
        await coordinator.async_shutdown()

        if not hass.data[const.DOMAIN]:
            await async_unload_services(hass)

    return unload_ok
