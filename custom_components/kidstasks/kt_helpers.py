# File: kt_helpers.py
"""KidsTasks helper functions and shared logic."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from . import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from .coordinator import KidsTasksDataCoordinator  # Used for type checking only


def get_event_signal(entry_id: str, suffix: str) -> str:
    """Build instance-scoped event signal name for dispatcher.

    Format: 'kidstasks_{entry_id}_{suffix}'

    Example:
        >>> get_event_signal("abc123", const.SIGNAL_SUFFIX_DATA_UPDATED)
        'kidstasks_abc123_data_updated'
    """
    return f"{const.DOMAIN}_{entry_id}_{suffix}"


# -------- Get Coordinator --------
def get_first_kidstasks_entry(hass: HomeAssistant) -> Optional[str]:
    """Retrieve the first KidsTasks config entry ID."""
    domain_entries = hass.data.get(const.DOMAIN)
    if not domain_entries:
        return None
    return next(iter(domain_entries.keys()), None)


def get_kidstasks_coordinator(
    hass: HomeAssistant,
) -> Optional[KidsTasksDataCoordinator]:
    """Retrieve KidsTasks coordinator from hass.data."""
    entry_id = get_first_kidstasks_entry(hass)
    if not entry_id:
        return None

    data = hass.data[const.DOMAIN].get(entry_id)
    if not data or const.COORDINATOR not in data:
        return None

    return data[const.COORDINATOR]
