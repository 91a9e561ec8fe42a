"""Base manager class for KidsTasks managers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.dispatcher import (
    async_dispatcher_connect,
    async_dispatcher_send,
)

from .. import const
from ..kt_helpers import get_event_signal

if TYPE_CHECKING:
    from collections.abc import Callable

    from homeassistant.core import HomeAssistant

    from ..coordinator import KidsTasksDataCoordinator
    from ..store import KidsTasksStore


class BaseManager(ABC):
    """Base class for all KidsTasks managers with scoped event support.

    Provides:
    - Store access (every record read/write goes through the coordinator's store)
    - Payload-less change notification (notify)
    - Instance-scoped event emitting (emit) and listening (listen)
    - Automatic cleanup via coordinator's config_entry.async_on_unload

    Data Persistence:
    - Write records through self.store (set_json / set_text); persistence is
      scheduled by the store
    - Call self.notify() exactly once per logical operation, after every
      record it touches has been written

    Subclasses must implement:
    - async_setup(): Subscribe to events, start timers
    """

    def __init__(
        self, hass: HomeAssistant, coordinator: KidsTasksDataCoordinator
    ) -> None:
        """Initialize manager.

        Args:
            hass: Home Assistant instance
            coordinator: Parent coordinator managing this integration instance
        """
        self.hass = hass
        self.coordinator = coordinator
        self.entry_id = coordinator.config_entry.entry_id

    @property
    def store(self) -> KidsTasksStore:
        """Record store shared by every manager of this instance."""
        return self.coordinator.store

    def notify(self) -> None:
        """Tell presentation layers that state changed."""
        self.store.async_notify_changed()

    def emit(self, suffix: str, **payload: Any) -> None:
        """Emit instance-scoped event to other managers.

        Args:
            suffix: Signal suffix constant (e.g., const.SIGNAL_SUFFIX_REMOTE_SYNCED)
            **payload: Event data dict passed to listeners

        Example:
            self.emit(const.SIGNAL_SUFFIX_REMOTE_SYNCED, keys=["kidsTaskTracker_tasks"])
        """
        signal = get_event_signal(self.entry_id, suffix)
        const.LOGGER.debug(
            "Emitting event '%s' for instance %s with payload keys: %s",
            suffix,
            self.entry_id,
            list(payload.keys()),
        )
        # Pass payload as single dict argument (dispatcher only supports *args)
        async_dispatcher_send(self.hass, signal, payload)

    def listen(self, suffix: str, callback: Callable[..., Any]) -> None:
        """Subscribe to instance-scoped event with automatic cleanup.

        The subscription is automatically cleaned up when the config entry is unloaded.

        Args:
            suffix: Signal suffix constant to listen for
            callback: Function called when event fires (receives payload dict as arg)
        """
        signal = get_event_signal(self.entry_id, suffix)
        unsub = async_dispatcher_connect(self.hass, signal, callback)
        self.coordinator.config_entry.async_on_unload(unsub)
        const.LOGGER.debug(
            "Manager %s listening to event '%s' for instance %s",
            self.__class__.__name__,
            suffix,
            self.entry_id,
        )

    @abstractmethod
    async def async_setup(self) -> None:
        """Set up the manager (subscribe to events, start timers).

        Called once during coordinator initialization.
        """
