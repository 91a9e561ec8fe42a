# File: coordinator.py
"""Coordinator for the KidsTasks integration.

Owns the record store, the remote client and the managers for one config
entry. The coordinator does not poll: its data is a snapshot of the store,
republished to listeners every time the store announces a change.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.core import callback
from homeassistant.helpers.dispatcher import async_dispatcher_connect
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from . import const
from .managers import ApprovalManager, LedgerManager, ResetManager, SyncManager
from .remote_client import KidsTasksRemoteClient
from .store import KidsTasksStore
from .utils import dt_utils

if TYPE_CHECKING:
    from zoneinfo import ZoneInfo

    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant


class KidsTasksDataCoordinator(DataUpdateCoordinator[dict[str, str]]):
    """Coordinator for KidsTasks integration.

    Data: ``{record_key: raw_string}`` snapshot of the store.
    """

    config_entry: ConfigEntry

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        store: KidsTasksStore | None = None,
    ) -> None:
        """Initialize the KidsTasksDataCoordinator."""
        super().__init__(
            hass,
            const.LOGGER,
            config_entry=config_entry,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=None,
        )
        self.store = store or KidsTasksStore(hass, config_entry.entry_id)

        self.time_zone: ZoneInfo = (
            dt_utils.get_timezone(config_entry.data.get(const.CONF_TIME_ZONE))
            or dt_utils.get_default_timezone()
        )

        server_url = (config_entry.data.get(const.CONF_SERVER_URL) or "").strip()
        self.remote: KidsTasksRemoteClient | None = (
            KidsTasksRemoteClient(hass, server_url) if server_url else None
        )
        self.store.attach_remote(self.remote)

        # Managers (sync before reset: startup resets must see server data)
        self.ledger_manager = LedgerManager(hass, self)
        self.approval_manager = ApprovalManager(hass, self)
        self.sync_manager = SyncManager(
            hass,
            self,
            self.remote,
            config_entry.data.get(const.CONF_SYNC_INTERVAL, const.DEFAULT_SYNC_INTERVAL),
        )
        self.reset_manager = ResetManager(hass, self)

    async def async_initialize(self) -> None:
        """Load records, start managers and publish the first snapshot."""
        await self.store.async_initialize()

        self.config_entry.async_on_unload(
            async_dispatcher_connect(self.hass, self.store.signal, self._on_store_changed)
        )

        await self.ledger_manager.async_setup()
        await self.approval_manager.async_setup()
        await self.sync_manager.async_setup()
        await self.reset_manager.async_setup()

        self.async_set_updated_data(self.store.snapshot())

    async def _async_update_data(self) -> dict[str, str]:
        """Return the current store snapshot (manual refresh only)."""
        return self.store.snapshot()

    @callback
    def _on_store_changed(self) -> None:
        self.async_set_updated_data(self.store.snapshot())

    async def async_shutdown(self) -> None:
        """Flush pending writes before the entry goes away."""
        await self.store.async_save()
        await super().async_shutdown()
