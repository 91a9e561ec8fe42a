# File: managers/sync_manager.py
"""Sync Manager - Periodic merge with the shared server file.

Every tick fetches the server's full record mapping and, for each known key:
- server has a non-empty value that differs from local: overwrite local
  (without pushing it back) and mark the key as changed
- server lacks the key (or holds an empty value) and local has one: push local

Changed keys produce one change notification and a SIGNAL_SUFFIX_REMOTE_SYNCED
event (the reset manager re-checks boundaries on it).

At most one sync runs at a time. A tick that finds a sync in flight is
skipped, not queued. Network failures are logged by the client and leave
local state untouched.

Signals Emitted:
- SIGNAL_SUFFIX_REMOTE_SYNCED: payload ``keys`` lists overwritten record keys
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING

from homeassistant.core import callback
from homeassistant.helpers.event import async_track_time_interval

from .. import const
from .base_manager import BaseManager

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from homeassistant.core import HomeAssistant

    from ..coordinator import KidsTasksDataCoordinator
    from ..remote_client import KidsTasksRemoteClient


@dataclass
class SyncSession:
    """Per-instance sync bookkeeping.

    Created with the coordinator and reset when the connection is re-established.
    """

    in_progress: bool = False
    completed_syncs: int = 0
    skipped_ticks: int = 0
    last_changed_keys: tuple[str, ...] = ()

    def begin(self) -> bool:
        """Claim the session. Returns False when a sync is already running."""
        if self.in_progress:
            self.skipped_ticks += 1
            return False
        self.in_progress = True
        return True

    def end(self, changed_keys: list[str] | None = None) -> None:
        """Release the session."""
        self.in_progress = False
        if changed_keys is not None:
            self.completed_syncs += 1
            self.last_changed_keys = tuple(changed_keys)

    def reset(self) -> None:
        """Forget the counters.

        ``in_progress`` is left alone: a cycle still awaiting the server
        releases it itself.
        """
        self.completed_syncs = 0
        self.skipped_ticks = 0
        self.last_changed_keys = ()


class SyncManager(BaseManager):
    """Manager for the remote merge procedure and its periodic tick."""

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: KidsTasksDataCoordinator,
        remote: KidsTasksRemoteClient | None,
        sync_interval: int = const.DEFAULT_SYNC_INTERVAL,
    ) -> None:
        """Initialize the sync manager.

        Args:
            hass: Home Assistant instance
            coordinator: Parent coordinator
            remote: Remote client, None when remote sync is disabled
            sync_interval: Seconds between sync ticks
        """
        super().__init__(hass, coordinator)
        self.remote = remote
        self.session = SyncSession()
        self._idle = asyncio.Event()
        self._idle.set()
        self._sync_interval = timedelta(seconds=max(sync_interval, const.MIN_SYNC_INTERVAL))
        self._unsub_timer: Callable[[], None] | None = None

    @property
    def enabled(self) -> bool:
        """True when a server URL is configured."""
        return self.remote is not None

    async def async_setup(self) -> None:
        """Run the initial sync and start polling."""
        if not self.enabled:
            const.LOGGER.debug("SyncManager: No server configured, running local-only")
            return

        await self.async_sync()
        self._start_timer()
        self.coordinator.config_entry.async_on_unload(self._stop_timer)

        const.LOGGER.debug(
            "SyncManager initialized: polling %s every %s",
            self.remote.url if self.remote else None,
            self._sync_interval,
        )

    def _start_timer(self) -> None:
        self._stop_timer()
        self._unsub_timer = async_track_time_interval(
            self.hass,
            self._on_sync_tick,
            self._sync_interval,
            name=f"{const.DOMAIN}_remote_sync",
        )

    @callback
    def _stop_timer(self) -> None:
        if self._unsub_timer is not None:
            self._unsub_timer()
            self._unsub_timer = None

    async def _on_sync_tick(self, _: datetime) -> None:
        await self.async_sync()

    # =========================================================================
    # Sync procedure
    # =========================================================================

    async def async_sync(self) -> list[str]:
        """Merge the server copy into local state.

        Returns:
            Record keys overwritten from the server (empty when nothing
            changed, the sync was skipped, or the server was unreachable).
        """
        if self.remote is None:
            return []

        if not self.session.begin():
            const.LOGGER.debug("Sync already in progress, skipping tick")
            return []

        self._idle.clear()
        changed: list[str] | None = None
        try:
            server_data = await self.remote.async_fetch()
            if server_data is None:
                return []

            changed = []
            to_push: dict[str, str] = {}
            for key in const.RECORD_KEYS:
                server_value = server_data.get(key)
                local_value = self.store.get_raw(key)
                if server_value:
                    if server_value != local_value:
                        self.store.set_raw(key, server_value, push=False)
                        changed.append(key)
                elif local_value:
                    to_push[key] = local_value

            if to_push:
                const.LOGGER.info("Migrating local records to server: %s", list(to_push))
                await self.remote.async_push(to_push)

            if changed:
                const.LOGGER.info("Updated local records from server: %s", changed)
                self.notify()
                self.emit(const.SIGNAL_SUFFIX_REMOTE_SYNCED, keys=changed)
            else:
                const.LOGGER.debug("Data sync complete, no remote changes")
            return changed
        finally:
            self.session.end(changed)
            self._idle.set()

    async def async_reconnect(self) -> list[str]:
        """Reset the session, restart polling and sync immediately.

        A cycle already in flight is awaited first, so two cycles never
        overlap.
        """
        const.LOGGER.info("Re-establishing remote sync session")
        self.session.reset()
        if not self.enabled:
            return []
        self._start_timer()
        await self._idle.wait()
        return await self.async_sync()
