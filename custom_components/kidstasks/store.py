# File: store.py
"""Handles persistent data storage for the KidsTasks integration.

Uses Home Assistant's Storage helper as the durable medium for a flat
key-value record space (string keys, string values). Structured records hold
JSON documents; markers and the parent password are plain strings. This keeps
every record byte-compatible with the shared server file.

The store has no business-logic opinions. Managers read a record, apply their
delta and write it back, then call ``async_notify_changed`` once per logical
operation. Writes are mirrored to the remote copy when a client is attached.
"""

from __future__ import annotations

import copy
import json
from typing import TYPE_CHECKING, Any

from homeassistant.core import callback
from homeassistant.helpers.dispatcher import async_dispatcher_send
from homeassistant.helpers.storage import Store

from . import const
from .kt_helpers import get_event_signal

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from .remote_client import KidsTasksRemoteClient


class KidsTasksStore:
    """Key-value record storage with change notification.

    Thin wrapper around Home Assistant's Store API. The in-memory cache is the
    source of truth while running; persistence is scheduled with a short delay
    so a burst of writes from one operation lands in a single save.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        entry_id: str,
        storage_key: str = const.STORAGE_KEY,
    ) -> None:
        """Initialize the store.

        Args:
            hass: Home Assistant core object.
            entry_id: Config entry id, scopes the change notification signal.
            storage_key: Key to identify storage location (default: const.STORAGE_KEY).
        """
        self.hass = hass
        self.entry_id = entry_id
        self._store: Store[dict[str, str]] = Store(hass, const.STORAGE_VERSION, storage_key)
        self._data: dict[str, str] = {}  # In-memory record cache
        self._remote: KidsTasksRemoteClient | None = None

    @property
    def signal(self) -> str:
        """Dispatcher signal raised after every change."""
        return get_event_signal(self.entry_id, const.SIGNAL_SUFFIX_DATA_UPDATED)

    def attach_remote(self, remote: KidsTasksRemoteClient | None) -> None:
        """Mirror subsequent writes to ``remote`` (None detaches)."""
        self._remote = remote

    async def async_initialize(self) -> None:
        """Load records from storage during startup.

        If no data exists, starts with an empty record space.
        """
        const.LOGGER.debug("KidsTasksStore: Loading data from storage")
        existing_data = await self._store.async_load()

        if existing_data is None:
            const.LOGGER.info("No existing storage found. Initializing new data")
            self._data = {}
            return

        # Drop anything a newer/older layout left behind that is not a string
        self._data = {
            key: value for key, value in existing_data.items() if isinstance(value, str)
        }
        const.LOGGER.debug("Loaded %s records from storage", len(self._data))

    # -------------------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------------------

    def get_raw(self, key: str) -> str | None:
        """Return the stored string for ``key`` exactly as persisted."""
        return self._data.get(key)

    def get_text(self, key: str, default: str | None = None) -> str | None:
        """Return a plain-text record (markers, password)."""
        value = self._data.get(key)
        return value if value else default

    def get_json(self, key: str, default: Any = None) -> Any:
        """Return a decoded copy of a JSON record.

        The returned value is always a fresh object, safe to mutate.
        A missing or corrupt record yields a copy of ``default``.
        """
        raw = self._data.get(key)
        if not raw:
            return copy.deepcopy(default)
        try:
            return json.loads(raw)
        except ValueError as err:
            const.LOGGER.warning("Record '%s' is not valid JSON, using default: %s", key, err)
            return copy.deepcopy(default)

    def snapshot(self) -> dict[str, str]:
        """Return a shallow copy of every stored record."""
        return dict(self._data)

    # -------------------------------------------------------------------------------------
    # Write
    # -------------------------------------------------------------------------------------

    @callback
    def set_raw(self, key: str, value: str, push: bool = True) -> None:
        """Store ``value`` for ``key``, schedule persistence and mirror it.

        Args:
            key: Record key (see const.RECORD_KEYS)
            value: String value to store
            push: Mirror the write to the remote copy. Inbound sync overwrites
                pass False so remote data is not echoed back.
        """
        self._data[key] = value
        self._schedule_save()
        if push:
            self._push({key: value})

    @callback
    def set_text(self, key: str, value: str) -> None:
        """Store a plain-text record."""
        self.set_raw(key, value)

    @callback
    def set_json(self, key: str, value: Any) -> None:
        """Encode ``value`` as JSON and store it."""
        self.set_raw(key, json.dumps(value, ensure_ascii=False))

    @callback
    def async_notify_changed(self) -> None:
        """Broadcast the payload-less change signal to presentation layers."""
        const.LOGGER.debug("Emitting data updated signal for instance %s", self.entry_id)
        async_dispatcher_send(self.hass, self.signal)

    @callback
    def _push(self, values: dict[str, str]) -> None:
        """Fire-and-forget push to the remote copy."""
        if self._remote is None:
            return
        self.hass.async_create_task(
            self._remote.async_push(values),
            f"{const.DOMAIN}_push_{'_'.join(values)}",
        )

    @callback
    def _schedule_save(self) -> None:
        self._store.async_delay_save(self.snapshot, const.STORAGE_SAVE_DELAY_SECONDS)

    async def async_save(self) -> None:
        """Save every record to storage immediately.

        Errors are logged but do not stop execution.
        """
        try:
            await self._store.async_save(self.snapshot())
            const.LOGGER.debug("Data saved successfully to storage")
        except OSError as err:
            const.LOGGER.error(
                "Failed to save storage due to file system error: %s. "
                "Check disk space and file permissions for %s",
                err,
                self._store.path,
            )

    # -------------------------------------------------------------------------------------
    # Backup
    # -------------------------------------------------------------------------------------

    def export_data(self) -> dict[str, Any]:
        """Export catalogs, ledger and the weekly marker for backup."""
        exported: dict[str, Any] = {
            const.EXPORT_CHILDREN: self.get_json(const.RECORD_CHILDREN, const.DEFAULT_CHILDREN),
            const.EXPORT_TASKS: self.get_json(const.RECORD_TASKS, const.DEFAULT_TASKS),
            const.EXPORT_REWARDS: self.get_json(const.RECORD_REWARDS, const.DEFAULT_REWARDS),
            const.EXPORT_COMPLETIONS: self.get_json(const.RECORD_COMPLETIONS, {}),
            const.EXPORT_REDEMPTIONS: self.get_json(const.RECORD_REDEMPTIONS, []),
            const.EXPORT_LAST_RESET: self.get_text(const.RECORD_LAST_WEEKLY_RESET),
        }
        return exported

    @callback
    def import_data(self, data: dict[str, Any]) -> list[str]:
        """Restore every section present (and truthy) in ``data``.

        Returns:
            Record keys that were written.
        """
        written: list[str] = []
        for section, key in const.EXPORT_SECTIONS.items():
            value = data.get(section)
            if not value:
                continue
            if key in const.TEXT_RECORD_KEYS:
                self.set_text(key, str(value))
            else:
                self.set_json(key, value)
            written.append(key)

        if written:
            const.LOGGER.info("Imported records: %s", written)
            self.async_notify_changed()
        return written
