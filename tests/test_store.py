"""Direct unit tests for KidsTasksStore.

Covers loading, tolerant JSON reads, write-through to the remote copy and the
backup import/export helpers.
"""

# pylint: disable=protected-access  # Accessing _store for patching
# pylint: disable=redefined-outer-name  # Pytest fixtures redefine names

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.dispatcher import async_dispatcher_connect

from custom_components.kidstasks import const
from custom_components.kidstasks.store import KidsTasksStore


@pytest.fixture
def store(hass: HomeAssistant) -> KidsTasksStore:
    """Return a store instance."""
    return KidsTasksStore(hass, "store_test_entry")


async def test_async_initialize_without_existing_data(
    hass: HomeAssistant, store: KidsTasksStore
) -> None:
    """Test a fresh install starts with no records."""
    with patch.object(store._store, "async_load", return_value=None):
        await store.async_initialize()

    assert store.snapshot() == {}


async def test_async_initialize_drops_non_string_values(
    hass: HomeAssistant, store: KidsTasksStore
) -> None:
    """Test only string records survive loading."""
    with patch.object(
        store._store,
        "async_load",
        return_value={const.RECORD_TASKS: "[]", "legacy": {"nested": True}},
    ):
        await store.async_initialize()

    assert store.snapshot() == {const.RECORD_TASKS: "[]"}


async def test_get_json_tolerates_corrupt_record(
    hass: HomeAssistant, store: KidsTasksStore
) -> None:
    """Test corrupt JSON falls back to a fresh copy of the default."""
    default = {"c1": {}}
    store.set_raw(const.RECORD_COMPLETIONS, "{not json")

    value = store.get_json(const.RECORD_COMPLETIONS, default)
    assert value == default
    assert value is not default

    assert store.get_json(const.RECORD_REDEMPTIONS, []) == []
    assert store.get_text(const.RECORD_LAST_WEEKLY_RESET, "none") == "none"


async def test_set_json_keeps_unicode(hass: HomeAssistant, store: KidsTasksStore) -> None:
    """Test emoji are stored unescaped, as the shared file holds them."""
    store.set_json(const.RECORD_CHILDREN, [{"id": "1", "avatar": "🦄"}])

    assert "🦄" in store.get_raw(const.RECORD_CHILDREN)


async def test_writes_are_pushed_unless_disabled(
    hass: HomeAssistant, store: KidsTasksStore
) -> None:
    """Test write-through to an attached remote."""
    remote = MagicMock()
    remote.async_push = AsyncMock(return_value=[])
    store.attach_remote(remote)

    store.set_text(const.RECORD_LAST_DAILY_RESET, "2024-01-01T00:00:00+00:00")
    store.set_raw(const.RECORD_TASKS, "[]", push=False)
    await hass.async_block_till_done()

    remote.async_push.assert_awaited_once_with(
        {const.RECORD_LAST_DAILY_RESET: "2024-01-01T00:00:00+00:00"}
    )


async def test_export_fills_defaults(hass: HomeAssistant, store: KidsTasksStore) -> None:
    """Test export of an empty store returns the default catalogs."""
    exported = store.export_data()

    assert exported[const.EXPORT_CHILDREN] == const.DEFAULT_CHILDREN
    assert exported[const.EXPORT_TASKS] == const.DEFAULT_TASKS
    assert exported[const.EXPORT_COMPLETIONS] == {}
    assert exported[const.EXPORT_LAST_RESET] is None


async def test_import_writes_sections_and_notifies_once(
    hass: HomeAssistant, store: KidsTasksStore
) -> None:
    """Test import restores truthy sections with a single change signal."""
    calls: list[int] = []

    @callback
    def _on_change() -> None:
        calls.append(1)

    unsub = async_dispatcher_connect(hass, store.signal, _on_change)

    written = store.import_data(
        {
            const.EXPORT_TASKS: [{"id": "t", "name": "Read", "points": 3}],
            const.EXPORT_LAST_RESET: "2024-01-14",
            const.EXPORT_REDEMPTIONS: [],
        }
    )
    unsub()

    assert written == [const.RECORD_TASKS, const.RECORD_LAST_WEEKLY_RESET]
    assert store.get_raw(const.RECORD_LAST_WEEKLY_RESET) == "2024-01-14"
    assert store.get_json(const.RECORD_TASKS)[0]["points"] == 3
    assert calls == [1]
