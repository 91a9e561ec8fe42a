"""Shared fixtures for KidsTasks tests."""

from collections.abc import AsyncGenerator
import json
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from homeassistant.config_entries import ConfigEntryState
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.kidstasks import const
from custom_components.kidstasks.coordinator import KidsTasksDataCoordinator

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name

TEST_SERVER_URL = "http://kidstasks.test:3001/api/data"

# Small catalog used by most manager/service tests
TEST_TASKS: list[dict[str, Any]] = [
    {"id": "t10", "name": "Make the Bed", "points": 10, "emoji": "🛏️"},
    {"id": "t5", "name": "Brush Teeth", "points": 5, "emoji": "🪥"},
    {
        "id": "violin",
        "name": "Play Violin",
        "points": 20,
        "emoji": "🎻",
        "requiresApproval": True,
    },
]
TEST_REWARDS: list[dict[str, Any]] = [
    {"id": "r15", "name": "Sticker", "cost": 15, "emoji": "⭐"},
    {"id": "r100", "name": "Party", "cost": 100, "emoji": "🎉"},
]
TEST_CHILDREN: list[dict[str, Any]] = [
    {"id": "c1", "name": "Ada", "color": "#FF6B9D", "avatar": "🦄"},
    {"id": "c2", "name": "Linus", "color": "#4ECDC4", "avatar": "🚀"},
]


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a local-only config entry (no server)."""
    return MockConfigEntry(
        domain=const.DOMAIN,
        title=const.KIDSTASKS_TITLE,
        data={
            const.CONF_SERVER_URL: "",
            const.CONF_TIME_ZONE: const.DEFAULT_TIME_ZONE_NAME,
            const.CONF_SYNC_INTERVAL: const.DEFAULT_SYNC_INTERVAL,
        },
        entry_id="test_entry_id",
    )


@pytest.fixture
def mock_storage_data() -> dict[str, str]:
    """Stored records, as the Store would load them.

    Markers are set far in the future so no reset runs during setup.
    """
    return {
        const.RECORD_CHILDREN: json.dumps(TEST_CHILDREN),
        const.RECORD_TASKS: json.dumps(TEST_TASKS),
        const.RECORD_REWARDS: json.dumps(TEST_REWARDS),
        const.RECORD_LAST_DAILY_RESET: "2999-01-01T00:00:00+00:00",
    }


async def _setup_entry(
    hass: HomeAssistant, entry: MockConfigEntry, storage_data: dict[str, str]
) -> None:
    entry.add_to_hass(hass)
    with patch(
        "homeassistant.helpers.storage.Store.async_load",
        return_value=storage_data,
    ):
        assert await hass.config_entries.async_setup(entry.entry_id)
        await hass.async_block_till_done()


async def _teardown_entry(hass: HomeAssistant, entry: MockConfigEntry) -> None:
    if entry.state is ConfigEntryState.LOADED:
        assert await hass.config_entries.async_unload(entry.entry_id)
        await hass.async_block_till_done()


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
    mock_storage_data: dict[str, str],  # pylint: disable=redefined-outer-name
) -> AsyncGenerator[MockConfigEntry]:
    """Set up the KidsTasks integration for testing with mocked storage."""
    await _setup_entry(hass, mock_config_entry, mock_storage_data)
    yield mock_config_entry
    await _teardown_entry(hass, mock_config_entry)


@pytest.fixture
def coordinator(
    hass: HomeAssistant,
    init_integration: MockConfigEntry,  # pylint: disable=redefined-outer-name
) -> KidsTasksDataCoordinator:
    """Return the coordinator of the set-up entry."""
    return hass.data[const.DOMAIN][init_integration.entry_id][const.COORDINATOR]


# ------------------------------------------------------------------------------
# Remote sync
# ------------------------------------------------------------------------------


@pytest.fixture
def mock_remote_config_entry() -> MockConfigEntry:
    """Return a config entry with a server configured."""
    return MockConfigEntry(
        domain=const.DOMAIN,
        title=const.KIDSTASKS_TITLE,
        data={
            const.CONF_SERVER_URL: TEST_SERVER_URL,
            const.CONF_TIME_ZONE: const.DEFAULT_TIME_ZONE_NAME,
            const.CONF_SYNC_INTERVAL: 60,
        },
        entry_id="test_remote_entry_id",
    )


@pytest.fixture
def server_data() -> dict[str, str]:
    """What the server returns on fetch (tests mutate it before setup)."""
    return {}


@pytest.fixture
def mock_remote(
    server_data: dict[str, str],  # pylint: disable=redefined-outer-name
) -> dict[str, AsyncMock]:
    """Patch the remote client's network calls."""

    async def _fetch() -> dict[str, str]:
        return dict(server_data)

    async def _push(values: dict[str, str]) -> list[str]:
        return list(values)

    with (
        patch(
            "custom_components.kidstasks.remote_client.KidsTasksRemoteClient.async_fetch",
            new=AsyncMock(side_effect=_fetch),
        ) as fetch,
        patch(
            "custom_components.kidstasks.remote_client.KidsTasksRemoteClient.async_push",
            new=AsyncMock(side_effect=_push),
        ) as push,
    ):
        yield {"fetch": fetch, "push": push}


@pytest.fixture
async def init_remote_integration(
    hass: HomeAssistant,
    mock_remote_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
    mock_storage_data: dict[str, str],  # pylint: disable=redefined-outer-name
    mock_remote: dict[str, AsyncMock],  # pylint: disable=redefined-outer-name
) -> AsyncGenerator[MockConfigEntry]:
    """Set up the integration with a (mocked) server."""
    await _setup_entry(hass, mock_remote_config_entry, mock_storage_data)
    yield mock_remote_config_entry
    await _teardown_entry(hass, mock_remote_config_entry)


@pytest.fixture
def remote_coordinator(
    hass: HomeAssistant,
    init_remote_integration: MockConfigEntry,  # pylint: disable=redefined-outer-name
) -> KidsTasksDataCoordinator:
    """Return the coordinator of the server-backed entry."""
    return hass.data[const.DOMAIN][init_remote_integration.entry_id][const.COORDINATOR]
