# File: remote_client.py
"""HTTP client for the shared server file.

The server exposes one merge endpoint:
- ``GET``  returns ``{record_key: string_value}`` for every key it holds
- ``POST`` merges a partial ``{record_key: string_value}`` mapping and echoes
  ``{"success": true, "keysUpdated": [...]}``

Failures never propagate: the integration keeps working on local state when
the server is unreachable, so every call logs and returns None instead.
"""

from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING, Any

import aiohttp
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from . import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


class KidsTasksRemoteClient:
    """Fetch and push record values against the remote merge endpoint."""

    def __init__(
        self,
        hass: HomeAssistant,
        url: str,
        timeout: float = const.DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Args:
            hass: Home Assistant instance (owner of the shared aiohttp session)
            url: Full endpoint URL, e.g. ``http://host:3001/api/data``
            timeout: Per-request timeout in seconds
        """
        self.hass = hass
        self.url = url
        self._timeout = timeout

    @staticmethod
    def _normalize_values(payload: dict[str, Any]) -> dict[str, str]:
        """Keep string values as-is; JSON-encode anything else the server holds."""
        normalized: dict[str, str] = {}
        for key, value in payload.items():
            if value is None:
                continue
            normalized[key] = value if isinstance(value, str) else json.dumps(value)
        return normalized

    async def async_fetch(self) -> dict[str, str] | None:
        """Return the server's full record mapping, or None on any failure."""
        session = async_get_clientsession(self.hass)
        try:
            async with asyncio.timeout(self._timeout):
                async with session.get(self.url) as response:
                    response.raise_for_status()
                    payload = await response.json(content_type=None)
        except TimeoutError:
            const.LOGGER.warning("Timeout fetching data from %s (offline mode?)", self.url)
            return None
        except aiohttp.ClientError as err:
            const.LOGGER.warning("Could not fetch data from %s (offline mode?): %s", self.url, err)
            return None
        except ValueError as err:
            const.LOGGER.warning("Invalid JSON received from %s: %s", self.url, err)
            return None

        if not isinstance(payload, dict):
            const.LOGGER.warning("Unexpected response shape from %s: %s", self.url, type(payload).__name__)
            return None

        return self._normalize_values(payload)

    async def async_push(self, values: dict[str, str]) -> list[str] | None:
        """Merge ``values`` into the server copy.

        Returns:
            The keys the server reports as updated, or None on any failure.
        """
        if not values:
            return []

        session = async_get_clientsession(self.hass)
        try:
            async with asyncio.timeout(self._timeout):
                async with session.post(self.url, json=values) as response:
                    response.raise_for_status()
                    payload = await response.json(content_type=None)
        except TimeoutError:
            const.LOGGER.warning("Timeout pushing %s to %s", list(values), self.url)
            return None
        except aiohttp.ClientError as err:
            const.LOGGER.warning("Failed to sync %s: %s", list(values), err)
            return None
        except ValueError as err:
            const.LOGGER.debug("Push of %s returned non-JSON body: %s", list(values), err)
            return list(values)

        keys_updated = (
            payload.get(const.REMOTE_RESPONSE_KEYS_UPDATED)
            if isinstance(payload, dict)
            else None
        )
        if not isinstance(keys_updated, list):
            keys_updated = list(values)

        const.LOGGER.debug("Synced %s to server", keys_updated)
        return keys_updated
