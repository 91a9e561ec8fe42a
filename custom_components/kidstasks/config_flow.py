# File: config_flow.py
"""Config flow for the KidsTasks integration.

A single step collects the remote server URL (optional), the civil timezone
used for daily/weekly boundaries and the sync interval.
"""

from typing import Any, Optional

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.helpers import config_validation as cv

from . import const
from .utils import dt_utils

# pylint: disable=abstract-method


def _build_user_schema(defaults: dict[str, Any]) -> vol.Schema:
    """Schema for the user step, pre-filled with ``defaults``."""
    return vol.Schema(
        {
            vol.Optional(
                const.CONF_SERVER_URL,
                default=defaults.get(const.CONF_SERVER_URL, ""),
            ): str,
            vol.Required(
                const.CONF_TIME_ZONE,
                default=defaults.get(const.CONF_TIME_ZONE, const.DEFAULT_TIME_ZONE_NAME),
            ): str,
            vol.Required(
                const.CONF_SYNC_INTERVAL,
                default=defaults.get(const.CONF_SYNC_INTERVAL, const.DEFAULT_SYNC_INTERVAL),
            ): vol.All(vol.Coerce(int), vol.Range(min=const.MIN_SYNC_INTERVAL)),
        }
    )


def validate_user_input(user_input: dict[str, Any]) -> dict[str, str]:
    """Return form errors keyed by field (empty when the input is valid)."""
    errors: dict[str, str] = {}

    server_url = (user_input.get(const.CONF_SERVER_URL) or "").strip()
    if server_url:
        try:
            cv.url(server_url)
        except vol.Invalid:
            errors[const.CONF_SERVER_URL] = const.TRANS_KEY_ERROR_INVALID_URL

    if dt_utils.get_timezone(user_input.get(const.CONF_TIME_ZONE)) is None:
        errors[const.CONF_TIME_ZONE] = const.TRANS_KEY_ERROR_INVALID_TIMEZONE

    return errors


class KidsTasksConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for KidsTasks."""

    VERSION = 1

    async def async_step_user(self, user_input: Optional[dict[str, Any]] = None):
        """Collect server, timezone and sync interval."""
        if any(self._async_current_entries()):
            return self.async_abort(reason=const.TRANS_KEY_ERROR_SINGLE_INSTANCE)

        errors: dict[str, str] = {}
        if user_input is not None:
            errors = validate_user_input(user_input)
            if not errors:
                data = {
                    const.CONF_SERVER_URL: (user_input.get(const.CONF_SERVER_URL) or "").strip(),
                    const.CONF_TIME_ZONE: user_input[const.CONF_TIME_ZONE],
                    const.CONF_SYNC_INTERVAL: user_input[const.CONF_SYNC_INTERVAL],
                }
                const.LOGGER.debug("Creating KidsTasks entry: %s", data)
                return self.async_create_entry(title=const.KIDSTASKS_TITLE, data=data)

        return self.async_show_form(
            step_id=const.CONFIG_FLOW_STEP_USER,
            data_schema=_build_user_schema(user_input or {}),
            errors=errors,
        )
