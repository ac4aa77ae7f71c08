from __future__ import annotations

from typing import Any

from homeassistant.components.diagnostics import async_redact_data
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_HOST
from homeassistant.core import HomeAssistant

from . import SystemairRuntimeData

TO_REDACT: set[str] = {CONF_HOST}


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant,
    entry: ConfigEntry,
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    runtime: SystemairRuntimeData = entry.runtime_data
    api = runtime.api

    diag: dict[str, Any] = {
        "entry": {
            "title": entry.title,
            "data": dict(entry.data),
        },
        "api": {
            "retry_count": api.retry_count,
            "last_error": api.last_error,
        },
        "coordinator": {
            "last_update_success": runtime.coordinator.last_update_success,
            "data": runtime.coordinator.data,
        },
        "pending_refresh_resets": runtime.ventilator.pending_resets,
    }

    return async_redact_data(diag, TO_REDACT)
