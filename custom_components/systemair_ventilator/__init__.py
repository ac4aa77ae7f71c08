from __future__ import annotations

import logging
from dataclasses import dataclass

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_HOST, CONF_NAME
from homeassistant.core import HomeAssistant
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .api import SystemairApi
from .const import DEFAULT_NAME, PLATFORMS
from .coordinator import SystemairCoordinator
from .ventilator import SystemairVentilator

_LOGGER = logging.getLogger(__name__)


@dataclass
class SystemairRuntimeData:
    """Runtime objects of one config entry."""
    api: SystemairApi
    ventilator: SystemairVentilator
    coordinator: SystemairCoordinator


__all__ = [
    "async_setup_entry",
    "async_unload_entry",
    "SystemairRuntimeData",
]


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up a Systemair ventilator from a config entry."""
    session = async_get_clientsession(hass)

    host = entry.data[CONF_HOST]
    name = entry.data.get(CONF_NAME) or DEFAULT_NAME

    api = SystemairApi(session, host)
    ventilator = SystemairVentilator(hass, api, name)
    coordinator = SystemairCoordinator(hass, ventilator, entry)

    # Unreachable unit raises ConfigEntryNotReady, HA retries the setup later
    await coordinator.async_config_entry_first_refresh()

    entry.runtime_data = SystemairRuntimeData(
        api=api,
        ventilator=ventilator,
        coordinator=coordinator,
    )

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a Systemair config entry."""
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        runtime: SystemairRuntimeData = entry.runtime_data
        runtime.ventilator.async_shutdown()
    return unload_ok
