from __future__ import annotations

import logging
from typing import Any

from homeassistant.components.switch import SwitchEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from . import SystemairRuntimeData
from .entity_base import SystemairEntityMixin
from .ventilator import SystemairVentilator

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the momentary refresh switch."""
    runtime: SystemairRuntimeData = entry.runtime_data
    async_add_entities([SystemairRefreshSwitch(runtime.ventilator, entry.entry_id)])


class SystemairRefreshSwitch(SystemairEntityMixin, SwitchEntity):
    """Momentary switch: turning it on starts refresh mode, then it flips back."""

    _attr_has_entity_name = True
    _attr_name = "Refresh"
    _attr_icon = "mdi:weather-windy"
    _attr_should_poll = False

    def __init__(self, ventilator: SystemairVentilator, entry_id: str) -> None:
        self._ventilator = ventilator
        self._entry_id = entry_id
        self._attr_unique_id = f"{entry_id}_refresh"
        self._attr_is_on = False

    async def async_turn_on(self, **kwargs: Any) -> None:
        await self._ventilator.async_set_refresh(True, self._async_reset)
        self._attr_is_on = True
        self.async_write_ha_state()

    async def async_turn_off(self, **kwargs: Any) -> None:
        # no-op on the device side
        await self._ventilator.async_set_refresh(False, self._async_reset)
        self._attr_is_on = False
        self.async_write_ha_state()

    @callback
    def _async_reset(self) -> None:
        self._attr_is_on = False
        if self.hass is not None:
            self.async_write_ha_state()
