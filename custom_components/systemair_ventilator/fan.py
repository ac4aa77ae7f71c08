from __future__ import annotations

import logging
from typing import Any

from homeassistant.components.fan import (
    FanEntity,
    FanEntityFeature,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from . import SystemairRuntimeData
from .coordinator import SystemairCoordinator
from .entity_base import SystemairEntityMixin

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the Systemair fan entity from a config entry."""
    runtime: SystemairRuntimeData = entry.runtime_data
    async_add_entities([SystemairFanEntity(runtime.coordinator, entry.entry_id)])


class SystemairFanEntity(SystemairEntityMixin, CoordinatorEntity, FanEntity):
    """Power and speed of the unit. Speed is quantized to 25/45/70 %."""

    _attr_supported_features = (
        FanEntityFeature.SET_SPEED
        | FanEntityFeature.TURN_ON
        | FanEntityFeature.TURN_OFF
    )
    _attr_has_entity_name = True
    _attr_name = "Fan"

    def __init__(self, coordinator: SystemairCoordinator, entry_id: str) -> None:
        super().__init__(coordinator)
        self._ventilator = coordinator.ventilator
        self._entry_id = entry_id
        self._attr_unique_id = f"{entry_id}_fan"

    # ----- properties -----

    @property
    def is_on(self) -> bool | None:
        data = self.coordinator.data
        return None if data is None else data["active"]

    @property
    def percentage(self) -> int | None:
        data = self.coordinator.data
        return None if data is None else data["percentage"]

    # ----- commands -----

    async def async_turn_on(
        self,
        percentage: int | None = None,
        preset_mode: str | None = None,
        **kwargs: Any,
    ) -> None:
        await self._ventilator.async_set_active(True)
        if percentage is not None:
            await self._ventilator.async_set_rotation_speed(percentage)
        await self.coordinator.async_request_refresh()

    async def async_turn_off(self, **kwargs: Any) -> None:
        await self._ventilator.async_set_active(False)
        await self.coordinator.async_request_refresh()

    async def async_set_percentage(self, percentage: int) -> None:
        await self._ventilator.async_set_rotation_speed(percentage)
        await self.coordinator.async_request_refresh()
