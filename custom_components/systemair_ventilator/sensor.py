from __future__ import annotations

from homeassistant.components.sensor import SensorEntity, SensorStateClass
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import PERCENTAGE
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from . import SystemairRuntimeData
from .coordinator import SystemairCoordinator
from .entity_base import SystemairEntityMixin


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the remaining-timer sensor."""
    runtime: SystemairRuntimeData = entry.runtime_data
    async_add_entities([SystemairTimerSensor(runtime.coordinator, entry.entry_id)])


class SystemairTimerSensor(SystemairEntityMixin, CoordinatorEntity, SensorEntity):
    """Remaining timer of the unit, shown as a 0..100 level.

    Stays available when the unit does not answer and reads 0 instead.
    """

    _attr_has_entity_name = True
    _attr_name = "Timer"
    _attr_icon = "mdi:timer-sand"
    _attr_native_unit_of_measurement = PERCENTAGE
    _attr_state_class = SensorStateClass.MEASUREMENT

    def __init__(self, coordinator: SystemairCoordinator, entry_id: str) -> None:
        super().__init__(coordinator)
        self._ventilator = coordinator.ventilator
        self._entry_id = entry_id
        self._attr_unique_id = f"{entry_id}_timer"

    @property
    def available(self) -> bool:
        return True

    @property
    def native_value(self) -> int:
        data = self.coordinator.data
        if not self.coordinator.last_update_success or data is None:
            return 0
        return data["timer"]
