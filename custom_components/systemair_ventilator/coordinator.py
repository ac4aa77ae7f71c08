"""Data update coordinator for a Systemair unit."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TypedDict

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from .api import SystemairApiError
from .const import UPDATE_INTERVAL_SEC
from .ventilator import SystemairVentilator

_LOGGER = logging.getLogger(__name__)


class SystemairData(TypedDict):
    """Values read from the device during one refresh."""
    active: bool
    percentage: int
    timer: int


class SystemairCoordinator(DataUpdateCoordinator[SystemairData]):
    """Polls the unit; every refresh is a live round trip to the device."""

    def __init__(
        self,
        hass: HomeAssistant,
        ventilator: SystemairVentilator,
        config_entry: ConfigEntry | None = None,
    ) -> None:
        """Initialize the coordinator."""
        super().__init__(
            hass,
            _LOGGER,
            config_entry=config_entry,
            name=f"Systemair {ventilator.name}",
            update_interval=timedelta(seconds=UPDATE_INTERVAL_SEC),
        )
        self.ventilator = ventilator

    async def _async_update_data(self) -> SystemairData:
        """Fetch power, speed and timer from the device.

        Raises:
            UpdateFailed: If the fan level register cannot be read

        """
        try:
            active, percentage = await self.ventilator.async_get_fan_state()
        except SystemairApiError as err:
            raise UpdateFailed(
                f"Error communicating with Systemair unit: {err}"
            ) from err

        # never raises: falls back to 0
        timer = await self.ventilator.async_get_timer()

        return {"active": active, "percentage": percentage, "timer": timer}
