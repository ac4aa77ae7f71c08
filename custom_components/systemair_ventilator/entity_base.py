from __future__ import annotations

from functools import cached_property

from homeassistant.helpers.device_registry import DeviceInfo

from .const import DOMAIN, MANUFACTURER
from .ventilator import SystemairVentilator


class SystemairEntityMixin:
    """Common bits for every Systemair entity."""

    _ventilator: SystemairVentilator
    _entry_id: str

    @cached_property
    def device_info(self) -> DeviceInfo:
        return DeviceInfo(
            identifiers={(DOMAIN, self._entry_id)},
            name=self._ventilator.name,
            manufacturer=MANUFACTURER,
            configuration_url=f"http://{self._ventilator.api.host}/",
        )
