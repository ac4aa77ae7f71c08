"""Mapping between Home Assistant entity values and Systemair registers."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from homeassistant.core import CALLBACK_TYPE, HomeAssistant, callback
from homeassistant.helpers.event import async_call_later

from .api import SystemairApi, SystemairApiError
from .const import (
    REFRESH_MODE_COMMAND,
    REFRESH_RESET_DELAY_SEC,
    REG_FAN_LEVEL,
    REG_REFRESH_MODE,
    REG_TIMER,
    TIMER_READ_COUNT,
)
from .helpers import level_to_percent, percent_to_level, timer_to_percent, to_int

_LOGGER = logging.getLogger(__name__)


class SystemairVentilator:
    """Translates entity get/set calls into register reads and writes.

    Nothing is cached here: every call is a round trip to the device.
    The only state kept is the list of scheduled refresh-switch resets,
    so that unloading the entry can cancel them.
    """

    def __init__(self, hass: HomeAssistant, api: SystemairApi, name: str) -> None:
        self.hass = hass
        self.api = api
        self.name = name
        self._pending_resets: list[CALLBACK_TYPE] = []

    @property
    def pending_resets(self) -> int:
        return len(self._pending_resets)

    async def _read_register(self, register: int, count: int = 1) -> int | None:
        data = await self.api.read(register, count)
        return data.get(str(register))

    # ----- power -----

    async def async_set_active(self, on: bool) -> None:
        # Same register as the speed level: turning on does not restore
        # the previous level.
        value = 1 if on else 0
        await self.api.write(REG_FAN_LEVEL, value)
        _LOGGER.debug("%s: active set to %s", self.name, "ON" if on else "OFF")

    async def async_get_active(self) -> bool:
        raw = await self._read_register(REG_FAN_LEVEL)
        is_active = to_int(raw) > 0
        _LOGGER.debug("%s: active is %s", self.name, "ON" if is_active else "OFF")
        return is_active

    # ----- speed -----

    async def async_set_rotation_speed(self, percent: int | float) -> None:
        level = percent_to_level(percent)
        await self.api.write(REG_FAN_LEVEL, level)
        _LOGGER.debug("%s: speed set to level %s (%s%%)", self.name, level, percent)

    async def async_get_rotation_speed(self) -> int:
        raw = await self._read_register(REG_FAN_LEVEL)
        percentage = level_to_percent(raw)
        _LOGGER.debug("%s: speed level %s (%s%%)", self.name, raw, percentage)
        return percentage

    async def async_get_fan_state(self) -> tuple[bool, int]:
        """Active and speed percentage from a single read of the level register."""
        raw = await self._read_register(REG_FAN_LEVEL)
        is_active = to_int(raw) > 0
        percentage = level_to_percent(raw)
        _LOGGER.debug(
            "%s: fan %s, level %s (%s%%)",
            self.name,
            "ON" if is_active else "OFF",
            raw,
            percentage,
        )
        return is_active, percentage

    # ----- refresh -----

    async def async_set_refresh(
        self, trigger: bool, on_reset: Callable[[], None]
    ) -> None:
        """Start refresh mode and schedule the switch to flip back off.

        trigger=False does nothing: the device has no "stop refresh" command.
        """
        if not trigger:
            return

        await self.api.write(REG_REFRESH_MODE, REFRESH_MODE_COMMAND)
        _LOGGER.debug("%s: refresh mode started", self.name)

        unsub: CALLBACK_TYPE | None = None

        @callback
        def _reset(_now: datetime) -> None:
            if unsub in self._pending_resets:
                self._pending_resets.remove(unsub)
            on_reset()

        unsub = async_call_later(self.hass, REFRESH_RESET_DELAY_SEC, _reset)
        self._pending_resets.append(unsub)

    # ----- timer -----

    async def async_get_timer(self) -> int:
        """Remaining timer as 0..100. Falls back to 0 when the device fails."""
        try:
            raw = await self._read_register(REG_TIMER, TIMER_READ_COUNT)
        except SystemairApiError as err:
            _LOGGER.warning("%s: timer read failed, reporting 0: %s", self.name, err)
            return 0

        value = timer_to_percent(raw)
        _LOGGER.debug("%s: remaining time is %s minutes (raw %s)", self.name, value, raw)
        return value

    @callback
    def async_shutdown(self) -> None:
        """Cancel refresh resets that have not fired yet."""
        while self._pending_resets:
            unsub = self._pending_resets.pop()
            unsub()
