from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.const import CONF_HOST, CONF_NAME
from homeassistant.data_entry_flow import FlowResult
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .api import SystemairApi, SystemairApiError
from .const import DEFAULT_NAME, DOMAIN

_LOGGER = logging.getLogger(__name__)

# Форма первого шага: адрес устройства и отображаемое имя.
DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_HOST): str,
        vol.Optional(CONF_NAME, default=DEFAULT_NAME): str,
    }
)


class SystemairConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Config flow для вентиляционной установки Systemair."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Единственный шаг мастера настройки.

        Запрашиваем адрес устройства и имя, проверяем, что установка
        отвечает на чтение регистра, и создаём ConfigEntry.
        """
        errors: dict[str, str] = {}

        if user_input is not None:
            host = user_input[CONF_HOST].strip()

            await self.async_set_unique_id(host)
            self._abort_if_unique_id_configured()

            session = async_get_clientsession(self.hass)
            api = SystemairApi(session, host)

            try:
                await api.async_validate_connection()
            except SystemairApiError as err:
                _LOGGER.debug("Systemair unit at %s not reachable: %s", host, err)
                errors["base"] = "cannot_connect"
            except Exception as err:  # noqa: BLE001
                _LOGGER.exception(
                    "Unexpected error during Systemair config flow: %s",
                    err,
                )
                errors["base"] = "unknown"
            else:
                name = user_input.get(CONF_NAME) or DEFAULT_NAME
                return self.async_create_entry(
                    title=name,
                    data={CONF_HOST: host, CONF_NAME: name},
                )

        return self.async_show_form(
            step_id="user",
            data_schema=DATA_SCHEMA,
            errors=errors,
        )
