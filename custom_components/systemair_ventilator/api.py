from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Optional
from urllib.parse import quote

from aiohttp import ClientError, ClientSession, ClientTimeout
from homeassistant.exceptions import HomeAssistantError
from yarl import URL

from .const import (
    REG_FAN_LEVEL,
    REQUEST_TIMEOUT_SEC,
    RETRY_DELAY_SEC,
    RETRY_MAX_ATTEMPTS,
)

_LOGGER = logging.getLogger(__name__)

ENDPOINT_READ = "mread"
ENDPOINT_WRITE = "mwrite"


class SystemairApiError(HomeAssistantError):
    """Базовая ошибка регистрового API Systemair."""


class TransportError(SystemairApiError):
    """Одна попытка запроса не удалась (сеть или таймаут)."""


class DeviceUnreachable(SystemairApiError):
    """Все попытки запроса исчерпаны."""


class DeviceResponseError(SystemairApiError):
    """Устройство ответило не словарём регистров."""


def _register_query(register: int | str, value: int) -> str:
    """Собрать query: {"1130":1}, кавычки percent-encoded."""
    payload = json.dumps({str(register): int(value)}, separators=(",", ":"))
    return quote(payload, safe="{}:,")


def register_url(host: str, endpoint: str, register: int | str, value: int) -> URL:
    """Полный URL запроса к регистру (mread / mwrite)."""
    # encoded=True: yarl не должен повторно квотировать JSON в query
    return URL(
        f"http://{host}/{endpoint}?{_register_query(register, value)}",
        encoded=True,
    )


class SystemairApi:
    """Клиент регистрового HTTP API одного устройства Systemair.

    Работает поверх aiohttp.ClientSession, предоставленной Home Assistant.
    """

    def __init__(
        self,
        session: ClientSession,
        host: str,
        *,
        timeout: float = REQUEST_TIMEOUT_SEC,
        retry_delay: float = RETRY_DELAY_SEC,
    ) -> None:
        """Сохранить сессию и адрес устройства."""
        self._session = session
        self._host = host
        self._timeout = ClientTimeout(total=timeout)
        self._retry_delay = retry_delay
        self.retry_count: int = 0  # суммарное число неудачных попыток
        self.last_error: Optional[str] = None

    @property
    def host(self) -> str:
        return self._host

    # ---------- helpers ----------

    async def _with_retries(
        self,
        coro_factory: Callable[[], Awaitable[Any]],
        action_name: str,
    ) -> Any:
        """Выполнить coro_factory() не более RETRY_MAX_ATTEMPTS раз.

        Повторяем только при asyncio.TimeoutError и aiohttp.ClientError,
        с фиксированной паузой между попытками. Если последняя попытка
        тоже неудачна — DeviceUnreachable поверх последней TransportError.
        """
        last_exc: TransportError | None = None

        for attempt in range(1, RETRY_MAX_ATTEMPTS + 1):
            try:
                return await coro_factory()
            except (asyncio.TimeoutError, ClientError) as e:
                message = str(e) or type(e).__name__
                last_exc = TransportError(message)
                last_exc.__cause__ = e
                self.retry_count += 1
                self.last_error = message

                _LOGGER.warning(
                    "Systemair %s: %s failed on attempt %d/%d: %s",
                    self._host,
                    action_name,
                    attempt,
                    RETRY_MAX_ATTEMPTS,
                    message,
                )
                if attempt < RETRY_MAX_ATTEMPTS:
                    await asyncio.sleep(self._retry_delay)

        _LOGGER.error(
            "Systemair %s: %s gave up after %d attempts",
            self._host,
            action_name,
            RETRY_MAX_ATTEMPTS,
        )
        raise DeviceUnreachable(
            f"{action_name} failed: {last_exc}"
        ) from last_exc

    # ---------- публичные методы ----------

    async def write(self, register: int, value: int) -> None:
        """Записать один регистр. Ответ устройства не проверяется."""
        url = register_url(self._host, ENDPOINT_WRITE, register, value)

        async def _do_write() -> None:
            _LOGGER.debug("Sending request to %s", url)
            async with self._session.get(url, timeout=self._timeout) as resp:
                await resp.read()

        await self._with_retries(_do_write, f"write {register}={value}")

    async def read(self, register: int, count: int = 1) -> Dict[str, int]:
        """Прочитать `count` регистров начиная с `register`.

        Возвращает словарь «номер регистра (строка) → целое значение».
        """
        url = register_url(self._host, ENDPOINT_READ, register, count)

        async def _do_read() -> Dict[str, int]:
            _LOGGER.debug("Sending request to %s", url)
            async with self._session.get(url, timeout=self._timeout) as resp:
                try:
                    # устройство не всегда присылает application/json
                    data = await resp.json(content_type=None)
                except ValueError as err:
                    raise DeviceResponseError(
                        f"read {register}: response is not JSON: {err}"
                    ) from err

            if not isinstance(data, dict):
                raise DeviceResponseError(
                    f"read {register}: unexpected response shape {data!r:.200}"
                )

            values: Dict[str, int] = {}
            for key, raw in data.items():
                try:
                    values[str(key)] = int(raw)
                except (TypeError, ValueError, OverflowError):
                    _LOGGER.debug("Skipping non-integer register %s=%r", key, raw)
            return values

        return await self._with_retries(_do_read, f"read {register}")

    async def async_validate_connection(self) -> bool:
        """Проверить, что устройство отвечает на чтение регистра скорости."""
        await self.read(REG_FAN_LEVEL, 1)
        return True
