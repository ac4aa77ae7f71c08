import pytest
from unittest.mock import ANY, AsyncMock, MagicMock, patch

from aiohttp import ClientError

from custom_components.systemair_ventilator.api import (
    DeviceResponseError,
    DeviceUnreachable,
    SystemairApi,
)
from custom_components.systemair_ventilator.ventilator import SystemairVentilator

CALL_LATER = "custom_components.systemair_ventilator.ventilator.async_call_later"


def _make_ventilator(read_value=None):
    api = MagicMock()
    api.write = AsyncMock()
    api.read = AsyncMock(return_value=read_value or {})
    hass = object()
    return SystemairVentilator(hass, api, "Living room"), api, hass


@pytest.mark.asyncio
@pytest.mark.parametrize("on, value", [(True, 1), (False, 0)])
async def test_set_active_writes_fan_register(on, value):
    vent, api, _ = _make_ventilator()

    await vent.async_set_active(on)

    api.write.assert_awaited_once_with(1130, value)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "raw, expected",
    [(0, False), (1, True), (2, True), (4, True), (-1, False)],
)
async def test_get_active(raw, expected):
    vent, api, _ = _make_ventilator({"1130": raw})

    assert await vent.async_get_active() is expected
    api.read.assert_awaited_once_with(1130, 1)


@pytest.mark.asyncio
async def test_get_active_is_stable_between_calls():
    vent, api, _ = _make_ventilator({"1130": 3})

    first = await vent.async_get_active()
    second = await vent.async_get_active()

    assert first == second is True
    assert api.read.await_count == 2


@pytest.mark.asyncio
async def test_get_active_missing_register_is_off():
    vent, _, _ = _make_ventilator({"9999": 1})
    assert await vent.async_get_active() is False


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "percent, level",
    [(0, 0), (1, 2), (34, 2), (35, 3), (57, 3), (58, 4), (100, 4)],
)
async def test_set_rotation_speed_buckets(percent, level):
    vent, api, _ = _make_ventilator()

    await vent.async_set_rotation_speed(percent)

    api.write.assert_awaited_once_with(1130, level)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "level, percent",
    [(0, 0), (1, 0), (2, 25), (3, 45), (4, 70), (7, 0)],
)
async def test_get_rotation_speed(level, percent):
    vent, api, _ = _make_ventilator({"1130": level})

    assert await vent.async_get_rotation_speed() == percent
    api.read.assert_awaited_once_with(1130, 1)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "level, expected",
    [
        (0, (False, 0)),
        (1, (True, 0)),
        (2, (True, 25)),
        (3, (True, 45)),
        (4, (True, 70)),
    ],
)
async def test_get_fan_state_uses_single_read(level, expected):
    vent, api, _ = _make_ventilator({"1130": level})

    assert await vent.async_get_fan_state() == expected
    api.read.assert_awaited_once_with(1130, 1)


@pytest.mark.asyncio
async def test_set_refresh_false_is_noop():
    vent, api, _ = _make_ventilator()
    on_reset = MagicMock()

    with patch(CALL_LATER) as call_later:
        await vent.async_set_refresh(False, on_reset)

    api.write.assert_not_awaited()
    api.read.assert_not_awaited()
    call_later.assert_not_called()
    on_reset.assert_not_called()


@pytest.mark.asyncio
async def test_set_refresh_true_writes_once_and_schedules_reset():
    vent, api, hass = _make_ventilator()
    on_reset = MagicMock()

    with patch(CALL_LATER, return_value=MagicMock()) as call_later:
        await vent.async_set_refresh(True, on_reset)

    api.write.assert_awaited_once_with(1161, 4)
    call_later.assert_called_once_with(hass, 1.0, ANY)
    assert vent.pending_resets == 1
    on_reset.assert_not_called()

    # таймер сработал
    reset_cb = call_later.call_args.args[2]
    reset_cb(None)

    on_reset.assert_called_once_with()
    assert vent.pending_resets == 0


@pytest.mark.asyncio
async def test_set_refresh_failure_schedules_nothing():
    vent, api, _ = _make_ventilator()
    api.write.side_effect = DeviceUnreachable("write 1161=4 failed: boom")

    with patch(CALL_LATER) as call_later:
        with pytest.raises(DeviceUnreachable):
            await vent.async_set_refresh(True, MagicMock())

    call_later.assert_not_called()


@pytest.mark.asyncio
async def test_shutdown_cancels_pending_resets():
    vent, _, _ = _make_ventilator()
    unsubs = [MagicMock(), MagicMock()]

    with patch(CALL_LATER, side_effect=unsubs):
        await vent.async_set_refresh(True, MagicMock())
        await vent.async_set_refresh(True, MagicMock())

    assert vent.pending_resets == 2
    vent.async_shutdown()

    for unsub in unsubs:
        unsub.assert_called_once_with()
    assert vent.pending_resets == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "raw, expected",
    [(-50, 0), (0, 0), (50, 50), (100, 100), (150, 100)],
)
async def test_get_timer_clamps(raw, expected):
    vent, api, _ = _make_ventilator({"1110": raw, "1111": 0})

    assert await vent.async_get_timer() == expected
    api.read.assert_awaited_once_with(1110, 2)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [DeviceUnreachable("read 1110 failed: boom"), DeviceResponseError("bad")],
)
async def test_get_timer_failure_reports_zero(error):
    vent, api, _ = _make_ventilator()
    api.read.side_effect = error

    assert await vent.async_get_timer() == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method_name, args",
    [
        ("async_set_active", (True,)),
        ("async_get_active", ()),
        ("async_set_rotation_speed", (50,)),
        ("async_get_rotation_speed", ()),
        ("async_get_fan_state", ()),
    ],
)
async def test_other_operations_propagate_unreachable(method_name, args):
    vent, api, _ = _make_ventilator()
    api.read.side_effect = DeviceUnreachable("down")
    api.write.side_effect = DeviceUnreachable("down")

    with pytest.raises(DeviceUnreachable):
        await getattr(vent, method_name)(*args)


class DeadSession:
    """Сессия, которая всегда бросает сетевую ошибку."""

    def __init__(self):
        self.calls = 0

    def get(self, url, timeout=None):
        self.calls += 1
        raise ClientError("no route to host")


@pytest.mark.asyncio
async def test_exhausted_retries_through_real_client():
    session = DeadSession()
    api = SystemairApi(session, "10.0.0.9")
    vent = SystemairVentilator(object(), api, "Attic")

    with patch(
        "custom_components.systemair_ventilator.api.asyncio.sleep", new=AsyncMock()
    ):
        assert await vent.async_get_timer() == 0
        assert session.calls == 3

        with pytest.raises(DeviceUnreachable) as exc:
            await vent.async_get_active()

    assert "no route to host" in str(exc.value)
    assert session.calls == 6
