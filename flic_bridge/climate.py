"""Climate devices: target temperature and HVAC mode."""

from __future__ import annotations

import logging
from typing import Any

from .const import DEFAULT_TARGET_TEMPERATURE, HVAC_MODE_AUTO, HVAC_MODE_OFF
from .entity import DeviceController
from .exceptions import HomeAssistantError
from .models import (
    Channel,
    Device,
    DeviceClass,
    EntityState,
    ServiceCallResult,
    round_tenth,
)

_LOGGER = logging.getLogger(__name__)


class ClimateController(DeviceController):
    """Target temperature control for ``climate`` entities.

    The Twist drives a climate device through a Blind virtual device: the
    dial position 0-1 spans the device's temperature range.
    """

    domain = "climate"
    device_classes = frozenset({DeviceClass.CLIMATE})

    async def set_temperature(
        self, device: Device, temperature: float
    ) -> ServiceCallResult:
        """Round to 0.1 °C, clamp to the device range and apply."""
        self._require(device)
        value = device.temperature_range.clamp(round_tenth(float(temperature)))
        result = await self._call(
            device, "set_temperature", {"temperature": value},
            f"temperature set to {value}°C",
        )
        await self.sync_temperature(device)
        return result

    async def adjust_temperature(self, device: Device, delta: float) -> None:
        self._require(device)
        current = await self.sync_temperature(device)
        if current is None:
            current = DEFAULT_TARGET_TEMPERATURE
        await self.set_temperature(device, current + delta)

    async def set_hvac_mode(self, device: Device, mode: str) -> ServiceCallResult:
        self._require(device)
        return await self._call(
            device, "set_hvac_mode", {"hvac_mode": mode}, f"HVAC mode set to {mode}"
        )

    def is_on(self, state: EntityState) -> bool:
        return state.state != HVAC_MODE_OFF

    async def turn_on(self, device: Device) -> None:
        await self.set_hvac_mode(device, HVAC_MODE_AUTO)

    async def turn_off(self, device: Device) -> None:
        await self.set_hvac_mode(device, HVAC_MODE_OFF)

    async def sync_temperature(self, device: Device) -> float | None:
        """Push the target temperature as a dial position; return it in °C."""
        try:
            state = await self._read_state(device)
        except HomeAssistantError as exc:
            _LOGGER.error(
                "Error getting current temperature for %s: %s", device.name, exc
            )
            return None

        target = float(state.attribute("temperature", DEFAULT_TARGET_TEMPERATURE))
        self._push(device, {"position": device.temperature_range.to_position(target)})
        return target

    async def handle_twist(self, device: Device, values: dict[str, Any]) -> None:
        position = values.get("position")
        if position is None:
            return

        temp_range = device.temperature_range
        temperature = temp_range.from_position(float(position))

        async def _apply(final: float) -> None:
            await self.set_temperature(device, final)

        self._ctx.debouncer.schedule_update(
            device.device_id,
            Channel.TEMPERATURE,
            temperature,
            _apply,
            lambda expected: self._push(
                device, {"position": temp_range.to_position(expected)}
            ),
        )

    async def initialize(self, device: Device) -> None:
        await self.sync_temperature(device)
