"""Blinds, curtains and shutters."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from .const import (
    COVER_STATE_CLOSED,
    COVER_STATE_OPEN,
    COVER_STATE_OPENING,
    POSITION_MAX,
)
from .entity import DeviceController
from .exceptions import HomeAssistantError
from .models import (
    Channel,
    Device,
    DeviceClass,
    EntityState,
    ServiceCallResult,
    round_half_up,
)

_LOGGER = logging.getLogger(__name__)


def clamp_position(value: float) -> int:
    return max(0, min(POSITION_MAX, round_half_up(value)))


class CoverController(DeviceController):
    """Position control for ``cover`` entities: 0 = closed, 100 = open."""

    domain = "cover"
    device_classes = frozenset({DeviceClass.BLIND})

    async def set_position(self, device: Device, position: float) -> ServiceCallResult:
        self._require(device)
        value = clamp_position(position)
        result = await self._call(
            device, "set_cover_position", {"position": value},
            f"position set to {value}%",
        )
        await self.sync_position(device)
        return result

    async def adjust_position(self, device: Device, delta: int) -> None:
        self._require(device)
        current = await self.sync_position(device)
        await self.set_position(device, clamp_position((current or 0) + delta))

    async def open(self, device: Device) -> ServiceCallResult:
        self._require(device)
        result = await self._call(device, "open_cover", success_msg="opened")
        self._schedule_sync(device)
        return result

    async def close(self, device: Device) -> ServiceCallResult:
        self._require(device)
        result = await self._call(device, "close_cover", success_msg="closed")
        self._schedule_sync(device)
        return result

    async def stop(self, device: Device) -> ServiceCallResult:
        self._require(device)
        return await self._call(device, "stop_cover", success_msg="stopped")

    def is_on(self, state: EntityState) -> bool:
        return state.state in (COVER_STATE_OPEN, COVER_STATE_OPENING)

    async def turn_on(self, device: Device) -> None:
        await self.open(device)

    async def turn_off(self, device: Device) -> None:
        await self.close(device)

    def _schedule_sync(self, device: Device) -> None:
        """Read the position back once the cover has had time to move."""

        async def _delayed() -> None:
            await asyncio.sleep(self._ctx.cover_move_delay)
            await self.sync_position(device)

        self._ctx.spawn(_delayed())

    async def sync_position(self, device: Device) -> int | None:
        """Push the cover position to the dial; return it in percent."""
        try:
            state = await self._read_state(device)
        except HomeAssistantError as exc:
            _LOGGER.error("Error getting current position for %s: %s", device.name, exc)
            return None

        position = state.attribute("current_position")
        if position is None:
            position = POSITION_MAX if state.state == COVER_STATE_OPEN else 0
            if state.state not in (COVER_STATE_OPEN, COVER_STATE_CLOSED):
                _LOGGER.debug(
                    "%s reports no position in state %s", device.name, state.state
                )
        position = clamp_position(float(position))
        self._push(device, {"position": position / POSITION_MAX})
        return position

    async def handle_twist(self, device: Device, values: dict[str, Any]) -> None:
        position = values.get("position")
        if position is None:
            return

        percent = round_half_up(float(position) * POSITION_MAX)

        async def _apply(final: int) -> None:
            await self.set_position(device, final)

        self._ctx.debouncer.schedule_update(
            device.device_id,
            Channel.POSITION,
            percent,
            _apply,
            lambda expected: self._push(device, {"position": expected / POSITION_MAX}),
        )

    async def initialize(self, device: Device) -> None:
        await self.sync_position(device)
