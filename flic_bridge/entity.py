"""Shared plumbing for the per-device-class controllers."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable

from .client import HomeAssistantClient
from .color_memory import ColorMemory
from .const import COVER_MOVE_DELAY, STATE_SETTLE_DELAY
from .cooldown import CooldownGate
from .debounce import DebounceCoordinator
from .exceptions import DeviceNotFoundError
from .models import Device, DeviceClass, EntityState, ServiceCallResult
from .sink import VirtualStateSink

_LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class BridgeContext:
    """Runtime state shared by every controller of one bridge."""

    client: HomeAssistantClient
    sink: VirtualStateSink
    debouncer: DebounceCoordinator = field(default_factory=DebounceCoordinator)
    cooldown: CooldownGate = field(default_factory=CooldownGate)
    colors: ColorMemory = field(default_factory=ColorMemory)
    settle_delay: float = STATE_SETTLE_DELAY
    cover_move_delay: float = COVER_MOVE_DELAY
    background_tasks: set[asyncio.Task] = field(default_factory=set)

    def spawn(self, coro: Awaitable[Any]) -> asyncio.Task:
        """Run *coro* in the background, keeping a reference until done."""
        task = asyncio.ensure_future(coro)
        self.background_tasks.add(task)
        task.add_done_callback(self.background_tasks.discard)
        return task


class DeviceController:
    """Base class for the media / light / climate / cover controllers.

    Subclasses set ``domain`` (the Home Assistant service domain) and
    ``device_classes`` (the device classes they accept).
    """

    domain: str = ""
    device_classes: frozenset[DeviceClass] = frozenset()

    def __init__(self, ctx: BridgeContext) -> None:
        self._ctx = ctx

    def supports(self, device: Device) -> bool:
        return device.device_class in self.device_classes

    def _require(self, device: Device) -> None:
        if not self.supports(device):
            raise DeviceNotFoundError(
                f"{self.domain} device not found: {device.device_id}"
            )

    async def _read_state(self, device: Device) -> EntityState:
        return await self._ctx.client.get_state(device.entity_id)

    async def _call(
        self,
        device: Device,
        service: str,
        data: dict[str, Any] | None = None,
        success_msg: str = "",
    ) -> ServiceCallResult:
        """Call ``<domain>.<service>`` for *device*; errors propagate."""
        try:
            result = await self._ctx.client.call_service(
                self.domain, service, {"entity_id": device.entity_id, **(data or {})}
            )
        except Exception as exc:
            _LOGGER.error(
                "Error calling %s.%s for %s: %s", self.domain, service, device.name, exc
            )
            raise
        if success_msg:
            _LOGGER.info("%s %s", device.name, success_msg)
        return result

    def _push(self, device: Device, values: dict[str, float]) -> None:
        self._ctx.sink.update_state(device.virtual_type, device.device_id, values)

    async def _settle(self) -> None:
        """Give Home Assistant a moment to publish the new state."""
        if self._ctx.settle_delay:
            await asyncio.sleep(self._ctx.settle_delay)

    # Subclasses MUST override the hooks below.

    def is_on(self, state: EntityState) -> bool:
        raise NotImplementedError

    async def turn_on(self, device: Device) -> None:
        raise NotImplementedError

    async def turn_off(self, device: Device) -> None:
        raise NotImplementedError

    async def handle_twist(self, device: Device, values: dict[str, Any]) -> None:
        """Handle a continuous update from the device's Twist."""
        raise NotImplementedError

    async def initialize(self, device: Device) -> None:
        """Push the device's current state to its virtual device."""
        raise NotImplementedError
