"""Dispatch Flic action messages and Twist updates to the controllers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

from .climate import ClimateController
from .config import BridgeConfig
from .const import (
    BRIGHTNESS_BRIGHT,
    BRIGHTNESS_DIM,
    BRIGHTNESS_STEP,
    HVAC_MODE_AUTO,
    HVAC_MODE_COOL,
    HVAC_MODE_HEAT,
    POSITION_STEP,
    TEMPERATURE_STEP,
    VOLUME_STEP,
)
from .cover import CoverController
from .entity import BridgeContext, DeviceController
from .exceptions import DeviceNotFoundError
from .light import LightController
from .media import MediaController
from .models import Device, DeviceClass, VirtualDeviceType

_LOGGER = logging.getLogger(__name__)

ActionHandler = Callable[[Device], Awaitable[None]]


class FlicBridge:
    """Route controller events to Home Assistant.

    Every public handler isolates its own failures: errors are logged and
    never reach the event source.
    """

    def __init__(self, config: BridgeConfig, ctx: BridgeContext) -> None:
        self._config = config
        self._ctx = ctx

        self.media = MediaController(ctx)
        self.lights = LightController(ctx)
        self.climate = ClimateController(ctx)
        self.covers = CoverController(ctx)

        self._controllers: dict[DeviceClass, DeviceController] = {
            DeviceClass.MEDIA_PLAYER: self.media,
            DeviceClass.PLAYBACK: self.media,
            DeviceClass.LIGHT: self.lights,
            DeviceClass.COLOR_LIGHT: self.lights,
            DeviceClass.CLIMATE: self.climate,
            DeviceClass.BLIND: self.covers,
        }

        self._actions: dict[str, ActionHandler] = {
            # media
            "volume up": lambda d: self.media.adjust_volume(d, VOLUME_STEP),
            "volume down": lambda d: self.media.adjust_volume(d, -VOLUME_STEP),
            "mute": self.media.toggle_mute,
            # lights
            "brightness up": lambda d: self.lights.adjust_brightness(d, BRIGHTNESS_STEP),
            "brightness down": lambda d: self.lights.adjust_brightness(
                d, -BRIGHTNESS_STEP
            ),
            "bright": lambda d: self.lights.set_brightness(d, BRIGHTNESS_BRIGHT),
            "dim": lambda d: self.lights.set_brightness(d, BRIGHTNESS_DIM),
            # climate
            "temp up": lambda d: self.climate.adjust_temperature(d, TEMPERATURE_STEP),
            "temp down": lambda d: self.climate.adjust_temperature(
                d, -TEMPERATURE_STEP
            ),
            "heat": lambda d: self._set_mode(d, HVAC_MODE_HEAT),
            "cool": lambda d: self._set_mode(d, HVAC_MODE_COOL),
            "auto": lambda d: self._set_mode(d, HVAC_MODE_AUTO),
            # covers
            "open": self._open,
            "close": self._close,
            "stop": self._stop,
            "position up": lambda d: self.covers.adjust_position(d, POSITION_STEP),
            "position down": lambda d: self.covers.adjust_position(d, -POSITION_STEP),
            # any device
            "power": self.toggle_power,
            "on": self.turn_on,
            "off": self.turn_off,
        }

    @property
    def context(self) -> BridgeContext:
        return self._ctx

    @property
    def actions(self) -> frozenset[str]:
        return frozenset(self._actions)

    def controller_for(self, device: Device) -> DeviceController:
        return self._controllers[device.device_class]

    # ------------------------------------------------------------------
    #  Action messages
    # ------------------------------------------------------------------

    async def handle_action_message(self, message: str) -> None:
        """Handle ``"<device-id> <action>"`` from a Flic button."""
        _LOGGER.debug("Received action message: %s", message)

        parts = message.lower().split()
        if len(parts) < 2:
            _LOGGER.warning(
                'Invalid action message %r, expected "<device-id> <action>"', message
            )
            return

        device_id, action = parts[0], " ".join(parts[1:])
        device = self._config.get_device(device_id)
        if device is None:
            _LOGGER.error("Unknown device: %s", device_id)
            return

        handler = self._actions.get(action)
        if handler is None:
            _LOGGER.warning("Unknown action for device %s: %s", device_id, action)
            return

        try:
            await handler(device)
        except DeviceNotFoundError as exc:
            _LOGGER.error("Action %r not supported: %s", action, exc)
        except Exception as exc:
            _LOGGER.error(
                'Error executing action "%s" for device %s: %s', action, device_id, exc
            )

    async def _set_mode(self, device: Device, mode: str) -> None:
        await self.climate.set_hvac_mode(device, mode)

    async def _open(self, device: Device) -> None:
        await self.covers.open(device)

    async def _close(self, device: Device) -> None:
        await self.covers.close(device)

    async def _stop(self, device: Device) -> None:
        await self.covers.stop(device)

    async def turn_on(self, device: Device) -> None:
        await self.controller_for(device).turn_on(device)

    async def turn_off(self, device: Device) -> None:
        await self.controller_for(device).turn_off(device)

    async def toggle_power(self, device: Device) -> None:
        controller = self.controller_for(device)
        state = await self._ctx.client.get_state(device.entity_id)
        if controller.is_on(state):
            await controller.turn_off(device)
        else:
            await controller.turn_on(device)

    # ------------------------------------------------------------------
    #  Twist updates
    # ------------------------------------------------------------------

    async def handle_virtual_device_update(
        self,
        device_id: str,
        device_type: VirtualDeviceType | str,
        values: dict[str, Any],
    ) -> None:
        """Handle a continuous update from a Twist virtual device."""
        device = self._config.get_device(device_id)
        if device is None:
            _LOGGER.error("Device not found: %s", device_id)
            return

        try:
            device_type = VirtualDeviceType(device_type)
        except ValueError:
            _LOGGER.warning("Unknown virtual device type %r for %s", device_type, device_id)
            return

        if device.virtual_type is not device_type:
            _LOGGER.debug(
                "Ignoring %s update for %s (%s)",
                device_type, device.name, device.device_class,
            )
            return

        try:
            await self.controller_for(device).handle_twist(device, values)
        except Exception as exc:
            _LOGGER.error(
                "Error handling virtual device update for %s: %s", device.name, exc
            )

    # ------------------------------------------------------------------
    #  Lifecycle
    # ------------------------------------------------------------------

    def create_virtual_devices(self) -> None:
        for device in self._config.devices.values():
            self._ctx.sink.create_device(
                device.device_id, device.virtual_type, device.name
            )
            _LOGGER.info(
                "Created virtual device: %s (%s)", device.name, device.virtual_type
            )

    async def async_initialize_states(self) -> None:
        """Push the current Home Assistant state of every device to its dial."""
        for device in self._config.devices.values():
            try:
                await self.controller_for(device).initialize(device)
            except Exception as exc:
                _LOGGER.error("Error initializing %s: %s", device.name, exc)
        _LOGGER.info("Virtual device states initialized")

    async def async_close(self) -> None:
        await self._ctx.debouncer.async_shutdown()
        tasks = list(self._ctx.background_tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        await self._ctx.client.close()
