"""Lights: brightness, power, hue/saturation and color temperature."""

from __future__ import annotations

import logging
from typing import Any

from .color_memory import is_meaningful, rgb_to_hs
from .const import (
    BRIGHTNESS_MAX,
    DEFAULT_COLOR_TEMPERATURE,
    DEFAULT_HUE,
    DEFAULT_SATURATION,
    HUE_MAX,
    MIREDS_MAX,
    MIREDS_MIN,
    SATURATION_MAX,
)
from .entity import DeviceController
from .exceptions import DeviceNotFoundError, HomeAssistantError
from .models import (
    Channel,
    Device,
    DeviceClass,
    EntityState,
    ServiceCallResult,
    round_half_up,
)

_LOGGER = logging.getLogger(__name__)


def _unit(value: float) -> float:
    return max(0.0, min(1.0, value))


def clamp_brightness(value: float) -> int:
    return max(0, min(BRIGHTNESS_MAX, round_half_up(value)))


def mireds_from_normalized(value: float) -> int:
    """Map 0-1 onto the 154-500 mired scale."""
    return round_half_up(MIREDS_MIN + value * (MIREDS_MAX - MIREDS_MIN))


def normalized_from_mireds(mireds: float) -> float:
    return _unit((mireds - MIREDS_MIN) / (MIREDS_MAX - MIREDS_MIN))


class LightController(DeviceController):
    """Brightness and color control for ``light`` entities."""

    domain = "light"
    device_classes = frozenset({DeviceClass.LIGHT, DeviceClass.COLOR_LIGHT})

    def _require_color(self, device: Device) -> None:
        if device.device_class is not DeviceClass.COLOR_LIGHT:
            raise DeviceNotFoundError(
                f"Color light device not found: {device.device_id}"
            )

    # ── Brightness / power ──────────────────────────────────────────

    async def set_brightness(self, device: Device, brightness: float) -> None:
        """Set brightness (0-255); zero turns the light off instead."""
        self._require(device)
        value = clamp_brightness(brightness)
        if value == 0:
            await self.turn_off(device)
            return
        await self._call(
            device, "turn_on", {"brightness": value}, f"brightness set to {value}"
        )
        await self.sync_state(device)

    async def adjust_brightness(self, device: Device, delta: int) -> None:
        self._require(device)
        current = await self.sync_state(device)
        await self.set_brightness(device, clamp_brightness((current or 0) + delta))

    def is_on(self, state: EntityState) -> bool:
        return state.state == "on"

    async def turn_on(self, device: Device) -> None:
        self._require(device)
        await self._call(device, "turn_on", success_msg="turned on")
        await self.sync_state(device)

    async def turn_off(self, device: Device) -> None:
        self._require(device)
        await self._call(device, "turn_off", success_msg="turned off")
        await self.sync_state(device)

    # ── Color ───────────────────────────────────────────────────────

    async def set_rgb_color(
        self, device: Device, rgb: tuple[float, float, float]
    ) -> ServiceCallResult:
        self._require_color(device)
        red, green, blue = (clamp_brightness(c) for c in rgb)
        result = await self._call(
            device, "turn_on", {"rgb_color": [red, green, blue]}
        )
        self._ctx.colors.remember(device.device_id, *rgb_to_hs(red, green, blue))
        await self._settle()
        await self.sync_state(device)
        return result

    async def apply_color_update(
        self,
        device: Device,
        hue: float | None = None,
        saturation: float | None = None,
    ) -> tuple[float, float]:
        """Apply a normalized (0-1) hue and/or saturation change.

        Values that are not supplied keep the light's current color. When
        saturation rises out of white and no hue was given, the remembered
        hue is used because the observed hue of a white light is noise.
        Returns the applied (hue, saturation) in degrees / percent.
        """
        self._require_color(device)
        colors = self._ctx.colors
        state = await self._read_state(device)

        current_hue, current_sat = float(DEFAULT_HUE), float(DEFAULT_SATURATION)
        hs_color = state.attribute("hs_color")
        if hs_color:
            current_hue, current_sat = float(hs_color[0]), float(hs_color[1])
            colors.remember(device.device_id, current_hue, current_sat)

        final_hue, final_sat = current_hue, current_sat
        if hue is not None:
            final_hue = round_half_up(hue * HUE_MAX)

        if saturation is not None:
            new_sat = round_half_up(saturation * SATURATION_MAX)
            leaving_white = not is_meaningful(current_sat) and is_meaningful(new_sat)
            if hue is None and leaving_white and device.device_id in colors:
                final_hue, _ = colors.recall(device.device_id)
                _LOGGER.debug(
                    "Restoring %s from white with remembered hue %s",
                    device.name, final_hue,
                )
            elif hue is None and leaving_white:
                _LOGGER.debug("No remembered color for %s, keeping hue", device.name)
            final_sat = new_sat

        colors.remember(device.device_id, final_hue, final_sat)

        await self._call(device, "turn_on", {"hs_color": [final_hue, final_sat]})
        await self._settle()
        await self.sync_state(device)
        return final_hue, final_sat

    async def apply_color_temperature(self, device: Device, value: float) -> int:
        """Apply a normalized (0-1) color temperature; returns the mireds."""
        self._require_color(device)
        mireds = mireds_from_normalized(value)
        await self._call(device, "turn_on", {"color_temp": mireds})
        await self._settle()
        await self.sync_state(device)
        return mireds

    # ── Read-back ───────────────────────────────────────────────────

    def _light_payload(self, device: Device, state: EntityState) -> dict[str, float]:
        brightness = 0
        if state.state == "on":
            brightness = state.attribute("brightness", 0)
        payload = {"brightness": _unit(brightness / BRIGHTNESS_MAX)}

        if device.device_class is not DeviceClass.COLOR_LIGHT:
            payload["hue"] = 0.0
            payload["saturation"] = 0.0
            return payload

        hs_color = state.attribute("hs_color")
        rgb_color = state.attribute("rgb_color")
        if hs_color:
            hue, sat = float(hs_color[0]), float(hs_color[1])
        elif rgb_color:
            hue, sat = rgb_to_hs(*rgb_color)
        else:
            hue, sat = 0.0, 0.0

        if hs_color or rgb_color:
            self._ctx.colors.remember(device.device_id, hue, sat)
        payload["hue"] = _unit(hue / HUE_MAX)
        payload["saturation"] = _unit(sat / SATURATION_MAX)

        mireds = state.attribute("color_temp")
        payload["colorTemperature"] = (
            normalized_from_mireds(mireds) if mireds else DEFAULT_COLOR_TEMPERATURE
        )
        return payload

    async def sync_state(self, device: Device) -> int | None:
        """Push the authoritative light state to the dial; return brightness."""
        try:
            state = await self._read_state(device)
        except HomeAssistantError as exc:
            _LOGGER.error(
                "Error getting current brightness for %s: %s", device.name, exc
            )
            return None
        self._push(device, self._light_payload(device, state))
        return state.attribute("brightness", 0) if state.state == "on" else 0

    # ── Twist handler ───────────────────────────────────────────────

    async def handle_twist(self, device: Device, values: dict[str, Any]) -> None:
        """Debounce brightness, color and color temperature twists.

        Brightness zero switches the light off immediately and skips the
        color channels.
        """
        debouncer = self._ctx.debouncer

        if values.get("brightness") is not None:
            brightness = round_half_up(float(values["brightness"]) * BRIGHTNESS_MAX)
            if brightness == 0:
                try:
                    await self.turn_off(device)
                except Exception as exc:
                    _LOGGER.error("Failed to turn off light %s: %s", device.name, exc)
                return

            def _local(expected: int) -> None:
                self._push(
                    device,
                    {
                        "brightness": expected / BRIGHTNESS_MAX,
                        "hue": values.get("hue") or 0.0,
                        "saturation": values.get("saturation") or 0.0,
                        "colorTemperature": values.get("colorTemperature")
                        or DEFAULT_COLOR_TEMPERATURE,
                    },
                )

            async def _apply_brightness(final: int) -> None:
                await self.set_brightness(device, final)

            debouncer.schedule_update(
                device.device_id, Channel.BRIGHTNESS, brightness,
                _apply_brightness, _local,
            )

        if device.device_class is not DeviceClass.COLOR_LIGHT:
            return

        if values.get("hue") is not None or values.get("saturation") is not None:
            color = {"hue": values.get("hue"), "saturation": values.get("saturation")}

            async def _apply_color(final: dict[str, float | None]) -> None:
                await self.apply_color_update(
                    device, hue=final["hue"], saturation=final["saturation"]
                )

            debouncer.schedule_update(
                device.device_id, Channel.COLOR, color, _apply_color
            )

        if values.get("colorTemperature") is not None:

            async def _apply_color_temp(final: float) -> None:
                await self.apply_color_temperature(device, final)

            debouncer.schedule_update(
                device.device_id, Channel.COLOR_TEMP,
                float(values["colorTemperature"]), _apply_color_temp,
            )

    async def initialize(self, device: Device) -> None:
        await self.sync_state(device)
