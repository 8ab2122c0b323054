"""Media players: volume, mute, power and the playback dial."""

from __future__ import annotations

import logging
from typing import Any

from .const import (
    MEDIA_OFF_STATES,
    MEDIA_STATE_PAUSED,
    MEDIA_STATE_PLAYING,
    PLAYBACK_CENTER,
    PLAYBACK_THRESHOLD,
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


def _volume_percent(state: EntityState) -> float | None:
    level = state.attribute("volume_level")
    if level is None:
        return None
    return float(level) * 100


class MediaController(DeviceController):
    """Volume and playback control for ``media_player`` entities."""

    domain = "media_player"
    device_classes = frozenset({DeviceClass.MEDIA_PLAYER, DeviceClass.PLAYBACK})

    # ── Volume ──────────────────────────────────────────────────────

    async def set_volume(self, device: Device, percent: float) -> ServiceCallResult:
        """Set the volume in percent (0-100) and read it back."""
        self._require(device)
        percent = max(0.0, min(100.0, float(percent)))
        result = await self._call(
            device, "volume_set", {"volume_level": percent / 100}
        )
        await self.sync_volume(device)
        return result

    async def adjust_volume(self, device: Device, delta: float) -> None:
        """Step the volume by *delta* percent unless the cooldown is active."""
        self._require(device)
        if self._ctx.cooldown.is_blocked():
            _LOGGER.debug(
                "Volume change for %s ignored: cooldown active (%.1fs left)",
                device.name, self._ctx.cooldown.remaining(),
            )
            return

        current = _volume_percent(await self._read_state(device))
        if current is None:
            _LOGGER.warning("%s reports no volume_level; not adjusting", device.name)
            return

        await self.set_volume(device, max(0.0, min(100.0, current + delta)))

    async def toggle_mute(self, device: Device) -> None:
        self._require(device)
        state = await self._read_state(device)
        muted = not bool(state.attribute("is_volume_muted", False))
        await self._call(
            device,
            "volume_mute",
            {"is_volume_muted": muted},
            "muted" if muted else "unmuted",
        )

    async def sync_volume(self, device: Device) -> float | None:
        """Push the authoritative volume to the dial; return it in percent."""
        try:
            current = _volume_percent(await self._read_state(device))
        except HomeAssistantError as exc:
            _LOGGER.error("Error getting current volume for %s: %s", device.name, exc)
            return None
        if current is None:
            _LOGGER.debug("%s reports no volume_level", device.name)
            return None
        self._push(device, {"volume": max(0.0, min(1.0, current / 100))})
        return current

    # ── Power ───────────────────────────────────────────────────────

    def is_on(self, state: EntityState) -> bool:
        return state.state not in MEDIA_OFF_STATES

    async def turn_on(self, device: Device) -> None:
        self._require(device)
        await self._call(device, "turn_on", success_msg="power on")

    async def turn_off(self, device: Device) -> None:
        self._require(device)
        await self._call(device, "turn_off", success_msg="power off")

    # ── Playback ────────────────────────────────────────────────────

    async def pause(self, device: Device) -> ServiceCallResult:
        self._require(device)
        return await self._call(device, "media_pause", success_msg="playback paused")

    async def play(self, device: Device) -> ServiceCallResult:
        self._require(device)
        return await self._call(device, "media_play", success_msg="playback resumed")

    async def next_track(self, device: Device) -> ServiceCallResult:
        self._require(device)
        return await self._call(
            device, "media_next_track", success_msg="skipped to next track"
        )

    async def playback_state(self, device: Device) -> str:
        return (await self._read_state(device)).state

    async def step_playback(self, device: Device, forward: bool) -> None:
        """Pause, or resume / skip / start depending on the current state."""
        if not forward:
            await self.pause(device)
            return

        current = await self.playback_state(device)
        if current == MEDIA_STATE_PAUSED:
            await self.play(device)
        elif current == MEDIA_STATE_PLAYING:
            await self.next_track(device)
        else:
            _LOGGER.debug(
                "%s is %s, attempting to start playback", device.name, current
            )
            await self.play(device)

    # ── Twist handlers ──────────────────────────────────────────────

    def center_dial(self, device: Device) -> None:
        self._push(device, {"volume": PLAYBACK_CENTER})

    async def handle_playback_twist(
        self, device: Device, values: dict[str, Any]
    ) -> None:
        """Turn a twist of the playback dial into a playback command.

        The dial always springs back to center afterwards. Inside the
        cooldown window the twist is rejected.
        """
        volume = values.get("volume")
        if volume is None:
            return

        change = float(volume) - PLAYBACK_CENTER
        if abs(change) > PLAYBACK_THRESHOLD:
            cooldown = self._ctx.cooldown
            if cooldown.is_blocked():
                _LOGGER.debug(
                    "Playback command for %s ignored: cooldown active (%.1fs left)",
                    device.name, cooldown.remaining(),
                )
                self.center_dial(device)
                return

            # The window starts when the command is sent, even if it fails.
            cooldown.mark_fired()
            try:
                await self.step_playback(device, forward=change > 0)
            except Exception as exc:
                _LOGGER.error(
                    "Error executing playback command for %s: %s", device.name, exc
                )

        self.center_dial(device)

    async def handle_volume_twist(
        self, device: Device, values: dict[str, Any]
    ) -> None:
        """Debounce a volume twist; the dial reflects every position."""
        volume = values.get("volume")
        if volume is None:
            return
        if self._ctx.cooldown.is_blocked():
            _LOGGER.debug("Volume twist for %s ignored: cooldown active", device.name)
            return

        percent = round_half_up(float(volume) * 100)

        async def _apply(final: int) -> None:
            await self.set_volume(device, final)

        self._ctx.debouncer.schedule_update(
            device.device_id,
            Channel.VOLUME,
            percent,
            _apply,
            lambda expected: self._push(device, {"volume": expected / 100}),
        )

    async def handle_twist(self, device: Device, values: dict[str, Any]) -> None:
        if device.device_class is DeviceClass.PLAYBACK:
            await self.handle_playback_twist(device, values)
        else:
            await self.handle_volume_twist(device, values)

    async def initialize(self, device: Device) -> None:
        if device.device_class is DeviceClass.PLAYBACK:
            self.center_dial(device)
        else:
            await self.sync_volume(device)
