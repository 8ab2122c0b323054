"""Data models for the Flic Twist / Home Assistant bridge."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from .const import DEFAULT_TEMP_MAX, DEFAULT_TEMP_MIN


class DeviceClass(StrEnum):
    """Kind of Home Assistant entity a controller drives."""

    MEDIA_PLAYER = "media_player"
    PLAYBACK = "playback"
    LIGHT = "light"
    COLOR_LIGHT = "color_light"
    CLIMATE = "climate"
    BLIND = "blind"


class VirtualDeviceType(StrEnum):
    """Virtual device flavour exposed to the Twist controller."""

    SPEAKER = "Speaker"
    LIGHT = "Light"
    BLIND = "Blind"


class Channel(StrEnum):
    """Debounce channel; one pending update per (device, channel)."""

    VOLUME = "volume"
    BRIGHTNESS = "brightness"
    COLOR = "color"
    COLOR_TEMP = "colortemp"
    TEMPERATURE = "temperature"
    POSITION = "position"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3)."""
    return math.floor(value + 0.5)


def round_tenth(value: float) -> float:
    """Round to one decimal place with halves going up."""
    return math.floor(value * 10 + 0.5) / 10


VIRTUAL_DEVICE_TYPES: dict[DeviceClass, VirtualDeviceType] = {
    DeviceClass.MEDIA_PLAYER: VirtualDeviceType.SPEAKER,
    DeviceClass.PLAYBACK: VirtualDeviceType.SPEAKER,
    DeviceClass.LIGHT: VirtualDeviceType.LIGHT,
    DeviceClass.COLOR_LIGHT: VirtualDeviceType.LIGHT,
    DeviceClass.CLIMATE: VirtualDeviceType.BLIND,
    DeviceClass.BLIND: VirtualDeviceType.BLIND,
}


@dataclass(frozen=True, slots=True)
class TemperatureRange:
    """Target temperature bounds in °C."""

    min: float = DEFAULT_TEMP_MIN
    max: float = DEFAULT_TEMP_MAX

    def clamp(self, value: float) -> float:
        return max(self.min, min(self.max, value))

    def from_position(self, position: float) -> float:
        """Map a 0-1 dial position onto the range, rounded to 0.1 °C."""
        return round_tenth(self.min + position * (self.max - self.min))

    def to_position(self, temperature: float) -> float:
        """Map a temperature back onto a 0-1 dial position."""
        position = (temperature - self.min) / (self.max - self.min)
        return max(0.0, min(1.0, position))


@dataclass(frozen=True, slots=True)
class Device:
    """A controllable Home Assistant entity bound to a Flic device id."""

    device_id: str
    entity_id: str
    name: str
    device_class: DeviceClass
    temp_range: TemperatureRange | None = None

    @property
    def virtual_type(self) -> VirtualDeviceType:
        return VIRTUAL_DEVICE_TYPES[self.device_class]

    @property
    def temperature_range(self) -> TemperatureRange:
        return self.temp_range or TemperatureRange()


@dataclass(frozen=True, slots=True)
class EntityState:
    """Snapshot of a Home Assistant entity from the states endpoint."""

    entity_id: str
    state: str
    attributes: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> EntityState:
        return cls(
            entity_id=data.get("entity_id", ""),
            state=str(data.get("state", "unknown")),
            attributes=data.get("attributes") or {},
        )

    def attribute(self, name: str, default: Any = None) -> Any:
        value = self.attributes.get(name)
        return default if value is None else value


@dataclass(frozen=True, slots=True)
class ServiceCallResult:
    """Outcome of a service call."""

    success: bool
    status_code: int
