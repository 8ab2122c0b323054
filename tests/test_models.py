"""Tests for the bridge data models."""

from __future__ import annotations

import dataclasses

import pytest

from flic_bridge.models import (
    Channel,
    Device,
    DeviceClass,
    EntityState,
    TemperatureRange,
    VirtualDeviceType,
    round_half_up,
    round_tenth,
)


class TestDevice:
    """Tests for the Device dataclass."""

    def test_creation(self, media_device):
        assert media_device.device_id == "livingroom_tv"
        assert media_device.entity_id == "media_player.living_room_tv"
        assert media_device.device_class is DeviceClass.MEDIA_PLAYER
        assert media_device.temp_range is None

    def test_frozen(self, media_device):
        with pytest.raises(dataclasses.FrozenInstanceError):
            media_device.name = "new"

    def test_slots(self, media_device):
        """Frozen + slots dataclasses reject arbitrary attributes."""
        with pytest.raises((AttributeError, TypeError)):
            media_device.nonexistent = True

    @pytest.mark.parametrize(
        ("device_class", "expected"),
        [
            (DeviceClass.MEDIA_PLAYER, VirtualDeviceType.SPEAKER),
            (DeviceClass.PLAYBACK, VirtualDeviceType.SPEAKER),
            (DeviceClass.LIGHT, VirtualDeviceType.LIGHT),
            (DeviceClass.COLOR_LIGHT, VirtualDeviceType.LIGHT),
            (DeviceClass.CLIMATE, VirtualDeviceType.BLIND),
            (DeviceClass.BLIND, VirtualDeviceType.BLIND),
        ],
    )
    def test_virtual_type(self, device_class, expected):
        device = Device("dev", "x.dev", "Dev", device_class)
        assert device.virtual_type is expected

    def test_every_class_has_a_virtual_type(self):
        for device_class in DeviceClass:
            assert Device("d", "x.d", "D", device_class).virtual_type

    def test_default_temperature_range(self, media_device):
        assert media_device.temperature_range == TemperatureRange(16.0, 30.0)


class TestTemperatureRange:
    """Tests for dial position <-> temperature mapping."""

    def test_midpoint(self):
        assert TemperatureRange(16, 30).from_position(0.5) == 23.0

    def test_rounds_to_one_decimal(self):
        assert TemperatureRange(16, 30).from_position(0.333) == 20.7

    def test_half_tenth_rounds_up(self):
        assert TemperatureRange(16, 17).from_position(0.25) == 16.3

    def test_to_position_clamped(self):
        temp_range = TemperatureRange(16, 30)
        assert temp_range.to_position(10) == 0.0
        assert temp_range.to_position(35) == 1.0
        assert temp_range.to_position(23) == pytest.approx(0.5)

    def test_clamp(self):
        temp_range = TemperatureRange(18, 28)
        assert temp_range.clamp(12.0) == 18
        assert temp_range.clamp(31.5) == 28
        assert temp_range.clamp(21.5) == 21.5


class TestRounding:
    """Halves always round up, never to even."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(62.5, 63), (0.5, 1), (1.5, 2), (2.5, 3), (127.5, 128), (2.49, 2), (-2.5, -2)],
    )
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    @pytest.mark.parametrize(
        ("value", "expected"), [(16.25, 16.3), (20.75, 20.8), (21.46, 21.5), (21.44, 21.4)]
    )
    def test_round_tenth(self, value, expected):
        assert round_tenth(value) == expected


class TestEntityState:
    """Tests for parsing the states endpoint."""

    def test_from_json(self):
        state = EntityState.from_json(
            {
                "entity_id": "media_player.tv",
                "state": "playing",
                "attributes": {"volume_level": 0.4},
            }
        )
        assert state.state == "playing"
        assert state.attribute("volume_level") == 0.4

    def test_missing_attributes(self):
        state = EntityState.from_json({"entity_id": "light.x", "state": "off"})
        assert state.attributes == {}
        assert state.attribute("brightness", 0) == 0

    def test_null_attribute_uses_default(self):
        state = EntityState("light.x", "on", {"brightness": None})
        assert state.attribute("brightness", 0) == 0


class TestChannel:
    def test_channel_values(self):
        assert {c.value for c in Channel} == {
            "volume", "brightness", "color", "colortemp", "temperature", "position",
        }
