"""Shared fixtures for bridge tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from flic_bridge.bridge import FlicBridge
from flic_bridge.config import load_config
from flic_bridge.entity import BridgeContext
from flic_bridge.models import (
    Device,
    DeviceClass,
    EntityState,
    ServiceCallResult,
    TemperatureRange,
)

RAW_CONFIG: dict[str, Any] = {
    "base_url": "http://homeassistant.local:8123",
    "token": "test-token",
    "devices": [
        {
            "id": "livingroom_tv",
            "entity_id": "media_player.living_room_tv",
            "name": "Living Room TV",
            "type": "media_player",
        },
        {
            "id": "playback_control",
            "entity_id": "media_player.living_room_tv",
            "name": "Playback Control",
            "type": "playback",
        },
        {
            "id": "bedroom_light",
            "entity_id": "light.bedroom_ceiling",
            "name": "Bedroom Light",
            "type": "light",
        },
        {
            "id": "kitchen_color_light",
            "entity_id": "light.kitchen_color_strip",
            "name": "Kitchen Color Light",
            "type": "color_light",
        },
        {
            "id": "living_room_thermostat",
            "entity_id": "climate.living_room",
            "name": "Living Room Thermostat",
            "type": "climate",
            "temp_range": {"min": 16, "max": 30},
        },
        {
            "id": "living_room_blinds",
            "entity_id": "cover.living_room_blinds",
            "name": "Living Room Blinds",
            "type": "blind",
        },
    ],
}


def make_state(entity_id: str, state: str = "on", **attributes: Any) -> EntityState:
    """Build an EntityState the way the states endpoint would return it."""
    return EntityState(entity_id=entity_id, state=state, attributes=attributes)


def service_calls(client: AsyncMock) -> list[tuple[str, str, dict[str, Any]]]:
    """Return every (domain, service, data) the client was asked to call."""
    return [call.args for call in client.call_service.await_args_list]


def sink_writes(sink: MagicMock) -> list[tuple[Any, str, dict[str, float]]]:
    """Return every (device_type, device_id, values) pushed to the sink."""
    return [call.args for call in sink.update_state.call_args_list]


@pytest.fixture
def mock_client() -> AsyncMock:
    """Return a fully-mocked HomeAssistantClient."""
    client = AsyncMock()
    client.check_api = AsyncMock(return_value="API running.")
    client.get_state = AsyncMock(
        side_effect=lambda entity_id: make_state(entity_id, "on")
    )
    client.call_service = AsyncMock(
        return_value=ServiceCallResult(success=True, status_code=200)
    )
    client.close = AsyncMock()
    return client


@pytest.fixture
def mock_sink() -> MagicMock:
    """Return a recording virtual state sink."""
    return MagicMock()


@pytest.fixture
def ctx(mock_client, mock_sink) -> BridgeContext:
    """Bridge context with no settle / cover movement delays."""
    return BridgeContext(
        client=mock_client,
        sink=mock_sink,
        settle_delay=0,
        cover_move_delay=0,
    )


@pytest.fixture
def bridge_config():
    return load_config(RAW_CONFIG)


@pytest.fixture
def bridge(bridge_config, ctx) -> FlicBridge:
    return FlicBridge(bridge_config, ctx)


@pytest.fixture
def media_device() -> Device:
    return Device(
        device_id="livingroom_tv",
        entity_id="media_player.living_room_tv",
        name="Living Room TV",
        device_class=DeviceClass.MEDIA_PLAYER,
    )


@pytest.fixture
def playback_device() -> Device:
    return Device(
        device_id="playback_control",
        entity_id="media_player.living_room_tv",
        name="Playback Control",
        device_class=DeviceClass.PLAYBACK,
    )


@pytest.fixture
def light_device() -> Device:
    return Device(
        device_id="bedroom_light",
        entity_id="light.bedroom_ceiling",
        name="Bedroom Light",
        device_class=DeviceClass.LIGHT,
    )


@pytest.fixture
def color_light_device() -> Device:
    return Device(
        device_id="kitchen_color_light",
        entity_id="light.kitchen_color_strip",
        name="Kitchen Color Light",
        device_class=DeviceClass.COLOR_LIGHT,
    )


@pytest.fixture
def climate_device() -> Device:
    return Device(
        device_id="living_room_thermostat",
        entity_id="climate.living_room",
        name="Living Room Thermostat",
        device_class=DeviceClass.CLIMATE,
        temp_range=TemperatureRange(min=16, max=30),
    )


@pytest.fixture
def blind_device() -> Device:
    return Device(
        device_id="living_room_blinds",
        entity_id="cover.living_room_blinds",
        name="Living Room Blinds",
        device_class=DeviceClass.BLIND,
    )
