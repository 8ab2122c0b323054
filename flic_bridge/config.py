"""Configuration schema and loading for the bridge."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import voluptuous as vol

from .const import DEFAULT_REQUEST_TIMEOUT, DEFAULT_TEMP_MAX, DEFAULT_TEMP_MIN
from .models import Device, DeviceClass, TemperatureRange

_LOGGER = logging.getLogger(__name__)

CONF_BASE_URL = "base_url"
CONF_TOKEN = "token"
CONF_REQUEST_TIMEOUT = "request_timeout"
CONF_DEVICES = "devices"

CONF_ID = "id"
CONF_ENTITY_ID = "entity_id"
CONF_NAME = "name"
CONF_TYPE = "type"
CONF_TEMP_RANGE = "temp_range"
CONF_MIN = "min"
CONF_MAX = "max"


def _ordered_range(value: dict[str, float]) -> dict[str, float]:
    if value[CONF_MIN] >= value[CONF_MAX]:
        raise vol.Invalid("temp_range min must be lower than max")
    return value


def _unique_ids(devices: list[dict[str, Any]]) -> list[dict[str, Any]]:
    seen: set[str] = set()
    for device in devices:
        if device[CONF_ID] in seen:
            raise vol.Invalid(f"duplicate device id: {device[CONF_ID]}")
        seen.add(device[CONF_ID])
    return devices


TEMP_RANGE_SCHEMA = vol.All(
    {
        vol.Optional(CONF_MIN, default=DEFAULT_TEMP_MIN): vol.Coerce(float),
        vol.Optional(CONF_MAX, default=DEFAULT_TEMP_MAX): vol.Coerce(float),
    },
    _ordered_range,
)

DEVICE_SCHEMA = vol.Schema(
    {
        # Action messages are lower-cased before lookup.
        vol.Required(CONF_ID): vol.All(str, vol.Length(min=1), vol.Lower),
        vol.Required(CONF_ENTITY_ID): vol.All(str, vol.Match(r"^\w+\.\w+$")),
        vol.Optional(CONF_NAME): str,
        vol.Required(CONF_TYPE): vol.All(str, vol.Coerce(DeviceClass)),
        vol.Optional(CONF_TEMP_RANGE): TEMP_RANGE_SCHEMA,
    }
)

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_BASE_URL): vol.All(str, vol.Match(r"^https?://")),
        vol.Required(CONF_TOKEN): vol.All(str, vol.Length(min=1)),
        vol.Optional(CONF_REQUEST_TIMEOUT, default=DEFAULT_REQUEST_TIMEOUT): vol.All(
            vol.Coerce(int), vol.Range(min=1, max=30)
        ),
        vol.Optional(CONF_DEVICES, default=list): vol.All(
            [DEVICE_SCHEMA], _unique_ids
        ),
    },
    extra=vol.REMOVE_EXTRA,
)


@dataclass(frozen=True, slots=True)
class BridgeConfig:
    """Validated bridge configuration."""

    base_url: str
    token: str
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT
    devices: dict[str, Device] = field(default_factory=dict)

    def get_device(self, device_id: str) -> Device | None:
        return self.devices.get(device_id.lower())


def _build_device(conf: dict[str, Any]) -> Device:
    temp_range = None
    if CONF_TEMP_RANGE in conf:
        temp_range = TemperatureRange(
            min=conf[CONF_TEMP_RANGE][CONF_MIN],
            max=conf[CONF_TEMP_RANGE][CONF_MAX],
        )
    elif conf[CONF_TYPE] is DeviceClass.CLIMATE:
        temp_range = TemperatureRange()

    return Device(
        device_id=conf[CONF_ID],
        entity_id=conf[CONF_ENTITY_ID],
        name=conf.get(CONF_NAME, conf[CONF_ID]),
        device_class=conf[CONF_TYPE],
        temp_range=temp_range,
    )


def load_config(raw: dict[str, Any]) -> BridgeConfig:
    """Validate *raw* and build a :class:`BridgeConfig`.

    Raises ``vol.Invalid`` (or ``vol.MultipleInvalid``) on bad input.
    """
    conf = CONFIG_SCHEMA(raw)
    devices = {d[CONF_ID]: _build_device(d) for d in conf[CONF_DEVICES]}
    _LOGGER.debug(
        "Configured devices: %s", ", ".join(d.name for d in devices.values())
    )
    return BridgeConfig(
        base_url=conf[CONF_BASE_URL].rstrip("/"),
        token=conf[CONF_TOKEN],
        request_timeout=conf[CONF_REQUEST_TIMEOUT],
        devices=devices,
    )


def load_config_file(path: str | Path) -> BridgeConfig:
    """Read a JSON configuration file and validate it."""
    with open(path, encoding="utf-8") as handle:
        raw = json.load(handle)
    return load_config(raw)
