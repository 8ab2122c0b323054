"""Bridge Flic buttons and Twist controllers to Home Assistant."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from .bridge import FlicBridge
from .client import HomeAssistantClient
from .config import BridgeConfig, load_config
from .const import SETUP_ATTEMPTS, SETUP_RETRY_DELAY
from .entity import BridgeContext
from .exceptions import (
    HomeAssistantAuthenticationError,
    HomeAssistantConnectionError,
    HomeAssistantError,
)
from .sink import VirtualStateSink

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "BridgeConfig",
    "FlicBridge",
    "HomeAssistantClient",
    "HomeAssistantError",
    "VirtualStateSink",
    "async_setup_bridge",
    "async_unload_bridge",
    "load_config",
]


async def async_setup_bridge(
    config: BridgeConfig | dict[str, Any],
    sink: VirtualStateSink,
    session: aiohttp.ClientSession | None = None,
    debug: bool = False,
) -> FlicBridge:
    """Connect to Home Assistant and prepare the virtual devices.

    With *debug* set, every request and response body is logged.
    """
    if not isinstance(config, BridgeConfig):
        config = load_config(config)

    client = HomeAssistantClient(
        base_url=config.base_url,
        token=config.token,
        request_timeout=config.request_timeout,
        session=session,
        debug=debug,
    )

    try:
        for remaining in reversed(range(SETUP_ATTEMPTS)):
            try:
                message = await client.check_api()
                break
            except HomeAssistantAuthenticationError:
                raise
            except HomeAssistantError:
                if remaining == 0:
                    raise
                await asyncio.sleep(SETUP_RETRY_DELAY)
    except HomeAssistantConnectionError:
        _LOGGER.error(
            "Connection error: check the Home Assistant URL and network "
            "connectivity (%s)", config.base_url,
        )
        await client.close()
        raise
    except HomeAssistantAuthenticationError:
        _LOGGER.error("Authentication error: check the long-lived access token")
        await client.close()
        raise
    except HomeAssistantError:
        await client.close()
        raise

    _LOGGER.info("Home Assistant API connected: %s", message)

    bridge = FlicBridge(config, BridgeContext(client=client, sink=sink))
    bridge.create_virtual_devices()
    await bridge.async_initialize_states()
    return bridge


async def async_unload_bridge(bridge: FlicBridge) -> None:
    """Cancel pending updates and release the HTTP session."""
    await bridge.async_close()
