"""Exceptions for the Flic Twist / Home Assistant bridge."""

from __future__ import annotations


class HomeAssistantError(Exception):
    """Base bridge exception."""


class HomeAssistantAuthenticationError(HomeAssistantError):
    """Home Assistant rejected the access token (401 / 403)."""


class HomeAssistantCommandError(HomeAssistantError):
    """Home Assistant rejected a request (non-2xx status or bad body)."""


class HomeAssistantConnectionError(HomeAssistantError):
    """Home Assistant unreachable or the request timed out."""


class DeviceNotFoundError(HomeAssistantError):
    """Unknown device id, or a device of the wrong class for the operation."""


class InvalidInputError(HomeAssistantError):
    """Controller value of an unexpected shape."""
