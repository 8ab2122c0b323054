"""Tests for the bridge exception hierarchy."""

from __future__ import annotations

from flic_bridge.exceptions import (
    DeviceNotFoundError,
    HomeAssistantAuthenticationError,
    HomeAssistantCommandError,
    HomeAssistantConnectionError,
    HomeAssistantError,
    InvalidInputError,
)


class TestExceptionHierarchy:
    """Verify the exception class hierarchy."""

    def test_base_is_exception(self):
        assert issubclass(HomeAssistantError, Exception)

    def test_authentication_error_inherits_base(self):
        assert issubclass(HomeAssistantAuthenticationError, HomeAssistantError)

    def test_command_error_inherits_base(self):
        assert issubclass(HomeAssistantCommandError, HomeAssistantError)

    def test_connection_error_inherits_base(self):
        assert issubclass(HomeAssistantConnectionError, HomeAssistantError)

    def test_can_catch_all_with_base(self):
        for exc_cls in (
            HomeAssistantAuthenticationError,
            HomeAssistantCommandError,
            HomeAssistantConnectionError,
            DeviceNotFoundError,
            InvalidInputError,
        ):
            try:
                raise exc_cls("test")
            except HomeAssistantError:
                pass  # expected

    def test_message_preserved(self):
        err = HomeAssistantConnectionError("host unreachable")
        assert str(err) == "host unreachable"
