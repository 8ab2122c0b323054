"""Virtual device state sink (the Twist controller's local representation)."""

from __future__ import annotations

from typing import Protocol

from .models import VirtualDeviceType


class VirtualStateSink(Protocol):
    """Receiver for virtual device registrations and state pushes.

    Writes are fire-and-forget: no acknowledgement is expected and values
    are normalized floats in [0, 1].
    """

    def create_device(
        self, device_id: str, device_type: VirtualDeviceType, name: str
    ) -> None: ...

    def update_state(
        self,
        device_type: VirtualDeviceType,
        device_id: str,
        values: dict[str, float],
    ) -> None: ...
