"""Per-device memory of the last meaningful hue/saturation."""

from __future__ import annotations

import logging

from .const import (
    DEFAULT_HUE,
    DEFAULT_SATURATION,
    MEANINGFUL_SATURATION_THRESHOLD,
)

_LOGGER = logging.getLogger(__name__)


def is_meaningful(saturation: float) -> bool:
    """True when *saturation* (0-100) is a real color rather than white."""
    return saturation > MEANINGFUL_SATURATION_THRESHOLD


def rgb_to_hs(red: int, green: int, blue: int) -> tuple[float, float]:
    """Convert 0-255 RGB to (hue 0-360, saturation 0-100)."""
    r, g, b = red / 255, green / 255, blue / 255
    high = max(r, g, b)
    diff = high - min(r, g, b)

    saturation = 0.0 if high == 0 else diff / high
    hue = 0.0
    if diff:
        if high == r:
            hue = ((g - b) / diff) % 6
        elif high == g:
            hue = (b - r) / diff + 2
        else:
            hue = (r - g) / diff + 4

    return hue / 6 * 360, saturation * 100


class ColorMemory:
    """Remember colors so that going to white and back restores the hue.

    Only saturations above the meaningful threshold are stored, so a
    transient near-white observation never overwrites a real color.
    """

    def __init__(self) -> None:
        self._colors: dict[str, tuple[float, float]] = {}

    def remember(self, device_id: str, hue: float, saturation: float) -> None:
        if not is_meaningful(saturation):
            return
        self._colors[device_id] = (hue, saturation)
        _LOGGER.debug(
            "Remembered color for %s: hue=%s sat=%s", device_id, hue, saturation
        )

    def recall(
        self,
        device_id: str,
        fallback_hue: float = DEFAULT_HUE,
        fallback_saturation: float = DEFAULT_SATURATION,
    ) -> tuple[float, float]:
        return self._colors.get(device_id, (fallback_hue, fallback_saturation))

    def forget(self, device_id: str) -> None:
        self._colors.pop(device_id, None)

    def __contains__(self, device_id: object) -> bool:
        return device_id in self._colors
