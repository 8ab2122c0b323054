"""Tests for the global playback/volume cooldown gate."""

from __future__ import annotations

import pytest

from flic_bridge.const import COOLDOWN_WINDOW
from flic_bridge.cooldown import CooldownGate


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


class TestCooldownGate:
    """Test the window arithmetic."""

    def test_not_blocked_initially(self, clock):
        gate = CooldownGate(clock=clock)
        assert gate.is_blocked() is False
        assert gate.remaining() == 0

    def test_default_window(self):
        assert CooldownGate().window == COOLDOWN_WINDOW == 2.5

    @pytest.mark.parametrize(
        ("elapsed", "blocked"),
        [
            (0.0, True),
            (0.001, True),
            (1.0, True),
            (2.499, True),
            (2.5, False),
            (3.0, False),
        ],
    )
    def test_window_edges(self, clock, elapsed, blocked):
        gate = CooldownGate(clock=clock)
        gate.mark_fired()
        clock.now += elapsed
        assert gate.is_blocked() is blocked

    def test_remaining(self, clock):
        gate = CooldownGate(clock=clock)
        gate.mark_fired()
        clock.now += 1.0
        assert gate.remaining() == pytest.approx(1.5)

    def test_mark_fired_restarts_window(self, clock):
        gate = CooldownGate(clock=clock)
        gate.mark_fired()
        clock.now += 2.0
        gate.mark_fired()
        clock.now += 2.0
        assert gate.is_blocked() is True

    def test_reset(self, clock):
        gate = CooldownGate(clock=clock)
        gate.mark_fired()
        gate.reset()
        assert gate.is_blocked() is False
