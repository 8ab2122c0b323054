"""Debounce rapid controller input into a single delayed remote call."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from .const import DEBOUNCE_DELAY
from .exceptions import InvalidInputError
from .models import Channel

_LOGGER = logging.getLogger(__name__)

RemoteApply = Callable[[Any], Awaitable[Any]]
LocalApply = Callable[[Any], None]


@dataclass(slots=True)
class PendingUpdate:
    """Latest requested value for one (device, channel) and its timer."""

    value: Any
    apply_remote: RemoteApply
    handle: asyncio.TimerHandle


class DebounceCoordinator:
    """Coalesce updates per (device, channel); last write wins.

    Every call writes the local state immediately. Only the value still
    pending when the delay expires is sent to the remote side. Replacing a
    pending update cancels its timer, not a remote call that already
    started: such a call runs to completion.
    """

    def __init__(self, delay: float = DEBOUNCE_DELAY) -> None:
        self._delay = delay
        self._pending: dict[tuple[str, Channel], PendingUpdate] = {}
        self._tasks: set[asyncio.Task] = set()

    @property
    def delay(self) -> float:
        return self._delay

    def schedule_update(
        self,
        device_id: str,
        channel: Channel | str,
        value: Any,
        apply_remote: RemoteApply,
        apply_local: LocalApply | None = None,
    ) -> None:
        """Write *value* locally now and remotely after the delay."""
        try:
            channel = Channel(channel)
        except ValueError as exc:
            raise InvalidInputError(f"Unknown debounce channel: {channel!r}") from exc

        key = (device_id, channel)
        previous = self._pending.pop(key, None)
        if previous is not None:
            previous.handle.cancel()
            _LOGGER.debug(
                "Superseded pending %s for %s (%r -> %r)",
                channel, device_id, previous.value, value,
            )

        if apply_local is not None:
            try:
                apply_local(value)
            except Exception:
                _LOGGER.exception(
                    "Immediate state update failed for %s (%s)", device_id, channel
                )

        loop = asyncio.get_running_loop()
        handle = loop.call_later(self._delay, self._fire, key)
        self._pending[key] = PendingUpdate(value, apply_remote, handle)

    def _fire(self, key: tuple[str, Channel]) -> None:
        pending = self._pending.pop(key, None)
        if pending is None:
            return
        task = asyncio.create_task(self._run(key, pending))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, key: tuple[str, Channel], pending: PendingUpdate) -> None:
        device_id, channel = key
        try:
            await pending.apply_remote(pending.value)
        except Exception as exc:
            _LOGGER.error(
                "Debounced %s update failed for %s: %s", channel, device_id, exc
            )

    # ------------------------------------------------------------------
    #  Introspection / lifecycle
    # ------------------------------------------------------------------

    def has_pending(self, device_id: str, channel: Channel | str) -> bool:
        return (device_id, Channel(channel)) in self._pending

    def pending_value(self, device_id: str, channel: Channel | str) -> Any:
        pending = self._pending.get((device_id, Channel(channel)))
        return None if pending is None else pending.value

    @property
    def in_flight(self) -> int:
        """Number of remote applies currently running."""
        return len(self._tasks)

    async def async_flush(self) -> None:
        """Wait for every remote apply that has already started."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def async_shutdown(self) -> None:
        """Drop pending updates and wait for in-flight remote applies."""
        for pending in self._pending.values():
            pending.handle.cancel()
        self._pending.clear()
        await self.async_flush()
