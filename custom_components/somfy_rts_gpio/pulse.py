from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping

from .channel import Channel, ChannelError, Level, OutputChannel

_LOGGER = logging.getLogger(__name__)


class PulseController:
    """Emulates momentary button presses on the remote's output lines.

    Each channel has at most one pending release. Pressing again while a
    release is pending restarts the hold, like keeping a physical button
    down a little longer.
    """

    def __init__(self, channels: Mapping[Channel, OutputChannel]) -> None:
        self._channels = channels
        self._pending: dict[Channel, asyncio.TimerHandle] = {}

    def is_pending(self, channel: Channel) -> bool:
        return channel in self._pending

    def pulse(self, channel: Channel, active_duration_ms: float) -> None:
        """Press `channel` now and release it after `active_duration_ms`.

        Must be called from the running event loop, which schedules the release.
        """
        previous = self._pending.pop(channel, None)
        if previous is not None:
            previous.cancel()
            _LOGGER.debug("Re-press of %s, previous release cancelled", channel.value)

        _LOGGER.info("Pressing %s for %s ms", channel.value, active_duration_ms)
        self._write(channel, Level.ACTIVE)

        loop = asyncio.get_running_loop()
        self._pending[channel] = loop.call_later(
            active_duration_ms / 1000.0, self._release, channel
        )

    def _release(self, channel: Channel) -> None:
        self._pending.pop(channel, None)
        self._write(channel, Level.INACTIVE)
        _LOGGER.debug("Released %s", channel.value)

    def release_all(self) -> None:
        """Drop every pending release and let go of the held buttons now."""
        for channel, handle in list(self._pending.items()):
            handle.cancel()
            self._write(channel, Level.INACTIVE)
        self._pending.clear()

    def _write(self, channel: Channel, level: Level) -> None:
        output = self._channels.get(channel)
        if output is None:
            _LOGGER.warning("No output configured for %s, cannot press it", channel.value)
            return
        try:
            output.write(level)
        except ChannelError as e:
            _LOGGER.warning("Output %s unavailable, continuing without hardware: %s", channel.value, e)
