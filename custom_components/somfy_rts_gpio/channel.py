from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import Enum

_LOGGER = logging.getLogger(__name__)


class ChannelError(Exception):
    """Raised on any failure to claim or drive an output line."""


class Channel(str, Enum):
    """Logical button of the RTS remote."""

    UP = "up"
    DOWN = "down"
    MY_POSITION = "my_position"


class Level(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class OutputChannel(ABC):
    """Single output line wired to one remote button."""

    @abstractmethod
    def write(self, level: Level) -> None:
        """Drive the line to the given level."""

    @abstractmethod
    def close(self) -> None:
        """Leave the line inactive and release it. Safe to call twice."""


class GpioOutputChannel(OutputChannel):
    """Output line on a Raspberry Pi header pin (BCM numbering) via RPi.GPIO.

    The remote's buttons close to ground, so by default the line is
    active-low: LOW while the button is held, HIGH when idle.
    """

    def __init__(self, pin: int, active_low: bool = True) -> None:
        try:
            import RPi.GPIO as GPIO
        except (ImportError, RuntimeError) as e:
            raise ChannelError(f"RPi.GPIO not available: {e}") from e

        self._gpio = GPIO
        self._pin = pin
        self._active_low = active_low
        self._closed = False

        try:
            GPIO.setmode(GPIO.BCM)
            GPIO.setwarnings(False)
            GPIO.setup(pin, GPIO.OUT, initial=self._raw(Level.INACTIVE))
        except (RuntimeError, ValueError) as e:
            raise ChannelError(f"Cannot claim GPIO {pin}: {e}") from e
        _LOGGER.info("Claimed GPIO %s as output (active_low=%s)", pin, active_low)

    @property
    def pin(self) -> int:
        return self._pin

    def _raw(self, level: Level) -> int:
        active = level is Level.ACTIVE
        high = not active if self._active_low else active
        return self._gpio.HIGH if high else self._gpio.LOW

    def write(self, level: Level) -> None:
        if self._closed:
            raise ChannelError(f"GPIO {self._pin} already released")
        try:
            self._gpio.output(self._pin, self._raw(level))
        except (RuntimeError, ValueError) as e:
            raise ChannelError(f"Write to GPIO {self._pin} failed: {e}") from e

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._gpio.output(self._pin, self._raw(Level.INACTIVE))
            self._gpio.cleanup(self._pin)
        except (RuntimeError, ValueError) as e:
            raise ChannelError(f"Release of GPIO {self._pin} failed: {e}") from e
        _LOGGER.debug("Released GPIO %s", self._pin)


class NullOutputChannel(OutputChannel):
    """Stand-in used when no hardware is attached. Only remembers the level."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.level = Level.INACTIVE

    def write(self, level: Level) -> None:
        self.level = level

    def close(self) -> None:
        self.level = Level.INACTIVE


def open_channels(
    pins: Mapping[Channel, int], simulate: bool, active_low: bool = True
) -> dict[Channel, OutputChannel]:
    """Build one output per remote button, real or simulated as requested."""
    if simulate:
        _LOGGER.info("Simulation selected, no GPIO lines will be driven")
        return {channel: NullOutputChannel(channel.value) for channel in pins}

    opened: dict[Channel, OutputChannel] = {}
    try:
        for channel, pin in pins.items():
            opened[channel] = GpioOutputChannel(pin, active_low=active_low)
    except ChannelError:
        close_channels(opened)
        raise
    return opened


def close_channels(channels: Mapping[Channel, OutputChannel]) -> None:
    for channel, output in channels.items():
        try:
            output.close()
        except ChannelError as e:
            _LOGGER.warning("Could not release %s output: %s", channel.value, e)
