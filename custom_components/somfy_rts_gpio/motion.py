from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

import voluptuous as vol

from .channel import Channel, OutputChannel, close_channels
from .const import (
    CONF_ACTIVE_LOW,
    CONF_BUTTON_PRESS_DURATION,
    CONF_DEFAULT_POSITION,
    CONF_MOVEMENT_DURATION,
    CONF_NAME,
    CONF_PIN_DOWN,
    CONF_PIN_MY_POSITION,
    CONF_PIN_UP,
    CONF_SIMULATE,
    DEFAULT_BUTTON_PRESS_DURATION,
    DEFAULT_MOVEMENT_DURATION,
    DEFAULT_NAME,
    DEFAULT_POSITION_DOWN,
    DEFAULT_POSITION_UP,
    MY_POSITION,
    POSITION_MAX,
    POSITION_MIN,
    POSITION_STEP,
)
from .estimator import PositionEstimator
from .pulse import PulseController

_LOGGER = logging.getLogger(__name__)


class InvalidTargetError(ValueError):
    """Raised when a requested position is not one the model can reach."""


class MotionState(Enum):
    STOPPED = "stopped"
    INCREASING = "increasing"  # toward 100 (open)
    DECREASING = "decreasing"  # toward 0 (closed)


def _whole_step(value: int) -> int:
    if isinstance(value, bool) or value % POSITION_STEP:
        raise vol.Invalid(f"must be a multiple of {POSITION_STEP}")
    return value


TARGET_SCHEMA = vol.Schema(
    vol.All(int, vol.Range(min=POSITION_MIN, max=POSITION_MAX), _whole_step)
)


def validate_target(value: Any) -> int:
    try:
        return TARGET_SCHEMA(value)
    except vol.Invalid as e:
        raise InvalidTargetError(f"Invalid target position {value!r}: {e}") from e


@dataclass(frozen=True)
class CoverConfig:
    name: str = DEFAULT_NAME
    pin_up: int = 0
    pin_down: int = 0
    pin_my_position: int = 0
    movement_duration: float = DEFAULT_MOVEMENT_DURATION    # s, full traverse
    button_press_duration: float = DEFAULT_BUTTON_PRESS_DURATION  # ms
    default_position: str = DEFAULT_POSITION_DOWN
    active_low: bool = True
    simulate: bool = False

    @classmethod
    def from_entry_data(cls, data: Mapping[str, Any]) -> CoverConfig:
        return cls(
            name=data.get(CONF_NAME) or DEFAULT_NAME,
            pin_up=int(data[CONF_PIN_UP]),
            pin_down=int(data[CONF_PIN_DOWN]),
            pin_my_position=int(data[CONF_PIN_MY_POSITION]),
            movement_duration=float(data.get(CONF_MOVEMENT_DURATION, DEFAULT_MOVEMENT_DURATION)),
            button_press_duration=float(
                data.get(CONF_BUTTON_PRESS_DURATION, DEFAULT_BUTTON_PRESS_DURATION)
            ),
            default_position=data.get(CONF_DEFAULT_POSITION, DEFAULT_POSITION_DOWN),
            active_low=bool(data.get(CONF_ACTIVE_LOW, True)),
            simulate=bool(data.get(CONF_SIMULATE, False)),
        )

    @property
    def pins(self) -> dict[Channel, int]:
        return {
            Channel.UP: self.pin_up,
            Channel.DOWN: self.pin_down,
            Channel.MY_POSITION: self.pin_my_position,
        }

    @property
    def tick_interval(self) -> float:
        """Seconds per 10% step: movement_duration * 100 ms."""
        return self.movement_duration * 100 / 1000.0

    @property
    def initial_position(self) -> int:
        return POSITION_MAX if self.default_position == DEFAULT_POSITION_UP else POSITION_MIN


class MotionController:
    """Drives one covering from target requests.

    The motor gives no feedback. A request presses the matching remote
    button and lets PositionEstimator walk the estimate toward the target.
    Targets between the presets are reached by pressing "my" when the
    estimate arrives, which the motor treats as stop while travelling.
    """

    def __init__(self, config: CoverConfig, channels: Mapping[Channel, OutputChannel]) -> None:
        self._config = config
        self._channels = channels
        self._pulses = PulseController(channels)
        self._estimator = PositionEstimator(self._handle_step, self._handle_complete)
        self._listeners: list[Callable[[], None]] = []

        self._current = config.initial_position
        self._target = config.initial_position
        self._state = MotionState.STOPPED
        self._intermediate = False

        _LOGGER.info(
            "Initialized %r, current position %s%%", config.name, self._current
        )

    @property
    def config(self) -> CoverConfig:
        return self._config

    @property
    def current_position(self) -> int:
        return self._current

    @property
    def target_position(self) -> int:
        return self._target

    @property
    def motion_state(self) -> MotionState:
        return self._state

    @property
    def intermediate(self) -> bool:
        return self._intermediate

    @property
    def is_moving(self) -> bool:
        return self._estimator.is_running

    def add_listener(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Register for position/state changes. Returns the unsubscribe callable."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def set_target(self, value: Any) -> None:
        target = validate_target(value)
        current = self._current
        _LOGGER.info("Setting target position to %s%% (current: %s%%)", target, current)

        self._estimator.cancel()
        self._target = target

        if target == POSITION_MAX:
            channel, intermediate = Channel.UP, False
        elif target == POSITION_MIN:
            channel, intermediate = Channel.DOWN, False
        elif target == MY_POSITION:
            channel, intermediate = Channel.MY_POSITION, False
        else:
            channel = Channel.UP if target > current else Channel.DOWN
            intermediate = True

        self._pulses.pulse(channel, self._config.button_press_duration)
        self._intermediate = intermediate

        if target > current:
            self._state = MotionState.INCREASING
        elif target < current:
            self._state = MotionState.DECREASING
        else:
            self._state = MotionState.STOPPED

        self._notify()
        self._estimator.start(current, target, self._config.tick_interval)

    def _handle_step(self, position: int) -> None:
        self._current = position
        self._notify()

    def _handle_complete(self, target: int) -> None:
        if self._intermediate:
            _LOGGER.info("Stopping at intermediate position %s%%", target)
            self._pulses.pulse(Channel.MY_POSITION, self._config.button_press_duration)
            self._intermediate = False

        _LOGGER.info("Reached %s%%", target)
        self._state = MotionState.STOPPED
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                _LOGGER.exception("Error in position listener")

    def close(self) -> None:
        """Tear down: abandon the run, let go of held buttons, release the lines."""
        self._estimator.cancel()
        self._pulses.release_all()
        close_channels(self._channels)
        self._listeners.clear()
        _LOGGER.debug("Controller for %r closed", self._config.name)
