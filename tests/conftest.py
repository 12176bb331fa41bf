"""Shared fixtures: a recording output line and a fast controller factory."""

import asyncio

import pytest

from custom_components.somfy_rts_gpio.channel import Channel, Level, OutputChannel
from custom_components.somfy_rts_gpio.motion import CoverConfig, MotionController


class RecordingChannel(OutputChannel):
    def __init__(self):
        self.writes = []
        self.closed = False

    @property
    def level(self):
        return self.writes[-1] if self.writes else Level.INACTIVE

    def presses(self):
        return self.writes.count(Level.ACTIVE)

    def write(self, level):
        self.writes.append(level)

    def close(self):
        self.closed = True


@pytest.fixture
def channels():
    return {channel: RecordingChannel() for channel in Channel}


@pytest.fixture
def make_controller(channels):
    def _make(**overrides):
        params = {
            "name": "Test curtain",
            "pin_up": 17,
            "pin_down": 27,
            "pin_my_position": 22,
            "movement_duration": 0.05,  # 5 ms per step
            "button_press_duration": 20,
            "simulate": True,
        }
        params.update(overrides)
        return MotionController(CoverConfig(**params), channels)

    return _make


@pytest.fixture
def wait_idle():
    async def _wait(controller, timeout=2.0):
        async def _poll():
            while controller.is_moving:
                await asyncio.sleep(0.002)

        await asyncio.wait_for(_poll(), timeout)

    return _wait
