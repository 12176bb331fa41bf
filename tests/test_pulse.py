import asyncio

import pytest

from custom_components.somfy_rts_gpio.channel import Channel, ChannelError, Level, OutputChannel
from custom_components.somfy_rts_gpio.pulse import PulseController


class BrokenChannel(OutputChannel):
    def __init__(self):
        self.attempts = 0

    def write(self, level):
        self.attempts += 1
        raise ChannelError("line gone")

    def close(self):
        pass


@pytest.mark.asyncio
async def test_pulse_presses_then_releases(channels):
    pulses = PulseController(channels)

    pulses.pulse(Channel.UP, 30)
    assert channels[Channel.UP].writes == [Level.ACTIVE]
    assert pulses.is_pending(Channel.UP)

    await asyncio.sleep(0.06)
    assert channels[Channel.UP].writes == [Level.ACTIVE, Level.INACTIVE]
    assert not pulses.is_pending(Channel.UP)


@pytest.mark.asyncio
async def test_second_press_restarts_hold(channels):
    pulses = PulseController(channels)
    up = channels[Channel.UP]

    pulses.pulse(Channel.UP, 100)
    await asyncio.sleep(0.06)
    pulses.pulse(Channel.UP, 100)

    # first release would have fired at 100 ms
    await asyncio.sleep(0.06)
    assert up.writes == [Level.ACTIVE, Level.ACTIVE]
    assert up.level is Level.ACTIVE

    await asyncio.sleep(0.08)
    assert up.writes == [Level.ACTIVE, Level.ACTIVE, Level.INACTIVE]

    await asyncio.sleep(0.1)
    assert up.writes.count(Level.INACTIVE) == 1


@pytest.mark.asyncio
async def test_channels_are_independent(channels):
    pulses = PulseController(channels)

    pulses.pulse(Channel.UP, 20)
    pulses.pulse(Channel.MY_POSITION, 20)
    await asyncio.sleep(0.05)

    assert channels[Channel.UP].writes == [Level.ACTIVE, Level.INACTIVE]
    assert channels[Channel.MY_POSITION].writes == [Level.ACTIVE, Level.INACTIVE]
    assert channels[Channel.DOWN].writes == []


@pytest.mark.asyncio
async def test_write_failure_is_absorbed():
    broken = BrokenChannel()
    pulses = PulseController({Channel.DOWN: broken})

    pulses.pulse(Channel.DOWN, 10)
    assert pulses.is_pending(Channel.DOWN)

    await asyncio.sleep(0.03)
    assert broken.attempts == 2
    assert not pulses.is_pending(Channel.DOWN)


@pytest.mark.asyncio
async def test_missing_channel_only_keeps_bookkeeping():
    pulses = PulseController({})

    pulses.pulse(Channel.MY_POSITION, 10)
    assert pulses.is_pending(Channel.MY_POSITION)

    await asyncio.sleep(0.03)
    assert not pulses.is_pending(Channel.MY_POSITION)


@pytest.mark.asyncio
async def test_release_all_lets_go_immediately(channels):
    pulses = PulseController(channels)
    pulses.pulse(Channel.UP, 1000)
    pulses.pulse(Channel.DOWN, 1000)

    pulses.release_all()

    assert channels[Channel.UP].level is Level.INACTIVE
    assert channels[Channel.DOWN].level is Level.INACTIVE
    assert not pulses.is_pending(Channel.UP)
    assert not pulses.is_pending(Channel.DOWN)
