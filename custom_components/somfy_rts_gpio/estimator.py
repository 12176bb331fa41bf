from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from .const import POSITION_STEP

_LOGGER = logging.getLogger(__name__)


class PositionEstimator:
    """Open-loop position model: one fixed-length step per tick.

    Every tick moves the estimate 10% toward the target, so a full traverse
    takes ten ticks and a partial one proportionally fewer. Only one run
    exists at a time; starting a new one discards the old run's remaining
    ticks without any further callbacks from it.
    """

    def __init__(
        self,
        on_position: Callable[[int], None],
        on_complete: Callable[[int], None],
    ) -> None:
        self._on_position = on_position
        self._on_complete = on_complete
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None

    def start(self, start: int, target: int, tick_interval: float) -> None:
        if (target - start) % POSITION_STEP:
            raise ValueError(f"{start} -> {target} is not a whole number of {POSITION_STEP}% steps")
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(
            self._run(start, target, tick_interval)
        )

    def cancel(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            _LOGGER.debug("Estimation run cancelled")

    async def _run(self, position: int, target: int, tick_interval: float) -> None:
        me = asyncio.current_task()
        step = POSITION_STEP if target > position else -POSITION_STEP

        while True:
            await asyncio.sleep(tick_interval)

            if position != target:
                position += step
                _LOGGER.debug("Position update: %s%%", position)
                self._on_position(position)
                # the callback may have started a new run
                if self._task is not me:
                    return

            if position == target:
                self._task = None
                self._on_complete(target)
                return
