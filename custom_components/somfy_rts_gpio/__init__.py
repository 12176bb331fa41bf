from __future__ import annotations

import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady

from .channel import ChannelError, open_channels
from .const import DOMAIN, PLATFORMS
from .motion import CoverConfig, MotionController

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    config = CoverConfig.from_entry_data(entry.data)

    try:
        channels = await hass.async_add_executor_job(
            open_channels, config.pins, config.simulate, config.active_low
        )
    except ChannelError as e:
        raise ConfigEntryNotReady(str(e)) from e

    controller = MotionController(config, channels)
    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = {"controller": controller}

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    unloaded = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unloaded:
        controller: MotionController = hass.data[DOMAIN].pop(entry.entry_id)["controller"]
        controller.close()
        _LOGGER.debug("Unloaded %s", entry.title)
    return unloaded
