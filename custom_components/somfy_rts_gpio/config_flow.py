from __future__ import annotations

from typing import Any

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.core import HomeAssistant

from .channel import ChannelError, close_channels, open_channels
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
    DOMAIN,
)
from .motion import CoverConfig

PIN = vol.All(vol.Coerce(int), vol.Range(min=0, max=27))

DATA_SCHEMA = vol.Schema(
    {
        vol.Optional(CONF_NAME, default=DEFAULT_NAME): str,
        vol.Required(CONF_PIN_UP): PIN,
        vol.Required(CONF_PIN_DOWN): PIN,
        vol.Required(CONF_PIN_MY_POSITION): PIN,
        vol.Optional(CONF_MOVEMENT_DURATION, default=DEFAULT_MOVEMENT_DURATION): vol.All(
            vol.Coerce(float), vol.Range(min=0, min_included=False)
        ),
        vol.Optional(CONF_BUTTON_PRESS_DURATION, default=DEFAULT_BUTTON_PRESS_DURATION): vol.All(
            vol.Coerce(int), vol.Range(min=1)
        ),
        vol.Optional(CONF_DEFAULT_POSITION, default=DEFAULT_POSITION_DOWN): vol.In(
            [DEFAULT_POSITION_UP, DEFAULT_POSITION_DOWN]
        ),
        vol.Optional(CONF_ACTIVE_LOW, default=True): bool,
        vol.Optional(CONF_SIMULATE, default=False): bool,
    }
)


class DuplicatePinsError(Exception):
    """Raised when two buttons are wired to the same pin."""


def _try_claim(config: CoverConfig) -> None:
    channels = open_channels(config.pins, config.simulate, config.active_low)
    close_channels(channels)


async def _validate(hass: HomeAssistant, data: dict[str, Any]) -> dict[str, Any]:
    config = CoverConfig.from_entry_data(data)
    pins = list(config.pins.values())
    if len(set(pins)) != len(pins):
        raise DuplicatePinsError(pins)

    if not config.simulate:
        await hass.async_add_executor_job(_try_claim, config)

    return {
        "title": config.name,
        "unique_id": "-".join(str(pin) for pin in pins),
    }


class SomfyRtsGpioConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    VERSION = 1

    async def async_step_user(self, user_input=None):
        errors = {}

        if user_input is not None:
            try:
                result = await _validate(self.hass, user_input)
            except DuplicatePinsError:
                errors["base"] = "duplicate_pins"
            except ChannelError:
                errors["base"] = "gpio_unavailable"
            except Exception:
                errors["base"] = "unknown"
            else:
                await self.async_set_unique_id(result["unique_id"])
                self._abort_if_unique_id_configured()

                return self.async_create_entry(title=result["title"], data=user_input)

        schema = self.add_suggested_values_to_schema(DATA_SCHEMA, user_input or {})
        return self.async_show_form(step_id="user", data_schema=schema, errors=errors)
