from __future__ import annotations

from typing import Any

from homeassistant.components.cover import (
    ATTR_POSITION,
    CoverDeviceClass,
    CoverEntity,
    CoverEntityFeature,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.exceptions import ServiceValidationError
from homeassistant.helpers import entity_platform
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.loader import async_get_integration

from .const import (
    DOMAIN,
    MANUFACTURER,
    MODEL,
    MY_POSITION,
    POSITION_MAX,
    POSITION_MIN,
    SERVICE_MY_POSITION,
)
from .motion import InvalidTargetError, MotionController, MotionState


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    controller: MotionController = hass.data[DOMAIN][entry.entry_id]["controller"]
    integration = await async_get_integration(hass, DOMAIN)
    sw_version = str(integration.version) if integration.version else None

    async_add_entities([SomfyRtsCover(controller, entry.entry_id, sw_version)])

    platform = entity_platform.async_get_current_platform()
    platform.async_register_entity_service(SERVICE_MY_POSITION, {}, "async_my_position")


class SomfyRtsCover(CoverEntity):
    """Window covering driven through a hard-wired RTS remote.

    Position scale follows Home Assistant: 0 = closed, 100 = open. The
    position is an estimate, nothing is measured.
    """

    _attr_has_entity_name = True
    _attr_name = None
    _attr_should_poll = False
    _attr_device_class = CoverDeviceClass.CURTAIN
    _attr_supported_features = (
        CoverEntityFeature.OPEN | CoverEntityFeature.CLOSE | CoverEntityFeature.SET_POSITION
    )

    def __init__(
        self, controller: MotionController, entry_id: str, sw_version: str | None = None
    ) -> None:
        self._controller = controller
        self._attr_unique_id = f"{entry_id}_cover"
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, entry_id)},
            name=controller.config.name,
            manufacturer=MANUFACTURER,
            model=MODEL,
            sw_version=sw_version,
        )

    async def async_added_to_hass(self) -> None:
        await super().async_added_to_hass()
        self.async_on_remove(self._controller.add_listener(self._handle_controller_update))

    @callback
    def _handle_controller_update(self) -> None:
        self.async_write_ha_state()

    @property
    def current_cover_position(self) -> int | None:
        return self._controller.current_position

    @property
    def is_opening(self) -> bool:
        return self._controller.motion_state is MotionState.INCREASING

    @property
    def is_closing(self) -> bool:
        return self._controller.motion_state is MotionState.DECREASING

    @property
    def is_closed(self) -> bool | None:
        return self._controller.current_position == POSITION_MIN

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        config = self._controller.config
        return {
            "target_position": self._controller.target_position,
            "intermediate_stop": self._controller.intermediate,
            "step_interval_s": config.tick_interval,
            "simulated": config.simulate,
        }

    def _set_target(self, position: Any) -> None:
        try:
            self._controller.set_target(position)
        except InvalidTargetError as e:
            raise ServiceValidationError(str(e)) from e

    async def async_open_cover(self, **kwargs: Any) -> None:
        self._set_target(POSITION_MAX)

    async def async_close_cover(self, **kwargs: Any) -> None:
        self._set_target(POSITION_MIN)

    async def async_set_cover_position(self, **kwargs: Any) -> None:
        self._set_target(kwargs.get(ATTR_POSITION))

    async def async_my_position(self) -> None:
        self._set_target(MY_POSITION)
