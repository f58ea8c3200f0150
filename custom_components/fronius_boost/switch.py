"""Switch platform for the Fronius Boost integration."""

from __future__ import annotations

import logging
from typing import Any

from homeassistant.components.switch import SwitchEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN
from .coordinator import FroniusPinCoordinator
from .entity import FroniusPinEntity

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up boost switches from a config entry."""
    coordinators: dict[str, FroniusPinCoordinator] = hass.data[DOMAIN][entry.entry_id][
        "coordinators"
    ]
    entities = [FroniusBoostSwitch(coordinator) for coordinator in coordinators.values()]

    _LOGGER.info("Setting up %d Fronius boost switch(es)", len(entities))
    async_add_entities(entities)


class FroniusBoostSwitch(FroniusPinEntity, SwitchEntity):
    """Switch forcing an output pin on regardless of solar surplus."""

    _attr_translation_key = "boost"
    _attr_icon = "mdi:rocket-launch"

    def __init__(self, coordinator: FroniusPinCoordinator) -> None:
        """Initialize the switch."""
        super().__init__(coordinator, "boost")

    @property
    def is_on(self) -> bool | None:
        """Return True if the pin is forced on."""
        if self.coordinator.data is None:
            return None
        return self.coordinator.data.boost_on

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return the boost timeout and the thresholds restored on turn off."""
        thresholds = self.coordinator.normal_thresholds or {}
        return {
            "timeout_hours": self.coordinator.timeout_hours,
            "normal_threshold_on": thresholds.get("on"),
            "normal_threshold_off": thresholds.get("off"),
        }

    async def async_turn_on(self, **kwargs: Any) -> None:
        """Force the pin on."""
        _LOGGER.info("Boosting Fronius output: %s", self.coordinator.pin_name)
        await self.coordinator.async_set_boost(True)

    async def async_turn_off(self, **kwargs: Any) -> None:
        """Return the pin to its normal rule."""
        _LOGGER.info("Ending boost of Fronius output: %s", self.coordinator.pin_name)
        await self.coordinator.async_set_boost(False)
