"""Binary sensor platform for the Fronius Boost integration."""

from __future__ import annotations

from homeassistant.components.binary_sensor import (
    BinarySensorDeviceClass,
    BinarySensorEntity,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN
from .coordinator import FroniusPinCoordinator
from .entity import FroniusPinEntity


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up pin output sensors from a config entry."""
    coordinators: dict[str, FroniusPinCoordinator] = hass.data[DOMAIN][entry.entry_id][
        "coordinators"
    ]
    async_add_entities(
        FroniusPinOutputSensor(coordinator) for coordinator in coordinators.values()
    )


class FroniusPinOutputSensor(FroniusPinEntity, BinarySensorEntity):
    """Whether the output pin is currently switched on."""

    _attr_name = None
    _attr_device_class = BinarySensorDeviceClass.POWER

    def __init__(self, coordinator: FroniusPinCoordinator) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, "output")

    @property
    def is_on(self) -> bool | None:
        """Return True if the output pin is on."""
        if self.coordinator.data is None:
            return None
        return self.coordinator.data.pin_on
