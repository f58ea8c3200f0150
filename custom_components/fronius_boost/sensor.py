"""Sensor platform for the Fronius Boost integration."""

from __future__ import annotations

from homeassistant.components.sensor import (
    RestoreSensor,
    SensorDeviceClass,
    SensorStateClass,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import UnitOfTime
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.util import dt as dt_util

from .const import DOMAIN
from .coordinator import FroniusPinCoordinator
from .entity import FroniusPinEntity


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up on-time sensors from a config entry."""
    coordinators: dict[str, FroniusPinCoordinator] = hass.data[DOMAIN][entry.entry_id][
        "coordinators"
    ]
    async_add_entities(
        FroniusPinOnTimeSensor(coordinator) for coordinator in coordinators.values()
    )


class FroniusPinOnTimeSensor(FroniusPinEntity, RestoreSensor):
    """Minutes the output pin has been on since local midnight.

    The last value is restored on startup so a restart during the day does
    not lose the minutes counted so far.
    """

    _attr_translation_key = "on_time"
    _attr_device_class = SensorDeviceClass.DURATION
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_native_unit_of_measurement = UnitOfTime.MINUTES

    def __init__(self, coordinator: FroniusPinCoordinator) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, "on_time")

    async def async_added_to_hass(self) -> None:
        """Seed the coordinator with the minutes saved before a restart."""
        await super().async_added_to_hass()
        last_state = await self.async_get_last_state()
        if last_state is None:
            return
        try:
            minutes = int(float(last_state.state))
        except ValueError:
            return
        self.coordinator.async_restore_on_time(
            minutes, dt_util.as_local(last_state.last_updated).date()
        )

    @property
    def native_value(self) -> int | None:
        """Return today's on time."""
        if self.coordinator.data is None:
            return None
        return self.coordinator.data.on_time_minutes
