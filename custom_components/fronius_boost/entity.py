"""Base entity for the Fronius Boost integration."""

from __future__ import annotations

from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DOMAIN
from .coordinator import FroniusPinCoordinator


class FroniusPinEntity(CoordinatorEntity[FroniusPinCoordinator]):
    """Entity attached to one EMRS output pin."""

    _attr_has_entity_name = True

    def __init__(self, coordinator: FroniusPinCoordinator, key: str) -> None:
        """Initialize the entity."""
        super().__init__(coordinator)
        about = coordinator.about
        device_id = (
            f"{about.get('txtLanMac', '')}_{about.get('txtWlanMac', '')}_{coordinator.pin}"
        )

        # ── Entity identity ──────────────────────────────────────────
        self._attr_unique_id = f"{device_id}_{key}"

        # ── Device info ──────────────────────────────────────────────
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, device_id)},
            name=coordinator.pin_name,
            manufacturer="Fronius",
            model=about.get("txtHwVersion"),
            sw_version=about.get("txtSwVersion"),
            configuration_url=f"http://{coordinator.api.host}",
        )
