"""The Fronius Boost integration."""

from __future__ import annotations

import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_HOST, CONF_PASSWORD, CONF_USERNAME, Platform
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryAuthFailed, ConfigEntryNotReady
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .api import FroniusApiClient
from .const import CONF_PINS, DOMAIN
from .coordinator import FroniusPinCoordinator
from .exceptions import FroniusAuthError, FroniusError, FroniusInvalidChallengeError

_LOGGER = logging.getLogger(__name__)

PLATFORMS: list[Platform] = [Platform.BINARY_SENSOR, Platform.SENSOR, Platform.SWITCH]


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Fronius Boost from a config entry."""
    session = async_get_clientsession(hass)

    api = FroniusApiClient(
        session=session,
        host=entry.data[CONF_HOST],
        username=entry.data[CONF_USERNAME],
        password=entry.data[CONF_PASSWORD],
    )

    try:
        about = await api.get_about_system()
    except (FroniusAuthError, FroniusInvalidChallengeError) as err:
        raise ConfigEntryAuthFailed("Fronius authentication failed") from err
    except FroniusError as err:
        raise ConfigEntryNotReady(f"Cannot connect to {api.host}: {err}") from err

    _LOGGER.info(
        "Connected to %s hardware revision %s running firmware v%s",
        api.host,
        about.get("txtHwVersion"),
        about.get("txtSwVersion"),
    )

    coordinators: dict[str, FroniusPinCoordinator] = {}
    for pin_config in entry.data[CONF_PINS]:
        coordinator = FroniusPinCoordinator(hass, api, entry, pin_config, about)
        await coordinator.async_config_entry_first_refresh()

        # Thresholds must be known before the first boost overwrites them
        try:
            await coordinator.async_capture_normal_thresholds()
        except FroniusError as err:
            raise ConfigEntryNotReady(
                f"Cannot read {coordinator.pin} configuration: {err}"
            ) from err

        entry.async_on_unload(coordinator.async_cancel_boost_timeout)
        coordinators[coordinator.pin] = coordinator

    hass.data.setdefault(DOMAIN, {})
    hass.data[DOMAIN][entry.entry_id] = {
        "api": api,
        "about": about,
        "coordinators": coordinators,
    }

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)

    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a Fronius Boost config entry."""
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)

    if unload_ok:
        hass.data[DOMAIN].pop(entry.entry_id, None)
        if not hass.data[DOMAIN]:
            hass.data.pop(DOMAIN, None)

    return unload_ok
