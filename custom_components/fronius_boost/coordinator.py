"""Data coordinator for the Fronius Boost integration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import CALLBACK_TYPE, HomeAssistant, callback
from homeassistant.exceptions import ConfigEntryAuthFailed, HomeAssistantError
from homeassistant.helpers.event import async_call_later
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed
from homeassistant.util import dt as dt_util

from .api import FroniusApiClient, boost_label_prefix
from .const import (
    CONF_NORMAL_THRESHOLDS,
    CONF_PIN,
    CONF_PIN_NAME,
    CONF_TIMEOUT_HOURS,
    DEFAULT_SCAN_INTERVAL,
    DOMAIN,
    FORCED_THRESHOLD_OFF,
)
from .exceptions import FroniusAuthError, FroniusError, FroniusInvalidChallengeError
from .models import AboutSystem

_LOGGER = logging.getLogger(__name__)


@dataclass
class PinState:
    """Polled state of one output pin."""

    pin_on: bool
    boost_on: bool
    on_time_minutes: int


class FroniusPinCoordinator(DataUpdateCoordinator[PinState]):
    """Coordinator polling and boosting one EMRS output pin."""

    config_entry: ConfigEntry

    def __init__(
        self,
        hass: HomeAssistant,
        api: FroniusApiClient,
        config_entry: ConfigEntry,
        pin_config: dict[str, Any],
        about: AboutSystem,
    ) -> None:
        """Initialize the coordinator."""
        self.pin: str = pin_config[CONF_PIN]
        super().__init__(
            hass,
            _LOGGER,
            name=f"{DOMAIN}_{self.pin}",
            update_interval=timedelta(seconds=DEFAULT_SCAN_INTERVAL),
            config_entry=config_entry,
        )
        self.api = api
        self.about = about
        self.pin_name: str = pin_config[CONF_PIN_NAME]
        self.timeout_hours: float = float(pin_config.get(CONF_TIMEOUT_HOURS) or 0)
        self.label_prefix = boost_label_prefix(self.pin)
        self._on_time_minutes = 0
        self._on_time_day: date | None = None
        self._on_time_restored = False
        self._cancel_boost_timeout: CALLBACK_TYPE | None = None

    @property
    def normal_thresholds(self) -> dict[str, float] | None:
        """Return the saved non-boosted thresholds of this pin."""
        return self.config_entry.data.get(CONF_NORMAL_THRESHOLDS, {}).get(self.pin)

    async def _async_update_data(self) -> PinState:
        """Fetch the pin output state and boost marker."""
        try:
            status = await self.api.get_pin_status(self.pin)
            boost_on = await self.api.get_pin_forced_on(self.pin, self.label_prefix)
        except (FroniusAuthError, FroniusInvalidChallengeError) as err:
            raise ConfigEntryAuthFailed(
                "Fronius authentication failed, re-authentication required"
            ) from err
        except FroniusError as err:
            raise UpdateFailed(f"Error fetching {self.pin} state: {err}") from err

        pin_on = bool(status.get("state"))

        today = dt_util.now().date()
        if self._on_time_day != today:
            if self._on_time_day is not None:
                _LOGGER.debug("Reset %s on time minutes to zero", self.pin)
            self._on_time_minutes = 0
            self._on_time_day = today
        if pin_on:
            self._on_time_minutes += DEFAULT_SCAN_INTERVAL // 60

        _LOGGER.debug("%s boost on: %s, pin on: %s", self.pin, boost_on, pin_on)
        return PinState(
            pin_on=pin_on, boost_on=boost_on, on_time_minutes=self._on_time_minutes
        )

    @callback
    def async_restore_on_time(self, minutes: int, day: date) -> None:
        """Seed today's on-time minutes from a value saved before a restart."""
        today = dt_util.now().date()
        if day != today or minutes <= 0:
            return
        if self._on_time_restored or self._on_time_day not in (None, today):
            return
        self._on_time_restored = True
        self._on_time_day = today
        self._on_time_minutes += minutes
        _LOGGER.debug("Restored %s on time to %s minutes", self.pin, self._on_time_minutes)
        if self.data is not None:
            self.data = replace(self.data, on_time_minutes=self._on_time_minutes)
            self.async_update_listeners()

    async def async_capture_normal_thresholds(self) -> None:
        """Save the pin's thresholds unless it is already boosted.

        The boost overwrites the thresholds on the inverter, so the saved
        copy is the only way back to the normal rule.
        """
        pin_config = await self.api.get_pin_config(self.pin)
        if pin_config.get("label", "").startswith(self.label_prefix):
            _LOGGER.warning("%s already appears to be boosted: %s", self.pin, pin_config)
            self._schedule_boost_timeout()
            return
        if pin_config.get("thresholdOff") == FORCED_THRESHOLD_OFF:
            _LOGGER.warning(
                "%s is forced on by another controller, not saving its thresholds: %s",
                self.pin,
                pin_config,
            )
            return

        thresholds = {
            "on": pin_config.get("thresholdOn"),
            "off": pin_config.get("thresholdOff"),
        }
        if thresholds == self.normal_thresholds:
            return
        _LOGGER.debug(
            "Saving %s normal thresholds as on %s W / off %s W",
            self.pin,
            thresholds["on"],
            thresholds["off"],
        )
        saved = dict(self.config_entry.data.get(CONF_NORMAL_THRESHOLDS, {}))
        saved[self.pin] = thresholds
        self.hass.config_entries.async_update_entry(
            self.config_entry,
            data={**self.config_entry.data, CONF_NORMAL_THRESHOLDS: saved},
        )

    async def async_set_boost(self, boost_on: bool) -> None:
        """Force the pin on, or return it to its normal rule."""
        if self.data is not None and self.data.boost_on == boost_on:
            _LOGGER.warning("State mismatch: %s boost is already %s", self.pin, boost_on)

        try:
            if boost_on:
                await self.async_capture_normal_thresholds()
                _LOGGER.debug("Set %s boost config", self.pin)
                await self.api.set_pin_forced_on(self.pin, self.label_prefix)
                self._schedule_boost_timeout()
            else:
                thresholds = self.normal_thresholds
                if thresholds is None:
                    raise HomeAssistantError(
                        f"No saved normal thresholds for {self.pin_name}"
                    )
                _LOGGER.debug("Set %s normal config", self.pin)
                await self.api.set_pin_ppv_config(
                    self.pin, thresholds["on"], thresholds["off"], self.label_prefix
                )
                self.async_cancel_boost_timeout()
        except FroniusError as err:
            raise HomeAssistantError(
                f"Error communicating with inverter for {self.pin_name}: {err}"
            ) from err
        finally:
            await self.async_request_refresh()

    # ── Boost timeout ────────────────────────────────────────────────

    @callback
    def _schedule_boost_timeout(self) -> None:
        """Schedule the boost to end after the configured hours."""
        if self.timeout_hours <= 0:
            return
        self.async_cancel_boost_timeout()
        self._cancel_boost_timeout = async_call_later(
            self.hass, timedelta(hours=self.timeout_hours), self._async_boost_timed_out
        )

    @callback
    def _async_boost_timed_out(self, _now: Any) -> None:
        """End the boost once the timeout expires."""
        self._cancel_boost_timeout = None
        _LOGGER.info("Boost has timed out after %s hours", self.timeout_hours)
        self.config_entry.async_create_background_task(
            self.hass, self.async_set_boost(False), f"{DOMAIN}_{self.pin}_boost_timeout"
        )

    @callback
    def async_cancel_boost_timeout(self) -> None:
        """Cancel a pending boost timeout."""
        if self._cancel_boost_timeout is not None:
            self._cancel_boost_timeout()
            self._cancel_boost_timeout = None
