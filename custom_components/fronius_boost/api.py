"""API client for the Fronius inverter energy manager (EMRS)."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from .const import (
    BOOST_LABEL_MARKER,
    BOOST_TAG_UUID,
    ENDPOINT_ABOUT_SYSTEM,
    ENDPOINT_EMRS_CONFIG,
    ENDPOINT_EMRS_CONFIG_SAVE,
    ENDPOINT_EMRS_STATUS,
    FORCED_THRESHOLD_OFF,
    FORCED_THRESHOLD_ON,
    MODE_FORCED,
    MODE_NORMAL,
)
from .exceptions import FroniusConnectionError, FroniusPinNotFoundError
from .models import AboutSystem, EmrsConfig, EmrsPinConfig, EmrsPinStatus, EmrsStatus
from .session import FroniusDigestSession

_LOGGER = logging.getLogger(__name__)


def boost_label_prefix(pin: str) -> str:
    """Return the label tag marking a pin as boosted by this integration."""
    return f"{BOOST_LABEL_MARKER}_{pin}_{BOOST_TAG_UUID}_"


def is_pin_forced(pin_config: EmrsPinConfig, label_prefix: str) -> bool:
    """Return True if a pin rule carries the forced-on marker."""
    return pin_config.get("thresholdOff") == FORCED_THRESHOLD_OFF and pin_config.get(
        "label", ""
    ).startswith(label_prefix)


def _body_data(document: Any, endpoint: str) -> Any:
    """Unwrap Body.Data from a Fronius JSON envelope."""
    try:
        return document["Body"]["Data"]
    except (KeyError, TypeError) as err:
        raise FroniusConnectionError(f"Unexpected response layout from {endpoint}") from err


def _pin_rule(config: EmrsConfig, pin: str) -> EmrsPinConfig:
    """Return the rule of one pin inside an EMRS config document."""
    rules = (config.get("emrs") or {}).get("rules") or {}
    if pin not in rules:
        raise FroniusPinNotFoundError(f"Pin {pin} not present in inverter configuration")
    return rules[pin]


class FroniusApiClient:
    """Async client for the EMRS part of the Fronius web API.

    The inverter only offers whole-document reads and writes of the EMRS
    configuration, so every pin change is a read-modify-write of the full
    document. Two writers racing on the same document lose one update.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        host: str,
        username: str,
        password: str,
    ) -> None:
        """Initialize the API client."""
        self._session = FroniusDigestSession(session, host, username, password)

    @property
    def host(self) -> str:
        """Return the inverter host."""
        return self._session.host

    @property
    def session(self) -> FroniusDigestSession:
        """Return the underlying digest session."""
        return self._session

    # ── Documents ────────────────────────────────────────────────────

    async def get_emrs_status(self) -> EmrsStatus:
        """Fetch the live output state of all pins.

        GET /status/emrs/
        """
        return _body_data(await self._session.get(ENDPOINT_EMRS_STATUS), ENDPOINT_EMRS_STATUS)

    async def get_emrs_config(self) -> EmrsConfig:
        """Fetch the full EMRS configuration document.

        GET /config/emrs/
        """
        return _body_data(await self._session.get(ENDPOINT_EMRS_CONFIG), ENDPOINT_EMRS_CONFIG)

    async def save_emrs_config(self, config: EmrsConfig) -> None:
        """Write back a full EMRS configuration document.

        POST /config/emrs/?method=save
        """
        await self._session.post(ENDPOINT_EMRS_CONFIG_SAVE, config)

    async def get_about_system(self) -> AboutSystem:
        """Fetch hardware and firmware information.

        GET /admincgi-bin/aboutSystem.cgi
        """
        return await self._session.get(ENDPOINT_ABOUT_SYSTEM)

    # ── Pins ─────────────────────────────────────────────────────────

    async def get_pin_status(self, pin: str) -> EmrsPinStatus:
        """Return the live output state of one pin."""
        status = await self.get_emrs_status()
        gpios = (status.get("emrs") or {}).get("gpios") or {}
        if pin not in gpios:
            raise FroniusPinNotFoundError(f"Pin {pin} not present in inverter status")
        return gpios[pin]

    async def get_pin_config(self, pin: str) -> EmrsPinConfig:
        """Return the control rule of one pin."""
        return _pin_rule(await self.get_emrs_config(), pin)

    async def set_pin_forced_on(self, pin: str, label_prefix: str) -> None:
        """Force a pin on and tag its label.

        The pin's previous thresholds are overwritten; callers must save
        them beforehand to be able to restore the normal rule.
        """
        config = await self.get_emrs_config()
        rule = _pin_rule(config, pin)
        rule["mode"] = MODE_FORCED
        rule["thresholdOn"] = FORCED_THRESHOLD_ON
        rule["thresholdOff"] = FORCED_THRESHOLD_OFF
        label = rule.get("label", "")
        if not label.startswith(label_prefix):
            rule["label"] = label_prefix + label
        _LOGGER.debug("Forcing %s on at %s", pin, self.host)
        await self.save_emrs_config(config)

    async def set_pin_ppv_config(
        self,
        pin: str,
        threshold_on: float,
        threshold_off: float,
        label_prefix: str,
    ) -> None:
        """Return a pin to photovoltaic-surplus control and untag its label."""
        config = await self.get_emrs_config()
        rule = _pin_rule(config, pin)
        rule["mode"] = MODE_NORMAL
        rule["thresholdOn"] = threshold_on
        rule["thresholdOff"] = threshold_off
        label = rule.get("label", "")
        if label.startswith(label_prefix):
            rule["label"] = label[len(label_prefix):]
        _LOGGER.debug(
            "Restoring %s at %s to on %s W / off %s W",
            pin,
            self.host,
            threshold_on,
            threshold_off,
        )
        await self.save_emrs_config(config)

    async def get_pin_forced_on(self, pin: str, label_prefix: str) -> bool:
        """Return True if the pin is currently forced on by this prefix."""
        return is_pin_forced(await self.get_pin_config(pin), label_prefix)
