"""Config flow for the Fronius Boost integration."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlparse

import voluptuous as vol

from homeassistant.config_entries import ConfigFlow, ConfigFlowResult
from homeassistant.const import CONF_HOST, CONF_PASSWORD, CONF_USERNAME
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .api import FroniusApiClient
from .const import (
    CONF_ADD_ANOTHER,
    CONF_NORMAL_THRESHOLDS,
    CONF_PIN,
    CONF_PIN_NAME,
    CONF_PINS,
    CONF_TIMEOUT_HOURS,
    DEFAULT_USERNAME,
    DOMAIN,
    PINS,
)
from .exceptions import (
    FroniusAuthError,
    FroniusConnectionError,
    FroniusError,
    FroniusInvalidChallengeError,
)
from .models import AboutSystem

_LOGGER = logging.getLogger(__name__)

STEP_USER_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_HOST): str,
        vol.Required(CONF_USERNAME, default=DEFAULT_USERNAME): str,
        vol.Required(CONF_PASSWORD): str,
    }
)

STEP_PIN_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_PIN): vol.In(PINS),
        vol.Required(CONF_PIN_NAME): str,
        vol.Optional(CONF_TIMEOUT_HOURS, default=0): vol.All(
            vol.Coerce(float), vol.Range(min=0)
        ),
        vol.Optional(CONF_ADD_ANOTHER, default=False): bool,
    }
)


def _normalize_host(host: str) -> str | None:
    """Reduce user input to a bare host[:port], or None if it is not one."""
    host = host.strip()
    if "://" in host:
        parsed = urlparse(host)
        if parsed.scheme != "http" or parsed.path not in ("", "/"):
            return None
        host = parsed.netloc
    host = host.rstrip("/")
    if not host or "/" in host or any(ch.isspace() for ch in host):
        return None
    return host


class FroniusBoostConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle the Fronius Boost config flow."""

    VERSION = 1

    def __init__(self) -> None:
        """Initialize the config flow."""
        self._data: dict[str, Any] = {}
        self._pins: list[dict[str, Any]] = []
        self._about: AboutSystem | None = None

    async def _async_validate(
        self, host: str, username: str, password: str
    ) -> tuple[AboutSystem | None, dict[str, str]]:
        """Connect to the inverter and return its system info or form errors."""
        errors: dict[str, str] = {}
        api = FroniusApiClient(
            session=async_get_clientsession(self.hass),
            host=host,
            username=username,
            password=password,
        )
        try:
            return await api.get_about_system(), errors
        except (FroniusAuthError, FroniusInvalidChallengeError):
            errors["base"] = "invalid_auth"
        except FroniusConnectionError:
            errors["base"] = "cannot_connect"
        except FroniusError:
            _LOGGER.exception("Unexpected error talking to %s", host)
            errors["base"] = "unknown"
        return None, errors

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Step 1: Collect the inverter address and credentials."""
        errors: dict[str, str] = {}

        if user_input is not None:
            host = _normalize_host(user_input[CONF_HOST])
            if host is None:
                errors[CONF_HOST] = "invalid_host"
            else:
                about, errors = await self._async_validate(
                    host, user_input[CONF_USERNAME], user_input[CONF_PASSWORD]
                )
                if about is not None:
                    unique_id = about.get("txtLanMac") or about.get("txtWlanMac") or host
                    await self.async_set_unique_id(unique_id)
                    self._abort_if_unique_id_configured(updates={CONF_HOST: host})

                    self._about = about
                    self._data = {
                        CONF_HOST: host,
                        CONF_USERNAME: user_input[CONF_USERNAME],
                        CONF_PASSWORD: user_input[CONF_PASSWORD],
                    }
                    return await self.async_step_pin()

        return self.async_show_form(
            step_id="user",
            data_schema=STEP_USER_DATA_SCHEMA,
            errors=errors,
        )

    async def async_step_pin(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Step 2: Add an output pin, repeated until no more are wanted."""
        errors: dict[str, str] = {}

        if user_input is not None:
            pin = user_input[CONF_PIN]
            if any(existing[CONF_PIN] == pin for existing in self._pins):
                errors[CONF_PIN] = "duplicate_pin"
            else:
                self._pins.append(
                    {
                        CONF_PIN: pin,
                        CONF_PIN_NAME: user_input[CONF_PIN_NAME].strip() or pin,
                        CONF_TIMEOUT_HOURS: user_input[CONF_TIMEOUT_HOURS],
                    }
                )
                if user_input[CONF_ADD_ANOTHER] and len(self._pins) < len(PINS):
                    return await self.async_step_pin()

                return self.async_create_entry(
                    title=f"Fronius ({self._data[CONF_HOST]})",
                    data={
                        **self._data,
                        CONF_PINS: self._pins,
                        CONF_NORMAL_THRESHOLDS: {},
                    },
                )

        return self.async_show_form(
            step_id="pin",
            data_schema=STEP_PIN_DATA_SCHEMA,
            errors=errors,
            description_placeholders={
                "host": self._data.get(CONF_HOST, ""),
                "hardware": (self._about or {}).get("txtHwVersion", ""),
            },
        )

    async def async_step_reauth(
        self, entry_data: Mapping[str, Any]
    ) -> ConfigFlowResult:
        """Handle a rejected password."""
        self._data = dict(entry_data)
        return await self.async_step_reauth_confirm()

    async def async_step_reauth_confirm(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Ask for new credentials and update the entry."""
        errors: dict[str, str] = {}

        if user_input is not None:
            about, errors = await self._async_validate(
                self._data[CONF_HOST],
                user_input[CONF_USERNAME],
                user_input[CONF_PASSWORD],
            )
            if about is not None:
                entry = self.hass.config_entries.async_get_entry(self.context["entry_id"])
                if entry:
                    self.hass.config_entries.async_update_entry(
                        entry,
                        data={
                            **entry.data,
                            CONF_USERNAME: user_input[CONF_USERNAME],
                            CONF_PASSWORD: user_input[CONF_PASSWORD],
                        },
                    )
                    await self.hass.config_entries.async_reload(entry.entry_id)
                return self.async_abort(reason="reauth_successful")

        return self.async_show_form(
            step_id="reauth_confirm",
            data_schema=vol.Schema(
                {
                    vol.Required(
                        CONF_USERNAME,
                        default=self._data.get(CONF_USERNAME, DEFAULT_USERNAME),
                    ): str,
                    vol.Required(CONF_PASSWORD): str,
                }
            ),
            errors=errors,
            description_placeholders={"host": self._data.get(CONF_HOST, "")},
        )
