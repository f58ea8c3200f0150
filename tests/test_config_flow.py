"""Tests for config flow input handling."""

import pytest
import voluptuous as vol

from custom_components.fronius_boost.config_flow import (
    STEP_PIN_DATA_SCHEMA,
    _normalize_host,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("192.168.1.50", "192.168.1.50"),
        ("  192.168.1.50 ", "192.168.1.50"),
        ("inverter.local:8080", "inverter.local:8080"),
        ("http://192.168.1.50", "192.168.1.50"),
        ("http://192.168.1.50/", "192.168.1.50"),
        ("https://192.168.1.50", None),
        ("http://192.168.1.50/status/emrs/", None),
        ("192.168.1.50/admin", None),
        ("", None),
        ("inverter local", None),
    ],
)
def test_normalize_host(raw, expected):
    """Test host input is reduced to host[:port]."""
    assert _normalize_host(raw) == expected


def test_pin_schema_defaults():
    """Test the pin step fills in optional values."""
    data = STEP_PIN_DATA_SCHEMA({"pin": "pin2", "name": "Pool pump"})

    assert data["timeout_hours"] == 0
    assert data["add_another"] is False


def test_pin_schema_rejects_unknown_pin():
    """Test only the four EMRS outputs can be chosen."""
    with pytest.raises(vol.Invalid):
        STEP_PIN_DATA_SCHEMA({"pin": "pin5", "name": "x"})
