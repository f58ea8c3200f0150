"""Exceptions raised by the Fronius Boost API client."""

from __future__ import annotations


class FroniusError(Exception):
    """Base class for failures talking to the inverter."""


class FroniusConnectionError(FroniusError):
    """Raised when the inverter is unreachable or answers with an HTTP error."""


class FroniusInvalidChallengeError(FroniusError):
    """Raised when a 401 carries no usable digest challenge."""


class FroniusAuthError(FroniusError):
    """Raised when the inverter rejects freshly challenged credentials."""


class FroniusApplicationError(FroniusError):
    """Inverter accepted the request but reported a nonzero status code.

    This is recorded and logged by the session, never raised by it.
    """

    def __init__(self, code: int, reason: str = "", user_message: str = "") -> None:
        """Initialize the error."""
        super().__init__(f"Inverter returned status code {code}: {reason or user_message}")
        self.code = code
        self.reason = reason
        self.user_message = user_message


class FroniusPinNotFoundError(FroniusError):
    """Raised when a pin is missing from the EMRS document."""
