"""Digest-authenticated HTTP session against one Fronius inverter."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import aiohttp

from .const import (
    API_TIMEOUT_SECONDS,
    HEADER_WWW_AUTHENTICATE,
    HEADER_X_WWW_AUTHENTICATE,
    MAX_RESPONSE_BYTES,
    READ_CHUNK_BYTES,
)
from .digest import Challenge, DigestAuth, parse_challenge
from .exceptions import (
    FroniusApplicationError,
    FroniusAuthError,
    FroniusConnectionError,
    FroniusInvalidChallengeError,
)

_LOGGER = logging.getLogger(__name__)


class FroniusDigestSession:
    """Issue requests to an inverter, answering its digest challenges.

    The session holds at most one challenge. Without one, requests go out
    unauthenticated to provoke a 401; each 401 replaces the challenge and
    the request is retried exactly once. Requests are serialized so the
    challenge and nonce count are never used from two requests at once.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        host: str,
        username: str,
        password: str,
        *,
        timeout: float = API_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the session."""
        self._session = session
        self._host = host
        self._auth = DigestAuth(username, password)
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._challenge: Challenge | None = None
        self._lock = asyncio.Lock()
        self.last_application_error: FroniusApplicationError | None = None

    @property
    def host(self) -> str:
        """Return the inverter host."""
        return self._host

    @property
    def challenge(self) -> Challenge | None:
        """Return the challenge currently used to authenticate."""
        return self._challenge

    @property
    def nonce_count(self) -> int:
        """Return the number of Authorization headers built so far."""
        return self._auth.nonce_count

    def _url(self, path: str) -> str:
        """Build a full URL from a request path."""
        return f"http://{self._host}{path}"

    # ── Public API ───────────────────────────────────────────────────

    async def get(self, path: str) -> Any:
        """GET a path and return the decoded JSON body."""
        return await self.request("GET", path)

    async def post(self, path: str, json_data: Any) -> Any:
        """POST a JSON document and return the decoded JSON body."""
        return await self.request("POST", path, json_data=json_data)

    async def request(
        self, method: str, path: str, *, json_data: Any | None = None
    ) -> Any:
        """Make an authenticated request and return the decoded JSON body."""
        async with self._lock:
            status, headers, body = await self._send(method, path, json_data)

            if status == 401:
                challenge = parse_challenge(
                    headers.get(HEADER_WWW_AUTHENTICATE)
                    or headers.get(HEADER_X_WWW_AUTHENTICATE)
                )
                if challenge is None:
                    _LOGGER.error(
                        "Inverter %s answered 401 without a usable challenge on %s %s",
                        self._host,
                        method,
                        path,
                    )
                    raise FroniusInvalidChallengeError(
                        f"No valid digest challenge from {self._host}"
                    )
                _LOGGER.debug("Received new digest challenge from %s", self._host)
                self._challenge = challenge

                status, headers, body = await self._send(method, path, json_data)
                if status == 401:
                    _LOGGER.error(
                        "Authentication rejected by %s on %s %s", self._host, method, path
                    )
                    raise FroniusAuthError(f"Authentication failed for {self._host}")

            if status >= 400:
                _LOGGER.error(
                    "Failed with HTTP %s while trying to %s %s", status, method, self._url(path)
                )
                raise FroniusConnectionError(f"API error (HTTP {status})")

            data = self._decode(body, path)
            if method.upper() == "POST":
                self._check_application_status(data, path)
            return data

    # ── Private helpers ──────────────────────────────────────────────

    async def _send(
        self, method: str, path: str, json_data: Any | None
    ) -> tuple[int, Any, bytes]:
        """Send one request attempt and return status, headers and raw body."""
        url = self._url(path)
        headers: dict[str, str] = {}
        if self._challenge is not None:
            headers["Authorization"] = self._auth.authorization(
                method, path, self._challenge
            )
        if json_data is not None:
            headers["Content-Type"] = "application/json"

        try:
            async with self._session.request(
                method, url, json=json_data, headers=headers, timeout=self._timeout
            ) as response:
                chunks: list[bytes] = []
                size = 0
                async for chunk in response.content.iter_chunked(READ_CHUNK_BYTES):
                    size += len(chunk)
                    if size > MAX_RESPONSE_BYTES:
                        raise FroniusConnectionError(
                            "Response body exceeds maximum allowed size"
                        )
                    chunks.append(chunk)
                return response.status, response.headers, b"".join(chunks)
        except aiohttp.ClientError as err:
            _LOGGER.error("Failed with %s while trying to %s %s", err, method, url)
            raise FroniusConnectionError(
                f"Error communicating with inverter {self._host}: {err}"
            ) from err
        except asyncio.TimeoutError as err:
            _LOGGER.error("Timed out while trying to %s %s", method, url)
            raise FroniusConnectionError(
                f"Timeout communicating with inverter {self._host}"
            ) from err

    def _decode(self, raw_body: bytes, path: str) -> Any:
        """Decode a JSON response body."""
        try:
            return json.loads(raw_body)
        except (json.JSONDecodeError, ValueError) as err:
            raise FroniusConnectionError(f"Invalid JSON in response to {path}") from err

    def _check_application_status(self, data: Any, path: str) -> None:
        """Record and log a nonzero status code embedded in a write response."""
        if not isinstance(data, dict):
            return
        head = data.get("Head")
        status = head.get("Status") if isinstance(head, dict) else None
        if not isinstance(status, dict):
            return
        code = status.get("Code", 0)
        if code == 0:
            self.last_application_error = None
            return

        error = FroniusApplicationError(
            code, status.get("Reason", ""), status.get("UserMessage", "")
        )
        self.last_application_error = error
        _LOGGER.error(
            "Failed to POST to %s with response %s",
            self._url(path),
            json.dumps(data.get("Head"), indent=4),
        )
