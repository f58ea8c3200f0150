"""Digest authentication as spoken by the Fronius web interface.

The inverter's own web UI computes the Authorization header in
JavaScript with a few deviations from RFC 2617: the nonce count is a
decimal counter that keeps increasing across nonces, and only the first
advertised qop option is ever used. The device accepts exactly that, so
the same computation is reproduced here.
"""

from __future__ import annotations

import hashlib
import re
import secrets
from dataclasses import dataclass, field

from .const import CLIENT_NONCE_BYTES, NONCE_COUNT_WIDTH

# key=value with the value double-quoted, single-quoted or bare
_PARAM_PATTERN = re.compile(r"""(\w+)\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s,]*))""")


@dataclass(frozen=True)
class Challenge:
    """Parsed WWW-Authenticate challenge."""

    realm: str
    nonce: str
    opaque: str | None = None
    qop_options: tuple[str, ...] = ()
    params: dict[str, str] = field(default_factory=dict, compare=False)

    @property
    def qop(self) -> str | None:
        """Return the qop option used for authentication."""
        return self.qop_options[0] if self.qop_options else None


def parse_challenge(raw: str | None) -> Challenge | None:
    """Parse a WWW-Authenticate header value.

    Returns None when the value lacks a realm or a nonce.
    """
    if not raw:
        return None

    params: dict[str, str] = {}
    for match in _PARAM_PATTERN.finditer(raw):
        key = match.group(1).lower()
        value = next((g for g in match.group(2, 3, 4) if g is not None), "")
        params[key] = value

    realm = params.get("realm")
    nonce = params.get("nonce")
    if not realm or not nonce:
        return None

    qop_options = tuple(
        option.strip() for option in params.get("qop", "").split(",") if option.strip()
    )

    return Challenge(
        realm=realm,
        nonce=nonce,
        opaque=params.get("opaque") or None,
        qop_options=qop_options,
        params=params,
    )


def md5_hex(data: str) -> str:
    """Return the lowercase hex MD5 of a string."""
    return hashlib.md5(data.encode("utf-8")).hexdigest()


def compute_authorization(
    method: str,
    uri: str,
    challenge: Challenge,
    username: str,
    password: str,
    nc: str,
    cnonce: str,
) -> str:
    """Build the Authorization header value for one request."""
    ha1 = md5_hex(f"{username}:{challenge.realm}:{password}")
    ha2 = md5_hex(f"{method.upper()}:{uri}")

    qop = challenge.qop
    if qop:
        response = md5_hex(f"{ha1}:{challenge.nonce}:{nc}:{cnonce}:{qop}:{ha2}")
    else:
        response = md5_hex(f"{ha1}:{challenge.nonce}:{ha2}")

    header = (
        f'Digest username="{username}", realm="{challenge.realm}", '
        f'nonce="{challenge.nonce}", uri="{uri}", response="{response}"'
    )
    if challenge.opaque:
        header += f', opaque="{challenge.opaque}"'
    if qop:
        header += f', qop={qop}, nc={nc}, cnonce="{cnonce}"'
    return header


class NonceSource:
    """Hands out the nonce count and client nonce for each request."""

    def __init__(self) -> None:
        """Initialize the source with no requests counted."""
        self._count = 0

    @property
    def count(self) -> int:
        """Return the last nonce count handed out."""
        return self._count

    def next_counter(self) -> str:
        """Advance and return the zero-padded nonce count."""
        self._count += 1
        return f"{self._count:0{NONCE_COUNT_WIDTH}d}"

    def next_client_nonce(self) -> str:
        """Return a fresh random client nonce."""
        return secrets.token_hex(CLIENT_NONCE_BYTES)


class DigestAuth:
    """Credentials plus the request counter of one authenticated session."""

    def __init__(
        self, username: str, password: str, nonce_source: NonceSource | None = None
    ) -> None:
        """Initialize the authenticator."""
        self._username = username
        self._password = password
        self._nonces = nonce_source or NonceSource()

    @property
    def username(self) -> str:
        """Return the username."""
        return self._username

    @property
    def nonce_count(self) -> int:
        """Return how many headers have been built."""
        return self._nonces.count

    def authorization(self, method: str, uri: str, challenge: Challenge) -> str:
        """Build a header, consuming one nonce count."""
        return compute_authorization(
            method,
            uri,
            challenge,
            self._username,
            self._password,
            nc=self._nonces.next_counter(),
            cnonce=self._nonces.next_client_nonce(),
        )
