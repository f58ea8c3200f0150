"""Tests for digest challenge parsing and header computation."""

from itertools import permutations

import pytest

from custom_components.fronius_boost.digest import (
    Challenge,
    DigestAuth,
    NonceSource,
    compute_authorization,
    md5_hex,
    parse_challenge,
)

RFC_CHALLENGE = (
    'Digest realm="testrealm@host.com", nonce="dcd98b7102dd2f0e8b11d0f600bfb0c093", '
    'qop="auth", opaque="5ccc069c403ebaf9f0171e9517f40e41"'
)


def test_parse_challenge_fields():
    """Test all challenge fields are extracted."""
    challenge = parse_challenge(RFC_CHALLENGE)

    assert challenge is not None
    assert challenge.realm == "testrealm@host.com"
    assert challenge.nonce == "dcd98b7102dd2f0e8b11d0f600bfb0c093"
    assert challenge.opaque == "5ccc069c403ebaf9f0171e9517f40e41"
    assert challenge.qop_options == ("auth",)
    assert challenge.qop == "auth"


def test_parse_challenge_key_order_does_not_matter():
    """Test every ordering of the pairs parses to the same challenge."""
    pairs = [
        'realm="Webinterface area"',
        "nonce='abc123'",
        "qop=auth",
        'opaque="xyz"',
    ]
    expected = parse_challenge(", ".join(pairs))
    assert expected is not None

    for ordering in permutations(pairs):
        assert parse_challenge("Digest " + ", ".join(ordering)) == expected


@pytest.mark.parametrize(
    "raw",
    [
        'Digest realm="r", nonce="n"',
        "Digest realm='r', nonce='n'",
        "Digest realm=r, nonce=n",
        'realm="r",nonce="n"',
    ],
)
def test_parse_challenge_quoting_styles(raw):
    """Test quoted and unquoted values are accepted."""
    challenge = parse_challenge(raw)
    assert challenge == Challenge(realm="r", nonce="n")


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "",
        "Digest",
        'Digest nonce="n", qop="auth"',
        'Digest realm="r", qop="auth"',
        'Digest realm="", nonce="n"',
    ],
)
def test_parse_challenge_missing_realm_or_nonce(raw):
    """Test incomplete challenges are rejected."""
    assert parse_challenge(raw) is None


def test_parse_challenge_multiple_qop_uses_first():
    """Test only the first advertised qop option is used."""
    challenge = parse_challenge('Digest realm="r", qop="auth,auth-int", nonce="n"')

    assert challenge.qop_options == ("auth", "auth-int")
    assert challenge.qop == "auth"
    assert challenge.nonce == "n"


def test_parse_challenge_keeps_unknown_keys():
    """Test unrecognised parameters stay available to callers."""
    challenge = parse_challenge('Digest realm="r", nonce="n", algorithm=MD5, stale=FALSE')

    assert challenge.params["algorithm"] == "MD5"
    assert challenge.params["stale"] == "FALSE"
    assert challenge.opaque is None
    assert challenge.qop is None


def test_rfc2617_worked_example():
    """Test the RFC 2617 example values are reproduced."""
    assert md5_hex("Mufasa:testrealm@host.com:Circle Of Life") == (
        "939e7578ed9e3c518a452acee763bce9"
    )
    assert md5_hex("GET:/dir/index.html") == "39aff3a2bab6126f332b942af96d3366"

    header = compute_authorization(
        "GET",
        "/dir/index.html",
        parse_challenge(RFC_CHALLENGE),
        "Mufasa",
        "Circle Of Life",
        nc="00000001",
        cnonce="0a4f113b",
    )

    assert header == (
        'Digest username="Mufasa", realm="testrealm@host.com", '
        'nonce="dcd98b7102dd2f0e8b11d0f600bfb0c093", uri="/dir/index.html", '
        'response="6629fae49393a05397450978507c4ef1", '
        'opaque="5ccc069c403ebaf9f0171e9517f40e41", '
        'qop=auth, nc=00000001, cnonce="0a4f113b"'
    )


def test_authorization_without_qop():
    """Test the legacy response formula when no qop is offered."""
    challenge = Challenge(realm="r", nonce="n")
    header = compute_authorization("get", "/status/emrs/", challenge, "u", "p", "00000001", "c")

    ha1 = md5_hex("u:r:p")
    ha2 = md5_hex("GET:/status/emrs/")
    assert header == (
        f'Digest username="u", realm="r", nonce="n", uri="/status/emrs/", '
        f'response="{md5_hex(f"{ha1}:n:{ha2}")}"'
    )


def test_authorization_is_deterministic():
    """Test fixed inputs always give the same header."""
    challenge = parse_challenge(RFC_CHALLENGE)
    args = ("/config/emrs/?method=save", challenge, "service", "pw", "00000007", "deadbeefcafef00d")

    assert compute_authorization("POST", *args) == compute_authorization("POST", *args)
    assert compute_authorization("post", *args) == compute_authorization("POST", *args)
    assert compute_authorization("GET", *args) != compute_authorization("POST", *args)


def test_nonce_source_counter():
    """Test the counter starts at one and is zero padded."""
    source = NonceSource()
    assert source.count == 0

    assert source.next_counter() == "00000001"
    assert source.next_counter() == "00000002"
    for _ in range(7):
        source.next_counter()
    assert source.next_counter() == "00000010"
    assert source.count == 10


def test_nonce_source_client_nonce():
    """Test client nonces are 16 hex characters and vary."""
    source = NonceSource()
    nonces = {source.next_client_nonce() for _ in range(20)}

    assert len(nonces) == 20
    for nonce in nonces:
        assert len(nonce) == 16
        int(nonce, 16)


def test_digest_auth_consumes_one_count_per_header():
    """Test each built header advances the nonce count by one."""
    auth = DigestAuth("service", "pw")
    challenge = parse_challenge(RFC_CHALLENGE)

    first = auth.authorization("GET", "/status/emrs/", challenge)
    second = auth.authorization("GET", "/status/emrs/", challenge)

    assert auth.nonce_count == 2
    assert "nc=00000001" in first
    assert "nc=00000002" in second
    assert first != second
