import base64
import hashlib
import hmac

import pytest

from gdax.auth import (
    ACCESS_KEY,
    ACCESS_PASSPHRASE,
    ACCESS_SIGN,
    ACCESS_TIMESTAMP,
    Credentials,
    create_prehash_string,
    parse_request_path,
    sign_request,
)
from gdax.endpoints import Method, RequestDescriptor
from gdax.errors import InvalidSecretEncoding, MalformedUrl

from .conftest import SECRET


def expected_signature(prehash: str) -> str:
    digest = hmac.new(SECRET, prehash.encode(), hashlib.sha256).digest()
    return base64.b64encode(digest).decode()


def test_sign_request_headers(credentials, fixed_clock):
    request = RequestDescriptor(Method.POST, "https://api.gdax.com/orders", body='{"side": "buy"}')
    signed = sign_request(request, credentials, fixed_clock)

    assert signed.headers[ACCESS_KEY] == "test-key"
    assert signed.headers[ACCESS_PASSPHRASE] == "test-passphrase"
    # truncated, not rounded
    assert signed.headers[ACCESS_TIMESTAMP] == "1514764800"
    assert signed.headers[ACCESS_SIGN] == expected_signature('1514764800POST/orders{"side": "buy"}')
    assert signed.is_signed


def test_sign_request_does_not_mutate_input(credentials, fixed_clock):
    request = RequestDescriptor(Method.GET, "https://api.gdax.com/accounts",
                                headers={"Content-Type": "application/json"})
    signed = sign_request(request, credentials, fixed_clock)

    assert signed is not request
    assert request.headers == {"Content-Type": "application/json"}
    assert signed.headers["Content-Type"] == "application/json"
    assert not request.is_signed


def test_prehash_uppercases_method_and_keeps_query():
    prehash = create_prehash_string(100, "get", "https://api.gdax.com/orders?status=open&status=pending")
    assert prehash == "100GET/orders?status=open&status=pending"


def test_prehash_empty_body():
    assert create_prehash_string(7, "DELETE", "https://api.gdax.com/orders/abc", "") == "7DELETE/orders/abc"
    assert create_prehash_string(7, "DELETE", "https://api.gdax.com/orders/abc", None) == "7DELETE/orders/abc"


@pytest.mark.parametrize("url, path", [
    ("https://api.gdax.com/accounts", "/accounts"),
    ("https://api.gdax.com/accounts/123/ledger?limit=5", "/accounts/123/ledger?limit=5"),
    ("https://api-public.sandbox.pro.coinbase.io/fills", "/fills"),
    ("https://api.gdax.com", "/"),
    # host ".com" markers inside the path are not special
    ("https://api.gdax.com/reports/x.com/y", "/reports/x.com/y"),
])
def test_parse_request_path(url, path):
    assert parse_request_path(url) == path


@pytest.mark.parametrize("url", ["/orders", "api.gdax.com/orders", "ftp://api.gdax.com/orders", ""])
def test_parse_request_path_rejects_relative_urls(url):
    with pytest.raises(MalformedUrl):
        parse_request_path(url)


def test_sign_request_malformed_url(credentials):
    with pytest.raises(MalformedUrl):
        sign_request(RequestDescriptor(Method.GET, "/accounts"), credentials)


def test_invalid_secret_encoding():
    credentials = Credentials("key", "not base64!!", "pass")
    with pytest.raises(InvalidSecretEncoding):
        sign_request(RequestDescriptor(Method.GET, "https://api.gdax.com/accounts"), credentials)


def test_secret_round_trip(credentials):
    assert credentials.secret_bytes() == SECRET
    assert base64.b64decode(base64.b64encode(SECRET)) == SECRET


def test_credentials_repr_hides_secrets(credentials):
    text = repr(credentials)
    assert "test-key" in text
    assert credentials.api_secret not in text
    assert "test-passphrase" not in text


def test_signature_changes_with_each_input(credentials):
    base = dict(method=Method.POST, url="https://api.gdax.com/orders", body='{"size": 1}')

    def sign(timestamp=1000, **overrides):
        request = RequestDescriptor(**{**base, **overrides})
        return sign_request(request, credentials, lambda: timestamp).headers[ACCESS_SIGN]

    signatures = {
        sign(),
        sign(timestamp=1001),
        sign(method=Method.DELETE),
        sign(url="https://api.gdax.com/orders/1"),
        sign(body='{"size": 2}'),
    }
    assert len(signatures) == 5


def test_signatures_do_not_collide(credentials):
    request = RequestDescriptor(Method.GET, "https://api.gdax.com/accounts")
    signatures = {
        sign_request(request, credentials, lambda t=t: t).headers[ACCESS_SIGN]
        for t in range(1500000000, 1500000500)
    }
    assert len(signatures) == 500
