"""
GDAX Authentication
-------------------
Credentials and HMAC-SHA256 request signing for the GDAX API.
"""

import base64
import binascii
import dataclasses
import time
from dataclasses import dataclass
from typing import Callable
from urllib.parse import urlsplit

from cryptography.hazmat.primitives import hashes, hmac

from .errors import InvalidSecretEncoding, MalformedUrl

ACCESS_KEY = "CB-ACCESS-KEY"
ACCESS_SIGN = "CB-ACCESS-SIGN"
ACCESS_TIMESTAMP = "CB-ACCESS-TIMESTAMP"
ACCESS_PASSPHRASE = "CB-ACCESS-PASSPHRASE"


@dataclass(frozen=True)
class Credentials:
    """API key, base64 secret and passphrase for one account"""
    api_key: str
    api_secret: str = dataclasses.field(repr=False)
    api_passphrase: str = dataclasses.field(repr=False)

    def secret_bytes(self) -> bytes:
        """Decode the base64 API secret"""
        try:
            return base64.b64decode(self.api_secret, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidSecretEncoding("API secret is not valid base64") from e


def parse_request_path(url: str) -> str:
    """
    Extract the signed request path from an absolute URL.

    Returns the path plus the query string, e.g.
    "https://api.gdax.com/orders?status=open" -> "/orders?status=open".
    """
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise MalformedUrl(url, str(e)) from e

    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise MalformedUrl(url)

    path = parts.path or "/"
    if parts.query:
        path = f"{path}?{parts.query}"
    return path


def create_prehash_string(timestamp: int, method: str, url: str, body: str = "") -> str:
    """Message signed by HMAC: timestamp + METHOD + path + body, no separators"""
    return f"{timestamp}{method.upper()}{parse_request_path(url)}{body or ''}"


def create_signature(secret: bytes, prehash: str) -> str:
    """Base64 HMAC-SHA256 of the prehash string"""
    mac = hmac.HMAC(secret, hashes.SHA256())
    mac.update(prehash.encode('utf-8'))
    return base64.b64encode(mac.finalize()).decode('utf-8')


def get_auth_headers(credentials: Credentials, method: str, url: str, body: str = "",
                     clock: Callable[[], float] = time.time) -> dict:
    """Generate the four CB-ACCESS headers for a request"""
    timestamp = int(clock())
    prehash = create_prehash_string(timestamp, method, url, body)
    signature = create_signature(credentials.secret_bytes(), prehash)

    return {
        ACCESS_KEY: credentials.api_key,
        ACCESS_SIGN: signature,
        ACCESS_TIMESTAMP: str(timestamp),
        ACCESS_PASSPHRASE: credentials.api_passphrase,
    }


def sign_request(request, credentials: Credentials, clock: Callable[[], float] = time.time):
    """
    Return a copy of an unsigned RequestDescriptor with authentication headers.

    The signature covers the exact (timestamp, method, path, body) of the
    descriptor; changing any of them afterwards invalidates it.
    """
    headers = dict(request.headers)
    headers.update(get_auth_headers(credentials, request.method, request.url, request.body, clock))
    return dataclasses.replace(request, headers=headers)
