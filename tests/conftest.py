import base64

import pytest

from gdax.auth import Credentials
from gdax.endpoints import RequestBuilder

SECRET = b"\x00gdax-test-secret\xff" * 4
BASE_URL = "https://api.gdax.com"


@pytest.fixture
def credentials():
    return Credentials(
        api_key="test-key",
        api_secret=base64.b64encode(SECRET).decode(),
        api_passphrase="test-passphrase",
    )


@pytest.fixture
def builder():
    return RequestBuilder(BASE_URL)


@pytest.fixture
def fixed_clock():
    return lambda: 1514764800.987
