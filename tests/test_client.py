import json

import pytest
import requests

from gdax.auth import ACCESS_SIGN, ACCESS_TIMESTAMP
from gdax.client import GdaxClient, send
from gdax.endpoints import Method, RequestDescriptor
from gdax.errors import ConfigError, TransportError

from .conftest import BASE_URL


@pytest.fixture
def mock_request(mocker):
    response = mocker.Mock(spec=requests.Response)
    response.json.return_value = {"ok": True}
    response.raise_for_status.return_value = None
    return mocker.patch("gdax.client.requests.request", return_value=response)


@pytest.fixture
def client(credentials, fixed_clock):
    return GdaxClient(credentials, rest_url=BASE_URL, clock=fixed_clock)


def test_send_passes_body_bytes(mock_request):
    request = RequestDescriptor(Method.POST, f"{BASE_URL}/orders", body='{"a": 1}', headers={"X": "1"})
    response = send(request)

    assert response is mock_request.return_value
    mock_request.assert_called_once_with(
        method="POST",
        url=f"{BASE_URL}/orders",
        headers={"X": "1"},
        data=b'{"a": 1}',
    )


def test_send_without_body(mock_request):
    send(RequestDescriptor(Method.GET, f"{BASE_URL}/accounts"))
    assert mock_request.call_args.kwargs["data"] is None


def test_private_request_is_signed(client, mock_request):
    assert client.get_accounts() == {"ok": True}

    kwargs = mock_request.call_args.kwargs
    assert kwargs["method"] == "GET"
    assert kwargs["url"] == f"{BASE_URL}/accounts"
    assert kwargs["headers"][ACCESS_TIMESTAMP] == "1514764800"
    assert ACCESS_SIGN in kwargs["headers"]


def test_place_limit_order_sends_signed_body(client, mock_request):
    client.place_limit_order("buy", "btc-usd", "100.00", "0.01")

    kwargs = mock_request.call_args.kwargs
    assert kwargs["method"] == "POST"
    assert kwargs["headers"]["Content-Type"] == "application/json"
    assert json.loads(kwargs["data"]) == {
        "price": "100.00",
        "size": "0.01",
        "type": "limit",
        "side": "buy",
        "product_id": "BTC-USD",
    }


def test_get_orders_query(client, mock_request):
    client.get_orders(statuses=["open", "pending"])
    assert mock_request.call_args.kwargs["url"] == f"{BASE_URL}/orders?status=open&status=pending"


def test_public_request_is_not_signed(mock_request):
    client = GdaxClient(rest_url=BASE_URL)
    client.get_ticker("btc-usd")

    kwargs = mock_request.call_args.kwargs
    assert kwargs["url"] == f"{BASE_URL}/products/BTC-USD/ticker"
    assert not any(name.startswith("CB-ACCESS") for name in kwargs["headers"])


def test_private_request_without_credentials(mock_request):
    client = GdaxClient(rest_url=BASE_URL)
    with pytest.raises(ConfigError):
        client.get_accounts()
    mock_request.assert_not_called()


def test_http_error_surfaces_unchanged(client, mock_request):
    error = requests.HTTPError("400 Client Error")
    mock_request.return_value.raise_for_status.side_effect = error

    with pytest.raises(TransportError) as exc_info:
        client.cancel_order("o-1")
    assert exc_info.value is error


def test_connection_error_surfaces_unchanged(client, mock_request):
    mock_request.side_effect = requests.ConnectionError("refused")
    with pytest.raises(requests.ConnectionError):
        client.get_fills()


def test_from_env(monkeypatch):
    monkeypatch.setenv("GDAX_API_KEY", "env-key")
    monkeypatch.setenv("GDAX_API_SECRET", "c2VjcmV0")
    monkeypatch.setenv("GDAX_API_PASSPHRASE", "env-pass")
    monkeypatch.setenv("GDAX_API_URL", "https://api.example.test")

    client = GdaxClient.from_env()
    assert client.credentials.api_key == "env-key"
    assert client.base_url == "https://api.example.test"
