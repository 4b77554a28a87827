"""
GDAX REST API Client
--------------------
Client for interacting with GDAX's REST API.
"""

import logging
import time
from typing import Callable, List, Union

import requests

from . import config
from .auth import Credentials, sign_request
from .endpoints import RequestBuilder, RequestDescriptor
from .errors import ConfigError

logger = logging.getLogger(__name__)


def send(request: RequestDescriptor) -> requests.Response:
    """Hand a (signed) request to the HTTP transport and return the raw response"""
    logger.debug("%s %s", request.method.value, request.url)
    return requests.request(
        method=request.method.value,
        url=request.url,
        headers=request.headers,
        data=request.body.encode('utf-8') if request.body else None,
    )


class GdaxClient:
    """Client for interacting with GDAX's REST API"""

    def __init__(self, credentials: Credentials = None, rest_url: str = None,
                 clock: Callable[[], float] = time.time):
        self.credentials = credentials
        self.base_url = rest_url or config.rest_url()
        self.builder = RequestBuilder(self.base_url)
        self.clock = clock

    @classmethod
    def from_env(cls) -> "GdaxClient":
        """Client with credentials and URL from the environment / .env file"""
        settings = config.Config.from_env()
        return cls(settings.credentials, settings.rest_url)

    def _sign(self, request: RequestDescriptor) -> RequestDescriptor:
        if self.credentials is None:
            raise ConfigError("Credentials are required for private endpoints")
        return sign_request(request, self.credentials, self.clock)

    def _send(self, request: RequestDescriptor) -> Union[dict, list]:
        response = send(request)
        response.raise_for_status()
        return response.json()

    def _request(self, request: RequestDescriptor) -> Union[dict, list]:
        """Make authenticated request to the GDAX API"""
        return self._send(self._sign(request))

    def _public_request(self, request: RequestDescriptor) -> Union[dict, list]:
        return self._send(request)

    # Account endpoints
    def get_accounts(self) -> list:
        """Get all trading accounts"""
        return self._request(self.builder.get_accounts())

    def get_account_by_id(self, account_id: str) -> dict:
        return self._request(self.builder.get_account_by_id(account_id))

    def get_account_history(self, account_id: str, paging: dict = None) -> list:
        """Get ledger activity for an account"""
        return self._request(self.builder.get_account_history(account_id, paging))

    def get_account_holds(self, account_id: str, paging: dict = None) -> list:
        return self._request(self.builder.get_account_holds(account_id, paging))

    # Order endpoints
    def place_order(self, side: str, product_id: str, options: dict = None) -> dict:
        return self._request(self.builder.place_order(side, product_id, options))

    def place_limit_order(self, side: str, product_id: str, price, size, options: dict = None) -> dict:
        """Place a limit order"""
        return self._request(self.builder.place_limit_order(side, product_id, price, size, options))

    def place_market_order(self, side: str, product_id: str, options: dict = None) -> dict:
        return self._request(self.builder.place_market_order(side, product_id, options))

    def place_stop_order(self, side: str, product_id: str, price, size=None, options: dict = None) -> dict:
        return self._request(self.builder.place_stop_order(side, product_id, price, size, options))

    def get_orders(self, statuses: List[str] = None, options: dict = None) -> list:
        """Get orders. Statuses can be 'open', 'pending', 'active', 'done', 'all'"""
        return self._request(self.builder.get_orders(statuses, options))

    def get_order(self, order_id: str) -> dict:
        return self._request(self.builder.get_order(order_id))

    def cancel_order(self, order_id: str):
        """Cancel an existing order"""
        return self._request(self.builder.cancel_order(order_id))

    def cancel_all(self, product_id: str = None) -> list:
        """Cancel all open orders, optionally only for one product"""
        return self._request(self.builder.cancel_all(product_id))

    # Trade history
    def get_fills(self, options: dict = None) -> list:
        """Get fills (executed trades)"""
        return self._request(self.builder.get_fills(options))

    # Funding endpoints
    def get_payment_methods(self) -> list:
        return self._request(self.builder.get_payment_methods())

    def get_coinbase_accounts(self) -> list:
        return self._request(self.builder.get_coinbase_accounts())

    def deposit_from_coinbase(self, amount, currency: str, coinbase_account_id: str) -> dict:
        return self._request(self.builder.deposit_from_coinbase(amount, currency, coinbase_account_id))

    def withdraw_to_coinbase(self, amount, currency: str, coinbase_account_id: str) -> dict:
        return self._request(self.builder.withdraw_to_coinbase(amount, currency, coinbase_account_id))

    def deposit_from_payment_method(self, amount, currency: str, payment_method_id: str) -> dict:
        return self._request(self.builder.deposit_from_payment_method(amount, currency, payment_method_id))

    def withdraw_to_payment_method(self, amount, currency: str, payment_method_id: str) -> dict:
        return self._request(self.builder.withdraw_to_payment_method(amount, currency, payment_method_id))

    def withdraw_to_crypto_address(self, amount, currency: str, crypto_address: str) -> dict:
        return self._request(self.builder.withdraw_to_crypto_address(amount, currency, crypto_address))

    # Reports
    def generate_fills_report(self, start_date: str, end_date: str, product_id: str,
                              options: dict = None) -> dict:
        return self._request(self.builder.generate_fills_report(start_date, end_date, product_id, options))

    def generate_account_report(self, start_date: str, end_date: str, account_id: str,
                                options: dict = None) -> dict:
        return self._request(self.builder.generate_account_report(start_date, end_date, account_id, options))

    def get_report_status(self, report_id: str) -> dict:
        return self._request(self.builder.get_report_status(report_id))

    def get_trailing_volume(self) -> list:
        """Get 30-day trailing volume per product"""
        return self._request(self.builder.get_trailing_volume())

    # Market endpoints (public)
    def get_time(self) -> dict:
        """Get exchange server time (public endpoint)"""
        return self._public_request(self.builder.get_time())

    def get_products(self) -> list:
        return self._public_request(self.builder.get_products())

    def get_currencies(self) -> list:
        return self._public_request(self.builder.get_currencies())

    def get_order_book(self, product_id: str, level: int = None) -> dict:
        return self._public_request(self.builder.get_order_book(product_id, level))

    def get_ticker(self, product_id: str) -> dict:
        return self._public_request(self.builder.get_ticker(product_id))

    def get_trades(self, product_id: str, paging: dict = None) -> list:
        return self._public_request(self.builder.get_trades(product_id, paging))

    def get_historic_rates(self, product_id: str, start: str = None, end: str = None,
                           granularity: Union[int, str, None] = None) -> list:
        """Get candles as [time, low, high, open, close, volume] rows"""
        return self._public_request(self.builder.get_historic_rates(product_id, start, end, granularity))

    def get_product_stats(self, product_id: str) -> dict:
        return self._public_request(self.builder.get_product_stats(product_id))
