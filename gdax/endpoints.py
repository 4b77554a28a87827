"""
GDAX Endpoints
--------------
Builds unsigned request descriptors for the GDAX REST API.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, Union
from urllib.parse import urlencode

# Candle widths accepted by /products/{id}/candles, in seconds
GRANULARITIES = {
    '1m': 60,
    '5m': 300,
    '15m': 900,
    '1h': 3600,
    '6h': 21600,
    '1d': 86400,
}


class Method(str, Enum):
    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"


@dataclass(frozen=True)
class RequestDescriptor:
    """An HTTP request before (or after) signing"""
    method: Method
    url: str
    body: str = ""
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def is_signed(self) -> bool:
        return "CB-ACCESS-SIGN" in self.headers


def build_query(params: Union[dict, Iterable[Tuple[str, object]], None]) -> str:
    """
    URL-encode query parameters in input order.

    None values are dropped and list values repeat the key, so
    {"status": ["open", "pending"]} -> "status=open&status=pending".
    """
    if not params:
        return ""
    items = params.items() if isinstance(params, dict) else params

    pairs = []
    for key, value in items:
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, v) for v in value)
        else:
            pairs.append((key, value))
    return urlencode(pairs)


def _upper(identifier: Optional[str]) -> Optional[str]:
    return identifier.upper() if identifier is not None else None


def _granularity(granularity: Union[int, str, None]) -> Optional[int]:
    if granularity is None:
        return None
    if isinstance(granularity, str):
        if granularity not in GRANULARITIES:
            raise ValueError(f"Unknown granularity {granularity!r}, expected one of {list(GRANULARITIES)}")
        return GRANULARITIES[granularity]
    if granularity not in GRANULARITIES.values():
        raise ValueError(f"Unsupported granularity {granularity}s, expected one of {sorted(GRANULARITIES.values())}")
    return granularity


class RequestBuilder:
    """Constructs a RequestDescriptor for each REST endpoint"""

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")

    def _url(self, endpoint: str, params=None) -> str:
        url = f"{self.base_url}{endpoint}"
        query = build_query(params)
        return f"{url}?{query}" if query else url

    def build_get_request(self, endpoint: str, params=None) -> RequestDescriptor:
        return RequestDescriptor(Method.GET, self._url(endpoint, params))

    def build_delete_request(self, endpoint: str, params=None) -> RequestDescriptor:
        return RequestDescriptor(Method.DELETE, self._url(endpoint, params))

    def build_post_request(self, endpoint: str, body: dict) -> RequestDescriptor:
        """POST with a JSON body, serialized once so the signed bytes are the sent bytes"""
        return RequestDescriptor(
            Method.POST,
            self._url(endpoint),
            body=json.dumps(body),
            headers={"Content-Type": "application/json"},
        )

    # ==================== Accounts ====================

    def get_accounts(self) -> RequestDescriptor:
        return self.build_get_request("/accounts")

    def get_account_by_id(self, account_id: str) -> RequestDescriptor:
        return self.build_get_request(f"/accounts/{account_id}")

    def get_account_history(self, account_id: str, paging: dict = None) -> RequestDescriptor:
        """Ledger entries; paging takes before/after/limit"""
        return self.build_get_request(f"/accounts/{account_id}/ledger", paging)

    def get_account_holds(self, account_id: str, paging: dict = None) -> RequestDescriptor:
        return self.build_get_request(f"/accounts/{account_id}/holds", paging)

    # ==================== Orders ====================

    def place_order(self, side: str, product_id: str, options: dict = None) -> RequestDescriptor:
        """
        Generic order. Caller options are merged first so that side and
        product_id can never be overridden by them.
        """
        body = {
            **(options or {}),
            "side": side,
            "product_id": _upper(product_id),
        }
        return self.build_post_request("/orders", body)

    def place_limit_order(self, side: str, product_id: str, price, size,
                          options: dict = None) -> RequestDescriptor:
        return self.place_order(side, product_id, {
            **(options or {}),
            "price": price,
            "size": size,
            "type": "limit",
        })

    def place_market_order(self, side: str, product_id: str, options: dict = None) -> RequestDescriptor:
        """Market order; pass size or funds in options"""
        return self.place_order(side, product_id, {**(options or {}), "type": "market"})

    def place_stop_order(self, side: str, product_id: str, price, size=None,
                         options: dict = None) -> RequestDescriptor:
        required = {"price": price, "type": "stop"}
        if size is not None:
            required["size"] = size
        return self.place_order(side, product_id, {**(options or {}), **required})

    def get_orders(self, statuses: List[str] = None, options: dict = None) -> RequestDescriptor:
        """List orders. Each status becomes its own status=<value> pair"""
        params: List[Tuple[str, object]] = [("status", status) for status in (statuses or [])]
        for key, value in (options or {}).items():
            if key == "product_id":
                value = _upper(value)
            params.append((key, value))
        return self.build_get_request("/orders", params)

    def get_order(self, order_id: str) -> RequestDescriptor:
        return self.build_get_request(f"/orders/{order_id}")

    def cancel_order(self, order_id: str) -> RequestDescriptor:
        return self.build_delete_request(f"/orders/{order_id}")

    def cancel_all(self, product_id: str = None) -> RequestDescriptor:
        return self.build_delete_request("/orders", {"product_id": _upper(product_id)})

    def get_fills(self, options: dict = None) -> RequestDescriptor:
        """Fills, filtered by order_id/product_id and paged with before/after/limit"""
        params = dict(options or {})
        if params.get("product_id") is not None:
            params["product_id"] = _upper(params["product_id"])
        return self.build_get_request("/fills", params)

    # ==================== Funding ====================

    def get_payment_methods(self) -> RequestDescriptor:
        return self.build_get_request("/payment-methods")

    def get_coinbase_accounts(self) -> RequestDescriptor:
        return self.build_get_request("/coinbase-accounts")

    def deposit_from_coinbase(self, amount, currency: str, coinbase_account_id: str) -> RequestDescriptor:
        return self.build_post_request("/deposits/coinbase-account", {
            "amount": amount,
            "currency": _upper(currency),
            "coinbase_account_id": coinbase_account_id,
        })

    def withdraw_to_coinbase(self, amount, currency: str, coinbase_account_id: str) -> RequestDescriptor:
        return self.build_post_request("/withdrawals/coinbase-account", {
            "amount": amount,
            "currency": _upper(currency),
            "coinbase_account_id": coinbase_account_id,
        })

    def deposit_from_payment_method(self, amount, currency: str, payment_method_id: str) -> RequestDescriptor:
        return self.build_post_request("/deposits/payment-method", {
            "amount": amount,
            "currency": _upper(currency),
            "payment_method_id": payment_method_id,
        })

    def withdraw_to_payment_method(self, amount, currency: str, payment_method_id: str) -> RequestDescriptor:
        return self.build_post_request("/withdrawals/payment-method", {
            "amount": amount,
            "currency": _upper(currency),
            "payment_method_id": payment_method_id,
        })

    def withdraw_to_crypto_address(self, amount, currency: str, crypto_address: str) -> RequestDescriptor:
        return self.build_post_request("/withdrawals/crypto", {
            "amount": amount,
            "currency": _upper(currency),
            "crypto_address": crypto_address,
        })

    # ==================== Reports ====================

    def generate_fills_report(self, start_date: str, end_date: str, product_id: str,
                              options: dict = None) -> RequestDescriptor:
        """Request a fills report; options may set format (pdf/csv) and email"""
        return self.build_post_request("/reports", {
            **(options or {}),
            "type": "fills",
            "start_date": start_date,
            "end_date": end_date,
            "product_id": _upper(product_id),
        })

    def generate_account_report(self, start_date: str, end_date: str, account_id: str,
                                options: dict = None) -> RequestDescriptor:
        return self.build_post_request("/reports", {
            **(options or {}),
            "type": "account",
            "start_date": start_date,
            "end_date": end_date,
            "account_id": account_id,
        })

    def get_report_status(self, report_id: str) -> RequestDescriptor:
        return self.build_get_request(f"/reports/{report_id}")

    def get_trailing_volume(self) -> RequestDescriptor:
        return self.build_get_request("/users/self/trailing-volume")

    # ==================== Market data (public) ====================

    def get_time(self) -> RequestDescriptor:
        return self.build_get_request("/time")

    def get_products(self) -> RequestDescriptor:
        return self.build_get_request("/products")

    def get_currencies(self) -> RequestDescriptor:
        return self.build_get_request("/currencies")

    def get_order_book(self, product_id: str, level: int = None) -> RequestDescriptor:
        """Order book at level 1 (best bid/ask), 2 (aggregated) or 3 (full)"""
        if level is not None and level not in (1, 2, 3):
            raise ValueError(f"Order book level must be 1, 2 or 3, got {level}")
        return self.build_get_request(f"/products/{_upper(product_id)}/book", {"level": level})

    def get_ticker(self, product_id: str) -> RequestDescriptor:
        return self.build_get_request(f"/products/{_upper(product_id)}/ticker")

    def get_trades(self, product_id: str, paging: dict = None) -> RequestDescriptor:
        return self.build_get_request(f"/products/{_upper(product_id)}/trades", paging)

    def get_historic_rates(self, product_id: str, start: str = None, end: str = None,
                           granularity: Union[int, str, None] = None) -> RequestDescriptor:
        """Candles between ISO 8601 start and end, granularity in seconds or as '1m', '1h', ..."""
        params = {
            "start": start,
            "end": end,
            "granularity": _granularity(granularity),
        }
        return self.build_get_request(f"/products/{_upper(product_id)}/candles", params)

    def get_product_stats(self, product_id: str) -> RequestDescriptor:
        return self.build_get_request(f"/products/{_upper(product_id)}/stats")
