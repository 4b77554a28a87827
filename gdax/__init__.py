"""
GDAX API Package
----------------
Core components for interacting with the GDAX REST and websocket APIs.
"""

from .config import REST_URL, WS_URL, SANDBOX_REST_URL, SANDBOX_WS_URL, Config, load_credentials
from .auth import Credentials, sign_request, get_auth_headers, parse_request_path
from .endpoints import GRANULARITIES, Method, RequestBuilder, RequestDescriptor
from .client import GdaxClient, send
from .websocket import FeedHandler, FeedSession, LoggingFeedHandler, SessionState, subscribe
from .errors import (
    ConfigError,
    GdaxError,
    InvalidSecretEncoding,
    MalformedUrl,
    RemoteClose,
    TransportError,
    WebSocketError,
)

__all__ = [
    # Config
    'REST_URL',
    'WS_URL',
    'SANDBOX_REST_URL',
    'SANDBOX_WS_URL',
    'Config',
    'load_credentials',
    # Auth
    'Credentials',
    'sign_request',
    'get_auth_headers',
    'parse_request_path',
    # Endpoints
    'GRANULARITIES',
    'Method',
    'RequestBuilder',
    'RequestDescriptor',
    # Client
    'GdaxClient',
    'send',
    # WebSocket
    'FeedHandler',
    'FeedSession',
    'LoggingFeedHandler',
    'SessionState',
    'subscribe',
    # Errors
    'ConfigError',
    'GdaxError',
    'InvalidSecretEncoding',
    'MalformedUrl',
    'RemoteClose',
    'TransportError',
    'WebSocketError',
]
