"""
GDAX Configuration
------------------
Credentials and endpoint URLs, read from the environment or a .env file.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .auth import Credentials
from .errors import ConfigError

# Load .env file from project root
_project_root = Path(__file__).parent.parent
load_dotenv(_project_root / ".env")

# Environment URLs (Live)
REST_URL = "https://api.gdax.com"
WS_URL = "wss://ws-feed.gdax.com"

# Sandbox URLs
SANDBOX_REST_URL = "https://api-public.sandbox.gdax.com"
SANDBOX_WS_URL = "wss://ws-feed-public.sandbox.gdax.com"

# Largest inbound feed message accepted, in bytes
MAX_MESSAGE_SIZE = 1024 * 1024

_CREDENTIAL_VARS = {
    'api_key': "GDAX_API_KEY",
    'api_secret': "GDAX_API_SECRET",
    'api_passphrase': "GDAX_API_PASSPHRASE",
}


def _flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes")


def use_sandbox() -> bool:
    return _flag("GDAX_USE_SANDBOX")


def rest_url() -> str:
    """REST base URL, GDAX_API_URL overriding the live/sandbox default"""
    return os.environ.get("GDAX_API_URL") or (SANDBOX_REST_URL if use_sandbox() else REST_URL)


def websocket_url() -> str:
    """Feed URL, GDAX_WEBSOCKET_URL overriding the live/sandbox default"""
    return os.environ.get("GDAX_WEBSOCKET_URL") or (SANDBOX_WS_URL if use_sandbox() else WS_URL)


def load_credentials() -> Credentials:
    """Read API credentials from the environment"""
    values = {field: os.environ.get(var) for field, var in _CREDENTIAL_VARS.items()}
    missing = [_CREDENTIAL_VARS[field] for field, value in values.items() if not value]
    if missing:
        raise ConfigError(f"{', '.join(missing)} not set. Please create a .env file with your API credentials.")
    return Credentials(**values)


@dataclass
class Config:
    """Client configuration"""
    credentials: Optional[Credentials] = None
    rest_url: str = REST_URL
    websocket_url: str = WS_URL
    max_message_size: int = MAX_MESSAGE_SIZE

    @classmethod
    def from_env(cls, require_credentials: bool = True) -> "Config":
        try:
            credentials = load_credentials()
        except ConfigError:
            if require_credentials:
                raise
            credentials = None
        return cls(credentials=credentials, rest_url=rest_url(), websocket_url=websocket_url())

    def to_dict(self) -> dict:
        api_key = self.credentials.api_key if self.credentials else ''
        return {
            'api_key': api_key[:8] + '...' if api_key else '',
            'rest_url': self.rest_url,
            'websocket_url': self.websocket_url,
            'max_message_size': self.max_message_size,
        }
