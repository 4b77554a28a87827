"""
GDAX Errors
-----------
Exceptions raised (or delivered to feed handlers) by the client.
"""

from requests.exceptions import RequestException

# Network and HTTP failures are surfaced unchanged from requests
TransportError = RequestException


class GdaxError(Exception):
    """Base class for client errors"""


class ConfigError(GdaxError):
    """Missing or invalid configuration"""


class InvalidSecretEncoding(GdaxError, ValueError):
    """The API secret is not valid base64"""


class MalformedUrl(GdaxError, ValueError):
    """A request path could not be extracted from the URL"""

    def __init__(self, url: str, reason: str = "not an absolute http(s) URL"):
        self.url = url
        super().__init__(f"{url!r}: {reason}")


class WebSocketError(GdaxError):
    """Feed failure, delivered to FeedHandler.on_error"""

    def __init__(self, message: str, error: Exception = None):
        self.error = error
        super().__init__(message)


class RemoteClose(GdaxError):
    """The feed server closed the connection"""

    def __init__(self, code: int, reason: str = ""):
        self.code = code
        self.reason = reason
        super().__init__(f"Connection closed by server. Status code: {code}. Reason: {reason}")
