"""
GDAX WebSocket Feed
-------------------
Streaming market-data subscription for the GDAX websocket feed.

The connection runs on its own asyncio event loop in a background thread.
Events are delivered to a FeedHandler from that thread.
"""

import asyncio
import json
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

import websockets
from websockets.exceptions import ConnectionClosed, ConnectionClosedError, WebSocketException

from . import config
from .errors import RemoteClose, WebSocketError

logger = logging.getLogger(__name__)


class SessionState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    RECEIVING = "receiving"
    CLOSED = "closed"


@dataclass
class SubscriptionRequest:
    """First message sent on a new feed connection"""
    product_ids: List[str]
    channels: List[str]
    type: str = "subscribe"

    def to_message(self) -> dict:
        return {
            "type": self.type,
            "product_ids": list(self.product_ids),
            "channels": list(self.channels),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_message())


class FeedHandler:
    """
    Receives feed events. Subclass and override the callbacks you need.

    All callbacks run on the session's I/O thread.
    """

    def on_connect(self, session: "FeedSession"):
        pass

    def on_message(self, message: dict):
        pass

    def on_error(self, error: WebSocketError):
        pass

    def on_close(self, status_code: Optional[int], reason: str):
        pass


class LoggingFeedHandler(FeedHandler):
    """Default handler: logs every event"""

    def on_connect(self, session: "FeedSession"):
        logger.info("Connected to websocket: %s", session.url)

    def on_message(self, message: dict):
        logger.info("Received: %s", message)

    def on_error(self, error: WebSocketError):
        logger.error("Error occurred: %s", error)

    def on_close(self, status_code: Optional[int], reason: str):
        logger.info("Connection to websocket closed. Status code: %s. Reason: %s", status_code, reason)


class FeedSession:
    """
    One websocket connection subscribed to a set of products and channels.

    The session is the handle returned by subscribe(); close() ends it.
    There is no reconnection: once closed, a session stays closed.
    """

    def __init__(self, product_ids: Sequence[str], channels: Sequence[str],
                 handler: FeedHandler = None, url: str = None,
                 max_size: int = config.MAX_MESSAGE_SIZE):
        self.subscription = SubscriptionRequest(list(product_ids), list(channels))
        self.handler = handler or LoggingFeedHandler()
        self.url = url or config.websocket_url()
        self.max_size = max_size

        self.state = SessionState.DISCONNECTED
        self.closed_by: Optional[RemoteClose] = None

        # Held while a callback runs, so close() waits for in-flight delivery
        self._lock = threading.RLock()
        self._ready = threading.Event()
        self._closing = False
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._ws = None
        self._thread: Optional[threading.Thread] = None

    def __enter__(self) -> "FeedSession":
        if self.state is SessionState.DISCONNECTED:
            self.start()
        return self

    def __exit__(self, *exc_info):
        self.close()

    @property
    def closed(self) -> bool:
        return self.state is SessionState.CLOSED

    def start(self) -> "FeedSession":
        """Connect and subscribe. Blocks until the subscription is sent or the connection failed."""
        with self._lock:
            if self.state is not SessionState.DISCONNECTED:
                raise RuntimeError(f"Session already {self.state.value}")
            self.state = SessionState.CONNECTING

        self._thread = threading.Thread(target=self._run_loop, name="gdax-feed", daemon=True)
        self._thread.start()
        self._ready.wait()
        return self

    def close(self):
        """
        Close the connection. Safe to call from any thread, including from a
        handler callback, and more than once (later calls do nothing).

        When called outside the I/O thread, no callbacks fire after it returns.
        """
        with self._lock:
            if self._closing:
                return
            self._closing = True

            if self.state is SessionState.DISCONNECTED:
                self.state = SessionState.CLOSED
                return
            if self.state is not SessionState.CLOSED and self._ws is not None:
                asyncio.run_coroutine_threadsafe(self._ws.close(), self._loop)

        if self._thread is not None and threading.current_thread() is not self._thread:
            self._thread.join()

    def wait(self, timeout: float = None) -> bool:
        """Block until the session is closed; returns True if it is"""
        if self._thread is not None:
            self._thread.join(timeout)
        return self.closed

    def _run_loop(self):
        try:
            asyncio.run(self._run())
        finally:
            self._finish()

    async def _run(self):
        self._loop = asyncio.get_running_loop()

        logger.info("Connecting to %s...", self.url)
        try:
            ws = await websockets.connect(self.url, max_size=self.max_size)
        except (OSError, asyncio.TimeoutError, WebSocketException) as e:
            self._error(f"Could not connect to {self.url}: {e}", e)
            self._finish()
            return

        try:
            with self._lock:
                self._ws = ws
                self.state = SessionState.CONNECTED
                closing = self._closing

            if closing:
                await ws.close()
            else:
                self._dispatch(self.handler.on_connect, self)
                await ws.send(self.subscription.to_json())
                logger.info("Subscribed to %s for %s", self.subscription.channels, self.subscription.product_ids)
            self._ready.set()

            async for message in ws:
                self._deliver(message)

        except ConnectionClosed as e:
            if isinstance(e, ConnectionClosedError):
                self._error(f"Feed connection lost: {e}", e)
        except (OSError, WebSocketException) as e:
            self._error(f"Feed error: {e}", e)
        finally:
            await ws.close()
            self._connection_closed(ws)
            self._finish()

    def _dispatch(self, callback, *args, final: bool = False):
        with self._lock:
            if self._closing and not final:
                return
            try:
                callback(*args)
            except Exception:
                logger.exception("Feed handler %s failed", getattr(callback, "__name__", callback))

    def _deliver(self, raw):
        try:
            message = json.loads(raw)
        except ValueError as e:
            self._error(f"Undecodable feed message: {raw[:200]!r}", e)
            return

        with self._lock:
            if self._closing:
                return
            self.state = SessionState.RECEIVING
            self._dispatch(self.handler.on_message, message)

    def _error(self, message: str, error: Exception):
        self._dispatch(self.handler.on_error, WebSocketError(message, error))

    def _connection_closed(self, ws):
        code = ws.close_code
        reason = ws.close_reason or ""
        with self._lock:
            if not self._closing:
                self.closed_by = RemoteClose(code, reason)
            self._dispatch(self.handler.on_close, code, reason, final=True)

    def _finish(self):
        with self._lock:
            self.state = SessionState.CLOSED
            self._ws = None
        self._ready.set()


def subscribe(product_ids: Sequence[str], channels: Sequence[str],
              handler: FeedHandler = None, url: str = None) -> FeedSession:
    """
    Open a feed connection and subscribe to channels for products.

    Returns the running session; call close() on it to stop.
    """
    return FeedSession(product_ids, channels, handler=handler, url=url).start()
