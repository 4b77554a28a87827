#!/usr/bin/env python3
"""
Stream GDAX feed messages for a few products until Ctrl+C

Usage:
    python scripts/watch_feed.py BTC-USD ETH-USD --channels ticker matches
"""

import argparse
import logging
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gdax import config
from gdax.websocket import FeedHandler, subscribe


class TickerPrinter(FeedHandler):
    """Prints ticker and match messages"""

    def on_connect(self, session):
        print(f"Connected to {session.url}")

    def on_message(self, message: dict):
        msg_type = message.get("type")

        if msg_type == "ticker":
            print(f"[TICKER] {message.get('product_id')} "
                  f"Bid: {message.get('best_bid')} | Ask: {message.get('best_ask')} | Last: {message.get('price')}")
        elif msg_type in ("match", "last_match"):
            print(f"[MATCH] {message.get('product_id')} {message.get('side')} {message.get('size')} @ {message.get('price')}")
        elif msg_type == "subscriptions":
            print(f"[OK] Subscription confirmed: {message.get('channels')}")
        elif msg_type == "error":
            print(f"[ERROR] {message.get('message')}: {message.get('reason')}")
        else:
            print(f"[MSG] {message}")

    def on_error(self, error):
        print(f"Connection error: {error}")

    def on_close(self, status_code, reason):
        print(f"Closed. Status code: {status_code}. Reason: {reason}")


def main():
    parser = argparse.ArgumentParser(description="Watch the GDAX websocket feed")
    parser.add_argument("product_ids", nargs="*", default=["BTC-USD"])
    parser.add_argument("--channels", nargs="+", default=["ticker"])
    parser.add_argument("--url", default=None, help=f"feed URL (default {config.websocket_url()})")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    print("=" * 60)
    print("GDAX Websocket Feed")
    print("=" * 60)
    print("Press Ctrl+C to stop\n")

    session = subscribe(args.product_ids, args.channels, handler=TickerPrinter(), url=args.url)
    try:
        while not session.wait(timeout=1.0):
            pass
    except KeyboardInterrupt:
        print("\nShutting down...")
    finally:
        session.close()


if __name__ == "__main__":
    sys.stdout.reconfigure(line_buffering=True)
    main()
