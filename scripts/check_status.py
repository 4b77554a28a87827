#!/usr/bin/env python3
"""
Check GDAX account state: balances, open orders and recent fills
"""

import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gdax.client import GdaxClient


def main():
    client = GdaxClient.from_env()

    print("=" * 60)
    print("GDAX ACCOUNT STATUS")
    print("=" * 60)

    # Server time
    try:
        server_time = client.get_time()
        print(f"\nServer Time: {server_time.get('iso')}")
    except Exception as e:
        print(f"\nServer Time: Error - {e}")

    # Balances
    try:
        accounts = client.get_accounts()
        print(f"\nAccounts: {len(accounts)}")
        for a in accounts:
            if float(a.get('balance', 0)) != 0:
                print(f"   {a.get('currency'):<6} balance={a.get('balance')} available={a.get('available')}")
    except Exception as e:
        print(f"\nAccounts: Error - {e}")

    # Open orders
    try:
        orders = client.get_orders(statuses=["open", "pending"])
        print(f"\nOpen Orders: {len(orders)}")
        for o in orders:
            print(f"   {o.get('side', '').upper()} {o.get('size')} {o.get('product_id')} @ {o.get('price')} ({o.get('type')})")
    except Exception as e:
        print(f"\nOpen Orders: Error - {e}")

    # Recent fills
    try:
        fills = client.get_fills({"limit": 10})
        print(f"\nRecent Fills: {len(fills)}")
        for f in fills:
            print(f"   {f.get('side', '').upper()} {f.get('size')} {f.get('product_id')} @ {f.get('price')} fee={f.get('fee')}")
        if not fills:
            print("   (none)")
    except Exception as e:
        print(f"\nRecent Fills: Error - {e}")

    # Trailing volume
    try:
        for v in client.get_trailing_volume():
            print(f"\n30d Volume {v.get('product_id')}: {v.get('volume')} (exchange {v.get('exchange_volume')})")
    except Exception as e:
        print(f"\n30d Volume: Error - {e}")

    print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
