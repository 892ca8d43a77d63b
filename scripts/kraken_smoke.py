#!/usr/bin/env python3
# ============================================================================
# Kraken REST Client v0.1.0
# Kraken Smoke Check
# ============================================================================
#
# Purpose: Exercise the client against the live Kraken API
#
# This script demonstrates:
#   1. Fetching server time (public)
#   2. Fetching a ticker with Decimal prices (public)
#   3. Fetching account balances (private, needs KRAKEN_API_KEY/SECRET)
#
# Usage:
#   python3 scripts/kraken_smoke.py --pair XBTUSD [--private]
#
# ============================================================================

import argparse
import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from krakenapi import KrakenAPIClient, KrakenClientError


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Kraken REST API smoke check")
    parser.add_argument("--pair", default="XBTUSD", help="pair for the ticker step")
    parser.add_argument(
        "--private",
        action="store_true",
        help="also fetch balances (requires KRAKEN_API_KEY and KRAKEN_API_SECRET)",
    )
    parser.add_argument("--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Run the Kraken smoke check."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    print("=" * 70)
    print("Kraken REST Smoke Check")
    print("=" * 70)

    failures = 0

    with KrakenAPIClient.from_environment() as client:
        # ====================================================================
        # Step 1: Server Time
        # ====================================================================
        print("-" * 70)
        print("STEP 1: Server Time")
        print("-" * 70)
        try:
            server_time = client.get_server_time()
            print(f"  Unix time:  {server_time.unixtime}")
            print(f"  RFC 1123:   {server_time.rfc1123}")
            print("  [PASS] Server time fetched")
        except KrakenClientError as e:
            failures += 1
            print(f"  [FAIL] {e.kind.value}: {e}")

        # ====================================================================
        # Step 2: Ticker
        # ====================================================================
        print("-" * 70)
        print(f"STEP 2: Ticker {args.pair}")
        print("-" * 70)
        try:
            for name, ticker in client.get_ticker(args.pair).items():
                print(f"  Pair:        {name}")
                print(f"  Bid:         {ticker.bid.price}")
                print(f"  Ask:         {ticker.ask.price}")
                print(f"  Last Price:  {ticker.last_trade.price}")
                print(f"  Spread:      {ticker.spread}")
                print(f"  Volume 24h:  {ticker.volume_24h}")
            print("  [PASS] Ticker fetched")
        except KrakenClientError as e:
            failures += 1
            print(f"  [FAIL] {e.kind.value}: {e}")

        # ====================================================================
        # Step 3: Balances
        # ====================================================================
        if args.private:
            print("-" * 70)
            print("STEP 3: Account Balance")
            print("-" * 70)
            try:
                balances = client.get_account_balance()
                for asset, amount in sorted(balances.items()):
                    print(f"  {asset:<10} {amount}")
                print("  [PASS] Balances fetched")
            except KrakenClientError as e:
                failures += 1
                print(f"  [FAIL] {e.kind.value}: {e}")

    print("=" * 70)
    print("RESULT: " + ("OK" if failures == 0 else f"{failures} step(s) failed"))
    return 0 if failures == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
