#!/usr/bin/env python3
"""
comdirect Session Check

This script opens a TAN-activated comdirect session, reports when its
tokens expire and ends it again. Credentials are read from the environment.

Usage:
    python scripts/open_session.py

    # Also list the open orders of a depot
    python scripts/open_session.py --depot-id 1234567890ABCDEF

    # Give up if the TAN is not confirmed within two minutes
    python scripts/open_session.py --confirmation-timeout 120
"""

import argparse
import logging
import sys
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from comdirect_client import ComdirectClient, ComdirectConfig, ComdirectError
from comdirect_client.exceptions import ConfigurationError


def format_time_remaining(seconds: float) -> str:
    """
    Format seconds into human-readable time remaining.

    Args:
        seconds: Number of seconds

    Returns:
        Formatted string (e.g., "9m", "45s", "expired")
    """
    if seconds <= 0:
        return "expired"

    minutes = int(seconds // 60)
    if minutes > 0:
        return f"{minutes}m"
    return f"{int(seconds)}s"


def open_session(depot_id=None, confirmation_timeout=None, verbose=False) -> int:
    """
    Open a session, show its status and end it.

    Returns:
        Exit code (0 on success, 1 on API error, 2 on configuration error)
    """
    try:
        config = ComdirectConfig.from_env()
        if confirmation_timeout is not None:
            config = replace(config, confirmation_timeout=confirmation_timeout)
    except ConfigurationError as e:
        print("❌ CONFIGURATION ERROR")
        print()
        print(f"Error: {e}")
        print()
        return 2

    print("=" * 70)
    print("COMDIRECT SESSION")
    print("=" * 70)
    print()

    with ComdirectClient(config) as client:
        try:
            client.new_session()
        except ComdirectError as e:
            print("❌ COULD NOT CREATE SESSION")
            print()
            print(f"Error: {e}")
            print()
            return 1

        remaining = (client.session_expires_at - datetime.now(timezone.utc)).total_seconds()
        print("✅ SESSION ACTIVE")
        print(f"Expires in:  {format_time_remaining(remaining)}")
        if verbose:
            print(f"Expires at:  {client.session_expires_at.isoformat()}")
        print()

        if depot_id:
            try:
                orders = client.get_orders(depot_id, orderStatus="OPEN")
            except ComdirectError as e:
                print(f"Could not list orders: {e}")
                return 1
            print(f"Open orders in depot {depot_id}: {len(orders)}")
            for order in orders:
                print(f"  {order.order_id}  {order.order_type or '-':<20} {order.status or '-'}")
            print()

        try:
            client.end_session()
        except ComdirectError as e:
            print(f"⚠️  Session could not be revoked: {e}")
            return 1

    print("Session ended.")
    print("=" * 70)
    return 0


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Open and end a TAN-activated comdirect session",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--depot-id", help="List open orders of this depot")
    parser.add_argument(
        "--confirmation-timeout",
        type=float,
        help="Seconds to wait for the TAN confirmation",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug logging and token expiry time",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    return open_session(
        depot_id=args.depot_id,
        confirmation_timeout=args.confirmation_timeout,
        verbose=args.verbose,
    )


if __name__ == "__main__":
    sys.exit(main())
