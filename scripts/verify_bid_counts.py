#!/usr/bin/env python3
"""
Verify auction aggregates against the bids table.

For every auction this checks:
1. bidCount equals the number of bid rows for the auction
2. currentPrice equals the latest bid amount, or startPrice when there are no bids

Usage:
    uv run python scripts/verify_bid_counts.py --env dev
"""

import argparse
import os
import sys
from typing import Any, Dict, List, Optional

from src.utils.config import StoreConfig
from src.utils.dynamodb import AuctionStore
from src.utils.money import to_money


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Verify auction bid aggregates")
    parser.add_argument(
        "--env",
        choices=["dev", "prod"],
        default="dev",
        help="Environment to verify (default: dev)",
    )
    return parser.parse_args()


def check_auction(store: AuctionStore, auction: Dict[str, Any]) -> List[str]:
    """Return a list of invariant violations for one auction."""
    problems = []
    auction_id = auction["auctionId"]
    bid_count = int(auction.get("bidCount", 0))

    actual_count = store.count_bids(auction_id)
    if actual_count != bid_count:
        problems.append(f"bidCount={bid_count} but {actual_count} bid rows")

    latest = store.query_bids(auction_id, max_sequence=bid_count, limit=1)
    expected_price = to_money(latest[0]["amount"]) if latest else to_money(auction["startPrice"])
    current_price = to_money(auction["currentPrice"])
    if current_price != expected_price:
        problems.append(f"currentPrice={current_price} but expected {expected_price}")

    return problems


def main() -> None:
    """Scan all auctions and report violations."""
    args = parse_args()
    os.environ.setdefault("AUCTIONS_TABLE_NAME", f"auctions-ue1-{args.env}")
    os.environ.setdefault("BIDS_TABLE_NAME", f"bids-ue1-{args.env}")

    checked = 0
    violations = 0
    cursor: Optional[str] = None
    with AuctionStore(StoreConfig.from_env()) as store:
        while True:
            auctions, cursor = store.query_auctions(limit=100, cursor=cursor)
            for auction in auctions:
                checked += 1
                for problem in check_auction(store, auction):
                    violations += 1
                    print(f"  ✗ {auction['auctionId']}: {problem}")
            if not cursor:
                break

    print(f"\nChecked {checked} auctions, found {violations} violations")
    if violations:
        sys.exit(1)


if __name__ == "__main__":
    main()
