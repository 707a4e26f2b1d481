#!/usr/bin/env python3
"""
Seed sample auctions for local development and smoke testing.

This script:
1. Creates N pending auctions owned by the given seller
2. Optionally activates them so they accept bids immediately

Usage:
    # Dry run (default)
    uv run python scripts/seed_auctions.py --seller-id user-123 --count 5

    # Actually write to DynamoDB (LocalStack example)
    DYNAMODB_ENDPOINT=http://localhost:4566 \\
        uv run python scripts/seed_auctions.py --seller-id user-123 --count 5 --activate --apply
"""

import argparse
import os
import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict, List

from src.services.auction_service import AuctionService
from src.utils.config import StoreConfig
from src.utils.dynamodb import AuctionStore
from src.utils.errors import AppError
from src.utils.validation import validate_create_auction_input

SAMPLE_TITLES = [
    "Vintage Film Camera",
    "Signed First Edition",
    "Mid-Century Desk Lamp",
    "Mechanical Keyboard",
    "Hand-Thrown Ceramic Vase",
]


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Seed sample auctions")
    parser.add_argument(
        "--env",
        choices=["dev", "prod"],
        default="dev",
        help="Environment to seed (default: dev)",
    )
    parser.add_argument("--seller-id", required=True, help="Owner user ID for the auctions")
    parser.add_argument("--count", type=int, default=3, help="Number of auctions (default: 3)")
    parser.add_argument(
        "--duration-hours",
        type=int,
        default=24,
        help="Bidding window length in hours (default: 24)",
    )
    parser.add_argument(
        "--activate",
        action="store_true",
        help="Activate the auctions after creating them",
    )
    parser.add_argument(
        "--apply",
        action="store_true",
        help="Actually write the auctions (default is dry-run)",
    )
    return parser.parse_args()


def build_sample_inputs(count: int, duration_hours: int, now: datetime) -> List[Dict[str, Any]]:
    """Build validated create-auction inputs with increasing start prices."""
    inputs = []
    for i in range(count):
        start_price = Decimal("10.00") * (i + 1)
        raw = {
            "title": f"{SAMPLE_TITLES[i % len(SAMPLE_TITLES)]} #{i + 1}",
            "description": "Seeded auction for development",
            "startPrice": start_price,
            "reservePrice": start_price * 5,
            "startTime": now.isoformat(),
            "endTime": (now + timedelta(hours=duration_hours)).isoformat(),
        }
        inputs.append(validate_create_auction_input(raw))
    return inputs


def main() -> None:
    """Main seeding logic."""
    args = parse_args()
    if args.env == "prod" and args.apply:
        print("Refusing to seed prod")
        sys.exit(1)

    os.environ.setdefault("AUCTIONS_TABLE_NAME", f"auctions-ue1-{args.env}")
    os.environ.setdefault("BIDS_TABLE_NAME", f"bids-ue1-{args.env}")

    inputs = build_sample_inputs(args.count, args.duration_hours, datetime.now(timezone.utc))

    if not args.apply:
        print(f"DRY RUN: would create {len(inputs)} auctions for {args.seller_id}")
        for data in inputs:
            print(f"  - {data['title']} (start {data['startPrice']})")
        return

    config = StoreConfig.from_env()
    print(f"Seeding {len(inputs)} auctions into {config.auctions_table_name}")
    with AuctionStore(config) as store:
        service = AuctionService(store)
        for data in inputs:
            try:
                auction = service.create_auction(args.seller_id, data)
                if args.activate:
                    auction = service.activate_auction(args.seller_id, auction["auctionId"])
                print(f"  ✓ {auction['title']}: {auction['auctionId']} ({auction['status']})")
            except AppError as e:
                print(f"  ✗ {data['title']}: {e.message}")


if __name__ == "__main__":
    main()
