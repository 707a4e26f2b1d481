"""
Test data builders for auction tests.

Provides factory functions for creating test data with sensible defaults
and customization options.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict, Optional
from uuid import uuid4

# All time-dependent tests run against this clock
FIXED_NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)

SELLER_ID = "seller-123"
BIDDER_ID = "bidder-456"
OTHER_BIDDER_ID = "bidder-789"


def make_auction(
    auction_id: Optional[str] = None,
    user_id: str = SELLER_ID,
    status: str = "active",
    current_price: str = "100.00",
    bid_count: int = 0,
    starts_in: timedelta = timedelta(hours=-1),
    ends_in: timedelta = timedelta(days=1),
    **overrides: Any,
) -> Dict[str, Any]:
    """Create an auction item as it is stored in DynamoDB.

    Args:
        auction_id: Optional ID, random UUID by default
        user_id: Seller
        status: Lifecycle status
        current_price: Current price string, also used as startPrice
        bid_count: Number of accepted bids
        starts_in: startTime offset from FIXED_NOW
        ends_in: endTime offset from FIXED_NOW
        **overrides: Any other attribute

    Returns:
        Auction item dict
    """
    auction: Dict[str, Any] = {
        "auctionId": auction_id or str(uuid4()),
        "userId": user_id,
        "title": "Vintage Film Camera",
        "description": "Works perfectly",
        "startPrice": Decimal(current_price),
        "currentPrice": Decimal(current_price),
        "startTime": (FIXED_NOW + starts_in).isoformat(),
        "endTime": (FIXED_NOW + ends_in).isoformat(),
        "status": status,
        "bidCount": bid_count,
        "createdAt": (FIXED_NOW - timedelta(days=1)).isoformat(),
        "updatedAt": (FIXED_NOW - timedelta(days=1)).isoformat(),
    }
    auction.update(overrides)
    return auction


def make_bid(
    auction_id: str,
    sequence: int,
    amount: str,
    user_id: str = BIDDER_ID,
) -> Dict[str, Any]:
    """Create a bid item as it is stored in DynamoDB."""
    return {
        "auctionId": auction_id,
        "bidSequence": sequence,
        "bidId": str(uuid4()),
        "userId": user_id,
        "amount": Decimal(amount),
        "createdAt": FIXED_NOW.isoformat(),
    }
