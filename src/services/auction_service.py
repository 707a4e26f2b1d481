"""
Auction service: lifecycle operations and the bid placement transaction.

Bid placement uses optimistic concurrency. The auction row is never locked
while the bid is validated; instead the commit is conditioned on the values
that were read, and a lost race is retried from a fresh read.
"""

import random
import time
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, Optional

# Handle both Lambda (absolute) and unit test (relative) imports
try:  # pragma: no cover
    from utils.auth import require_auction_owner  # type: ignore[import-not-found]
    from utils.config import BiddingConfig  # type: ignore[import-not-found]
    from utils.dynamodb import AuctionStore, ConditionalWriteConflict  # type: ignore[import-not-found]
    from utils.errors import (  # type: ignore[import-not-found]
        AppError,
        AuctionNotActive,
        AuctionNotFound,
        BidTooLow,
        ErrorCode,
        TransientConflict,
    )
    from utils.logging import get_logger  # type: ignore[import-not-found]
    from utils.money import parse_amount, to_money  # type: ignore[import-not-found]
    from utils.validation import parse_timestamp  # type: ignore[import-not-found]
except ModuleNotFoundError:  # pragma: no cover
    from ..utils.auth import require_auction_owner
    from ..utils.config import BiddingConfig
    from ..utils.dynamodb import AuctionStore, ConditionalWriteConflict
    from ..utils.errors import (
        AppError,
        AuctionNotActive,
        AuctionNotFound,
        BidTooLow,
        ErrorCode,
        TransientConflict,
    )
    from ..utils.logging import get_logger
    from ..utils.money import parse_amount, to_money
    from ..utils.validation import parse_timestamp

logger = get_logger(__name__)


class AuctionStatus:
    """Auction lifecycle states."""

    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AuctionService:
    """Business operations over the auction store."""

    def __init__(
        self,
        store: AuctionStore,
        config: Optional[BiddingConfig] = None,
        clock: Callable[[], datetime] = utc_now,
        sleep: Callable[[float], None] = time.sleep,
        rand: Callable[[], float] = random.random,
    ) -> None:
        self.store = store
        self.config = config or BiddingConfig()
        self._clock = clock
        self._sleep = sleep
        self._rand = rand

    def _now(self) -> str:
        return self._clock().astimezone(timezone.utc).isoformat()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create_auction(self, owner_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a pending auction owned by owner_id.

        Args:
            owner_id: Seller's user ID
            data: Output of validate_create_auction_input

        Returns:
            The stored auction item
        """
        now = self._now()
        start_price: Decimal = data["startPrice"]
        item: Dict[str, Any] = {
            "auctionId": str(uuid.uuid4()),
            "userId": owner_id,
            "title": data["title"],
            "description": data.get("description"),
            "startPrice": start_price,
            "reservePrice": data.get("reservePrice"),
            "currentPrice": start_price,
            "startTime": data["startTime"],
            "endTime": data["endTime"],
            "status": AuctionStatus.PENDING,
            "bidCount": 0,
            "createdAt": now,
            "updatedAt": now,
        }
        item = {k: v for k, v in item.items() if v is not None}

        self.store.put_auction(item)
        logger.info("Auction created", extra={"auctionId": item["auctionId"], "userId": owner_id})
        return item

    def get_auction(self, auction_id: str) -> Dict[str, Any]:
        """Fetch an auction or raise AuctionNotFound."""
        auction = self.store.get_auction(auction_id)
        if auction is None:
            raise AuctionNotFound(auction_id)
        return auction

    def activate_auction(self, caller_id: str, auction_id: str) -> Dict[str, Any]:
        """
        Open a pending auction for bidding. Only the owner may do this.

        Raises:
            AuctionNotFound: Unknown auction
            AppError: FORBIDDEN for non-owners, INVALID_STATE if not pending
        """
        auction = self.get_auction(auction_id)
        require_auction_owner(caller_id, auction, "activate")

        status = auction.get("status")
        if status == AuctionStatus.PENDING:
            try:
                updated = self.store.update_auction_status(
                    auction_id, AuctionStatus.PENDING, AuctionStatus.ACTIVE, self._now()
                )
            except ConditionalWriteConflict:
                status = self.get_auction(auction_id).get("status")
            else:
                logger.info("Auction activated", extra={"auctionId": auction_id})
                return updated

        raise AppError(
            ErrorCode.INVALID_STATE,
            f"Auction cannot be activated from status '{status}'",
            {"auctionId": auction_id, "status": status},
        )

    def list_auctions(
        self,
        status: Optional[str] = None,
        user_id: Optional[str] = None,
        limit: int = 20,
        cursor: Optional[str] = None,
    ) -> Dict[str, Any]:
        """List auctions with optional status and owner filters."""
        items, next_cursor = self.store.query_auctions(
            status=status, user_id=user_id, limit=limit, cursor=cursor
        )
        return {"auctions": items, "nextCursor": next_cursor, "hasMore": next_cursor is not None}

    def get_bid_history(self, auction_id: str, limit: int = 50, offset: int = 0) -> Dict[str, Any]:
        """
        Bids for an auction, newest (and therefore highest) first.

        Bid sequence numbers are dense, so offset pagination maps onto a key
        range instead of a scan.
        """
        auction = self.get_auction(auction_id)
        total = int(auction.get("bidCount", 0))
        bids = self.store.query_bids(auction_id, max_sequence=total - offset, limit=limit)
        return {"bids": bids, "total": total}

    # ------------------------------------------------------------------
    # Bidding
    # ------------------------------------------------------------------

    def _check_biddable(self, auction: Dict[str, Any]) -> None:
        auction_id = auction["auctionId"]
        status = auction.get("status")
        if status != AuctionStatus.ACTIVE:
            raise AuctionNotActive(auction_id, status)

        now = self._clock()
        start_time = parse_timestamp(auction.get("startTime"), "startTime")
        end_time = parse_timestamp(auction.get("endTime"), "endTime")
        if not start_time <= now <= end_time:
            raise AuctionNotActive(auction_id, status)

    def _backoff_delay(self, attempt: int) -> float:
        """Full-jitter exponential backoff in seconds."""
        ceiling = min(self.config.max_delay_ms, self.config.base_delay_ms * 2 ** (attempt - 1))
        return self._rand() * ceiling / 1000.0

    def place_bid(self, bidder_id: str, auction_id: str, amount: Any) -> Dict[str, Any]:
        """
        Place a bid atomically.

        Steps:
        1. Read the auction (AuctionNotFound if missing)
        2. Require status active and now within [startTime, endTime] (AuctionNotActive)
        3. Require amount > currentPrice (BidTooLow)
        4. Commit the price/count update and the bid insert as one conditional
           transaction; on a lost race, back off and start again at step 1

        Args:
            bidder_id: Authenticated caller; the owner is not rejected
            auction_id: Auction to bid on
            amount: Positive amount with at most two decimal places

        Returns:
            {"bid": bid item, "auction": updated auction snapshot}

        Raises:
            AuctionNotFound, AuctionNotActive, BidTooLow: terminal outcomes
            TransientConflict: conflicts on every one of max_attempts attempts
        """
        if not bidder_id:
            raise AppError(ErrorCode.UNAUTHORIZED, "Unauthorized")
        bid_amount = parse_amount(amount)
        max_attempts = self.config.max_attempts

        for attempt in range(1, max_attempts + 1):
            auction = self.store.get_auction(auction_id)
            if auction is None:
                raise AuctionNotFound(auction_id)

            self._check_biddable(auction)

            current_price = to_money(auction["currentPrice"])
            if bid_amount <= current_price:
                raise BidTooLow(auction_id, current_price)

            now = self._now()
            bid: Dict[str, Any] = {
                "auctionId": auction_id,
                "bidSequence": int(auction.get("bidCount", 0)) + 1,
                "bidId": str(uuid.uuid4()),
                "userId": bidder_id,
                "amount": bid_amount,
                "createdAt": now,
            }

            try:
                updated = self.store.commit_bid(auction, bid, bid_amount, now)
            except ConditionalWriteConflict:
                logger.info(
                    "Bid lost a concurrent update, retrying",
                    extra={"auctionId": auction_id, "attempt": attempt, "maxAttempts": max_attempts},
                )
                if attempt < max_attempts:
                    self._sleep(self._backoff_delay(attempt))
                continue

            logger.info(
                "Bid placed",
                extra={
                    "auctionId": auction_id,
                    "bidId": bid["bidId"],
                    "amount": str(bid_amount),
                    "bidCount": updated["bidCount"],
                    "attempt": attempt,
                },
            )
            return {"bid": bid, "auction": updated}

        logger.warning(
            "Bid retries exhausted", extra={"auctionId": auction_id, "attempts": max_attempts}
        )
        raise TransientConflict(auction_id, max_attempts)
