"""Lambda entry points.

Importing this module is the process start: it reads the environment, opens
the single AuctionStore for this execution environment, and builds the
AuctionService that every handler receives by reference.
"""

from typing import Any, Dict

# Handle both Lambda (absolute) and unit test (relative) imports
try:  # pragma: no cover
    from handlers import auction_operations, auction_resolvers, bid_operations  # type: ignore[import-not-found]
    from services.auction_service import AuctionService  # type: ignore[import-not-found]
    from utils.config import BiddingConfig, StoreConfig  # type: ignore[import-not-found]
    from utils.dynamodb import AuctionStore  # type: ignore[import-not-found]
    from utils.logging import get_logger  # type: ignore[import-not-found]
except ModuleNotFoundError:  # pragma: no cover
    from .handlers import auction_operations, auction_resolvers, bid_operations
    from .services.auction_service import AuctionService
    from .utils.config import BiddingConfig, StoreConfig
    from .utils.dynamodb import AuctionStore
    from .utils.logging import get_logger

logger = get_logger(__name__)

store = AuctionStore(StoreConfig.from_env()).open()
service = AuctionService(store, BiddingConfig.from_env())
logger.info("Auction service initialized", extra={"maxBidAttempts": service.config.max_attempts})


def shutdown() -> None:
    """Close the store (tests and local runners)."""
    store.close()


def place_bid_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    return bid_operations.place_bid(event, context, service)


def get_bid_history_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    return bid_operations.get_bid_history(event, context, service)


def create_auction_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    return auction_operations.create_auction(event, context, service)


def activate_auction_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    return auction_operations.activate_auction(event, context, service)


def get_auction_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    return auction_operations.get_auction(event, context, service)


def list_auctions_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    return auction_operations.list_auctions(event, context, service)


def graphql_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    return auction_resolvers.resolve(event, context, service)
