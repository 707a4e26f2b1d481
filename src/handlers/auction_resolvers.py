"""AppSync Lambda resolvers for auctions and bids.

Mutations: createAuction, activateAuction, placeBid
Queries: auction, auctions, bids

Each resolver receives the AppSync event (identity.sub is the verified
caller) and raises AppError for GraphQL errors.
"""

from typing import Any, Callable, Dict

# Handle both Lambda (absolute) and unit test (relative) imports
try:  # pragma: no cover
    from services.auction_service import AuctionService  # type: ignore[import-not-found]
    from utils.appsync_types import (  # type: ignore[import-not-found]
        get_argument,
        get_argument_required,
        get_caller_id_required,
        get_field_name,
    )
    from utils.errors import AppError, ErrorCode, handle_error  # type: ignore[import-not-found]
    from utils.logging import StructuredLogger, get_correlation_id  # type: ignore[import-not-found]
    from utils.responses import (  # type: ignore[import-not-found]
        build_auction_response,
        build_bid_response,
        build_list_response,
    )
    from utils.validation import (  # type: ignore[import-not-found]
        validate_bid_history_params,
        validate_create_auction_input,
        validate_list_params,
        validate_place_bid_input,
        validate_uuid,
    )
except ModuleNotFoundError:  # pragma: no cover
    from ..services.auction_service import AuctionService
    from ..utils.appsync_types import (
        get_argument,
        get_argument_required,
        get_caller_id_required,
        get_field_name,
    )
    from ..utils.errors import AppError, ErrorCode, handle_error
    from ..utils.logging import StructuredLogger, get_correlation_id
    from ..utils.responses import build_auction_response, build_bid_response, build_list_response
    from ..utils.validation import (
        validate_bid_history_params,
        validate_create_auction_input,
        validate_list_params,
        validate_place_bid_input,
        validate_uuid,
    )


def create_auction(event: Dict[str, Any], service: AuctionService) -> Dict[str, Any]:
    """Mutation.createAuction(input)."""
    caller_id = get_caller_id_required(event)
    data = validate_create_auction_input(get_argument_required(event, "input"))
    auction = service.create_auction(caller_id, data)
    return {"auction": build_auction_response(auction)}


def activate_auction(event: Dict[str, Any], service: AuctionService) -> Dict[str, Any]:
    """Mutation.activateAuction(id)."""
    caller_id = get_caller_id_required(event)
    auction_id = validate_uuid(get_argument(event, "id"), "id")
    auction = service.activate_auction(caller_id, auction_id)
    return dict(build_auction_response(auction))


def place_bid(event: Dict[str, Any], service: AuctionService) -> Dict[str, Any]:
    """Mutation.placeBid(auctionId, amount) -> PlaceBidPayload."""
    caller_id = get_caller_id_required(event)
    bid_input = validate_place_bid_input(event.get("arguments") or {})
    result = service.place_bid(caller_id, bid_input["auctionId"], bid_input["amount"])
    return {
        "bid": build_bid_response(result["bid"]),
        "auction": build_auction_response(result["auction"]),
    }


def get_auction(event: Dict[str, Any], service: AuctionService) -> Dict[str, Any]:
    """Query.auction(id)."""
    auction_id = validate_uuid(get_argument(event, "id"), "id")
    return dict(build_auction_response(service.get_auction(auction_id)))


def list_auctions(event: Dict[str, Any], service: AuctionService) -> Dict[str, Any]:
    """Query.auctions(status, userId, limit, cursor)."""
    status = get_argument(event, "status")
    params = validate_list_params(
        {
            # GraphQL enum values are upper case
            "status": status.lower() if isinstance(status, str) else status,
            "userId": get_argument(event, "userId"),
            "limit": get_argument(event, "limit"),
            "cursor": get_argument(event, "cursor"),
        }
    )
    result = service.list_auctions(
        status=params["status"],
        user_id=params["userId"],
        limit=params["limit"],
        cursor=params["cursor"],
    )
    return {
        "auctions": build_list_response(result["auctions"], build_auction_response),
        "nextCursor": result["nextCursor"],
        "hasMore": result["hasMore"],
    }


def get_bids(event: Dict[str, Any], service: AuctionService) -> Dict[str, Any]:
    """Query.bids(auctionId, limit, offset)."""
    auction_id = validate_uuid(get_argument(event, "auctionId"), "auctionId")
    params = validate_bid_history_params(
        {"limit": get_argument(event, "limit"), "offset": get_argument(event, "offset")}
    )
    result = service.get_bid_history(auction_id, limit=params["limit"], offset=params["offset"])
    return {
        "bids": build_list_response(result["bids"], build_bid_response),
        "total": result["total"],
    }


RESOLVERS: Dict[str, Callable[[Dict[str, Any], AuctionService], Dict[str, Any]]] = {
    "createAuction": create_auction,
    "activateAuction": activate_auction,
    "placeBid": place_bid,
    "auction": get_auction,
    "auctions": list_auctions,
    "bids": get_bids,
}


def resolve(event: Dict[str, Any], context: Any, service: AuctionService) -> Dict[str, Any]:
    """
    Dispatch an AppSync event to the resolver for info.fieldName.

    Raises:
        AppError: Business and validation errors, or INTERNAL_ERROR for
            anything unexpected (details are logged, not returned)
    """
    log = StructuredLogger(__name__, get_correlation_id(event))
    field_name = get_field_name(event)
    resolver = RESOLVERS.get(field_name)
    if resolver is None:
        raise AppError(ErrorCode.INVALID_INPUT, f"Unknown field '{field_name}'", {"fieldName": field_name})

    try:
        return resolver(event, service)
    except AppError as e:
        log.warning("Resolver rejected request", fieldName=field_name, errorCode=e.error_code, reason=e.message)
        raise
    except Exception as e:
        log.error("Resolver failed", fieldName=field_name, error=str(e), errorType=type(e).__name__)
        error = handle_error(e)
        raise AppError(error["errorCode"], error["message"]) from e
