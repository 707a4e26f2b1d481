"""HTTP API Lambda handlers for bids.

Routes:
- POST /bids                        place_bid
- GET  /auctions/{auctionId}/bids   get_bid_history

The caller is authenticated by the API Gateway authorizer before the handler
runs. The handler validates the request, invokes the service, and maps the
outcome to an HTTP status.
"""

from typing import Any, Dict

# Handle both Lambda (absolute) and unit test (relative) imports
try:  # pragma: no cover
    from services.auction_service import AuctionService  # type: ignore[import-not-found]
    from utils.auth import require_http_caller_id  # type: ignore[import-not-found]
    from utils.errors import AppError  # type: ignore[import-not-found]
    from utils.logging import StructuredLogger, get_correlation_id  # type: ignore[import-not-found]
    from utils.responses import (  # type: ignore[import-not-found]
        app_error_response,
        build_auction_response,
        build_bid_response,
        build_list_response,
        error_response,
        success_response,
    )
    from utils.validation import (  # type: ignore[import-not-found]
        parse_json_body,
        validate_bid_history_params,
        validate_path_auction_id,
        validate_place_bid_input,
    )
except ModuleNotFoundError:  # pragma: no cover
    from ..services.auction_service import AuctionService
    from ..utils.auth import require_http_caller_id
    from ..utils.errors import AppError
    from ..utils.logging import StructuredLogger, get_correlation_id
    from ..utils.responses import (
        app_error_response,
        build_auction_response,
        build_bid_response,
        build_list_response,
        error_response,
        success_response,
    )
    from ..utils.validation import (
        parse_json_body,
        validate_bid_history_params,
        validate_path_auction_id,
        validate_place_bid_input,
    )


def place_bid(event: Dict[str, Any], context: Any, service: AuctionService) -> Dict[str, Any]:
    """
    Place a bid on an auction.

    Request body: {"auctionId": "<uuid>", "amount": 150.00}

    Responses:
    - 201 {"bid": ..., "auction": ...}
    - 400 invalid body or bid too low
    - 401 no verified caller
    - 404 auction missing or not accepting bids
    - 503 concurrent bids exhausted the retry budget
    - 500 anything unexpected
    """
    log = StructuredLogger(__name__, get_correlation_id(event))
    try:
        caller_id = require_http_caller_id(event)
        bid_input = validate_place_bid_input(parse_json_body(event))

        result = service.place_bid(caller_id, bid_input["auctionId"], bid_input["amount"])

        log.info(
            "Bid placed",
            auctionId=bid_input["auctionId"],
            bidId=result["bid"]["bidId"],
            userId=caller_id,
            amount=str(bid_input["amount"]),
        )
        return success_response(
            201,
            {
                "bid": build_bid_response(result["bid"]),
                "auction": build_auction_response(result["auction"]),
            },
        )
    except AppError as e:
        log.warning("Bid rejected", errorCode=e.error_code, reason=e.message)
        return app_error_response(e)
    except Exception as e:
        log.error("Error placing bid", error=str(e), errorType=type(e).__name__)
        return error_response(500, "Internal server error")


def get_bid_history(event: Dict[str, Any], context: Any, service: AuctionService) -> Dict[str, Any]:
    """
    List bids for an auction, newest first.

    Query parameters: limit (1-100, default 50), offset (>= 0, default 0)

    Returns:
        200 {"bids": [...], "total": n}
    """
    log = StructuredLogger(__name__, get_correlation_id(event))
    try:
        auction_id = validate_path_auction_id(event)
        params = validate_bid_history_params(event.get("queryStringParameters"))

        result = service.get_bid_history(auction_id, limit=params["limit"], offset=params["offset"])

        return success_response(
            200,
            {
                "bids": build_list_response(result["bids"], build_bid_response),
                "total": result["total"],
            },
        )
    except AppError as e:
        log.warning("Bid history request rejected", errorCode=e.error_code, reason=e.message)
        return app_error_response(e)
    except Exception as e:
        log.error("Error fetching bid history", error=str(e), errorType=type(e).__name__)
        return error_response(500, "Internal server error")
