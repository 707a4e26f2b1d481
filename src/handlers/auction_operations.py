"""HTTP API Lambda handlers for auction listings.

Routes:
- POST /auctions                          create_auction
- POST /auctions/{auctionId}/activate     activate_auction
- GET  /auctions/{auctionId}              get_auction
- GET  /auctions                          list_auctions
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
        build_list_response,
        error_response,
        success_response,
    )
    from utils.validation import (  # type: ignore[import-not-found]
        parse_json_body,
        validate_create_auction_input,
        validate_list_params,
        validate_path_auction_id,
    )
except ModuleNotFoundError:  # pragma: no cover
    from ..services.auction_service import AuctionService
    from ..utils.auth import require_http_caller_id
    from ..utils.errors import AppError
    from ..utils.logging import StructuredLogger, get_correlation_id
    from ..utils.responses import (
        app_error_response,
        build_auction_response,
        build_list_response,
        error_response,
        success_response,
    )
    from ..utils.validation import (
        parse_json_body,
        validate_create_auction_input,
        validate_list_params,
        validate_path_auction_id,
    )


def create_auction(event: Dict[str, Any], context: Any, service: AuctionService) -> Dict[str, Any]:
    """
    Create a pending auction owned by the caller.

    Returns:
        201 {"auction": ...}
    """
    log = StructuredLogger(__name__, get_correlation_id(event))
    try:
        caller_id = require_http_caller_id(event)
        data = validate_create_auction_input(parse_json_body(event))

        auction = service.create_auction(caller_id, data)

        log.info("Auction created", auctionId=auction["auctionId"], userId=caller_id)
        return success_response(201, {"auction": build_auction_response(auction)})
    except AppError as e:
        log.warning("Create auction rejected", errorCode=e.error_code, reason=e.message)
        return app_error_response(e)
    except Exception as e:
        log.error("Error creating auction", error=str(e), errorType=type(e).__name__)
        return error_response(500, "Internal server error")


def activate_auction(event: Dict[str, Any], context: Any, service: AuctionService) -> Dict[str, Any]:
    """Move a pending auction to active. Owner only."""
    log = StructuredLogger(__name__, get_correlation_id(event))
    try:
        caller_id = require_http_caller_id(event)
        auction_id = validate_path_auction_id(event)

        auction = service.activate_auction(caller_id, auction_id)

        log.info("Auction activated", auctionId=auction_id, userId=caller_id)
        return success_response(200, {"auction": build_auction_response(auction)})
    except AppError as e:
        log.warning("Activate auction rejected", errorCode=e.error_code, reason=e.message)
        return app_error_response(e)
    except Exception as e:
        log.error("Error activating auction", error=str(e), errorType=type(e).__name__)
        return error_response(500, "Internal server error")


def get_auction(event: Dict[str, Any], context: Any, service: AuctionService) -> Dict[str, Any]:
    """Fetch one auction (public)."""
    log = StructuredLogger(__name__, get_correlation_id(event))
    try:
        auction_id = validate_path_auction_id(event)
        auction = service.get_auction(auction_id)
        return success_response(200, {"auction": build_auction_response(auction)})
    except AppError as e:
        return app_error_response(e)
    except Exception as e:
        log.error("Error fetching auction", error=str(e), errorType=type(e).__name__)
        return error_response(500, "Internal server error")


def list_auctions(event: Dict[str, Any], context: Any, service: AuctionService) -> Dict[str, Any]:
    """
    List auctions (public).

    Query parameters: status, userId, limit (1-100, default 20), cursor

    Returns:
        200 {"auctions": [...], "nextCursor": str | null, "hasMore": bool}
    """
    log = StructuredLogger(__name__, get_correlation_id(event))
    try:
        params = validate_list_params(event.get("queryStringParameters"))

        result = service.list_auctions(
            status=params["status"],
            user_id=params["userId"],
            limit=params["limit"],
            cursor=params["cursor"],
        )

        return success_response(
            200,
            {
                "auctions": build_list_response(result["auctions"], build_auction_response),
                "nextCursor": result["nextCursor"],
                "hasMore": result["hasMore"],
            },
        )
    except AppError as e:
        log.warning("List auctions rejected", errorCode=e.error_code, reason=e.message)
        return app_error_response(e)
    except Exception as e:
        log.error("Error listing auctions", error=str(e), errorType=type(e).__name__)
        return error_response(500, "Internal server error")
