"""
Authorization utilities for auction handlers.

The caller is authenticated upstream (API Gateway JWT authorizer or AppSync
Cognito auth); these helpers only read the verified identity from the event.
"""

from typing import Any, Dict, Optional

from .errors import AppError, ErrorCode
from .logging import get_logger

logger = get_logger(__name__)


def get_http_caller_id(event: Dict[str, Any]) -> Optional[str]:
    """
    Extract the caller's user ID from an API Gateway HTTP API event.

    Checks, in order:
    1. requestContext.authorizer.jwt.claims.sub (JWT authorizer)
    2. requestContext.authorizer.lambda.userId (Lambda authorizer)

    Args:
        event: API Gateway payload v2 event

    Returns:
        Caller ID or None if the request carries no verified identity
    """
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}

    claims = (authorizer.get("jwt") or {}).get("claims") or {}
    sub = claims.get("sub")
    if sub:
        return str(sub)

    lambda_context = authorizer.get("lambda") or {}
    user_id = lambda_context.get("userId")
    if user_id:
        return str(user_id)

    return None


def require_http_caller_id(event: Dict[str, Any]) -> str:
    """
    Require a verified caller on an HTTP event.

    Raises:
        AppError: UNAUTHORIZED if no identity is present
    """
    caller_id = get_http_caller_id(event)
    if not caller_id:
        raise AppError(ErrorCode.UNAUTHORIZED, "Unauthorized")
    return caller_id


def is_auction_owner(caller_id: str, auction: Dict[str, Any]) -> bool:
    """Check if caller is the seller of an auction."""
    return auction.get("userId") == caller_id


def require_auction_owner(caller_id: str, auction: Dict[str, Any], action: str) -> None:
    """
    Require caller to own the auction or raise FORBIDDEN.

    Args:
        caller_id: Verified caller ID
        auction: Auction item
        action: Verb used in the error message (e.g. "activate")

    Raises:
        AppError: If caller is not the owner
    """
    if not is_auction_owner(caller_id, auction):
        logger.warning(
            "Auction ownership check failed",
            extra={"auctionId": auction.get("auctionId"), "callerId": caller_id, "action": action},
        )
        raise AppError(ErrorCode.FORBIDDEN, f"Only auction owner can {action}")
