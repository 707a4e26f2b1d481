"""
Response builders for Lambda handlers.

Provides consistent entity shapes for the GraphQL resolvers and the HTTP API,
plus API Gateway proxy response helpers.
"""

import json
from decimal import Decimal
from typing import Any, Dict, List, Optional, TypedDict, cast

from .errors import AppError, http_status_for
from .money import money_to_float, to_money


class AuctionResponse(TypedDict, total=False):
    """Auction response type."""

    id: str
    userId: str
    title: str
    description: Optional[str]
    startPrice: float
    reservePrice: Optional[float]
    currentPrice: float
    startTime: str
    endTime: str
    status: str
    winnerId: Optional[str]
    bidCount: int
    createdAt: str
    updatedAt: str


class BidResponse(TypedDict, total=False):
    """Bid response type."""

    id: str
    auctionId: str
    userId: str
    amount: float
    createdAt: str


def _optional_money(value: Any) -> Optional[float]:
    if value is None:
        return None
    return money_to_float(to_money(value))


def build_auction_response(item: Dict[str, Any]) -> AuctionResponse:
    """
    Build an Auction response from a DynamoDB item.

    Args:
        item: DynamoDB item dictionary

    Returns:
        AuctionResponse with the public field names
    """
    start_price = _optional_money(item.get("startPrice"))
    current_price = _optional_money(item.get("currentPrice"))

    return AuctionResponse(
        id=cast(str, item.get("auctionId", "")),
        userId=cast(str, item.get("userId", "")),
        title=cast(str, item.get("title", "")),
        description=item.get("description"),
        startPrice=start_price if start_price is not None else 0.0,
        reservePrice=_optional_money(item.get("reservePrice")),
        currentPrice=current_price if current_price is not None else 0.0,
        startTime=cast(str, item.get("startTime", "")),
        endTime=cast(str, item.get("endTime", "")),
        status=cast(str, item.get("status", "")),
        winnerId=item.get("winnerId"),
        bidCount=int(item.get("bidCount", 0)),
        createdAt=cast(str, item.get("createdAt", "")),
        updatedAt=cast(str, item.get("updatedAt", "")),
    )


def build_bid_response(item: Dict[str, Any]) -> BidResponse:
    """Build a Bid response from a DynamoDB item."""
    amount = _optional_money(item.get("amount"))
    return BidResponse(
        id=cast(str, item.get("bidId", "")),
        auctionId=cast(str, item.get("auctionId", "")),
        userId=cast(str, item.get("userId", "")),
        amount=amount if amount is not None else 0.0,
        createdAt=cast(str, item.get("createdAt", "")),
    )


def build_list_response(items: List[Dict[str, Any]], builder: Any) -> List[Any]:
    """
    Build a list of responses using a builder function.

    Args:
        items: List of DynamoDB items
        builder: Builder function to apply to each item

    Returns:
        List of built responses
    """
    return [builder(item) for item in items]


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def success_response(status_code: int, data: Any) -> Dict[str, Any]:
    """Build an API Gateway proxy response with a JSON body."""
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(data, default=_json_default),
    }


def error_response(
    status_code: int,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    error_code: Optional[str] = None,
) -> Dict[str, Any]:
    """Build an API Gateway proxy error response."""
    body: Dict[str, Any] = {"error": message, "message": message}
    if error_code:
        body["errorCode"] = error_code
    if details:
        body["details"] = details
    return success_response(status_code, body)


def app_error_response(error: AppError) -> Dict[str, Any]:
    """Map an AppError to its HTTP status and error body."""
    return error_response(
        http_status_for(error), error.message, error.details or None, error.error_code
    )
