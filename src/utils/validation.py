"""
Input validation utilities.

Validates bid and auction requests at the request boundary, before any store
access.
"""

import base64
import binascii
import json
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional

from .errors import AppError, ErrorCode
from .money import parse_amount

AUCTION_STATUSES = ("pending", "active", "completed", "cancelled")

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 2000

LIST_DEFAULT_LIMIT = 20
BID_HISTORY_DEFAULT_LIMIT = 50
MAX_PAGE_SIZE = 100


def validate_uuid(value: Any, field: str) -> str:
    """
    Validate that a value is a canonical UUID string.

    Raises:
        AppError: If the value is missing or not a UUID
    """
    if not isinstance(value, str) or not value:
        raise AppError(ErrorCode.INVALID_INPUT, f"{field} is required", {"field": field})
    try:
        parsed = uuid.UUID(value)
    except ValueError:
        raise AppError(ErrorCode.INVALID_INPUT, f"{field} must be a valid UUID", {"field": field})
    return str(parsed)


def parse_timestamp(value: Any, field: str) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Naive timestamps are taken to be UTC. A trailing 'Z' is accepted.
    """
    if not isinstance(value, str) or not value.strip():
        raise AppError(ErrorCode.INVALID_INPUT, f"{field} is required", {"field": field})
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise AppError(
            ErrorCode.INVALID_INPUT, f"{field} must be an ISO-8601 timestamp", {"field": field}
        )
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _collect(errors: List[Dict[str, str]], field: str, fn: Any, *args: Any) -> Any:
    """Run a validator, recording its message instead of raising."""
    try:
        return fn(*args)
    except AppError as e:
        errors.append({"field": field, "message": e.message})
        return None


def validate_place_bid_input(data: Any) -> Dict[str, Any]:
    """
    Validate a place-bid request body.

    Args:
        data: Decoded body with auctionId and amount

    Returns:
        {"auctionId": str, "amount": Decimal}

    Raises:
        AppError: If any field is missing or malformed
    """
    if not isinstance(data, dict):
        raise AppError(ErrorCode.INVALID_INPUT, "Invalid request data", {"errors": []})

    errors: List[Dict[str, str]] = []
    auction_id = _collect(errors, "auctionId", validate_uuid, data.get("auctionId"), "auctionId")
    if data.get("amount") is None:
        errors.append({"field": "amount", "message": "amount is required"})
        amount = None
    else:
        amount = _collect(errors, "amount", parse_amount, data.get("amount"), "amount")

    if errors:
        raise AppError(ErrorCode.INVALID_INPUT, "Invalid request data", {"errors": errors})

    return {"auctionId": auction_id, "amount": amount}


def validate_create_auction_input(data: Any) -> Dict[str, Any]:
    """
    Validate a create-auction request body.

    Requirements:
    - title is 1-200 characters
    - description is optional, up to 2000 characters
    - startPrice is a positive money amount
    - reservePrice is optional and not below startPrice
    - endTime is after startTime

    Returns:
        Normalized auction fields with Decimal prices and ISO UTC timestamps

    Raises:
        AppError: If validation fails
    """
    if not isinstance(data, dict):
        raise AppError(ErrorCode.INVALID_INPUT, "Invalid request data", {"errors": []})

    errors: List[Dict[str, str]] = []

    title = data.get("title")
    if not isinstance(title, str) or not title.strip():
        errors.append({"field": "title", "message": "title is required"})
    elif len(title.strip()) > TITLE_MAX_LENGTH:
        errors.append({"field": "title", "message": f"title must be at most {TITLE_MAX_LENGTH} characters"})

    description = data.get("description")
    if description is not None:
        if not isinstance(description, str):
            errors.append({"field": "description", "message": "description must be a string"})
        elif len(description) > DESCRIPTION_MAX_LENGTH:
            errors.append(
                {
                    "field": "description",
                    "message": f"description must be at most {DESCRIPTION_MAX_LENGTH} characters",
                }
            )

    start_price: Optional[Decimal] = None
    if data.get("startPrice") is None:
        errors.append({"field": "startPrice", "message": "startPrice is required"})
    else:
        start_price = _collect(errors, "startPrice", parse_amount, data["startPrice"], "startPrice")

    reserve_price: Optional[Decimal] = None
    if data.get("reservePrice") is not None:
        reserve_price = _collect(
            errors, "reservePrice", parse_amount, data["reservePrice"], "reservePrice"
        )
        if reserve_price is not None and start_price is not None and reserve_price < start_price:
            errors.append(
                {"field": "reservePrice", "message": "reservePrice must not be below startPrice"}
            )

    start_time = _collect(errors, "startTime", parse_timestamp, data.get("startTime"), "startTime")
    end_time = _collect(errors, "endTime", parse_timestamp, data.get("endTime"), "endTime")
    if start_time is not None and end_time is not None and end_time <= start_time:
        errors.append({"field": "endTime", "message": "endTime must be after startTime"})

    if errors:
        raise AppError(ErrorCode.INVALID_INPUT, "Invalid request data", {"errors": errors})

    return {
        "title": title.strip(),  # type: ignore[union-attr]
        "description": description,
        "startPrice": start_price,
        "reservePrice": reserve_price,
        "startTime": start_time.isoformat(),  # type: ignore[union-attr]
        "endTime": end_time.isoformat(),  # type: ignore[union-attr]
    }


def _parse_int(value: Any, field: str, default: int, minimum: int, maximum: Optional[int]) -> int:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise AppError(ErrorCode.INVALID_INPUT, f"{field} must be an integer", {"field": field})
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise AppError(ErrorCode.INVALID_INPUT, f"{field} must be an integer", {"field": field})
    if number < minimum or (maximum is not None and number > maximum):
        bounds = f"between {minimum} and {maximum}" if maximum is not None else f"at least {minimum}"
        raise AppError(ErrorCode.INVALID_INPUT, f"{field} must be {bounds}", {"field": field})
    return number


def validate_list_params(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Validate list-auctions query parameters."""
    params = params or {}
    errors: List[Dict[str, str]] = []

    limit = _collect(errors, "limit", _parse_int, params.get("limit"), "limit", LIST_DEFAULT_LIMIT, 1, MAX_PAGE_SIZE)

    status = params.get("status") or None
    if status is not None and status not in AUCTION_STATUSES:
        errors.append({"field": "status", "message": f"status must be one of {', '.join(AUCTION_STATUSES)}"})

    user_id = params.get("userId") or None
    cursor = params.get("cursor") or None

    if errors:
        raise AppError(ErrorCode.INVALID_INPUT, "Invalid request parameters", {"errors": errors})

    return {"limit": limit, "status": status, "userId": user_id, "cursor": cursor}


def validate_bid_history_params(params: Optional[Dict[str, Any]]) -> Dict[str, int]:
    """Validate bid-history query parameters."""
    params = params or {}
    errors: List[Dict[str, str]] = []

    limit = _collect(errors, "limit", _parse_int, params.get("limit"), "limit", BID_HISTORY_DEFAULT_LIMIT, 1, MAX_PAGE_SIZE)
    offset = _collect(errors, "offset", _parse_int, params.get("offset"), "offset", 0, 0, None)

    if errors:
        raise AppError(ErrorCode.INVALID_INPUT, "Invalid request parameters", {"errors": errors})

    return {"limit": limit, "offset": offset}


def parse_json_body(event: Dict[str, Any]) -> Any:
    """
    Decode an API Gateway JSON body.

    Numbers with a fraction are decoded as Decimal so amounts never pass
    through binary floating point.

    Raises:
        AppError: If the body is missing or not valid JSON
    """
    body = event.get("body")
    if body is None or body == "":
        return {}
    if event.get("isBase64Encoded"):
        try:
            body = base64.b64decode(body).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            raise AppError(ErrorCode.INVALID_INPUT, "Invalid JSON in request body")
    try:
        return json.loads(body, parse_float=Decimal)
    except (TypeError, ValueError):
        raise AppError(ErrorCode.INVALID_INPUT, "Invalid JSON in request body")


def validate_path_auction_id(event: Dict[str, Any]) -> str:
    """Extract and validate the {auctionId} path parameter."""
    auction_id = (event.get("pathParameters") or {}).get("auctionId")
    if not auction_id:
        raise AppError(ErrorCode.INVALID_INPUT, "Auction ID is required", {"field": "auctionId"})
    try:
        return validate_uuid(auction_id, "auctionId")
    except AppError as e:
        raise AppError(
            ErrorCode.INVALID_INPUT,
            "Invalid request parameters",
            {"errors": [{"field": "auctionId", "message": e.message}]},
        )
