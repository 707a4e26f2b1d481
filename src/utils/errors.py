"""
Error handling utilities for Lambda functions.

Provides standardized error responses with error codes, plus the tagged
outcomes of the bid placement transaction.
"""

from typing import Any, Dict, Optional


class AppError(Exception):
    """
    Application error with error code and message.

    Used to return structured errors to GraphQL and HTTP clients.
    """

    def __init__(self, error_code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for GraphQL response."""
        return {
            "errorCode": self.error_code,
            "message": self.message,
            **self.details,
        }


# Common error codes
class ErrorCode:
    """Standard error codes for the application."""

    # Authorization errors
    FORBIDDEN = "FORBIDDEN"
    UNAUTHORIZED = "UNAUTHORIZED"

    # Resource errors
    NOT_FOUND = "NOT_FOUND"
    ALREADY_EXISTS = "ALREADY_EXISTS"

    # Validation errors
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_STATE = "INVALID_STATE"

    # Bidding outcomes
    AUCTION_NOT_FOUND = "AUCTION_NOT_FOUND"
    AUCTION_NOT_ACTIVE = "AUCTION_NOT_ACTIVE"
    BID_TOO_LOW = "BID_TOO_LOW"
    TRANSIENT_CONFLICT = "TRANSIENT_CONFLICT"

    # System errors
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class AuctionNotFound(AppError):
    """The auction id does not reference an existing auction."""

    def __init__(self, auction_id: str):
        super().__init__(ErrorCode.AUCTION_NOT_FOUND, "Auction not found", {"auctionId": auction_id})


class AuctionNotActive(AppError):
    """The auction exists but is not accepting bids right now."""

    def __init__(self, auction_id: str, status: Optional[str] = None):
        details: Dict[str, Any] = {"auctionId": auction_id}
        if status:
            details["status"] = status
        super().__init__(ErrorCode.AUCTION_NOT_ACTIVE, "Auction not found or not active", details)


class BidTooLow(AppError):
    """The bid does not exceed the auction's current price."""

    def __init__(self, auction_id: str, current_price: Any):
        super().__init__(
            ErrorCode.BID_TOO_LOW,
            "Bid amount must be higher than current price",
            {"auctionId": auction_id, "currentPrice": str(current_price)},
        )


class TransientConflict(AppError):
    """Concurrent bids kept winning the conditional write; the caller may retry."""

    def __init__(self, auction_id: str, attempts: int):
        super().__init__(
            ErrorCode.TRANSIENT_CONFLICT,
            "Auction is receiving too many concurrent bids, please retry",
            {"auctionId": auction_id, "attempts": attempts},
        )


HTTP_STATUS_BY_CODE: Dict[str, int] = {
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.BID_TOO_LOW: 400,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.AUCTION_NOT_FOUND: 404,
    # Not biddable is reported as "not found for bidding purposes"
    ErrorCode.AUCTION_NOT_ACTIVE: 404,
    ErrorCode.ALREADY_EXISTS: 409,
    ErrorCode.INVALID_STATE: 409,
    ErrorCode.TRANSIENT_CONFLICT: 503,
    ErrorCode.STORE_UNAVAILABLE: 503,
    ErrorCode.DATABASE_ERROR: 500,
    ErrorCode.INTERNAL_ERROR: 500,
}


def http_status_for(error: Exception) -> int:
    """Map an exception to the HTTP status code the boundary should return."""
    if isinstance(error, AppError):
        return HTTP_STATUS_BY_CODE.get(error.error_code, 500)
    return 500


def handle_error(error: Exception) -> Dict[str, Any]:
    """
    Convert exception to standardized error response.

    Args:
        error: Exception to handle

    Returns:
        Error dictionary for GraphQL response
    """
    if isinstance(error, AppError):
        return error.to_dict()

    # Unexpected error - log and return generic message
    return {
        "errorCode": ErrorCode.INTERNAL_ERROR,
        "message": "An unexpected error occurred. Please try again.",
    }
