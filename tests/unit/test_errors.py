"""Tests for error handling utilities."""

from decimal import Decimal

import pytest

from src.utils.errors import (
    AppError,
    AuctionNotActive,
    AuctionNotFound,
    BidTooLow,
    ErrorCode,
    TransientConflict,
    handle_error,
    http_status_for,
)


class TestAppError:
    """Tests for AppError class."""

    def test_app_error_with_message(self) -> None:
        """Test creating AppError with message."""
        error = AppError(ErrorCode.NOT_FOUND, "Auction not found")

        assert error.error_code == ErrorCode.NOT_FOUND
        assert error.message == "Auction not found"
        assert error.details == {}

    def test_app_error_to_dict(self) -> None:
        """Test converting AppError to dict."""
        error = AppError(ErrorCode.FORBIDDEN, "Access denied", {"resource": "auction"})

        result = error.to_dict()

        assert result["errorCode"] == ErrorCode.FORBIDDEN
        assert result["message"] == "Access denied"
        assert result["resource"] == "auction"


class TestBiddingErrors:
    """Tests for the tagged bid placement outcomes."""

    def test_auction_not_found(self) -> None:
        error = AuctionNotFound("a-1")

        assert isinstance(error, AppError)
        assert error.error_code == ErrorCode.AUCTION_NOT_FOUND
        assert error.message == "Auction not found"
        assert error.details == {"auctionId": "a-1"}

    def test_auction_not_active_includes_status(self) -> None:
        error = AuctionNotActive("a-1", "pending")

        assert error.error_code == ErrorCode.AUCTION_NOT_ACTIVE
        assert error.details == {"auctionId": "a-1", "status": "pending"}

    def test_auction_not_active_without_status(self) -> None:
        error = AuctionNotActive("a-1")

        assert error.details == {"auctionId": "a-1"}

    def test_bid_too_low_reports_current_price_as_string(self) -> None:
        error = BidTooLow("a-1", Decimal("150.00"))

        assert error.error_code == ErrorCode.BID_TOO_LOW
        assert error.message == "Bid amount must be higher than current price"
        assert error.details["currentPrice"] == "150.00"

    def test_transient_conflict(self) -> None:
        error = TransientConflict("a-1", 3)

        assert error.error_code == ErrorCode.TRANSIENT_CONFLICT
        assert error.details == {"auctionId": "a-1", "attempts": 3}


class TestHttpStatusFor:
    """Tests for the error code to HTTP status mapping."""

    @pytest.mark.parametrize(
        "error,status",
        [
            (AppError(ErrorCode.INVALID_INPUT, "bad"), 400),
            (BidTooLow("a-1", Decimal("1.00")), 400),
            (AppError(ErrorCode.UNAUTHORIZED, "Unauthorized"), 401),
            (AppError(ErrorCode.FORBIDDEN, "nope"), 403),
            (AuctionNotFound("a-1"), 404),
            (AuctionNotActive("a-1"), 404),
            (AppError(ErrorCode.ALREADY_EXISTS, "dup"), 409),
            (AppError(ErrorCode.INVALID_STATE, "state"), 409),
            (TransientConflict("a-1", 3), 503),
            (AppError(ErrorCode.STORE_UNAVAILABLE, "down"), 503),
            (AppError(ErrorCode.DATABASE_ERROR, "db"), 500),
            (AppError("SOMETHING_NEW", "unknown"), 500),
            (ValueError("boom"), 500),
        ],
    )
    def test_status(self, error: Exception, status: int) -> None:
        assert http_status_for(error) == status


class TestHandleError:
    """Tests for handle_error function."""

    def test_handle_app_error(self) -> None:
        """Test handling AppError returns error dict."""
        error = AppError(ErrorCode.INVALID_INPUT, "Bad request", {"field": "amount"})

        result = handle_error(error)

        assert result["errorCode"] == ErrorCode.INVALID_INPUT
        assert result["message"] == "Bad request"
        assert result["field"] == "amount"

    def test_handle_generic_exception(self) -> None:
        """Test handling generic exception returns internal error."""
        result = handle_error(ValueError("secret detail"))

        assert result["errorCode"] == ErrorCode.INTERNAL_ERROR
        assert "unexpected" in result["message"].lower()
        assert "secret" not in result["message"]
