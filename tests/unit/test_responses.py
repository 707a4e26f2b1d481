"""Tests for response builders."""

import json
from decimal import Decimal

from src.utils.errors import AppError, BidTooLow, ErrorCode
from src.utils.responses import (
    app_error_response,
    build_auction_response,
    build_bid_response,
    build_list_response,
    error_response,
    success_response,
)
from tests.unit.fixtures import make_auction, make_bid


class TestBuildAuctionResponse:
    """Tests for build_auction_response."""

    def test_maps_fields(self) -> None:
        item = make_auction(auction_id="a-1", current_price="150.50", bid_count=2, reservePrice=Decimal("300"))

        result = build_auction_response(item)

        assert result["id"] == "a-1"
        assert result["currentPrice"] == 150.5
        assert result["startPrice"] == 150.5
        assert result["reservePrice"] == 300.0
        assert result["bidCount"] == 2
        assert result["status"] == "active"
        assert result["winnerId"] is None

    def test_prices_are_floats(self) -> None:
        result = build_auction_response(make_auction())

        assert isinstance(result["currentPrice"], float)
        assert result["reservePrice"] is None

    def test_bid_count_from_decimal(self) -> None:
        result = build_auction_response(make_auction(bid_count=Decimal("4")))  # type: ignore[arg-type]

        assert result["bidCount"] == 4
        assert isinstance(result["bidCount"], int)


class TestBuildBidResponse:
    """Tests for build_bid_response."""

    def test_maps_bid_id_to_id(self) -> None:
        item = make_bid("a-1", 1, "125.99")

        result = build_bid_response(item)

        assert result["id"] == item["bidId"]
        assert result["auctionId"] == "a-1"
        assert result["amount"] == 125.99
        assert "bidSequence" not in result


class TestBuildListResponse:
    def test_applies_builder(self) -> None:
        items = [make_bid("a-1", 1, "1.00"), make_bid("a-1", 2, "2.00")]

        result = build_list_response(items, build_bid_response)

        assert [r["amount"] for r in result] == [1.0, 2.0]


class TestProxyResponses:
    """Tests for API Gateway proxy responses."""

    def test_success_response_serializes_decimals(self) -> None:
        response = success_response(201, {"amount": Decimal("150.00")})

        assert response["statusCode"] == 201
        assert response["headers"]["Content-Type"] == "application/json"
        assert json.loads(response["body"]) == {"amount": 150.0}

    def test_error_response(self) -> None:
        response = error_response(500, "Internal server error")

        assert response["statusCode"] == 500
        assert json.loads(response["body"]) == {
            "error": "Internal server error",
            "message": "Internal server error",
        }

    def test_app_error_response(self) -> None:
        response = app_error_response(BidTooLow("a-1", Decimal("150.00")))

        body = json.loads(response["body"])
        assert response["statusCode"] == 400
        assert body["errorCode"] == ErrorCode.BID_TOO_LOW
        assert body["error"] == "Bid amount must be higher than current price"
        assert body["details"]["currentPrice"] == "150.00"

    def test_app_error_response_without_details(self) -> None:
        response = app_error_response(AppError(ErrorCode.UNAUTHORIZED, "Unauthorized"))

        body = json.loads(response["body"])
        assert response["statusCode"] == 401
        assert "details" not in body
