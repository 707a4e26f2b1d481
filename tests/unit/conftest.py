"""
Test fixtures for Lambda function tests.

Provides mocked DynamoDB tables, an opened AuctionStore and an AuctionService
with a fixed clock and no-op backoff.
"""

import json
from typing import Any, Callable, Dict, Generator, List, Optional

import boto3
import pytest
from moto import mock_aws

from src.services.auction_service import AuctionService
from src.utils.config import BiddingConfig, StoreConfig
from src.utils.dynamodb import AuctionStore
from tests.unit.fixtures import BIDDER_ID, FIXED_NOW, SELLER_ID, make_auction
from tests.unit.table_schemas import AUCTIONS_TABLE_NAME, BIDS_TABLE_NAME, create_all_tables


@pytest.fixture
def aws_credentials() -> None:
    """Set fake AWS credentials for moto."""
    import os

    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
    os.environ["AUCTIONS_TABLE_NAME"] = AUCTIONS_TABLE_NAME
    os.environ["BIDS_TABLE_NAME"] = BIDS_TABLE_NAME


@pytest.fixture
def dynamodb_tables(aws_credentials: None) -> Generator[Dict[str, Any], None, None]:
    """Create the mock auctions and bids tables."""
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")
        yield create_all_tables(dynamodb)


@pytest.fixture
def auctions_table(dynamodb_tables: Dict[str, Any]) -> Any:
    return dynamodb_tables["auctions"]


@pytest.fixture
def bids_table(dynamodb_tables: Dict[str, Any]) -> Any:
    return dynamodb_tables["bids"]


@pytest.fixture
def store_config() -> StoreConfig:
    return StoreConfig(
        auctions_table_name=AUCTIONS_TABLE_NAME,
        bids_table_name=BIDS_TABLE_NAME,
        region_name="us-east-1",
    )


@pytest.fixture
def store(dynamodb_tables: Dict[str, Any], store_config: StoreConfig) -> Generator[AuctionStore, None, None]:
    """Opened AuctionStore against the mock tables."""
    auction_store = AuctionStore(store_config).open()
    yield auction_store
    auction_store.close()


@pytest.fixture
def sleeps() -> List[float]:
    """Backoff delays requested by the service under test."""
    return []


@pytest.fixture
def service(store: AuctionStore, sleeps: List[float]) -> AuctionService:
    """AuctionService with a fixed clock; backoff sleeps are recorded instead of slept."""
    return AuctionService(
        store,
        BiddingConfig(),
        clock=lambda: FIXED_NOW,
        sleep=sleeps.append,
        rand=lambda: 0.5,
    )


@pytest.fixture
def active_auction(auctions_table: Any) -> Dict[str, Any]:
    """Active auction at 100.00 with no bids, owned by SELLER_ID."""
    auction = make_auction()
    auctions_table.put_item(Item=auction)
    return auction


@pytest.fixture
def pending_auction(auctions_table: Any) -> Dict[str, Any]:
    """Pending auction owned by SELLER_ID."""
    auction = make_auction(status="pending")
    auctions_table.put_item(Item=auction)
    return auction


@pytest.fixture
def lambda_context() -> Any:
    """Mock Lambda context."""

    class Context:
        function_name = "test-function"
        memory_limit_in_mb = 128
        invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:test-function"
        aws_request_id = "test-request-id"

    return Context()


@pytest.fixture
def http_event() -> Callable[..., Dict[str, Any]]:
    """Factory for API Gateway HTTP API (payload v2) events."""

    def _make(
        body: Any = None,
        caller_id: Optional[str] = BIDDER_ID,
        path_parameters: Optional[Dict[str, str]] = None,
        query: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        request_context: Dict[str, Any] = {"requestId": "test-correlation-id"}
        if caller_id:
            request_context["authorizer"] = {"jwt": {"claims": {"sub": caller_id}}}
        return {
            "version": "2.0",
            "headers": {"content-type": "application/json"},
            "requestContext": request_context,
            "pathParameters": path_parameters,
            "queryStringParameters": query,
            "body": body if body is None or isinstance(body, str) else json.dumps(body),
            "isBase64Encoded": False,
        }

    return _make


@pytest.fixture
def appsync_event() -> Dict[str, Any]:
    """Base AppSync event structure."""
    return {
        "arguments": {},
        "identity": {
            "sub": SELLER_ID,
            "username": "testuser",
        },
        "requestContext": {
            "requestId": "test-correlation-id",
        },
        "info": {
            "fieldName": "testField",
            "parentTypeName": "Query",
        },
    }
