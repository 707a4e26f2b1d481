"""
DynamoDB access for auctions and bids.

The store is constructed and opened explicitly by the process entry point and
handed to the service; nothing here creates connections on first use.

Tables:
- Auctions: PK=auctionId
  GSIs: status-createdAt-index, userId-createdAt-index
- Bids: PK=auctionId, SK=bidSequence (the auction's bidCount after the bid)
"""

import base64
import binascii
import json
from contextlib import contextmanager
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional, Tuple

import boto3
from boto3.dynamodb.conditions import Attr, Key
from boto3.dynamodb.types import TypeSerializer
from botocore.config import Config
from botocore.exceptions import (
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from .config import StoreConfig
from .errors import AppError, ErrorCode
from .logging import get_logger
from .money import to_money

if TYPE_CHECKING:
    from mypy_boto3_dynamodb import DynamoDBClient, DynamoDBServiceResource
    from mypy_boto3_dynamodb.service_resource import Table

logger = get_logger(__name__)

STATUS_INDEX = "status-createdAt-index"
USER_INDEX = "userId-createdAt-index"

# Cancellation reason codes that mean "someone else got there first"
CONFLICT_REASONS = {"ConditionalCheckFailed", "TransactionConflict"}


class ConditionalWriteConflict(Exception):
    """A conditional write lost to a concurrent writer; the caller may re-read and retry."""


def encode_cursor(key: Dict[str, Any]) -> str:
    """Encode a LastEvaluatedKey as an opaque url-safe cursor."""
    raw = json.dumps(key, default=str, sort_keys=True).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")


def decode_cursor(cursor: str) -> Dict[str, Any]:
    """Decode a cursor produced by encode_cursor."""
    try:
        key = json.loads(base64.urlsafe_b64decode(cursor.encode("ascii")))
    except (binascii.Error, UnicodeError, ValueError):
        raise AppError(ErrorCode.INVALID_INPUT, "Invalid pagination cursor", {"cursor": cursor})
    if not isinstance(key, dict):
        raise AppError(ErrorCode.INVALID_INPUT, "Invalid pagination cursor", {"cursor": cursor})
    return key


@contextmanager
def _store_call(operation: str) -> Iterator[None]:
    """Translate connection failures and timeouts into STORE_UNAVAILABLE."""
    try:
        yield
    except (ConnectTimeoutError, ReadTimeoutError, EndpointConnectionError) as e:
        logger.error(
            "Auction store call failed",
            extra={"operation": operation, "error": str(e)},
            exc_info=True,
        )
        raise AppError(
            ErrorCode.STORE_UNAVAILABLE,
            "Auction store is temporarily unavailable",
            {"operation": operation},
        ) from e


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


class AuctionStore:
    """Durable storage for auctions and bids with an explicit open/close lifecycle."""

    def __init__(self, config: StoreConfig, session: Optional[boto3.session.Session] = None) -> None:
        self.config = config
        self._session = session
        self._resource: Optional["DynamoDBServiceResource"] = None
        self._client: Optional["DynamoDBClient"] = None
        self._serializer = TypeSerializer()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self) -> "AuctionStore":
        """Create the DynamoDB resource and client."""
        if self._resource is not None:
            raise RuntimeError("AuctionStore is already open")

        session = self._session or boto3.session.Session()
        botocore_config = Config(
            connect_timeout=self.config.connect_timeout,
            read_timeout=self.config.read_timeout,
            retries={"max_attempts": self.config.max_retries, "mode": "standard"},
        )
        kwargs: Dict[str, Any] = {"config": botocore_config}
        if self.config.endpoint_url:
            kwargs["endpoint_url"] = self.config.endpoint_url
        if self.config.region_name:
            kwargs["region_name"] = self.config.region_name

        self._resource = session.resource("dynamodb", **kwargs)
        self._client = session.client("dynamodb", **kwargs)
        logger.info(
            "Auction store opened",
            extra={
                "auctionsTable": self.config.auctions_table_name,
                "bidsTable": self.config.bids_table_name,
            },
        )
        return self

    def close(self) -> None:
        """Release the underlying HTTP connection pools."""
        if self._client is not None:
            self._client.close()
        if self._resource is not None:
            self._resource.meta.client.close()
        self._client = None
        self._resource = None

    @property
    def is_open(self) -> bool:
        return self._resource is not None

    def __enter__(self) -> "AuctionStore":
        return self.open()

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _require_open(self) -> Tuple["DynamoDBServiceResource", "DynamoDBClient"]:
        if self._resource is None or self._client is None:
            raise RuntimeError("AuctionStore is not open")
        return self._resource, self._client

    @property
    def auctions(self) -> "Table":
        resource, _ = self._require_open()
        return resource.Table(self.config.auctions_table_name)

    @property
    def bids(self) -> "Table":
        resource, _ = self._require_open()
        return resource.Table(self.config.bids_table_name)

    # ------------------------------------------------------------------
    # Auctions
    # ------------------------------------------------------------------

    def get_auction(self, auction_id: str) -> Optional[Dict[str, Any]]:
        """Strongly consistent point read of an auction."""
        with _store_call("get_auction"):
            response = self.auctions.get_item(Key={"auctionId": auction_id}, ConsistentRead=True)
        return response.get("Item")

    def put_auction(self, item: Dict[str, Any]) -> None:
        """Insert a new auction; an existing id is an error."""
        try:
            with _store_call("put_auction"):
                self.auctions.put_item(
                    Item=item, ConditionExpression="attribute_not_exists(auctionId)"
                )
        except ClientError as e:
            if _error_code(e) == "ConditionalCheckFailedException":
                raise AppError(
                    ErrorCode.ALREADY_EXISTS,
                    "Auction already exists",
                    {"auctionId": item.get("auctionId")},
                )
            raise

    def update_auction_status(
        self, auction_id: str, expected_status: str, new_status: str, now: str
    ) -> Dict[str, Any]:
        """
        Move an auction between lifecycle states.

        Raises:
            ConditionalWriteConflict: If the stored status is not expected_status
        """
        try:
            with _store_call("update_auction_status"):
                response = self.auctions.update_item(
                    Key={"auctionId": auction_id},
                    UpdateExpression="SET #status = :newStatus, updatedAt = :now",
                    ConditionExpression="#status = :expectedStatus",
                    ExpressionAttributeNames={"#status": "status"},
                    ExpressionAttributeValues={
                        ":newStatus": new_status,
                        ":expectedStatus": expected_status,
                        ":now": now,
                    },
                    ReturnValues="ALL_NEW",
                )
        except ClientError as e:
            if _error_code(e) == "ConditionalCheckFailedException":
                raise ConditionalWriteConflict(auction_id) from e
            raise
        attributes: Dict[str, Any] = response["Attributes"]
        return attributes

    def query_auctions(
        self,
        status: Optional[str] = None,
        user_id: Optional[str] = None,
        limit: int = 20,
        cursor: Optional[str] = None,
    ) -> Tuple[List[Dict[str, Any]], Optional[str]]:
        """
        List auctions, newest first when filtered by status or owner.

        Returns:
            (items, next_cursor); next_cursor is None on the last page
        """
        table = self.auctions
        kwargs: Dict[str, Any] = {}
        if user_id:
            operation = table.query
            kwargs["IndexName"] = USER_INDEX
            kwargs["KeyConditionExpression"] = Key("userId").eq(user_id)
            kwargs["ScanIndexForward"] = False
            if status:
                kwargs["FilterExpression"] = Attr("status").eq(status)
        elif status:
            operation = table.query
            kwargs["IndexName"] = STATUS_INDEX
            kwargs["KeyConditionExpression"] = Key("status").eq(status)
            kwargs["ScanIndexForward"] = False
        else:
            operation = table.scan

        if cursor:
            kwargs["ExclusiveStartKey"] = decode_cursor(cursor)

        items: List[Dict[str, Any]] = []
        last_key: Optional[Dict[str, Any]] = None
        with _store_call("query_auctions"):
            while True:
                # Limit applies before filtering, so a page never overshoots
                kwargs["Limit"] = limit - len(items)
                response = operation(**kwargs)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if len(items) >= limit or not last_key:
                    break
                kwargs["ExclusiveStartKey"] = last_key

        return items, encode_cursor(last_key) if last_key else None

    # ------------------------------------------------------------------
    # Bids
    # ------------------------------------------------------------------

    def commit_bid(
        self,
        auction: Dict[str, Any],
        bid_item: Dict[str, Any],
        new_price: Decimal,
        now: str,
    ) -> Dict[str, Any]:
        """
        Atomically raise the auction price and append the bid.

        The auction update is conditioned on currentPrice, bidCount and status
        still holding the values in `auction` (the caller's read). Either both
        writes land or neither does.

        Returns:
            The auction snapshot after the commit

        Raises:
            ConditionalWriteConflict: If another writer changed the auction first
        """
        _, client = self._require_open()
        serialize = self._serializer.serialize

        auction_id = auction["auctionId"]
        expected_price = to_money(auction["currentPrice"])
        expected_count = int(auction.get("bidCount", 0))

        transact_items: List[Dict[str, Any]] = [
            {
                "Update": {
                    "TableName": self.config.auctions_table_name,
                    "Key": {"auctionId": serialize(auction_id)},
                    "UpdateExpression": (
                        "SET currentPrice = :newPrice, updatedAt = :now, "
                        "bidCount = bidCount + :one"
                    ),
                    "ConditionExpression": (
                        "currentPrice = :expectedPrice AND bidCount = :expectedCount "
                        "AND #status = :expectedStatus"
                    ),
                    "ExpressionAttributeNames": {"#status": "status"},
                    "ExpressionAttributeValues": {
                        ":newPrice": serialize(new_price),
                        ":now": serialize(now),
                        ":one": serialize(1),
                        ":expectedPrice": serialize(expected_price),
                        ":expectedCount": serialize(expected_count),
                        ":expectedStatus": serialize(auction["status"]),
                    },
                }
            },
            {
                "Put": {
                    "TableName": self.config.bids_table_name,
                    "Item": {k: serialize(v) for k, v in bid_item.items() if v is not None},
                    # Sequence numbers are dense per auction; a duplicate means a lost race
                    "ConditionExpression": "attribute_not_exists(bidSequence)",
                }
            },
        ]

        try:
            with _store_call("commit_bid"):
                client.transact_write_items(TransactItems=transact_items)  # type: ignore[arg-type]
        except ClientError as e:
            if _error_code(e) == "TransactionCanceledException":
                reasons = e.response.get("CancellationReasons", [])  # type: ignore[typeddict-item]
                codes = {reason.get("Code") for reason in reasons}
                message = str(e.response.get("Error", {}).get("Message", ""))
                if codes & CONFLICT_REASONS or (
                    not reasons and any(code in message for code in CONFLICT_REASONS)
                ):
                    raise ConditionalWriteConflict(auction_id) from e
            raise

        updated = dict(auction)
        updated["currentPrice"] = new_price
        updated["bidCount"] = expected_count + 1
        updated["updatedAt"] = now
        return updated

    def query_bids(self, auction_id: str, max_sequence: int, limit: int) -> List[Dict[str, Any]]:
        """Bids with bidSequence <= max_sequence, newest first."""
        if max_sequence < 1 or limit < 1:
            return []
        with _store_call("query_bids"):
            response = self.bids.query(
                KeyConditionExpression=Key("auctionId").eq(auction_id)
                & Key("bidSequence").lte(max_sequence),
                ScanIndexForward=False,
                Limit=limit,
                ConsistentRead=True,
            )
        items: List[Dict[str, Any]] = response.get("Items", [])
        return items

    def count_bids(self, auction_id: str) -> int:
        """Count every bid row referencing an auction."""
        kwargs: Dict[str, Any] = {
            "KeyConditionExpression": Key("auctionId").eq(auction_id),
            "Select": "COUNT",
            "ConsistentRead": True,
        }
        total = 0
        with _store_call("count_bids"):
            while True:
                response = self.bids.query(**kwargs)
                total += int(response.get("Count", 0))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                kwargs["ExclusiveStartKey"] = last_key
        return total
