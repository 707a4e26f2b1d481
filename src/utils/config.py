"""
Environment based configuration.

The process entry point reads the environment once and passes the resulting
config objects to the store and the service.
"""

import os
from dataclasses import dataclass
from typing import Optional

# Optimistic-concurrency attempts for a single bid before giving up
MAX_BID_ATTEMPTS = 3


def get_required_env(name: str, default: Optional[str] = None) -> str:
    """Get a required environment variable.

    In Lambda/production, the env var must be set. For tests, a default can be
    provided to allow the code to run in mocked environments.

    Args:
        name: Environment variable name
        default: Optional default for test environments (should not be dev resource)

    Returns:
        The environment variable value

    Raises:
        ValueError: If the env var is not set and no default is provided
    """
    value = os.getenv(name, default)
    if value is None:
        raise ValueError(f"Required environment variable '{name}' is not set")
    return value


def _env_number(name: str, default: float, cast: type = float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ValueError(f"Environment variable '{name}' must be a number, got '{raw}'")
    if value < 0:
        raise ValueError(f"Environment variable '{name}' must not be negative")
    return value


@dataclass(frozen=True)
class StoreConfig:
    """DynamoDB connection settings for the auction store."""

    auctions_table_name: str
    bids_table_name: str
    endpoint_url: Optional[str] = None
    region_name: Optional[str] = None
    connect_timeout: float = 2.0
    read_timeout: float = 5.0
    max_retries: int = 3

    @classmethod
    def from_env(cls) -> "StoreConfig":
        return cls(
            auctions_table_name=get_required_env("AUCTIONS_TABLE_NAME"),
            bids_table_name=get_required_env("BIDS_TABLE_NAME"),
            endpoint_url=os.getenv("DYNAMODB_ENDPOINT") or None,
            region_name=os.getenv("AWS_REGION") or None,
            connect_timeout=_env_number("DYNAMODB_CONNECT_TIMEOUT", 2.0),
            read_timeout=_env_number("DYNAMODB_READ_TIMEOUT", 5.0),
            max_retries=int(_env_number("DYNAMODB_MAX_RETRIES", 3, int)),
        )


@dataclass(frozen=True)
class BiddingConfig:
    """Retry policy for the bid placement transaction."""

    max_attempts: int = MAX_BID_ATTEMPTS
    base_delay_ms: int = 20
    max_delay_ms: int = 200

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    @classmethod
    def from_env(cls) -> "BiddingConfig":
        return cls(
            max_attempts=int(_env_number("BID_MAX_ATTEMPTS", MAX_BID_ATTEMPTS, int)),
            base_delay_ms=int(_env_number("BID_RETRY_BASE_DELAY_MS", 20, int)),
            max_delay_ms=int(_env_number("BID_RETRY_MAX_DELAY_MS", 200, int)),
        )
