"""
Type definitions for AppSync Lambda events.

Provides TypedDict definitions for strongly typing AppSync resolver events,
reducing runtime errors from incorrect event structure assumptions.
"""

from typing import Any, Dict, List, Optional, TypedDict

from .errors import AppError, ErrorCode


class AppSyncIdentity(TypedDict, total=False):
    """AppSync Cognito User Pool identity."""

    sub: str  # Cognito user ID
    username: str
    claims: Dict[str, Any]
    sourceIp: List[str]
    defaultAuthStrategy: str


class AppSyncInfo(TypedDict, total=False):
    """Resolver field information."""

    fieldName: str
    parentTypeName: str
    variables: Dict[str, Any]


class AppSyncEvent(TypedDict, total=False):
    """Base AppSync resolver event structure."""

    identity: AppSyncIdentity
    arguments: Dict[str, Any]
    source: Dict[str, Any]
    info: AppSyncInfo
    request: Dict[str, Any]


class PlaceBidArguments(TypedDict):
    """Arguments of the placeBid mutation."""

    auctionId: str
    amount: float


# Helper functions for safe extraction


def get_caller_id(event: Dict[str, Any]) -> Optional[str]:
    """
    Extract caller's Cognito sub (user ID) from event.

    Args:
        event: AppSync event

    Returns:
        Caller ID or None if not present
    """
    identity: Dict[str, Any] = event.get("identity") or {}
    result: Optional[str] = identity.get("sub")
    return result


def get_caller_id_required(event: Dict[str, Any]) -> str:
    """
    Extract caller's Cognito sub (user ID) from event.

    Raises:
        AppError: UNAUTHORIZED if caller ID is not present
    """
    caller_id = get_caller_id(event)
    if not caller_id:
        raise AppError(ErrorCode.UNAUTHORIZED, "Unauthorized")
    return caller_id


def get_argument(event: Dict[str, Any], name: str, default: Any = None) -> Any:
    """
    Extract an argument from the event.

    Args:
        event: AppSync event
        name: Argument name
        default: Default value if not present

    Returns:
        Argument value or default
    """
    return (event.get("arguments") or {}).get(name, default)


def get_argument_required(event: Dict[str, Any], name: str) -> Any:
    """
    Extract a required argument from the event.

    Raises:
        AppError: INVALID_INPUT if argument is not present
    """
    value = get_argument(event, name)
    if value is None:
        raise AppError(ErrorCode.INVALID_INPUT, f"Argument '{name}' is required", {"field": name})
    return value


def get_field_name(event: Dict[str, Any]) -> str:
    """Name of the GraphQL field being resolved."""
    info: Dict[str, Any] = event.get("info") or {}
    return str(info.get("fieldName", ""))
