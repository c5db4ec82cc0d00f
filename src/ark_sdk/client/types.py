"""
Type definitions for ark_sdk.client.
"""
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Dict,
    Literal,
    TypedDict,
    Union,
)

if TYPE_CHECKING:
    from .base_client import AsyncServiceClient, SyncServiceClient

# HTTP methods
HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

# Query parameters
QueryParams = Dict[str, Union[str, int, bool]]

# Refresh callbacks receive the client they must update in place
RefreshCallback = Callable[["SyncServiceClient"], None]
AsyncRefreshCallback = Callable[
    ["AsyncServiceClient"], Union[None, Awaitable[None]]
]


class ArkResponse(TypedDict):
    """Response from a service client verb call."""

    status: int
    status_text: str
    headers: Dict[str, str]
    data: Any
    text: str
    ok: bool
    url: str
