"""
Entry points for listing a paginated endpoint.
"""
import logging
from typing import Any, Dict, Optional, Type, TypeVar

from ..client.base_client import AsyncServiceClient, SyncServiceClient
from .filters import PageFilter
from .iterator import AsyncPageIterator, PageDecoder, PageIterator
from .strategies import ContinuationTokenStrategy, PageStrategy

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_STRATEGY = ContinuationTokenStrategy()


def _initial_params(
    filters: Optional[PageFilter],
    params: Optional[Dict[str, Any]],
) -> Dict[str, Any]:
    initial = dict(params or {})
    if filters is not None:
        initial.update(filters.to_params())
    return initial


def list_pages(
    client: SyncServiceClient,
    route: str,
    item_type: Type[T],
    filters: Optional[PageFilter] = None,
    strategy: Optional[PageStrategy] = None,
    name: Optional[str] = None,
    params: Optional[Dict[str, Any]] = None,
    raise_on_error: bool = False,
) -> PageIterator[T]:
    """
    Lazily list a paginated endpoint with GET requests.

    Args:
        client: Client bound to the service
        route: Endpoint route relative to the client's base URL
        item_type: Type each item is validated into (model, dataclass, dict)
        filters: Common list filters sent on every request
        strategy: Pagination strategy; continuation tokens by default
        name: Resource name used in logs and errors; defaults to the route
        params: Extra query parameters sent on every request
        raise_on_error: Raise ArkPaginationError at the end of a failed sequence

    Returns:
        PageIterator whose producer has already started
    """
    decoder = PageDecoder(name or route, item_type, strategy or DEFAULT_STRATEGY)
    initial = _initial_params(filters, params)
    logger.debug(f"list_pages: listing {decoder.name} with {initial}")
    return PageIterator(
        lambda page_params: client.get(route, params=page_params),
        decoder,
        initial,
        raise_on_error=raise_on_error,
    )


def alist_pages(
    client: AsyncServiceClient,
    route: str,
    item_type: Type[T],
    filters: Optional[PageFilter] = None,
    strategy: Optional[PageStrategy] = None,
    name: Optional[str] = None,
    params: Optional[Dict[str, Any]] = None,
    raise_on_error: bool = False,
) -> AsyncPageIterator[T]:
    """Async counterpart of list_pages; the producer starts on first iteration."""
    decoder = PageDecoder(name or route, item_type, strategy or DEFAULT_STRATEGY)
    initial = _initial_params(filters, params)
    logger.debug(f"alist_pages: listing {decoder.name} with {initial}")

    async def fetch(page_params: Dict[str, Any]):
        return await client.get(route, params=page_params)

    return AsyncPageIterator(fetch, decoder, initial, raise_on_error=raise_on_error)
