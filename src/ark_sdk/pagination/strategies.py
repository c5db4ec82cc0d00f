"""
Pagination strategies.

A strategy knows where a backend puts the items of a page and how it
signals the next one. Strategies hold no per-call state, so one instance
can serve any number of concurrent page sequences.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import parse_qs, urlparse

from ..client.config import snake_case_keys as _snake_case_keys


class PageStrategy(ABC):
    """Extracts items and next-page parameters from a decoded payload."""

    def normalize(self, payload: Mapping[str, Any]) -> Mapping[str, Any]:
        """Payload as the other hooks read it. Unchanged by default."""
        return payload

    @abstractmethod
    def extract_items(self, payload: Mapping[str, Any]) -> List[Any]:
        """
        Raw items of the page.

        Raises:
            ValueError: If the payload has no item list
        """
        ...

    @abstractmethod
    def next_params(self, payload: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """Query parameters for the next page, or None when this is the last."""
        ...


def _remap_fields(item: Any, remaps: Mapping[str, str]) -> Any:
    if not remaps or not isinstance(item, dict):
        return item
    item = dict(item)
    for source, target in remaps.items():
        if source in item:
            item[target] = item[source]
    return item


@dataclass(frozen=True)
class ContinuationTokenStrategy(PageStrategy):
    """
    Cursor pagination with a continuation token.

    The payload carries items under ``items_field`` and a page block under
    ``page_field`` with ``continuation_token``, ``total_resources_count``
    and ``page_size``. The token is sent back as the ``token_param`` query
    parameter.

    ``id_field_remaps`` copies a server field under another name on each
    item (``{"id": "network_id"}``). ``nested_id_remaps`` does the same on
    the dicts of a nested list (``{"assigned_pools": {"id": "pool_id"}}``).

    With ``stop_on_full_page`` the sequence also ends when the reported
    total equals the page size, even if a token was returned.

    With ``snake_case_keys`` (the default) every key of the payload,
    items included, is converted to snake_case first, so
    ``continuationToken`` and ``totalResourcesCount`` are honoured and
    camelCase item fields reach snake_case models.
    """

    items_field: str = "resources"
    page_field: str = "page"
    token_param: str = "continuation_token"
    id_field_remaps: Mapping[str, str] = field(default_factory=dict)
    nested_id_remaps: Mapping[str, Mapping[str, str]] = field(default_factory=dict)
    stop_on_full_page: bool = True
    snake_case_keys: bool = True

    def normalize(self, payload: Mapping[str, Any]) -> Mapping[str, Any]:
        if not self.snake_case_keys:
            return payload
        return _snake_case_keys(payload)

    def extract_items(self, payload: Mapping[str, Any]) -> List[Any]:
        items = payload.get(self.items_field)
        if not isinstance(items, list):
            raise ValueError(f"Response has no '{self.items_field}' list")
        return [self._remap(item) for item in items]

    def _remap(self, item: Any) -> Any:
        item = _remap_fields(item, self.id_field_remaps)
        if not self.nested_id_remaps or not isinstance(item, dict):
            return item
        item = dict(item)
        for list_field, remaps in self.nested_id_remaps.items():
            nested = item.get(list_field)
            if isinstance(nested, list):
                item[list_field] = [_remap_fields(entry, remaps) for entry in nested]
        return item

    def next_params(self, payload: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        page_info = payload.get(self.page_field)
        if not isinstance(page_info, dict):
            return None
        token = page_info.get(self.token_param)
        if not token:
            return None
        if self.stop_on_full_page and self._is_full_page(page_info):
            return None
        return {self.token_param: token}

    @staticmethod
    def _is_full_page(page_info: Mapping[str, Any]) -> bool:
        total_count = page_info.get("total_resources_count")
        page_size = page_info.get("page_size")
        for value in (total_count, page_size):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return False
        return total_count == page_size


@dataclass(frozen=True)
class NextLinkStrategy(PageStrategy):
    """
    Link pagination.

    Items are read from the first present field of ``items_fields``; the
    next page's query parameters come from the URL under
    ``next_link_field``. The sequence ends when the link is absent.
    """

    items_fields: Tuple[str, ...] = ("value",)
    next_link_field: str = "nextLink"

    def extract_items(self, payload: Mapping[str, Any]) -> List[Any]:
        for items_field in self.items_fields:
            items = payload.get(items_field)
            if isinstance(items, list):
                return items
        raise ValueError(f"Response has none of {', '.join(self.items_fields)}")

    def next_params(self, payload: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        link = payload.get(self.next_link_field)
        if not isinstance(link, str) or not link:
            return None
        query = parse_qs(urlparse(link).query)
        if not query:
            return None
        return {name: values[-1] for name, values in query.items()}
