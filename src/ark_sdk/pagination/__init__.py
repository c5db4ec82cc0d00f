"""
Lazy pagination for ark_sdk.

Exports:
    - list_pages / alist_pages: list a paginated endpoint
    - PageIterator / AsyncPageIterator: cancellable page sequences
    - Page, PaginationOutcome: sequence values and end states
    - PageFilter: common list filters
    - ContinuationTokenStrategy, NextLinkStrategy: pagination styles
"""
from .filters import PageFilter
from .page import Page, PaginationOutcome
from .strategies import ContinuationTokenStrategy, NextLinkStrategy, PageStrategy
from .iterator import AsyncPageIterator, PageDecoder, PageIterator
from .listing import DEFAULT_STRATEGY, alist_pages, list_pages

__all__ = [
    "PageFilter",
    "Page",
    "PaginationOutcome",
    "PageStrategy",
    "ContinuationTokenStrategy",
    "NextLinkStrategy",
    "PageDecoder",
    "PageIterator",
    "AsyncPageIterator",
    "DEFAULT_STRATEGY",
    "list_pages",
    "alist_pages",
]
