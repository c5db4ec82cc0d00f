"""
Common list filters.
"""
from dataclasses import dataclass
from typing import Dict, Optional, Union

FILTER_PARAM_NAMES = {
    "projection": "projection",
    "filter": "filter",
    "order": "order",
    "page_size": "pageSize",
    "sort": "sort",
}


@dataclass
class PageFilter:
    """Filter, ordering and page size of a list call."""

    projection: Optional[str] = None
    filter: Optional[str] = None
    order: Optional[str] = None
    page_size: Optional[int] = None
    sort: Optional[str] = None

    def to_params(self) -> Dict[str, Union[str, int]]:
        """Query parameters for the set fields; empty and zero values are omitted."""
        params: Dict[str, Union[str, int]] = {}
        for field_name, param_name in FILTER_PARAM_NAMES.items():
            value = getattr(self, field_name)
            if value:
                params[param_name] = value
        return params
