"""
Page and outcome types.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Iterator, List, TypeVar

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One batch of items, in server order."""

    items: List[T] = field(default_factory=list)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


class PaginationOutcome(str, Enum):
    """How a page sequence ended."""

    RUNNING = "running"
    EXHAUSTED = "exhausted"
    FAILED = "failed"
    CANCELLED = "cancelled"
