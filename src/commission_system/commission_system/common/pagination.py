from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Optional, Sequence, TypeVar

from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..core.enums import Status

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @classmethod
    def from_args(cls, page: Any, page_size: Any, *, max_page_size: int = MAX_PAGE_SIZE) -> "PageRequest":
        # Bad paging input falls back to defaults instead of failing the request.
        try:
            p = int(page)
        except (TypeError, ValueError):
            p = DEFAULT_PAGE
        try:
            ps = int(page_size)
        except (TypeError, ValueError):
            ps = DEFAULT_PAGE_SIZE
        p = max(p, 1)
        ps = min(max(ps, 1), max_page_size)
        return cls(page=p, page_size=ps)


@dataclass(frozen=True)
class ListFilter:
    """Common listing filters; ``refs`` holds foreign-key equality filters."""

    search: Optional[str] = None
    status: Optional[Status] = None
    refs: dict[str, int] = field(default_factory=dict)
    employee_ids: Optional[frozenset[int]] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


@dataclass(frozen=True)
class Page(Generic[T]):
    items: Sequence[T]
    total: int
    page: int
    page_size: int
