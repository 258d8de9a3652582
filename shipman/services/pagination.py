"""
Page/limit pagination for QC listings.
"""

from dataclasses import dataclass
from math import ceil
from typing import Any

from shipman.conf import shipman_settings


@dataclass(frozen=True)
class Page:
    """One page of results plus totals."""

    items: list[Any]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return ceil(self.total / self.limit) if self.limit else 0

    def as_dict(self) -> dict[str, int]:
        return {
            'page': self.page,
            'limit': self.limit,
            'total': self.total,
            'total_pages': self.total_pages,
        }


def clamp(page, limit) -> tuple[int, int]:
    """Normalize page (>=1) and limit (1..MAX_PAGE_SIZE)."""
    try:
        page = max(1, int(page or 1))
    except (TypeError, ValueError):
        page = 1
    try:
        limit = int(limit or shipman_settings.DEFAULT_PAGE_SIZE)
    except (TypeError, ValueError):
        limit = shipman_settings.DEFAULT_PAGE_SIZE
    limit = min(max(1, limit), shipman_settings.MAX_PAGE_SIZE)
    return page, limit


def paginate(queryset, page=1, limit=None) -> Page:
    """Slice an ordered queryset into a Page."""
    page, limit = clamp(page, limit)
    total = queryset.count()
    offset = (page - 1) * limit
    return Page(
        items=list(queryset[offset:offset + limit]),
        page=page,
        limit=limit,
        total=total,
    )
