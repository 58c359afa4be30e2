"""
Page/offset helpers shared by list endpoints.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class Page:
    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def make_page(page: int | None, page_size: int | None, *, default_size: int = DEFAULT_PAGE_SIZE) -> Page:
    """
    Missing values take the defaults; a given page size is clamped to [1, MAX_PAGE_SIZE].
    """
    p = page if page and page > 0 else 1
    size = default_size if page_size is None else page_size
    return Page(page=p, page_size=max(1, min(size, MAX_PAGE_SIZE)))


def total_pages(total: int, page_size: int) -> int:
    if page_size <= 0:
        return 0
    return math.ceil(max(total, 0) / page_size)


def page_info(page: Page, total: int) -> dict:
    pages = total_pages(total, page.page_size)
    return {
        "page": page.page,
        "pageSize": page.page_size,
        "totalItems": total,
        "totalPages": pages,
        "hasNextPage": page.page < pages,
        "hasPreviousPage": page.page > 1,
    }
