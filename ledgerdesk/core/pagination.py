"""Pagination helpers shared by list endpoints."""
from __future__ import annotations

import math
from typing import Optional

from pydantic import BaseModel


class PaginationMetadata(BaseModel):
    """Page position and totals for a paginated listing (1-based)."""

    page_number: int
    page_size: int
    total_count: int
    total_pages: int
    has_previous_page: bool
    has_next_page: bool
    first_item: int
    last_item: int


def normalize_page(
    page_number: Optional[int],
    page_size: Optional[int],
    *,
    default_page_size: int,
    max_page_size: int,
) -> tuple[int, int]:
    """Replace missing/invalid values with defaults and clamp the page size."""
    number = page_number if page_number is not None and page_number >= 1 else 1
    size = page_size if page_size is not None and page_size >= 1 else default_page_size
    return number, min(size, max_page_size)


def calculate(page_number: int, page_size: int, total_count: int) -> PaginationMetadata:
    total_pages = math.ceil(total_count / page_size) if total_count > 0 else 0
    first_item = (page_number - 1) * page_size + 1
    if first_item <= total_count:
        last_item = min(page_number * page_size, total_count)
    else:
        # Empty listing or a page past the end.
        first_item = last_item = 0

    return PaginationMetadata(
        page_number=page_number,
        page_size=page_size,
        total_count=total_count,
        total_pages=total_pages,
        has_previous_page=page_number > 1,
        has_next_page=page_number < total_pages,
        first_item=first_item,
        last_item=last_item,
    )
