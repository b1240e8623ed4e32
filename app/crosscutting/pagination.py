"""
===============================================================================
MODULE: Page-number pagination helpers
===============================================================================

Goal
----
Simple, consistent page metadata for listing endpoints:
- 1-indexed page numbers
- offset computation for repositories
- derived has_next / has_prev flags
===============================================================================
"""

from __future__ import annotations

import math

from pydantic import BaseModel, Field


class PageInfo(BaseModel):
    current_page: int = Field(description="Current 1-indexed page")
    total_pages: int = Field(description="Total number of pages")
    total_items: int = Field(description="Total number of matching items")
    has_next: bool = Field(description="There are items after this page")
    has_prev: bool = Field(description="There are items before this page")


def page_offset(page: int, limit: int) -> int:
    """Offset of the first item on `page` (1-indexed)."""
    return (max(1, page) - 1) * max(1, limit)


def build_page_info(*, page: int, limit: int, total: int) -> PageInfo:
    """
    Derive page metadata.

    total_pages is 0 when nothing matches; has_prev only depends on the page
    number, so page 2 of an empty result still reports has_prev=True.
    """
    total = max(0, total)
    total_pages = math.ceil(total / limit) if limit > 0 else 0
    return PageInfo(
        current_page=page,
        total_pages=total_pages,
        total_items=total,
        has_next=page < total_pages,
        has_prev=page > 1,
    )
