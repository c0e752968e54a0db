"""Pagination helpers shared by list endpoints."""

import math

from vendorvault_api.constants.validation import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from vendorvault_api.models.dto.common import Pagination


def clamp_page(page: int | None, limit: int | None) -> tuple[int, int]:
    """Clamp page/limit query values to the allowed range.

    Args:
        page: Requested page (1-indexed)
        limit: Requested page size

    Returns:
        Tuple of (page, limit)
    """
    page = max(1, page or 1)
    limit = limit or DEFAULT_PAGE_SIZE
    limit = max(1, min(limit, MAX_PAGE_SIZE))
    return page, limit


def offset_for(page: int, limit: int) -> int:
    """Row offset for a 1-indexed page."""
    return (page - 1) * limit


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    """Build the pagination block of a list response.

    Args:
        page: Current page
        limit: Items per page
        total: Total number of matching items

    Returns:
        Pagination metadata
    """
    total_pages = math.ceil(total / limit) if total else 0
    return Pagination(
        current_page=page,
        total_pages=total_pages,
        total_items=total,
        items_per_page=limit,
        has_next_page=page < total_pages,
        has_previous_page=page > 1,
    )
