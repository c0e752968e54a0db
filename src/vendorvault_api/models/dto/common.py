"""Shared DTOs."""

from pydantic import BaseModel


class Pagination(BaseModel):
    """Pagination metadata for list responses."""

    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_previous_page: bool


class MessageResponse(BaseModel):
    """Generic success response."""

    success: bool = True
    message: str
