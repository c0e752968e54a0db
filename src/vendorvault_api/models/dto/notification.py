"""Notification DTOs."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class NotificationResponse(BaseModel):
    """In-app notification."""

    id: UUID
    type: str
    title: str
    message: str
    read: bool
    action_url: str | None = None
    metadata: dict[str, Any] | None = Field(default=None, validation_alias="extra_data")
    created_at: datetime

    class Config:
        """Pydantic config."""

        from_attributes = True


class NotificationListResponse(BaseModel):
    """Notifications of the current user."""

    notifications: list[NotificationResponse]
    unread_count: int


class ReadAllResponse(BaseModel):
    """Result of marking every notification read."""

    success: bool = True
    updated: int
