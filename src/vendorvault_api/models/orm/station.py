"""Station and station layout ORM models."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from vendorvault_api.models.orm.base import (
    Base,
    JSONType,
    TimestampMixin,
    UTCDateTime,
    UUIDMixin,
)


class StationORM(Base, UUIDMixin, TimestampMixin):
    """Railway station managed by one station manager."""

    __tablename__ = "stations"

    station_name: Mapped[str] = mapped_column(String(255), nullable=False)
    station_code: Mapped[str] = mapped_column(String(5), unique=True, nullable=False)
    railway_zone: Mapped[str] = mapped_column(String(100), nullable=False)
    division: Mapped[str | None] = mapped_column(String(100), nullable=True)
    station_category: Mapped[str] = mapped_column(String(10), nullable=False)
    platforms_count: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    daily_footfall_avg: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    station_manager_id: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    operational_status: Mapped[str] = mapped_column(String(30), nullable=False)
    approval_status: Mapped[str] = mapped_column(String(20), nullable=False)
    layout_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    approved_by: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    approved_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    __table_args__ = (
        Index("idx_stations_manager", "station_manager_id"),
        Index("idx_stations_approval", "approval_status", "operational_status"),
    )


class StationLayoutORM(Base, UUIDMixin, TimestampMixin):
    """Platform and shop layout of a station, one per station."""

    __tablename__ = "station_layouts"

    station_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("stations.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    platforms: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, default=list, nullable=False)
    infrastructure_blocks: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONType, default=list, nullable=False
    )
    canvas_settings: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict, nullable=False)
    pricing: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict, nullable=False)
    is_locked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    version: Mapped[str] = mapped_column(String(20), default="1.0.0", nullable=False)
    created_by: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
