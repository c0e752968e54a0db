"""Vendor profile and verification section ORM models."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from vendorvault_api.models.orm.base import (
    Base,
    JSONType,
    TimestampMixin,
    UTCDateTime,
    UUIDMixin,
)


class VendorORM(Base, UUIDMixin, TimestampMixin):
    """Business profile, one per vendor user."""

    __tablename__ = "vendors"

    user_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    business_name: Mapped[str] = mapped_column(String(255), nullable=False)
    business_type: Mapped[str] = mapped_column(String(30), nullable=False, default="other")
    owner_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    gst_number: Mapped[str | None] = mapped_column(String(15), nullable=True)
    station_code: Mapped[str | None] = mapped_column(String(5), nullable=True)
    station_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    platform_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    shop_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    shop_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    profile_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class VerificationSectionORM(Base, UUIDMixin, TimestampMixin):
    """One submitted verification section (bank, business, ...) of a vendor."""

    __tablename__ = "verification_sections"

    vendor_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    section: Mapped[str] = mapped_column(String(30), nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict, nullable=False)
    verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    verified_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    verified_by: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("vendor_id", "section", name="uq_verification_vendor_section"),
    )
