"""Shop application ORM model."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import ForeignKey, Index, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vendorvault_api.models.orm.base import (
    Base,
    JSONType,
    TimestampMixin,
    UTCDateTime,
    UUIDMixin,
)


class ShopApplicationORM(Base, UUIDMixin, TimestampMixin):
    """A vendor's request for a shop slot at a station."""

    __tablename__ = "shop_applications"

    vendor_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    station_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("stations.id", ondelete="CASCADE"), nullable=False
    )
    shop_id: Mapped[str] = mapped_column(String(100), nullable=False)
    shop_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    platform_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    quoted_rent: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    security_deposit: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    proposed_start_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    proposed_end_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    risk_level: Mapped[str | None] = mapped_column(String(10), nullable=True)
    status_history: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONType, default=list, nullable=False
    )

    submitted_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    approved_by: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    rejected_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    rejected_by: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Outcome of negotiation and approval
    final_agreed_rent: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    final_security_deposit: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    license_number: Mapped[str | None] = mapped_column(String(30), nullable=True)
    license_issued_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    license_expires_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    station: Mapped["StationORM"] = relationship(lazy="joined")

    __table_args__ = (
        Index("idx_applications_vendor_shop", "vendor_id", "shop_id"),
        Index("idx_applications_station_status", "station_id", "status"),
    )


from vendorvault_api.models.orm.station import StationORM  # noqa: E402
