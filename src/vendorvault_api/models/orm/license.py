"""License ORM model."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vendorvault_api.models.orm.base import (
    Base,
    JSONType,
    TimestampMixin,
    UTCDateTime,
    UUIDMixin,
)


class LicenseORM(Base, UUIDMixin, TimestampMixin):
    """License issued to a vendor for one shop."""

    __tablename__ = "licenses"

    license_number: Mapped[str] = mapped_column(String(30), unique=True, nullable=False)
    vendor_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    application_id: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("shop_applications.id", ondelete="SET NULL"), nullable=True
    )
    station_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("stations.id", ondelete="CASCADE"), nullable=False
    )
    shop_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    shop_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    compliance_status: Mapped[str] = mapped_column(String(30), nullable=False)
    license_type: Mapped[str] = mapped_column(String(20), nullable=False)
    monthly_rent: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    security_deposit: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    validity_period_months: Mapped[int] = mapped_column(Integer, default=12, nullable=False)
    renewal_eligible: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    issued_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    expires_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    approved_by: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    approved_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    revocation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    renewed_from_id: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("licenses.id", ondelete="SET NULL"), nullable=True
    )

    # QR verification
    qr_code_data: Mapped[str | None] = mapped_column(Text, nullable=True)
    qr_code_metadata: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)

    # Inspections
    inspection_logs: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONType, default=list, nullable=False
    )
    last_inspection_date: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    expiry_warning_sent_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    station: Mapped["StationORM"] = relationship(lazy="joined")

    __table_args__ = (
        Index("idx_licenses_vendor_status", "vendor_id", "status"),
        Index("idx_licenses_station", "station_id"),
    )


from vendorvault_api.models.orm.station import StationORM  # noqa: E402
