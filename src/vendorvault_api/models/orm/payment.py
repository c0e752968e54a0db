"""Vendor payment and agreement ORM models."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from vendorvault_api.models.orm.base import (
    Base,
    JSONType,
    TimestampMixin,
    UTCDateTime,
    UUIDMixin,
)


class VendorAgreementORM(Base, UUIDMixin, TimestampMixin):
    """Signed rent agreement created when an application is approved."""

    __tablename__ = "vendor_agreements"

    agreement_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    application_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("shop_applications.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    vendor_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    station_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("stations.id", ondelete="CASCADE"), nullable=False
    )
    license_id: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("licenses.id", ondelete="SET NULL"), nullable=True
    )
    license_number: Mapped[str | None] = mapped_column(String(30), nullable=True)
    monthly_rent: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    security_deposit: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    security_deposit_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    duration_months: Mapped[int] = mapped_column(Integer, nullable=False)
    start_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    end_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    terms: Mapped[list[str]] = mapped_column(JSONType, default=list, nullable=False)
    created_by: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    __table_args__ = (Index("idx_agreements_station", "station_id"),)


class VendorPaymentORM(Base, UUIDMixin, TimestampMixin):
    """A due amount owed by a vendor, settled by one or more records."""

    __tablename__ = "vendor_payments"

    vendor_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    station_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("stations.id", ondelete="CASCADE"), nullable=False
    )
    application_id: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("shop_applications.id", ondelete="SET NULL"), nullable=True
    )
    agreement_id: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("vendor_agreements.id", ondelete="SET NULL"), nullable=True
    )
    license_id: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("licenses.id", ondelete="SET NULL"), nullable=True
    )
    payment_type: Mapped[str] = mapped_column(String(30), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    paid_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    due_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    billing_month: Mapped[str | None] = mapped_column(String(7), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    payment_records: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONType, default=list, nullable=False
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    __table_args__ = (
        Index("idx_payments_station_status", "station_id", "status"),
        Index("idx_payments_vendor", "vendor_id"),
    )

    @property
    def balance(self) -> Decimal:
        """Outstanding amount."""
        return Decimal(self.amount) - Decimal(self.paid_amount or 0)
