"""Vendor document ORM model."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from vendorvault_api.models.orm.base import Base, TimestampMixin, UTCDateTime, UUIDMixin


class DocumentORM(Base, UUIDMixin, TimestampMixin):
    """Document uploaded by a vendor for verification."""

    __tablename__ = "documents"

    vendor_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    document_type: Mapped[str] = mapped_column(String(30), nullable=False)
    file_url: Mapped[str] = mapped_column(Text, nullable=False)
    file_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    verified_by: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    verified_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    verification_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (Index("idx_documents_vendor_type", "vendor_id", "document_type"),)

    @property
    def verified(self) -> bool:
        """Whether the document passed review."""
        return self.status == "VERIFIED"
