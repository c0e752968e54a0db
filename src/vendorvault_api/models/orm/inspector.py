"""Inspector ORM model."""

from uuid import UUID

from sqlalchemy import ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vendorvault_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class InspectorORM(Base, UUIDMixin, TimestampMixin):
    """Inspector assignment of an INSPECTOR user to a station."""

    __tablename__ = "inspectors"

    user_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    station_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("stations.id", ondelete="CASCADE"), nullable=False
    )
    employee_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    designation: Mapped[str | None] = mapped_column(String(100), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    total_inspections: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_by: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    user: Mapped["UserORM"] = relationship(lazy="joined", foreign_keys=[user_id])


from vendorvault_api.models.orm.user import UserORM  # noqa: E402
