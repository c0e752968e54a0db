"""Document repository."""

from uuid import UUID

from sqlalchemy import select

from vendorvault_api.models.orm.document import DocumentORM
from vendorvault_api.repositories.base import BaseRepository


class DocumentRepository(BaseRepository[DocumentORM]):
    """Repository for vendor documents."""

    model = DocumentORM

    async def list_for_vendor(self, vendor_id: UUID) -> list[DocumentORM]:
        """List a vendor's documents, newest first."""
        result = await self.session.execute(
            select(DocumentORM)
            .where(DocumentORM.vendor_id == vendor_id)
            .order_by(DocumentORM.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_for_vendors(
        self,
        vendor_ids: list[UUID],
        status: str | None = None,
    ) -> list[DocumentORM]:
        """List documents of several vendors, newest first."""
        if not vendor_ids:
            return []
        query = select(DocumentORM).where(DocumentORM.vendor_id.in_(vendor_ids))
        if status:
            query = query.where(DocumentORM.status == status)
        result = await self.session.execute(query.order_by(DocumentORM.created_at.desc()))
        return list(result.scalars().all())

    async def get_for_vendor(self, document_id: UUID, vendor_id: UUID) -> DocumentORM | None:
        """Get a document only if it belongs to the vendor."""
        result = await self.session.execute(
            select(DocumentORM).where(
                DocumentORM.id == document_id,
                DocumentORM.vendor_id == vendor_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_by_type(self, vendor_id: UUID, document_type: str) -> DocumentORM | None:
        """Get the latest document of a type for a vendor."""
        result = await self.session.execute(
            select(DocumentORM)
            .where(
                DocumentORM.vendor_id == vendor_id,
                DocumentORM.document_type == document_type,
            )
            .order_by(DocumentORM.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()
