"""Vendor document service."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from vendorvault_api.exceptions import (
    BadRequestError,
    DocumentNotFoundError,
    ForbiddenError,
    ValidationError,
)
from vendorvault_api.models.domain.application import OPEN_APPLICATION_STATUSES
from vendorvault_api.models.domain.document import DocumentStatus
from vendorvault_api.models.domain.license import LicenseStatus
from vendorvault_api.models.domain.notification import NotificationType
from vendorvault_api.models.domain.user import CurrentUser
from vendorvault_api.models.dto.document import (
    DocumentCreate,
    DocumentListResponse,
    DocumentResponse,
    DocumentVerifyRequest,
)
from vendorvault_api.models.orm.document import DocumentORM
from vendorvault_api.repositories.application_repository import ApplicationRepository
from vendorvault_api.repositories.document_repository import DocumentRepository
from vendorvault_api.repositories.license_repository import LicenseRepository
from vendorvault_api.services.application_service import ApplicationService
from vendorvault_api.services.notification_service import NotificationService
from vendorvault_api.utils.dates import utcnow

logger = logging.getLogger(__name__)


class DocumentService:
    """Service for vendor documents and their review."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.repo = DocumentRepository(session)
        self.application_repo = ApplicationRepository(session)
        self.license_repo = LicenseRepository(session)
        self.application_service = ApplicationService(session)
        self.notification_service = NotificationService(session)

    def _list(self, documents: list[DocumentORM]) -> DocumentListResponse:
        return DocumentListResponse(
            documents=[DocumentResponse.model_validate(d) for d in documents],
            total=len(documents),
        )

    # =========================================================================
    # Vendor side
    # =========================================================================

    async def list_documents(self, vendor_id: UUID) -> DocumentListResponse:
        """List the vendor's documents."""
        return self._list(await self.repo.list_for_vendor(vendor_id))

    async def upload_document(self, vendor_id: UUID, data: DocumentCreate) -> tuple[DocumentResponse, bool]:
        """Register an uploaded document.

        Uploading a type the vendor already has replaces the file and sends
        the document back to review.

        Returns:
            Tuple of (document, created flag)
        """
        existing = await self.repo.get_by_type(vendor_id, data.document_type.value)
        if existing is not None:
            document = await self.repo.update(
                existing,
                file_url=data.file_url,
                file_name=data.file_name,
                status=DocumentStatus.PENDING.value,
                verified_by=None,
                verified_at=None,
                verification_notes=None,
            )
            logger.info(f"Vendor {vendor_id} replaced {data.document_type.value} document")
            return DocumentResponse.model_validate(document), False

        document = await self.repo.create(
            vendor_id=vendor_id,
            document_type=data.document_type.value,
            file_url=data.file_url,
            file_name=data.file_name,
            status=DocumentStatus.PENDING.value,
        )
        logger.info(f"Vendor {vendor_id} uploaded {data.document_type.value} document")
        return DocumentResponse.model_validate(document), True

    async def get_document(self, document_id: UUID, vendor_id: UUID) -> DocumentResponse:
        """Get one of the vendor's documents."""
        document = await self.repo.get_for_vendor(document_id, vendor_id)
        if document is None:
            raise DocumentNotFoundError(str(document_id))
        return DocumentResponse.model_validate(document)

    async def delete_document(self, document_id: UUID, vendor_id: UUID) -> None:
        """Delete an unverified document.

        Raises:
            DocumentNotFoundError: If the document is not the vendor's
            BadRequestError: If the document is already verified
        """
        document = await self.repo.get_for_vendor(document_id, vendor_id)
        if document is None:
            raise DocumentNotFoundError(str(document_id))
        if document.verified:
            raise BadRequestError("Verified documents cannot be deleted")
        await self.repo.delete(document.id)

    # =========================================================================
    # Review
    # =========================================================================

    async def list_station_documents(
        self,
        station_id: UUID,
        vendor_id: UUID | None = None,
        status: str | None = None,
    ) -> DocumentListResponse:
        """List documents of vendors who applied to the station."""
        if status:
            try:
                status = DocumentStatus(status.upper()).value
            except ValueError as e:
                raise ValidationError("Invalid document status", field="status") from e
        vendor_ids = await self.application_repo.vendor_ids_for_station(station_id)
        if vendor_id is not None:
            vendor_ids = [v for v in vendor_ids if v == vendor_id]
        return self._list(await self.repo.list_for_vendors(vendor_ids, status))

    async def verify_document(
        self,
        document_id: UUID,
        data: DocumentVerifyRequest,
        reviewer: CurrentUser,
        station_id: UUID | None = None,
    ) -> DocumentResponse:
        """Verify or reject a vendor document.

        A rejection also rejects the vendor's open applications (at the
        station when one is given) and their pending licenses.

        Args:
            document_id: Document UUID
            data: Verification decision
            reviewer: Station manager or admin
            station_id: When set, the vendor must have applied to this station

        Raises:
            DocumentNotFoundError: If the document does not exist
            ForbiddenError: If the vendor never applied to the station
        """
        document = await self.repo.get_by_id(document_id)
        if document is None:
            raise DocumentNotFoundError(str(document_id))
        if station_id is not None and not await self.application_repo.vendor_applied_to_station(
            document.vendor_id, station_id
        ):
            raise ForbiddenError("Vendor has not applied to your station")

        status = DocumentStatus.VERIFIED if data.verified else DocumentStatus.REJECTED
        document = await self.repo.update(
            document,
            status=status.value,
            verified_by=reviewer.id,
            verified_at=utcnow(),
            verification_notes=data.notes,
        )
        label = document.document_type.replace("_", " ").title()

        if data.verified:
            await self.notification_service.notify(
                document.vendor_id,
                NotificationType.DOCUMENT_VERIFIED,
                "Document Verified",
                f"Your {label} document has been verified.",
                action_url="/vendor/documents",
                metadata={"document_id": str(document.id), "document_type": document.document_type},
            )
        else:
            reason = f" Reason: {data.notes}" if data.notes else ""
            await self.notification_service.notify(
                document.vendor_id,
                NotificationType.DOCUMENT_REJECTED,
                "Document Rejected",
                f"Your {label} document was rejected.{reason} Please upload it again.",
                action_url="/vendor/documents",
                metadata={"document_id": str(document.id), "document_type": document.document_type},
            )
            await self._cascade_rejection(document, reviewer, station_id)

        logger.info(f"Document {document.id} {status.value.lower()} by {reviewer.id}")
        return DocumentResponse.model_validate(document)

    async def _cascade_rejection(
        self,
        document: DocumentORM,
        reviewer: CurrentUser,
        station_id: UUID | None,
    ) -> None:
        reason = f"Document rejected: {document.document_type}"
        open_statuses = [s.value for s in OPEN_APPLICATION_STATUSES]
        if station_id is not None:
            applications = await self.application_repo.list_for_vendor_at_station(
                document.vendor_id, station_id, open_statuses
            )
        else:
            applications = [
                a
                for a in await self.application_repo.list_for_vendor(document.vendor_id)
                if a.status in OPEN_APPLICATION_STATUSES
            ]
        for application in applications:
            await self.application_service.reject_application(application, reason, reviewer.id)

        pending = await self.license_repo.list_pending_for_vendor(document.vendor_id)
        for license_orm in pending:
            license_orm.status = LicenseStatus.REJECTED.value
            license_orm.revocation_reason = reason
        await self.session.flush()

        if applications or pending:
            logger.info(
                f"Document rejection closed {len(applications)} applications and "
                f"{len(pending)} pending licenses of vendor {document.vendor_id}"
            )
