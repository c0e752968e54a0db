"""Document DTOs."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from vendorvault_api.models.domain.document import DocumentStatus, DocumentType


class DocumentCreate(BaseModel):
    """Register an uploaded document."""

    document_type: DocumentType
    file_url: str = Field(min_length=1, max_length=1000)
    file_name: str | None = Field(default=None, max_length=255)


class DocumentResponse(BaseModel):
    """Document response DTO."""

    id: UUID
    vendor_id: UUID
    document_type: DocumentType
    file_url: str
    file_name: str | None = None
    status: DocumentStatus
    verified: bool
    verified_by: UUID | None = None
    verified_at: datetime | None = None
    verification_notes: str | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        """Pydantic config."""

        from_attributes = True


class DocumentListResponse(BaseModel):
    """Document list."""

    documents: list[DocumentResponse]
    total: int


class DocumentVerifyRequest(BaseModel):
    """Verification decision on a document."""

    verified: bool
    notes: str | None = Field(default=None, max_length=2000)
