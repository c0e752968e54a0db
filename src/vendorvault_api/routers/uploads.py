"""File upload router."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import FileResponse

from vendorvault_api.config import get_settings
from vendorvault_api.constants.validation import DEFAULT_UPLOAD_FOLDER, PUBLIC_UPLOAD_FOLDER
from vendorvault_api.models.domain.user import CurrentUser
from vendorvault_api.models.dto.upload import UploadResponse
from vendorvault_api.security.auth import get_current_user
from vendorvault_api.security.rate_limit import (
    API_DEFAULT_LIMIT,
    SENSITIVE_OPERATION_LIMIT,
    limiter,
)
from vendorvault_api.services.storage_service import StorageService, get_storage_service

router = APIRouter()


async def _read_upload(file: UploadFile) -> bytes:
    """Read an upload, stopping one byte past the size limit."""
    return await file.read(get_settings().max_upload_size_bytes + 1)


@router.post("", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(API_DEFAULT_LIMIT)
async def upload_file(
    request: Request,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    storage_service: Annotated[StorageService, Depends(get_storage_service)],
    file: UploadFile = File(...),
    folder: str = Form(default=DEFAULT_UPLOAD_FOLDER),
) -> UploadResponse:
    """Upload a document or photo (JPEG, PNG, WEBP or PDF, max 10 MB)."""
    content = await _read_upload(file)
    return await storage_service.upload(content, file.content_type, file.filename, folder)


@router.post("/public", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(SENSITIVE_OPERATION_LIMIT)
async def upload_public_file(
    request: Request,
    storage_service: Annotated[StorageService, Depends(get_storage_service)],
    file: UploadFile = File(...),
) -> UploadResponse:
    """Upload a document for a station manager application."""
    content = await _read_upload(file)
    return await storage_service.upload(content, file.content_type, file.filename, PUBLIC_UPLOAD_FOLDER)


@router.get("/files/{folder}/{name}")
@limiter.limit(API_DEFAULT_LIMIT)
async def get_file(
    request: Request,
    folder: str,
    name: str,
    storage_service: Annotated[StorageService, Depends(get_storage_service)],
) -> FileResponse:
    """Serve a locally stored upload."""
    path, media_type = storage_service.resolve_local_file(folder, name)
    return FileResponse(path=path, media_type=media_type)
