"""File storage service for uploaded documents and photos."""

import hashlib
import logging
import time
import uuid
from pathlib import Path
from typing import ClassVar

import httpx

from vendorvault_api.config import get_settings
from vendorvault_api.constants.validation import (
    ALLOWED_UPLOAD_CONTENT_TYPES,
    ALLOWED_UPLOAD_FOLDERS,
)
from vendorvault_api.exceptions import BadRequestError, NotFoundError, ValidationError
from vendorvault_api.models.dto.upload import UploadResponse

logger = logging.getLogger(__name__)

CLOUDINARY_API_BASE = "https://api.cloudinary.com/v1_1"
CLOUDINARY_TIMEOUT = 30.0

EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "application/pdf": ".pdf",
}

MIME_TYPES = {
    ".pdf": "application/pdf",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".webp": "image/webp",
}

# Magic bytes for file type validation
FILE_SIGNATURES = {
    ".pdf": [b"%PDF"],
    ".png": [b"\x89PNG\r\n\x1a\n"],
    ".jpg": [b"\xff\xd8\xff"],
    ".webp": [b"RIFF"],
}


class StorageService:
    """Store uploads on Cloudinary when configured, otherwise on local disk."""

    # Shared HTTP client for connection reuse (class-level)
    _http_client: ClassVar[httpx.AsyncClient | None] = None

    def __init__(self) -> None:
        """Initialize service from settings."""
        self.settings = get_settings()
        self.base_dir = Path(self.settings.upload_dir)

    @classmethod
    def _get_http_client(cls) -> httpx.AsyncClient:
        """Get or create shared HTTP client."""
        if cls._http_client is None or cls._http_client.is_closed:
            cls._http_client = httpx.AsyncClient(timeout=httpx.Timeout(CLOUDINARY_TIMEOUT))
        return cls._http_client

    @classmethod
    async def close_client(cls) -> None:
        """Close the shared HTTP client. Call on application shutdown."""
        if cls._http_client and not cls._http_client.is_closed:
            await cls._http_client.aclose()
            cls._http_client = None

    @staticmethod
    def validate_file_signature(content: bytes, extension: str) -> bool:
        """Validate file content matches expected signature for extension."""
        signatures = FILE_SIGNATURES.get(extension.lower())
        if not signatures:
            return False

        if extension == ".webp":
            return content.startswith(b"RIFF") and len(content) > 12 and content[8:12] == b"WEBP"

        return any(content.startswith(sig) for sig in signatures)

    @staticmethod
    def validate_file_path(file_path: Path, base_dir: Path) -> bool:
        """Validate that file path is within base directory."""
        try:
            return file_path.resolve().is_relative_to(base_dir.resolve())
        except (ValueError, RuntimeError):
            return False

    def validate_upload(self, content: bytes, content_type: str | None) -> str:
        """Check size, declared type and magic bytes of an upload.

        Args:
            content: Raw file bytes
            content_type: Declared MIME type

        Returns:
            File extension to store the file under

        Raises:
            ValidationError: If the file is empty, too large or of a disallowed type
        """
        if not content:
            raise ValidationError("No file uploaded", field="file")
        if len(content) > self.settings.max_upload_size_bytes:
            raise ValidationError(
                f"File too large. Maximum size is {self.settings.max_upload_size_mb}MB",
                field="file",
            )

        content_type = (content_type or "").lower()
        if content_type not in ALLOWED_UPLOAD_CONTENT_TYPES:
            raise ValidationError(
                "Invalid file type. Only JPEG, PNG, WEBP and PDF files are allowed",
                field="file",
            )

        extension = EXTENSIONS[content_type]
        if not self.validate_file_signature(content, extension):
            raise ValidationError("File content does not match its type", field="file")
        return extension

    async def upload(
        self,
        content: bytes,
        content_type: str | None,
        file_name: str | None,
        folder: str,
    ) -> UploadResponse:
        """Validate and store an upload.

        Args:
            content: Raw file bytes
            content_type: Declared MIME type
            file_name: Original file name
            folder: Target folder

        Returns:
            UploadResponse with the public URL
        """
        if folder not in ALLOWED_UPLOAD_FOLDERS:
            raise ValidationError("Invalid upload folder", field="folder")

        extension = self.validate_upload(content, content_type)
        stored_name = f"{uuid.uuid4().hex}{extension}"
        original_name = Path(file_name).name if file_name else stored_name

        if self.settings.cloudinary_enabled:
            url, public_id = await self._upload_cloudinary(content, stored_name, folder)
        else:
            url, public_id = self._store_local(content, stored_name, folder)

        logger.info(f"Stored upload {public_id} ({len(content)} bytes)")
        return UploadResponse(url=url, public_id=public_id, file_name=original_name, size=len(content))

    def _store_local(self, content: bytes, stored_name: str, folder: str) -> tuple[str, str]:
        target_dir = self.base_dir / folder
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / stored_name
        if not self.validate_file_path(target, self.base_dir):
            raise ValidationError("Invalid file path")
        target.write_bytes(content)
        return f"/api/v1/upload/files/{folder}/{stored_name}", f"{folder}/{stored_name}"

    async def _upload_cloudinary(self, content: bytes, stored_name: str, folder: str) -> tuple[str, str]:
        """Upload with a signed request to the Cloudinary upload API."""
        settings = self.settings
        timestamp = str(int(time.time()))
        public_id = Path(stored_name).stem
        # Cloudinary signs the alphabetically sorted parameters followed by the secret
        to_sign = f"folder=vendorvault/{folder}&public_id={public_id}&timestamp={timestamp}"
        signature = hashlib.sha1(f"{to_sign}{settings.cloudinary_api_secret}".encode()).hexdigest()

        client = self._get_http_client()
        try:
            response = await client.post(
                f"{CLOUDINARY_API_BASE}/{settings.cloudinary_cloud_name}/auto/upload",
                data={
                    "api_key": settings.cloudinary_api_key,
                    "timestamp": timestamp,
                    "folder": f"vendorvault/{folder}",
                    "public_id": public_id,
                    "signature": signature,
                },
                files={"file": (stored_name, content)},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Cloudinary upload failed: {e}")
            raise BadRequestError("Upload failed") from e

        data = response.json()
        return data["secure_url"], data["public_id"]

    def resolve_local_file(self, folder: str, name: str) -> tuple[Path, str]:
        """Resolve a locally stored file for download.

        Args:
            folder: Upload folder
            name: Stored file name

        Returns:
            Tuple of (path, media type)

        Raises:
            NotFoundError: If the file does not exist or the path escapes the upload dir
        """
        if folder not in ALLOWED_UPLOAD_FOLDERS or "/" in name or "\\" in name or name.startswith("."):
            raise NotFoundError("File not found")

        path = self.base_dir / folder / name
        if not self.validate_file_path(path, self.base_dir) or not path.is_file():
            raise NotFoundError("File not found")

        media_type = MIME_TYPES.get(path.suffix.lower(), "application/octet-stream")
        return path, media_type


def get_storage_service() -> StorageService:
    """Get StorageService instance."""
    return StorageService()
