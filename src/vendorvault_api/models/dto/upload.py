"""Upload DTOs."""

from pydantic import BaseModel


class UploadResponse(BaseModel):
    """Stored file location."""

    url: str
    public_id: str
    file_name: str
    size: int
