"""Photo upload endpoint."""

import re

from fastapi import APIRouter, HTTPException, UploadFile, status

from ..config import MAX_UPLOAD_BYTES
from ..dependencies import BlobStore, CurrentUser, UploadRepo
from ..models.responses import UploadResponse

router = APIRouter()

_UNSAFE_PATH_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def _safe_segment(value: str) -> str:
    """Reduce a user-supplied value to a single safe path segment."""
    return _UNSAFE_PATH_CHARS.sub("_", value).strip(".") or "photo"


@router.post(
    "",
    response_model=UploadResponse,
    summary="Upload a photo",
    description="Store a photo (image/*, at most 10 MB) and return its public URL for use in POST /narratives.",
)
async def upload_photo(file: UploadFile, repo: UploadRepo, blob_store: BlobStore, user: CurrentUser):
    """Store an uploaded photo."""
    if not file.content_type or not file.content_type.startswith("image/"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File must be an image",
        )

    # Read one byte past the limit to detect oversize files without loading them fully
    data = await file.read(MAX_UPLOAD_BYTES + 1)
    if len(data) > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File size must be less than 10MB",
        )

    url = await blob_store.put(
        f"uploads/{_safe_segment(user)}/{_safe_segment(file.filename or 'photo')}",
        data,
        content_type=file.content_type,
        add_random_suffix=True,
    )
    await repo.record_upload(user, url, original_filename=file.filename)

    return UploadResponse(url=url)
