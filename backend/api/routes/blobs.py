"""Serve stored blobs (uploaded photos and generated illustrations)."""

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import FileResponse

from ..dependencies import BlobStore
from ..services.blob_store import InvalidBlobPathError

router = APIRouter()


@router.get(
    "/{path:path}",
    summary="Get a stored blob",
    responses={
        200: {"content": {"image/png": {}, "image/jpeg": {}}},
        404: {"description": "Blob not found"},
    },
)
async def get_blob(path: str, blob_store: BlobStore):
    """Serve a stored blob by path."""
    try:
        file_path = blob_store.resolve(path)
    except InvalidBlobPathError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Blob not found")

    if not file_path.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Blob not found")

    return FileResponse(file_path)
