"""Narrative endpoints: create from photos, read, share, illustrate, delete."""

import shutil

from fastapi import APIRouter, HTTPException, Query, status

from ..config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..dependencies import BlobStore, CurrentUser, Repository, Service
from ..models.requests import CreateNarrativeRequest
from ..models.responses import (
    BookResponse,
    CreateNarrativeResponse,
    GenerateIllustrationsResponse,
    NarrativeListResponse,
    NarrativeResponse,
)
from ..services.narrative_service import (
    IllustrationsAlreadyExistError,
    ImageGenerationUnavailableError,
)

router = APIRouter()


def _not_found(narrative_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Narrative {narrative_id} not found",
    )


@router.post(
    "",
    response_model=CreateNarrativeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a narrative from photos",
    description="Write a story from the uploaded photos and save it. Illustrations are generated in the background when an image provider is configured.",
)
async def create_narrative(request: CreateNarrativeRequest, service: Service, user: CurrentUser):
    """Write and save a narrative."""
    customizations = request.customizations.to_customization() if request.customizations else None
    result = await service.create_narrative(
        owner_id=user,
        image_urls=request.images,
        customizations=customizations,
    )
    return CreateNarrativeResponse(**result)


@router.get(
    "",
    response_model=NarrativeListResponse,
    summary="List narratives",
    description="Get the caller's narratives, newest first.",
)
async def list_narratives(
    repo: Repository,
    user: CurrentUser,
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Maximum number of narratives to return"),
    offset: int = Query(default=0, ge=0, description="Number of narratives to skip"),
):
    """List the caller's narratives with pagination."""
    narratives, total = await repo.list_narratives(user, limit=limit, offset=offset)

    return NarrativeListResponse(
        narratives=narratives,
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/{narrative_id}",
    response_model=NarrativeResponse,
    summary="Get a narrative",
    description="Get a narrative with its pages, illustrations and illustration status. Poll this endpoint while illustrations are in flight.",
)
async def get_narrative(narrative_id: str, repo: Repository, user: CurrentUser):
    """Get a narrative by ID."""
    narrative = await repo.get_narrative(narrative_id, user)

    if not narrative:
        raise _not_found(narrative_id)

    return narrative


@router.get(
    "/{narrative_id}/book",
    response_model=BookResponse,
    summary="Get a narrative as a book",
    description="Title, cover, date and illustrated pages for the print and share views. Anyone can read any narrative by ID (share link), whether or not a token is sent.",
)
async def get_book(narrative_id: str, repo: Repository):
    """Get the print/share data for a narrative."""
    book = await repo.get_book(narrative_id)

    if not book:
        raise _not_found(narrative_id)

    return book


@router.post(
    "/{narrative_id}/illustrations",
    response_model=GenerateIllustrationsResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Generate illustrations",
    description="Queue illustration generation for a narrative that has none yet.",
    responses={
        404: {"description": "Narrative not found"},
        409: {"description": "Illustrations already exist or are in flight"},
        503: {"description": "Image generation not configured"},
    },
)
async def generate_illustrations(narrative_id: str, service: Service, user: CurrentUser):
    """Queue illustration generation."""
    try:
        illustration_status = await service.request_illustrations(narrative_id, user)
    except IllustrationsAlreadyExistError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ImageGenerationUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Image generation is not configured",
        )

    if illustration_status is None:
        raise _not_found(narrative_id)

    return GenerateIllustrationsResponse(
        narrative_id=narrative_id,
        illustration_status=illustration_status,
    )


@router.delete(
    "/{narrative_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a narrative",
    description="Delete a narrative, its illustrations and its generated images.",
)
async def delete_narrative(narrative_id: str, repo: Repository, blob_store: BlobStore, user: CurrentUser):
    """Delete a narrative and its generated images."""
    deleted = await repo.delete_narrative(narrative_id, user)

    if not deleted:
        raise _not_found(narrative_id)

    # Delete generated images
    images_dir = blob_store.resolve(f"story-images/{narrative_id}")
    if images_dir.exists():
        shutil.rmtree(images_dir)
