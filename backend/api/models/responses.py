"""Pydantic models for API responses."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .enums import IllustrationStatus


class IllustrationResponse(BaseModel):
    """The image recorded for one page."""

    page_number: int
    image_url: str
    prompt: str
    is_placeholder: bool = False


class NarrativePageResponse(BaseModel):
    """One page of a narrative, matched to its illustration by page number."""

    page_number: int
    text: str
    image_url: Optional[str] = None


class NarrativeSummaryResponse(BaseModel):
    """Narrative metadata for list views."""

    id: str
    title: str
    cover_image_url: Optional[str] = None
    illustration_status: IllustrationStatus
    created_at: Optional[datetime] = None


class NarrativeResponse(BaseModel):
    """Full narrative with pages and illustrations."""

    id: str
    title: str
    content: str
    cover_image_url: Optional[str] = None
    customizations: dict[str, str] = Field(default_factory=dict)
    is_fallback: bool = False
    illustration_status: IllustrationStatus
    pages: list[NarrativePageResponse] = Field(default_factory=list)
    illustrations: list[IllustrationResponse] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class NarrativeListResponse(BaseModel):
    """Paginated list of narratives."""

    narratives: list[NarrativeSummaryResponse]
    total: int
    limit: int
    offset: int


class BookResponse(BaseModel):
    """Everything the print and share views need to render a book."""

    id: str
    title: str
    cover_image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    pages: list[NarrativePageResponse]


class CreateNarrativeResponse(BaseModel):
    """Response when a narrative has been written and saved."""

    narrative_id: str
    title: str


class GenerateIllustrationsResponse(BaseModel):
    """Response when illustration generation has been queued."""

    narrative_id: str
    illustration_status: IllustrationStatus
    message: str = Field(
        default="Illustration generation started. Poll GET /narratives/{id} for status."
    )


class UploadResponse(BaseModel):
    """Public URL of an uploaded photo."""

    url: str
