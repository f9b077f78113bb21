"""Pydantic models for API requests and responses."""

from .enums import IllustrationStatus
from .requests import CreateNarrativeRequest, CustomizationRequest
from .responses import (
    BookResponse,
    CreateNarrativeResponse,
    GenerateIllustrationsResponse,
    IllustrationResponse,
    NarrativeListResponse,
    NarrativePageResponse,
    NarrativeResponse,
    NarrativeSummaryResponse,
    UploadResponse,
)

__all__ = [
    "IllustrationStatus",
    "CreateNarrativeRequest",
    "CustomizationRequest",
    "BookResponse",
    "CreateNarrativeResponse",
    "GenerateIllustrationsResponse",
    "IllustrationResponse",
    "NarrativeListResponse",
    "NarrativePageResponse",
    "NarrativeResponse",
    "NarrativeSummaryResponse",
    "UploadResponse",
]
