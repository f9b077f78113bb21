"""Services for narrative and illustration generation."""

from .blob_store import LocalBlobStore
from .illustration_generation import generate_illustrations
from .narrative_service import NarrativeService

__all__ = ["LocalBlobStore", "NarrativeService", "generate_illustrations"]
