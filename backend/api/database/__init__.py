"""Database module for narrative persistence."""

from .db import Base, close_pool, create_pool, get_database_dsn, get_pool, init_db
from .models import NarrativeIllustrationRecord, NarrativeRecord, UploadedImageRecord
from .repository import IllustrationRepository, NarrativeRepository, UploadRepository

__all__ = [
    # Connection management
    "init_db",
    "create_pool",
    "get_pool",
    "close_pool",
    "get_database_dsn",
    "Base",
    # Models
    "NarrativeRecord",
    "NarrativeIllustrationRecord",
    "UploadedImageRecord",
    # Repositories
    "NarrativeRepository",
    "IllustrationRepository",
    "UploadRepository",
]
