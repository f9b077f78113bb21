"""SQLAlchemy ORM models for PostgreSQL."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base


class NarrativeRecord(Base):
    """Narrative model - a generated story owned by one user."""

    __tablename__ = "narratives"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    cover_image_url: Mapped[Optional[str]] = mapped_column(Text)
    customizations_json: Mapped[Optional[str]] = mapped_column(Text)
    is_fallback: Mapped[bool] = mapped_column(Boolean, default=False)
    illustration_status: Mapped[str] = mapped_column(
        String(30), nullable=False, default="narrative_only"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    illustrations: Mapped[list["NarrativeIllustrationRecord"]] = relationship(
        back_populates="narrative",
        cascade="all, delete-orphan",
        order_by="NarrativeIllustrationRecord.page_number",
    )

    __table_args__ = (
        Index("idx_narratives_owner_id", "owner_id"),
        Index("idx_narratives_created_at", "created_at"),
    )


class NarrativeIllustrationRecord(Base):
    """Illustration model - the image recorded for one page, real or placeholder."""

    __tablename__ = "narrative_illustrations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    narrative_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("narratives.id", ondelete="CASCADE"), nullable=False
    )
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    prompt: Mapped[str] = mapped_column(Text, nullable=False)
    page_number: Mapped[int] = mapped_column(Integer, nullable=False)
    is_placeholder: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationship
    narrative: Mapped["NarrativeRecord"] = relationship(back_populates="illustrations")

    __table_args__ = (
        Index("idx_narrative_illustrations_narrative_id", "narrative_id"),
    )


class UploadedImageRecord(Base):
    """Uploaded photo model - source images for narratives."""

    __tablename__ = "uploaded_images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    original_filename: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        Index("idx_uploaded_images_owner_id", "owner_id"),
    )
