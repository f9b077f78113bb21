"""Pydantic models for API requests."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from backend.core.types import AgeGroup, Customization, StoryLength, Theme, Tone


class CustomizationRequest(BaseModel):
    """Optional story choices. Accepts camelCase (ageGroup) or snake_case keys."""

    model_config = ConfigDict(populate_by_name=True)

    age_group: Optional[AgeGroup] = Field(default=None, alias="ageGroup")
    theme: Optional[Theme] = None
    length: Optional[StoryLength] = None
    tone: Optional[Tone] = None

    def to_customization(self) -> Customization:
        return Customization(
            age_group=self.age_group,
            theme=self.theme,
            length=self.length,
            tone=self.tone,
        )


class CreateNarrativeRequest(BaseModel):
    """Request body for creating a narrative from uploaded photos."""

    images: list[str] = Field(
        ...,
        min_length=1,
        description="Photo URLs in story order; the first becomes the cover",
        examples=[["http://localhost:8000/blobs/uploads/beach-3f2a9c1d.jpg"]],
    )
    customizations: Optional[CustomizationRequest] = None
