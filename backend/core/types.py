"""
Centralized domain types for the Photo Storybook service.

All dataclasses that are used across multiple modules are defined here
to make data flow explicit and avoid circular imports.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


# =============================================================================
# Customization Types
# =============================================================================


class AgeGroup(str, Enum):
    """Reader age band the story is written for."""

    TODDLERS = "toddlers (2-4)"
    PRESCHOOL = "preschool (4-6)"
    EARLY_READERS = "early readers (6-8)"
    YOUNG_READERS = "young readers (8-12)"
    ALL_AGES = "all ages"


class Theme(str, Enum):
    """Main theme of the story."""

    FRIENDSHIP = "friendship"
    ADVENTURE = "adventure"
    FAMILY = "family"
    NATURE = "nature"
    MAGIC = "magic"
    LEARNING = "learning"
    KINDNESS = "kindness"
    COURAGE = "courage"


class StoryLength(str, Enum):
    """Requested story length."""

    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class Tone(str, Enum):
    """Narrative tone."""

    PLAYFUL = "playful"
    GENTLE = "gentle"
    EXCITING = "exciting"
    EDUCATIONAL = "educational"


DEFAULT_AGE_GROUP = AgeGroup.ALL_AGES
DEFAULT_THEME = Theme.ADVENTURE
DEFAULT_LENGTH = StoryLength.MEDIUM
DEFAULT_TONE = Tone.PLAYFUL

@dataclass(frozen=True)
class Customization:
    """Caller-supplied story choices. Every field is optional."""

    age_group: Optional[AgeGroup] = None
    theme: Optional[Theme] = None
    length: Optional[StoryLength] = None
    tone: Optional[Tone] = None

    @property
    def resolved_age_group(self) -> AgeGroup:
        return self.age_group or DEFAULT_AGE_GROUP

    @property
    def resolved_theme(self) -> Theme:
        return self.theme or DEFAULT_THEME

    @property
    def resolved_length(self) -> StoryLength:
        return self.length or DEFAULT_LENGTH

    @property
    def resolved_tone(self) -> Tone:
        return self.tone or DEFAULT_TONE

    def to_dict(self) -> dict[str, str]:
        """Serialize the fields that were explicitly set, using wire keys."""
        result = {}
        if self.age_group:
            result["ageGroup"] = self.age_group.value
        if self.theme:
            result["theme"] = self.theme.value
        if self.length:
            result["length"] = self.length.value
        if self.tone:
            result["tone"] = self.tone.value
        return result


# =============================================================================
# Story Types
# =============================================================================


@dataclass(frozen=True)
class Narrative:
    """A titled story whose body holds marker-delimited page segments."""

    title: str
    body: str
    is_fallback: bool = False


@dataclass(frozen=True)
class StyleDefinition:
    """One entry of the illustration style palette."""

    name: str
    label: str  # Medium, palette and lighting
    composition: str  # Framing and camera direction


@dataclass(frozen=True)
class Illustration:
    """The image recorded for one page, real or placeholder."""

    page_number: int
    image_url: str
    prompt: str
    is_placeholder: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "page_number": self.page_number,
            "image_url": self.image_url,
            "prompt": self.prompt,
            "is_placeholder": self.is_placeholder,
        }
