# Photo Storybook - Core Domain

# Re-export types for convenient access
from .types import (
    AgeGroup,
    Theme,
    StoryLength,
    Tone,
    Customization,
    Narrative,
    Illustration,
    StyleDefinition,
)

__all__ = [
    "AgeGroup",
    "Theme",
    "StoryLength",
    "Tone",
    "Customization",
    "Narrative",
    "Illustration",
    "StyleDefinition",
]
