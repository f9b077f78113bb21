"""
Configuration module for the Photo Storybook service.

Re-exports all configuration for convenient access.
"""

from .llm import get_story_api_key, get_story_lm, get_story_model_name, llm_retry
from .story import PAGE_BREAK_MARKER, STORY_CONSTANTS
from .image import (
    CONTENT_MODERATION_MARKER,
    GENERIC_SAFE_PROMPT,
    IMAGE_CONSTANTS,
    PLACEHOLDER_IMAGE_URL,
    get_image_api_base,
    get_image_api_key,
    get_image_generation_payload,
    get_image_model,
    is_image_generation_configured,
)

__all__ = [
    # LLM
    "get_story_api_key",
    "get_story_lm",
    "get_story_model_name",
    "llm_retry",
    # Story
    "PAGE_BREAK_MARKER",
    "STORY_CONSTANTS",
    # Image
    "CONTENT_MODERATION_MARKER",
    "GENERIC_SAFE_PROMPT",
    "IMAGE_CONSTANTS",
    "PLACEHOLDER_IMAGE_URL",
    "get_image_api_base",
    "get_image_api_key",
    "get_image_generation_payload",
    "get_image_model",
    "is_image_generation_configured",
]
