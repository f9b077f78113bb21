"""
Image generation configuration for the Photo Storybook service.

Illustrations are generated with Leonardo AI (Flux Precision model) through
its asynchronous REST API: submit a generation job, then poll its status.
"""

import os
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Image generation constants
IMAGE_CONSTANTS = {
    "api_base": "https://cloud.leonardo.ai/api/rest/v1",
    "model_id": "b2614463-296c-462a-9586-aafdb8f00e36",  # Flux Precision (Dev)
    "num_images": 1,
    "width": 1024,
    "height": 1024,
    "contrast": 3.5,  # Recommended value for Flux
    "enhance_prompt": True,
    "poll_interval_seconds": 10.0,
    "max_poll_attempts": 30,  # 5 minutes at 10 second intervals
    "poll_deadline_seconds": 300.0,
    "request_timeout_seconds": 60.0,
}

# Static image served by the frontend whenever a page cannot be illustrated
PLACEHOLDER_IMAGE_URL = "/whimsical-forest-tale.png"

# Substring Leonardo puts in the error body when its own moderation rejects a prompt
CONTENT_MODERATION_MARKER = "content moderated"

# Used once when the provider rejects a page prompt as unsafe
GENERIC_SAFE_PROMPT = (
    "Children's book illustration, watercolor style, gentle colors, whimsical forest scene "
    "with friendly animals, magical atmosphere, soft lighting, family-friendly, cozy and warm feeling"
)


def get_image_api_key() -> Optional[str]:
    """Return the Leonardo API key, or None when it is not configured."""
    return os.getenv("LEONARDO_API_KEY") or None


def is_image_generation_configured() -> bool:
    """Whether illustrations can be generated at all."""
    return get_image_api_key() is not None


def get_image_model() -> str:
    """Get the image model ID."""
    return os.getenv("LEONARDO_MODEL_ID") or IMAGE_CONSTANTS["model_id"]


def get_image_api_base() -> str:
    """Get the base URL of the image generation REST API."""
    return os.getenv("LEONARDO_API_BASE") or IMAGE_CONSTANTS["api_base"]


def get_image_generation_payload(prompt: str) -> dict:
    """Build the job submission body for a single square illustration."""
    return {
        "modelId": get_image_model(),
        "prompt": prompt,
        "num_images": IMAGE_CONSTANTS["num_images"],
        "contrast": IMAGE_CONSTANTS["contrast"],
        "width": IMAGE_CONSTANTS["width"],
        "height": IMAGE_CONSTANTS["height"],
        "enhancePrompt": IMAGE_CONSTANTS["enhance_prompt"],
    }
