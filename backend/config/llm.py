"""
LLM configuration for the Photo Storybook service.

Story text comes from a multimodal model routed through OpenRouter.
Includes:
- 120s timeout per LLM call to fail fast on hanging connections
- Retry with exponential backoff for transient network errors
"""

import os
import logging
from typing import Optional

from dotenv import load_dotenv
import dspy
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

from .story import STORY_CONSTANTS

# Load environment variables from .env file
load_dotenv()

# Logging for retry attempts
logger = logging.getLogger(__name__)

# Timeout for LLM calls (seconds)
LLM_TIMEOUT = 120

# Network errors that should trigger retry
RETRYABLE_EXCEPTIONS = (
    ConnectionError,
    TimeoutError,
    BrokenPipeError,
    OSError,  # Catches [Errno 32] Broken pipe
)


def get_story_api_key() -> Optional[str]:
    """Return the OpenRouter API key, or None when it is not configured."""
    return os.getenv("OPENROUTER_API_KEY") or None


def get_story_model_name() -> str:
    """Get the name of the story model that will be used."""
    return os.getenv("STORY_MODEL") or STORY_CONSTANTS["model"]


def get_story_lm() -> dspy.LM:
    """
    Get the LM used to write stories from photos.

    Uses OPENROUTER_API_KEY from environment. Caching is disabled so the
    same photos can produce a fresh story each time.
    """
    api_key = get_story_api_key()
    if not api_key:
        raise ValueError("OPENROUTER_API_KEY not found in environment. Set it in .env file.")

    return dspy.LM(
        f"openrouter/{get_story_model_name()}",
        api_key=api_key,
        max_tokens=STORY_CONSTANTS["max_tokens"],
        temperature=STORY_CONSTANTS["temperature"],
        timeout=LLM_TIMEOUT,
        cache=False,
    )


# Retry decorator for LLM calls with network errors
llm_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=2, min=2, max=10),
    retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
