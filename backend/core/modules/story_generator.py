"""
Photo-to-story generation.

Sends the user's photos and customization choices to a multimodal text model
in one request and parses the completion into a titled, paginated Narrative.
Whenever the model is unconfigured or fails, a themed fallback story is
returned instead, so callers always get a readable story.
"""

import asyncio
import logging
import re
from typing import Optional, Sequence

import dspy

from backend.config import STORY_CONSTANTS, get_story_api_key, get_story_lm, llm_retry
from ..fallback_stories import get_fallback_story
from ..types import Customization, Narrative
from .page_splitter import PAGE_BREAK_MARKER

logger = logging.getLogger(__name__)

_HEADING_MARKUP = re.compile(r"^#+\s*")

STORY_PROMPT_TEMPLATE = """You are a master children's story writer and image analyst. Your task is to create a magical, personalized storybook from the uploaded photos.

ANALYSIS PHASE - First examine each image carefully:
1. Identify main subjects (people, animals, objects, settings)
2. Note colors, moods, activities, and relationships
3. Detect settings (indoor/outdoor, time of day, season, location type)
4. Observe emotions and expressions
5. Look for story-worthy details and elements

STORY CREATION PHASE - Create a {length} length story:

Story Structure Requirements:
- Title on first line (engaging and magical)
- Story divided into {min_pages}-{max_pages} clear sections/pages
- Each section should be {sentences_per_page} sentences for easy illustration
- Use "{marker}" between sections
- Build narrative arc: setup, adventure, challenge, resolution
- End with positive, heartwarming conclusion

Content Guidelines:
- Age-appropriate for {age_group}
- Theme focus: {theme}
- Tone: {tone}
- Use vivid, descriptive language that sparks imagination
- Create memorable characters with distinct personalities
- Include dialogue and action for dynamic storytelling
- Make each page visually distinct for illustrations

Photo Integration:
- Transform photo subjects into story characters
- Use photo settings as story locations
- Incorporate photo activities into plot events
- Maintain photo relationships and emotions
- Reference specific visual elements (colors, objects, expressions)

The story should feel personal and magical, as if the photos themselves came to life in a wonderful adventure."""


class StoryGenerationError(Exception):
    """Raised internally when the model returns no usable completion."""


def build_story_prompt(customizations: Customization) -> str:
    """Render the analysis and story-writing instructions for the model."""
    return STORY_PROMPT_TEMPLATE.format(
        length=customizations.resolved_length.value,
        min_pages=STORY_CONSTANTS["min_pages"],
        max_pages=STORY_CONSTANTS["max_pages"],
        sentences_per_page=STORY_CONSTANTS["sentences_per_page"],
        marker=PAGE_BREAK_MARKER,
        age_group=customizations.resolved_age_group.value,
        theme=customizations.resolved_theme.value,
        tone=customizations.resolved_tone.value,
    )


def build_story_messages(image_urls: Sequence[str], customizations: Customization) -> list[dict]:
    """One user message: the text prompt followed by every photo, in order."""
    content = [{"type": "text", "text": build_story_prompt(customizations)}]
    content.extend({"type": "image_url", "image_url": {"url": url}} for url in image_urls)
    return [{"role": "user", "content": content}]


def parse_story_text(text: str, is_fallback: bool = False) -> Narrative:
    """
    Split raw completion text into title and body.

    The first non-blank line is the title, without leading heading markup and
    capped at the configured length. The remaining non-blank lines form the
    body; if there are none, the whole text is the body.
    """
    lines = [line for line in text.split("\n") if line.strip()]
    title = _HEADING_MARKUP.sub("", lines[0]).strip() if lines else ""
    title = (title or STORY_CONSTANTS["default_title"])[: STORY_CONSTANTS["title_max_length"]]
    body = "\n".join(lines[1:]).strip() or text
    return Narrative(title=title, body=body, is_fallback=is_fallback)


def _completion_text(output) -> str:
    # dspy returns plain strings, or dicts when extra fields (logprobs, tool calls) are present
    if isinstance(output, dict):
        output = output.get("text")
    return output.strip() if isinstance(output, str) else ""


class StoryGenerator:
    """
    Turn an ordered set of photos into a Narrative.

    Args:
        lm: Optional explicit LM. When omitted, one is built from the
            environment on each call, so a missing OPENROUTER_API_KEY is
            detected per request.
    """

    def __init__(self, lm: Optional[dspy.LM] = None):
        self._lm = lm

    async def generate(
        self,
        image_urls: Sequence[str],
        customizations: Optional[Customization] = None,
    ) -> Narrative:
        """
        Generate a story from photos. Never raises for generation failures.

        Args:
            image_urls: Photo URLs in story order. Must be non-empty; callers validate.
            customizations: Optional story choices; absent fields use defaults.

        Returns:
            Narrative from the model, or the themed fallback narrative.
        """
        customizations = customizations or Customization()

        if self._lm is None and not get_story_api_key():
            logger.info("OPENROUTER_API_KEY not configured, using fallback story")
            return self.generate_fallback(customizations)

        try:
            text = await asyncio.to_thread(self._complete, list(image_urls), customizations)
        except Exception as e:
            logger.warning(
                f"Story generation failed, using fallback: {type(e).__name__}: {e}",
                extra={"error_type": type(e).__name__},
            )
            return self.generate_fallback(customizations)

        return parse_story_text(text)

    @llm_retry
    def _complete(self, image_urls: list[str], customizations: Customization) -> str:
        """Blocking model call. Retried on transient network errors."""
        lm = self._lm or get_story_lm()
        outputs = lm(messages=build_story_messages(image_urls, customizations))
        text = _completion_text(outputs[0]) if outputs else ""
        if not text:
            raise StoryGenerationError("Model returned an empty completion")
        return text

    def generate_fallback(self, customizations: Optional[Customization] = None) -> Narrative:
        """Return the pre-written story for the requested theme."""
        theme = customizations.theme if customizations else None
        return parse_story_text(get_fallback_story(theme).to_text(), is_fallback=True)
