# Text processing (pure, no I/O)
from .content_moderator import moderate
from .scene_extractor import extract_character_hints, extract_setting_hints
from .page_splitter import PAGE_BREAK_MARKER, split_pages
from .prompt_builder import build_prompts

# Generation (external providers)
from .story_generator import StoryGenerator
from .illustration_generator import (
    ContentModeratedError,
    GenerationTimeoutError,
    IllustrationGenerator,
    ImageGenerationError,
)

__all__ = [
    # Text processing
    "moderate",
    "extract_character_hints",
    "extract_setting_hints",
    "PAGE_BREAK_MARKER",
    "split_pages",
    "build_prompts",
    # Generation
    "StoryGenerator",
    "IllustrationGenerator",
    "ImageGenerationError",
    "ContentModeratedError",
    "GenerationTimeoutError",
]
