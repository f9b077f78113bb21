"""Build one illustration prompt per page of a narrative."""

from .content_moderator import moderate
from .illustration_styles import BASE_STYLE, CONSISTENCY_SUFFIX, get_style_for_page
from .page_splitter import split_pages
from .scene_extractor import extract_character_hints, extract_setting_hints


def build_prompt(
    page_index: int,
    page_text: str,
    title: str,
    character_hints: str = "",
    setting_hints: str = "",
) -> str:
    """
    Build the prompt for a single page.

    Args:
        page_index: 0-based page index, selects the style from the palette
        page_text: Raw page text, moderated before use
        title: Story title, quoted for context
        character_hints: Shared cast hints for the whole story
        setting_hints: Shared setting hints for the whole story
    """
    style = get_style_for_page(page_index)
    return (
        f"{BASE_STYLE}, {style.label}. {style.composition}. "
        f'Story: "{title}" - {moderate(page_text)}. '
        f"{character_hints} {setting_hints} {CONSISTENCY_SUFFIX}"
    )


def build_prompts(narrative_body: str, title: str) -> list[str]:
    """
    Build prompts for every page of a narrative.

    Always returns exactly len(split_pages(narrative_body)) prompts, in page order.
    """
    pages = split_pages(narrative_body)
    joined = " ".join(pages)
    character_hints = extract_character_hints(title, joined)
    setting_hints = extract_setting_hints(title, joined)

    return [
        build_prompt(index, page, title, character_hints, setting_hints)
        for index, page in enumerate(pages)
    ]
