"""Unit tests for per-page illustration prompts."""

from backend.core.modules.illustration_styles import (
    BASE_STYLE,
    CONSISTENCY_SUFFIX,
    STYLE_PALETTE,
    get_style_for_page,
)
from backend.core.modules.page_splitter import PAGE_BREAK_MARKER, split_pages
from backend.core.modules.prompt_builder import build_prompt, build_prompts
from backend.core.modules.scene_extractor import extract_character_hints, extract_setting_hints


def _body(*pages: str) -> str:
    return f"\n{PAGE_BREAK_MARKER}\n".join(pages)


SIX_PAGE_BODY = _body(
    "A girl and her dog walked to the park.",
    "They found a big tree by the lake.",
    "A bird sang from a high branch.",
    "The dog chased a ball across the grass.",
    "Clouds rolled over the hills at sunset.",
    "They went home happy and tired.",
)


class TestStylePalette:
    """Tests for style rotation."""

    def test_palette_has_four_styles(self):
        assert len(STYLE_PALETTE) == 4

    def test_styles_cycle_by_page_index(self):
        assert get_style_for_page(0) is get_style_for_page(4)
        assert get_style_for_page(1) is get_style_for_page(5)
        assert get_style_for_page(0) is not get_style_for_page(1)


class TestBuildPrompt:
    """Tests for build_prompt()."""

    def test_prompt_layout(self):
        style = STYLE_PALETTE[2]

        prompt = build_prompt(2, "The bunny hops", "Spring Day", "Characters: bunny.", "Setting: garden.")

        assert prompt == (
            f"{BASE_STYLE}, {style.label}. {style.composition}. "
            'Story: "Spring Day" - the bunny hops. '
            f"Characters: bunny. Setting: garden. {CONSISTENCY_SUFFIX}"
        )

    def test_page_text_is_moderated(self):
        prompt = build_prompt(0, "The Knife was scary", "Night")

        assert "knife" not in prompt.lower()
        assert "scary" not in prompt
        assert "the tool was mysterious" in prompt

    def test_title_is_not_moderated(self):
        prompt = build_prompt(0, "A calm day", "The Sharp Sword")

        assert 'Story: "The Sharp Sword"' in prompt


class TestBuildPrompts:
    """Tests for build_prompts()."""

    def test_one_prompt_per_page(self):
        prompts = build_prompts(SIX_PAGE_BODY, "Park Day")

        assert len(prompts) == len(split_pages(SIX_PAGE_BODY)) == 6

    def test_prompts_follow_style_rotation(self):
        prompts = build_prompts(SIX_PAGE_BODY, "Park Day")

        for index, prompt in enumerate(prompts):
            assert get_style_for_page(index).label in prompt
        assert STYLE_PALETTE[0].label in prompts[4]
        assert STYLE_PALETTE[1].label in prompts[5]

    def test_hints_are_shared_across_pages(self):
        joined = " ".join(split_pages(SIX_PAGE_BODY))
        character_hints = extract_character_hints("Park Day", joined)
        setting_hints = extract_setting_hints("Park Day", joined)
        hints = f"{character_hints} {setting_hints}"

        prompts = build_prompts(SIX_PAGE_BODY, "Park Day")

        assert "large character" in hints
        assert "park setting" in hints
        for prompt in prompts:
            assert hints in prompt

    def test_every_prompt_carries_title_and_suffix(self):
        for prompt in build_prompts(SIX_PAGE_BODY, "Park Day"):
            assert prompt.startswith(BASE_STYLE)
            assert prompt.endswith(CONSISTENCY_SUFFIX)
            assert 'Story: "Park Day"' in prompt

    def test_empty_body_gives_no_prompts(self):
        assert build_prompts("", "Empty") == []
        assert build_prompts("Hi. Yo!", "Tiny") == []
