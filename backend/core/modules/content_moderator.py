"""
Child-safety rewriting for illustration prompts.

Image providers reject prompts that mention weapons, violence or injury,
even when the story uses those words innocently ("she cut the cake").
Flagged words are swapped for benign synonyms before a prompt is sent.
"""

import re
from types import MappingProxyType

SAFE_DEFAULT_SCENE = "A magical adventure scene"

# Flagged word -> child-friendly replacement
FLAGGED_WORD_REPLACEMENTS = MappingProxyType({
    "cutting": "preparing",
    "cut": "shaped",
    "knife": "tool",
    "blade": "leaf",
    "sharp": "pointed",
    "weapon": "tool",
    "sword": "magic wand",
    "gun": "toy",
    "fight": "play",
    "violence": "adventure",
    "hurt": "surprised",
    "pain": "discomfort",
    "blood": "red juice",
    "wound": "scratch",
    "injury": "bump",
    "danger": "challenge",
    "scary": "mysterious",
    "frightening": "surprising",
    "terror": "excitement",
    "death": "sleep",
    "die": "rest",
    "kill": "stop",
    "murder": "catch",
    "attack": "approach",
    "strike": "touch",
    "hit": "tap",
    "punch": "poke",
    "kick": "step",
})

_FLAGGED_WORD_PATTERN = re.compile(
    r"\b(" + "|".join(re.escape(word) for word in FLAGGED_WORD_REPLACEMENTS) + r")\b",
    re.IGNORECASE,
)


def moderate(text: str | None) -> str:
    """
    Rewrite text so it is safe to send to the image provider.

    Matching is whole-word and case-insensitive; the result is lower-cased.
    Blank input yields SAFE_DEFAULT_SCENE.
    """
    if not text or not text.strip():
        return SAFE_DEFAULT_SCENE

    moderated = _FLAGGED_WORD_PATTERN.sub(
        lambda match: FLAGGED_WORD_REPLACEMENTS[match.group(0).lower()],
        text.strip().lower(),
    )
    return moderated or SAFE_DEFAULT_SCENE
