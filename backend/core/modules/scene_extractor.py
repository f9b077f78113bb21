"""
Keyword-based hints that keep illustrations consistent across pages.

The same character and setting hints are appended to every page prompt of
a story, so the image model draws a recognisable cast and world.
"""

MAX_HINTS = 3

# (keywords, hint) pairs, checked in order
CHARACTER_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("little", "small"), "small character"),
    (("big", "large"), "large character"),
    (("child", "kid"), "child character"),
    (("animal",), "animal character"),
    (("friend",), "friendly characters"),
    (("family",), "family characters"),
)

CHARACTER_COLORS: tuple[str, ...] = ("red", "blue", "green", "yellow", "purple", "pink", "orange")

SETTING_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("forest", "wood"), "forest setting"),
    (("garden",), "garden setting"),
    (("home", "house"), "home setting"),
    (("park",), "park setting"),
    (("school",), "school setting"),
    (("magical", "enchanted"), "magical environment"),
    (("outdoor", "outside"), "outdoor scene"),
    (("indoor", "inside"), "indoor scene"),
    # Weather / atmosphere
    (("sunny",), "sunny atmosphere"),
    (("rainy",), "rainy atmosphere"),
    (("night",), "nighttime scene"),
    (("day",), "daytime scene"),
)


def _match_keywords(content: str, table: tuple[tuple[tuple[str, ...], str], ...]) -> list[str]:
    return [hint for keywords, hint in table if any(word in content for word in keywords)]


def _format_hints(label: str, hints: list[str]) -> str:
    if not hints:
        return ""
    return f"{label}: {', '.join(hints[:MAX_HINTS])}."


def extract_character_hints(title: str, text: str) -> str:
    """Describe the cast, e.g. "Characters: small character, friendly characters."."""
    content = text.lower()
    hints = _match_keywords(content, CHARACTER_KEYWORDS)
    hints.extend(f"{color} colored elements" for color in CHARACTER_COLORS if color in content)
    return _format_hints("Characters", hints)


def extract_setting_hints(title: str, text: str) -> str:
    """Describe the world, e.g. "Setting: forest setting, magical environment."."""
    content = text.lower()
    return _format_hints("Setting", _match_keywords(content, SETTING_KEYWORDS))
