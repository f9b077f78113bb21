"""
Pre-written stories used when the text model is unavailable.

Each story uses the same page-break format as generated stories, so the
page splitter and prompt builder treat both paths identically.

Usage:
    from backend.core.fallback_stories import get_fallback_story

    story = get_fallback_story(Theme.FRIENDSHIP)
    text = story.to_text()
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional

from backend.config import PAGE_BREAK_MARKER
from .types import Theme


@dataclass(frozen=True)
class FallbackStory:
    """A themed four-page story with a fixed title."""
    title: str
    pages: tuple[str, ...]

    def to_text(self) -> str:
        """Render as raw completion text: title line, then marker-delimited pages."""
        separator = f"\n\n{PAGE_BREAK_MARKER}\n\n"
        return separator.join((self.title, *self.pages))


MAGICAL_ADVENTURE = FallbackStory(
    title="The Magical Adventure",
    pages=(
        "Once upon a time, in a world filled with wonder and magic, there lived a curious little "
        "explorer who discovered something extraordinary in their everyday surroundings. What started "
        "as an ordinary day quickly turned into the most amazing adventure they had ever experienced.",

        "As they ventured further into this magical world, they met friendly creatures who taught them "
        "about courage, kindness, and the power of imagination. Together, they solved puzzles and "
        "overcame challenges with teamwork and determination.",

        "With each step of their journey, the little explorer grew braver and wiser. They discovered "
        "that magic isn't just in fairy tales – it's all around us, waiting to be found by those who "
        "dare to look with wonder and an open heart.",

        "And so, with new friends by their side and a heart full of joy, the explorer returned home, "
        "knowing that every day holds the possibility for a new magical adventure.",
    ),
)

FRIENDSHIP_GARDEN = FallbackStory(
    title="The Friendship Garden",
    pages=(
        "In a special place where flowers bloomed in rainbow colors and butterflies danced in the "
        "sunshine, there was a magical garden where the most wonderful friendships grew. This wasn't "
        "just any ordinary garden – it was a place where kindness and laughter made everything more "
        "beautiful.",

        "One day, a gentle soul discovered this enchanted garden and met the most amazing friends they "
        "could ever imagine. Together, they planted seeds of joy, watered them with giggles, and watched "
        "as their friendship blossomed into something truly spectacular.",

        "Through sunny days and gentle rains, the friends in the garden learned to help each other grow. "
        "They shared stories, played games, and discovered that when friends work together, they can "
        "create the most beautiful things in the world.",

        "The garden became a symbol of how friendship makes life more colorful, more joyful, and more "
        "magical than anyone could ever imagine.",
    ),
)

FAMILY_ADVENTURE = FallbackStory(
    title="The Family Adventure",
    pages=(
        "In a cozy home filled with love and laughter, there lived a special family who shared the most "
        "wonderful adventures together. Every day brought new opportunities to explore, learn, and "
        "create magical memories.",

        "One sunny morning, the family decided to embark on their greatest adventure yet. With packed "
        "lunches and hearts full of excitement, they set off to discover the wonders that waited just "
        "beyond their backyard.",

        "Along the way, they helped each other, shared discoveries, and learned that the best adventures "
        "happen when families stick together. Each family member brought their own special talents to "
        "make the journey even more amazing.",

        "As they returned home that evening, tired but happy, they realized that the greatest treasure "
        "of all was the love they shared and the memories they created together.",
    ),
)

# Themes without a dedicated story use MAGICAL_ADVENTURE
FALLBACK_STORIES = MappingProxyType({
    Theme.ADVENTURE: MAGICAL_ADVENTURE,
    Theme.FRIENDSHIP: FRIENDSHIP_GARDEN,
    Theme.FAMILY: FAMILY_ADVENTURE,
})


def get_fallback_story(theme: Optional[Theme] = None) -> FallbackStory:
    """Select the fallback story for a theme. Pure function of the theme."""
    return FALLBACK_STORIES.get(theme, MAGICAL_ADVENTURE)
