"""
Illustration style palette for storybook pages.

Pages cycle through the palette in order (page index mod palette size), so
consecutive pages vary in medium and framing while the base style and the
consistency suffix keep the book coherent.
"""

from enum import Enum

from ..types import StyleDefinition


class IllustrationStyleType(Enum):
    """Available illustration styles, in rotation order."""

    WATERCOLOR = "watercolor"
    COLORED_PENCIL = "colored_pencil"
    GOUACHE = "gouache"
    INK_WASH = "ink_wash"


BASE_STYLE = "Children's book illustration, consistent character design, coherent art style"

CONSISTENCY_SUFFIX = (
    "Maintain character appearance consistency, same art style throughout, "
    "whimsical, family-friendly, high detail, clean edges, professional children's book quality."
)

STYLE_PALETTE: tuple[StyleDefinition, ...] = (
    StyleDefinition(
        name=IllustrationStyleType.WATERCOLOR.value,
        label="watercolor, soft brush, pastel palette, gentle gradients, soft lighting",
        composition="wide establishing shot, cinematic composition, rule of thirds",
    ),
    StyleDefinition(
        name=IllustrationStyleType.COLORED_PENCIL.value,
        label="colored pencil, textured paper, warm tones, cozy atmosphere",
        composition="medium shot with character focus, shallow depth of field",
    ),
    StyleDefinition(
        name=IllustrationStyleType.GOUACHE.value,
        label="gouache, bold shapes, vibrant saturated colors, playful",
        composition="dynamic perspective, slight tilt, action-oriented scene",
    ),
    StyleDefinition(
        name=IllustrationStyleType.INK_WASH.value,
        label="ink and wash, clean linework, minimal shading, modern picture book",
        composition="close-up portrait, strong silhouette, expressive pose",
    ),
)


def get_style_for_page(page_index: int) -> StyleDefinition:
    """Get the style for a 0-based page index."""
    return STYLE_PALETTE[page_index % len(STYLE_PALETTE)]
