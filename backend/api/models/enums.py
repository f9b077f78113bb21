"""Enums shared by API models and the repository layer."""

from enum import Enum


class IllustrationStatus(str, Enum):
    """Illustration lifecycle of a narrative.

    NARRATIVE_ONLY is terminal when no image provider is configured.
    ILLUSTRATIONS_SETTLED includes partial success (some placeholder pages).
    """

    NARRATIVE_ONLY = "narrative_only"
    ILLUSTRATIONS_IN_FLIGHT = "illustrations_in_flight"
    ILLUSTRATIONS_SETTLED = "illustrations_settled"
