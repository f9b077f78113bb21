"""Split a narrative body into the pages that each get one illustration."""

import re

from backend.config import PAGE_BREAK_MARKER

MIN_SENTENCE_PAGE_LENGTH = 10

_SENTENCE_BOUNDARY = re.compile(r"[.!?]+")


def split_pages(narrative_body: str) -> list[str]:
    """
    Split a narrative body into ordered page segments.

    Splits on PAGE_BREAK_MARKER, dropping blank segments. When that gives
    one page or none, splits on sentence punctuation instead and keeps the
    sentences longer than MIN_SENTENCE_PAGE_LENGTH characters.
    """
    pages = [page.strip() for page in narrative_body.split(PAGE_BREAK_MARKER) if page.strip()]
    if len(pages) > 1:
        return pages

    return [
        sentence.strip()
        for sentence in _SENTENCE_BOUNDARY.split(narrative_body)
        if len(sentence.strip()) > MIN_SENTENCE_PAGE_LENGTH
    ]
