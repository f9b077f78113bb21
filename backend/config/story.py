"""
Story generation constants for the Photo Storybook service.

Page counts and sentence counts are what the text model is asked for;
the Page Splitter never enforces them.
"""

# Story generation constants
STORY_CONSTANTS = {
    "model": "google/gemini-2.5-flash-lite",  # Routed through OpenRouter
    "max_tokens": 1000,
    "temperature": 0.8,
    "min_pages": 4,
    "max_pages": 6,
    "sentences_per_page": "2-3",
    "title_max_length": 100,
    "default_title": "My Magical Story",
}

# Page delimiter shared by generated stories, fallback stories and the page splitter
PAGE_BREAK_MARKER = "---PAGE BREAK---"
