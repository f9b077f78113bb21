"""
Standalone illustration generation logic.

This module contains the illustration pipeline that can be called from any
task runner (ARQ or direct invocation): build one prompt per page, generate
every page concurrently, then record the results and settle the narrative.
"""

import time
from typing import Optional

import asyncpg

from backend.core.modules.illustration_generator import IllustrationGenerator
from backend.core.modules.prompt_builder import build_prompts
from ..database.repository import IllustrationRepository
from ..logging import pipeline_logger
from .blob_store import LocalBlobStore


async def generate_illustrations(
    narrative_id: str,
    narrative_body: str,
    title: str,
    conn: asyncpg.Connection,
    generator: Optional[IllustrationGenerator] = None,
) -> dict:
    """
    Generate and record illustrations for every page of a narrative.

    Not deduplicated: calling twice records a second full set. Callers must
    check for existing illustrations first.

    Args:
        narrative_id: ID of the saved narrative
        narrative_body: Marker-delimited narrative text
        title: Narrative title, quoted in every prompt
        conn: Database connection used to record results
        generator: Optional IllustrationGenerator (defaults to local blob storage)

    Returns:
        {"count": N, "illustrations": [illustration dicts in page order]}
    """
    start_time = time.time()
    generator = generator or IllustrationGenerator(blob_store=LocalBlobStore())

    prompts = build_prompts(narrative_body, title)
    pipeline_logger.illustrations_started(narrative_id, len(prompts))

    illustrations = await generator.generate_all(prompts, narrative_id)

    await IllustrationRepository(conn).save_illustrations(narrative_id, illustrations)

    placeholder_count = sum(1 for illustration in illustrations if illustration.is_placeholder)
    pipeline_logger.illustrations_settled(
        narrative_id, placeholder_count, len(illustrations), time.time() - start_time
    )

    return {
        "count": len(illustrations),
        "illustrations": [illustration.to_dict() for illustration in illustrations],
    }
