"""Narrative service: write the story, save it, queue its illustrations."""

import logging
import time
import uuid
from typing import Optional, Sequence

from backend.config import is_image_generation_configured
from backend.core.modules.story_generator import StoryGenerator
from backend.core.types import Customization
from ..arq_pool import get_pool as get_arq_pool
from ..database.repository import IllustrationRepository, NarrativeRepository
from ..logging import pipeline_logger
from ..models.enums import IllustrationStatus

logger = logging.getLogger(__name__)

ILLUSTRATION_TASK_NAME = "generate_illustrations_task"


def illustration_job_id(narrative_id: str) -> str:
    """Queue key for a narrative's illustration job; arq rejects duplicates while it exists."""
    return f"illustrations:{narrative_id}"


class IllustrationsAlreadyExistError(Exception):
    """The narrative already has illustrations, or a generation job is queued."""


class ImageGenerationUnavailableError(Exception):
    """No image-generation credential is configured."""


class NarrativeService:
    """Service for creating narratives and triggering their illustrations."""

    def __init__(
        self,
        repo: NarrativeRepository,
        illustration_repo: IllustrationRepository,
        story_generator: Optional[StoryGenerator] = None,
    ):
        self.repo = repo
        self.illustration_repo = illustration_repo
        self.story_generator = story_generator or StoryGenerator()

    async def create_narrative(
        self,
        owner_id: str,
        image_urls: Sequence[str],
        customizations: Optional[Customization] = None,
    ) -> dict:
        """
        Generate and save a narrative, then queue illustrations in the background.

        Returns as soon as the narrative is saved; illustrations are produced
        later by the worker. Without an image credential the narrative stays
        narrative_only for good.

        Args:
            owner_id: Identity of the requesting user
            image_urls: Photo URLs in story order; the first becomes the cover
            customizations: Optional story choices

        Returns:
            {"narrative_id": ..., "title": ...}

        Raises:
            ValueError: if image_urls is empty
        """
        if not image_urls:
            raise ValueError("At least one image URL is required")

        customizations = customizations or Customization()
        start_time = time.time()

        narrative = await self.story_generator.generate(image_urls, customizations)

        narrative_id = str(uuid.uuid4())
        await self.repo.create_narrative(
            narrative_id=narrative_id,
            owner_id=owner_id,
            narrative=narrative,
            cover_image_url=image_urls[0],
            customizations=customizations.to_dict(),
        )
        pipeline_logger.narrative_created(narrative_id, narrative.is_fallback, time.time() - start_time)

        if not is_image_generation_configured():
            pipeline_logger.illustrations_skipped(narrative_id, "LEONARDO_API_KEY not configured")
        else:
            try:
                await self._enqueue_illustrations(narrative_id, narrative.body, narrative.title)
            except Exception as e:
                # The story is saved and stays narrative_only; the manual trigger can retry later
                logger.error(
                    f"Failed to enqueue illustrations for {narrative_id}: {e}",
                    extra={"narrative_id": narrative_id, "error_type": type(e).__name__},
                )

        return {"narrative_id": narrative_id, "title": narrative.title}

    async def request_illustrations(self, narrative_id: str, owner_id: str) -> Optional[IllustrationStatus]:
        """
        Manually queue illustrations for a narrative that has none.

        Returns:
            The new illustration status, or None if the narrative is missing or not owned

        Raises:
            IllustrationsAlreadyExistError: illustrations exist or a job is already queued
            ImageGenerationUnavailableError: no image credential configured
        """
        record = await self.repo.get_narrative_record(narrative_id, owner_id)
        if not record:
            return None

        if await self.illustration_repo.count_illustrations(narrative_id) > 0:
            raise IllustrationsAlreadyExistError(f"Narrative {narrative_id} already has illustrations")

        if not is_image_generation_configured():
            raise ImageGenerationUnavailableError("LEONARDO_API_KEY not configured")

        if not await self._enqueue_illustrations(narrative_id, record["content"], record["title"]):
            raise IllustrationsAlreadyExistError(f"Illustrations for {narrative_id} are already queued")
        return IllustrationStatus.ILLUSTRATIONS_IN_FLIGHT

    async def _enqueue_illustrations(self, narrative_id: str, narrative_body: str, title: str) -> bool:
        """Queue the illustration job, then mark the narrative in flight.

        Returns False, leaving the status untouched, when a job with the same
        ID is already queued.
        """
        arq_pool = get_arq_pool()
        job = await arq_pool.enqueue_job(
            ILLUSTRATION_TASK_NAME,
            narrative_id=narrative_id,
            narrative_body=narrative_body,
            title=title,
            _job_id=illustration_job_id(narrative_id),
        )
        if job is None:
            logger.info(
                f"Illustration job already queued for {narrative_id}",
                extra={"narrative_id": narrative_id},
            )
            return False

        await self.repo.update_illustration_status(narrative_id, IllustrationStatus.ILLUSTRATIONS_IN_FLIGHT)
        pipeline_logger.illustrations_enqueued(narrative_id)
        return True
