"""
ARQ worker for background illustration generation.

Run with: arq backend.worker.WorkerSettings
"""

import asyncio
import logging
from typing import Any

import asyncpg
from arq import Retry
from dotenv import load_dotenv

# Load environment variables before importing app modules
load_dotenv()

from backend.api.arq_pool import get_redis_settings  # noqa: E402
from backend.api.database.db import get_database_dsn  # noqa: E402
from backend.api.database.repository import IllustrationRepository, NarrativeRepository  # noqa: E402
from backend.api.logging import configure_logging, pipeline_logger  # noqa: E402
from backend.api.models.enums import IllustrationStatus  # noqa: E402
from backend.api.services.illustration_generation import generate_illustrations  # noqa: E402

logger = logging.getLogger(__name__)

# Errors worth another ARQ try; anything else fails the job on the spot
TRANSIENT_ERRORS = (OSError, asyncpg.PostgresConnectionError, asyncpg.InterfaceError)

RETRY_DELAY_SECONDS = 30


async def generate_illustrations_task(
    ctx: dict[str, Any],
    narrative_id: str,
    narrative_body: str,
    title: str,
) -> dict[str, Any]:
    """
    ARQ task for illustrating a narrative.

    This is a thin wrapper around the standalone generate_illustrations
    function. A narrative that already has illustration rows is skipped, so
    an ARQ retry after a late failure cannot record a second set.

    Transient connection errors are retried through arq.Retry until
    max_tries is reached. Every other failure, a job timeout included, is
    final and returns the narrative to narrative_only.

    Args:
        ctx: ARQ context (contains job_id, job_try, redis connection, etc.)
        narrative_id: ID of the saved narrative
        narrative_body: Marker-delimited narrative text
        title: Narrative title

    Returns:
        Dict with narrative_id, status and illustration count
    """
    job_id = ctx.get("job_id", "unknown")
    job_try = ctx.get("job_try", 1)
    logger.info(
        f"Starting illustration job {job_id} for narrative {narrative_id}",
        extra={"narrative_id": narrative_id, "attempt": job_try},
    )

    try:
        conn = await asyncpg.connect(get_database_dsn())
        try:
            existing = await IllustrationRepository(conn).count_illustrations(narrative_id)
            if existing:
                logger.info(
                    f"Narrative {narrative_id} already has {existing} illustrations, skipping",
                    extra={"narrative_id": narrative_id},
                )
                return {"narrative_id": narrative_id, "status": "skipped", "count": existing}

            # A retry may run after an earlier try released the narrative
            await NarrativeRepository(conn).update_illustration_status(
                narrative_id, IllustrationStatus.ILLUSTRATIONS_IN_FLIGHT
            )
            result = await generate_illustrations(
                narrative_id=narrative_id,
                narrative_body=narrative_body,
                title=title,
                conn=conn,
            )
        finally:
            await conn.close()

        logger.info(f"Completed illustration job {job_id} for narrative {narrative_id}")
        return {"narrative_id": narrative_id, "status": "completed", "count": result["count"]}

    except TRANSIENT_ERRORS as e:
        pipeline_logger.illustrations_failed(narrative_id, e, attempt=job_try)
        if job_try < WorkerSettings.max_tries:
            raise Retry(defer=RETRY_DELAY_SECONDS) from e
        await _release_narrative(narrative_id)
        raise

    except (Exception, asyncio.CancelledError) as e:
        # CancelledError is how ARQ stops a job at job_timeout
        pipeline_logger.illustrations_failed(narrative_id, e, attempt=job_try)
        await _release_narrative(narrative_id)
        # Re-raise so ARQ marks the job as failed
        raise


async def _release_narrative(narrative_id: str) -> None:
    """Return a narrative whose job gave up to narrative_only, so it can be retried manually."""
    try:
        conn = await asyncpg.connect(get_database_dsn())
        try:
            await NarrativeRepository(conn).update_illustration_status(
                narrative_id, IllustrationStatus.NARRATIVE_ONLY
            )
        finally:
            await conn.close()
    except Exception as e:
        logger.error(f"Failed to release narrative {narrative_id}: {e}", extra={"narrative_id": narrative_id})


async def startup(ctx: dict[str, Any]) -> None:
    """Called when worker starts up."""
    configure_logging()
    logger.info("ARQ worker starting up")

    # Cleanup stale Redis keys from previous crash
    # This prevents ghost jobs from blocking the worker
    await _cleanup_stale_redis_keys(ctx)


async def _cleanup_stale_redis_keys(ctx: dict[str, Any]) -> None:
    """Clean up stale in-progress keys from crashed workers.

    On worker startup, clears arq:in-progress:* keys (except cron jobs) so
    jobs that were running when the previous worker crashed can be picked up
    again.

    NOTE: All ARQ keys (job, retry, result, in-progress) are STRING type. Do
    NOT delete keys based on type checks.
    """
    redis = ctx.get("redis")
    if not redis:
        logger.warning("Redis connection not available in context, skipping Redis cleanup")
        return

    try:
        cleaned = 0

        in_progress_keys = await redis.keys("arq:in-progress:*")
        for key in in_progress_keys:
            # Skip cron job keys (they use keep_cronjob_progress to prevent duplicates)
            if b"cron:" in key:
                continue
            await redis.delete(key)
            cleaned += 1
            logger.debug(f"Deleted stale in-progress key: {key}")

        if cleaned > 0:
            logger.info(f"Startup Redis cleanup: removed {cleaned} stale in-progress key(s)")

    except Exception as e:
        logger.error(f"Failed Redis cleanup: {e}")


async def shutdown(ctx: dict[str, Any]) -> None:
    """Called when worker shuts down."""
    logger.info("ARQ worker shutting down")


class WorkerSettings:
    """ARQ worker configuration."""

    # Task functions to register
    functions = [generate_illustrations_task]

    # Lifecycle hooks
    on_startup = startup
    on_shutdown = shutdown

    # Redis connection settings
    redis_settings = get_redis_settings()

    # Job settings
    max_jobs = 4  # Each job fans out one provider request per page
    job_timeout = 600  # 10 minutes max per job (per-page polling stops at 5)
    max_tries = 3  # Only TRANSIENT_ERRORS are retried, RETRY_DELAY_SECONDS apart

    # The narrative row carries the outcome; a stored result would make
    # enqueue_job refuse the same job ID until it expired
    keep_result = 0

    # Health check
    health_check_interval = 30
