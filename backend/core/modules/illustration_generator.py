"""
Page illustration via an asynchronous image-generation REST API.

Per page: submit a generation job, poll its status at a fixed interval
until it completes, fails or runs out of time, then copy the finished image
into blob storage. Any failure on a page yields a placeholder Illustration
for that page; other pages are unaffected.
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Optional, Protocol, Sequence

import httpx

from backend.config import (
    CONTENT_MODERATION_MARKER,
    GENERIC_SAFE_PROMPT,
    IMAGE_CONSTANTS,
    PLACEHOLDER_IMAGE_URL,
    get_image_api_base,
    get_image_api_key,
    get_image_generation_payload,
)
from ..types import Illustration

logger = logging.getLogger(__name__)


class ImageGenerationError(Exception):
    """Raised when an illustration cannot be produced for a page."""


class ContentModeratedError(ImageGenerationError):
    """The provider's own moderation rejected the prompt."""


class GenerationTimeoutError(ImageGenerationError):
    """The generation job did not finish within the polling limits."""


class BlobStore(Protocol):
    async def put(self, path: str, data: bytes, content_type: str) -> str: ...


def _auth_headers(api_key: str) -> dict[str, str]:
    return {"authorization": f"Bearer {api_key}"}


class IllustrationGenerator:
    """
    Generate one illustration per prompt, concurrently.

    Args:
        blob_store: Destination for finished images; returns public URLs.
        api_key: Provider key. Read from the environment per call when omitted.
        client: Optional shared httpx.AsyncClient. When omitted, a client is
            created and closed for each generate_all call.
        poll_interval: Seconds between status checks.
        max_poll_attempts: Maximum status checks per page.
        poll_deadline: Wall-clock ceiling in seconds for polling one page.
    """

    def __init__(
        self,
        blob_store: BlobStore,
        api_key: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        poll_interval: float = IMAGE_CONSTANTS["poll_interval_seconds"],
        max_poll_attempts: int = IMAGE_CONSTANTS["max_poll_attempts"],
        poll_deadline: float = IMAGE_CONSTANTS["poll_deadline_seconds"],
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.blob_store = blob_store
        self._api_key = api_key
        self._client = client
        self.poll_interval = poll_interval
        self.max_poll_attempts = max_poll_attempts
        self.poll_deadline = poll_deadline
        self._clock = clock
        self._sleep = sleep

    @asynccontextmanager
    async def _client_context(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=IMAGE_CONSTANTS["request_timeout_seconds"]) as client:
            yield client

    async def generate_all(self, prompts: Sequence[str], narrative_id: str) -> list[Illustration]:
        """
        Illustrate every prompt concurrently.

        Returns one Illustration per prompt in input order, with page numbers
        1..N. Failed pages carry the placeholder image and their prompt.
        """
        api_key = self._api_key or get_image_api_key()
        async with self._client_context() as client:
            return list(await asyncio.gather(*(
                self.generate_page(client, api_key, prompt, index, narrative_id)
                for index, prompt in enumerate(prompts)
            )))

    async def generate_page(
        self,
        client: httpx.AsyncClient,
        api_key: Optional[str],
        prompt: str,
        index: int,
        narrative_id: str,
    ) -> Illustration:
        """Illustrate a single page. Never raises for generation failures."""
        page_number = index + 1
        log_extra = {"narrative_id": narrative_id, "page_number": page_number}
        start_time = time.time()

        try:
            if not api_key:
                raise ImageGenerationError("LEONARDO_API_KEY not configured")
            image_url = await self._generate_image(client, api_key, prompt, log_extra)
            data = await self._download(client, image_url)
            path = f"story-images/{narrative_id}/{int(time.time() * 1000)}-{index}.png"
            public_url = await self.blob_store.put(path, data, "image/png")
        except Exception as e:
            logger.warning(
                f"Page {page_number} falling back to placeholder: {type(e).__name__}: {e}",
                extra={**log_extra, "error_type": type(e).__name__},
            )
            return Illustration(
                page_number=page_number,
                image_url=PLACEHOLDER_IMAGE_URL,
                prompt=prompt,
                is_placeholder=True,
            )

        logger.info(
            f"Page {page_number} illustrated",
            extra={**log_extra, "duration": round(time.time() - start_time, 2)},
        )
        return Illustration(page_number=page_number, image_url=public_url, prompt=prompt)

    async def _generate_image(
        self, client: httpx.AsyncClient, api_key: str, prompt: str, log_extra: dict
    ) -> str:
        """Submit and poll. A moderation rejection is retried once with the generic prompt."""
        try:
            generation_id = await self._submit(client, api_key, prompt)
        except ContentModeratedError:
            logger.info(
                "Content moderation triggered, retrying with generic children's book prompt",
                extra={**log_extra, "attempt": 2},
            )
            generation_id = await self._submit(client, api_key, GENERIC_SAFE_PROMPT)
        return await self._poll(client, api_key, generation_id)

    async def _submit(self, client: httpx.AsyncClient, api_key: str, prompt: str) -> str:
        """Start a generation job and return its generation ID."""
        response = await client.post(
            f"{get_image_api_base()}/generations",
            json=get_image_generation_payload(prompt),
            headers=_auth_headers(api_key),
        )

        if not response.is_success:
            if CONTENT_MODERATION_MARKER in response.text.lower():
                raise ContentModeratedError(f"Prompt rejected by provider: {response.status_code}")
            raise ImageGenerationError(f"Generation request failed: {response.status_code}")

        data = response.json()
        job = data.get("sdGenerationJob") if isinstance(data, dict) else None
        generation_id = job.get("generationId") if isinstance(job, dict) else None
        if not generation_id:
            raise ImageGenerationError("Invalid response: missing sdGenerationJob.generationId")
        return generation_id

    async def _poll(self, client: httpx.AsyncClient, api_key: str, generation_id: str) -> str:
        """
        Poll a job until it completes.

        Bounded by both max_poll_attempts and poll_deadline (monotonic clock).

        Returns:
            URL of the first generated image

        Raises:
            ImageGenerationError: on a failed job or a non-success status response
            GenerationTimeoutError: when either limit is reached first
        """
        deadline = self._clock() + self.poll_deadline

        for _ in range(self.max_poll_attempts):
            response = await client.get(
                f"{get_image_api_base()}/generations/{generation_id}",
                headers=_auth_headers(api_key),
            )
            if not response.is_success:
                raise ImageGenerationError(f"Status check failed: {response.status_code}")

            data = response.json()
            generation = (data.get("generations_by_pk") if isinstance(data, dict) else None) or {}
            status = generation.get("status")
            images = generation.get("generated_images") or []

            if status == "COMPLETE" and images and images[0].get("url"):
                return images[0]["url"]
            if status == "FAILED":
                raise ImageGenerationError(f"Generation {generation_id} failed")

            remaining = deadline - self._clock()
            if remaining <= 0:
                break
            await self._sleep(min(self.poll_interval, remaining))

        raise GenerationTimeoutError(f"Generation {generation_id} did not complete in time")

    async def _download(self, client: httpx.AsyncClient, url: str) -> bytes:
        response = await client.get(url, follow_redirects=True)
        response.raise_for_status()
        return response.content
