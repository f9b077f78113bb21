"""Unit tests for IllustrationGenerator against a mocked provider."""

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from backend.config import GENERIC_SAFE_PROMPT, PLACEHOLDER_IMAGE_URL
from backend.core.modules.illustration_generator import IllustrationGenerator

API_BASE = "https://cloud.leonardo.ai/api/rest/v1"
CDN_URL = "https://cdn.leonardo.ai/generated/image.png"
IMAGE_BYTES = b"\x89PNG fake image"


class FakeProvider:
    """Scriptable stand-in for the generation API."""

    def __init__(self, statuses=("COMPLETE",), reject_prompts=(), submit_response=None):
        self.statuses = list(statuses)
        self.reject_prompts = set(reject_prompts)
        self.submit_response = submit_response
        self.submitted_prompts: list[str] = []
        self.status_checks = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if request.method == "POST" and url == f"{API_BASE}/generations":
            assert request.headers["authorization"] == "Bearer test-key"
            prompt = json.loads(request.content)["prompt"]
            self.submitted_prompts.append(prompt)
            if any(marker in prompt for marker in self.reject_prompts):
                return httpx.Response(403, text='{"error": "Content moderated"}')
            if self.submit_response is not None:
                return self.submit_response
            index = len(self.submitted_prompts)
            return httpx.Response(200, json={"sdGenerationJob": {"generationId": f"gen-{index}"}})

        if request.method == "GET" and url.startswith(f"{API_BASE}/generations/"):
            self.status_checks += 1
            status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
            generation = {"status": status, "generated_images": []}
            if status == "COMPLETE":
                generation["generated_images"] = [{"url": CDN_URL}]
            return httpx.Response(200, json={"generations_by_pk": generation})

        if url == CDN_URL:
            return httpx.Response(200, content=IMAGE_BYTES)

        return httpx.Response(404)


@pytest.fixture
def fake_blob_store():
    store = AsyncMock()
    store.put.side_effect = lambda path, data, content_type: f"http://testserver/blobs/{path}"
    return store


def _generator(provider, blob_store, **kwargs):
    client = httpx.AsyncClient(transport=httpx.MockTransport(provider.handler))
    kwargs.setdefault("poll_interval", 0)
    return IllustrationGenerator(blob_store=blob_store, api_key="test-key", client=client, **kwargs)


class TestGenerateAll:
    """Tests for IllustrationGenerator.generate_all()."""

    @pytest.mark.asyncio
    async def test_all_pages_succeed(self, fake_blob_store):
        provider = FakeProvider(statuses=["PENDING", "COMPLETE"])
        generator = _generator(provider, fake_blob_store)

        illustrations = await generator.generate_all(["page one", "page two"], "n-1")

        assert [i.page_number for i in illustrations] == [1, 2]
        assert [i.prompt for i in illustrations] == ["page one", "page two"]
        assert not any(i.is_placeholder for i in illustrations)
        for illustration in illustrations:
            assert illustration.image_url.startswith("http://testserver/blobs/story-images/n-1/")
            assert illustration.image_url.endswith(".png")

        stored = fake_blob_store.put.await_args_list
        assert len(stored) == 2
        assert all(call.args[1] == IMAGE_BYTES and call.args[2] == "image/png" for call in stored)

    @pytest.mark.asyncio
    async def test_blob_paths_carry_page_index(self, fake_blob_store):
        generator = _generator(FakeProvider(), fake_blob_store)

        await generator.generate_all(["a", "b", "c"], "n-9")

        paths = [call.args[0] for call in fake_blob_store.put.await_args_list]
        assert all(path.startswith("story-images/n-9/") for path in paths)
        assert sorted(path.rsplit("-", 1)[1] for path in paths) == ["0.png", "1.png", "2.png"]

    @pytest.mark.asyncio
    async def test_empty_prompts(self, fake_blob_store):
        generator = _generator(FakeProvider(), fake_blob_store)

        assert await generator.generate_all([], "n-1") == []

    @pytest.mark.asyncio
    async def test_missing_api_key_gives_placeholders(self, fake_blob_store):
        provider = FakeProvider()
        client = httpx.AsyncClient(transport=httpx.MockTransport(provider.handler))
        generator = IllustrationGenerator(blob_store=fake_blob_store, client=client)

        illustrations = await generator.generate_all(["a", "b"], "n-1")

        assert [i.page_number for i in illustrations] == [1, 2]
        assert all(i.is_placeholder for i in illustrations)
        assert all(i.image_url == PLACEHOLDER_IMAGE_URL for i in illustrations)
        assert provider.submitted_prompts == []

    @pytest.mark.asyncio
    async def test_mixed_failures_keep_dense_page_numbers(self, fake_blob_store):
        provider = FakeProvider(reject_prompts=["bad"])
        # The generic retry prompt is rejected too, so "bad" pages give up
        provider.reject_prompts.add("watercolor style")
        generator = _generator(provider, fake_blob_store)

        illustrations = await generator.generate_all(["good", "bad", "good again", "bad again"], "n-1")

        assert [i.page_number for i in illustrations] == [1, 2, 3, 4]
        assert [i.is_placeholder for i in illustrations] == [False, True, False, True]
        assert illustrations[1].prompt == "bad"
        assert illustrations[1].image_url == PLACEHOLDER_IMAGE_URL


class TestModerationRetry:
    """Tests for the single generic-prompt retry."""

    @pytest.mark.asyncio
    async def test_moderated_prompt_is_retried_once_with_generic_prompt(self, fake_blob_store):
        provider = FakeProvider(reject_prompts=["dragon"])
        generator = _generator(provider, fake_blob_store)

        illustrations = await generator.generate_all(["the dragon page"], "n-1")

        assert provider.submitted_prompts == ["the dragon page", GENERIC_SAFE_PROMPT]
        assert illustrations[0].is_placeholder is False
        # The recorded prompt is the page prompt, not the substitute
        assert illustrations[0].prompt == "the dragon page"

    @pytest.mark.asyncio
    async def test_second_rejection_gives_placeholder(self, fake_blob_store):
        provider = FakeProvider(reject_prompts=["dragon", "watercolor style"])
        generator = _generator(provider, fake_blob_store)

        illustrations = await generator.generate_all(["the dragon page"], "n-1")

        assert len(provider.submitted_prompts) == 2
        assert illustrations[0].is_placeholder is True

    @pytest.mark.asyncio
    async def test_other_errors_are_not_retried(self, fake_blob_store):
        provider = FakeProvider(submit_response=httpx.Response(500, text="Internal error"))
        generator = _generator(provider, fake_blob_store)

        illustrations = await generator.generate_all(["page"], "n-1")

        assert provider.submitted_prompts == ["page"]
        assert illustrations[0].is_placeholder is True

    @pytest.mark.asyncio
    async def test_malformed_submission_gives_placeholder(self, fake_blob_store):
        provider = FakeProvider(submit_response=httpx.Response(200, json={"unexpected": True}))
        generator = _generator(provider, fake_blob_store)

        illustrations = await generator.generate_all(["page"], "n-1")

        assert provider.submitted_prompts == ["page"]
        assert provider.status_checks == 0
        assert illustrations[0].is_placeholder is True


class TestPolling:
    """Tests for job polling limits."""

    @pytest.mark.asyncio
    async def test_failed_job_gives_placeholder(self, fake_blob_store):
        provider = FakeProvider(statuses=["PENDING", "FAILED"])
        generator = _generator(provider, fake_blob_store)

        illustrations = await generator.generate_all(["page"], "n-1")

        assert provider.status_checks == 2
        assert illustrations[0].is_placeholder is True
        fake_blob_store.put.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_attempt_limit_gives_placeholder(self, fake_blob_store):
        provider = FakeProvider(statuses=["PENDING"])
        generator = _generator(provider, fake_blob_store, max_poll_attempts=3)

        illustrations = await generator.generate_all(["page prompt"], "n-1")

        assert provider.status_checks == 3
        assert illustrations[0].is_placeholder is True
        assert illustrations[0].prompt == "page prompt"

    @pytest.mark.asyncio
    async def test_deadline_limits_polling(self, fake_blob_store):
        now = 0.0
        sleeps = []

        def clock():
            return now

        async def sleep(seconds):
            nonlocal now
            sleeps.append(seconds)
            now += seconds

        provider = FakeProvider(statuses=["PENDING"])
        generator = _generator(
            provider,
            fake_blob_store,
            poll_interval=10,
            max_poll_attempts=100,
            poll_deadline=25,
            clock=clock,
            sleep=sleep,
        )

        illustrations = await generator.generate_all(["page"], "n-1")

        assert sleeps == [10, 10, 5]
        assert provider.status_checks == 4
        assert illustrations[0].is_placeholder is True

    @pytest.mark.asyncio
    async def test_complete_without_images_keeps_polling(self, fake_blob_store):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "POST":
                return httpx.Response(200, json={"sdGenerationJob": {"generationId": "gen-1"}})
            return httpx.Response(
                200, json={"generations_by_pk": {"status": "COMPLETE", "generated_images": []}}
            )

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        generator = IllustrationGenerator(
            blob_store=fake_blob_store, api_key="test-key", client=client,
            poll_interval=0, max_poll_attempts=2,
        )

        illustrations = await generator.generate_all(["page"], "n-1")

        assert illustrations[0].is_placeholder is True

    @pytest.mark.asyncio
    async def test_download_failure_gives_placeholder(self, fake_blob_store):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "POST":
                return httpx.Response(200, json={"sdGenerationJob": {"generationId": "gen-1"}})
            if str(request.url) == CDN_URL:
                return httpx.Response(404)
            return httpx.Response(
                200,
                json={"generations_by_pk": {"status": "COMPLETE", "generated_images": [{"url": CDN_URL}]}},
            )

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        generator = IllustrationGenerator(
            blob_store=fake_blob_store, api_key="test-key", client=client, poll_interval=0
        )

        illustrations = await generator.generate_all(["page"], "n-1")

        assert illustrations[0].is_placeholder is True
        fake_blob_store.put.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_download_follows_cdn_redirect(self, fake_blob_store):
        mirror_url = "https://mirror.leonardo.ai/generated/image.png"

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "POST":
                return httpx.Response(200, json={"sdGenerationJob": {"generationId": "gen-1"}})
            if str(request.url) == CDN_URL:
                return httpx.Response(302, headers={"Location": mirror_url})
            if str(request.url) == mirror_url:
                return httpx.Response(200, content=IMAGE_BYTES)
            return httpx.Response(
                200,
                json={"generations_by_pk": {"status": "COMPLETE", "generated_images": [{"url": CDN_URL}]}},
            )

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        generator = IllustrationGenerator(
            blob_store=fake_blob_store, api_key="test-key", client=client, poll_interval=0
        )

        illustrations = await generator.generate_all(["page"], "n-1")

        assert illustrations[0].is_placeholder is False
        assert fake_blob_store.put.await_args.args[1] == IMAGE_BYTES
