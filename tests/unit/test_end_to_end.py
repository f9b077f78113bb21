"""Photo-to-book flow with the providers mocked out.

Without a text model key the narrative is the themed fallback; the image
provider is a mock transport, so every page gets a stored illustration.
"""

import httpx
import pytest

from backend.core.modules.illustration_generator import IllustrationGenerator
from backend.core.modules.page_splitter import split_pages
from backend.core.modules.prompt_builder import build_prompts
from backend.core.modules.story_generator import StoryGenerator
from backend.core.types import Customization, Theme

PHOTOS = ["http://testserver/blobs/uploads/o/one.jpg", "http://testserver/blobs/uploads/o/two.jpg"]


def _provider(request: httpx.Request) -> httpx.Response:
    if request.method == "POST":
        return httpx.Response(200, json={"sdGenerationJob": {"generationId": "gen"}})
    if request.url.path.endswith("/generations/gen"):
        return httpx.Response(
            200,
            json={"generations_by_pk": {
                "status": "COMPLETE",
                "generated_images": [{"url": "https://cdn.example.com/out.png"}],
            }},
        )
    return httpx.Response(200, content=b"png")


@pytest.mark.asyncio
async def test_photos_to_illustrated_pages(blob_store):
    narrative = await StoryGenerator().generate(PHOTOS, Customization(theme=Theme.ADVENTURE))

    assert narrative.title == "The Magical Adventure"
    assert narrative.is_fallback is True
    assert len(split_pages(narrative.body)) == 4

    prompts = build_prompts(narrative.body, narrative.title)
    assert len(prompts) == 4

    generator = IllustrationGenerator(
        blob_store=blob_store,
        api_key="test-key",
        client=httpx.AsyncClient(transport=httpx.MockTransport(_provider)),
        poll_interval=0,
    )
    illustrations = await generator.generate_all(prompts, "n-e2e")

    assert [i.page_number for i in illustrations] == [1, 2, 3, 4]
    assert not any(i.is_placeholder for i in illustrations)
    for illustration in illustrations:
        path = illustration.image_url.removeprefix("http://testserver/blobs/")
        assert path.startswith("story-images/n-e2e/")
        assert blob_store.resolve(path).read_bytes() == b"png"
