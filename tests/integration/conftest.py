"""Pytest configuration for integration tests against real services."""

import os
import pytest
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "requires_image_api: mark test as requiring LEONARDO_API_KEY"
    )


@pytest.fixture(scope="session")
def llm_api_available():
    """Check if the story model API is available."""
    return bool(os.getenv("OPENROUTER_API_KEY"))


@pytest.fixture(scope="session")
def image_api_available():
    """Check if the image generation API is available."""
    return bool(os.getenv("LEONARDO_API_KEY"))


@pytest.fixture(scope="session")
def redis_available():
    """Check if Redis is available."""
    import redis
    try:
        redis.Redis.from_url(os.getenv("REDIS_URL", "redis://localhost:6379")).ping()
        return True
    except redis.ConnectionError:
        return False


@pytest.fixture(autouse=True)
def skip_if_no_llm_api(request, llm_api_available):
    """Skip tests marked with requires_llm_api if no key set."""
    if request.node.get_closest_marker("requires_llm_api"):
        if not llm_api_available:
            pytest.skip("OPENROUTER_API_KEY not set")


@pytest.fixture(autouse=True)
def skip_if_no_image_api(request, image_api_available):
    """Skip tests marked with requires_image_api if no key set."""
    if request.node.get_closest_marker("requires_image_api"):
        if not image_api_available:
            pytest.skip("LEONARDO_API_KEY not set")


@pytest.fixture(autouse=True)
def skip_if_no_redis(request, redis_available):
    """Skip tests marked with requires_redis if Redis is not reachable."""
    if request.node.get_closest_marker("requires_redis"):
        if not redis_available:
            pytest.skip("Redis not available")
