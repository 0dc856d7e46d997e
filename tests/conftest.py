"""Shared test fixtures for the Embed Resolver test suite."""

from collections.abc import AsyncGenerator
from typing import Any

import httpx
import pytest
import respx

# ─── Pytest Configuration ────────────────────────────────────────


def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no I/O)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")
    config.addinivalue_line("markers", "slow: Slow tests (skipped by default)")


# ─── Async Backend ───────────────────────────────────────────────


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


# ─── Settings Fixtures ───────────────────────────────────────────


@pytest.fixture
def test_settings():
    """Test settings with no credentials and no caching."""
    from embed_resolver.config import Settings

    return Settings(
        debug=True,
        log_level="DEBUG",
        twitter_bearer_token=None,
        imgur_client_id=None,
        cache_enabled=False,
    )


@pytest.fixture
def mock_settings():
    """Settings with mock credentials for testing."""
    from embed_resolver.config import Settings

    return Settings(
        debug=True,
        twitter_bearer_token="test-twitter-token",
        imgur_client_id="test-imgur-client",
        error_response_cache_age=300.0,
        cache_enabled=False,
    )


# ─── HTTP Client Fixtures ────────────────────────────────────────


@pytest.fixture
async def http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """Async HTTP client for tests."""
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture
def mock_http():
    """RESPX mock router for HTTP mocking."""
    with respx.mock(assert_all_called=False) as router:
        yield router


# ─── Service Fixtures ────────────────────────────────────────────


@pytest.fixture
def service(http_client, mock_settings):
    """Metadata service with the default providers and mock credentials."""
    from embed_resolver.service import MetadataService

    return MetadataService(http_client, config=mock_settings)


@pytest.fixture
def context(service):
    """Request context bound to the test service."""
    return service.create_context()


@pytest.fixture
def imgur_provider(mock_settings):
    """Imgur provider with a mock client id."""
    from embed_resolver.providers.imgur import ImgurProvider

    return ImgurProvider(client_id=mock_settings.imgur_client_id)


# ─── Sample Data Fixtures ────────────────────────────────────────


def _imgur_image(image_id: str, **extra: Any) -> dict[str, Any]:
    image = {
        "id": image_id,
        "title": None,
        "description": None,
        "link": f"https://i.imgur.com/{image_id}.jpg",
        "width": 800,
        "height": 600,
        "animated": False,
        "nsfw": False,
    }
    image.update(extra)
    return image


@pytest.fixture
def sample_imgur_album() -> dict[str, Any]:
    """Imgur album with three images whose cover is the second one."""
    return {
        "data": {
            "id": "ABCDE",
            "title": "Holiday",
            "description": "Three pictures",
            "cover": "img2",
            "images": [_imgur_image("img1"), _imgur_image("img2"), _imgur_image("img3")],
        },
        "success": True,
        "status": 200,
    }


@pytest.fixture
def sample_imgur_image() -> dict[str, Any]:
    """Single Imgur image."""
    return {
        "data": _imgur_image("XYZ12", title="A cat", description="Sleeping"),
        "success": True,
        "status": 200,
    }


@pytest.fixture
def sample_tweet_response() -> dict[str, Any]:
    """Twitter API v2 tweet lookup with two photos and an author expansion."""
    return {
        "data": {
            "id": "1234567890",
            "text": "Look at these",
            "author_id": "42",
            "possibly_sensitive": False,
            "attachments": {"media_keys": ["3_2", "3_1"]},
        },
        "includes": {
            "users": [
                {
                    "id": "42",
                    "name": "Example User",
                    "username": "ExampleUser",
                    "profile_image_url": "https://pbs.twimg.com/profile_images/42/avatar.jpg",
                }
            ],
            "media": [
                {
                    "media_key": "3_1",
                    "type": "photo",
                    "url": "https://pbs.twimg.com/media/one.jpg",
                    "width": 1200,
                    "height": 800,
                },
                {
                    "media_key": "3_2",
                    "type": "video",
                    "preview_image_url": "https://pbs.twimg.com/media/two.jpg",
                    "width": 1280,
                    "height": 720,
                    "variants": [
                        {"content_type": "application/x-mpegURL", "url": "https://video/pl.m3u8"},
                        {"content_type": "video/mp4", "bit_rate": 256000, "url": "https://video/low.mp4"},
                        {"content_type": "video/mp4", "bit_rate": 2176000, "url": "https://video/high.mp4"},
                    ],
                },
            ],
        },
    }


@pytest.fixture
def sample_html_content() -> str:
    """Sample HTML page with Open Graph tags."""
    return """
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <meta charset="UTF-8">
        <title>Fallback Title</title>
        <meta property="og:title" content="Test Page Title">
        <meta property="og:description" content="Test page description">
        <meta property="og:site_name" content="Example">
        <meta property="og:image" content="/images/cover.jpg">
        <meta property="og:image:width" content="640">
        <meta property="og:image:height" content="480">
        <meta name="author" content="Jane Doe">
        <link rel="canonical" href="https://example.com/article">
    </head>
    <body>
        <h1>Welcome to Test Page</h1>
    </body>
    </html>
    """
