"""Pytest configuration and shared fixtures."""

import httpx
import pytest

from lib.wordpress.api_client import WordPressApiClient
from lib.wordpress.config import WordPressConfig

BASE_URL = "https://cms.example.com"
API_BASE = f"{BASE_URL}/wp-json/wp/v2"


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "online: mark test as online test (hits a real CMS)")


# =============================================================================
# Payload builders
# =============================================================================


def _room_payload(id=17, slug="deluxe", title="Deluxe Room", **overrides) -> dict:
    """A rooms endpoint item the way WordPress + ACF serializes it."""
    payload = {
        "id": id,
        "slug": slug,
        "title": {"rendered": title},
        "content": {"rendered": "<p>Ocean views. King bed and balcony.</p>"},
        "excerpt": {"rendered": "<p>Our finest room. Sleeps two.</p>"},
        "acf": {"price_per_night": 250, "max_guests": 2, "bed_type": "King"},
        "featured_media": 0,
    }
    payload.update(overrides)
    return payload


def _json_response(data, status_code=200) -> httpx.Response:
    return httpx.Response(status_code, json=data)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def wp_config():
    return WordPressConfig(base_url=BASE_URL, environment="test")


@pytest.fixture
def make_client(wp_config):
    """Build a WordPressApiClient whose HTTP traffic goes to handler(request)."""
    def _make(handler, config=None):
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        client = WordPressApiClient(config or wp_config, http_client=http_client)
        return client

    return _make


@pytest.fixture
def room_payload():
    return _room_payload


@pytest.fixture
def json_response():
    return _json_response
