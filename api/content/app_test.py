"""Tests for app startup and middleware."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

from api.content import app as app_module
from api.content.app import create_app
from lib.wordpress.config import WordPressConfig
from lib.wordpress.errors import ConfigurationError


class TestLifespan:
    def test_unset_url_fails_startup_and_closes_client(self):
        with patch.object(app_module.httpx, "AsyncClient") as client_cls:
            client_cls.return_value.aclose = AsyncMock()
            app = create_app(config=WordPressConfig(environment="development"))

            with pytest.raises(ConfigurationError):
                with TestClient(app):
                    pass

        client_cls.return_value.aclose.assert_awaited_once()

    def test_injected_client_left_open(self, wp_config):
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json=[])))

        with TestClient(create_app(config=wp_config, http_client=http_client)):
            pass

        assert http_client.is_closed is False


class TestCors:
    def test_any_origin_without_credentials(self, wp_config):
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json=[])))

        with TestClient(create_app(config=wp_config, http_client=http_client)) as client:
            resp = client.get(
                "/api/wp",
                params={"path": "posts"},
                headers={"Origin": "https://evil.example.com"},
            )

        assert resp.headers["access-control-allow-origin"] == "*"
        assert "access-control-allow-credentials" not in resp.headers
