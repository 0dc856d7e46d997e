"""
End-to-end tests for the HTTP server using Starlette TestClient.
Upstream sites are mocked with respx; the ASGI app itself is driven for real.
"""

import xml.etree.ElementTree as ET

import httpx
import pytest
from httpx import Response
from starlette.testclient import TestClient

from embed_resolver.app import create_app
from embed_resolver.service import MetadataService

PAGE_URL = "https://example.com/page"


@pytest.fixture
def client(mock_settings):
    """Test client around an app with an injected service."""
    service = MetadataService(httpx.AsyncClient(), config=mock_settings)
    with TestClient(create_app(service=service)) as client:
        yield client


@pytest.fixture
def page_route(mock_http, sample_html_content):
    return mock_http.get(PAGE_URL).mock(
        return_value=Response(200, text=sample_html_content, headers={"Content-Type": "text/html"})
    )


class TestInfoEndpoints:
    """Tests for the informational endpoints."""

    def test_root_endpoint(self, client):
        """Test root endpoint returns server info."""
        response = client.get("/")
        assert response.status_code == 200

        data = response.json()
        assert data["name"] == "Embed Resolver"
        assert "version" in data
        assert "oembed" in data["endpoints"]

    def test_health_endpoint_lists_providers(self, client):
        response = client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["healthy"] is True
        assert [p["name"] for p in data["providers"]] == [
            "twitter",
            "imgur",
            "nicovideo",
            "pixiv",
            "oembed",
        ]


class TestOEmbedEndpoint:
    """Tests for /oembed."""

    def test_json_response(self, client, page_route):
        response = client.get("/oembed", params={"url": PAGE_URL})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        data = response.json()
        assert data["type"] == "single_image"
        assert data["title"] == "Test Page Title"

    def test_xml_response(self, client, page_route):
        response = client.get("/oembed", params={"url": PAGE_URL, "format": "xml"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/xml")
        root = ET.fromstring(response.content)
        assert root.tag == "oembed"
        assert root.findtext("version") == "1.0"

    def test_missing_url(self, client):
        response = client.get("/oembed")
        assert response.status_code == 400

    def test_invalid_url(self, client):
        response = client.get("/oembed", params={"url": "ftp://example.com/file"})
        assert response.status_code == 400
        assert "http" in response.json()["error"]

    def test_unsupported_format(self, client, page_route):
        response = client.get("/oembed", params={"url": PAGE_URL, "format": "yaml"})

        assert response.status_code == 501
        assert page_route.call_count == 0

    def test_upstream_failure(self, client, mock_http):
        mock_http.get(PAGE_URL).mock(return_value=Response(500, text="boom"))

        response = client.get("/oembed", params={"url": PAGE_URL})
        assert response.status_code == 502

    def test_unresolvable_url(self, client):
        response = client.get(
            "/oembed", params={"url": "https://twitter.com/jack/status/not-a-number"}
        )
        assert response.status_code == 404
