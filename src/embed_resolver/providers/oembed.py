"""Generic oEmbed proxy provider."""

import re
from dataclasses import dataclass, field
from urllib.parse import urlencode

from embed_resolver.exceptions import MalformedInputError
from embed_resolver.metadata.oembed_proxy import OEmbedProxyMetadata


@dataclass(frozen=True)
class OEmbedEndpoint:
    """A remote oEmbed endpoint and the URL schemes it serves."""

    name: str
    url: str
    patterns: list[re.Pattern[str]] = field(default_factory=list)

    def matches(self, url: str) -> bool:
        return any(p.match(url) for p in self.patterns)

    def request_url(self, url: str) -> str:
        """Build the endpoint request for a resource URL."""
        separator = "&" if "?" in self.url else "?"
        return f"{self.url}{separator}{urlencode({'url': url, 'format': 'json'})}"


def _patterns(*sources: str) -> list[re.Pattern[str]]:
    return [re.compile(s, re.IGNORECASE) for s in sources]


DEFAULT_ENDPOINTS: list[OEmbedEndpoint] = [
    OEmbedEndpoint(
        name="youtube",
        url="https://www.youtube.com/oembed",
        patterns=_patterns(
            r"^https?://(?:www\.|m\.)?youtube\.com/(?:watch\?|shorts/|playlist\?)",
            r"^https?://youtu\.be/",
        ),
    ),
    OEmbedEndpoint(
        name="vimeo",
        url="https://vimeo.com/api/oembed.json",
        patterns=_patterns(r"^https?://(?:www\.|player\.)?vimeo\.com/(?:video/)?\d+"),
    ),
    OEmbedEndpoint(
        name="flickr",
        url="https://www.flickr.com/services/oembed/",
        patterns=_patterns(r"^https?://(?:www\.)?flickr\.com/photos/", r"^https?://flic\.kr/p/"),
    ),
    OEmbedEndpoint(
        name="soundcloud",
        url="https://soundcloud.com/oembed",
        patterns=_patterns(r"^https?://(?:www\.|m\.)?soundcloud\.com/[^/]+/"),
    ),
    OEmbedEndpoint(
        name="spotify",
        url="https://open.spotify.com/oembed",
        patterns=_patterns(
            r"^https?://open\.spotify\.com/(?:track|album|playlist|artist|episode|show)/"
        ),
    ),
]


class OEmbedProvider:
    """
    Proxies URLs of sites that publish an oEmbed endpoint.

    https://oembed.com/
    """

    def __init__(self, endpoints: list[OEmbedEndpoint] | None = None) -> None:
        """
        Initialize the oEmbed provider.

        Args:
            endpoints: Known endpoints in priority order (defaults to DEFAULT_ENDPOINTS)
        """
        self._endpoints = list(DEFAULT_ENDPOINTS if endpoints is None else endpoints)

    @property
    def name(self) -> str:
        """Return the provider name."""
        return "oembed"

    @property
    def is_configured(self) -> bool:
        """Return True if at least one endpoint is known."""
        return bool(self._endpoints)

    @property
    def endpoints(self) -> list[OEmbedEndpoint]:
        """Return the known endpoints."""
        return self._endpoints

    def find_endpoint(self, url: str) -> OEmbedEndpoint | None:
        """Return the first endpoint serving a URL."""
        for endpoint in self._endpoints:
            if endpoint.matches(url):
                return endpoint
        return None

    def can_handle(self, url: str) -> bool:
        return self.find_endpoint(url) is not None

    def create(self, url: str) -> OEmbedProxyMetadata:
        endpoint = self.find_endpoint(url)
        if endpoint is None:
            raise MalformedInputError(url, "No oEmbed endpoint serves this URL")
        return OEmbedProxyMetadata(url, oembed_url=endpoint.request_url(url))
