"""
Metadata service: URL in, normalized and serialized embed out.

Owns the provider registry, the shared HTTP client and the cache policy.
"""

import io
import time
from typing import TextIO
from urllib.parse import urlparse

import httpx
import structlog

from embed_resolver.config import Settings, settings as default_settings
from embed_resolver.exceptions import InvalidURLError, UnsupportedFormatError, UpstreamEmptyError
from embed_resolver.metadata.base import Metadata, RequestContext
from embed_resolver.metadata.unknown import UnknownMetadata
from embed_resolver.models.embed import EmbedData
from embed_resolver.providers.base import MetadataProvider
from embed_resolver.providers.registry import ProviderRegistry
from embed_resolver.utils.cache import EmbedCache
from embed_resolver.writers.base import ResponseWriter
from embed_resolver.writers.json_writer import JsonResponseWriter
from embed_resolver.writers.serialization import write_embed_data
from embed_resolver.writers.xml_writer import XmlResponseWriter

logger = structlog.get_logger(__name__)

WRITERS: dict[str, type[ResponseWriter]] = {
    "json": JsonResponseWriter,
    "xml": XmlResponseWriter,
}


def create_providers(config: Settings) -> list[MetadataProvider]:
    """
    Create metadata provider instances based on configuration.

    Args:
        config: Application settings

    Returns:
        Providers in priority order
    """
    from embed_resolver.providers.imgur import ImgurProvider
    from embed_resolver.providers.nicovideo import NicovideoProvider
    from embed_resolver.providers.oembed import OEmbedProvider
    from embed_resolver.providers.pixiv import PixivProvider
    from embed_resolver.providers.twitter import TwitterProvider

    # Source-bound APIs first, generic oEmbed proxy last
    return [
        TwitterProvider(bearer_token=config.twitter_bearer_token),
        ImgurProvider(client_id=config.imgur_client_id),
        NicovideoProvider(),
        PixivProvider(),
        OEmbedProvider(),
    ]


def create_http_client(config: Settings) -> httpx.AsyncClient:
    """Create the HTTP client shared by every resolution."""
    return httpx.AsyncClient(
        limits=httpx.Limits(
            max_connections=config.max_connections,
            max_keepalive_connections=config.max_keepalive_connections,
        ),
        timeout=httpx.Timeout(
            connect=5.0,
            read=config.request_timeout,
            write=10.0,
            pool=5.0,
        ),
        headers={"User-Agent": config.user_agent},
        verify=config.get_ssl_context(),
        http2=True,
    )


def _writer_class(format: str) -> type[ResponseWriter]:
    writer_class = WRITERS.get((format or "").lower())
    if writer_class is None:
        raise UnsupportedFormatError(format)
    return writer_class


def validate_url(url: str) -> str:
    """Return the stripped URL, or raise InvalidURLError."""
    url = (url or "").strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise InvalidURLError(url, "URL must use http or https")
    if not parsed.hostname:
        raise InvalidURLError(url, "URL has no host")
    return url


class MetadataService:
    """
    Resolves URLs into EmbedData and serializes them.

    One instance lives for the whole process; it is the context every
    resolver receives.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        providers: list[MetadataProvider] | None = None,
        config: Settings | None = None,
        cache: EmbedCache | None = None,
    ) -> None:
        """
        Initialize the service.

        Args:
            http_client: Shared HTTP client
            providers: Providers in priority order (defaults from config)
            config: Application settings (defaults to the global settings)
            cache: Result cache (defaults from config)
        """
        self._config = config or default_settings
        self._http_client = http_client
        self._registry = ProviderRegistry(
            providers if providers is not None else create_providers(self._config)
        )
        self._cache = cache or EmbedCache(
            ttl_seconds=self._config.cache_ttl_seconds,
            max_size=self._config.cache_max_size,
            enabled=self._config.cache_enabled,
        )

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Return the shared HTTP client."""
        return self._http_client

    @property
    def registry(self) -> ProviderRegistry:
        """Return the provider registry."""
        return self._registry

    @property
    def cache(self) -> EmbedCache:
        """Return the result cache."""
        return self._cache

    @property
    def error_response_cache_age(self) -> float:
        """Return the cooldown (seconds) applied after an upstream fault."""
        return self._config.error_response_cache_age

    def create_context(self) -> RequestContext:
        """Create the context handed to resolvers."""
        return RequestContext(service=self)

    def resolve(self, url: str) -> Metadata:
        """
        Pick and build the resolver for a URL. No network I/O happens here.

        Args:
            url: Requested URL

        Returns:
            A source-specific resolver, or the generic HTML resolver

        Raises:
            InvalidURLError: If the URL is not an absolute http(s) URL
        """
        url = validate_url(url)
        metadata = self._registry.match(url)
        return metadata if metadata is not None else UnknownMetadata(url)

    async def fetch(self, url: str) -> EmbedData:
        """
        Resolve a URL into EmbedData, using the cache when possible.

        A source-specific resolver that finds nothing usable is replaced by the
        generic HTML resolver.

        Raises:
            InvalidURLError: If the URL is invalid
            ResolutionError: If resolution fails
        """
        url = validate_url(url)
        cached = await self._cache.get(url)
        if cached is not None:
            logger.debug("embed_cache_hit", url=url)
            return cached

        start_time = time.monotonic()
        context = self.create_context()
        metadata = self.resolve(url)

        try:
            data = await metadata.fetch(context)
        except UpstreamEmptyError as e:
            if type(metadata) is UnknownMetadata:
                raise
            logger.info(
                "falling_back_to_html",
                url=url,
                resolver=type(metadata).__name__,
                reason=e.message,
            )
            metadata = UnknownMetadata(url)
            data = await metadata.fetch(context)

        elapsed_ms = (time.monotonic() - start_time) * 1000
        logger.info(
            "embed_resolved",
            url=url,
            resolver=type(metadata).__name__,
            type=data.type.value,
            media_count=len(data.medias),
            elapsed_ms=elapsed_ms,
        )

        await self._cache.set(url, data)
        return data

    @staticmethod
    def create_writer(format: str, stream: TextIO, leave_open: bool = False) -> ResponseWriter:
        """
        Create the writer for a response format.

        Raises:
            UnsupportedFormatError: If format is not json or xml
        """
        return _writer_class(format)(stream, leave_open=leave_open)

    async def render(self, url: str, format: str = "json") -> bytes:
        """
        Resolve a URL and serialize the result.

        Args:
            url: Requested URL
            format: "json" or "xml"

        Returns:
            UTF-8 encoded document
        """
        # Fail on the format before doing any network work
        _writer_class(format)

        data = await self.fetch(url)

        buffer = io.StringIO()
        with self.create_writer(format, buffer, leave_open=True) as writer:
            write_embed_data(writer, data)
        return buffer.getvalue().encode("utf-8")
