"""Base class for lazily-resolved, fetch-once metadata resolvers."""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx
import structlog

from embed_resolver.exceptions import UpstreamUnavailableError
from embed_resolver.models.embed import EmbedData

if TYPE_CHECKING:
    from embed_resolver.providers.registry import ProviderRegistry
    from embed_resolver.service import MetadataService

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RequestContext:
    """Per-request view of the service handed to every resolver."""

    service: "MetadataService"

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Return the shared HTTP client."""
        return self.service.http_client

    @property
    def registry(self) -> "ProviderRegistry":
        """Return the provider registry."""
        return self.service.registry

    @property
    def error_response_cache_age(self) -> float:
        """Return the cooldown (seconds) applied after an upstream fault."""
        return self.service.error_response_cache_age


class Metadata(ABC):
    """
    A source-bound handle that resolves one URL into EmbedData.

    The first caller of fetch() starts the network work; every other caller,
    concurrent or later, awaits the same task. Once the task finishes, ``data``
    holds the result and the resolver never fetches again.
    """

    def __init__(self, url: str) -> None:
        self.url = url
        self.data: EmbedData | None = None
        self._fetch_task: asyncio.Future[EmbedData] | None = None
        self._lock = asyncio.Lock()

    @property
    def is_resolved(self) -> bool:
        """Return True once data has been populated."""
        return self.data is not None

    async def fetch(self, context: RequestContext) -> EmbedData:
        """
        Resolve the URL, performing network I/O at most once.

        Args:
            context: Request context carrying the shared HTTP client

        Returns:
            The resolved EmbedData (the same object for every caller)

        Raises:
            ResolutionError: If resolution fails
        """
        async with self._lock:
            if self._fetch_task is None:
                if self.data is not None:
                    return self.data
                self._fetch_task = asyncio.ensure_future(self._run(context))
            task = self._fetch_task
        # Shielded so a cancelled caller does not abort the fetch for the others
        return await asyncio.shield(task)

    async def _run(self, context: RequestContext) -> EmbedData:
        logger.debug("metadata_fetch_started", url=self.url, resolver=type(self).__name__)
        data = await self._fetch_once(context)
        self.data = data
        logger.debug(
            "metadata_fetch_completed",
            url=self.url,
            resolver=type(self).__name__,
            type=data.type.value,
            media_count=len(data.medias),
        )
        return data

    @abstractmethod
    async def _fetch_once(self, context: RequestContext) -> EmbedData:
        """Perform the actual resolution. Called at most once per instance."""
        ...


async def send(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    **kwargs: object,
) -> httpx.Response:
    """
    Send a request, wrapping transport failures into UpstreamUnavailableError.

    Status codes are left to the caller.
    """
    try:
        return await client.request(method, url, **kwargs)  # type: ignore[arg-type]
    except httpx.RequestError as e:
        raise UpstreamUnavailableError(url, None, f"Request failed: {e}") from e


def ensure_success(response: httpx.Response, url: str | None = None) -> None:
    """Raise UpstreamUnavailableError for any non-2xx response."""
    if not response.is_success:
        raise UpstreamUnavailableError(
            url or str(response.request.url),
            response.status_code,
            response.text[:200],
        )
