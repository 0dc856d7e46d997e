"""Provider registry dispatching URLs to resolvers."""

from typing import Any

import structlog

from embed_resolver.metadata.base import Metadata
from embed_resolver.providers.base import MetadataProvider

logger = structlog.get_logger(__name__)


class ProviderRegistry:
    """
    Ordered set of metadata providers.

    Providers are consulted in registration order and the first configured
    provider that accepts a URL builds its resolver. Register source-specific
    providers before broader ones. The registry is built once at startup and
    is read-only afterwards.
    """

    def __init__(self, providers: list[MetadataProvider]) -> None:
        """
        Initialize the registry with a list of providers.

        Args:
            providers: List of metadata providers in priority order
        """
        self._providers = list(providers)

    @property
    def providers(self) -> list[MetadataProvider]:
        """Return list of registered providers."""
        return self._providers

    @property
    def available_providers(self) -> list[str]:
        """Return names of configured providers."""
        return [p.name for p in self._providers if p.is_configured]

    def find(self, url: str) -> MetadataProvider | None:
        """Return the first configured provider accepting a URL."""
        for provider in self._providers:
            if not provider.is_configured:
                continue
            if provider.can_handle(url):
                return provider
        return None

    def match(self, url: str) -> Metadata | None:
        """
        Build the resolver for a URL.

        Args:
            url: Requested URL

        Returns:
            A fresh resolver, or None when no provider accepts the URL
        """
        provider = self.find(url)
        if provider is None:
            logger.debug("no_provider_matched", url=url)
            return None

        logger.debug("provider_matched", url=url, provider=provider.name)
        return provider.create(url)

    def get_provider(self, name: str) -> MetadataProvider | None:
        """Get a provider by name."""
        for provider in self._providers:
            if provider.name == name:
                return provider
        return None

    def get_status(self) -> dict[str, Any]:
        """Get status information for all providers."""
        return {
            "providers": [
                {
                    "name": p.name,
                    "configured": p.is_configured,
                }
                for p in self._providers
            ],
            "available_count": len(self.available_providers),
        }
