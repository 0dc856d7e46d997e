"""Base protocol for metadata providers."""

from abc import abstractmethod
from typing import Protocol, runtime_checkable

from embed_resolver.metadata.base import Metadata


@runtime_checkable
class MetadataProvider(Protocol):
    """
    Protocol for metadata providers.

    A provider recognizes the URLs of one external source and builds the
    resolver for them. All providers must implement this interface.
    """

    @property
    def name(self) -> str:
        """Return the provider name."""
        ...

    @property
    def is_configured(self) -> bool:
        """Return True if the provider is properly configured."""
        ...

    @abstractmethod
    def can_handle(self, url: str) -> bool:
        """
        Check whether this provider recognizes a URL.

        Args:
            url: Requested URL

        Returns:
            True if create() should be used for this URL
        """
        ...

    @abstractmethod
    def create(self, url: str) -> Metadata:
        """
        Build a resolver for a URL. No network I/O happens here.

        Args:
            url: Requested URL accepted by can_handle()

        Returns:
            A fresh, unresolved Metadata instance
        """
        ...
