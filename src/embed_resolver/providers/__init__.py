"""Metadata providers module."""

from embed_resolver.providers.base import MetadataProvider
from embed_resolver.providers.registry import ProviderRegistry

__all__ = [
    "MetadataProvider",
    "ProviderRegistry",
]
