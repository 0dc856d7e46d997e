"""Metadata resolvers module."""

from embed_resolver.metadata.base import Metadata, RequestContext
from embed_resolver.metadata.unknown import UnknownMetadata

__all__ = [
    "Metadata",
    "RequestContext",
    "UnknownMetadata",
]
