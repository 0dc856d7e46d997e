"""Pydantic models for Embed Resolver."""

from embed_resolver.models.embed import (
    EmbedData,
    EmbedDataType,
    ImageInfo,
    Media,
    MediaType,
    RestrictionPolicy,
)

__all__ = [
    "EmbedData",
    "EmbedDataType",
    "ImageInfo",
    "Media",
    "MediaType",
    "RestrictionPolicy",
]
