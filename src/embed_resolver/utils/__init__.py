"""Utility modules."""

from embed_resolver.utils.cache import EmbedCache, LRUCache

__all__ = ["EmbedCache", "LRUCache"]
