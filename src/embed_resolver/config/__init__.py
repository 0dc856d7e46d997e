"""Configuration module."""

from embed_resolver.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
