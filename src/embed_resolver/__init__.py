"""Resolve web URLs into normalized embeddable content descriptions."""

__version__ = "0.1.0"
