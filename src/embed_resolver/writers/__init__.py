"""Response writers module."""

from embed_resolver.writers.base import ResponseWriter
from embed_resolver.writers.json_writer import JsonResponseWriter
from embed_resolver.writers.serialization import write_embed_data
from embed_resolver.writers.xml_writer import XmlResponseWriter

__all__ = [
    "ResponseWriter",
    "JsonResponseWriter",
    "XmlResponseWriter",
    "write_embed_data",
]
