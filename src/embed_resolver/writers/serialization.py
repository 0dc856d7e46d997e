"""Serialization walk from EmbedData onto any ResponseWriter."""

from embed_resolver.models.embed import EmbedData, ImageInfo, Media
from embed_resolver.writers.base import ResponseWriter

OEMBED_VERSION = "1.0"


def _write_optional(writer: ResponseWriter, name: str, value: object) -> None:
    if value is not None:
        writer.write_property(name, value)


def _write_image_info(writer: ResponseWriter, image: ImageInfo) -> None:
    writer.write_property("url", image.url)
    _write_optional(writer, "width", image.width)
    _write_optional(writer, "height", image.height)


def _write_media_fields(writer: ResponseWriter, media: Media) -> None:
    writer.write_property("type", media.type)
    if media.thumbnail is not None:
        writer.start_object_property("thumbnail")
        _write_image_info(writer, media.thumbnail)
        writer.end_object_property()
    _write_optional(writer, "raw_url", media.raw_url)
    _write_optional(writer, "location", media.location)
    writer.write_property("restriction_policy", media.restriction_policy)


def write_embed_data(writer: ResponseWriter, data: EmbedData, name: str = "oembed") -> None:
    """
    Write an EmbedData as an oEmbed-style response.

    The response is always terminated, even when writing fails midway.

    Args:
        writer: Target writer
        data: Data to serialize
        name: Root element name (used by XML only)
    """
    writer.start_response(name)
    try:
        writer.write_property("version", OEMBED_VERSION)
        writer.write_property("type", data.type)
        _write_optional(writer, "url", data.url)
        _write_optional(writer, "title", data.title)
        _write_optional(writer, "description", data.description)
        _write_optional(writer, "author_name", data.author_name)
        _write_optional(writer, "author_url", data.author_url)
        _write_optional(writer, "provider_name", data.provider_name)
        _write_optional(writer, "provider_url", data.provider_url)
        _write_optional(writer, "cache_age", data.cache_age)
        writer.write_property("restriction_policy", data.restriction_policy)

        image = data.metadata_image
        if image is not None:
            if image.thumbnail is not None:
                writer.write_property("thumbnail_url", image.thumbnail.url)
                _write_optional(writer, "thumbnail_width", image.thumbnail.width)
                _write_optional(writer, "thumbnail_height", image.thumbnail.height)
            writer.start_object_property("metadata_image")
            _write_media_fields(writer, image)
            writer.end_object_property()

        writer.start_array_property("medias")
        for media in data.medias:
            writer.start_object("media")
            _write_media_fields(writer, media)
            writer.end_object()
        writer.end_array_property()
    finally:
        writer.end_response()
