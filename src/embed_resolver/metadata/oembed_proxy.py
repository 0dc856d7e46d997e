"""Resolver proxying a remote oEmbed endpoint."""

import json
import xml.etree.ElementTree as ET
from typing import Any

import structlog

from embed_resolver.exceptions import UpstreamEmptyError
from embed_resolver.metadata.base import Metadata, RequestContext, ensure_success, send
from embed_resolver.models.embed import EmbedData, EmbedDataType, ImageInfo, Media, MediaType

logger = structlog.get_logger(__name__)

XML_CONTENT_TYPES = ("text/xml", "application/xml")


def _as_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


def _as_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_oembed_xml(text: str) -> dict[str, Any]:
    """Flatten an oEmbed XML document into a key/value map."""
    root = ET.fromstring(text)
    values: dict[str, Any] = {}
    for element in root:
        tag = element.tag.rsplit("}", 1)[-1]
        values[tag] = "".join(element.itertext())
    return values


class OEmbedProxyMetadata(Metadata):
    """
    Fetches a remote oEmbed response and normalizes it.

    Redirects are followed to completion. The body is decoded as XML when the
    endpoint declares an XML content type and as JSON otherwise.
    """

    def __init__(self, url: str, oembed_url: str) -> None:
        super().__init__(url)
        self.oembed_url = oembed_url

    async def _fetch_once(self, context: RequestContext) -> EmbedData:
        response = await send(context.http_client, "GET", self.oembed_url, follow_redirects=True)
        ensure_success(response, self.oembed_url)

        content_type = response.headers.get("content-type", "").split(";")[0].strip().lower()
        try:
            if content_type in XML_CONTENT_TYPES:
                values = parse_oembed_xml(response.text)
            else:
                values = json.loads(response.text)
        except (ET.ParseError, json.JSONDecodeError) as e:
            raise UpstreamEmptyError(self.url, f"Unreadable oEmbed response: {e}") from e

        if not isinstance(values, dict):
            raise UpstreamEmptyError(self.url, "oEmbed response is not an object")

        logger.debug("oembed_response", url=self.url, endpoint=self.oembed_url, keys=sorted(values))
        return self._to_embed_data(values)

    def _to_embed_data(self, values: dict[str, Any]) -> EmbedData:
        metadata_image: Media | None = None
        thumbnail_url = _as_str(values.get("thumbnail_url"))
        if thumbnail_url:
            metadata_image = Media(
                thumbnail=ImageInfo(
                    url=thumbnail_url,
                    width=_as_int(values.get("thumbnail_width")),
                    height=_as_int(values.get("thumbnail_height")),
                )
            )

        cache_age = _as_int(values.get("cache_age"))
        medias: list[Media] = []
        embed_type = EmbedDataType.LINK
        oembed_type = _as_str(values.get("type"))

        if oembed_type == "photo":
            embed_type = EmbedDataType.SINGLE_IMAGE
            photo_url = _as_str(values.get("url"))
            if photo_url:
                medias.append(
                    Media(
                        type=MediaType.IMAGE,
                        thumbnail=ImageInfo(url=photo_url),
                        raw_url=photo_url,
                        location=photo_url,
                    )
                )
        elif oembed_type == "video":
            embed_type = EmbedDataType.SINGLE_VIDEO
            # TODO: extract the player URL from the html parameter
            if thumbnail_url:
                medias.append(
                    Media(
                        type=MediaType.VIDEO,
                        thumbnail=ImageInfo(url=thumbnail_url),
                        raw_url=self.url,
                        location=self.url,
                    )
                )
        elif oembed_type == "rich":
            embed_type = EmbedDataType.RICH

        return EmbedData(
            url=self.url,
            type=embed_type,
            title=_as_str(values.get("title")),
            author_name=_as_str(values.get("author_name")),
            author_url=_as_str(values.get("author_url")),
            provider_name=_as_str(values.get("provider_name")),
            provider_url=_as_str(values.get("provider_url")),
            cache_age=cache_age if cache_age is None or cache_age >= 0 else None,
            metadata_image=metadata_image,
            medias=medias,
        )
