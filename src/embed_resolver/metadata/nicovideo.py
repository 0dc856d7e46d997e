"""niconico video resolver."""

import xml.etree.ElementTree as ET

import structlog

from embed_resolver.exceptions import UpstreamEmptyError
from embed_resolver.metadata.base import RequestContext, ensure_success, send
from embed_resolver.metadata.unknown import UnknownMetadata
from embed_resolver.models.embed import (
    EmbedData,
    EmbedDataType,
    ImageInfo,
    Media,
    MediaType,
    RestrictionPolicy,
)

logger = structlog.get_logger(__name__)

THUMBINFO_URL = "https://ext.nicovideo.jp/api/getthumbinfo/sm{video_id}"
WATCH_URL = "https://www.nicovideo.jp/watch/sm{video_id}"


def _text(thumb: ET.Element, tag: str) -> str | None:
    element = thumb.find(tag)
    if element is None or element.text is None:
        return None
    return element.text.strip() or None


class NicovideoMetadata(UnknownMetadata):
    """
    Resolves a niconico video through the getthumbinfo API.

    Deleted or private videos answer with status="fail"; those fall back to
    scraping the watch page.
    """

    def __init__(self, url: str, video_id: int) -> None:
        super().__init__(url)
        self.video_id = video_id

    async def _fetch_once(self, context: RequestContext) -> EmbedData:
        try:
            return await self._fetch_thumbinfo(context)
        except UpstreamEmptyError as e:
            logger.info("nicovideo_thumbinfo_empty", url=self.url, reason=e.message)
        return await self._fetch_html(context)

    async def _fetch_thumbinfo(self, context: RequestContext) -> EmbedData:
        api_url = THUMBINFO_URL.format(video_id=self.video_id)
        response = await send(context.http_client, "GET", api_url)
        ensure_success(response, api_url)

        try:
            root = ET.fromstring(response.content)
        except ET.ParseError as e:
            raise UpstreamEmptyError(self.url, f"Unreadable thumbinfo: {e}") from e

        thumb = root.find("thumb")
        if root.get("status") != "ok" or thumb is None:
            code = root.findtext("error/code") or "UNKNOWN"
            raise UpstreamEmptyError(self.url, f"getthumbinfo failed: {code}")

        watch_url = _text(thumb, "watch_url") or WATCH_URL.format(video_id=self.video_id)
        thumbnail_url = _text(thumb, "thumbnail_url")

        author_name = _text(thumb, "user_nickname") or _text(thumb, "ch_name")
        author_url = None
        user_id = _text(thumb, "user_id")
        channel_id = _text(thumb, "ch_id")
        if user_id:
            author_url = f"https://www.nicovideo.jp/user/{user_id}"
        elif channel_id:
            author_url = f"https://ch.nicovideo.jp/channel/ch{channel_id}"

        media = Media(
            type=MediaType.VIDEO,
            thumbnail=ImageInfo(url=thumbnail_url) if thumbnail_url else None,
            raw_url=watch_url,
            location=watch_url,
            restriction_policy=RestrictionPolicy.UNKNOWN,
        )

        return EmbedData(
            url=watch_url,
            type=EmbedDataType.SINGLE_VIDEO,
            title=_text(thumb, "title"),
            description=_text(thumb, "description"),
            author_name=author_name,
            author_url=author_url,
            provider_name="niconico",
            provider_url="https://www.nicovideo.jp",
            metadata_image=media,
            medias=[media],
        )
