"""imgur.com resolver."""

import re
from enum import Enum
from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

import httpx
import structlog
from pydantic import ValidationError as PydanticValidationError

from embed_resolver.exceptions import UpstreamEmptyError
from embed_resolver.metadata.base import RequestContext, ensure_success, send
from embed_resolver.metadata.unknown import UnknownMetadata
from embed_resolver.models.embed import EmbedData, EmbedDataType
from embed_resolver.models.imgur import ImgurAlbum, ImgurImage

if TYPE_CHECKING:
    from embed_resolver.providers.imgur import ImgurProvider

logger = structlog.get_logger(__name__)

IMGUR_API_BASE_URL = "https://api.imgur.com/3"
IMGUR_HOSTS = {"imgur.com", "www.imgur.com", "m.imgur.com", "i.imgur.com"}

# Statuses that mean our credential is unusable for now
FAULT_STATUS_CODES = {401, 403, 429}

_HASH = r"[A-Za-z0-9]{5,}"
_ALBUM_PATH = re.compile(rf"^/a/(?P<hash>{_HASH})/?$")
_GALLERY_PATH = re.compile(rf"^/(?:gallery|t/[^/]+)/(?:[^/]*-)?(?P<hash>{_HASH})/?$")
_IMAGE_PATH = re.compile(rf"^/(?P<hash>{_HASH})(?:\.[A-Za-z0-9]+)?/?$")

# Site pages that look like image hashes
RESERVED_PATHS = {"gallery", "upload", "signin", "register", "search", "about", "emerald"}


class ImgurType(str, Enum):
    """Kind of imgur URL."""

    UNKNOWN = "unknown"
    IMAGE = "image"
    ALBUM = "album"
    GALLERY = "gallery"


def parse_imgur_url(url: str) -> tuple[ImgurType, str | None]:
    """
    Classify an imgur URL and extract its content hash.

    Returns:
        (type, hash); (UNKNOWN, None) when the URL is not recognized
    """
    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()
    if host not in IMGUR_HOSTS:
        return ImgurType.UNKNOWN, None

    path = parsed.path
    if host == "i.imgur.com":
        m = _IMAGE_PATH.match(path)
        return (ImgurType.IMAGE, m.group("hash")) if m else (ImgurType.UNKNOWN, None)

    for kind, pattern in (
        (ImgurType.ALBUM, _ALBUM_PATH),
        (ImgurType.GALLERY, _GALLERY_PATH),
        (ImgurType.IMAGE, _IMAGE_PATH),
    ):
        m = pattern.match(path)
        if m and m.group("hash").lower() not in RESERVED_PATHS:
            return kind, m.group("hash")
    return ImgurType.UNKNOWN, None


class _ApiFaulted(Exception):
    """The Imgur API rejected our credential."""


class ImgurMetadata(UnknownMetadata):
    """
    Resolves images, albums and galleries through the Imgur API.

    Falls back to scraping the page when the API is not configured, is cooling
    down after a credential fault, or returns nothing usable.
    """

    def __init__(
        self,
        url: str,
        provider: "ImgurProvider | None" = None,
        imgur_type: ImgurType | None = None,
        hash: str | None = None,
    ) -> None:
        super().__init__(url)
        self.provider = provider
        if imgur_type is None:
            imgur_type, hash = parse_imgur_url(url)
        self.imgur_type = imgur_type
        self.hash = hash

    async def _fetch_once(self, context: RequestContext) -> EmbedData:
        provider = self.provider
        client_id = provider.client_id if provider is not None else None

        if not client_id:
            logger.debug("imgur_api_skipped", url=self.url, reason="not_configured")
        elif provider is not None and provider.is_faulted(context.error_response_cache_age):
            logger.debug("imgur_api_skipped", url=self.url, reason="cooling_down")
        else:
            try:
                data = await self._fetch_api(context, client_id)
            except UpstreamEmptyError as e:
                logger.info("imgur_api_empty", url=self.url, reason=e.message)
                data = None
            except _ApiFaulted as e:
                if provider is not None:
                    provider.record_fault()
                logger.warning("imgur_api_faulted", url=self.url, error=str(e))
                data = None

            if data is not None:
                return data

        data = await self._fetch_html(context)
        data.type = EmbedDataType.SINGLE_IMAGE
        return data

    async def _fetch_api(self, context: RequestContext, client_id: str) -> EmbedData | None:
        if self.imgur_type == ImgurType.UNKNOWN or not self.hash:
            return None
        if self.imgur_type == ImgurType.IMAGE:
            return await self._fetch_image(context, client_id)
        if self.imgur_type == ImgurType.ALBUM:
            return await self._fetch_album(context, client_id)
        return await self._fetch_gallery(context, client_id)

    async def _get(self, context: RequestContext, path: str, client_id: str) -> httpx.Response:
        url = f"{IMGUR_API_BASE_URL}/{path}"
        response = await send(
            context.http_client,
            "GET",
            url,
            headers={
                "Authorization": f"Client-ID {client_id}",
                "Accept": "application/json",
            },
        )
        logger.debug("imgur_request", url=url, status_code=response.status_code)
        if response.status_code in FAULT_STATUS_CODES:
            raise _ApiFaulted(f"HTTP {response.status_code} from {url}")
        return response

    def _payload(self, response: httpx.Response) -> Any:
        ensure_success(response)
        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamEmptyError(self.url, f"Unreadable Imgur response: {e}") from e
        data = body.get("data") if isinstance(body, dict) else None
        if not data:
            raise UpstreamEmptyError(self.url, "Imgur returned no data")
        return data

    def _parse_image(self, response: httpx.Response) -> ImgurImage:
        try:
            return ImgurImage.model_validate(self._payload(response))
        except PydanticValidationError as e:
            raise UpstreamEmptyError(self.url, f"Unexpected image payload: {e}") from e

    def _parse_album(self, response: httpx.Response) -> ImgurAlbum:
        try:
            album = ImgurAlbum.model_validate(self._payload(response))
        except PydanticValidationError as e:
            raise UpstreamEmptyError(self.url, f"Unexpected album payload: {e}") from e
        if not album.images:
            raise UpstreamEmptyError(self.url, "Album has no images")
        return album

    async def _fetch_image(self, context: RequestContext, client_id: str) -> EmbedData:
        response = await self._get(context, f"image/{self.hash}", client_id)
        return image_embed_data(self._parse_image(response))

    async def _fetch_album(self, context: RequestContext, client_id: str) -> EmbedData:
        response = await self._get(context, f"album/{self.hash}", client_id)
        return album_embed_data(self._parse_album(response))

    async def _fetch_gallery(self, context: RequestContext, client_id: str) -> EmbedData:
        response = await self._get(context, f"gallery/album/{self.hash}", client_id)
        if response.status_code != 404:
            return album_embed_data(self._parse_album(response))

        # Not an album: the same hash is served by the gallery image endpoint
        response = await self._get(context, f"gallery/image/{self.hash}", client_id)
        return image_embed_data(self._parse_image(response))


def image_embed_data(image: ImgurImage) -> EmbedData:
    """Build EmbedData for a single image."""
    media = image.to_media()
    return EmbedData(
        url=media.location,
        type=EmbedDataType.SINGLE_VIDEO if image.animated else EmbedDataType.SINGLE_IMAGE,
        title=image.title,
        description=image.description,
        provider_name="Imgur",
        provider_url="https://imgur.com",
        restriction_policy=media.restriction_policy,
        metadata_image=media,
        medias=[media],
    )


def album_embed_data(album: ImgurAlbum) -> EmbedData:
    """
    Build EmbedData for an album.

    The cover (or the first image) is the metadata image. Albums with more
    than one image become mixed content listing every other image in order;
    a two-image album keeps the cover in front so the list holds both.
    """
    cover = next((image for image in album.images if image.id == album.cover), album.images[0])
    data = image_embed_data(cover)

    update: dict[str, Any] = {
        "url": f"https://imgur.com/a/{album.id}",
        "title": album.title or data.title,
        "description": album.description or data.description,
    }
    if len(album.images) > 1:
        update["type"] = EmbedDataType.MIXED_CONTENT
        others = [image for image in album.images if image is not cover]
        if len(others) < 2:
            others.insert(0, cover)
        update["medias"] = [image.to_media() for image in others]

    return EmbedData.model_validate({**data.model_dump(), **update})
