"""Generic HTML fallback resolver."""

from urllib.parse import urljoin

import structlog
from bs4 import BeautifulSoup

from embed_resolver.metadata.base import Metadata, RequestContext, ensure_success, send
from embed_resolver.models.embed import EmbedData, EmbedDataType, ImageInfo, Media, MediaType

logger = structlog.get_logger(__name__)

HTML_ACCEPT = "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8"


def _meta(document: BeautifulSoup, *keys: str) -> str | None:
    """Return the first non-empty meta content matching property or name."""
    for key in keys:
        for attr in ("property", "name"):
            tag = document.find("meta", attrs={attr: key})
            if tag is not None:
                content = tag.get("content")
                if isinstance(content, str) and content.strip():
                    return content.strip()
    return None


def _link_href(document: BeautifulSoup, rel: str) -> str | None:
    tag = document.find("link", rel=rel)
    if tag is not None:
        href = tag.get("href")
        if isinstance(href, str) and href.strip():
            return href.strip()
    return None


def _to_int(value: str | None) -> int | None:
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


class UnknownMetadata(Metadata):
    """
    Resolves any web page by scraping its markup.

    Used when no provider matches a URL and as the fallback path of
    source-specific resolvers. The result is always a single_image embed whose
    media list holds the extracted representative image, or nothing when the
    page has none. Subclasses post-process the parsed document in load_html().
    """

    async def _fetch_once(self, context: RequestContext) -> EmbedData:
        return await self._fetch_html(context)

    async def _fetch_html(self, context: RequestContext) -> EmbedData:
        response = await send(
            context.http_client,
            "GET",
            self.url,
            headers={"Accept": HTML_ACCEPT},
            follow_redirects=True,
        )
        ensure_success(response, self.url)

        final_url = str(response.url)
        content_type = response.headers.get("content-type", "").split(";")[0].strip().lower()

        if content_type.startswith("image/"):
            media = Media(
                type=MediaType.IMAGE,
                thumbnail=ImageInfo(url=final_url),
                raw_url=final_url,
                location=final_url,
            )
            self.data = EmbedData(
                url=final_url,
                type=EmbedDataType.SINGLE_IMAGE,
                metadata_image=media,
                medias=[media],
            )
            return self.data

        document = BeautifulSoup(response.text, "html.parser")
        self.data = self._extract(document, final_url)
        self.load_html(document)

        logger.debug(
            "html_extracted",
            url=self.url,
            title=self.data.title,
            has_image=self.data.metadata_image is not None,
        )
        return self.data

    def _extract(self, document: BeautifulSoup, page_url: str) -> EmbedData:
        title = _meta(document, "og:title", "twitter:title")
        if not title and document.title is not None:
            title = document.title.get_text().strip() or None

        canonical = _meta(document, "og:url") or _link_href(document, "canonical")
        url = urljoin(page_url, canonical) if canonical else page_url

        image_url = _meta(document, "og:image", "og:image:url", "twitter:image") or _link_href(
            document, "image_src"
        )

        media: Media | None = None
        if image_url:
            image_url = urljoin(page_url, image_url)
            media = Media(
                type=MediaType.IMAGE,
                thumbnail=ImageInfo(
                    url=image_url,
                    width=_to_int(_meta(document, "og:image:width")),
                    height=_to_int(_meta(document, "og:image:height")),
                ),
                raw_url=image_url,
                location=url,
            )

        return EmbedData(
            url=url,
            type=EmbedDataType.SINGLE_IMAGE,
            title=title,
            description=_meta(document, "og:description", "twitter:description", "description"),
            author_name=_meta(document, "author"),
            provider_name=_meta(document, "og:site_name"),
            metadata_image=media,
            medias=[media] if media is not None else [],
        )

    def load_html(self, document: BeautifulSoup) -> None:
        """Hook for subclasses to adjust ``self.data`` using the parsed page."""
        return None
