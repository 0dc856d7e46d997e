"""pixiv metadata provider."""

import re

from embed_resolver.exceptions import MalformedInputError
from embed_resolver.metadata.pixiv import PixivMetadata

ILLUST_URL_PATTERN = re.compile(
    r"^https?://(?:www\.)?pixiv\.net/"
    r"(?:member_illust\.php\?(?:.*&)?illust_id=(?P<legacy_id>\d+)|(?:[a-z]{2}/)?artworks/(?P<id>\d+))"
)


class PixivProvider:
    """pixiv illustration provider. Pages are scraped; no credential required."""

    @property
    def name(self) -> str:
        """Return the provider name."""
        return "pixiv"

    @property
    def is_configured(self) -> bool:
        """Return True (no credential needed)."""
        return True

    def can_handle(self, url: str) -> bool:
        return ILLUST_URL_PATTERN.match(url) is not None

    def create(self, url: str) -> PixivMetadata:
        m = ILLUST_URL_PATTERN.match(url)
        if m is None:
            raise MalformedInputError(url, "Not a pixiv illustration URL")
        return PixivMetadata(url, illust_id=int(m.group("id") or m.group("legacy_id")))
