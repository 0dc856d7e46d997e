"""niconico metadata provider."""

import re

from embed_resolver.exceptions import MalformedInputError
from embed_resolver.metadata.nicovideo import NicovideoMetadata

WATCH_URL_PATTERN = re.compile(
    r"^https?://(?:(?:www\.|sp\.)?nicovideo\.jp/watch/|nico\.ms/)sm(?P<video_id>\d+)"
)


class NicovideoProvider:
    """niconico video provider. No credential required."""

    @property
    def name(self) -> str:
        """Return the provider name."""
        return "nicovideo"

    @property
    def is_configured(self) -> bool:
        """Return True (no credential needed)."""
        return True

    def can_handle(self, url: str) -> bool:
        return WATCH_URL_PATTERN.match(url) is not None

    def create(self, url: str) -> NicovideoMetadata:
        m = WATCH_URL_PATTERN.match(url)
        if m is None:
            raise MalformedInputError(url, "Not a niconico watch URL")
        return NicovideoMetadata(url, video_id=int(m.group("video_id")))
