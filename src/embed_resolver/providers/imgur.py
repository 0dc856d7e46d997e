"""imgur.com metadata provider."""

import time

import structlog

from embed_resolver.metadata.imgur import ImgurMetadata, ImgurType, parse_imgur_url

logger = structlog.get_logger(__name__)


class ImgurProvider:
    """
    Imgur image host provider.

    Uses the Imgur API v3 when a client id is configured and scrapes the page
    otherwise. Free tier requires registering an application.

    https://apidocs.imgur.com/
    """

    def __init__(self, client_id: str | None = None) -> None:
        """
        Initialize the Imgur provider.

        Args:
            client_id: Imgur application client id (optional)
        """
        self.client_id = client_id
        # Last time the API rejected our credential; last write wins
        self.last_faulted: float | None = None

    @property
    def name(self) -> str:
        """Return the provider name."""
        return "imgur"

    @property
    def is_configured(self) -> bool:
        """Always True: imgur pages can be scraped without a client id."""
        return True

    def is_faulted(self, cooldown_seconds: float) -> bool:
        """Return True while a recent API fault should suppress API calls."""
        if self.last_faulted is None:
            return False
        return time.time() - self.last_faulted < cooldown_seconds

    def record_fault(self) -> None:
        """Remember that the API just rejected our credential."""
        self.last_faulted = time.time()
        logger.info("imgur_fault_recorded", last_faulted=self.last_faulted)

    def can_handle(self, url: str) -> bool:
        imgur_type, _ = parse_imgur_url(url)
        return imgur_type != ImgurType.UNKNOWN

    def create(self, url: str) -> ImgurMetadata:
        imgur_type, hash = parse_imgur_url(url)
        return ImgurMetadata(url, provider=self, imgur_type=imgur_type, hash=hash)
