"""Twitter / X metadata provider."""

from urllib.parse import urlparse

from embed_resolver.metadata.twitter import TwitterMetadata

TWITTER_HOSTS = {"twitter.com", "www.twitter.com", "mobile.twitter.com", "x.com", "www.x.com"}


class TwitterProvider:
    """
    Twitter / X post provider.

    Requires an API v2 bearer token; without one, posts are scraped by the
    generic HTML resolver instead.

    https://developer.twitter.com/en/docs/twitter-api
    """

    def __init__(self, bearer_token: str | None = None) -> None:
        """
        Initialize the Twitter provider.

        Args:
            bearer_token: Twitter API v2 bearer token
        """
        self._bearer_token = bearer_token

    @property
    def name(self) -> str:
        """Return the provider name."""
        return "twitter"

    @property
    def is_configured(self) -> bool:
        """Return True if the provider is configured."""
        return bool(self._bearer_token)

    def can_handle(self, url: str) -> bool:
        # Any status-looking path is claimed; the resolver rejects malformed ids
        parsed = urlparse(url)
        return (parsed.hostname or "").lower() in TWITTER_HOSTS and "/status" in parsed.path

    def create(self, url: str) -> TwitterMetadata:
        return TwitterMetadata(url, bearer_token=self._bearer_token)
