"""Twitter / X post resolver."""

import re
from typing import Any

import httpx
import structlog

from embed_resolver.exceptions import (
    MalformedInputError,
    ProviderNotConfiguredError,
    UpstreamEmptyError,
)
from embed_resolver.metadata.base import Metadata, RequestContext, ensure_success, send
from embed_resolver.models.embed import (
    EmbedData,
    EmbedDataType,
    ImageInfo,
    Media,
    MediaType,
    RestrictionPolicy,
)

logger = structlog.get_logger(__name__)

TWITTER_API_BASE_URL = "https://api.twitter.com/2"

STATUS_URL_PATTERN = re.compile(
    r"^https?://(?:www\.|mobile\.)?(?:twitter|x)\.com/"
    r"(?P<screen_name>[A-Za-z0-9_]{1,15})/status(?:es)?/(?P<status_id>\d+)"
)

TWEET_PARAMS = {
    "expansions": "author_id,attachments.media_keys",
    "tweet.fields": "possibly_sensitive,attachments",
    "user.fields": "name,username,profile_image_url",
    "media.fields": "type,url,preview_image_url,width,height,variants",
}


def _best_video_variant(media: dict[str, Any]) -> str | None:
    """Return the highest-bitrate mp4 variant URL."""
    mp4 = [
        v
        for v in media.get("variants") or []
        if v.get("content_type") == "video/mp4" and v.get("url")
    ]
    if not mp4:
        return None
    return max(mp4, key=lambda v: v.get("bit_rate") or 0)["url"]


class TwitterMetadata(Metadata):
    """
    Resolves a single post through the Twitter API v2.

    The screen name and status id are parsed from the URL up front. When the
    URL does not carry a status id, ``status_id`` is 0 and fetch() fails
    without touching the network.
    """

    def __init__(self, url: str, bearer_token: str | None = None) -> None:
        super().__init__(url)
        self.bearer_token = bearer_token

        m = STATUS_URL_PATTERN.match(url)
        if m:
            self.screen_name: str | None = m.group("screen_name")
            self.status_id = int(m.group("status_id"))
        else:
            self.screen_name = None
            self.status_id = 0

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "Authorization": f"Bearer {self.bearer_token}",
        }

    def _json(self, response: httpx.Response) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamEmptyError(self.url, f"Unreadable Twitter response: {e}") from e
        if not isinstance(body, dict):
            raise UpstreamEmptyError(self.url, "Twitter response is not an object")
        return body

    async def _fetch_once(self, context: RequestContext) -> EmbedData:
        if not self.status_id:
            raise MalformedInputError(self.url, "URL does not contain a status id")
        if not self.bearer_token:
            raise ProviderNotConfiguredError("twitter")

        api_url = f"{TWITTER_API_BASE_URL}/tweets/{self.status_id}"
        response = await send(
            context.http_client, "GET", api_url, headers=self._headers(), params=TWEET_PARAMS
        )
        ensure_success(response, api_url)
        body = self._json(response)

        tweet = body.get("data")
        if not tweet:
            errors = body.get("errors") or []
            detail = errors[0].get("detail") if errors else "Tweet not found"
            raise UpstreamEmptyError(self.url, detail or "Tweet not found")

        includes = body.get("includes") or {}
        author = next(
            (u for u in includes.get("users") or [] if u.get("id") == tweet.get("author_id")),
            None,
        )
        if author is None:
            author = await self._fetch_user(context)

        return self._to_embed_data(tweet, author, includes.get("media") or [])

    async def _fetch_user(self, context: RequestContext) -> dict[str, Any]:
        api_url = f"{TWITTER_API_BASE_URL}/users/by/username/{self.screen_name}"
        response = await send(
            context.http_client,
            "GET",
            api_url,
            headers=self._headers(),
            params={"user.fields": TWEET_PARAMS["user.fields"]},
        )
        ensure_success(response, api_url)
        user = self._json(response).get("data")
        if not user:
            raise UpstreamEmptyError(self.url, f"User {self.screen_name} not found")
        return user

    def _to_embed_data(
        self,
        tweet: dict[str, Any],
        author: dict[str, Any],
        media_entries: list[dict[str, Any]],
    ) -> EmbedData:
        username = author.get("username") or self.screen_name
        display_name = author.get("name") or username
        # Rebuilt from the API response so the screen name has its canonical casing
        canonical_url = f"https://twitter.com/{username}/status/{tweet.get('id', self.status_id)}"

        policy = (
            RestrictionPolicy.RESTRICTED
            if tweet.get("possibly_sensitive")
            else RestrictionPolicy.NONE
        )

        by_key = {m.get("media_key"): m for m in media_entries}
        keys = (tweet.get("attachments") or {}).get("media_keys") or []

        medias: list[Media] = []
        for media in (by_key[k] for k in keys if k in by_key):
            index = len(medias) + 1
            if media.get("type") == "photo":
                image_url = media.get("url")
                if not image_url:
                    continue
                medias.append(
                    Media(
                        type=MediaType.IMAGE,
                        thumbnail=ImageInfo(
                            url=image_url, width=media.get("width"), height=media.get("height")
                        ),
                        raw_url=f"{image_url}?name=orig",
                        location=f"{canonical_url}/photo/{index}",
                        restriction_policy=policy,
                    )
                )
            elif media.get("type") in ("video", "animated_gif"):
                preview = media.get("preview_image_url")
                medias.append(
                    Media(
                        type=MediaType.VIDEO,
                        thumbnail=ImageInfo(
                            url=preview, width=media.get("width"), height=media.get("height")
                        )
                        if preview
                        else None,
                        raw_url=_best_video_variant(media),
                        location=f"{canonical_url}/video/{index}",
                        restriction_policy=policy,
                    )
                )

        if not medias:
            embed_type = EmbedDataType.RICH
        elif len(medias) > 1:
            embed_type = EmbedDataType.MIXED_CONTENT
        elif medias[0].type == MediaType.VIDEO:
            embed_type = EmbedDataType.SINGLE_VIDEO
        else:
            embed_type = EmbedDataType.SINGLE_IMAGE

        metadata_image = next((m for m in medias if m.thumbnail or m.raw_url), None)
        avatar = author.get("profile_image_url")
        if metadata_image is None and avatar:
            metadata_image = Media(
                type=MediaType.IMAGE,
                thumbnail=ImageInfo(url=avatar),
                raw_url=avatar,
                location=f"https://twitter.com/{username}",
                restriction_policy=RestrictionPolicy.NONE,
            )

        logger.debug("tweet_resolved", url=canonical_url, media_count=len(medias))

        return EmbedData(
            url=canonical_url,
            type=embed_type,
            title=f"{display_name} (@{username})",
            description=tweet.get("text"),
            author_name=f"{display_name} (@{username})",
            author_url=f"https://twitter.com/{username}",
            provider_name="Twitter",
            provider_url="https://twitter.com",
            restriction_policy=policy,
            metadata_image=metadata_image,
            medias=medias,
        )
