"""Integration tests for the Twitter resolver with mocked HTTP."""

import pytest
from httpx import Response

from embed_resolver.exceptions import (
    MalformedInputError,
    ProviderNotConfiguredError,
    UpstreamEmptyError,
    UpstreamUnavailableError,
)
from embed_resolver.metadata.twitter import TwitterMetadata
from embed_resolver.models.embed import EmbedDataType, MediaType, RestrictionPolicy

TWEET_URL = "https://x.com/exampleuser/status/1234567890"
TWEET_API = "https://api.twitter.com/2/tweets/1234567890"


class TestTwitterMetadata:
    """Tests for Twitter API v2 resolution."""

    @pytest.fixture
    def metadata(self, mock_settings):
        return TwitterMetadata(TWEET_URL, bearer_token=mock_settings.twitter_bearer_token)

    @pytest.mark.asyncio
    async def test_malformed_url_fails_without_network(self, mock_http, context):
        api_route = mock_http.route(host="api.twitter.com")
        metadata = TwitterMetadata("https://twitter.com/exampleuser/status/", bearer_token="t")

        with pytest.raises(MalformedInputError):
            await metadata.fetch(context)

        assert api_route.call_count == 0

    @pytest.mark.asyncio
    async def test_media_in_attachment_order(
        self, mock_http, context, metadata, sample_tweet_response
    ):
        route = mock_http.get(TWEET_API).mock(
            return_value=Response(200, json=sample_tweet_response)
        )

        data = await metadata.fetch(context)

        assert data.type == EmbedDataType.MIXED_CONTENT
        assert data.url == "https://twitter.com/ExampleUser/status/1234567890"
        assert data.title == "Example User (@ExampleUser)"
        assert data.description == "Look at these"
        assert data.restriction_policy == RestrictionPolicy.NONE

        video, photo = data.medias
        assert video.type == MediaType.VIDEO
        assert video.raw_url == "https://video/high.mp4"
        assert video.location.endswith("/video/1")
        assert photo.type == MediaType.IMAGE
        assert photo.raw_url == "https://pbs.twimg.com/media/one.jpg?name=orig"
        assert photo.location.endswith("/photo/2")
        assert data.metadata_image == video

        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer test-twitter-token"
        assert "attachments.media_keys" in request.url.params["expansions"]

    @pytest.mark.asyncio
    async def test_sensitive_single_photo(
        self, mock_http, context, metadata, sample_tweet_response
    ):
        tweet = sample_tweet_response["data"]
        tweet["possibly_sensitive"] = True
        tweet["attachments"]["media_keys"] = ["3_1"]
        mock_http.get(TWEET_API).mock(return_value=Response(200, json=sample_tweet_response))

        data = await metadata.fetch(context)

        assert data.type == EmbedDataType.SINGLE_IMAGE
        assert data.restriction_policy == RestrictionPolicy.RESTRICTED
        assert data.medias[0].restriction_policy == RestrictionPolicy.RESTRICTED

    @pytest.mark.asyncio
    async def test_text_only_tweet_uses_avatar(self, mock_http, context, metadata):
        mock_http.get(TWEET_API).mock(
            return_value=Response(
                200,
                json={"data": {"id": "1234567890", "text": "Hello", "author_id": "42"}},
            )
        )
        user_route = mock_http.get(
            "https://api.twitter.com/2/users/by/username/exampleuser"
        ).mock(
            return_value=Response(
                200,
                json={
                    "data": {
                        "id": "42",
                        "name": "Example User",
                        "username": "ExampleUser",
                        "profile_image_url": "https://pbs.twimg.com/profile_images/42/a.jpg",
                    }
                },
            )
        )

        data = await metadata.fetch(context)

        assert user_route.call_count == 1
        assert data.type == EmbedDataType.RICH
        assert data.medias == []
        assert data.metadata_image.raw_url == "https://pbs.twimg.com/profile_images/42/a.jpg"

    @pytest.mark.asyncio
    async def test_missing_tweet_is_empty(self, mock_http, context, metadata):
        mock_http.get(TWEET_API).mock(
            return_value=Response(
                200,
                json={"errors": [{"detail": "Could not find tweet with id: [1234567890]."}]},
            )
        )

        with pytest.raises(UpstreamEmptyError) as exc_info:
            await metadata.fetch(context)

        assert "Could not find tweet" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_non_json_body_is_empty(self, mock_http, context, metadata):
        mock_http.get(TWEET_API).mock(
            return_value=Response(
                200, text="<html>maintenance</html>", headers={"Content-Type": "text/plain"}
            )
        )

        with pytest.raises(UpstreamEmptyError) as exc_info:
            await metadata.fetch(context)

        assert "Unreadable Twitter response" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_non_object_user_body_is_empty(self, mock_http, context, metadata):
        mock_http.get(TWEET_API).mock(
            return_value=Response(200, json={"data": {"id": "1234567890", "author_id": "42"}})
        )
        mock_http.get("https://api.twitter.com/2/users/by/username/exampleuser").mock(
            return_value=Response(200, json=["unexpected"])
        )

        with pytest.raises(UpstreamEmptyError):
            await metadata.fetch(context)

    @pytest.mark.asyncio
    async def test_missing_token(self, mock_http, context):
        api_route = mock_http.route(host="api.twitter.com")

        with pytest.raises(ProviderNotConfiguredError):
            await TwitterMetadata(TWEET_URL).fetch(context)

        assert api_route.call_count == 0

    @pytest.mark.asyncio
    async def test_unauthorized_is_unavailable(self, mock_http, context, metadata):
        mock_http.get(TWEET_API).mock(return_value=Response(401, text="Unauthorized"))

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await metadata.fetch(context)

        assert exc_info.value.status_code == 401
