"""Imgur API v3 response models."""

from pydantic import BaseModel, Field

from embed_resolver.models.embed import ImageInfo, Media, MediaType, RestrictionPolicy


class ImgurImage(BaseModel):
    """An image entry as returned by the Imgur API."""

    id: str
    title: str | None = None
    description: str | None = None
    link: str | None = None
    width: int | None = None
    height: int | None = None
    animated: bool = False
    mp4: str | None = None
    nsfw: bool | None = None

    model_config = {"extra": "ignore"}

    @property
    def restriction_policy(self) -> RestrictionPolicy:
        """Map the nsfw flag (which may be absent) onto a restriction policy."""
        if self.nsfw is None:
            return RestrictionPolicy.UNKNOWN
        return RestrictionPolicy.RESTRICTED if self.nsfw else RestrictionPolicy.NONE

    def to_media(self) -> Media:
        """Convert to a normalized media entry."""
        if self.animated:
            return Media(
                type=MediaType.VIDEO,
                thumbnail=ImageInfo(url=f"https://i.imgur.com/{self.id}h.jpg"),
                raw_url=self.mp4 or self.link,
                location=f"https://imgur.com/{self.id}",
                restriction_policy=self.restriction_policy,
            )
        return Media(
            type=MediaType.IMAGE,
            thumbnail=ImageInfo(
                url=self.link or f"https://i.imgur.com/{self.id}.jpg",
                width=self.width,
                height=self.height,
            ),
            raw_url=self.link,
            location=f"https://imgur.com/{self.id}",
            restriction_policy=self.restriction_policy,
        )


class ImgurAlbum(BaseModel):
    """An album (or gallery album) as returned by the Imgur API."""

    id: str
    title: str | None = None
    description: str | None = None
    cover: str | None = None
    images: list[ImgurImage] = Field(default_factory=list)

    model_config = {"extra": "ignore"}
