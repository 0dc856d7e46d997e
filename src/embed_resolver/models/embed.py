"""Normalized embed data shared by every resolver."""

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class EmbedDataType(str, Enum):
    """How a consumer should render an embed."""

    SINGLE_IMAGE = "single_image"
    SINGLE_VIDEO = "single_video"
    MIXED_CONTENT = "mixed_content"
    RICH = "rich"
    LINK = "link"


class MediaType(str, Enum):
    """Kind of visual content."""

    IMAGE = "image"
    VIDEO = "video"


class RestrictionPolicy(str, Enum):
    """Content-sensitivity classification."""

    UNKNOWN = "unknown"
    NONE = "none"
    RESTRICTED = "restricted"


class ImageInfo(BaseModel):
    """An image URL with optional dimensions."""

    url: str
    width: int | None = None
    height: int | None = None

    model_config = {"extra": "ignore"}


class Media(BaseModel):
    """One piece of visual content."""

    type: MediaType = MediaType.IMAGE
    thumbnail: ImageInfo | None = None
    raw_url: str | None = Field(default=None, description="Original-resolution asset")
    location: str | None = Field(default=None, description="Permalink of this media item")
    restriction_policy: RestrictionPolicy = RestrictionPolicy.UNKNOWN

    model_config = {"extra": "ignore"}


class EmbedData(BaseModel):
    """Normalized result of one resolution."""

    url: str | None = None
    type: EmbedDataType = EmbedDataType.LINK
    title: str | None = None
    description: str | None = None
    author_name: str | None = None
    author_url: str | None = None
    provider_name: str | None = None
    provider_url: str | None = None
    cache_age: int | None = Field(default=None, ge=0)
    medias: list[Media] = Field(default_factory=list, description="In rendering order")
    metadata_image: Media | None = None
    restriction_policy: RestrictionPolicy = RestrictionPolicy.UNKNOWN

    model_config = {"extra": "ignore"}

    @model_validator(mode="after")
    def _check_consistency(self) -> "EmbedData":
        image = self.metadata_image
        if image is not None and image.thumbnail is None and not image.raw_url:
            raise ValueError("metadata_image requires a thumbnail or a raw_url")
        if self.type == EmbedDataType.MIXED_CONTENT and len(self.medias) < 2:
            raise ValueError("mixed_content requires more than one media")
        return self
