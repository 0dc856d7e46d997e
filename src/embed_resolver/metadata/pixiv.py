"""pixiv illustration resolver."""

from bs4 import BeautifulSoup

from embed_resolver.metadata.unknown import UnknownMetadata
from embed_resolver.models.embed import ImageInfo, Media, MediaType, RestrictionPolicy

TITLE_MARKER = "[pixiv]"
DECORATED_IMAGE_URL = "https://embed.pixiv.net/decorate.php?illust_id={illust_id}"


class PixivMetadata(UnknownMetadata):
    """
    Scrapes a pixiv illustration page.

    pixiv replaces the preview of sensitive works with a small blurred
    placeholder; when present it is upscaled to the 128px variant and the
    result is flagged as restricted.
    """

    def __init__(self, url: str, illust_id: int) -> None:
        super().__init__(url)
        self.illust_id = illust_id

    def load_html(self, document: BeautifulSoup) -> None:
        data = self.data
        if data is None:
            return

        if data.title:
            data.title = data.title.replace(TITLE_MARKER, "").strip()

        sensored = document.select_one("div.sensored img")
        sensored_src = sensored.get("src") if sensored is not None else None

        if isinstance(sensored_src, str) and sensored_src:
            image_url = sensored_src.replace("64x64", "128x128")
            policy = RestrictionPolicy.RESTRICTED
            thumbnail = ImageInfo(url=image_url, width=128, height=128)
        else:
            image_url = DECORATED_IMAGE_URL.format(illust_id=self.illust_id)
            policy = RestrictionPolicy.UNKNOWN
            thumbnail = ImageInfo(url=image_url, width=600)

        data.metadata_image = Media(
            type=MediaType.IMAGE,
            thumbnail=thumbnail,
            raw_url=image_url,
            location=self.url,
            restriction_policy=policy,
        )
        data.medias.clear()
        data.restriction_policy = policy
