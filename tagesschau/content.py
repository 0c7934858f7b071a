"""Wire models for the news endpoint (Pydantic v2).

The endpoint returns ``{"news": [...]}`` where each item is either a text
article or a video. Items carry no discriminator, so decoding tries
``TextArticle`` first (it requires ``detailsweb``) and falls back to ``Video``
(it requires ``streams``). The upstream API omits optional fields
inconsistently, so everything except title, date and the variant's own field
has a default.
"""

from collections.abc import Iterable
from operator import attrgetter
from typing import Annotated

from pydantic import AwareDatetime, BaseModel, Field, ValidationError
from pydantic.config import ConfigDict

from tagesschau.errors import ConversionError, DeserializationError


class Tag(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    tag: str


class Image(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    title: str | None = None
    copyright: str | None = None
    alttext: str | None = None
    kind: str | None = Field(default=None, alias="type")
    image_variants: dict[str, str] = Field(
        default_factory=dict,
        alias="imageVariants",
        description="Resolution label (e.g. '16x9-1920') to image URL.",
    )


class NewsItem(BaseModel):
    """Fields shared by text articles and videos."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    title: str
    date: AwareDatetime = Field(
        ...,
        strict=True,
        description="Publish timestamp, RFC 3339 with UTC offset.",
    )
    tags: list[Tag] = Field(default_factory=list)
    ressort: str | None = None
    kind: str | None = Field(default=None, alias="type")
    breaking_news: bool = Field(default=False, alias="breakingNews")
    image: Image | None = Field(default=None, alias="teaserImage")

    def is_text(self) -> bool:
        return isinstance(self, TextArticle)

    def is_video(self) -> bool:
        return isinstance(self, Video)

    def to_text(self) -> "TextArticle":
        if not isinstance(self, TextArticle):
            raise ConversionError(f"Tried to extract a text article from {type(self).__name__}")
        return self

    def to_video(self) -> "Video":
        if not isinstance(self, Video):
            raise ConversionError(f"Tried to extract a video from {type(self).__name__}")
        return self


class TextArticle(NewsItem):
    url: str = Field(..., alias="detailsweb", description="Article page on the web.")


class Video(NewsItem):
    streams: dict[str, str] = Field(
        ...,
        description="Stream label (e.g. 'h264s', 'adaptivestreaming') to URL.",
    )


Content = Annotated[TextArticle | Video, Field(union_mode="left_to_right")]


class Articles(BaseModel):
    model_config = ConfigDict(extra="ignore")

    news: list[Content]


def decode_articles(body: str | bytes) -> Articles:
    """Decode a response body into ``Articles``."""
    try:
        return Articles.model_validate_json(body)
    except ValidationError as exc:
        raise DeserializationError(
            f"Failed to deserialize response ({exc.error_count()} errors)"
        ) from exc


def sort_by_date(contents: Iterable[TextArticle | Video]) -> list[TextArticle | Video]:
    """Stable sort by publish timestamp, oldest first."""
    return sorted(contents, key=attrgetter("date"))


def text_only(contents: Iterable[TextArticle | Video]) -> list[TextArticle]:
    return [item.to_text() for item in contents if item.is_text()]


def video_only(contents: Iterable[TextArticle | Video]) -> list[Video]:
    return [item.to_video() for item in contents if item.is_video()]
