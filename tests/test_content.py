import json
from datetime import datetime, timedelta, timezone

import pytest

from tagesschau.content import (
    Articles,
    TextArticle,
    Video,
    decode_articles,
    sort_by_date,
    text_only,
    video_only,
)
from tagesschau.errors import ConversionError, DeserializationError

TEXT_ITEM = {
    "sophoraId": "bundestag-haushalt-100",
    "title": "Bundestag beschließt Haushalt",
    "date": "2024-01-15T10:30:00.000+01:00",
    "detailsweb": "https://www.tagesschau.de/inland/bundestag-haushalt-100.html",
    "tags": [{"tag": "Bundestag"}, {"tag": "Haushalt"}],
    "ressort": "inland",
    "type": "story",
    "breakingNews": True,
    "teaserImage": {
        "title": "Plenarsaal",
        "copyright": "dpa",
        "alttext": "Blick in den Plenarsaal",
        "imageVariants": {
            "16x9-256": "https://images.tagesschau.de/image/16x9-256.jpg",
            "16x9-1920": "https://images.tagesschau.de/image/16x9-1920.jpg",
        },
        "type": "image",
    },
}

VIDEO_ITEM = {
    "title": "tagesschau 20:00 Uhr",
    "date": "2024-01-15T20:00:00.000+01:00",
    "streams": {
        "h264s": "https://media.tagesschau.de/video/ts-20.h264.mp4",
        "adaptivestreaming": "https://media.tagesschau.de/video/ts-20.m3u8",
    },
    "type": "video",
}


def _body(*items: dict) -> str:
    return json.dumps({"news": list(items), "regional": [], "type": "news"})


def _text(title: str, date: datetime) -> TextArticle:
    return TextArticle(title=title, date=date, url=f"https://www.tagesschau.de/{title}.html")


def _video(title: str, date: datetime) -> Video:
    return Video(title=title, date=date, streams={"h264s": f"https://media.tagesschau.de/{title}.mp4"})


BASE = datetime(2024, 1, 15, 8, 0, tzinfo=timezone.utc)


class TestDecodeArticles:
    def test_text_article(self):
        articles = decode_articles(_body(TEXT_ITEM))
        assert isinstance(articles, Articles)
        item = articles.news[0]
        assert isinstance(item, TextArticle)
        assert item.title == "Bundestag beschließt Haushalt"
        assert item.url == TEXT_ITEM["detailsweb"]
        assert item.date == datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)
        assert [t.tag for t in item.tags] == ["Bundestag", "Haushalt"]
        assert item.ressort == "inland"
        assert item.kind == "story"
        assert item.breaking_news is True

    def test_teaser_image(self):
        image = decode_articles(_body(TEXT_ITEM)).news[0].image
        assert image.title == "Plenarsaal"
        assert image.copyright == "dpa"
        assert image.alttext == "Blick in den Plenarsaal"
        assert image.kind == "image"
        assert image.image_variants["16x9-1920"].endswith("16x9-1920.jpg")

    def test_video(self):
        item = decode_articles(_body(VIDEO_ITEM)).news[0]
        assert isinstance(item, Video)
        assert item.streams["h264s"].endswith(".mp4")
        assert item.kind == "video"

    def test_streams_without_detailsweb_is_video(self):
        item = decode_articles(_body(VIDEO_ITEM)).news[0]
        assert item.is_video()
        assert not item.is_text()

    def test_detailsweb_without_streams_is_text(self):
        item = decode_articles(_body(TEXT_ITEM)).news[0]
        assert item.is_text()
        assert not item.is_video()

    def test_text_is_tried_first(self):
        both = {**TEXT_ITEM, "streams": VIDEO_ITEM["streams"]}
        assert isinstance(decode_articles(_body(both)).news[0], TextArticle)

    def test_optional_fields_default(self):
        minimal = {
            "title": "Kurzmeldung",
            "date": "2024-01-15T10:30:00+01:00",
            "detailsweb": "https://www.tagesschau.de/kurz.html",
        }
        item = decode_articles(_body(minimal)).news[0]
        assert item.tags == []
        assert item.ressort is None
        assert item.kind is None
        assert item.breaking_news is False
        assert item.image is None

    def test_image_without_variants(self):
        item = dict(TEXT_ITEM, teaserImage={"alttext": "Bild"})
        image = decode_articles(_body(item)).news[0].image
        assert image.image_variants == {}
        assert image.title is None

    def test_mixed_order_preserved(self):
        news = decode_articles(_body(TEXT_ITEM, VIDEO_ITEM, TEXT_ITEM)).news
        assert [type(n) for n in news] == [TextArticle, Video, TextArticle]

    def test_empty_news(self):
        assert decode_articles(_body()).news == []

    def test_missing_date_raises(self):
        item = {k: v for k, v in TEXT_ITEM.items() if k != "date"}
        with pytest.raises(DeserializationError):
            decode_articles(_body(item))

    def test_missing_title_raises(self):
        item = {k: v for k, v in VIDEO_ITEM.items() if k != "title"}
        with pytest.raises(DeserializationError):
            decode_articles(_body(item))

    def test_date_without_offset_raises(self):
        item = dict(TEXT_ITEM, date="2024-01-15T10:30:00")
        with pytest.raises(DeserializationError):
            decode_articles(_body(item))

    def test_malformed_date_raises(self):
        item = dict(TEXT_ITEM, date="gestern")
        with pytest.raises(DeserializationError):
            decode_articles(_body(item))

    def test_numeric_date_raises(self):
        item = dict(TEXT_ITEM, date=1704067200)
        with pytest.raises(DeserializationError):
            decode_articles(_body(item))

    def test_neither_shape_raises(self):
        item = {"title": "Ohne Link", "date": "2024-01-15T10:30:00+01:00"}
        with pytest.raises(DeserializationError):
            decode_articles(_body(item))

    def test_missing_news_raises(self):
        with pytest.raises(DeserializationError):
            decode_articles(json.dumps({"regional": []}))

    def test_invalid_json_raises(self):
        with pytest.raises(DeserializationError):
            decode_articles("<html>Wartungsarbeiten</html>")

    def test_accepts_bytes(self):
        assert len(decode_articles(_body(VIDEO_ITEM).encode("utf-8")).news) == 1


class TestConversion:
    def test_to_text(self):
        item = _text("a", BASE)
        assert item.to_text() is item

    def test_to_video(self):
        item = _video("a", BASE)
        assert item.to_video() is item

    def test_wrong_variant_raises(self):
        with pytest.raises(ConversionError):
            _video("a", BASE).to_text()
        with pytest.raises(ConversionError):
            _text("a", BASE).to_video()


class TestProjections:
    def test_text_only_keeps_relative_order(self):
        mixed = [
            _video("v1", BASE),
            _text("t1", BASE),
            _video("v2", BASE),
            _text("t2", BASE),
            _video("v3", BASE),
        ]
        result = text_only(mixed)
        assert [t.title for t in result] == ["t1", "t2"]
        assert all(isinstance(t, TextArticle) for t in result)

    def test_video_only(self):
        mixed = [_video("v1", BASE), _text("t1", BASE), _video("v2", BASE)]
        assert [v.title for v in video_only(mixed)] == ["v1", "v2"]

    def test_empty(self):
        assert text_only([]) == []
        assert video_only([]) == []


class TestSortByDate:
    def test_ascending(self):
        items = [
            _text("late", BASE + timedelta(hours=2)),
            _video("early", BASE),
            _text("middle", BASE + timedelta(hours=1)),
        ]
        assert [i.title for i in sort_by_date(items)] == ["early", "middle", "late"]

    def test_stable_for_equal_timestamps(self):
        items = [
            _text("b", BASE + timedelta(hours=1)),
            _text("first", BASE),
            _video("second", BASE),
            _text("third", BASE),
        ]
        assert [i.title for i in sort_by_date(items)] == ["first", "second", "third", "b"]

    def test_compares_across_offsets(self):
        berlin = timezone(timedelta(hours=1))
        items = [
            _text("utc", datetime(2024, 1, 15, 9, 45, tzinfo=timezone.utc)),
            _text("berlin", datetime(2024, 1, 15, 10, 30, tzinfo=berlin)),
        ]
        assert [i.title for i in sort_by_date(items)] == ["berlin", "utc"]
