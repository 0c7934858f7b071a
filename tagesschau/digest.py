"""Print a JSON digest of one news query.

Usage:
    python -m tagesschau.digest

Environment variables:
    TAGESSCHAU_BASE_URL      — default: https://www.tagesschau.de/api2u/news
    TAGESSCHAU_HTTP_TIMEOUT  — default: 30
    TAGESSCHAU_TIMEZONE      — IANA zone for "today"; default: local time
    TAGESSCHAU_RESSORT       — e.g. sport; default: unspecified
    TAGESSCHAU_REGIONS       — comma-separated region codes, e.g. 2,3
    TAGESSCHAU_DATE          — YYYY-MM-DD; default: today
"""

import json
import logging
import os
import sys

from tagesschau.client import HTTP_TIMEOUT, TagesschauClient
from tagesschau.content import Content, TextArticle
from tagesschau.errors import TagesschauError
from tagesschau.models import (
    CalendarDate,
    Now,
    OnDate,
    Region,
    RequestConfig,
    Ressort,
    build_config,
)
from tagesschau.urls import BASE_URL

logger = logging.getLogger(__name__)


def _parse_regions(raw: str) -> list[Region]:
    try:
        return [Region(int(code)) for code in raw.split(",") if code.strip()]
    except ValueError as exc:
        raise RuntimeError(f"TAGESSCHAU_REGIONS is invalid: {raw!r}") from exc


def get_config() -> dict:
    """Read configuration from environment variables."""
    try:
        timeout = float(os.environ.get("TAGESSCHAU_HTTP_TIMEOUT", str(HTTP_TIMEOUT)))
    except ValueError as exc:
        raise RuntimeError("TAGESSCHAU_HTTP_TIMEOUT must be a number") from exc

    ressort_name = os.environ.get("TAGESSCHAU_RESSORT", "").strip().lower()
    try:
        ressort = Ressort(ressort_name)
    except ValueError as exc:
        raise RuntimeError(f"TAGESSCHAU_RESSORT is invalid: {ressort_name!r}") from exc

    raw_date = os.environ.get("TAGESSCHAU_DATE")
    try:
        date = CalendarDate.parse(raw_date, "%Y-%m-%d") if raw_date else None
    except TagesschauError as exc:
        raise RuntimeError(f"TAGESSCHAU_DATE is invalid: {raw_date!r}") from exc

    return {
        "base_url": os.environ.get("TAGESSCHAU_BASE_URL", BASE_URL),
        "timeout": timeout,
        "timezone": os.environ.get("TAGESSCHAU_TIMEZONE") or None,
        "ressort": ressort,
        "regions": _parse_regions(os.environ.get("TAGESSCHAU_REGIONS", "")),
        "date": date,
    }


def request_config(config: dict) -> RequestConfig:
    """Turn the environment config into a sorted request configuration."""
    timeframe = OnDate(config["date"]) if config["date"] else Now(config["timezone"])
    return build_config(
        ressort=config["ressort"],
        regions=config["regions"],
        timeframe=timeframe,
        sort_by_date=True,
    )


def content_to_dict(item: Content) -> dict:
    """Convert a news item to a JSON-serializable dict."""
    result = {
        "kind": "text" if isinstance(item, TextArticle) else "video",
        "title": item.title,
        "date": item.date.isoformat(),
        "ressort": item.ressort,
        "breaking_news": item.breaking_news,
        "tags": [t.tag for t in item.tags],
    }
    if isinstance(item, TextArticle):
        result["url"] = item.url
    else:
        result["streams"] = dict(item.streams)
    return result


def build_digest(content: list[Content], config: RequestConfig) -> dict:
    """Build the digest JSON structure."""
    return {
        "ressort": str(config.ressort) or None,
        "regions": sorted(int(r) for r in config.regions),
        "count": len(content),
        "news": [content_to_dict(item) for item in content],
    }


def main() -> None:
    """Entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = get_config()
    request = request_config(config)
    client = TagesschauClient(
        request, base_url=config["base_url"], timeout=config["timeout"]
    )
    try:
        content = client.get_all_articles()
    except TagesschauError:
        logger.exception("Failed to fetch news")
        raise

    json.dump(build_digest(content, request), sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


if __name__ == "__main__":
    main()
