"""
RSS/Atom feed fetcher with publisher and image resolution.
"""
from __future__ import annotations

import logging
import re
from typing import List, Optional

import feedparser
import httpx

from informed360.config import LOGO_URL_TEMPLATE, FeedSource
from informed360.models import RawEntry
from informed360.sources.common import clean_text, infer_source_name, parse_utc_datetime
from informed360.utils import extract_domain_from_url, strip_html

logger = logging.getLogger(__name__)

DESCRIPTION_MAX_LENGTH = 300
_IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp")
_IMG_SRC_RE = re.compile(r"<img[^>]+src=[\"']([^\"']+)[\"']", flags=re.IGNORECASE)


def extract_publisher_from_entry(entry) -> Optional[str]:
    """
    Extract publisher name from an aggregator entry (e.g. Google News).

    Args:
        entry: RSS feed entry

    Returns:
        Publisher name or None if not found
    """
    source = entry.get("source")
    if isinstance(source, dict):
        title = source.get("title")
        if title:
            return clean_text(title)
    return None


def _looks_like_image(url: str, mime: str) -> bool:
    if mime:
        return mime.lower().startswith("image/")
    return url.lower().split("?")[0].endswith(_IMAGE_EXTENSIONS)


def extract_image_from_entry(entry, link: str) -> str:
    """
    Find the best image for an entry.

    Order: image enclosure, media:content, media:thumbnail, first <img> in the
    summary, then the publisher's logo.

    Args:
        entry: RSS feed entry
        link: Article URL, used for the logo fallback

    Returns:
        Image URL (never empty when link is set)
    """
    for enclosure in entry.get("enclosures") or []:
        href = enclosure.get("href") or enclosure.get("url") or ""
        if href and _looks_like_image(href, enclosure.get("type", "")):
            return href

    for media in entry.get("media_content") or []:
        url = media.get("url") or ""
        medium = media.get("medium", "")
        if url and (medium == "image" or _looks_like_image(url, media.get("type", ""))):
            return url

    for thumb in entry.get("media_thumbnail") or []:
        if thumb.get("url"):
            return thumb["url"]

    match = _IMG_SRC_RE.search(entry.get("summary", "") or "")
    if match:
        return match.group(1)

    domain = extract_domain_from_url(link)
    return LOGO_URL_TEMPLATE.format(domain=domain) if domain else ""


def resolve_source_name(entry, source: FeedSource, feed_title: str, link: str) -> str:
    """
    Decide the display name of an entry's publisher.

    Args:
        entry: RSS feed entry
        source: Configured feed descriptor
        feed_title: Channel title from the parsed feed
        link: Article URL

    Returns:
        Publisher name
    """
    return (
        extract_publisher_from_entry(entry)
        or clean_text(source.label)
        or feed_title
        or infer_source_name(link)
    )


def parse_feed(content: bytes | str, source: FeedSource) -> List[RawEntry]:
    """
    Parse a downloaded feed document into raw entries.

    Args:
        content: Feed body
        source: Configured feed descriptor

    Returns:
        List of RawEntry objects, in feed order
    """
    feed = feedparser.parse(content)
    if feed.get("bozo") and not feed.entries:
        logger.warning("Malformed feed %s: %s", source.url, feed.get("bozo_exception"))
        return []

    feed_title = clean_text(feed.feed.get("title"))
    items: List[RawEntry] = []

    for entry in feed.entries:
        try:
            title = strip_html(entry.get("title"))
            link = clean_text(entry.get("link"))

            # Skip if essential data is missing
            if not title or not link:
                continue

            items.append(
                RawEntry(
                    title=title,
                    link=link,
                    description=strip_html(entry.get("summary"), DESCRIPTION_MAX_LENGTH),
                    source=resolve_source_name(entry, source, feed_title, link),
                    image=extract_image_from_entry(entry, link),
                    published_at=parse_utc_datetime(entry.get("published") or entry.get("updated")),
                    guid=clean_text(entry.get("id")),
                    category=clean_text(source.category).lower(),
                )
            )
        except Exception as e:
            logger.warning("Skipping malformed entry from %s: %s", source.url, e)
            continue

    return items


class FeedFetcher:
    """Downloads and parses configured RSS feeds."""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def fetch(self, source: FeedSource) -> List[RawEntry]:
        """
        Fetch one feed. Network and HTTP errors yield an empty list.

        Args:
            source: Configured feed descriptor

        Returns:
            List of RawEntry objects
        """
        try:
            response = await self.client.get(source.url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Feed fetch failed for %s: %s: %s", source.url, type(e).__name__, e)
            return []

        return parse_feed(response.content, source)
