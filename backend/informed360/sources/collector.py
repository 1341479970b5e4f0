"""
News collection coordinator that aggregates from multiple feeds.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List, Sequence

from informed360.config import FeedSource
from informed360.core.sentiment import SentimentScorer, score_text
from informed360.models import Article, RawEntry
from informed360.sources.common import make_article_id
from informed360.sources.feeds import FeedFetcher

logger = logging.getLogger(__name__)


def cap_per_source(entries: Sequence[RawEntry], limit: int) -> List[RawEntry]:
    """
    Keep only the most recent entries of one feed.

    Args:
        entries: Entries from a single feed
        limit: Maximum number of entries to keep

    Returns:
        Up to ``limit`` entries, newest first
    """
    ordered = sorted(entries, key=lambda entry: entry.published_at, reverse=True)
    return ordered[: max(0, limit)]


def deduplicate_entries(batches: Iterable[Sequence[RawEntry]]) -> List[tuple[str, RawEntry]]:
    """
    Merge per-feed batches keyed by canonical article id.

    Args:
        batches: Entry lists in configured feed order

    Returns:
        (id, entry) pairs; the first entry seen for an id wins
    """
    seen: set[str] = set()
    unique: List[tuple[str, RawEntry]] = []

    for batch in batches:
        for entry in batch:
            article_id = make_article_id(entry.link, entry.guid, entry.title)
            if article_id in seen:
                continue
            seen.add(article_id)
            unique.append((article_id, entry))

    return unique


def build_article(article_id: str, entry: RawEntry, scorer: SentimentScorer) -> Article:
    text = f"{entry.title}. {entry.description}".strip()
    return Article(
        id=article_id,
        title=entry.title,
        description=entry.description,
        link=entry.link,
        source=entry.source,
        image=entry.image,
        published_at=entry.published_at,
        sentiment=scorer(text),
        category=entry.category,
    )


class NewsCollector:
    """Fans out over all feeds and merges the results into scored articles."""

    def __init__(
        self,
        fetcher: FeedFetcher,
        sources: Sequence[FeedSource],
        timeout_seconds: float = 15.0,
        max_per_source: int = 30,
        scorer: SentimentScorer = score_text,
    ):
        self.fetcher = fetcher
        self.sources = list(sources)
        self.timeout_seconds = timeout_seconds
        self.max_per_source = max_per_source
        self.scorer = scorer

    async def _fetch_one(self, source: FeedSource) -> List[RawEntry]:
        try:
            entries = await asyncio.wait_for(self.fetcher.fetch(source), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning("Feed %s timed out after %.0fs", source.url, self.timeout_seconds)
            return []
        except Exception as e:
            logger.warning("Feed %s failed: %s: %s", source.url, type(e).__name__, e)
            return []
        return cap_per_source(entries, self.max_per_source)

    async def collect(self) -> List[Article]:
        """
        Fetch every configured feed concurrently and normalize the results.

        Returns:
            Deduplicated articles, sorted by publication date (newest first)
        """
        if not self.sources:
            return []

        batches = await asyncio.gather(*(self._fetch_one(source) for source in self.sources))

        for source, batch in zip(self.sources, batches):
            logger.debug("Feed %s contributed %d entries", source.url, len(batch))

        articles = [build_article(article_id, entry, self.scorer) for article_id, entry in deduplicate_entries(batches)]
        articles.sort(key=lambda article: article.published_at, reverse=True)
        return articles
