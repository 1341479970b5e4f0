"""
Trending search queries from the Google Trends RSS feed.
"""
from __future__ import annotations

import logging
from typing import List

import feedparser
import httpx

from informed360.sources.common import clean_text

logger = logging.getLogger(__name__)


class TrendingFetcher:
    """Fetches the current trending search queries."""

    def __init__(self, client: httpx.AsyncClient, feed_url: str):
        self.client = client
        self.feed_url = feed_url

    async def fetch(self) -> List[str]:
        """
        Fetch trending queries in feed order.

        Returns:
            Unique query strings, or an empty list on any failure
        """
        if not self.feed_url:
            return []

        try:
            response = await self.client.get(self.feed_url)
            response.raise_for_status()
            feed = feedparser.parse(response.content)
        except Exception as e:
            logger.warning("Trending fetch failed: %s: %s", type(e).__name__, e)
            return []

        queries: List[str] = []
        for entry in feed.entries:
            query = clean_text(entry.get("title"))
            if query and query.lower() not in {q.lower() for q in queries}:
                queries.append(query)

        return queries
