"""
Snapshot pipeline: ingestion -> scoring -> clustering -> aggregation.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable, List, Optional, TypeVar

import httpx

from informed360.config import Settings
from informed360.core.clusters import Clusterer, PhraseClusterer
from informed360.core.leaderboard import source_leaderboard
from informed360.core.mood import mood_trend
from informed360.models import Snapshot
from informed360.services.trending import match_trending
from informed360.sources.collector import NewsCollector
from informed360.sources.feeds import FeedFetcher
from informed360.sources.market import MarketFetcher
from informed360.sources.trending import TrendingFetcher
from informed360.utils import now_utc

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _degrade_to_empty(awaitable: Awaitable[List[T]], what: str) -> List[T]:
    try:
        return await awaitable
    except Exception as e:
        logger.warning("%s unavailable: %s: %s", what, type(e).__name__, e)
        return []


async def _nothing() -> list:
    return []


class NewsPipeline:
    """Builds one complete Snapshot per refresh cycle."""

    def __init__(
        self,
        settings: Settings,
        collector: NewsCollector,
        trending: Optional[TrendingFetcher] = None,
        market: Optional[MarketFetcher] = None,
        clusterer: Optional[Clusterer] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self.settings = settings
        self.collector = collector
        self.trending = trending
        self.market = market
        self.clusterer = clusterer or PhraseClusterer(
            min_articles=settings.CLUSTER_MIN_ARTICLES,
            top_n=settings.CLUSTER_TOP_N,
        )
        self.clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, client: httpx.AsyncClient) -> "NewsPipeline":
        collector = NewsCollector(
            FeedFetcher(client),
            settings.FEED_SOURCES,
            timeout_seconds=settings.FETCH_TIMEOUT_SECONDS,
            max_per_source=settings.MAX_PER_SOURCE,
        )
        return cls(
            settings,
            collector,
            trending=TrendingFetcher(client, settings.TRENDING_FEED_URL),
            market=MarketFetcher(client, settings.MARKET_SYMBOLS),
        )

    async def build_snapshot(self) -> Snapshot:
        """
        Fetch everything concurrently and derive the aggregates.

        Feed failures are isolated per source inside the collector; trending
        and quote failures degrade to empty collections. Anything else
        propagates so the scheduler keeps the previous snapshot.
        """
        articles, queries, quotes = await asyncio.gather(
            self.collector.collect(),
            _degrade_to_empty(self.trending.fetch(), "Trending queries") if self.trending else _nothing(),
            _degrade_to_empty(self.market.fetch(), "Market quotes") if self.market else _nothing(),
        )

        now = self.clock()
        settings = self.settings
        return Snapshot(
            fetched_at=now,
            articles=tuple(articles),
            clusters=tuple(self.clusterer.cluster(articles)),
            mood_buckets=tuple(
                mood_trend(articles, now, settings.MOOD_PERIOD_HOURS, settings.MOOD_STEP_HOURS)
            ),
            leaderboard=tuple(
                source_leaderboard(
                    articles,
                    min_articles=settings.LEADERBOARD_MIN_ARTICLES,
                    top_n=settings.LEADERBOARD_TOP_N,
                )
            ),
            trending=tuple(match_trending(queries, articles, settings.TRENDING_TOP_N)),
            quotes=tuple(quotes),
        )
