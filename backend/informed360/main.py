"""
Main FastAPI application and routing layer.

Every route reads the current snapshot from the CacheStore; none of them
touches the network. Missing data is reported as empty collections.
"""
from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime, timedelta
from typing import Awaitable, Callable, List, Literal, Optional, Sequence

import httpx
from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware

from informed360.config import HTTP_HEADERS, Settings, get_settings
from informed360.core.cache import CacheStore
from informed360.core.leaderboard import source_leaderboard
from informed360.core.mood import instant_mood, mood_trend
from informed360.core.scheduler import RefreshScheduler, RefreshState
from informed360.models import Article, Snapshot
from informed360.schemas import (
    ArticleOut,
    HealthResponse,
    LeaderboardResponse,
    LeaderboardRowOut,
    MarketQuoteOut,
    MarketResponse,
    MoodBucketOut,
    MoodResponse,
    MoodTrendResponse,
    NewsResponse,
    TopicClusterOut,
    TopicsResponse,
    TrendingResponse,
    TrendingTopicOut,
)
from informed360.services.pinned import select_pinned
from informed360.services.pipeline import NewsPipeline
from informed360.utils import now_utc

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=settings.LOG_FORMAT)


def articles_out(articles: Sequence[Article]) -> List[ArticleOut]:
    return [ArticleOut.model_validate(asdict(article)) for article in articles]


def create_app(
    settings: Optional[Settings] = None,
    build_snapshot: Optional[Callable[[], Awaitable[Snapshot]]] = None,
    clock: Callable[[], datetime] = now_utc,
) -> FastAPI:
    """
    Build the API application.

    Args:
        settings: Configuration (defaults to environment settings)
        build_snapshot: Snapshot builder; defaults to the live RSS pipeline
        clock: Source of "now" for time-windowed endpoints

    Returns:
        FastAPI app whose startup performs the first refresh before serving
    """
    settings = settings or get_settings()
    store = CacheStore()

    app = FastAPI(
        title="Informed360 News Mood API",
        version="0.1.0",
        description="Aggregated news sentiment, topics and mood trends from RSS feeds",
    )
    app.state.settings = settings
    app.state.store = store
    app.state.scheduler = None
    app.state.http_client = None

    @app.on_event("startup")
    async def warm_startup():
        """Run the first refresh synchronously, then hand over to the timer."""
        configure_logging(settings)
        build = build_snapshot
        if build is None:
            client = httpx.AsyncClient(
                headers=HTTP_HEADERS,
                timeout=settings.FETCH_TIMEOUT_SECONDS,
                follow_redirects=True,
            )
            app.state.http_client = client
            build = NewsPipeline.from_settings(settings, client).build_snapshot

        scheduler = RefreshScheduler(store, build, settings.REFRESH_INTERVAL_SECONDS)
        app.state.scheduler = scheduler

        if not await scheduler.refresh_once():
            logger.warning("Initial refresh failed; serving an empty snapshot until the next cycle")
        scheduler.start()

    @app.on_event("shutdown")
    async def shutdown():
        if app.state.scheduler is not None:
            await app.state.scheduler.stop()
        if app.state.http_client is not None:
            await app.state.http_client.aclose()

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint."""
        scheduler = app.state.scheduler
        state = scheduler.state if scheduler is not None else RefreshState.IDLE
        return HealthResponse(ok=True, at=clock(), state=state.value)

    @app.get("/api/news", response_model=NewsResponse)
    async def get_news(
        limit: int = Query(50, ge=1, le=200, description="Maximum number of articles"),
        sentiment: Optional[Literal["positive", "neutral", "negative"]] = Query(None, description="Only articles with this label"),
        category: Optional[str] = Query(None, max_length=40, description="Only articles from feeds in this section"),
    ):
        snapshot = store.get_or_empty()
        articles = snapshot.articles
        if sentiment:
            articles = [a for a in articles if a.sentiment.label == sentiment]
        if category:
            wanted = category.strip().lower()
            articles = [a for a in articles if a.category == wanted]
        return NewsResponse(fetched_at=snapshot.fetched_at, articles=articles_out(articles[:limit]))

    @app.get("/api/topics", response_model=TopicsResponse)
    async def get_topics():
        snapshot = store.get_or_empty()
        return TopicsResponse(
            fetched_at=snapshot.fetched_at,
            topics=[TopicClusterOut.model_validate(asdict(c)) for c in snapshot.clusters],
        )

    @app.get("/api/trending", response_model=TrendingResponse)
    async def get_trending():
        snapshot = store.get_or_empty()
        return TrendingResponse(
            fetched_at=snapshot.fetched_at,
            topics=[TrendingTopicOut.model_validate(asdict(t)) for t in snapshot.trending],
        )

    @app.get("/api/mood", response_model=MoodResponse)
    async def get_mood(
        hours: Optional[int] = Query(None, ge=1, le=168, description="Only articles from the last N hours"),
    ):
        snapshot = store.get_or_empty()
        since = clock() - timedelta(hours=hours) if hours else None
        mix, count = instant_mood(snapshot.articles, since=since)
        return MoodResponse(
            positive_pct=mix.pos_pct,
            neutral_pct=mix.neu_pct,
            negative_pct=mix.neg_pct,
            article_count=count,
        )

    @app.get("/api/mood-trend", response_model=MoodTrendResponse)
    async def get_mood_trend(
        days: Optional[int] = Query(None, ge=1, le=7, description="Trailing period in days"),
        step_hours: Optional[int] = Query(None, ge=1, le=24, alias="stepHours", description="Bucket width"),
    ):
        snapshot = store.get_or_empty()
        step = step_hours or settings.MOOD_STEP_HOURS
        if days is None and step == settings.MOOD_STEP_HOURS and snapshot.mood_buckets:
            # Default view is precomputed with each refresh
            buckets = snapshot.mood_buckets
        else:
            period = days * 24 if days else settings.MOOD_PERIOD_HOURS
            buckets = mood_trend(snapshot.articles, clock(), period_hours=period, step_hours=step)
        return MoodTrendResponse(points=[MoodBucketOut.model_validate(asdict(b)) for b in buckets])

    @app.get("/api/leaderboard", response_model=LeaderboardResponse, deprecated=True)
    async def get_leaderboard(
        days: Optional[int] = Query(None, ge=1, le=30, description="Trailing period in days"),
    ):
        snapshot = store.get_or_empty()
        if days is None:
            rows = snapshot.leaderboard
        else:
            rows = source_leaderboard(
                snapshot.articles,
                min_articles=settings.LEADERBOARD_MIN_ARTICLES,
                top_n=settings.LEADERBOARD_TOP_N,
                since=clock() - timedelta(days=days),
            )
        return LeaderboardResponse(rows=[LeaderboardRowOut.model_validate(asdict(r)) for r in rows])

    @app.get("/api/pinned", response_model=NewsResponse)
    async def get_pinned():
        snapshot = store.get_or_empty()
        pinned = select_pinned(snapshot.articles, settings.PINNED_URLS)
        return NewsResponse(fetched_at=snapshot.fetched_at, articles=articles_out(pinned))

    @app.get("/api/market", response_model=MarketResponse)
    async def get_market():
        snapshot = store.get_or_empty()
        return MarketResponse(
            fetched_at=snapshot.fetched_at,
            quotes=[MarketQuoteOut.model_validate(asdict(q)) for q in snapshot.quotes],
        )

    return app


app = create_app()


if __name__ == "__main__":
    # For development
    import uvicorn
    uvicorn.run("informed360.main:app", host="0.0.0.0", port=get_settings().PORT, reload=True)
