"""Tests for the HTTP read API."""

import asyncio
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from informed360.config import FeedSource, Settings
from informed360.core.clusters import PhraseClusterer
from informed360.main import create_app
from informed360.models import MarketQuote, Snapshot
from informed360.services.pipeline import NewsPipeline
from informed360.sources.collector import NewsCollector

from conftest import NOW, sentiment


def _settings(**overrides):
    values = dict(
        FEED_SOURCES=[],
        PINNED_URLS=["https://example.com/economy-grows-faster"],
        REFRESH_INTERVAL_SECONDS=3600,
        _env_file=None,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def snapshot(make_article):
    articles = (
        make_article("Economy grows fast", source="A", hours_ago=1, pos=80, neu=15, neg=5, label="positive", category="business"),
        make_article("Economy grows faster", source="B", hours_ago=2, pos=60, neu=30, neg=10, label="positive", category="business"),
        make_article("Flood warning issued", source="A", hours_ago=30, pos=0, neu=20, neg=80, label="negative", category="india"),
    )
    return Snapshot(
        fetched_at=NOW,
        articles=articles,
        clusters=tuple(PhraseClusterer(min_articles=2).cluster(articles)),
        quotes=(MarketQuote("^NSEI", "NIFTY 50", 22500.5, 120.25, 0.54),),
    )


def _client(snapshot, **settings):
    async def build():
        return snapshot

    return TestClient(create_app(_settings(**settings), build_snapshot=build, clock=lambda: NOW))


class TestReadApi:
    def test_health(self, snapshot):
        with _client(snapshot) as client:
            body = client.get("/health").json()
        assert body["ok"] is True
        assert body["state"] == "ready"
        assert "at" in body

    def test_news_shape_and_limit(self, snapshot):
        with _client(snapshot) as client:
            response = client.get("/api/news", params={"limit": 2})
        assert response.status_code == 200
        body = response.json()
        assert "fetchedAt" in body
        assert len(body["articles"]) == 2
        first = body["articles"][0]
        assert first["title"] == "Economy grows fast"
        assert set(first["sentiment"]) >= {"posPct", "neuPct", "negPct", "label"}
        assert "publishedAt" in first

    def test_news_sentiment_filter(self, snapshot):
        with _client(snapshot) as client:
            body = client.get("/api/news", params={"sentiment": "negative"}).json()
        assert [a["title"] for a in body["articles"]] == ["Flood warning issued"]

    def test_news_category_filter(self, snapshot):
        with _client(snapshot) as client:
            body = client.get("/api/news", params={"category": "Business"}).json()
            unknown = client.get("/api/news", params={"category": "sports"}).json()
        assert [a["title"] for a in body["articles"]] == ["Economy grows fast", "Economy grows faster"]
        assert body["articles"][0]["category"] == "business"
        assert unknown["articles"] == []

    def test_news_rejects_bad_limit(self, snapshot):
        with _client(snapshot) as client:
            assert client.get("/api/news", params={"limit": 0}).status_code == 422

    def test_topics(self, snapshot):
        with _client(snapshot) as client:
            body = client.get("/api/topics").json()
        topic = body["topics"][0]
        assert topic["articleCount"] == 2
        assert topic["sourceCount"] == 2
        assert topic["sentiment"] == {"posPct": 70, "neuPct": 22, "negPct": 8}

    def test_mood_all_and_recent(self, snapshot):
        with _client(snapshot) as client:
            everything = client.get("/api/mood").json()
            recent = client.get("/api/mood", params={"hours": 24}).json()
        assert everything["articleCount"] == 3
        assert recent == {"positivePct": 70, "neutralPct": 22, "negativePct": 8, "articleCount": 2}

    def test_mood_trend_buckets(self, snapshot):
        with _client(snapshot) as client:
            body = client.get("/api/mood-trend", params={"days": 1, "stepHours": 4}).json()
        points = body["points"]
        assert len(points) == 6
        assert [p["articleCount"] for p in points] == [0, 0, 0, 0, 0, 2]
        assert points[0]["windowEnd"] == points[1]["windowStart"]

    def test_leaderboard_deprecated_but_served(self, snapshot):
        with _client(snapshot) as client:
            one_day = client.get("/api/leaderboard", params={"days": 1}).json()
            two_days = client.get("/api/leaderboard", params={"days": 2}).json()
        assert one_day == {"rows": []}
        assert two_days["rows"][0]["source"] == "A"
        assert two_days["rows"][0]["articleCount"] == 2

    def test_pinned(self, snapshot):
        with _client(snapshot) as client:
            body = client.get("/api/pinned").json()
        assert [a["title"] for a in body["articles"]] == ["Economy grows faster"]

    def test_market_and_trending(self, snapshot):
        with _client(snapshot) as client:
            market = client.get("/api/market").json()
            trending = client.get("/api/trending").json()
        assert market["quotes"][0]["changePct"] == 0.54
        assert trending["topics"] == []


class TestDegradedStartup:
    def test_failed_first_refresh_serves_empty_collections(self):
        async def broken():
            raise RuntimeError("no network")

        app = create_app(_settings(), build_snapshot=broken, clock=lambda: NOW)
        with TestClient(app) as client:
            assert client.get("/health").json()["state"] == "idle"
            news = client.get("/api/news")
            assert news.status_code == 200
            assert news.json()["articles"] == []
            assert client.get("/api/topics").json()["topics"] == []
            assert client.get("/api/mood").json() == {
                "positivePct": 0,
                "neutralPct": 100,
                "negativePct": 0,
                "articleCount": 0,
            }

    def test_timed_out_source_does_not_block_news(self, make_entry):
        slow = FeedSource(url="https://slow.example/rss", label="Slow")
        fast = FeedSource(url="https://fast.example/rss", label="Fast")

        class Fetcher:
            async def fetch(self, source):
                if source is slow:
                    await asyncio.sleep(5)
                return [make_entry(title=f"{source.label} story", link=f"{source.url}/1", source=source.label)]

        settings = _settings(FEED_SOURCES=[slow, fast])
        collector = NewsCollector(
            Fetcher(),
            [slow, fast],
            timeout_seconds=0.05,
            scorer=lambda text: sentiment(10, 80, 10, "neutral"),
        )
        pipeline = NewsPipeline(settings, collector, clock=lambda: NOW)
        app = create_app(settings, build_snapshot=pipeline.build_snapshot, clock=lambda: NOW)

        with TestClient(app) as client:
            response = client.get("/api/news")
        assert response.status_code == 200
        assert [a["source"] for a in response.json()["articles"]] == ["Fast"]


class StubCollector:
    def __init__(self, articles):
        self.articles = articles

    async def collect(self):
        return list(self.articles)


def _iso(value):
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class TestPrecomputedViews:
    """Default views come from the snapshot built at refresh time."""

    def _app(self, make_article, **overrides):
        settings = _settings(MOOD_PERIOD_HOURS=12, MOOD_STEP_HOURS=3, **overrides)
        articles = [
            make_article("Budget cheer", source="Mint", hours_ago=1, pos=60, neu=40, neg=0),
            make_article("Budget doubts", source="Mint", hours_ago=7, pos=0, neu=60, neg=40),
            make_article("Old news", source="TOI", hours_ago=20),
        ]
        pipeline = NewsPipeline(settings, StubCollector(articles), clock=lambda: NOW)
        return create_app(settings, build_snapshot=pipeline.build_snapshot, clock=lambda: NOW)

    def test_default_mood_trend_follows_configured_period(self, make_article):
        with TestClient(self._app(make_article)) as client:
            points = client.get("/api/mood-trend").json()["points"]
        assert len(points) == 4
        assert _iso(points[0]["windowStart"]) == NOW - timedelta(hours=12)
        assert _iso(points[-1]["windowEnd"]) == NOW
        assert [p["articleCount"] for p in points] == [0, 1, 0, 1]

    def test_step_override_keeps_configured_period(self, make_article):
        with TestClient(self._app(make_article)) as client:
            points = client.get("/api/mood-trend", params={"stepHours": 6}).json()["points"]
        assert len(points) == 2
        assert _iso(points[0]["windowStart"]) == NOW - timedelta(hours=12)

    def test_default_leaderboard_is_snapshot_leaderboard(self, make_article):
        with TestClient(self._app(make_article)) as client:
            rows = client.get("/api/leaderboard").json()["rows"]
            recent = client.get("/api/leaderboard", params={"days": 1}).json()["rows"]
        assert [(r["source"], r["articleCount"]) for r in rows] == [("Mint", 2)]
        assert recent == rows
