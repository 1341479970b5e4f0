"""
File: informed360/models.py
Internal data structures shared by the ingestion and aggregation stages.

Every type here is frozen: a refresh builds new values and the snapshot that
holds them is swapped wholesale, never edited.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from informed360.utils import now_utc


@dataclass(frozen=True)
class Sentiment:
    """Canonical sentiment shape consumed by every downstream component."""

    pos_pct: int
    neu_pct: int
    neg_pct: int
    label: str  # "positive" | "neutral" | "negative"
    negative_terms: Tuple[str, ...] = ()

    @classmethod
    def neutral(cls) -> "Sentiment":
        return cls(pos_pct=0, neu_pct=100, neg_pct=0, label="neutral")


@dataclass(frozen=True)
class RawEntry:
    """One feed entry after field extraction, before scoring and dedup."""

    title: str
    link: str
    description: str
    source: str
    image: str
    published_at: datetime
    guid: str = ""
    category: str = ""


@dataclass(frozen=True)
class Article:
    id: str
    title: str
    description: str
    link: str
    source: str
    image: str
    published_at: datetime
    sentiment: Sentiment
    category: str = ""


@dataclass(frozen=True)
class SentimentMix:
    """Averaged percentage triple, used by clusters and trending topics."""

    pos_pct: int
    neu_pct: int
    neg_pct: int


@dataclass(frozen=True)
class TopicCluster:
    key: str
    title: str
    article_count: int
    source_count: int
    sentiment: SentimentMix
    representative_image: Optional[str] = None


@dataclass(frozen=True)
class MoodBucket:
    window_start: datetime
    window_end: datetime
    pos_pct: int
    neu_pct: int
    neg_pct: int
    article_count: int


@dataclass(frozen=True)
class SourceLeaderboardRow:
    source: str
    article_count: int
    pos_pct: int
    neu_pct: int
    neg_pct: int


@dataclass(frozen=True)
class TrendingTopic:
    topic: str
    article_count: int
    source_count: int
    sentiment: SentimentMix


@dataclass(frozen=True)
class MarketQuote:
    symbol: str
    name: str
    price: float
    change: float
    change_pct: float


@dataclass(frozen=True)
class Snapshot:
    fetched_at: datetime
    articles: Tuple[Article, ...] = ()
    clusters: Tuple[TopicCluster, ...] = ()
    mood_buckets: Tuple[MoodBucket, ...] = ()
    leaderboard: Tuple[SourceLeaderboardRow, ...] = ()
    trending: Tuple[TrendingTopic, ...] = ()
    quotes: Tuple[MarketQuote, ...] = ()

    @classmethod
    def empty(cls) -> "Snapshot":
        return cls(fetched_at=now_utc())


__all__ = [
    "Article",
    "MarketQuote",
    "MoodBucket",
    "RawEntry",
    "Sentiment",
    "SentimentMix",
    "Snapshot",
    "SourceLeaderboardRow",
    "TopicCluster",
    "TrendingTopic",
]
