"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest

from informed360.models import Article, RawEntry, Sentiment
from informed360.sources.common import make_article_id

NOW = datetime(2024, 5, 20, 12, 0, tzinfo=timezone.utc)


def sentiment(pos: int = 0, neu: int = 100, neg: int = 0, label: str = "neutral") -> Sentiment:
    return Sentiment(pos_pct=pos, neu_pct=neu, neg_pct=neg, label=label)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time."""
    return NOW


@pytest.fixture
def make_article() -> Callable[..., Article]:
    """Factory for scored articles with sensible defaults."""

    def _make(
        title: str = "Sample headline",
        source: str = "The Hindu",
        link: str | None = None,
        hours_ago: float = 1.0,
        pos: int = 0,
        neu: int = 100,
        neg: int = 0,
        label: str = "neutral",
        image: str = "",
        category: str = "",
    ) -> Article:
        link = link or f"https://example.com/{title.lower().replace(' ', '-')}"
        return Article(
            id=make_article_id(link),
            title=title,
            description="",
            link=link,
            source=source,
            image=image,
            published_at=NOW - timedelta(hours=hours_ago),
            sentiment=sentiment(pos, neu, neg, label),
            category=category,
        )

    return _make


@pytest.fixture
def make_entry() -> Callable[..., RawEntry]:
    """Factory for unscored feed entries."""

    def _make(
        title: str = "Sample headline",
        link: str = "https://example.com/sample",
        source: str = "The Hindu",
        hours_ago: float = 1.0,
        guid: str = "",
    ) -> RawEntry:
        return RawEntry(
            title=title,
            link=link,
            description="",
            source=source,
            image="",
            published_at=NOW - timedelta(hours=hours_ago),
            guid=guid,
        )

    return _make
