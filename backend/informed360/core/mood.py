"""
Mood aggregation: instantaneous mood and time-bucketed trend.

Both views go through ``average_sentiment``; they differ only in which
articles are passed in. Trend windows are anchored to ``now - period`` and
tile the trailing period exactly, the last window being clipped at ``now``.
"""
from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple

from informed360.models import Article, MoodBucket, SentimentMix

NEUTRAL_BASELINE = SentimentMix(pos_pct=0, neu_pct=100, neg_pct=0)
EMPTY_WINDOW = SentimentMix(pos_pct=0, neu_pct=0, neg_pct=0)


def average_sentiment(
    articles: Sequence[Article],
    empty: SentimentMix = NEUTRAL_BASELINE,
) -> Tuple[SentimentMix, int]:
    """
    Unweighted mean of the articles' percentage triples.

    Args:
        articles: Articles to average
        empty: Value reported when there is nothing to average

    Returns:
        (rounded mean, article count)
    """
    n = len(articles)
    if n == 0:
        return empty, 0
    pos = sum(a.sentiment.pos_pct for a in articles)
    neu = sum(a.sentiment.neu_pct for a in articles)
    neg = sum(a.sentiment.neg_pct for a in articles)
    return SentimentMix(pos_pct=round(pos / n), neu_pct=round(neu / n), neg_pct=round(neg / n)), n


def published_since(articles: Sequence[Article], since: Optional[datetime]) -> List[Article]:
    if since is None:
        return list(articles)
    return [a for a in articles if a.published_at >= since]


def instant_mood(articles: Sequence[Article], since: Optional[datetime] = None) -> Tuple[SentimentMix, int]:
    """Current mood over all articles, or those published at or after ``since``."""
    return average_sentiment(published_since(articles, since))


def bucket_windows(now: datetime, period_hours: float, step_hours: float) -> List[Tuple[datetime, datetime]]:
    """
    Split the trailing period into contiguous, non-overlapping windows.

    Args:
        now: End of the period
        period_hours: Length of the trailing period
        step_hours: Width of each window

    Returns:
        (start, end) pairs, oldest first; the last end equals ``now``
    """
    if period_hours <= 0 or step_hours <= 0:
        raise ValueError("period_hours and step_hours must be positive")

    start = now - timedelta(hours=period_hours)
    step = timedelta(hours=step_hours)
    count = math.ceil(period_hours / step_hours)

    windows = []
    for i in range(count):
        window_start = start + step * i
        window_end = min(window_start + step, now)
        windows.append((window_start, window_end))
    return windows


def mood_trend(
    articles: Sequence[Article],
    now: datetime,
    period_hours: float = 24,
    step_hours: float = 4,
) -> List[MoodBucket]:
    """
    Average sentiment per fixed-width window of the trailing period.

    Windows are half-open [start, end), except that the last one also holds
    articles stamped exactly ``now``. Empty windows report zeros.

    Args:
        articles: Current article set
        now: End of the period
        period_hours: Length of the trailing period
        step_hours: Width of each window

    Returns:
        One MoodBucket per window, oldest first
    """
    windows = bucket_windows(now, period_hours, step_hours)
    period_start = windows[0][0]
    step = timedelta(hours=step_hours)

    members: List[List[Article]] = [[] for _ in windows]
    for article in articles:
        published = article.published_at
        if published < period_start or published > now:
            continue
        index = min(int((published - period_start) / step), len(windows) - 1)
        members[index].append(article)

    buckets = []
    for (window_start, window_end), bucket_articles in zip(windows, members):
        mix, count = average_sentiment(bucket_articles, empty=EMPTY_WINDOW)
        buckets.append(
            MoodBucket(
                window_start=window_start,
                window_end=window_end,
                pos_pct=mix.pos_pct,
                neu_pct=mix.neu_pct,
                neg_pct=mix.neg_pct,
                article_count=count,
            )
        )
    return buckets
