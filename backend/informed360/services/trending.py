"""
Join trending search queries against the current articles.
"""
from __future__ import annotations

from typing import List, Sequence

from informed360.core.mood import average_sentiment
from informed360.models import Article, TrendingTopic


def match_trending(queries: Sequence[str], articles: Sequence[Article], top_n: int = 10) -> List[TrendingTopic]:
    """
    Attach coverage and sentiment to each trending query.

    An article matches when the query appears in its title, case-insensitively.
    Queries with no matching article are skipped; trending order is kept.

    Args:
        queries: Trending queries, most popular first
        articles: Current article set
        top_n: Maximum number of topics

    Returns:
        List of TrendingTopic objects
    """
    lowered_titles = [(article, article.title.lower()) for article in articles]
    topics: List[TrendingTopic] = []

    for query in queries:
        needle = query.strip().lower()
        if not needle:
            continue
        matched = [article for article, title in lowered_titles if needle in title]
        if not matched:
            continue

        mix, count = average_sentiment(matched)
        topics.append(
            TrendingTopic(
                topic=query.strip(),
                article_count=count,
                source_count=len({article.source for article in matched}),
                sentiment=mix,
            )
        )
        if len(topics) >= top_n:
            break

    return topics
