"""
Per-source sentiment leaderboard.
"""
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Sequence

from informed360.core.mood import average_sentiment, published_since
from informed360.models import Article, SourceLeaderboardRow


def source_leaderboard(
    articles: Sequence[Article],
    min_articles: int = 2,
    top_n: int = 6,
    since: Optional[datetime] = None,
) -> List[SourceLeaderboardRow]:
    """
    Rank sources by article volume with their mean sentiment.

    Sources below ``min_articles`` are left out however extreme their
    sentiment. Equal counts are ordered by source name, case-insensitively.

    Args:
        articles: Current article set
        min_articles: Minimum articles for a source to be listed
        top_n: Maximum number of rows
        since: Only count articles published at or after this time

    Returns:
        Leaderboard rows, highest volume first
    """
    groups: Dict[str, List[Article]] = {}
    for article in published_since(articles, since):
        name = (article.source or "").strip()
        if name:
            groups.setdefault(name, []).append(article)

    rows = []
    for name, members in groups.items():
        if len(members) < min_articles:
            continue
        mix, count = average_sentiment(members)
        rows.append(
            SourceLeaderboardRow(
                source=name,
                article_count=count,
                pos_pct=mix.pos_pct,
                neu_pct=mix.neu_pct,
                neg_pct=mix.neg_pct,
            )
        )

    rows.sort(key=lambda row: (-row.article_count, row.source.casefold(), row.source))
    return rows[: max(0, top_n)]
