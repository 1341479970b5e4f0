"""Curated articles selected by a configured URL allow-list."""
from __future__ import annotations

from typing import List, Sequence

from informed360.models import Article
from informed360.utils import canonicalize_url


def select_pinned(articles: Sequence[Article], pinned_urls: Sequence[str]) -> List[Article]:
    """Articles whose canonical link is on the allow-list, in allow-list order."""
    by_link = {}
    for article in articles:
        by_link.setdefault(canonicalize_url(article.link), article)

    pinned: List[Article] = []
    for url in pinned_urls:
        article = by_link.get(canonicalize_url(url))
        if article is not None and article not in pinned:
            pinned.append(article)
    return pinned
