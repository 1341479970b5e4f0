"""
Topic clustering by shared title phrases.

This is a lightweight heuristic, not semantic similarity. Titles are reduced to
their adjacent-word pairs (bigrams); a bigram seen in at least two titles of the
current article set counts as a common phrase. An article's cluster key is its
first three common phrases in title order, and articles with identical keys
form one cluster. Phrase-order variation can merge or split stories; that is
an accepted approximation.
"""
from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Sequence

from informed360.models import Article, SentimentMix, TopicCluster

MIN_TOKEN_LENGTH = 3
KEY_BIGRAMS = 3
FALLBACK_TOKENS = 3

_PUNCT_RE = re.compile(r"[^\w\s]", flags=re.UNICODE)


class Clusterer(Protocol):
    def cluster(self, articles: Sequence[Article]) -> List[TopicCluster]: ...


def normalize_title(title: str) -> List[str]:
    """Lowercase, drop punctuation, collapse whitespace; returns the tokens."""
    return _PUNCT_RE.sub(" ", (title or "").lower()).split()


def title_bigrams(tokens: Sequence[str]) -> List[str]:
    """Adjacent token pairs where both tokens are at least three characters long."""
    return [
        f"{a} {b}"
        for a, b in zip(tokens, tokens[1:])
        if len(a) >= MIN_TOKEN_LENGTH and len(b) >= MIN_TOKEN_LENGTH
    ]


def cluster_key(tokens: Sequence[str], common: Counter) -> str:
    """
    Build the signature used to group an article.

    Args:
        tokens: Normalized title tokens
        common: Number of titles each bigram appears in

    Returns:
        Up to three shared bigrams joined by " | ", or the first three
        tokens when the title shares no phrase with any other
    """
    shared: List[str] = []
    for bigram in title_bigrams(tokens):
        if common[bigram] >= 2 and bigram not in shared:
            shared.append(bigram)
            if len(shared) == KEY_BIGRAMS:
                break
    if shared:
        return " | ".join(shared)
    return " ".join(tokens[:FALLBACK_TOKENS])


@dataclass
class _Accumulator:
    title: str
    count: int = 0
    pos: int = 0
    neu: int = 0
    neg: int = 0
    sources: Dict[str, None] = field(default_factory=dict)
    image: Optional[str] = None

    def add(self, article: Article) -> None:
        self.count += 1
        self.pos += article.sentiment.pos_pct
        self.neu += article.sentiment.neu_pct
        self.neg += article.sentiment.neg_pct
        self.sources.setdefault(article.source, None)
        if self.image is None and article.image:
            self.image = article.image


class PhraseClusterer:
    """Default clusterer: groups titles by shared phrase signature."""

    def __init__(self, min_articles: int = 2, top_n: int = 12):
        self.min_articles = max(1, min_articles)
        self.top_n = top_n

    def cluster(self, articles: Sequence[Article]) -> List[TopicCluster]:
        tokenized = [normalize_title(article.title) for article in articles]

        # Document frequency: a bigram repeated inside one title counts once
        common: Counter = Counter()
        for tokens in tokenized:
            common.update(set(title_bigrams(tokens)))

        groups: Dict[str, _Accumulator] = {}
        for article, tokens in zip(articles, tokenized):
            key = cluster_key(tokens, common)
            if not key:
                continue
            if key not in groups:
                groups[key] = _Accumulator(title=article.title)
            groups[key].add(article)

        kept = [(key, acc) for key, acc in groups.items() if acc.count >= self.min_articles]
        # sorted() is stable, so equal counts keep first-seen order
        kept = sorted(kept, key=lambda item: item[1].count, reverse=True)[: self.top_n]

        return [
            TopicCluster(
                key=key,
                title=acc.title,
                article_count=acc.count,
                source_count=len(acc.sources),
                sentiment=SentimentMix(
                    pos_pct=round(acc.pos / acc.count),
                    neu_pct=round(acc.neu / acc.count),
                    neg_pct=round(acc.neg / acc.count),
                ),
                representative_image=acc.image,
            )
            for key, acc in kept
        ]
