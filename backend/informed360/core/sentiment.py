"""
VADER-based sentiment scoring at the ingestion boundary.

The scorer turns free text into the canonical ``Sentiment`` value. Percentages
come from VADER's positive and negative proportions; the neutral share is
derived so the triple always sums to about 100, whatever VADER reports.
"""
from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Dict, List, Protocol

from informed360.models import Sentiment
from informed360.utils import clamp_pct

logger = logging.getLogger(__name__)

POSITIVE_THRESHOLD = 0.05
NEGATIVE_THRESHOLD = -0.05
MAX_NEGATIVE_TERMS = 4
NEGATIVE_TERMS_MIN_PCT = 50

_TOKEN_RE = re.compile(r"[a-z][a-z'\-]*")


class SentimentScorer(Protocol):
    def __call__(self, text: str) -> Sentiment: ...


@lru_cache(maxsize=1)
def _load_analyzer():
    """
    Load the VADER analyzer once.

    Returns:
        A SentimentIntensityAnalyzer instance
    """
    from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

    return SentimentIntensityAnalyzer()


def label_for_compound(compound: float) -> str:
    if compound >= POSITIVE_THRESHOLD:
        return "positive"
    if compound <= NEGATIVE_THRESHOLD:
        return "negative"
    return "neutral"


def salient_negative_terms(text: str, lexicon: Dict[str, float], limit: int = MAX_NEGATIVE_TERMS) -> List[str]:
    """
    Rank the text's negative lexicon words by magnitude.

    Args:
        text: Text that was scored
        lexicon: Token to valence mapping of the underlying scorer
        limit: Maximum number of terms to return

    Returns:
        Unique negative terms, most negative first (first occurrence breaks ties)
    """
    seen: Dict[str, float] = {}
    for token in _TOKEN_RE.findall(text.lower()):
        valence = lexicon.get(token)
        if valence is not None and valence < 0 and token not in seen:
            seen[token] = valence
    ranked = sorted(seen.items(), key=lambda kv: kv[1])
    return [token for token, _ in ranked[:limit]]


def sentiment_from_scores(scores: Dict[str, float], text: str = "", lexicon: Dict[str, float] | None = None) -> Sentiment:
    """
    Build the canonical Sentiment from raw pos/neg/compound proportions.

    Args:
        scores: Mapping with "pos", "neg" in [0, 1] and "compound" in [-1, 1]
        text: Scored text, used for negative term extraction
        lexicon: Scorer lexicon, used for negative term extraction

    Returns:
        Sentiment with a derived neutral percentage
    """
    pos_pct = clamp_pct(float(scores.get("pos", 0.0)) * 100)
    neg_pct = clamp_pct(float(scores.get("neg", 0.0)) * 100)
    neu_pct = max(0, 100 - pos_pct - neg_pct)
    label = label_for_compound(float(scores.get("compound", 0.0)))

    terms: List[str] = []
    if neg_pct > NEGATIVE_TERMS_MIN_PCT and lexicon:
        terms = salient_negative_terms(text, lexicon)

    return Sentiment(
        pos_pct=pos_pct,
        neu_pct=neu_pct,
        neg_pct=neg_pct,
        label=label,
        negative_terms=tuple(terms),
    )


def score_text(text: str) -> Sentiment:
    """
    Score free text, falling back to neutral on any scorer failure.

    Args:
        text: Headline plus snippet

    Returns:
        Sentiment value (never raises)
    """
    if not text or not text.strip():
        return Sentiment.neutral()
    try:
        analyzer = _load_analyzer()
        scores = analyzer.polarity_scores(text)
        return sentiment_from_scores(scores, text, analyzer.lexicon)
    except Exception as e:
        logger.warning("Sentiment scoring failed, using neutral: %s", e)
        return Sentiment.neutral()
