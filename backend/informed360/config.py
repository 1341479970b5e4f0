"""
Application configuration with environment variable support.
"""
from __future__ import annotations

import re
from functools import lru_cache
from typing import List, Optional, Pattern, Tuple

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class FeedSource(BaseModel):
    """One configured RSS feed, with an optional display label and section."""

    url: str
    label: Optional[str] = None
    category: Optional[str] = None


DEFAULT_FEED_SOURCES: List[FeedSource] = [
    FeedSource(url="https://www.thehindu.com/news/national/feeder/default.rss", label="The Hindu", category="india"),
    FeedSource(url="https://feeds.feedburner.com/ndtvnews-top-stories", label="NDTV", category="india"),
    FeedSource(url="https://www.indiatoday.in/rss/home", label="India Today", category="india"),
    FeedSource(url="https://www.news18.com/commonfeeds/v1/eng/rss/india.xml", label="News18", category="india"),
    FeedSource(url="https://www.livemint.com/rss/news", label="Mint", category="business"),
    FeedSource(url="https://www.hindustantimes.com/feeds/rss/india-news/rssfeed.xml", label="HT", category="india"),
    FeedSource(url="https://timesofindia.indiatimes.com/rssfeedstopstories.cms", label="TOI", category="india"),
    FeedSource(url="https://indianexpress.com/section/india/feed/", label="IE", category="india"),
]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Feed ingestion
    FEED_SOURCES: List[FeedSource] = DEFAULT_FEED_SOURCES
    FETCH_TIMEOUT_SECONDS: float = 15.0
    MAX_PER_SOURCE: int = 30

    # Refresh cycle
    REFRESH_INTERVAL_SECONDS: int = 480

    # Aggregation thresholds
    CLUSTER_MIN_ARTICLES: int = 2
    CLUSTER_TOP_N: int = 12
    LEADERBOARD_MIN_ARTICLES: int = 2
    LEADERBOARD_TOP_N: int = 6
    MOOD_PERIOD_HOURS: int = 24
    MOOD_STEP_HOURS: int = 4

    # Downstream sources
    TRENDING_FEED_URL: str = "https://trends.google.com/trending/rss?geo=IN"
    TRENDING_TOP_N: int = 10
    MARKET_SYMBOLS: List[str] = ["^NSEI", "^BSESN", "USDINR=X", "GC=F"]
    PINNED_URLS: List[str] = []

    # Server
    CORS_ALLOW_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    PORT: int = 8000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# Canonical source names, matched against the article link's domain.
# First match wins, so more specific patterns come first.
SOURCE_NAME_PATTERNS: List[Tuple[Pattern[str], str]] = [
    (re.compile(r"(^|\.)thehindu\.com$"), "The Hindu"),
    (re.compile(r"(^|\.)thehindubusinessline\.com$"), "BusinessLine"),
    (re.compile(r"(^|\.)ndtv\.com$"), "NDTV"),
    (re.compile(r"(^|\.)indiatoday\.in$"), "India Today"),
    (re.compile(r"(^|\.)news18\.com$"), "News18"),
    (re.compile(r"(^|\.)livemint\.com$"), "Mint"),
    (re.compile(r"(^|\.)hindustantimes\.com$"), "HT"),
    (re.compile(r"(^|\.)economictimes\.indiatimes\.com$"), "Economic Times"),
    (re.compile(r"(^|\.)timesofindia\.indiatimes\.com$"), "TOI"),
    (re.compile(r"(^|\.)indianexpress\.com$"), "IE"),
    (re.compile(r"(^|\.)reuters\.com$"), "Reuters"),
    (re.compile(r"(^|\.)bbc\.(co\.uk|com)$"), "BBC"),
    (re.compile(r"(^|\.)aljazeera\.com$"), "Al Jazeera"),
    (re.compile(r"(^|\.)scroll\.in$"), "Scroll"),
    (re.compile(r"(^|\.)thewire\.in$"), "The Wire"),
    (re.compile(r"(^|\.)firstpost\.com$"), "Firstpost"),
    (re.compile(r"(^|\.)deccanherald\.com$"), "Deccan Herald"),
    (re.compile(r"(^|\.)moneycontrol\.com$"), "Moneycontrol"),
    (re.compile(r"(^|\.)business-standard\.com$"), "Business Standard"),
]

LOGO_URL_TEMPLATE = "https://logo.clearbit.com/{domain}"

# HTTP Client Configuration
USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
)
HTTP_HEADERS = {"User-Agent": USER_AGENT}
