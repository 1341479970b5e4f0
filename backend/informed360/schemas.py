# informed360/schemas.py
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class ApiModel(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class SentimentOut(ApiModel):
    pos_pct: int
    neu_pct: int
    neg_pct: int
    label: Literal["positive", "neutral", "negative"]
    negative_terms: List[str] = []

class SentimentMixOut(ApiModel):
    pos_pct: int
    neu_pct: int
    neg_pct: int

class ArticleOut(ApiModel):
    id: str
    title: str
    description: str = ""
    link: str
    source: str
    image: str = ""
    published_at: datetime
    sentiment: SentimentOut
    category: str = ""

class NewsResponse(ApiModel):
    fetched_at: datetime
    articles: List[ArticleOut]

class TopicClusterOut(ApiModel):
    key: str
    title: str
    article_count: int
    source_count: int
    sentiment: SentimentMixOut
    representative_image: Optional[str] = None

class TopicsResponse(ApiModel):
    fetched_at: datetime
    topics: List[TopicClusterOut]

class TrendingTopicOut(ApiModel):
    topic: str
    article_count: int
    source_count: int
    sentiment: SentimentMixOut

class TrendingResponse(ApiModel):
    fetched_at: datetime
    topics: List[TrendingTopicOut]

class MoodResponse(ApiModel):
    positive_pct: int
    neutral_pct: int
    negative_pct: int
    article_count: int

class MoodBucketOut(ApiModel):
    window_start: datetime
    window_end: datetime
    pos_pct: int
    neu_pct: int
    neg_pct: int
    article_count: int

class MoodTrendResponse(ApiModel):
    points: List[MoodBucketOut]

class LeaderboardRowOut(ApiModel):
    source: str
    article_count: int
    pos_pct: int
    neu_pct: int
    neg_pct: int

class LeaderboardResponse(ApiModel):
    rows: List[LeaderboardRowOut]

class MarketQuoteOut(ApiModel):
    symbol: str
    name: str
    price: float
    change: float
    change_pct: float

class MarketResponse(ApiModel):
    fetched_at: datetime
    quotes: List[MarketQuoteOut]

class HealthResponse(ApiModel):
    ok: bool
    at: datetime
    state: str
