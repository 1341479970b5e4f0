"""
File: informed360/sources/market.py
Market ticker quotes from the public Yahoo Finance chart endpoint (unauthenticated).
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence

import httpx

from informed360.models import MarketQuote

logger = logging.getLogger(__name__)

CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart/{symbol}"


def quote_from_chart(symbol: str, data: dict) -> Optional[MarketQuote]:
    results = (data.get("chart") or {}).get("result") or []
    if not results:
        return None
    meta = results[0].get("meta") or {}
    price = meta.get("regularMarketPrice")
    previous = meta.get("chartPreviousClose") or meta.get("previousClose")
    if price is None:
        return None

    price = float(price)
    change = price - float(previous) if previous else 0.0
    change_pct = (change / float(previous) * 100) if previous else 0.0
    return MarketQuote(
        symbol=symbol,
        name=meta.get("shortName") or meta.get("longName") or symbol,
        price=round(price, 2),
        change=round(change, 2),
        change_pct=round(change_pct, 2),
    )


class MarketFetcher:
    def __init__(self, client: httpx.AsyncClient, symbols: Sequence[str]):
        self.client = client
        self.symbols = list(symbols)

    async def _fetch_one(self, symbol: str) -> Optional[MarketQuote]:
        try:
            r = await self.client.get(CHART_URL.format(symbol=symbol), params={"range": "1d", "interval": "1d"})
            r.raise_for_status()
            return quote_from_chart(symbol, r.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Quote fetch failed for %s: %s", symbol, e)
            return None

    async def fetch(self) -> List[MarketQuote]:
        # Failed symbols are dropped, order follows configuration
        quotes = await asyncio.gather(*(self._fetch_one(s) for s in self.symbols))
        return [q for q in quotes if q is not None]
