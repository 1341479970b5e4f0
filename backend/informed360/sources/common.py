"""
Common utilities for feed fetchers.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from dateutil import parser as dateparser

from informed360.config import SOURCE_NAME_PATTERNS
from informed360.utils import canonicalize_url, extract_domain_from_url, extract_host_from_url, generate_id

# Abbreviations dateutil does not resolve on its own, as UTC offsets in seconds
TZ_ABBREVIATIONS = {"IST": 19800}


def make_article_id(link: str, guid: str = "", title: str = "") -> str:
    """
    Generate the deduplication key for an article.

    The canonical link is preferred, then the guid, then the title.

    Args:
        link: Article URL
        guid: Feed-provided unique id, if any
        title: Article title

    Returns:
        16-character hexadecimal string ID
    """
    key = canonicalize_url(link) or (guid or "").strip() or (title or "").strip().lower()
    return generate_id(key)


def parse_utc_datetime(date_string: Optional[str]) -> datetime:
    """
    Parse a date string and convert to UTC datetime.

    Args:
        date_string: Date string in various formats, or None

    Returns:
        UTC datetime object, or current UTC time if input is missing or unparseable
    """
    if not date_string:
        return datetime.now(timezone.utc)

    try:
        parsed_date = dateparser.parse(date_string, tzinfos=TZ_ABBREVIATIONS)
    except (ValueError, OverflowError, TypeError):
        return datetime.now(timezone.utc)

    if parsed_date.tzinfo:
        return parsed_date.astimezone(timezone.utc)
    else:
        return parsed_date.replace(tzinfo=timezone.utc)


def clean_text(text: Optional[str]) -> str:
    """
    Clean and normalize text content.

    Args:
        text: Raw text string or None

    Returns:
        Cleaned text string, empty string if input is None
    """
    if not text:
        return ""
    return text.strip()


def infer_source_name(link: str) -> str:
    """
    Map an article link to a canonical publisher name.

    Args:
        link: Article URL

    Returns:
        Canonical name from the pattern table, else the bare domain
    """
    host = extract_host_from_url(link)
    for pattern, name in SOURCE_NAME_PATTERNS:
        if host and pattern.search(host):
            return name
    return extract_domain_from_url(link) or host
