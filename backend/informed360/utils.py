"""
Shared utility functions for the news mood service.
"""
from __future__ import annotations

import html
import re
from datetime import datetime, timezone
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import tldextract
from bs4 import BeautifulSoup

# Bundled public suffix snapshot only; no network lookups at runtime
_tld_extract = tldextract.TLDExtract(suffix_list_urls=())


def now_utc() -> datetime:
    """
    Get current UTC datetime with timezone information.

    Returns:
        Current UTC datetime
    """
    return datetime.now(timezone.utc)


def normalize_text(text: str | None) -> str:
    """
    Normalize whitespace in text content.

    Args:
        text: Input text string (can be None)

    Returns:
        Normalized text with single spaces and trimmed edges
    """
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


def strip_html(text: str | None, max_length: int | None = None) -> str:
    """
    Remove markup and entities from a feed summary.

    Args:
        text: Raw HTML snippet (can be None)
        max_length: Optional cap on the returned length

    Returns:
        Plain text with normalized whitespace
    """
    if not text:
        return ""
    # Entities first, so entity-encoded markup is removed as markup
    soup = BeautifulSoup(html.unescape(text), "html.parser")
    plain = normalize_text(soup.get_text(separator=" "))
    if max_length is not None and len(plain) > max_length:
        plain = plain[: max_length - 1].rstrip() + "…"
    return plain


def extract_domain_from_url(url: str) -> str:
    """
    Extract the registered domain from a URL.

    Args:
        url: Full URL string

    Returns:
        Normalized domain name in lowercase, e.g. "thehindu.com"
    """
    if not url:
        return ""
    extracted = _tld_extract(url)
    if extracted.suffix:
        return f"{extracted.domain}.{extracted.suffix}".lower()
    return (extracted.domain or urlsplit(url).netloc).lower()


def extract_host_from_url(url: str) -> str:
    """Full hostname without a leading "www.", e.g. "economictimes.indiatimes.com"."""
    host = urlsplit(url or "").netloc.lower().split("@")[-1].split(":")[0]
    return host[4:] if host.startswith("www.") else host


def canonicalize_url(url: str) -> str:
    """
    Reduce a link to the form used for deduplication.

    Scheme and host are lowercased, "www." is dropped, fragments and utm_*
    tracking parameters are removed, and a trailing slash is trimmed.
    """
    url = (url or "").strip()
    if not url:
        return ""
    parts = urlsplit(url)
    host = parts.netloc.lower()
    if host.startswith("www."):
        host = host[4:]
    query = urlencode(
        [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if not k.lower().startswith("utm_")]
    )
    path = parts.path.rstrip("/")
    return urlunsplit((parts.scheme.lower(), host, path, query, ""))


def generate_id(*parts: str) -> str:
    """
    Generate a deterministic short ID from multiple string parts.

    Args:
        *parts: Variable number of string arguments

    Returns:
        16-character hexadecimal string
    """
    from hashlib import blake2b
    key = "|".join(parts).encode("utf-8", "ignore")
    return blake2b(key, digest_size=8).hexdigest()


def clamp_pct(value: float) -> int:
    """
    Round and clamp a percentage to the range [0, 100].

    Args:
        value: Input percentage

    Returns:
        Integer percentage between 0 and 100
    """
    return max(0, min(100, int(round(value))))
