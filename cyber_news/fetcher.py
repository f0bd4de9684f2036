from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

import feedparser
import requests

from .dedup import deduplicate
from .exceptions import FeedFetchError, InputRejected, ParseError
from .models import Article, FeedSource, SourceSnapshot
from .normalizer import to_article
from .parser import parse_entry
from .validation import sanitize_text, strip_html, validate_url

logger = logging.getLogger(__name__)

USER_AGENT = "cyber-news/1.0 (+feed reader)"
DEFAULT_TIMEOUT = 10.0


def fetch_feed(url: str, timeout: float = DEFAULT_TIMEOUT) -> Any:
    """
    Fetch a single feed URL and return the feedparser result.

    `timeout` (seconds) bounds both connecting and each wait for data, so a host that
    accepts the connection and never answers fails instead of hanging.

    Raises FeedFetchError for unsafe URLs, network/parse issues, or feeds with no entries.
    """
    try:
        validate_url(url)
    except InputRejected as e:
        raise FeedFetchError(f"Invalid feed URL: {e}") from e

    try:
        response = requests.get(url, timeout=timeout, headers={"User-Agent": USER_AGENT})
        response.raise_for_status()
    except requests.Timeout as e:
        raise FeedFetchError(f"Timed out after {timeout:g}s fetching feed: {url}") from e
    except requests.RequestException as e:
        raise FeedFetchError(f"Failed to fetch feed: {url} ({e})") from e

    feed = feedparser.parse(response.content)

    entries = getattr(feed, "entries", None)
    if getattr(feed, "bozo", 0) and not entries:
        # bozo_exception may exist; include a short message for diagnostics
        exc = getattr(feed, "bozo_exception", None)
        msg = f"Invalid RSS/Atom feed: {url}"
        if exc:
            msg += f" ({exc})"
        raise FeedFetchError(msg)

    if not isinstance(entries, list):
        raise FeedFetchError(f"Feed has no entries: {url}")
    return feed


def snapshot_from_feed(feed: Any, source: FeedSource, captured_at: Optional[datetime] = None) -> SourceSnapshot:
    """Turn a parsed feed into a sanitized, de-duplicated, newest-first snapshot."""
    captured_at = captured_at or datetime.now(timezone.utc)

    articles: List[Article] = []
    for raw in getattr(feed, "entries", None) or []:
        try:
            articles.append(to_article(parse_entry(raw), source.name, captured_at))
        except ParseError as e:
            # Skip malformed rows
            logger.debug("Skipping entry from %s: %s", source.name, e)
            continue

    meta = getattr(feed, "feed", None) or {}
    title = sanitize_text(strip_html(meta.get("title")), 200) or source.name
    description = sanitize_text(strip_html(meta.get("description") or meta.get("subtitle")), 500) or source.description

    return SourceSnapshot.build(
        source.name,
        deduplicate(articles),
        captured_at,
        title=title,
        description=description,
    )


def fetch_source(source: FeedSource, timeout: float = DEFAULT_TIMEOUT) -> SourceSnapshot:
    """
    Default fetch collaborator for CacheCoordinator: one source in, one snapshot out.

    Raises FeedFetchError, including when the host does not answer within `timeout`
    seconds; the coordinator records it and keeps the previous snapshot.
    """
    feed = fetch_feed(source.url, timeout)
    snap = snapshot_from_feed(feed, source)
    logger.info("Fetched %d items from %s", len(snap.articles), source.name)
    return snap
