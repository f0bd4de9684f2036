from __future__ import annotations

from datetime import datetime
from typing import Any, Dict

from .exceptions import InputRejected, ParseError
from .models import Article
from .validation import sanitize_text, strip_html, validate_url

MAX_TITLE_CHARS = 200
MAX_TEXT_CHARS = 10000


def to_article(entry: Dict[str, Any], source: str, captured_at: datetime) -> Article:
    """
    Convert a parsed entry dict into a sanitized Article.
    Requires:
    - link (non-empty, http(s), not pointing at a private or metadata address)
    Defaults:
    - title → "Untitled", published_at → `captured_at`
    """
    link = entry.get("link") or ""
    if not link:
        raise ParseError("Entry lacks required field for Article: link")
    try:
        validate_url(link)
    except InputRejected as e:
        raise ParseError(f"Entry link rejected: {e}") from e

    title = sanitize_text(strip_html(entry.get("title")), MAX_TITLE_CHARS) or "Untitled"
    summary = sanitize_text(strip_html(entry.get("summary")), MAX_TEXT_CHARS)
    raw_content = entry.get("content")
    content = sanitize_text(strip_html(raw_content), MAX_TEXT_CHARS) if raw_content else None

    tags = tuple(sanitize_text(t, 100) for t in entry.get("tags") or () if t)
    author = entry.get("author")

    return Article(
        title=title,
        link=link,
        published_at=entry.get("published_at") or captured_at,
        source=source,
        summary=summary,
        content=content or None,
        author=sanitize_text(author, 200) or None,
        tags=tuple(t for t in tags if t),
        guid=entry.get("guid"),
    )
