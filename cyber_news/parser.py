from __future__ import annotations

import calendar
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import feedparser


def _to_datetime(entry: Dict[str, Any]) -> Optional[datetime]:
    """
    Convert feed entry date fields to timezone-aware UTC datetime.
    Priority: published_parsed -> updated_parsed -> created_parsed -> string fields -> None.
    """
    for key in ("published_parsed", "updated_parsed", "created_parsed"):
        val = entry.get(key)
        if isinstance(val, time.struct_time):
            try:
                # feedparser normalizes *_parsed to UTC
                return datetime.fromtimestamp(calendar.timegm(val), tz=timezone.utc)
            except (OverflowError, ValueError):
                continue
    # Fallback: string timestamps whose *_parsed twin is missing
    for key in ("published", "updated", "created"):
        s = entry.get(key)
        if isinstance(s, str) and s:
            parsed = feedparser._parse_date(s)  # type: ignore[attr-defined]
            if isinstance(parsed, time.struct_time):
                try:
                    return datetime.fromtimestamp(calendar.timegm(parsed), tz=timezone.utc)
                except (OverflowError, ValueError):
                    continue
    return None


def _get_content(entry: Dict[str, Any]) -> Optional[str]:
    blocks = entry.get("content")
    if isinstance(blocks, list):
        parts = [b.get("value") for b in blocks if isinstance(b, dict) and isinstance(b.get("value"), str)]
        joined = "\n".join(p for p in parts if p.strip())
        if joined:
            return joined
    return None


def _get_tags(entry: Dict[str, Any]) -> List[str]:
    out: List[str] = []
    tags = entry.get("tags")
    if isinstance(tags, list):
        for t in tags:
            if isinstance(t, dict):
                term = t.get("term")
                if isinstance(term, str) and term.strip():
                    out.append(term.strip())
    return out


def _get_author(entry: Dict[str, Any]) -> Optional[str]:
    for key in ("author", "dc_creator", "creator"):
        v = entry.get(key)
        if isinstance(v, str) and v.strip():
            return v.strip()
    return None


def parse_entry(entry: Dict[str, Any]) -> Dict[str, Any]:
    """
    Map a raw feed entry (from feedparser) to a dict with common fields.
    Fields: title, summary, content, link, published_at (datetime|None), author, tags, guid

    Text is still raw HTML here; normalizer.to_article strips and caps it.
    """
    title = (entry.get("title") or "").strip()
    content = _get_content(entry)
    summary = (entry.get("summary") or entry.get("description") or content or "").strip()
    link = (entry.get("link") or entry.get("feedburner_origlink") or "").strip()

    # Prefer entry id/guid if present
    guid = None
    for k in ("id", "guid"):
        v = entry.get(k)
        if isinstance(v, str) and v.strip():
            guid = v.strip()
            break

    return {
        "title": title,
        "summary": summary,
        "content": content,
        "link": link,
        "published_at": _to_datetime(entry),
        "author": _get_author(entry),
        "tags": _get_tags(entry),
        "guid": guid or link or None,
    }
