from __future__ import annotations

from typing import Iterable, List, Set

from .models import Article


def deduplicate(items: Iterable[Article]) -> List[Article]:
    """
    Remove duplicates by priority: guid -> link -> title+source.
    Keeps the first occurrence and preserves original order.
    """
    seen: Set[str] = set()
    out: List[Article] = []

    def make_key(it: Article) -> str:
        if it.guid:
            return f"guid::{it.guid}"
        if it.link:
            return f"link::{it.link}"
        return f"ts::{it.source}::{it.title}"

    for it in items:
        key = make_key(it)
        if key in seen:
            continue
        seen.add(key)
        out.append(it)
    return out
