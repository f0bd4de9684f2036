"""Shared pytest fixtures for the cyber_news test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterable, List, Optional

import pytest

from cyber_news.models import Article, Corpus, FeedSource, SourceSnapshot

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _article(
    title: str = "Untitled",
    summary: str = "",
    *,
    content: Optional[str] = None,
    tags: Iterable[str] = (),
    source: str = "Test Feed",
    days_ago: float = 0.0,
    link: Optional[str] = None,
    guid: Optional[str] = None,
) -> Article:
    slug = title.lower().replace(" ", "-")[:40]
    return Article(
        title=title,
        link=link or f"https://example.com/{slug}",
        published_at=NOW - timedelta(days=days_ago),
        source=source,
        summary=summary,
        content=content,
        tags=tuple(tags),
        guid=guid,
    )


def _corpus(feeds: Dict[str, List[Article]], categories: Optional[Dict[str, str]] = None) -> Corpus:
    snaps = [SourceSnapshot.build(name, items, NOW) for name, items in feeds.items()]
    cats = categories or {name: "news" for name in feeds}
    return Corpus.from_snapshots(snaps, cats)


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def make_article() -> Callable[..., Article]:
    """Factory for Articles published `days_ago` before NOW."""
    return _article


@pytest.fixture()
def make_corpus() -> Callable[..., Corpus]:
    """Factory for a Corpus from {source name: [articles]} (every source "news" by default)."""
    return _corpus


class FakeClock:
    def __init__(self, start: datetime = NOW) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def feed_sources() -> List[FeedSource]:
    return [
        FeedSource("Alpha News", "https://alpha.example.com/feed", "Alpha security news", "news"),
        FeedSource("Beta Research", "https://beta.example.com/feed", "Beta research blog", "research"),
    ]
