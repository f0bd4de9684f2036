from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple


CATEGORIES: Tuple[str, ...] = ("news", "threat-intelligence", "vulnerabilities", "research")


@dataclass(frozen=True)
class Article:
    """
    Stable public model representing one sanitized feed item.

    WARNING: Do not change fields lightly. Search, trends and summaries all read them.
    """
    title: str
    link: str
    published_at: datetime
    source: str
    summary: str = ""
    content: Optional[str] = None
    author: Optional[str] = None
    tags: Tuple[str, ...] = ()
    guid: Optional[str] = None


@dataclass(frozen=True)
class FeedSource:
    name: str
    url: str
    description: str
    category: str


@dataclass(frozen=True)
class SourceSnapshot:
    """All cached articles of one source, newest first, as captured at `captured_at`."""
    source: str
    articles: Tuple[Article, ...]
    captured_at: datetime
    title: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def build(
        cls,
        source: str,
        articles: Iterable[Article],
        captured_at: datetime,
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> "SourceSnapshot":
        ordered = sorted(articles, key=lambda a: a.published_at, reverse=True)
        return cls(
            source=source,
            articles=tuple(ordered),
            captured_at=captured_at,
            title=title,
            description=description,
        )


@dataclass(frozen=True)
class Corpus:
    """
    Read-only view handed to the analytics components.

    `snapshots` maps source name to its snapshot, `categories` maps source name to
    its category. Sources missing from either mapping are simply not part of the view.
    """
    snapshots: Mapping[str, SourceSnapshot] = field(default_factory=dict)
    categories: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_snapshots(
        cls,
        snapshots: Iterable[SourceSnapshot],
        categories: Optional[Mapping[str, str]] = None,
    ) -> "Corpus":
        snaps: Dict[str, SourceSnapshot] = {s.source: s for s in snapshots}
        cats = dict(categories or {})
        return cls(snapshots=snaps, categories=cats)

    @property
    def source_names(self) -> List[str]:
        return list(self.snapshots)

    def category_of(self, source: str) -> Optional[str]:
        return self.categories.get(source)

    def articles(self) -> Iterator[Tuple[str, Article]]:
        for name, snap in self.snapshots.items():
            for article in snap.articles:
                yield name, article

    def only(self, category: Optional[str]) -> "Corpus":
        if not category:
            return self
        snaps = {n: s for n, s in self.snapshots.items() if self.categories.get(n) == category}
        return Corpus(snapshots=snaps, categories=self.categories)

    def __len__(self) -> int:
        return sum(len(s.articles) for s in self.snapshots.values())


@dataclass(frozen=True)
class SearchQuery:
    keywords: Tuple[str, ...] = ()
    category: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    max_results: Optional[int] = None

    def __post_init__(self) -> None:
        # Keywords are matched case-insensitively; normalize once here
        normalized = tuple(k.lower() for k in self.keywords)
        object.__setattr__(self, "keywords", normalized)


@dataclass(frozen=True)
class SearchHit:
    article: Article
    source: str
    score: float


@dataclass(frozen=True)
class TrendEntry:
    topic: str
    mentions: int
    articles: Tuple[Article, ...]
    category: str


@dataclass(frozen=True)
class Brief:
    title: str
    summary: str
    source: str
    link: str
    published_at: datetime
    category: str
