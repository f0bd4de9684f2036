from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from functools import partial
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .cache import CacheCoordinator, Clock, FetchSource, RefreshReport
from .exceptions import FeedFetchError, FeedNotFound
from .feeds import CYBERSECURITY_FEEDS, get_feed_by_name, get_feeds_by_category
from .fetcher import DEFAULT_TIMEOUT, fetch_source as _default_fetch_source
from .matching import WordMatcher
from .models import Article, Brief, Corpus, FeedSource, SearchHit, SearchQuery, TrendEntry
from .search import RelevanceSearchEngine, ScoringOptions
from .summarizers import ExtractiveSummarizer, SummarizeOptions
from .taxonomy import DEFAULT_TAXONOMY, Taxonomy
from .trends import TrendDetector
from .validation import (
    validate_category,
    validate_date,
    validate_date_range,
    validate_keywords,
    validate_number,
)

DateInput = Union[str, datetime, None]


@dataclass
class ServiceOptions:
    ttl: timedelta = timedelta(minutes=30)
    refresh_workers: int = 8
    fetch_timeout: float = DEFAULT_TIMEOUT  # seconds, per feed request
    tolerate_stale: bool = False  # serve cached data without refreshing first
    scoring: ScoringOptions = field(default_factory=ScoringOptions)
    summarize: SummarizeOptions = field(default_factory=SummarizeOptions)
    taxonomy: Taxonomy = DEFAULT_TAXONOMY


@dataclass(frozen=True)
class FeedItems:
    source: FeedSource
    title: str
    description: str
    captured_at: datetime
    items: Tuple[Article, ...]


@dataclass(frozen=True)
class TrendReport:
    days_analyzed: int
    total_items: int
    min_mentions: int
    topics: Tuple[TrendEntry, ...]


class NewsService:
    """
    High-level API: validated request operations over a cached set of security feeds.

    Each query: validate parameters → refresh stale sources → take a corpus view → run
    search, trend detection or summarization on it.
    """

    def __init__(
        self,
        *,
        sources: Sequence[FeedSource] = CYBERSECURITY_FEEDS,
        fetch_source: Optional[FetchSource] = None,
        options: Optional[ServiceOptions] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.options = options or ServiceOptions()
        self.sources: Tuple[FeedSource, ...] = tuple(sources)
        self.cache = CacheCoordinator(
            self.sources,
            fetch_source or partial(_default_fetch_source, timeout=self.options.fetch_timeout),
            ttl=self.options.ttl,
            max_workers=self.options.refresh_workers,
            clock=clock,
        )
        scoring = self.options.scoring
        matcher = WordMatcher(max_length=scoring.max_keyword_length, budget_ms=scoring.match_budget_ms)
        self.search_engine = RelevanceSearchEngine(scoring, matcher)
        self.trend_detector = TrendDetector(self.options.taxonomy, matcher)
        self.summarizer = ExtractiveSummarizer(self.options.summarize, self.options.taxonomy)

    def close(self) -> None:
        self.cache.close()

    def __enter__(self) -> "NewsService":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _now(self) -> datetime:
        return self.cache.now()

    def _lookup(self, name: str) -> FeedSource:
        if not isinstance(name, str) or not name.strip():
            raise FeedNotFound("Feed name is required and must be a non-empty string.")
        feed = get_feed_by_name(name.strip()[:100], self.sources)
        if feed is None:
            raise FeedNotFound(f"Feed not found: {name.strip()[:100]}")
        return feed

    def _fresh_corpus(self, category: Optional[str] = None) -> Corpus:
        if not self.options.tolerate_stale:
            self.cache.ensure_fresh()
        return self.cache.corpus(category=category)

    def _items(self, source: FeedSource, limit: int) -> FeedItems:
        snap = self.cache.snapshot(source.name)
        if snap is None:
            return FeedItems(source, source.name, source.description, self._now(), ())
        return FeedItems(
            source=source,
            title=snap.title or source.name,
            description=snap.description or source.description,
            captured_at=snap.captured_at,
            items=snap.articles[:limit],
        )

    # -- catalogue -------------------------------------------------------

    def list_feeds(self, category: Optional[str] = None) -> List[FeedSource]:
        category = validate_category(category)
        if category:
            return get_feeds_by_category(category, self.sources)
        return list(self.sources)

    def fetch_feed(self, name: str, max_items: int = 20) -> FeedItems:
        """
        Fetch one feed now, bypassing the TTL.

        If the fetch fails the previously cached items are returned; with nothing cached the
        failure is raised as FeedFetchError.
        """
        max_items = validate_number(max_items, 1, 100, name="maxItems")
        feed = self._lookup(name)
        report = self.cache.refresh([feed], force=True)
        if not report.ok and self.cache.snapshot(feed.name) is None:
            raise FeedFetchError(f"Failed to fetch feed {feed.name}: {report.failed[feed.name]}")
        return self._items(feed, max_items)

    def fetch_multiple_feeds(
        self,
        names: Optional[Iterable[str]] = None,
        category: Optional[str] = None,
        max_items_per_feed: int = 10,
    ) -> Dict[str, FeedItems]:
        max_items = validate_number(max_items_per_feed, 1, 100, name="maxItemsPerFeed")
        category = validate_category(category)

        names = list(names or [])
        if names:
            feeds = [self._lookup(n) for n in names]
        elif category:
            feeds = get_feeds_by_category(category, self.sources)
        else:
            feeds = list(self.sources)

        report = self.cache.refresh(feeds, force=True)
        return {f.name: self._items(f, max_items) for f in feeds if f.name in report.refreshed}

    def refresh(self) -> RefreshReport:
        return self.cache.ensure_fresh()

    # -- analytics -------------------------------------------------------

    def search_by_keywords(
        self,
        keywords: Sequence[str],
        category: Optional[str] = None,
        date_from: DateInput = None,
        date_to: DateInput = None,
        max_results: int = 50,
    ) -> List[SearchHit]:
        now = self._now()
        kws = validate_keywords(keywords)
        category = validate_category(category)
        start = validate_date(date_from, now, name="dateFrom") if date_from else None
        end = validate_date(date_to, now, name="dateTo") if date_to else None
        validate_date_range(start, end)
        cap = validate_number(max_results, 1, 200, name="maxResults")

        query = SearchQuery(keywords=tuple(kws), category=category, date_from=start, date_to=end, max_results=cap)
        return self.search_engine.search(self._fresh_corpus(), query, now=now)

    def get_trending_topics(self, days_back: int = 7, min_mentions: int = 5, max_topics: int = 10) -> TrendReport:
        days = validate_number(days_back, 1, 90, name="daysBack")
        minimum = validate_number(min_mentions, 1, 50, name="minMentions")
        limit = validate_number(max_topics, 1, 50, name="maxTopics")

        now = self._now()
        cutoff = now - timedelta(days=days)
        recent = [a for _, a in self._fresh_corpus().articles() if a.published_at >= cutoff]

        topics = self.trend_detector.detect_trends(recent, minimum)
        return TrendReport(days_analyzed=days, total_items=len(recent), min_mentions=minimum, topics=tuple(topics[:limit]))

    def get_keyword_mentions(self, min_mentions: int = 3, days_back: Optional[int] = None) -> Dict[str, int]:
        minimum = validate_number(min_mentions, 1, 50, name="minMentions")
        items: Iterable[Article] = (a for _, a in self._fresh_corpus().articles())
        if days_back is not None:
            cutoff = self._now() - timedelta(days=validate_number(days_back, 1, 90, name="daysBack"))
            items = [a for a in items if a.published_at >= cutoff]
        return self.trend_detector.count_keyword_mentions(items, minimum)

    def get_news_briefs(
        self,
        category: Optional[str] = None,
        date_from: DateInput = None,
        date_to: DateInput = None,
        max_briefs: int = 10,
    ) -> List[Brief]:
        now = self._now()
        category = validate_category(category)
        start = validate_date(date_from, now, name="dateFrom") if date_from else None
        end = validate_date(date_to, now, name="dateTo") if date_to else None
        validate_date_range(start, end)
        cap = validate_number(max_briefs, 1, 50, name="maxBriefs")

        picked = [
            (name, a)
            for name, a in self._fresh_corpus(category).articles()
            if not (start and a.published_at < start) and not (end and a.published_at > end)
        ]
        # Newest first across all sources, then brief the top `cap`
        picked.sort(key=lambda p: p[1].published_at, reverse=True)
        return [self.summarizer.generate_news_brief(a, name) for name, a in picked[:cap]]

    def summarize(self, article: Union[Article, str], target_words: int = 120) -> str:
        """Extractive summary of an article's description, or of raw text."""
        text = article if isinstance(article, str) else article.summary
        return self.summarizer.summarize(text, target_words)

    def briefs_for(self, articles: Sequence[Article], feed_name: str, cap: int = 10) -> List[Brief]:
        return self.summarizer.generate_briefs(articles, feed_name, cap)
