from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Union

from .classifier import topic_category
from .matching import WordMatcher
from .models import Article, Corpus, TrendEntry
from .taxonomy import DEFAULT_TAXONOMY, Taxonomy

logger = logging.getLogger(__name__)

MAX_TOPIC_ARTICLES = 5

Articles = Union[Corpus, Iterable[Article]]


def _iter_articles(source: Articles) -> Iterable[Article]:
    if isinstance(source, Corpus):
        return (a for _, a in source.articles())
    return source


def _analysis_text(article: Article) -> str:
    return f"{article.title} {article.summary} {article.content or ''}".lower()


class TrendDetector:
    """
    Counts topic mentions across a slice of the corpus.

    Topics, their patterns and their categories all come from the Taxonomy; the detector
    only knows how to count whole-word hits and aggregate them.
    """

    def __init__(self, taxonomy: Optional[Taxonomy] = None, matcher: Optional[WordMatcher] = None) -> None:
        self.taxonomy = taxonomy or DEFAULT_TAXONOMY
        self.matcher = matcher or WordMatcher()

    def detect_trends(
        self,
        articles: Articles,
        min_mentions: int = 5,
        *,
        window: Optional[timedelta] = None,
        now: Optional[datetime] = None,
    ) -> List[TrendEntry]:
        items = self._window(_iter_articles(articles), window, now)

        counts: Dict[str, int] = {}
        related: Dict[str, List[Article]] = {}
        for article in items:
            text = _analysis_text(article)
            for topic in self.taxonomy.topics:
                mentions = sum(self.matcher.count(text, p) for p in topic.patterns)
                if mentions <= 0:
                    continue
                counts[topic.label] = counts.get(topic.label, 0) + mentions
                bucket = related.setdefault(topic.label, [])
                if len(bucket) < MAX_TOPIC_ARTICLES:
                    bucket.append(article)

        trends = [
            TrendEntry(
                topic=label,
                mentions=count,
                articles=tuple(related[label]),
                category=topic_category(label, self.taxonomy),
            )
            for label, count in counts.items()
            if count >= min_mentions
        ]
        # Stable: equal counts keep first-seen order
        trends.sort(key=lambda t: t.mentions, reverse=True)
        logger.debug("Detected %d trending topics (min_mentions=%d)", len(trends), min_mentions)
        return trends

    def count_keyword_mentions(self, articles: Articles, min_mentions: int = 3) -> Dict[str, int]:
        """Ad-hoc mention counts for the fixed trending keyword list, at least `min_mentions` each."""
        counts: Dict[str, int] = {}
        for article in _iter_articles(articles):
            text = _analysis_text(article)
            for keyword in self.taxonomy.trending_keywords:
                n = self.matcher.count(text, keyword)
                if n:
                    counts[keyword] = counts.get(keyword, 0) + n
        return {k: v for k, v in counts.items() if v >= min_mentions}

    @staticmethod
    def _window(items: Iterable[Article], window: Optional[timedelta], now: Optional[datetime]) -> Iterable[Article]:
        if window is None:
            return items
        cutoff = (now or datetime.now(timezone.utc)) - window
        return [a for a in items if a.published_at >= cutoff]


def detect_trends(articles: Articles, min_mentions: int = 5) -> List[TrendEntry]:
    return TrendDetector().detect_trends(articles, min_mentions)


def count_keyword_mentions(articles: Articles, min_mentions: int = 3) -> Dict[str, int]:
    return TrendDetector().count_keyword_mentions(articles, min_mentions)
