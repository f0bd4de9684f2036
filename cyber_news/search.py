from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Sequence, Tuple

from .matching import DEFAULT_BUDGET_MS, DEFAULT_MAX_LENGTH, WordMatcher
from .models import Article, Corpus, SearchHit, SearchQuery


@dataclass(frozen=True)
class FieldWeight:
    weight: float
    whole_word_bonus: float = 0.0


@dataclass(frozen=True)
class ScoringOptions:
    title: FieldWeight = FieldWeight(3, 2)
    summary: FieldWeight = FieldWeight(2, 1)
    content: FieldWeight = FieldWeight(1, 1)
    tags: FieldWeight = FieldWeight(1, 0)
    # (age limit, multiplier), checked in order; older items keep x1.0
    recency: Tuple[Tuple[timedelta, float], ...] = (
        (timedelta(days=7), 1.2),
        (timedelta(days=30), 1.1),
    )
    max_keyword_length: int = DEFAULT_MAX_LENGTH
    match_budget_ms: float = DEFAULT_BUDGET_MS


def _in_range(article: Article, start: Optional[datetime], end: Optional[datetime]) -> bool:
    if start and article.published_at < start:
        return False
    if end and article.published_at > end:
        return False
    return True


class RelevanceSearchEngine:
    """
    Keyword-ranked search over a Corpus.

    Pipeline: category filter (per source) → date filter (per article) → score → drop zeros
    → sort (score desc, newest first) → cap
    """

    def __init__(self, options: Optional[ScoringOptions] = None, matcher: Optional[WordMatcher] = None) -> None:
        self.options = options or ScoringOptions()
        self.matcher = matcher or WordMatcher(
            max_length=self.options.max_keyword_length,
            budget_ms=self.options.match_budget_ms,
        )

    def search(self, corpus: Corpus, query: SearchQuery, now: Optional[datetime] = None) -> List[SearchHit]:
        now = now or datetime.now(timezone.utc)
        hits: List[SearchHit] = []

        # Filter by category: whole sources in or out
        for name, snap in corpus.only(query.category).snapshots.items():
            items = [a for a in snap.articles if _in_range(a, query.date_from, query.date_to)]
            hits.extend(self._score_items(items, name, query.keywords, now))

        # Python's sort is stable, so equal (score, date) pairs keep corpus order
        hits.sort(key=lambda h: (-h.score, -h.article.published_at.timestamp()))

        if query.max_results and query.max_results > 0:
            hits = hits[: query.max_results]
        return hits

    def _score_items(
        self, items: Iterable[Article], source: str, keywords: Sequence[str], now: datetime
    ) -> List[SearchHit]:
        if not keywords:
            # Browse mode: everything that passed the filters, base relevance
            return [SearchHit(article=a, source=source, score=1.0) for a in items]

        out: List[SearchHit] = []
        for a in items:
            score = self.score(a, keywords, now)
            if score > 0:
                out.append(SearchHit(article=a, source=source, score=score))
        return out

    def score(self, article: Article, keywords: Sequence[str], now: Optional[datetime] = None) -> float:
        """Relevance of one article for lower-cased `keywords`, including the recency boost."""
        now = now or datetime.now(timezone.utc)
        opts = self.options

        score = self._field_score(article.title.lower(), keywords, opts.title)
        score += self._field_score(article.summary.lower(), keywords, opts.summary)
        if article.content:
            score += self._field_score(article.content.lower(), keywords, opts.content)
        if article.tags:
            score += self._field_score(" ".join(article.tags).lower(), keywords, opts.tags)

        return score * self._recency_multiplier(article.published_at, now)

    def _field_score(self, text: str, keywords: Sequence[str], fw: FieldWeight) -> float:
        score = 0.0
        for kw in keywords:
            if not kw or kw not in text:
                continue
            score += fw.weight
            if fw.whole_word_bonus and self.matcher.contains(text, kw):
                score += fw.whole_word_bonus
        return score

    def _recency_multiplier(self, published_at: datetime, now: datetime) -> float:
        age = now - published_at
        for limit, factor in self.options.recency:
            if age <= limit:
                return factor
        return 1.0


def search(corpus: Corpus, query: SearchQuery, now: Optional[datetime] = None) -> List[SearchHit]:
    return RelevanceSearchEngine().search(corpus, query, now=now)
