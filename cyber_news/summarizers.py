from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, NamedTuple, Optional, Tuple
import concurrent.futures as _fut
import re

from .classifier import categorize_article
from .models import Article, Brief
from .taxonomy import DEFAULT_TAXONOMY, Taxonomy

NO_SUMMARY = "No summary available."

# A sentence is a run of non-terminators plus the terminator run that closes it
_SENTENCE_RE = re.compile(r"[^.!?]+[.!?]*")
_DIGITS_RE = re.compile(r"\d+")
_QUOTED_RE = re.compile(r'"[^"]*"')


@dataclass
class SummarizeOptions:
    target_words: int = 120
    stop_ratio: float = 0.8  # stop once this share of the target is filled
    min_sentence_chars: int = 10  # fragments this short or shorter are dropped
    chars_per_word: int = 6  # rough estimate used by the truncation fallback
    max_workers: int = 1
    keywords: Optional[Tuple[str, ...]] = None  # None → taxonomy summary keywords


class _Scored(NamedTuple):
    index: int
    sentence: str
    words: int
    score: int


def split_sentences(text: str, min_chars: int = 10) -> List[str]:
    """Split on `.`/`!`/`?` runs, keeping each sentence's terminator, dropping short fragments."""
    out: List[str] = []
    for m in _SENTENCE_RE.finditer(text):
        sentence = m.group(0).strip()
        body = sentence.rstrip(".!?").strip()
        if len(body) > min_chars:
            out.append(sentence)
    return out


def _truncate(s: str, limit: int) -> str:
    if limit <= 0:
        return ""
    if len(s) <= limit:
        return s
    return s[:limit]


class ExtractiveSummarizer:
    """
    Picks the highest-scoring sentences of a text up to a word budget, then puts them
    back in their original order. Never writes new text.
    """

    def __init__(self, options: Optional[SummarizeOptions] = None, taxonomy: Optional[Taxonomy] = None) -> None:
        self.options = options or SummarizeOptions()
        self.taxonomy = taxonomy or DEFAULT_TAXONOMY
        self._keywords = self.options.keywords or self.taxonomy.summary_keywords

    def summarize(self, text: str, target_words: Optional[int] = None) -> str:
        target = target_words if target_words is not None else self.options.target_words
        text = (text or "").strip()
        if not text:
            return NO_SUMMARY

        fallback = _truncate(text, target * self.options.chars_per_word).strip() or NO_SUMMARY

        sentences = split_sentences(text, self.options.min_sentence_chars)
        if not sentences:
            return fallback

        total = len(sentences)
        scored = [
            _Scored(i, s, len(s.split()), self.score_sentence(s, i, total))
            for i, s in enumerate(sentences)
        ]
        # sorted() is stable: equal scores keep source order
        ranked = sorted(scored, key=lambda sc: sc.score, reverse=True)

        chosen: List[int] = []
        words = 0
        for sc in ranked:
            if words + sc.words <= target:
                chosen.append(sc.index)
                words += sc.words
            if words >= target * self.options.stop_ratio:
                break

        if not chosen:
            return fallback
        return " ".join(sentences[i] for i in sorted(chosen))

    def score_sentence(self, sentence: str, position: int, total: int) -> int:
        score = 0

        # Position: openers and closers tend to carry the point
        if position == 0:
            score += 2
        if position == total - 1:
            score += 1

        # Length: prefer medium sentences
        n = len(sentence.split())
        if 10 <= n <= 25:
            score += 2
        elif 5 <= n <= 40:
            score += 1

        # Domain vocabulary, once per distinct keyword
        lower = sentence.lower()
        score += sum(1 for k in self._keywords if k in lower)

        if _DIGITS_RE.search(sentence):
            score += 1
        if _QUOTED_RE.search(sentence):
            score += 1
        return score

    def generate_news_brief(
        self,
        article: Article,
        source_name: Optional[str] = None,
        target_words: Optional[int] = None,
    ) -> Brief:
        return Brief(
            title=article.title,
            summary=self.summarize(article.summary, target_words),
            source=source_name or article.source,
            link=article.link,
            published_at=article.published_at,
            category=categorize_article(article, self.taxonomy),
        )

    def generate_briefs(
        self,
        articles: Iterable[Article],
        source_name: Optional[str] = None,
        cap: int = 10,
    ) -> List[Brief]:
        """Brief the first `cap` articles, in input order."""
        items = list(articles)
        if cap and cap > 0:
            items = items[:cap]

        def _one(item: Article) -> Brief:
            return self.generate_news_brief(item, source_name)

        max_workers = max(1, int(self.options.max_workers or 1))
        if max_workers == 1 or len(items) < 2:
            return [_one(it) for it in items]

        with _fut.ThreadPoolExecutor(max_workers=max_workers) as ex:
            # map() yields in submission order
            return list(ex.map(_one, items))


def summarize(text: str, target_words: int = 120) -> str:
    return ExtractiveSummarizer().summarize(text, target_words)


def generate_news_brief(article: Article, source_name: Optional[str] = None, target_words: int = 120) -> Brief:
    return ExtractiveSummarizer().generate_news_brief(article, source_name, target_words)
