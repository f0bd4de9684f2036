from __future__ import annotations

from typing import Iterable, Optional

from .matching import contains_word
from .models import Article
from .taxonomy import DEFAULT_TAXONOMY, Taxonomy

DEFAULT_CATEGORY = "general"


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(contains_word(text, k) for k in keywords)


def categorize_article(article: Article, taxonomy: Optional[Taxonomy] = None) -> str:
    """
    Heuristic category for a brief, from the article title and summary.

    Categories are tried in table order and the first one with a whole-word keyword
    hit wins, so "vulnerability" outranks "ai-security" when both appear.
    """
    tax = taxonomy or DEFAULT_TAXONOMY
    text = f"{article.title} {article.summary}".lower()

    for name, keywords in tax.brief_categories:
        if _contains_any(text, keywords):
            return name
    return DEFAULT_CATEGORY


def topic_category(topic: str, taxonomy: Optional[Taxonomy] = None) -> str:
    return (taxonomy or DEFAULT_TAXONOMY).category_for(topic)
