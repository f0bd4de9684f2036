"""
cyber_news

Keyword search, trending topics and extractive briefs over a cached set of
cybersecurity RSS/Atom feeds.

Core ideas:
- Input: a fixed catalogue of named feeds, each with a category
- Process: fetch → sanitize → cache per source (TTL) → search / detect trends / summarize
- Output: List[SearchHit], List[TrendEntry], List[Brief]

Example
-------
from cyber_news import NewsService

with NewsService() as service:
    for hit in service.search_by_keywords(["ransomware", "hospital"], max_results=5):
        print(round(hit.score, 2), hit.source, hit.article.title)

    for topic in service.get_trending_topics(days_back=7, min_mentions=5).topics:
        print(topic.topic, topic.mentions, topic.category)

The analytics pieces also work on their own, over any Corpus:

from cyber_news import Corpus, RelevanceSearchEngine, SearchQuery

hits = RelevanceSearchEngine().search(corpus, SearchQuery(keywords=("zero-day",)))
"""
from .models import Article, Brief, Corpus, FeedSource, SearchHit, SearchQuery, SourceSnapshot, TrendEntry
from .cache import CacheCoordinator, SourceState
from .core import NewsService, ServiceOptions
from .search import RelevanceSearchEngine, ScoringOptions
from .summarizers import ExtractiveSummarizer, SummarizeOptions, NO_SUMMARY
from .trends import TrendDetector
from .taxonomy import Taxonomy, load_taxonomy

__all__ = [
    "Article",
    "Brief",
    "Corpus",
    "FeedSource",
    "SearchHit",
    "SearchQuery",
    "SourceSnapshot",
    "TrendEntry",
    "CacheCoordinator",
    "SourceState",
    "NewsService",
    "ServiceOptions",
    "RelevanceSearchEngine",
    "ScoringOptions",
    "ExtractiveSummarizer",
    "SummarizeOptions",
    "NO_SUMMARY",
    "TrendDetector",
    "Taxonomy",
    "load_taxonomy",
]
