"""Tests for NewsService request operations over a fake feed set."""

import pytest

from cyber_news.core import NewsService, ServiceOptions
from cyber_news.exceptions import FeedFetchError, FeedNotFound, InputRejected
from cyber_news.models import SourceSnapshot


class Feeds:
    """Fetch callable serving canned articles per source name."""

    def __init__(self, clock, articles):
        self.clock = clock
        self.articles = articles
        self.down = set()
        self.calls = 0

    def __call__(self, source):
        self.calls += 1
        if source.name in self.down:
            raise FeedFetchError(f"{source.name} unreachable")
        return SourceSnapshot.build(source.name, self.articles.get(source.name, []), self.clock(), title=f"{source.name} feed")


@pytest.fixture()
def feeds(clock, make_article):
    return Feeds(
        clock,
        {
            "Alpha News": [
                make_article("Ransomware hits hospital", "A ransomware gang encrypted 500 systems.", source="Alpha News", days_ago=1),
                make_article("Phishing wave", "Phishing phishing everywhere.", source="Alpha News", days_ago=3),
                make_article("Old malware story", "Malware from the archive.", source="Alpha News", days_ago=20),
            ],
            "Beta Research": [
                make_article("Zero-day exploit analysis", "Exploit chain for a new CVE-2026-0001.", source="Beta Research", days_ago=2),
                make_article("Ransomware economics", "Why ransomware pays.", source="Beta Research", days_ago=5),
            ],
        },
    )


@pytest.fixture()
def service(feed_sources, feeds, clock):
    with NewsService(sources=feed_sources, fetch_source=feeds, clock=clock) as svc:
        yield svc


def test_list_feeds(service):
    """All feeds, or only one category"""
    assert [f.name for f in service.list_feeds()] == ["Alpha News", "Beta Research"]
    assert [f.name for f in service.list_feeds("research")] == ["Beta Research"]
    with pytest.raises(InputRejected):
        service.list_feeds("sports")


def test_fetch_feed_by_partial_name(service):
    """Feed lookup is case-insensitive and partial; items are newest first and capped"""
    items = service.fetch_feed("alpha", max_items=2)

    assert items.source.name == "Alpha News"
    assert items.title == "Alpha News feed"
    assert [a.title for a in items.items] == ["Ransomware hits hospital", "Phishing wave"]


def test_fetch_feed_errors(service, feeds):
    """Unknown names, bad limits and failed first fetches raise"""
    with pytest.raises(FeedNotFound):
        service.fetch_feed("gamma")
    with pytest.raises(FeedNotFound):
        service.fetch_feed("   ")
    with pytest.raises(InputRejected):
        service.fetch_feed("alpha", max_items=0)

    feeds.down.add("Alpha News")
    with pytest.raises(FeedFetchError):
        service.fetch_feed("alpha")


def test_fetch_feed_serves_previous_items_on_failure(service, feeds):
    """Once cached, a failing feed still returns its last snapshot"""
    service.fetch_feed("alpha")
    feeds.down.add("Alpha News")
    items = service.fetch_feed("alpha")
    assert len(items.items) == 3


def test_fetch_multiple_feeds_skips_failures(service, feeds):
    """Failed sources are left out of the result"""
    feeds.down.add("Beta Research")
    result = service.fetch_multiple_feeds(max_items_per_feed=1)

    assert list(result) == ["Alpha News"]
    assert len(result["Alpha News"].items) == 1
    assert list(service.fetch_multiple_feeds(category="research")) == []


def test_search_by_keywords(service):
    """Equal scores fall back to newest first; hits carry their source"""
    hits = service.search_by_keywords(["ransomware"])

    assert [h.article.title for h in hits] == ["Ransomware hits hospital", "Ransomware economics"]
    assert [h.source for h in hits] == ["Alpha News", "Beta Research"]
    assert hits[0].score == pytest.approx(9.6)
    assert hits[1].score == pytest.approx(9.6)


def test_search_filters(service):
    """Category, dates and the result cap all apply"""
    research = service.search_by_keywords(["ransomware"], category="research")
    assert [h.source for h in research] == ["Beta Research"]

    recent = service.search_by_keywords(["ransomware", "malware"], date_from="2026-10-16")
    assert [h.article.title for h in recent] == ["Ransomware hits hospital"]

    capped = service.search_by_keywords(["ransomware"], max_results=1)
    assert len(capped) == 1


def test_search_validation(service):
    """Bad parameters are rejected before any work is done"""
    with pytest.raises(InputRejected):
        service.search_by_keywords([])
    with pytest.raises(InputRejected):
        service.search_by_keywords(["x"], date_from="2026-10-10", date_to="2026-10-01")
    with pytest.raises(InputRejected):
        service.search_by_keywords(["x"], max_results=500)
    with pytest.raises(InputRejected):
        service.search_by_keywords(["x"], date_from="yesterday-ish")


def test_queries_refresh_stale_sources_once(service, feeds, clock):
    """Queries refresh only when the cache is stale"""
    service.search_by_keywords(["ransomware"])
    service.search_by_keywords(["phishing"])
    assert feeds.calls == 2

    clock.advance(minutes=31)
    service.search_by_keywords(["phishing"])
    assert feeds.calls == 4


def test_tolerate_stale_skips_refresh(feed_sources, feeds, clock):
    """With tolerate_stale the service answers from whatever is cached"""
    opts = ServiceOptions(tolerate_stale=True)
    with NewsService(sources=feed_sources, fetch_source=feeds, options=opts, clock=clock) as svc:
        assert svc.search_by_keywords(["ransomware"]) == []
        svc.refresh()
        clock.advance(hours=2)
        assert len(svc.search_by_keywords(["ransomware"])) == 2
    assert feeds.calls == 2


def test_trending_topics(service):
    """Only the recent window is analysed and the report echoes its parameters"""
    report = service.get_trending_topics(days_back=7, min_mentions=2)

    assert report.days_analyzed == 7
    assert report.total_items == 4
    assert report.min_mentions == 2
    topics = {t.topic: t.mentions for t in report.topics}
    assert topics["Ransomware"] == 4
    assert topics["Phishing"] == 3
    assert "Malware" not in topics

    with pytest.raises(InputRejected):
        service.get_trending_topics(days_back=0)


def test_keyword_mentions(service):
    """Keyword counts over the whole corpus or a window"""
    counts = service.get_keyword_mentions(min_mentions=1)
    assert counts["malware"] == 2
    assert "malware" not in service.get_keyword_mentions(min_mentions=1, days_back=7)


def test_news_briefs(service):
    """Briefs are newest first across sources, capped and categorized"""
    briefs = service.get_news_briefs(max_briefs=3)

    assert [b.title for b in briefs] == [
        "Ransomware hits hospital",
        "Zero-day exploit analysis",
        "Phishing wave",
    ]
    assert [b.category for b in briefs] == ["malware", "vulnerability", "general"]
    assert briefs[1].source == "Beta Research"

    research = service.get_news_briefs(category="research")
    assert {b.source for b in research} == {"Beta Research"}


def test_summarize_text_and_article(service, make_article):
    """summarize accepts raw text or an Article"""
    assert service.summarize("") == "No summary available."
    art = make_article("Title", "Attackers breached the network on Monday.")
    assert service.summarize(art) == "Attackers breached the network on Monday."


def test_briefs_for_given_articles(service, make_article):
    """briefs_for briefs caller-supplied articles under one feed name"""
    arts = [make_article(f"Backdoor found in router {i}", "A backdoor was found in firmware.") for i in range(3)]
    briefs = service.briefs_for(arts, "Router Watch", cap=2)

    assert [b.title for b in briefs] == ["Backdoor found in router 0", "Backdoor found in router 1"]
    assert {b.source for b in briefs} == {"Router Watch"}
    assert {b.category for b in briefs} == {"malware"}
