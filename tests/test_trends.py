"""Tests for TrendDetector topic detection and keyword mention counts."""

from datetime import timedelta

from cyber_news.taxonomy import Taxonomy, Topic
from cyber_news.trends import TrendDetector, count_keyword_mentions, detect_trends


def _phishing_articles(make_article):
    return [
        make_article("Phishing campaign targets banks", "The phishing emails spoof invoices."),
        make_article("Another phishing lure", "Researchers saw phishing pages hosted on file shares."),
    ]


def test_topic_below_threshold_is_absent(make_article):
    """Four phishing mentions do not reach minMentions=5"""
    trends = detect_trends(_phishing_articles(make_article), min_mentions=5)
    assert "Phishing" not in [t.topic for t in trends]


def test_topic_at_threshold_is_present(make_article):
    """Four phishing mentions reach minMentions=4"""
    trends = detect_trends(_phishing_articles(make_article), min_mentions=4)
    phishing = [t for t in trends if t.topic == "Phishing"]

    assert len(phishing) == 1
    assert phishing[0].mentions == 4
    assert phishing[0].category == "social-engineering"
    assert len(phishing[0].articles) == 2


def test_raising_min_mentions_never_adds_topics(make_article):
    """Topic count is monotonically non-increasing in minMentions"""
    arts = [
        make_article("Ransomware and malware", "A trojan and a backdoor, then more ransomware."),
        make_article("Zero-day exploited", "The zero-day vulnerability is a security flaw."),
        make_article("AI phishing", "Deepfake phishing with an LLM."),
    ]
    counts = [len(detect_trends(arts, m)) for m in range(1, 10)]
    assert counts == sorted(counts, reverse=True)


def test_whole_word_patterns_only(make_article):
    """'brainy' and 'said' do not count as AI mentions"""
    arts = [make_article("A brainy reporter said", "Maintain the chain.")]
    assert detect_trends(arts, min_mentions=1) == []


def test_patterns_sum_within_topic(make_article):
    """Every pattern of a topic adds to its count"""
    arts = [make_article("Malware roundup", "A trojan, a worm and a backdoor.")]
    trends = detect_trends(arts, min_mentions=1)
    malware = next(t for t in trends if t.topic == "Malware")
    assert malware.mentions == 4
    assert malware.category == "malware"


def test_sorted_by_mentions_descending(make_article):
    """Topics with more mentions come first"""
    arts = [
        make_article("DDoS alert", "A ddos hit the bank."),
        make_article("Ransomware wave", "ransomware, ransomware, ransomware"),
    ]
    trends = detect_trends(arts, min_mentions=1)
    assert [t.topic for t in trends][:2] == ["Ransomware", "DDoS"]
    assert [t.mentions for t in trends][:2] == [4, 2]


def test_related_articles_capped_at_five(make_article):
    """At most five representative articles, in first-seen order"""
    arts = [make_article(f"Ransomware story {i}") for i in range(7)]
    trend = detect_trends(arts, min_mentions=1)[0]

    assert trend.mentions == 7
    assert [a.title for a in trend.articles] == [f"Ransomware story {i}" for i in range(5)]


def test_accepts_corpus(make_article, make_corpus):
    """A Corpus is flattened across sources"""
    corpus = make_corpus({
        "A": [make_article("Botnet attack", "ddos again", source="A")],
        "B": [make_article("Denial of service", source="B")],
    })
    trends = detect_trends(corpus, min_mentions=3)
    assert [(t.topic, t.mentions) for t in trends] == [("DDoS", 3)]


def test_window_limits_to_recent_articles(make_article, now):
    """Articles older than the window are ignored"""
    arts = [
        make_article("Ransomware now", days_ago=1),
        make_article("Ransomware long ago", days_ago=30),
    ]
    trends = TrendDetector().detect_trends(arts, 1, window=timedelta(days=7), now=now)
    assert trends[0].mentions == 1


def test_custom_taxonomy_and_default_category(make_article):
    """The detector only knows what the taxonomy tells it"""
    tax = Taxonomy(topics=(Topic("Supply Chain", ("supply chain", "dependency confusion")),), topic_categories={})
    arts = [make_article("Supply chain attack", "A dependency confusion trick.")]
    trends = TrendDetector(taxonomy=tax).detect_trends(arts, 1)

    assert [(t.topic, t.mentions, t.category) for t in trends] == [("Supply Chain", 2, "general")]


def test_keyword_mentions_filtered_by_threshold(make_article):
    """Ad-hoc keyword counts keep only keywords at or above the threshold"""
    arts = [make_article("Malware report", "malware and botnet")]
    assert count_keyword_mentions(arts, min_mentions=2) == {"malware": 2}
    assert count_keyword_mentions(arts, min_mentions=1) == {"malware": 2, "botnet": 1}


def test_keyword_mentions_multiword_terms(make_article):
    """Multi-word terms match as phrases"""
    arts = [make_article("Machine learning", "Artificial intelligence and machine learning.")]
    counts = count_keyword_mentions(arts, min_mentions=1)
    assert counts["machine learning"] == 2
    assert counts["artificial intelligence"] == 1


def test_empty_input_yields_nothing():
    """No articles, no trends"""
    assert detect_trends([], 1) == []
    assert count_keyword_mentions([], 1) == {}
