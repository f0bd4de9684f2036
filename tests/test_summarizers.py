"""Tests for the extractive summarizer and brief generation."""

from cyber_news.summarizers import (
    NO_SUMMARY,
    ExtractiveSummarizer,
    SummarizeOptions,
    generate_news_brief,
    split_sentences,
    summarize,
)

A = "Officials met to discuss the budget today"
B = "Hackers exploited a vulnerability to deploy ransomware across 300 servers"
C = "The weather was pleasant later in the week overall"


def test_empty_text_returns_sentinel():
    """Empty or blank input gives the fixed sentinel, never an empty string"""
    assert summarize("") == NO_SUMMARY
    assert summarize("   \n ") == NO_SUMMARY
    assert NO_SUMMARY == "No summary available."


def test_short_text_returned_verbatim():
    """Text under the target comes back unchanged"""
    text = "Attackers breached the network on Monday. The company restored service quickly!"
    assert summarize(text, 120) == text


LATERAL = (
    "Researchers found that the ransomware crew moved laterally through the "
    "regional hospital network for several weeks"
)
ENDED = "Then it ended quickly"


def test_text_within_target_can_still_lose_sentences():
    """Between 80% and 100% of the target the stop rule can drop trailing picks"""
    text = f"{LATERAL}. {ENDED}."
    # 16 + 4 words: the first pick already fills 80% of 20
    assert summarize(text, 20) == f"{LATERAL}."
    # 80% of 21 is 16.8, so both sentences are taken
    assert summarize(text, 21) == text


def test_fragments_break_verbatim_output():
    """A short fragment is dropped even when everything fits"""
    assert summarize(f"{LATERAL}. Ok. {ENDED}.", 120) == f"{LATERAL}. {ENDED}."


def test_split_keeps_terminators_and_drops_fragments():
    """Sentences keep their punctuation; fragments of 10 chars or fewer are dropped"""
    text = "Short one. This sentence is long enough!! Ok? Another reasonably long one"
    assert split_sentences(text) == [
        "This sentence is long enough!!",
        "Another reasonably long one",
    ]


def test_selected_sentences_keep_source_order():
    """B outranks A, but the summary still reads A then B"""
    s = ExtractiveSummarizer()
    assert s.score_sentence(A, 0, 3) == 3
    assert s.score_sentence(B, 1, 3) == 7
    assert s.score_sentence(C, 2, 3) == 2

    text = f"{A}. {B}. {C}."
    assert summarize(text, 20) == f"{A}. {B}."


def test_overflowing_sentence_is_skipped_not_fatal():
    """A high-scoring sentence over budget is skipped and shorter ones still count"""
    long = (
        "Security researchers said the ransomware attack encrypted data on 500 hospital systems "
        "across three states and disrupted emergency care for several days last week"
    )
    short = "Patients were moved to nearby clinics"
    assert summarize(f"{long}. {short}.", 8) == f"{short}."


def test_nothing_fits_falls_back_to_truncation():
    """When no sentence fits the budget the raw text is truncated at ~6 chars per word"""
    text = (
        "Security researchers said the ransomware attack encrypted data on 500 hospital systems "
        "across three states and disrupted emergency care for several days last week."
    )
    assert summarize(text, 5) == text[:30].strip()


def test_no_candidate_sentences_falls_back_to_truncation():
    """Only short fragments: truncated raw text"""
    assert summarize("Hi. Ok. Yes.", 120) == "Hi. Ok. Yes."
    assert summarize("Tiny. Bits. " * 40, 2) == ("Tiny. Bits. " * 40)[:12].strip()


def test_stops_at_eighty_percent_of_target():
    """Selection stops once 80% of the target is filled"""
    first = "One two three four five six seven eight nine ten"
    rest = ["Alpha beta gamma delta epsilon zeta eta theta iota kappa"] * 3
    text = ". ".join([first] + rest) + "."
    out = summarize(text, 12)
    # first sentence (10 words) already reaches 80% of 12
    assert out == f"{first}."


def test_sentence_scoring_features():
    """Digits, quotes and domain keywords each add to the score"""
    s = ExtractiveSummarizer()
    plain = "The meeting covered several ordinary topics today"
    assert s.score_sentence(plain, 1, 3) == 1
    assert s.score_sentence(plain + " 42", 1, 3) == 2
    assert s.score_sentence('The CEO said "we are fine" about it', 1, 3) == 2
    # "security" and "cybersecurity" both counted once each
    assert s.score_sentence("Cybersecurity teams review security posture daily", 1, 3) == 3


def test_options_target_is_default():
    """target_words falls back to the configured default"""
    s = ExtractiveSummarizer(SummarizeOptions(target_words=8))
    long = (
        "Security researchers said the ransomware attack encrypted data on 500 hospital systems "
        "across three states and disrupted emergency care for several days last week"
    )
    assert s.summarize(f"{long}. Patients were moved to nearby clinics.") == "Patients were moved to nearby clinics."


def test_generate_news_brief(make_article):
    """Briefs carry article fields, a summary and a category"""
    art = make_article(
        "Ransomware attack hits hospital",
        "A ransomware gang encrypted 500 systems.",
        source="Krebs on Security",
    )
    brief = generate_news_brief(art, "Krebs")

    assert brief.title == art.title
    assert brief.summary == "A ransomware gang encrypted 500 systems."
    assert brief.source == "Krebs"
    assert brief.link == art.link
    assert brief.published_at == art.published_at
    assert brief.category == "malware"


def test_brief_empty_description_gets_sentinel(make_article):
    """An article without a description is briefed with the sentinel"""
    brief = generate_news_brief(make_article("Untitled post", ""))
    assert brief.summary == NO_SUMMARY
    assert brief.source == "Test Feed"


def test_generate_briefs_caps_and_keeps_order(make_article):
    """summarize-many honours the cap and input order, also when threaded"""
    arts = [make_article(f"Item number {i}", f"Body text for item number {i} goes here.") for i in range(6)]
    for workers in (1, 4):
        s = ExtractiveSummarizer(SummarizeOptions(max_workers=workers))
        briefs = s.generate_briefs(arts, "Feed", cap=4)
        assert [b.title for b in briefs] == [f"Item number {i}" for i in range(4)]
        assert all(b.source == "Feed" for b in briefs)
