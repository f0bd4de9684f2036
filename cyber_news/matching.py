"""
Whole-word literal matching.

A match counts as "whole word" when the keyword is bounded on both sides by a change
between word characters (ASCII letters, digits, underscore) and anything else, with the
string edges acting as non-word characters. This mirrors `\\bkeyword\\b` around an escaped
literal, but is done with plain `str.find` scans so no input can trigger backtracking.
"""
from __future__ import annotations

import logging
import string
import threading
import time

logger = logging.getLogger(__name__)

_WORD_CHARS = frozenset(string.ascii_letters + string.digits + "_")

DEFAULT_MAX_LENGTH = 100
DEFAULT_BUDGET_MS = 100.0


def _is_word(ch: str) -> bool:
    return ch in _WORD_CHARS if ch else False


def _bounded(text: str, start: int, keyword: str) -> bool:
    end = start + len(keyword)
    before = text[start - 1] if start > 0 else ""
    after = text[end] if end < len(text) else ""
    return (_is_word(before) != _is_word(keyword[0])) and (_is_word(keyword[-1]) != _is_word(after))


def find_word(text: str, keyword: str, start: int = 0) -> int:
    """Index of the first whole-word occurrence of `keyword` at or after `start`, else -1."""
    if not keyword:
        return -1
    i = text.find(keyword, start)
    while i != -1:
        if _bounded(text, i, keyword):
            return i
        i = text.find(keyword, i + 1)
    return -1


def contains_word(text: str, keyword: str) -> bool:
    return find_word(text, keyword) != -1


def count_words(text: str, pattern: str) -> int:
    """Count non-overlapping whole-word occurrences, scanning left to right."""
    count = 0
    pos = 0
    while True:
        i = find_word(text, pattern, pos)
        if i == -1:
            return count
        count += 1
        pos = i + len(pattern)


class WordMatcher:
    """
    Case-insensitive whole-word matcher with a safety bound.

    Patterns longer than `max_length` are never matched. A scan that runs past
    `budget_ms` is logged as a degraded match and reported as no match. Callers pass
    text that is already lower-cased.
    """

    def __init__(self, max_length: int = DEFAULT_MAX_LENGTH, budget_ms: float = DEFAULT_BUDGET_MS) -> None:
        self.max_length = max_length
        self.budget_ms = budget_ms
        self._degraded = 0
        self._lock = threading.Lock()

    @property
    def degraded(self) -> int:
        """Number of matches dropped for running over budget."""
        return self._degraded

    def contains(self, text: str, pattern: str) -> bool:
        if not self._accepts(pattern):
            return False
        started = time.perf_counter()
        found = find_word(text, pattern.lower()) != -1
        if self._over_budget(started, pattern):
            return False
        return found

    def count(self, text: str, pattern: str) -> int:
        if not self._accepts(pattern):
            return 0
        started = time.perf_counter()
        n = count_words(text, pattern.lower())
        if self._over_budget(started, pattern):
            return 0
        return n

    def _accepts(self, pattern: str) -> bool:
        if not pattern:
            return False
        if len(pattern) > self.max_length:
            logger.debug("Skipping whole-word check for over-long pattern (%d chars)", len(pattern))
            return False
        return True

    def _over_budget(self, started: float, pattern: str) -> bool:
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        if elapsed_ms <= self.budget_ms:
            return False
        with self._lock:
            self._degraded += 1
        logger.warning(
            "Degraded match for pattern %r: %.1f ms over a %.1f ms budget, treated as no match",
            pattern[:20],
            elapsed_ms,
            self.budget_ms,
        )
        return True
