"""
Runtime settings read from the environment (and a `.env` file, if present).

Variables, all optional:

    CYBER_NEWS_CACHE_TTL_MINUTES   snapshot lifetime (30)
    CYBER_NEWS_REFRESH_WORKERS     concurrent feed fetches (8)
    CYBER_NEWS_FETCH_TIMEOUT_SECONDS  per-request feed timeout (10)
    CYBER_NEWS_MATCH_BUDGET_MS     per-match wall-clock budget (100)
    CYBER_NEWS_MAX_KEYWORD_LENGTH  longest pattern the matcher accepts (100)
    CYBER_NEWS_SUMMARY_WORDS       default brief length in words (120)
    CYBER_NEWS_TOLERATE_STALE      "1"/"true" to serve cached data without refreshing
    CYBER_NEWS_TAXONOMY_FILE       YAML file replacing the built-in topic tables
    CYBER_NEWS_LOG_LEVEL           logging level name (INFO)
    CYBER_NEWS_LOG_FILE            optional log file path
"""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from datetime import timedelta
from typing import Callable, Mapping, Optional, TypeVar

from dotenv import load_dotenv

from .core import NewsService, ServiceOptions
from .exceptions import InputRejected
from .search import ScoringOptions
from .summarizers import SummarizeOptions
from .taxonomy import DEFAULT_TAXONOMY, Taxonomy, load_taxonomy

_PREFIX = "CYBER_NEWS_"
_TRUE = {"1", "true", "yes", "on"}

T = TypeVar("T")


def _get(env: Mapping[str, str], key: str, default: T, cast: Callable[[str], T]) -> T:
    raw = env.get(_PREFIX + key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError as e:
        raise InputRejected(f"Invalid {_PREFIX + key}: {raw!r}") from e


@dataclass
class Settings:
    cache_ttl_minutes: float = 30.0
    refresh_workers: int = 8
    fetch_timeout_seconds: float = 10.0
    match_budget_ms: float = 100.0
    max_keyword_length: int = 100
    summary_words: int = 120
    tolerate_stale: bool = False
    taxonomy_file: Optional[str] = None
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None, *, dotenv: bool = True) -> "Settings":
        if env is None:
            if dotenv:
                load_dotenv()
            env = os.environ
        d = cls()
        return cls(
            cache_ttl_minutes=_get(env, "CACHE_TTL_MINUTES", d.cache_ttl_minutes, float),
            refresh_workers=_get(env, "REFRESH_WORKERS", d.refresh_workers, int),
            fetch_timeout_seconds=_get(env, "FETCH_TIMEOUT_SECONDS", d.fetch_timeout_seconds, float),
            match_budget_ms=_get(env, "MATCH_BUDGET_MS", d.match_budget_ms, float),
            max_keyword_length=_get(env, "MAX_KEYWORD_LENGTH", d.max_keyword_length, int),
            summary_words=_get(env, "SUMMARY_WORDS", d.summary_words, int),
            tolerate_stale=_get(env, "TOLERATE_STALE", d.tolerate_stale, lambda s: s.lower() in _TRUE),
            taxonomy_file=_get(env, "TAXONOMY_FILE", d.taxonomy_file, str),
            log_level=_get(env, "LOG_LEVEL", d.log_level, str),
            log_file=_get(env, "LOG_FILE", d.log_file, str),
        )

    def taxonomy(self) -> Taxonomy:
        if self.taxonomy_file:
            return load_taxonomy(self.taxonomy_file)
        return DEFAULT_TAXONOMY

    def service_options(self) -> ServiceOptions:
        return ServiceOptions(
            ttl=timedelta(minutes=self.cache_ttl_minutes),
            refresh_workers=self.refresh_workers,
            fetch_timeout=self.fetch_timeout_seconds,
            tolerate_stale=self.tolerate_stale,
            scoring=replace(
                ScoringOptions(),
                match_budget_ms=self.match_budget_ms,
                max_keyword_length=self.max_keyword_length,
            ),
            summarize=SummarizeOptions(target_words=self.summary_words),
            taxonomy=self.taxonomy(),
        )

    def build_service(self, **kwargs) -> NewsService:
        return NewsService(options=self.service_options(), **kwargs)
