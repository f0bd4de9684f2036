"""
In-memory, TTL-bounded cache of per-source snapshots.

Each configured source is Absent (never fetched), Fresh, or Stale (older than the TTL).
Refreshing is delegated to a `fetch_source` callable; the coordinator only decides what
to refresh, runs the fetches concurrently, and swaps whole snapshots in. A failed fetch
leaves the previous snapshot (or absence) in place.

Concurrent refreshes of one source share a single in-flight fetch. Readers copy the
snapshot mapping under the same lock writers swap under, so a reader sees each source
either entirely before or entirely after a refresh.
"""
from __future__ import annotations

import concurrent.futures as _fut
import enum
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from .exceptions import CyberNewsError
from .models import Corpus, FeedSource, SourceSnapshot

logger = logging.getLogger(__name__)

FetchSource = Callable[[FeedSource], SourceSnapshot]
Clock = Callable[[], datetime]

DEFAULT_TTL = timedelta(minutes=30)


class SourceState(enum.Enum):
    ABSENT = "absent"
    FRESH = "fresh"
    STALE = "stale"


@dataclass
class RefreshReport:
    refreshed: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CacheCoordinator:
    """Owns the snapshot cache for a fixed set of sources. Close it (or use `with`) when done."""

    def __init__(
        self,
        sources: Iterable[FeedSource],
        fetch_source: FetchSource,
        *,
        ttl: timedelta = DEFAULT_TTL,
        max_workers: int = 8,
        clock: Optional[Clock] = None,
    ) -> None:
        self._sources: Dict[str, FeedSource] = {s.name: s for s in sources}
        self._fetch = fetch_source
        self.ttl = ttl
        self._clock = clock or _utcnow
        self._lock = threading.Lock()
        self._snapshots: Dict[str, SourceSnapshot] = {}
        self._inflight: Dict[str, "_fut.Future[SourceSnapshot]"] = {}
        self.last_errors: Dict[str, str] = {}
        self._executor = _fut.ThreadPoolExecutor(
            max_workers=max(1, max_workers), thread_name_prefix="cyber-news-refresh"
        )
        self._closed = False

    # -- lifecycle -------------------------------------------------------

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "CacheCoordinator":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # -- reads -----------------------------------------------------------

    @property
    def sources(self) -> List[FeedSource]:
        return list(self._sources.values())

    def now(self) -> datetime:
        return self._clock()

    def source(self, name: str) -> Optional[FeedSource]:
        return self._sources.get(name)

    def snapshot(self, name: str) -> Optional[SourceSnapshot]:
        with self._lock:
            return self._snapshots.get(name)

    def state(self, name: str, now: Optional[datetime] = None) -> SourceState:
        snap = self.snapshot(name)
        if snap is None:
            return SourceState.ABSENT
        now = now or self._clock()
        if now - snap.captured_at > self.ttl:
            return SourceState.STALE
        return SourceState.FRESH

    def stale_sources(self, names: Optional[Iterable[str]] = None) -> List[FeedSource]:
        """Requested sources that are Absent or Stale right now."""
        now = self._clock()
        return [s for s in self._select(names) if self.state(s.name, now) is not SourceState.FRESH]

    def corpus(
        self,
        names: Optional[Iterable[str]] = None,
        *,
        category: Optional[str] = None,
        include_stale: bool = True,
    ) -> Corpus:
        """
        Best-known view over the requested sources (all by default).

        Absent sources are left out; Stale ones too when `include_stale` is False.
        """
        with self._lock:
            current = dict(self._snapshots)
        now = self._clock()

        snaps: Dict[str, SourceSnapshot] = {}
        for src in self._select(names):
            if category and src.category != category:
                continue
            snap = current.get(src.name)
            if snap is None:
                continue
            if not include_stale and now - snap.captured_at > self.ttl:
                continue
            snaps[src.name] = snap
        cats = {name: self._sources[name].category for name in snaps}
        return Corpus(snapshots=snaps, categories=cats)

    # -- writes ----------------------------------------------------------

    def put(self, snapshot: SourceSnapshot) -> None:
        """Install a snapshot, replacing whatever was cached for its source."""
        with self._lock:
            self._snapshots[snapshot.source] = snapshot
            self.last_errors.pop(snapshot.source, None)

    def refresh(self, sources: Optional[Sequence[FeedSource]] = None, *, force: bool = False) -> RefreshReport:
        """
        Fetch the given sources (default: every configured one) concurrently and wait.

        Without `force` only Absent or Stale sources are fetched. Failures are recorded
        in the report and in `last_errors`; they never raise. Refreshing a closed
        coordinator raises CyberNewsError.
        """
        targets = list(sources) if sources is not None else self.sources
        if not force:
            now = self._clock()
            targets = [s for s in targets if self.state(s.name, now) is not SourceState.FRESH]

        report = RefreshReport()
        if not targets:
            return report

        logger.info("Refreshing %d feeds...", len(targets))
        pending = {s.name: self._submit(s) for s in targets}
        _fut.wait(list(pending.values()))

        for name, fu in pending.items():
            exc = fu.exception()
            if exc is None:
                report.refreshed.append(name)
                continue
            report.failed[name] = str(exc)
            with self._lock:
                self.last_errors[name] = str(exc)
            logger.warning("Feed %s unavailable, keeping previous snapshot: %s", name, exc)
        return report

    def ensure_fresh(self, names: Optional[Iterable[str]] = None) -> RefreshReport:
        return self.refresh(self.stale_sources(names))

    # -- internals -------------------------------------------------------

    def _select(self, names: Optional[Iterable[str]]) -> List[FeedSource]:
        if names is None:
            return self.sources
        return [self._sources[n] for n in names if n in self._sources]

    def _submit(self, source: FeedSource) -> "_fut.Future[SourceSnapshot]":
        with self._lock:
            if self._closed:
                raise CyberNewsError("CacheCoordinator is closed; cannot refresh feeds")
            fu = self._inflight.get(source.name)
            if fu is None:
                fu = self._executor.submit(self._refresh_one, source)
                self._inflight[source.name] = fu
            else:
                logger.debug("Joining in-flight refresh of %s", source.name)
            return fu

    def _refresh_one(self, source: FeedSource) -> SourceSnapshot:
        try:
            snap = self._fetch(source)
            if snap.source != source.name:
                raise ValueError(f"fetch returned snapshot for {snap.source!r}, expected {source.name!r}")
            self.put(snap)
            return snap
        finally:
            with self._lock:
                self._inflight.pop(source.name, None)
