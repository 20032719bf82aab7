"""
Per-session generation cache in front of the LLM.
Why: generation is slow and billed per call; UI re-renders ask for the same
case many times. Single process, in memory, best effort.
"""

from dataclasses import dataclass
from typing import Dict, Generic, Iterator, List, Optional, Tuple, TypeVar

from .logging import get_logger
from .metrics import metrics
from .schemas import AuditCaseData, CaseData, RectificationOption

_LOG = get_logger(__name__)

T = TypeVar("T")

ANON_SESSION = "anon"


@dataclass
class CacheEntry(Generic[T]):
    """Generated value plus the timestamps the cache policy reads."""

    data: T
    created_at: float
    last_generated_at: float
    last_served_at: float

    @classmethod
    def new(cls, data: T, now: float) -> "CacheEntry[T]":
        return cls(data=data, created_at=now, last_generated_at=now, last_served_at=now)

    def touch(self, now: float) -> None:
        self.last_served_at = now


def is_fresh(entry: Optional[CacheEntry], now: float, ttl: float) -> bool:
    if entry is None:
        return False
    return now - entry.created_at < ttl


def should_rate_limit(entry: Optional[CacheEntry], now: float, window: float) -> bool:
    """True while ``entry`` was generated less than ``window`` seconds ago.

    A stale entry inside the window is still served, so bursts of requests
    collapse into one generation.
    """
    if entry is None:
        return False
    return now - entry.last_generated_at < window


def is_idle(entry: CacheEntry, now: float, max_idle: float) -> bool:
    return now - entry.last_served_at > max_idle


def session_key(session_id: Optional[str]) -> str:
    return session_id or ANON_SESSION


def options_key(session_id: Optional[str], case: CaseData) -> str:
    # Case content is part of the key: a regenerated case never reuses old options
    return f"{session_key(session_id)}:{case.id}:{case.botched_element}:{case.faulty_prompt}"


@dataclass
class SessionBundle:
    """One slot per game mode for a single session."""

    detective: Optional[CacheEntry[CaseData]] = None
    audit: Optional[CacheEntry[AuditCaseData]] = None

    def is_empty(self) -> bool:
        return self.detective is None and self.audit is None


class SessionStore:
    def __init__(self) -> None:
        self._bundles: Dict[str, SessionBundle] = {}

    def get_or_create(self, key: str) -> SessionBundle:
        bundle = self._bundles.get(key)
        if bundle is None:
            bundle = SessionBundle()
            self._bundles[key] = bundle
        return bundle

    def get(self, key: str) -> Optional[SessionBundle]:
        return self._bundles.get(key)

    def remove(self, key: str) -> None:
        self._bundles.pop(key, None)

    def items(self) -> List[Tuple[str, SessionBundle]]:
        return list(self._bundles.items())

    def clear(self) -> None:
        self._bundles.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._bundles

    def __len__(self) -> int:
        return len(self._bundles)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._bundles))


OptionsEntry = CacheEntry[List[RectificationOption]]


class OptionsStore:
    def __init__(self) -> None:
        self._entries: Dict[str, OptionsEntry] = {}

    def get(self, key: str) -> Optional[OptionsEntry]:
        return self._entries.get(key)

    def set(self, key: str, entry: OptionsEntry) -> None:
        self._entries[key] = entry

    def remove(self, key: str) -> None:
        self._entries.pop(key, None)

    def items(self) -> List[Tuple[str, OptionsEntry]]:
        return list(self._entries.items())

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class EvictionSweeper:
    """Counter-gated sweep: every ``interval``-th call scans both stores.

    Entries are dropped once nobody has read them for ``max_idle`` seconds.
    Reads keep an entry alive past its freshness window.
    """

    def __init__(
        self,
        sessions: SessionStore,
        options: OptionsStore,
        max_idle: float,
        interval: int = 50,
    ) -> None:
        self.sessions = sessions
        self.options = options
        self.max_idle = max_idle
        self.interval = interval
        self.counter = 0

    def maybe_sweep(self, now: float) -> bool:
        self.counter += 1
        if self.counter % self.interval != 0:
            return False
        self.sweep(now)
        return True

    def sweep(self, now: float) -> int:
        evicted = 0
        for key, bundle in self.sessions.items():
            if bundle.detective is not None and is_idle(bundle.detective, now, self.max_idle):
                bundle.detective = None
                evicted += 1
            if bundle.audit is not None and is_idle(bundle.audit, now, self.max_idle):
                bundle.audit = None
                evicted += 1
            if bundle.is_empty():
                self.sessions.remove(key)

        for key, entry in self.options.items():
            if is_idle(entry, now, self.max_idle):
                self.options.remove(key)
                evicted += 1

        metrics.record_sweep(evicted)
        _LOG.info(
            "cache sweep finished",
            extra={
                "evicted": evicted,
                "sessions": len(self.sessions),
                "option_sets": len(self.options),
            },
        )
        return evicted
