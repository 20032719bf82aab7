"""
In-memory metrics for the /metrics endpoint.
Covers HTTP traffic (rough p50/p95) and the generation cache.
"""

from collections import deque
from typing import Deque, Dict, Iterable

MAX_LATENCY_SAMPLES = 1000


def _percentile(values: Iterable[int], p: float) -> int:
    ordered = sorted(values)
    if not ordered:
        return 0
    idx = max(0, min(len(ordered) - 1, int(len(ordered) * p)))
    return ordered[idx]


class _Metrics:
    def __init__(self) -> None:
        self.total_requests = 0
        self.total_errors = 0
        self._latencies: Deque[int] = deque(maxlen=MAX_LATENCY_SAMPLES)
        self.cache_hits = 0
        self.cache_misses = 0
        self.generator_calls = 0
        self.generation_retries = 0
        self.sweeps = 0
        self.evicted_entries = 0

    def increment_requests(self) -> None:
        self.total_requests += 1

    def increment_errors(self) -> None:
        self.total_errors += 1

    def record_latency(self, ms: int) -> None:
        self._latencies.append(ms)

    def record_cache_hit(self) -> None:
        self.cache_hits += 1

    def record_cache_miss(self) -> None:
        self.cache_misses += 1

    def record_generator_call(self) -> None:
        self.generator_calls += 1

    def record_retry(self) -> None:
        self.generation_retries += 1

    def record_sweep(self, evicted: int) -> None:
        self.sweeps += 1
        self.evicted_entries += evicted

    def snapshot(self) -> Dict[str, int]:
        lat = list(self._latencies)
        return {
            "total_requests": self.total_requests,
            "total_errors": self.total_errors,
            "p50_ms": _percentile(lat, 0.50),
            "p95_ms": _percentile(lat, 0.95),
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
            "generator_calls": self.generator_calls,
            "generation_retries": self.generation_retries,
            "sweeps": self.sweeps,
            "evicted_entries": self.evicted_entries,
        }


metrics = _Metrics()
