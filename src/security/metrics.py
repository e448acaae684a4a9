"""Validation metrics: per-stage latency and failure counters plus cache stats.

Thread-safe counters that accumulate during runtime and are read by the
health endpoint.
"""

import time
from dataclasses import dataclass
from threading import Lock


@dataclass
class StageMetrics:
    """Metrics for a single validation stage."""

    total_runs: int = 0
    total_latency_ms: float = 0.0
    max_latency_ms: float = 0.0
    errors: int = 0
    timeouts: int = 0
    unavailable: int = 0  # provider returned no data

    @property
    def avg_latency_ms(self) -> float:
        if self.total_runs == 0:
            return 0.0
        return self.total_latency_ms / self.total_runs


class ValidationMetrics:
    """Global metrics accumulator for the risk engine."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._stages: dict[str, StageMetrics] = {}
        self._validations: int = 0
        self._quick_checks: int = 0
        self._input_errors: int = 0
        self._cache_hits: int = 0
        self._cache_misses: int = 0
        self._levels: dict[str, int] = {}
        self._start_time: float = time.monotonic()

    def _get_stage(self, stage_name: str) -> StageMetrics:
        if stage_name not in self._stages:
            self._stages[stage_name] = StageMetrics()
        return self._stages[stage_name]

    def record_stage(
        self,
        stage_name: str,
        latency_ms: float,
        *,
        error: bool = False,
        timeout: bool = False,
        unavailable: bool = False,
    ) -> None:
        with self._lock:
            m = self._get_stage(stage_name)
            m.total_runs += 1
            m.total_latency_ms += latency_ms
            m.max_latency_ms = max(m.max_latency_ms, latency_ms)
            if error:
                m.errors += 1
            if timeout:
                m.timeouts += 1
            if unavailable:
                m.unavailable += 1

    def record_validation(self, risk_level: str) -> None:
        with self._lock:
            self._validations += 1
            self._levels[risk_level] = self._levels.get(risk_level, 0) + 1

    def record_quick_check(self) -> None:
        with self._lock:
            self._quick_checks += 1

    def record_input_error(self) -> None:
        with self._lock:
            self._input_errors += 1

    def record_cache(self, *, hit: bool) -> None:
        with self._lock:
            if hit:
                self._cache_hits += 1
            else:
                self._cache_misses += 1

    def get_stage(self, stage_name: str) -> StageMetrics:
        with self._lock:
            return self._get_stage(stage_name)

    def get_summary(self) -> dict:
        """Snapshot for the health endpoint."""
        with self._lock:
            lookups = self._cache_hits + self._cache_misses
            return {
                "uptime_sec": int(time.monotonic() - self._start_time),
                "validations": self._validations,
                "quick_checks": self._quick_checks,
                "input_errors": self._input_errors,
                "cache_hit_rate": (self._cache_hits / lookups * 100) if lookups else 0.0,
                "risk_levels": dict(self._levels),
                "stages": {
                    name: {
                        "runs": m.total_runs,
                        "avg_latency_ms": round(m.avg_latency_ms, 1),
                        "max_latency_ms": round(m.max_latency_ms, 1),
                        "errors": m.errors,
                        "timeouts": m.timeouts,
                        "unavailable": m.unavailable,
                    }
                    for name, m in self._stages.items()
                },
            }


validation_metrics = ValidationMetrics()
