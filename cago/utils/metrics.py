"""
In-process metrics for completion calls and JSON extraction.

Counters are plain names ("extract.repaired"); completion calls record
"<service>.<operation>.success|error" plus a "<service>.<operation>.duration_ms"
histogram. Each call is also logged as a "metrics.call" line. GET /metrics
returns get_snapshot().
"""

import time
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import Dict, Any, List

from cago.utils.logger import get_logger

logger = get_logger()

_counters: Dict[str, int] = defaultdict(int)
_histograms: Dict[str, list] = defaultdict(list)

MAX_HISTOGRAM_SAMPLES = 500


def inc(name: str, value: int = 1) -> None:
    _counters[name] += value


def observe(name: str, value: float) -> None:
    bucket = _histograms[name]
    bucket.append(value)
    if len(bucket) > MAX_HISTOGRAM_SAMPLES:
        _histograms[name] = bucket[-MAX_HISTOGRAM_SAMPLES:]


def _record_call(service: str, operation: str, started: float, status: str) -> None:
    duration_ms = (time.monotonic() - started) * 1000
    observe(f"{service}.{operation}.duration_ms", duration_ms)
    inc(f"{service}.{operation}.{status}")

    log_fn = logger.warning if status == "error" else logger.info
    log_fn(
        "metrics.call",
        extra={
            "service": service,
            "operation": operation,
            "duration_ms": round(duration_ms, 1),
            "status": status,
        },
    )


@asynccontextmanager
async def track_duration(service: str, operation: str = "call"):
    """
    Time a completion call and count its outcome.

    Usage:
        async with track_duration("anthropic", "plan"):
            message = await client.messages.create(...)
    """
    started = time.monotonic()
    try:
        yield
    except Exception:
        _record_call(service, operation, started, "error")
        raise
    _record_call(service, operation, started, "success")


def _percentile(sorted_samples: List[float], fraction: float) -> float:
    idx = min(int(len(sorted_samples) * fraction), len(sorted_samples) - 1)
    return round(sorted_samples[idx], 1)


def get_snapshot() -> Dict[str, Any]:
    histograms = {}
    for name, samples in _histograms.items():
        if not samples:
            continue
        ordered = sorted(samples)
        histograms[name] = {
            "count": len(ordered),
            "p50": _percentile(ordered, 0.5),
            "p95": _percentile(ordered, 0.95),
            "max": round(ordered[-1], 1),
        }
    return {"counters": dict(_counters), "histograms": histograms}


def reset() -> None:
    """Clear everything (tests)."""
    _counters.clear()
    _histograms.clear()
