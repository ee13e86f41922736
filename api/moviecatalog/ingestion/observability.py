"""Metrics and structured logs for provider calls."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, DefaultDict, TypeVar

from moviecatalog.utils.redaction import describe_error

logger = logging.getLogger("moviecatalog.ingestion")

T = TypeVar("T")


@dataclass
class OperationMetrics:
    """Aggregated counters for a source operation."""
    started: int = 0
    succeeded: int = 0
    failed: int = 0
    degraded: int = 0
    last_latency_ms: float | None = None
    last_error: str | None = None


class ProviderMonitor:
    """Track provider call outcomes; never alters the call's result."""
    def __init__(self) -> None:
        self._metrics: DefaultDict[str, DefaultDict[str, OperationMetrics]] = defaultdict(
            lambda: defaultdict(OperationMetrics)
        )
        self._lock = asyncio.Lock()

    async def track(
        self,
        source: str,
        operation: str,
        func: Callable[[], Awaitable[T]],
        *,
        context: dict[str, Any] | None = None,
    ) -> T:
        """Execute a provider call while recording latency and failures.

        The exception, if any, is re-raised unchanged so callers decide
        whether it is fatal or best-effort.
        """
        context = context or {}
        async with self._lock:
            self._metrics[source][operation].started += 1

        start = time.monotonic()
        try:
            result = await func()
        except Exception as exc:
            latency_ms = (time.monotonic() - start) * 1000
            error = describe_error(exc)
            async with self._lock:
                metrics = self._metrics[source][operation]
                metrics.failed += 1
                metrics.last_latency_ms = latency_ms
                metrics.last_error = error
            logger.warning(
                json.dumps(
                    {
                        "event": "provider_failure",
                        "source": source,
                        "operation": operation,
                        "error": error,
                        "latency_ms": round(latency_ms, 2),
                        "context": context,
                    }
                )
            )
            raise

        latency_ms = (time.monotonic() - start) * 1000
        async with self._lock:
            metrics = self._metrics[source][operation]
            metrics.succeeded += 1
            metrics.last_latency_ms = latency_ms
            metrics.last_error = None
        logger.info(
            json.dumps(
                {
                    "event": "provider_success",
                    "source": source,
                    "operation": operation,
                    "latency_ms": round(latency_ms, 2),
                    "context": context,
                }
            )
        )
        return result

    async def record_degraded(
        self,
        source: str,
        operation: str,
        exc: BaseException,
        *,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Record a best-effort failure that was downgraded to "absent"."""
        error = describe_error(exc)
        async with self._lock:
            metrics = self._metrics[source][operation]
            metrics.degraded += 1
            metrics.last_error = error
        logger.warning(
            json.dumps(
                {
                    "event": "provider_degraded",
                    "source": source,
                    "operation": operation,
                    "error": error,
                    "context": context or {},
                }
            )
        )

    async def snapshot(self) -> dict[str, Any]:
        """Return a snapshot of all tracked source metrics."""
        async with self._lock:
            return {
                source: {
                    "operations": {
                        name: {
                            "started": metrics.started,
                            "succeeded": metrics.succeeded,
                            "failed": metrics.failed,
                            "degraded": metrics.degraded,
                            "last_latency_ms": metrics.last_latency_ms,
                            "last_error": metrics.last_error,
                        }
                        for name, metrics in operations.items()
                    }
                }
                for source, operations in self._metrics.items()
            }

    async def reset(self) -> None:
        async with self._lock:
            self._metrics.clear()


provider_monitor = ProviderMonitor()
