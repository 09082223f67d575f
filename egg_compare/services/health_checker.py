# egg_compare/services/health_checker.py

"""Price source connectivity health checker."""

import asyncio
import logging
import time
from dataclasses import dataclass

from egg_compare.sources.base_source import HttpPriceSource, PriceSource
from egg_compare.sources.registry import FallbackPriceSource, build_sources

logger = logging.getLogger("egg_compare.health")

_HEALTH_TIMEOUT = 10  # seconds per source


@dataclass
class HealthResult:
    """Result of a single source health check."""

    source_id: str
    mode: str  # "live", "mock", "live+mock"
    status: str  # "ok", "slow", "down", "mock"
    latency_ms: float
    message: str


def probe_source(source: PriceSource) -> HealthResult:
    """Probe a single price source for connectivity."""
    target = (
        source.primary
        if isinstance(source, FallbackPriceSource)
        else source
    )
    if not isinstance(target, HttpPriceSource):
        return HealthResult(
            source_id=source.retailer,
            mode=source.mode,
            status="mock",
            latency_ms=0.0,
            message="Deterministic mock data (no credentials)",
        )

    start = time.monotonic()
    try:
        resp = target.session.get(
            target._get_homepage(),
            headers=target.settings.DEFAULT_HEADERS,
            timeout=_HEALTH_TIMEOUT,
        )
        elapsed_ms = (time.monotonic() - start) * 1000

        if resp.status_code != 200:
            return HealthResult(
                source_id=source.retailer,
                mode=source.mode,
                status="down",
                latency_ms=elapsed_ms,
                message=f"HTTP {resp.status_code}",
            )

        if elapsed_ms > 5000:
            return HealthResult(
                source_id=source.retailer,
                mode=source.mode,
                status="slow",
                latency_ms=elapsed_ms,
                message="High latency",
            )

        return HealthResult(
            source_id=source.retailer,
            mode=source.mode,
            status="ok",
            latency_ms=elapsed_ms,
            message="",
        )

    except Exception as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        return HealthResult(
            source_id=source.retailer,
            mode=source.mode,
            status="down",
            latency_ms=elapsed_ms,
            message=str(exc)[:80],
        )


class HealthChecker:
    """Runs concurrent health probes against all sources."""

    def __init__(self, sources: list[PriceSource] | None = None) -> None:
        self.sources = sources if sources is not None else build_sources()

    async def check_all(self) -> list[HealthResult]:
        """Probe every configured source concurrently."""
        tasks = [
            asyncio.to_thread(probe_source, src)
            for src in self.sources
        ]
        results: list[HealthResult] = list(
            await asyncio.gather(*tasks)
        )
        for r in results:
            logger.info(
                "Health check %s [%s]: %s (%.0fms) %s",
                r.source_id,
                r.mode,
                r.status,
                r.latency_ms,
                r.message,
            )
        return results
