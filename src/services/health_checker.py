# src/services/health_checker.py

"""Catalog API connectivity health checker."""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any

from src.api.catalog_client import CatalogClient
from src.api.errors import CatalogApiError
from src.config.settings import Settings

logger = logging.getLogger("catalog_browser.health")

# (endpoint id, path, query params)
_ENDPOINTS: list[tuple[str, str, dict[str, Any]]] = [
    ("products", "/products", {"limit": 1}),
    ("categories", "/products/categories", {}),
    ("search", "/products/search", {"q": "phone", "limit": 1}),
]


@dataclass
class HealthResult:
    """Result of a single endpoint health check."""

    endpoint: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str


async def check_endpoint(
    client: CatalogClient,
    endpoint: str,
    path: str,
    params: dict[str, Any],
) -> HealthResult:
    """Check a single catalog endpoint for connectivity."""
    start = time.monotonic()
    try:
        await asyncio.wait_for(
            client.get_json(path, params or None),
            timeout=Settings.HEALTH_TIMEOUT,
        )
    except (CatalogApiError, asyncio.TimeoutError) as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        status_code = getattr(exc, "status_code", None)
        message = (
            f"HTTP {status_code}"
            if status_code
            else (str(exc) or "Timed out")[:80]
        )
        return HealthResult(
            endpoint=endpoint,
            status="down",
            latency_ms=elapsed_ms,
            message=message,
        )

    elapsed_ms = (time.monotonic() - start) * 1000
    if elapsed_ms > Settings.HEALTH_SLOW_MS:
        return HealthResult(
            endpoint=endpoint,
            status="slow",
            latency_ms=elapsed_ms,
            message="High latency",
        )
    return HealthResult(
        endpoint=endpoint,
        status="ok",
        latency_ms=elapsed_ms,
        message="",
    )


class HealthChecker:
    """Runs concurrent health checks against the catalog endpoints."""

    def __init__(self, client: CatalogClient) -> None:
        self.client = client
        self.endpoints = _ENDPOINTS

    async def check_all(self) -> list[HealthResult]:
        """Check every endpoint concurrently."""
        tasks = [
            check_endpoint(self.client, endpoint, path, params)
            for endpoint, path, params in self.endpoints
        ]
        results: list[HealthResult] = list(await asyncio.gather(*tasks))
        for r in results:
            logger.info(
                "Health check %s: %s (%.0fms) %s",
                r.endpoint,
                r.status,
                r.latency_ms,
                r.message,
            )
        return results
