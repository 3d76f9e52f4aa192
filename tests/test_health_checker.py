# tests/test_health_checker.py

"""Tests for the catalog API health checker service."""

import asyncio
import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from src.api.errors import RemoteStatusError, TransportError
from src.services.health_checker import (
    HealthChecker,
    HealthResult,
    check_endpoint,
)


def _client(**kwargs: object) -> MagicMock:
    client = MagicMock()
    client.get_json = AsyncMock(**kwargs)
    return client


class TestCheckEndpoint(unittest.IsolatedAsyncioTestCase):
    """Tests for the per-endpoint health check function."""

    async def test_ok_status(self) -> None:
        """A fast successful response should return 'ok' status."""
        client = _client(return_value={"products": []})
        result = await check_endpoint(client, "products", "/products", {"limit": 1})
        self.assertEqual(result.status, "ok")
        self.assertGreaterEqual(result.latency_ms, 0)
        client.get_json.assert_awaited_once_with("/products", {"limit": 1})

    async def test_empty_params_sent_as_none(self) -> None:
        client = _client(return_value=[])
        await check_endpoint(client, "categories", "/products/categories", {})
        client.get_json.assert_awaited_once_with("/products/categories", None)

    async def test_down_on_http_error(self) -> None:
        """A non-2xx response should return 'down' with the status."""
        client = _client(side_effect=RemoteStatusError("HTTP error! status: 503", 503))
        result = await check_endpoint(client, "products", "/products", {})
        self.assertEqual(result.status, "down")
        self.assertEqual(result.message, "HTTP 503")

    async def test_down_on_transport_error(self) -> None:
        client = _client(side_effect=TransportError("Could not resolve host"))
        result = await check_endpoint(client, "products", "/products", {})
        self.assertEqual(result.status, "down")
        self.assertIn("resolve", result.message)

    async def test_down_on_timeout(self) -> None:
        async def hang(*_args: object) -> None:
            await asyncio.sleep(10)

        client = MagicMock()
        client.get_json = hang
        with patch("src.services.health_checker.Settings.HEALTH_TIMEOUT", 0.01):
            result = await check_endpoint(client, "products", "/products", {})
        self.assertEqual(result.status, "down")
        self.assertEqual(result.message, "Timed out")

    async def test_slow_status(self) -> None:
        client = _client(return_value={})
        with patch("src.services.health_checker.Settings.HEALTH_SLOW_MS", -1.0):
            result = await check_endpoint(client, "products", "/products", {})
        self.assertEqual(result.status, "slow")
        self.assertEqual(result.message, "High latency")


class TestHealthChecker(unittest.IsolatedAsyncioTestCase):
    """Tests for the concurrent health checker."""

    async def test_check_all_covers_every_endpoint(self) -> None:
        client = _client(return_value={})
        results = await HealthChecker(client).check_all()
        self.assertEqual(
            [r.endpoint for r in results],
            ["products", "categories", "search"],
        )
        self.assertTrue(all(isinstance(r, HealthResult) for r in results))
        self.assertEqual(client.get_json.await_count, 3)

    async def test_mixed_results(self) -> None:
        client = _client(
            side_effect=[{}, TransportError("offline"), {}]
        )
        results = await HealthChecker(client).check_all()
        self.assertEqual(
            [r.status for r in results], ["ok", "down", "ok"]
        )


if __name__ == "__main__":
    unittest.main()
