# tests/test_base_source.py

"""Tests for PriceSource.collect and HttpPriceSource resilience."""

import unittest
from unittest.mock import MagicMock, patch

from egg_compare.config.settings import Settings
from egg_compare.errors import UpstreamUnavailable
from egg_compare.models.quote import InventoryStatus, RawOffer, RetailerQuote
from egg_compare.sources.base_source import HttpPriceSource, PriceSource


class _StubSource(PriceSource):
    """Source with a canned quote and counting sub-fetches."""

    def __init__(self, sku: str | None = "123") -> None:
        super().__init__("stub", "Stub")
        self.sku = sku
        self.offer_calls = 0
        self.inventory_calls = 0

    def fetch_quote(
        self, product_query: str, location: str,
    ) -> RetailerQuote:
        return RetailerQuote(
            retailer=self.retailer,
            store=self.label,
            product_name="Eggs",
            location=location,
            regular_price=4.00,
            raw_offers=(RawOffer("Q1", "Quote offer", discount_amount=0.1),),
            sku=self.sku,
        )

    def fetch_offers(self, sku: str) -> list[RawOffer]:
        self.offer_calls += 1
        return [RawOffer("F1", "Fetched offer", discount_amount=0.2)]

    def fetch_inventory(
        self, sku: str, location: str,
    ) -> InventoryStatus | None:
        self.inventory_calls += 1
        raise ConnectionError("inventory down")


class _StubHttpSource(HttpPriceSource):
    """Concrete HTTP source exposing the protected helpers."""

    def _get_homepage(self) -> str:
        return "https://example.com"

    def fetch_quote(
        self, product_query: str, location: str,
    ) -> RetailerQuote:
        raise NotImplementedError

    def get_json(self, url: str) -> dict[str, object]:
        """Public wrapper for _get_json."""
        return self._get_json(url)


class TestCollect(unittest.TestCase):
    """PriceSource.collect bundles quote, offers and inventory."""

    def test_quote_offers_come_first(self) -> None:
        """Offers on the quote precede fetched offers."""
        source = _StubSource()
        with self.assertLogs("egg_compare.stub", level="WARNING"):
            bundle = source.collect("eggs", "10001")
        self.assertEqual(
            [o.offer_id for o in bundle.raw_offers], ["Q1", "F1"]
        )

    def test_inventory_failure_absorbed(self) -> None:
        """A failing inventory fetch leaves inventory unset."""
        source = _StubSource()
        with self.assertLogs("egg_compare.stub", level="WARNING") as logs:
            bundle = source.collect("eggs", "10001")
        self.assertIsNone(bundle.inventory)
        self.assertFalse(bundle.offers_degraded)
        self.assertIn("Inventory check failed", logs.output[0])

    def test_no_sku_skips_sub_fetches(self) -> None:
        """Without a SKU, offers and inventory are not requested."""
        source = _StubSource(sku=None)
        bundle = source.collect("eggs", "10001")
        self.assertEqual(source.offer_calls, 0)
        self.assertEqual(source.inventory_calls, 0)
        self.assertEqual(len(bundle.raw_offers), 1)


class TestPositiveOrNone(unittest.TestCase):
    """Provider number parsing."""

    def test_values(self) -> None:
        """Zero, negatives and junk are absent; positives pass through."""
        cases = [
            (4.29, 4.29),
            ("3.5", 3.5),
            (0, None),
            (-1, None),
            (None, None),
            ("n/a", None),
        ]
        for value, expected in cases:
            with self.subTest(value=value):
                self.assertEqual(
                    HttpPriceSource.positive_or_none(value), expected
                )


@patch("egg_compare.sources.base_source.curl_requests.Session")
class TestHttpRetries(unittest.TestCase):
    """Retry behaviour of the HTTP helpers."""

    def test_rate_limit_retried(self, session_cls: MagicMock) -> None:
        """429 is retried until a 200 arrives."""
        session = MagicMock()
        session_cls.return_value = session
        limited = MagicMock(status_code=429, text="slow down")
        ok = MagicMock(status_code=200)
        ok.json.return_value = {"ok": True}
        session.get.side_effect = [limited, ok]

        source = _StubHttpSource("stub", "Stub")
        self.assertEqual(source.get_json("https://example.com/api"), {"ok": True})
        self.assertEqual(session.get.call_count, 2)

    def test_non_object_body_rejected(self, session_cls: MagicMock) -> None:
        """A JSON list body is an unexpected shape."""
        session = MagicMock()
        session_cls.return_value = session
        resp = MagicMock(status_code=200)
        resp.json.return_value = [1, 2]
        session.get.return_value = resp

        source = _StubHttpSource("stub", "Stub")
        with self.assertRaises(UpstreamUnavailable):
            source.get_json("https://example.com/api")

    def test_headers_merged_with_defaults(
        self, session_cls: MagicMock,
    ) -> None:
        """Default headers and the configured timeout are always sent."""
        session = MagicMock()
        session_cls.return_value = session
        resp = MagicMock(status_code=200)
        resp.json.return_value = {}
        session.get.return_value = resp

        source = _StubHttpSource("stub", "Stub")
        source.get_json("https://example.com/api")

        kwargs = session.get.call_args.kwargs
        self.assertEqual(
            kwargs["headers"]["Accept"],
            Settings.DEFAULT_HEADERS["Accept"],
        )
        self.assertEqual(kwargs["timeout"], Settings.REQUEST_TIMEOUT)


if __name__ == "__main__":
    unittest.main()
