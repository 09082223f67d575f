# tests/test_app.py

"""Smoke tests for the TUI application using Textual's Pilot."""

import unittest
from typing import cast

from textual.widgets import DataTable, Input, Static

from egg_compare.errors import UpstreamUnavailable
from egg_compare.models.quote import RetailerQuote
from egg_compare.services.comparison_service import ComparisonService
from egg_compare.sources.base_source import PriceSource
from egg_compare.sources.mock_source import (
    MockWalgreensSource,
    MockWalmartSource,
)
from egg_compare.ui.app import EggCompareApp


class _DownSource(PriceSource):
    """Source whose upstream is always unavailable."""

    def __init__(self) -> None:
        super().__init__("walgreens", "Walgreens")

    def fetch_quote(
        self, product_query: str, location: str,
    ) -> RetailerQuote:
        raise UpstreamUnavailable(self.retailer, "HTTP 503")


def _mock_app() -> EggCompareApp:
    return EggCompareApp(
        service=ComparisonService(
            sources=[MockWalmartSource(), MockWalgreensSource()]
        )
    )


class TestEggCompareApp(unittest.IsolatedAsyncioTestCase):
    """Smoke tests for the Textual TUI."""

    async def test_app_composes_without_crash(self) -> None:
        """Verify the app starts and renders all widgets."""
        app = _mock_app()
        async with app.run_test() as pilot:
            app.query_one("#zip_input", Input)
            app.query_one("#compare_btn")
            app.query_one("#prices_table", DataTable)
            app.query_one("#history_table", DataTable)
            app.query_one("#status", Static)
            await pilot.pause()

    async def test_zip_input_prefilled(self) -> None:
        """The zipcode input starts with the default zipcode."""
        app = _mock_app()
        async with app.run_test() as pilot:
            zip_input = app.query_one("#zip_input", Input)
            self.assertEqual(
                zip_input.value, app.service.settings.DEFAULT_ZIPCODE
            )
            await pilot.pause()

    async def test_history_columns_follow_sources(self) -> None:
        """History table has a Date column plus one per source."""
        app = _mock_app()
        async with app.run_test() as pilot:
            table = cast(
                DataTable[str],
                app.query_one("#history_table", DataTable),
            )
            cols = [str(c.label) for c in table.columns.values()]
            self.assertEqual(cols, ["Date", "Walmart", "Walgreens"])
            await pilot.pause()

    async def test_comparison_populates_tables(self) -> None:
        """A successful comparison fills both tables."""
        app = _mock_app()
        async with app.run_test() as pilot:
            app.query_one("#zip_input", Input).value = "10001"
            await app.perform_comparison()
            await pilot.pause()

            assert app.result is not None
            self.assertEqual(app.result.cheapest, "walmart")
            prices = cast(
                DataTable[str],
                app.query_one("#prices_table", DataTable),
            )
            history = cast(
                DataTable[str],
                app.query_one("#history_table", DataTable),
            )
            self.assertEqual(prices.row_count, 2)
            self.assertEqual(history.row_count, 1)

    async def test_refresh_same_day_keeps_one_history_row(self) -> None:
        """Refreshing twice on one day leaves one history row."""
        app = _mock_app()
        async with app.run_test() as pilot:
            await app.action_refresh()
            await app.action_refresh()
            await pilot.pause()
            history = cast(
                DataTable[str],
                app.query_one("#history_table", DataTable),
            )
            self.assertEqual(history.row_count, 1)

    async def test_empty_zipcode_does_nothing(self) -> None:
        """An empty zipcode warns and does not compare."""
        app = _mock_app()
        async with app.run_test(notifications=True) as pilot:
            app.query_one("#zip_input", Input).value = "  "
            await app.perform_comparison()
            await pilot.pause()
            self.assertIsNone(app.result)

    async def test_failure_keeps_tables_empty(self) -> None:
        """A failed comparison leaves tables and history empty."""
        app = EggCompareApp(
            service=ComparisonService(
                sources=[MockWalmartSource(), _DownSource()]
            )
        )
        async with app.run_test(notifications=True) as pilot:
            await app.perform_comparison()
            await pilot.pause()

            self.assertIsNone(app.result)
            self.assertEqual(app.service.get_history(), [])
            prices = cast(
                DataTable[str],
                app.query_one("#prices_table", DataTable),
            )
            self.assertEqual(prices.row_count, 0)


if __name__ == "__main__":
    unittest.main()
