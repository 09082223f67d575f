# egg_compare/ui/app.py

"""Terminal UI for the egg_compare price comparison engine."""

import logging
from typing import cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Static,
)

from egg_compare.errors import ComparisonError
from egg_compare.models.comparison import ComparisonResult
from egg_compare.services.comparison_service import ComparisonService

logger = logging.getLogger("egg_compare.ui")


class EggCompareApp(App[object]):
    """Terminal UI for the egg_compare price comparison engine."""

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
    ]

    def __init__(self, service: ComparisonService | None = None) -> None:
        super().__init__()
        self.service = service or ComparisonService()
        self.result: ComparisonResult | None = None

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        source_names = ", ".join(
            f"{s.label} ({s.mode})" for s in self.service.sources
        )

        yield Header()
        yield Container(
            Static(f"🥚 Egg Price Comparison ({source_names})", id="title"),
            Horizontal(
                Input(
                    value=self.service.settings.DEFAULT_ZIPCODE,
                    placeholder="Zipcode",
                    id="zip_input",
                ),
                Button("Compare", variant="primary", id="compare_btn"),
                id="search_bar",
            ),
            Static("Ready", id="status"),
            cast(
                DataTable[str | Text],
                DataTable(id="prices_table", zebra_stripes=True),
            ),
            cast(
                DataTable[str | Text],
                DataTable(id="history_table", zebra_stripes=True),
            ),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Configure table columns on startup."""
        prices = cast(
            DataTable[str | Text],
            self.query_one("#prices_table", DataTable),
        )
        prices.add_columns(
            "Store", "Base", "Promo", "Final", "Stock", "Pickup", "Offers"
        )
        history = cast(
            DataTable[str | Text],
            self.query_one("#history_table", DataTable),
        )
        history.add_columns(
            "Date", *(s.label for s in self.service.sources)
        )

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button click events."""
        if event.button.id == "compare_btn":
            await self.perform_comparison()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle Enter key in the zipcode input."""
        if event.input.id == "zip_input":
            await self.perform_comparison()

    async def action_refresh(self) -> None:
        """Re-run the comparison for the current zipcode."""
        await self.perform_comparison()

    async def perform_comparison(self) -> None:
        """Compare prices for the entered zipcode and refresh the tables."""
        zipcode = self.query_one("#zip_input", Input).value.strip()
        if not zipcode:
            self.notify("Please enter a zipcode", severity="warning")
            return

        status = self.query_one("#status", Static)
        status.update(f"🔍 Comparing prices near {zipcode}...")

        try:
            self.result = await self.service.get_comparison(zipcode)
        except ComparisonError as exc:
            logger.error("Comparison failed in TUI: %s", exc)
            status.update(f"❌ {exc}")
            self.notify(f"Error: {exc}", severity="error")
            return

        self.populate_tables()
        cheapest = self.result.price_for(self.result.cheapest)
        status.update(
            f"✅ {cheapest.store} is cheapest at "
            f"${cheapest.final_price:.2f} "
            f"(difference ${self.result.price_difference:.2f})"
        )

    def populate_tables(self) -> None:
        """Fill both tables from the latest result and history."""
        prices = cast(
            DataTable[str | Text],
            self.query_one("#prices_table", DataTable),
        )
        prices.clear()
        if self.result is not None:
            for p in self.result.prices:
                is_cheapest = p.retailer == self.result.cheapest
                prices.add_row(
                    p.store,
                    f"${p.base_price:.2f}",
                    (
                        f"${p.promo_price:.2f}"
                        if p.promo_price is not None
                        else ""
                    ),
                    Text(
                        f"${p.final_price:.2f}",
                        style="bold green" if is_cheapest else "",
                    ),
                    "In stock" if p.in_stock else "Out of stock",
                    p.pickup_eta,
                    ", ".join(o.description for o in p.offers),
                )

        history = cast(
            DataTable[str | Text],
            self.query_one("#history_table", DataTable),
        )
        history.clear()
        for entry in self.service.get_history():
            cells: list[str | Text] = [entry.date.isoformat()]
            for source in self.service.sources:
                price = entry.price_for(source.retailer)
                cells.append(f"${price:.2f}" if price is not None else "")
            history.add_row(*cells)
