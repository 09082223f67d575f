# egg_compare/cli/runner.py

"""Headless CLI comparison runner, reusing the async comparison service."""

import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from egg_compare.errors import ComparisonError
from egg_compare.models.comparison import ComparisonResult, HistoryEntry
from egg_compare.models.offer import Offer
from egg_compare.models.resolved_price import ResolvedPrice
from egg_compare.services.comparison_service import ComparisonService

logger = logging.getLogger("egg_compare.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _offer_to_dict(offer: Offer) -> dict[str, object]:
    return {
        "offerId": offer.offer_id,
        "description": offer.description,
        "discountAmount": offer.discount_amount,
        "discountPercent": offer.discount_percent,
        "expiresAt": (
            offer.expires_at.isoformat() if offer.expires_at else None
        ),
    }


def _price_to_dict(price: ResolvedPrice) -> dict[str, object]:
    return {
        "store": price.store,
        "sku": price.sku,
        "upc": price.upc,
        "storeId": price.store_id,
        "zipcode": price.location,
        "basePrice": price.base_price,
        "promoPrice": price.promo_price,
        "finalPrice": price.final_price,
        "productName": price.product_name,
        "productUrl": price.product_url,
        "inStock": price.in_stock,
        "pickupEta": price.pickup_eta,
        "digitalOffers": [_offer_to_dict(o) for o in price.offers],
        "degraded": sorted(price.degraded),
        "lastUpdated": price.last_updated.isoformat(timespec="seconds"),
    }


def comparison_to_dict(result: ComparisonResult) -> dict[str, object]:
    """Serialise a comparison to the camelCase shape of the public API."""
    data: dict[str, object] = {
        p.retailer: _price_to_dict(p) for p in result.prices
    }
    data["cheapest"] = result.cheapest
    data["priceDifference"] = result.price_difference
    data["lastUpdated"] = result.last_updated.isoformat(timespec="seconds")
    return data


def history_to_dicts(entries: list[HistoryEntry]) -> list[dict[str, object]]:
    """Serialise history entries as ``{"date": ..., "<retailer>Price": ...}``."""
    rows: list[dict[str, object]] = []
    for entry in entries:
        row: dict[str, object] = {"date": entry.date.isoformat()}
        for retailer, price in entry.prices.items():
            row[f"{retailer}Price"] = price
        rows.append(row)
    return rows


def _print_comparison_table(result: ComparisonResult) -> None:
    """Render a Rich table of the compared prices to stdout."""
    table = Table(
        title="Egg Price Comparison",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Store", style="magenta")
    table.add_column("Base", justify="right")
    table.add_column("Promo", justify="right")
    table.add_column("Final", justify="right", style="green")
    table.add_column("Stock", justify="center")
    table.add_column("Pickup")
    table.add_column("Offers", overflow="fold", style="dim")

    for p in result.prices:
        store = (
            f"[bold]{p.store} ★[/bold]"
            if p.retailer == result.cheapest
            else p.store
        )
        table.add_row(
            store,
            f"${p.base_price:.2f}",
            f"${p.promo_price:.2f}" if p.promo_price is not None else "—",
            f"${p.final_price:.2f}",
            "✅" if p.in_stock else "❌",
            p.pickup_eta,
            "; ".join(o.description for o in p.offers) or "—",
        )

    Console().print(table)


def _print_history_table(
    entries: list[HistoryEntry], retailers: list[str],
) -> None:
    """Render the trailing price history to stdout."""
    table = Table(title="Price History", title_style="bold cyan")
    table.add_column("Date")
    for retailer in retailers:
        table.add_column(retailer.title(), justify="right")
    for entry in entries:
        cells = [entry.date.isoformat()]
        for retailer in retailers:
            price = entry.price_for(retailer)
            cells.append(f"${price:.2f}" if price is not None else "—")
        table.add_row(*cells)
    Console().print(table)


async def cli_compare(
    zipcode: str | None,
    output_format: str,
    history_days: int | None = None,
    service: ComparisonService | None = None,
) -> int:
    """Run a headless comparison and return an exit code (0=ok, 1=fail)."""
    service = service or ComparisonService()
    modes = ", ".join(f"{s.label}={s.mode}" for s in service.sources)
    _err.print(
        f"[bold]Comparing egg prices:[/bold] "
        f"{zipcode or service.settings.DEFAULT_ZIPCODE}  [dim]{modes}[/dim]"
    )

    try:
        result = await service.get_comparison(zipcode)
    except ComparisonError as exc:
        logger.error("Comparison failed: %s", exc)
        _err.print(f"[red]Error: {exc}[/red]")
        return 1

    cheapest = result.price_for(result.cheapest)
    _err.print(
        f"[green]✓ Cheapest: {cheapest.store} at "
        f"${cheapest.final_price:.2f} "
        f"(saves ${result.price_difference:.2f})[/green]"
    )
    for price in result.prices:
        if price.degraded:
            _err.print(
                f"[yellow]{price.store}: degraded data "
                f"({', '.join(sorted(price.degraded))})[/yellow]"
            )

    history = (
        service.get_history(history_days)
        if history_days is not None
        else None
    )

    if output_format == "table":
        _print_comparison_table(result)
        if history is not None:
            _print_history_table(
                history, [p.retailer for p in result.prices]
            )
    else:
        payload: dict[str, object] = {"eggPrices": comparison_to_dict(result)}
        if history is not None:
            payload["priceHistory"] = history_to_dicts(history)
        json.dump(payload, sys.stdout, ensure_ascii=False, indent=2)
        sys.stdout.write("\n")

    return 0


async def run_health_check() -> int:
    """Run connectivity health check on all sources."""
    from egg_compare.services.health_checker import HealthChecker

    _err.print("[bold]Running price source health check...[/bold]")
    checker = HealthChecker()
    results = await checker.check_all()

    table = Table(
        title="Source Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Source", style="bold")
    table.add_column("Mode")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    any_down = False
    for r in results:
        if r.status == "ok":
            status = "[green]✅ OK[/green]"
        elif r.status == "slow":
            status = "[yellow]⚠️  SLOW[/yellow]"
        elif r.status == "mock":
            status = "[cyan]MOCK[/cyan]"
        else:
            status = "[red]❌ DOWN[/red]"
            any_down = True

        latency = (
            f"{r.latency_ms:.0f}ms"
            if r.latency_ms > 0
            else "—"
        )
        table.add_row(
            r.source_id, r.mode, status, latency, r.message,
        )

    Console().print(table)
    return 1 if any_down else 0
