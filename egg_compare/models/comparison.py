# egg_compare/models/comparison.py

"""Comparison result and daily history snapshot models."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime

from egg_compare.models.resolved_price import ResolvedPrice


@dataclass(frozen=True)
class ComparisonResult:
    """Outcome of comparing the resolved prices of several retailers."""

    prices: tuple[ResolvedPrice, ...]
    cheapest: str
    price_difference: float
    last_updated: datetime

    def price_for(self, retailer: str) -> ResolvedPrice:
        """Return the resolved price of *retailer*.

        Raises ``KeyError`` when the retailer was not compared.
        """
        for price in self.prices:
            if price.retailer == retailer:
                return price
        raise KeyError(retailer)


@dataclass(frozen=True)
class HistoryEntry:
    """One calendar day's final prices across tracked retailers."""

    date: date
    prices: Mapping[str, float]

    def price_for(self, retailer: str) -> float | None:
        """Final price recorded for *retailer* on this day, if any."""
        return self.prices.get(retailer)
