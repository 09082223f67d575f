# egg_compare/pricing/comparison.py

"""Cross-retailer comparison and daily history recording."""

import logging
from collections.abc import Callable, Sequence
from datetime import date, datetime
from types import MappingProxyType

from egg_compare.config.settings import Settings
from egg_compare.models.comparison import ComparisonResult, HistoryEntry
from egg_compare.models.resolved_price import ResolvedPrice
from egg_compare.storage.history_store import PriceHistoryStore

logger = logging.getLogger("egg_compare.comparison")


class ComparisonAggregator:
    """Pick the cheapest retailer and record one history entry per day.

    Ties on final price go to the retailer listed first in *priority*;
    retailers missing from it rank after all listed ones, by name.
    The calendar day comes from *today* (local process clock by default).
    """

    def __init__(
        self,
        history: PriceHistoryStore,
        priority: Sequence[str] | None = None,
        today: Callable[[], date] = date.today,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.history = history
        self.priority: list[str] = list(
            priority if priority is not None
            else Settings.RETAILER_PRIORITY
        )
        self._today = today
        self._now = now

    def _rank(self, retailer: str) -> tuple[int, str]:
        """Sort key placing prioritised retailers first."""
        if retailer in self.priority:
            return self.priority.index(retailer), ""
        return len(self.priority), retailer

    def compare(
        self, prices: Sequence[ResolvedPrice],
    ) -> ComparisonResult:
        """Compare resolved prices and update the history store.

        Raises ``ValueError`` for fewer than two prices.
        """
        if len(prices) < 2:
            msg = f"need at least two prices to compare, got {len(prices)}"
            raise ValueError(msg)

        ordered = sorted(prices, key=lambda p: self._rank(p.retailer))
        cheapest = min(
            ordered,
            key=lambda p: (p.final_price, self._rank(p.retailer)),
        )
        finals = [p.final_price for p in ordered]
        difference = round(max(finals) - min(finals), 2)

        entry = HistoryEntry(
            date=self._today(),
            prices=MappingProxyType(
                {p.retailer: p.final_price for p in ordered}
            ),
        )
        self.history.append_if_new_day(entry)

        logger.info(
            "Cheapest: %s at %.2f (difference %.2f)",
            cheapest.retailer,
            cheapest.final_price,
            difference,
        )
        return ComparisonResult(
            prices=tuple(ordered),
            cheapest=cheapest.retailer,
            price_difference=difference,
            last_updated=self._now(),
        )
