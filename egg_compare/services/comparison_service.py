# egg_compare/services/comparison_service.py

"""Orchestrates concurrent price resolution and cross-retailer comparison."""

import asyncio
import logging

from egg_compare.config.settings import Settings
from egg_compare.errors import ComparisonError
from egg_compare.models.comparison import ComparisonResult, HistoryEntry
from egg_compare.models.resolved_price import ResolvedPrice
from egg_compare.pricing.comparison import ComparisonAggregator
from egg_compare.pricing.offer_normalizer import OfferNormalizer
from egg_compare.pricing.price_resolver import PriceResolver
from egg_compare.sources.base_source import PriceSource
from egg_compare.sources.registry import build_sources
from egg_compare.storage.history_store import PriceHistoryStore

logger = logging.getLogger("egg_compare.service")


class ComparisonService:
    """Query surface: current comparison and trailing price history.

    One instance owns one ``PriceHistoryStore``; keep the instance for
    the life of the process so history accumulates across requests.
    """

    def __init__(
        self,
        sources: list[PriceSource] | None = None,
        history: PriceHistoryStore | None = None,
        aggregator: ComparisonAggregator | None = None,
    ) -> None:
        self.settings = Settings()
        self.sources = sources if sources is not None else build_sources()
        self.resolver = PriceResolver(self.settings)
        self.aggregator = aggregator or ComparisonAggregator(
            history if history is not None else PriceHistoryStore()
        )
        self.history = self.aggregator.history

    # ── Private helpers ──────────────────────────────────

    def _resolve_one(
        self, source: PriceSource, location: str,
    ) -> ResolvedPrice:
        """Fetch, normalise and resolve one retailer (blocking)."""
        bundle = source.collect(self.settings.PRODUCT_QUERY, location)
        offers = OfferNormalizer.normalize_all(bundle.raw_offers)
        return self.resolver.resolve(
            bundle.quote,
            offers,
            inventory=bundle.inventory,
            offers_degraded=bundle.offers_degraded,
        )

    async def _resolve_all(self, location: str) -> list[ResolvedPrice]:
        """Resolve every source concurrently and join the results.

        Raises ``ComparisonError`` naming the first failing retailer in
        source order; nothing is returned for a partial set.
        """
        batches = await asyncio.gather(
            *(
                asyncio.to_thread(self._resolve_one, source, location)
                for source in self.sources
            ),
            return_exceptions=True,
        )

        prices: list[ResolvedPrice] = []
        failure: ComparisonError | None = None
        for source, batch in zip(self.sources, batches):
            if isinstance(batch, ResolvedPrice):
                prices.append(batch)
                continue
            if not isinstance(batch, Exception):
                raise batch
            logger.error(
                "Price resolution failed for %s at %s: %s",
                source.retailer,
                location,
                batch,
                exc_info=batch,
            )
            if failure is None:
                failure = ComparisonError(source.retailer, batch)

        if failure is not None:
            raise failure from failure.cause
        return prices

    # ── Query surface ────────────────────────────────────

    async def get_comparison(
        self, location: str | None = None,
    ) -> ComparisonResult:
        """Compare current prices for *location* (default zipcode).

        History is only updated after every retailer resolved, so a
        failed or cancelled request leaves it untouched.
        """
        zipcode = location or self.settings.DEFAULT_ZIPCODE
        logger.info(
            "Comparing %d sources for %s", len(self.sources), zipcode
        )
        prices = await self._resolve_all(zipcode)
        return self.aggregator.compare(prices)

    def get_history(self, days: int | None = None) -> list[HistoryEntry]:
        """Return the trailing *days* history entries, oldest first."""
        return self.history.last(days)
