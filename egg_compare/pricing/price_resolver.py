# egg_compare/pricing/price_resolver.py

"""Resolve a raw retailer quote into one authoritative final price."""

import logging
from collections.abc import Sequence
from datetime import datetime

from egg_compare.config.settings import Settings
from egg_compare.errors import NoProductFound
from egg_compare.models.offer import Offer
from egg_compare.models.quote import InventoryStatus, RetailerQuote
from egg_compare.models.resolved_price import ResolvedPrice

logger = logging.getLogger("egg_compare.pricing")


def select_base_price(quote: RetailerQuote) -> float:
    """Pick the base price: the regular/MSRP price, else the sale price.

    Raises ``NoProductFound`` when the quote carries no price at all.
    """
    if quote.regular_price is not None and quote.regular_price > 0:
        return quote.regular_price
    if quote.sale_price is not None and quote.sale_price > 0:
        return quote.sale_price
    raise NoProductFound(quote.retailer, "quote has no usable price")


def apply_offers(start: float, offers: Sequence[Offer]) -> float:
    """Stack monetary offers onto *start* in the order given.

    Fixed amounts are subtracted from the running price; percentages
    reduce whatever remains at the point they are met, so they compound
    on earlier discounts rather than on the original price. The running
    price never drops below zero.
    """
    price = start
    for offer in offers:
        if offer.discount_amount is not None:
            price -= offer.discount_amount
        elif offer.discount_percent is not None:
            price *= 1 - offer.discount_percent / 100
        price = max(price, 0.0)
    return price


class PriceResolver:
    """Turn one quote plus its normalised offers into a ``ResolvedPrice``."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()

    def _availability(
        self,
        quote: RetailerQuote,
        inventory: InventoryStatus | None,
    ) -> tuple[bool, str, str | None, bool]:
        """Return ``(in_stock, pickup_eta, store_id, degraded)``."""
        if inventory is not None:
            return (
                inventory.in_stock,
                inventory.pickup_eta or self.settings.GENERIC_PICKUP_ETA,
                inventory.store_id or quote.store_id,
                False,
            )
        if quote.pickup_eta:
            return quote.in_stock, quote.pickup_eta, quote.store_id, False
        return (
            quote.in_stock,
            self.settings.GENERIC_PICKUP_ETA,
            quote.store_id,
            True,
        )

    def resolve(
        self,
        quote: RetailerQuote,
        offers: Sequence[Offer],
        inventory: InventoryStatus | None = None,
        offers_degraded: bool = False,
    ) -> ResolvedPrice:
        """Resolve *quote* into a ``ResolvedPrice``.

        Steps: base price selection, promo seeding, offer stacking in
        received order, clamp at zero, then stock/pickup fallback.
        """
        base_price = round(select_base_price(quote), 2)

        promo_price: float | None = None
        running = base_price
        if quote.sale_price is not None:
            # Compare at cent precision so a promo always saves something
            sale = round(quote.sale_price, 2)
            if 0 < sale < base_price:
                promo_price = sale
                running = promo_price

        final_price = round(apply_offers(running, offers), 2)

        in_stock, pickup_eta, store_id, inventory_degraded = (
            self._availability(quote, inventory)
        )
        degraded: set[str] = set()
        if inventory_degraded:
            degraded.add("inventory")
        if offers_degraded:
            degraded.add("offers")

        logger.debug(
            "[%s] base=%.2f promo=%s final=%.2f offers=%d degraded=%s",
            quote.retailer,
            base_price,
            f"{promo_price:.2f}" if promo_price is not None else "-",
            final_price,
            sum(1 for o in offers if o.is_monetary),
            sorted(degraded),
        )

        return ResolvedPrice(
            retailer=quote.retailer,
            store=quote.store,
            base_price=base_price,
            promo_price=promo_price,
            final_price=final_price,
            product_name=quote.product_name,
            location=quote.location,
            in_stock=in_stock,
            pickup_eta=pickup_eta,
            offers=tuple(offers),
            sku=quote.sku,
            upc=quote.upc,
            store_id=store_id,
            product_url=quote.product_url,
            last_updated=datetime.now(),
            degraded=frozenset(degraded),
        )
