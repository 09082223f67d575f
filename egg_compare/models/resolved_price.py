# egg_compare/models/resolved_price.py

"""Resolved, comparison-ready price for one retailer."""

from dataclasses import dataclass, field
from datetime import datetime

from egg_compare.models.offer import Offer


@dataclass(frozen=True)
class ResolvedPrice:
    """The authoritative price of one retailer after promo and offers."""

    retailer: str
    store: str
    base_price: float
    final_price: float
    product_name: str
    location: str
    in_stock: bool
    pickup_eta: str
    last_updated: datetime
    promo_price: float | None = None
    offers: tuple[Offer, ...] = ()
    sku: str | None = None
    upc: str | None = None
    store_id: str | None = None
    product_url: str | None = None
    # Names of fields filled from fallbacks ("inventory", "offers")
    degraded: frozenset[str] = field(default_factory=frozenset)

    @property
    def applied_offers(self) -> tuple[Offer, ...]:
        """Offers that actually reduced the price."""
        return tuple(o for o in self.offers if o.is_monetary)
