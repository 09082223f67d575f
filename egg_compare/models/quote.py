# egg_compare/models/quote.py

"""Raw, provider-shaped data handed over by a price source."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class RawOffer:
    """A discount as the provider reports it, before normalisation.

    Either discount field may be missing, both may be set, or neither
    (a promotional flag such as clearance). ``expires_at`` is kept as the
    provider's text; the normaliser parses it.
    """

    offer_id: str
    description: str
    discount_amount: float | None = None
    discount_percent: float | None = None
    expires_at: str | None = None
    clippable: bool = False


@dataclass(frozen=True)
class InventoryStatus:
    """Store-level stock and pickup information for one SKU."""

    in_stock: bool
    pickup_eta: str
    store_id: str | None = None
    quantity: int | None = None


@dataclass(frozen=True)
class RetailerQuote:
    """One retailer's unnormalised price report for one location."""

    retailer: str
    store: str
    product_name: str
    location: str
    regular_price: float | None = None
    sale_price: float | None = None
    raw_offers: tuple[RawOffer, ...] = ()
    in_stock: bool = False
    pickup_eta: str | None = None
    sku: str | None = None
    upc: str | None = None
    store_id: str | None = None
    product_url: str | None = None
    captured_at: datetime = field(default_factory=datetime.now)
