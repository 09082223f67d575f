# egg_compare/sources/walgreens_source.py

"""Walgreens price source combining a third-party price feed with
Walgreens' own store inventory and digital offers APIs."""

from typing import Any

from egg_compare.errors import NoProductFound, UpstreamUnavailable
from egg_compare.models.quote import InventoryStatus, RawOffer, RetailerQuote
from egg_compare.sources.base_source import HttpPriceSource


class WalgreensSource(HttpPriceSource):
    """Walgreens pricing, stock and clip-able coupons.

    Walgreens does not publish a retail pricing API, so the price comes
    from SearchAPI's Walgreens engine. Inventory and digital offers come
    from the Walgreens developer APIs and need ``WALGREENS_API_KEY``.
    """

    PRICE_API = "https://www.searchapi.io/api/v1/search"
    INVENTORY_API = "https://services.walgreens.com/api/stores/inventory"
    OFFERS_API = "https://services.walgreens.com/api/offers"
    HOMEPAGE_URL = "https://www.walgreens.com/"

    def __init__(self) -> None:
        super().__init__("walgreens", "Walgreens")

    def _get_homepage(self) -> str:
        return self.HOMEPAGE_URL

    def _api_headers(self) -> dict[str, str]:
        return {"apikey": self.settings.WALGREENS_API_KEY}

    # ── Price (third-party) ──────────────────────────────

    def fetch_quote(
        self, product_query: str, location: str,
    ) -> RetailerQuote:
        """Quote the first product returned by the third-party feed."""
        if not self.settings.SEARCHAPI_KEY:
            raise UpstreamUnavailable(
                self.retailer, "third-party API key not configured"
            )
        data = self._get_json(
            self.PRICE_API,
            params={
                "engine": "walgreens",
                "q": product_query,
                "api_key": self.settings.SEARCHAPI_KEY,
                "location": location,
            },
        )
        products: list[dict[str, Any]] = data.get("products") or []
        if not products:
            raise NoProductFound(self.retailer, "no products found")

        product = products[0]
        quote = RetailerQuote(
            retailer=self.retailer,
            store=self.label,
            product_name=str(product.get("product_name", "N/A")),
            location=location,
            regular_price=self.positive_or_none(
                product.get("regular_price")
            ),
            sale_price=self.positive_or_none(product.get("price")),
            in_stock=bool(product.get("available")),
            sku=str(product.get("sku", "") or "") or None,
            upc=str(product.get("upc", "") or "") or None,
            product_url=str(product.get("product_url", "") or "") or None,
        )
        self.logger.info(
            "[walgreens] Quoted %s (price=%s, regular=%s)",
            quote.product_name,
            quote.sale_price,
            quote.regular_price,
        )
        return quote

    # ── Inventory ────────────────────────────────────────

    def fetch_inventory(
        self, sku: str, location: str,
    ) -> InventoryStatus | None:
        """Look up store stock near *location*.

        Returns ``None`` without an API key; raises on API failures.
        """
        if not self.settings.WALGREENS_API_KEY:
            return None
        data = self._get_json(
            self.INVENTORY_API,
            params={"sku": sku, "zip": location},
            headers=self._api_headers(),
        )
        quantity = data.get("quantity")
        return InventoryStatus(
            in_stock=bool(data.get("inStock")),
            pickup_eta=str(data.get("pickupEta", "") or ""),
            store_id=str(data.get("storeId", "") or "") or None,
            quantity=int(quantity) if quantity is not None else None,
        )

    # ── Digital offers ───────────────────────────────────

    @staticmethod
    def _offer_value(value: Any) -> float | None:
        """Zero or missing means the provider did not set the field."""
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        return number if number != 0 else None

    def fetch_offers(self, sku: str) -> list[RawOffer]:
        """Fetch clip-able digital coupons for *sku*.

        A non-200 answer means no offers; transport errors raise.
        """
        if not self.settings.WALGREENS_API_KEY:
            return []
        resp = self._fetch_get(
            self.OFFERS_API,
            params={"sku": sku},
            headers=self._api_headers(),
        )
        if resp is None:
            raise UpstreamUnavailable(
                self.retailer, "digital offers request failed"
            )
        if resp.status_code != 200:
            return []

        data = resp.json()
        offers: list[RawOffer] = []
        for entry in data.get("offers") or []:
            offers.append(
                RawOffer(
                    offer_id=str(entry.get("offerId", "")),
                    description=str(entry.get("description", "")),
                    discount_amount=self._offer_value(
                        entry.get("discountAmount")
                    ),
                    discount_percent=self._offer_value(
                        entry.get("discountPercent")
                    ),
                    expires_at=entry.get("expiresAt") or None,
                    clippable=bool(entry.get("clippable")),
                )
            )
        self.logger.info(
            "[walgreens] %d digital offers for sku %s", len(offers), sku
        )
        return offers
