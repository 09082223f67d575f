# egg_compare/sources/walmart_source.py

"""Walmart price source using the Walmart Affiliates product search API."""

from typing import Any

from egg_compare.errors import NoProductFound
from egg_compare.models.quote import RawOffer, RetailerQuote
from egg_compare.sources.base_source import HttpPriceSource


class WalmartSource(HttpPriceSource):
    """Walmart 1P retail pricing via the Affiliates Product Lookup API.

    The API has no zipcode filter, so the location is only recorded on
    the quote. It exposes no inventory or coupon endpoints either: stock
    comes from the ``stock`` / ``availableOnline`` fields and the
    clearance / special-buy flags become descriptive offers.
    """

    SEARCH_API = (
        "https://developer.api.walmart.com/api-proxy/service/"
        "affil/product/v2/search"
    )
    HOMEPAGE_URL = "https://www.walmart.com/"
    NUM_ITEMS = 5

    def __init__(self) -> None:
        super().__init__("walmart", "Walmart")

    def _get_homepage(self) -> str:
        return self.HOMEPAGE_URL

    def _build_params(self, product_query: str) -> dict[str, str]:
        params = {
            "query": product_query,
            "apiKey": self.settings.WALMART_API_KEY,
            "format": "json",
            "numItems": str(self.NUM_ITEMS),
        }
        if self.settings.WALMART_AFFILIATE_ID:
            params["publisherId"] = self.settings.WALMART_AFFILIATE_ID
        return params

    @staticmethod
    def _flag_offers(item: dict[str, Any]) -> tuple[RawOffer, ...]:
        """Turn clearance / special-buy flags into marker offers."""
        item_id = str(item.get("itemId", ""))
        offers: list[RawOffer] = []
        if item.get("clearance"):
            offers.append(
                RawOffer(
                    offer_id=f"WMT-CLR-{item_id}",
                    description="Clearance Item",
                )
            )
        if item.get("specialBuy"):
            offers.append(
                RawOffer(
                    offer_id=f"WMT-SPECIAL-{item_id}",
                    description="Special Buy",
                )
            )
        return tuple(offers)

    def _parse_item(
        self, item: dict[str, Any], location: str,
    ) -> RetailerQuote:
        """Parse one search hit into a ``RetailerQuote``."""
        item_id = str(item.get("itemId", "") or "") or None
        upc = str(item.get("upc", "") or "") or None
        in_stock = (
            item.get("stock") == "Available"
            and bool(item.get("availableOnline"))
        )
        return RetailerQuote(
            retailer=self.retailer,
            store=self.label,
            product_name=str(item.get("name", "N/A")),
            location=location,
            regular_price=self.positive_or_none(item.get("msrp")),
            sale_price=self.positive_or_none(item.get("salePrice")),
            raw_offers=self._flag_offers(item),
            in_stock=in_stock,
            sku=item_id,
            upc=upc,
            product_url=str(item.get("productUrl", "") or "") or None,
        )

    def fetch_quote(
        self, product_query: str, location: str,
    ) -> RetailerQuote:
        """Search Walmart and quote the first (best) match."""
        data = self._get_json(
            self.SEARCH_API, params=self._build_params(product_query),
        )
        items: list[dict[str, Any]] = data.get("items") or []
        if not items:
            raise NoProductFound(self.retailer, "no products found")

        quote = self._parse_item(items[0], location)
        self.logger.info(
            "[walmart] Quoted %s (sale=%s, msrp=%s)",
            quote.product_name,
            quote.sale_price,
            quote.regular_price,
        )
        return quote
