# egg_compare/sources/mock_source.py

"""Deterministic mock price sources used when no credentials are set.

Every number is derived from a checksum of the location string, so the
same zipcode always yields the same quote while different zipcodes
spread plausibly across the retailer's usual price range.
"""

from datetime import datetime, timedelta

from egg_compare.models.quote import InventoryStatus, RawOffer, RetailerQuote
from egg_compare.sources.base_source import PriceSource


def location_checksum(location: str) -> int:
    """Sum of the character code points of *location*."""
    return sum(ord(c) for c in location)


class MockPriceSource(PriceSource):
    """Base for checksum-driven mock sources."""

    mode = "mock"


class MockWalmartSource(MockPriceSource):
    """Mock Walmart: base $3.48-$4.97, rollbacks and a digital coupon."""

    PRODUCT_NAME = "Great Value Large White Eggs, 12 Count"
    PRODUCT_URL = (
        "https://www.walmart.com/ip/"
        "Great-Value-Large-White-Eggs-12-Count/10450114"
    )
    SKU = "10450114"
    UPC = "078742370842"

    def __init__(self) -> None:
        super().__init__("walmart", "Walmart")

    def fetch_quote(
        self, product_query: str, location: str,
    ) -> RetailerQuote:
        checksum = location_checksum(location)
        base = round(3.48 + (checksum % 150) / 100, 2)

        sale: float | None = None
        offers: list[RawOffer] = []
        # Rollback on 6 of 10 locations; already reflected in the sale
        # price, so the offer is a display marker only
        if checksum % 10 < 6:
            discount = 0.30 + (checksum % 70) / 100
            sale = round(base - discount, 2)
            offers.append(
                RawOffer(
                    offer_id="WMT-PROMO-001",
                    description=f"Rollback: Save ${discount:.2f} on eggs",
                )
            )
        if checksum % 10 < 3:
            offers.append(
                RawOffer(
                    offer_id="WMT-DIGITAL-002",
                    description="Digital Coupon: Extra $0.25 off",
                    discount_amount=0.25,
                )
            )

        return RetailerQuote(
            retailer=self.retailer,
            store=self.label,
            product_name=self.PRODUCT_NAME,
            location=location,
            regular_price=base,
            sale_price=sale,
            raw_offers=tuple(offers),
            in_stock=checksum % 10 != 0,
            sku=self.SKU,
            upc=self.UPC,
            product_url=self.PRODUCT_URL,
        )

    def fetch_inventory(
        self, sku: str, location: str,
    ) -> InventoryStatus | None:
        in_stock = location_checksum(location) % 10 != 0
        return InventoryStatus(
            in_stock=in_stock,
            pickup_eta="Available today" if in_stock else "Out of stock",
        )


class MockWalgreensSource(MockPriceSource):
    """Mock Walgreens: base $3.99-$5.28, sales, coupons and rewards."""

    PRODUCT_NAME = "Walgreens Grade A Large White Eggs, 12 ct"
    PRODUCT_URL = (
        "https://www.walgreens.com/store/c/"
        "walgreens-grade-a-large-white-eggs/ID=prod6378461"
    )
    SKU = "prod6378461"
    UPC = "041220993758"

    def __init__(self) -> None:
        super().__init__("walgreens", "Walgreens")

    def fetch_quote(
        self, product_query: str, location: str,
    ) -> RetailerQuote:
        checksum = location_checksum(location)
        base = round(3.99 + (checksum % 130) / 100, 2)

        sale: float | None = None
        if checksum % 10 < 7:
            discount = 0.20 + (checksum % 60) / 100
            sale = round(base - discount, 2)

        offers: list[RawOffer] = []
        if checksum % 10 < 5:
            expires = datetime.now() + timedelta(days=7)
            offers.append(
                RawOffer(
                    offer_id="WAG-DIGITAL-001",
                    description="Digital Coupon: Save $0.50",
                    discount_amount=0.50,
                    expires_at=expires.isoformat(timespec="seconds"),
                    clippable=True,
                )
            )
        if checksum % 10 < 2:
            offers.append(
                RawOffer(
                    offer_id="WAG-REWARDS-002",
                    description="myWalgreens: 10% off",
                    discount_percent=10.0,
                )
            )

        return RetailerQuote(
            retailer=self.retailer,
            store=self.label,
            product_name=self.PRODUCT_NAME,
            location=location,
            regular_price=base,
            sale_price=sale,
            raw_offers=tuple(offers),
            in_stock=checksum % 20 < 17,
            sku=self.SKU,
            upc=self.UPC,
            product_url=self.PRODUCT_URL,
        )

    def fetch_inventory(
        self, sku: str, location: str,
    ) -> InventoryStatus | None:
        checksum = location_checksum(location)
        in_stock = checksum % 20 < 17
        if not in_stock:
            pickup_eta = "Out of stock at nearby stores"
        elif checksum % 5 == 0:
            pickup_eta = "Ready in 2-3 hours"
        else:
            pickup_eta = "Ready in 1 hour"
        return InventoryStatus(
            in_stock=in_stock,
            pickup_eta=pickup_eta,
            store_id=str(10000 + checksum % 5000),
        )
