# tests/test_price_resolver.py

"""Tests for the price resolver (base, promo, offer stacking, fallback)."""

import unittest

from egg_compare.errors import NoProductFound
from egg_compare.models.offer import Offer
from egg_compare.models.quote import InventoryStatus, RetailerQuote
from egg_compare.pricing.price_resolver import (
    PriceResolver,
    apply_offers,
    select_base_price,
)


def _quote(
    regular: float | None = 4.00,
    sale: float | None = None,
    in_stock: bool = True,
    pickup_eta: str | None = None,
) -> RetailerQuote:
    """Build a minimal quote for resolver tests."""
    return RetailerQuote(
        retailer="walmart",
        store="Walmart",
        product_name="Large White Eggs, 12 ct",
        location="10001",
        regular_price=regular,
        sale_price=sale,
        in_stock=in_stock,
        pickup_eta=pickup_eta,
        sku="123",
    )


def _fixed(amount: float, offer_id: str = "F") -> Offer:
    return Offer(offer_id, f"${amount} off", discount_amount=amount)


def _percent(pct: float, offer_id: str = "P") -> Offer:
    return Offer(offer_id, f"{pct}% off", discount_percent=pct)


class TestSelectBasePrice(unittest.TestCase):
    """Tests for base price selection."""

    def test_regular_price_used(self) -> None:
        """The regular/MSRP price is the base when present."""
        self.assertEqual(
            select_base_price(_quote(regular=4.29, sale=3.99)), 4.29
        )

    def test_zero_regular_falls_back_to_sale(self) -> None:
        """A zero MSRP falls back to the observed sale price."""
        self.assertEqual(
            select_base_price(_quote(regular=0.0, sale=3.99)), 3.99
        )

    def test_missing_regular_falls_back_to_sale(self) -> None:
        """A missing MSRP falls back to the observed sale price."""
        self.assertEqual(
            select_base_price(_quote(regular=None, sale=3.49)), 3.49
        )

    def test_no_price_signal_raises(self) -> None:
        """A quote without any price is reported as no product."""
        with self.assertRaises(NoProductFound):
            select_base_price(_quote(regular=None, sale=None))


class TestApplyOffers(unittest.TestCase):
    """Tests for sequential offer stacking."""

    def test_fixed_then_percent(self) -> None:
        """Percent compounds on the price left after the fixed amount."""
        self.assertAlmostEqual(
            apply_offers(4.00, [_fixed(1.00), _percent(50)]), 1.50
        )

    def test_percent_then_fixed(self) -> None:
        """Reversed order gives a different result."""
        self.assertAlmostEqual(
            apply_offers(4.00, [_percent(50), _fixed(1.00)]), 1.00
        )

    def test_order_changes_result(self) -> None:
        """Stacking order matters for non-trivial discounts."""
        forward = apply_offers(5.00, [_fixed(0.50), _percent(10)])
        reverse = apply_offers(5.00, [_percent(10), _fixed(0.50)])
        self.assertNotAlmostEqual(forward, reverse)

    def test_markers_ignored(self) -> None:
        """Non-monetary markers do not change the price."""
        marker = Offer("M", "Clearance Item")
        self.assertEqual(apply_offers(3.00, [marker]), 3.00)

    def test_clamps_at_zero(self) -> None:
        """The running price never goes negative."""
        self.assertEqual(apply_offers(2.00, [_fixed(5.00)]), 0.0)


class TestPriceResolver(unittest.TestCase):
    """Tests for PriceResolver.resolve."""

    def setUp(self) -> None:
        """Create a resolver."""
        self.resolver = PriceResolver()

    def test_no_promo_no_offers_final_equals_base(self) -> None:
        """Without promo or offers, the final price is the base."""
        price = self.resolver.resolve(_quote(regular=4.29), [])
        self.assertEqual(price.final_price, 4.29)
        self.assertEqual(price.base_price, 4.29)
        self.assertIsNone(price.promo_price)

    def test_fixed_offer_example(self) -> None:
        """Base 4.29 with a 0.50 offer resolves to 3.79."""
        price = self.resolver.resolve(
            _quote(regular=4.29), [_fixed(0.50)]
        )
        self.assertAlmostEqual(price.final_price, 3.79)

    def test_promo_seeds_final(self) -> None:
        """A lower sale price becomes the promo and the final price."""
        price = self.resolver.resolve(_quote(regular=3.98, sale=3.48), [])
        self.assertEqual(price.promo_price, 3.48)
        self.assertAlmostEqual(price.final_price, 3.48)

    def test_sale_not_below_base_is_not_promo(self) -> None:
        """A sale price equal to the base is not a promotion."""
        price = self.resolver.resolve(_quote(regular=3.98, sale=3.98), [])
        self.assertIsNone(price.promo_price)
        self.assertEqual(price.final_price, 3.98)

    def test_sale_rounding_to_base_is_not_promo(self) -> None:
        """A sale price that rounds to the base is not a promotion."""
        price = self.resolver.resolve(_quote(regular=3.48, sale=3.4799), [])
        self.assertIsNone(price.promo_price)
        self.assertEqual(price.final_price, 3.48)

    def test_offers_stack_on_promo(self) -> None:
        """Offers apply to the promo price, in order."""
        price = self.resolver.resolve(
            _quote(regular=5.11, sale=4.89),
            [_fixed(0.50), _percent(10)],
        )
        self.assertAlmostEqual(price.final_price, 3.95)

    def test_clamp_example(self) -> None:
        """Base 2.00 with a 5.00 offer clamps to 0.00."""
        price = self.resolver.resolve(
            _quote(regular=2.00), [_fixed(5.00)]
        )
        self.assertEqual(price.final_price, 0.0)

    def test_final_within_bounds(self) -> None:
        """0 <= final <= base across a spread of inputs."""
        cases = [
            (4.00, None, [_fixed(0.25)]),
            (4.00, 3.50, [_percent(100)]),
            (1.00, 0.90, [_fixed(0.10), _percent(5), _fixed(3.00)]),
            (3.00, 5.00, []),
        ]
        for regular, sale, offers in cases:
            with self.subTest(regular=regular, sale=sale):
                price = self.resolver.resolve(
                    _quote(regular=regular, sale=sale), offers
                )
                self.assertGreaterEqual(price.final_price, 0.0)
                self.assertLessEqual(price.final_price, price.base_price)

    def test_offers_recorded_in_order(self) -> None:
        """All offers, markers included, are kept in received order."""
        offers = [_fixed(0.25, "A"), Offer("B", "Special Buy")]
        price = self.resolver.resolve(_quote(), offers)
        self.assertEqual([o.offer_id for o in price.offers], ["A", "B"])
        self.assertEqual(
            [o.offer_id for o in price.applied_offers], ["A"]
        )

    def test_inventory_used_when_present(self) -> None:
        """Live inventory sets stock, pickup and store id."""
        inventory = InventoryStatus(
            in_stock=False, pickup_eta="Out of stock", store_id="4242"
        )
        price = self.resolver.resolve(
            _quote(in_stock=True), [], inventory=inventory
        )
        self.assertFalse(price.in_stock)
        self.assertEqual(price.pickup_eta, "Out of stock")
        self.assertEqual(price.store_id, "4242")
        self.assertEqual(price.degraded, frozenset())

    def test_missing_inventory_falls_back(self) -> None:
        """Without inventory, stock comes from the quote with generic pickup."""
        price = self.resolver.resolve(_quote(in_stock=True), [])
        self.assertTrue(price.in_stock)
        self.assertEqual(price.pickup_eta, "Check store availability")
        self.assertIn("inventory", price.degraded)

    def test_quote_pickup_used_without_inventory(self) -> None:
        """A pickup ETA supplied on the quote is not a degradation."""
        price = self.resolver.resolve(
            _quote(pickup_eta="Ready in 1 hour"), []
        )
        self.assertEqual(price.pickup_eta, "Ready in 1 hour")
        self.assertNotIn("inventory", price.degraded)

    def test_offers_degraded_flag(self) -> None:
        """A failed offers fetch is recorded as degraded."""
        price = self.resolver.resolve(_quote(), [], offers_degraded=True)
        self.assertIn("offers", price.degraded)

    def test_metadata_copied(self) -> None:
        """Product metadata passes through from the quote."""
        price = self.resolver.resolve(_quote(), [])
        self.assertEqual(price.retailer, "walmart")
        self.assertEqual(price.store, "Walmart")
        self.assertEqual(price.sku, "123")
        self.assertEqual(price.location, "10001")


if __name__ == "__main__":
    unittest.main()
