import os
import sys
import unittest
from datetime import datetime

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from db.models import Product  # noqa: E402
from shop import promotions  # noqa: E402
from shop.catalog import featured_products, filter_products  # noqa: E402
from shop.order_message import contact_link  # noqa: E402
from utils.pure import format_ugx  # noqa: E402

PRODUCTS = [
    Product(id="1", name="Basmati Rice", price=4500, category_id="grains", tags=("rice",)),
    Product(
        id="2",
        name="Sunflower Oil",
        description="Cold pressed",
        price=9000,
        category_id="oils",
        featured=True,
    ),
    Product(id="3", name="Maize Flour", price=3000, category_id="grains", tags=("Posho",)),
]


class CatalogFilterTests(unittest.TestCase):
    def ids(self, products):
        return [p.id for p in products]

    def test_no_filters_returns_everything_in_order(self):
        self.assertEqual(self.ids(filter_products(PRODUCTS)), ["1", "2", "3"])

    def test_category_filter(self):
        self.assertEqual(self.ids(filter_products(PRODUCTS, category_id="grains")), ["1", "3"])

    def test_query_matches_name_description_and_tags(self):
        self.assertEqual(self.ids(filter_products(PRODUCTS, query="RICE")), ["1"])
        self.assertEqual(self.ids(filter_products(PRODUCTS, query="pressed")), ["2"])
        self.assertEqual(self.ids(filter_products(PRODUCTS, query="posho")), ["3"])
        self.assertEqual(self.ids(filter_products(PRODUCTS, query="  ")), ["1", "2", "3"])

    def test_query_and_category_combine(self):
        self.assertEqual(filter_products(PRODUCTS, category_id="oils", query="rice"), [])

    def test_featured(self):
        self.assertEqual(self.ids(featured_products(PRODUCTS)), ["2"])

    def test_format_ugx(self):
        self.assertEqual(format_ugx(4500), "UGX 4,500")
        self.assertEqual(format_ugx(0), "UGX 0")
        self.assertEqual(format_ugx(1250000), "UGX 1,250,000")

    def test_contact_link(self):
        self.assertEqual(contact_link("+256741068782"), "https://wa.me/256741068782")
        self.assertEqual(
            contact_link("256741068782", "Hi there"),
            "https://wa.me/256741068782?text=Hi%20there",
        )


class PromotionTests(unittest.TestCase):
    now = datetime(2026, 10, 19, 12, 0)

    def by_id(self, promo_id):
        return next(p for p in promotions.PROMOTIONS if p.id == promo_id)

    def test_filter_by_applicability(self):
        self.assertEqual(len(promotions.filter_promotions(promotions.PROMOTIONS)), 3)
        only_products = promotions.filter_promotions(promotions.PROMOTIONS, "product")
        self.assertEqual([p.id for p in only_products], ["promo-2"])

    def test_status_labels(self):
        self.assertEqual(promotions.status_label(self.by_id("promo-1"), self.now), "74 days left")
        self.assertEqual(promotions.status_label(self.by_id("promo-2"), self.now), "43 days left")
        self.assertEqual(promotions.status_label(self.by_id("promo-3"), self.now), "Coming soon")
        self.assertEqual(
            promotions.status_label(self.by_id("promo-2"), datetime(2026, 12, 1)), "Expired"
        )

    def test_active_window_is_inclusive(self):
        promo = self.by_id("promo-1")
        self.assertTrue(promotions.is_active(promo, promo.start_date))
        self.assertTrue(promotions.is_active(promo, promo.end_date))
        self.assertFalse(promotions.is_active(promo, datetime(2025, 12, 31, 23, 59)))


if __name__ == "__main__":
    unittest.main()
