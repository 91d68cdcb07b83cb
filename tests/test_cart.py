import os
import random
import sys
import unittest

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from db.models import Product  # noqa: E402
from shop.cart import Cart  # noqa: E402


def make_product(pid: str, price: int, **kwargs) -> Product:
    return Product(id=pid, name=f"Product {pid}", price=price, **kwargs)


class CartTestCase(unittest.TestCase):
    def setUp(self):
        self.a = make_product("A", 1000)
        self.b = make_product("B", 2500)
        self.cart = Cart()

    def test_adding_same_product_merges_lines(self):
        self.cart.add_item(self.a, 2)
        self.cart.add_item(self.a, 3)

        self.assertEqual(len(self.cart), 1)
        self.assertEqual(self.cart.get_line("A").quantity, 5)
        self.assertEqual(self.cart.total_price, 5000)

    def test_totals_for_two_lines(self):
        self.cart.add_item(self.a, 2)
        self.cart.add_item(self.b, 1)

        self.assertEqual(self.cart.total_items, 2)
        self.assertEqual(self.cart.total_quantity, 3)
        self.assertEqual(self.cart.total_price, 4500)

    def test_lines_keep_insertion_order(self):
        self.cart.add_item(self.b)
        self.cart.add_item(self.a)
        self.cart.add_item(self.b)
        self.assertEqual([line.product.id for line in self.cart.items], ["B", "A"])

    def test_add_with_non_positive_quantity_is_ignored(self):
        self.cart.add_item(self.a, 0)
        self.cart.add_item(self.a, -3)
        self.assertTrue(self.cart.is_empty)

        self.cart.add_item(self.a, 2)
        self.cart.add_item(self.a, 0)
        self.assertEqual(self.cart.get_line("A").quantity, 2)

    def test_update_quantity_sets_value(self):
        self.cart.add_item(self.a, 2)
        self.cart.update_quantity("A", 7)
        self.assertEqual(self.cart.get_line("A").quantity, 7)
        self.assertEqual(self.cart.total_price, 7000)

    def test_update_quantity_below_one_removes_line(self):
        for qty in (0, -1):
            with self.subTest(qty=qty):
                self.cart.add_item(self.a, 2)
                self.cart.add_item(self.b, 1)
                self.cart.update_quantity("A", qty)
                self.assertNotIn("A", self.cart)
                self.assertIn("B", self.cart)
                self.cart.clear_cart()

    def test_update_and_remove_unknown_ids_are_noops(self):
        self.cart.add_item(self.a, 1)
        self.cart.update_quantity("missing", 4)
        self.cart.remove_item("missing")
        self.assertEqual(self.cart.total_quantity, 1)

    def test_clear_cart_zeroes_totals(self):
        self.cart.add_item(self.a, 2)
        self.cart.add_item(self.b, 4)
        self.cart.clear_cart()

        self.assertEqual(self.cart.items, ())
        self.assertEqual(self.cart.total_price, 0)
        self.assertEqual(self.cart.total_items, 0)
        self.assertEqual(self.cart.total_quantity, 0)

    def test_change_listener_called_on_mutation_only(self):
        calls = []
        cart = Cart(on_change=calls.append)

        cart.add_item(self.a, 1)
        cart.update_quantity("A", 3)
        cart.update_quantity("missing", 3)
        cart.add_item(self.b, 0)
        cart.remove_item("A")
        cart.clear_cart()

        self.assertEqual(len(calls), 4)
        self.assertIs(calls[0], cart)

    def test_random_operations_keep_invariants(self):
        rng = random.Random(1234)
        products = [make_product(str(i), rng.randint(0, 50000)) for i in range(6)]

        for _ in range(500):
            op = rng.choice(["add", "update", "remove"])
            product = rng.choice(products)
            qty = rng.randint(-2, 5)
            if op == "add":
                self.cart.add_item(product, qty)
            elif op == "update":
                self.cart.update_quantity(product.id, qty)
            else:
                self.cart.remove_item(product.id)

            ids = [line.product.id for line in self.cart.items]
            self.assertEqual(len(ids), len(set(ids)))
            self.assertTrue(all(line.quantity >= 1 for line in self.cart.items))
            self.assertEqual(
                self.cart.total_price,
                sum(line.product.price * line.quantity for line in self.cart.items),
            )
            self.assertEqual(self.cart.total_items, len(ids))


if __name__ == "__main__":
    unittest.main()
