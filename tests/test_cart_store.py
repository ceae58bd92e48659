"""
Tests for the cart store (merge, update, removal, ordering, notification)
"""
import unittest

from core.cart_store import CartStore
from models.cart import LineSelection
from models.errors import InvalidCartItem, InvalidQuantity
from models.modifiers import Addon, Flavor, ModifierSet, Variant, require_id, require_price

ADDON_X = Addon(1, "X", 1000)
ADDON_Y = Addon(2, "Y", 500)
LARGE = Variant(1, "Large", 2000)


def item_a(addons=(), notes=None):
    return LineSelection(
        shop_id=1, item_id=10, shop_name="Kuya's Grill", name="Item A",
        base_price=5000, modifiers=ModifierSet.of(addons=addons), notes=notes
    )


def item_b(addons=(), variant=LARGE, flavor=None):
    return LineSelection(
        shop_id=1, item_id=20, shop_name="Kuya's Grill", name="Item B",
        base_price=2000, modifiers=ModifierSet.of(variant=variant, flavor=flavor, addons=addons)
    )


class TestCartStoreScenarios(unittest.TestCase):
    """Walk-through of the basic cart scenarios"""

    def setUp(self):
        self.store = CartStore()

    def test_add_single_item(self):
        self.store.add_item(item_a())

        self.assertEqual(self.store.total_price, 5000)
        self.assertEqual(self.store.total_items, 1)

    def test_identical_add_merges(self):
        first = self.store.add_item(item_a())
        second = self.store.add_item(item_a())

        self.assertEqual(first, second)
        self.assertEqual(len(self.store), 1)
        self.assertEqual(self.store.get(first).quantity, 2)
        self.assertEqual(self.store.total_price, 10000)

    def test_addon_creates_distinct_line(self):
        plain = self.store.add_item(item_a())
        with_x = self.store.add_item(item_a(addons=[ADDON_X]))

        self.assertNotEqual(plain, with_x)
        self.assertEqual(len(self.store), 2)
        self.assertEqual(self.store.total_price, 5000 + 6000)

    def test_addon_selection_order_collapses(self):
        self.store.add_item(item_b(addons=[ADDON_X, ADDON_Y]))
        self.store.add_item(item_b(addons=[ADDON_Y, ADDON_X]))

        self.assertEqual(len(self.store), 1)
        line = self.store.items[0]
        self.assertEqual(line.quantity, 2)
        self.assertEqual(self.store.total_price, 11000)

    def test_remove_every_line_empties_cart(self):
        self.store.add_item(item_a())
        self.store.add_item(item_a(addons=[ADDON_X]))
        self.store.add_item(item_b())

        for key in self.store.keys():
            self.store.remove_item(key)

        self.assertTrue(self.store.is_empty)
        self.assertEqual(self.store.total_items, 0)
        self.assertEqual(self.store.total_price, 0)


class TestCartStoreBehaviour(unittest.TestCase):
    """Test cases for CartStore operations"""

    def setUp(self):
        self.store = CartStore()

    def test_remove_is_idempotent(self):
        key = self.store.add_item(item_a())
        self.store.add_item(item_b())

        self.assertTrue(self.store.remove_item(key))
        after_first = self.store.items
        self.assertFalse(self.store.remove_item(key))
        self.assertEqual(self.store.items, after_first)

    def test_add_increases_quantity_by_amount(self):
        key = self.store.add_item(item_a(), 2)
        for expected in (5, 8, 11):
            self.store.add_item(item_a(), 3)
            self.assertEqual(self.store.get(key).quantity, expected)
            self.assertEqual(len(self.store), 1)

    def test_update_to_zero_removes_and_readd_starts_fresh(self):
        key = self.store.add_item(item_a(), 3)

        self.assertTrue(self.store.update_quantity(key, 0))
        self.assertNotIn(key, self.store)

        self.store.add_item(item_a())
        self.assertEqual(self.store.get(key).quantity, 1)

    def test_update_negative_quantity_removes(self):
        key = self.store.add_item(item_a())
        self.store.update_quantity(key, -4)
        self.assertTrue(self.store.is_empty)

    def test_update_quantity_replaces(self):
        key = self.store.add_item(item_a(), 2)
        self.assertTrue(self.store.update_quantity(key, 5))
        self.assertEqual(self.store.get(key).quantity, 5)
        self.assertEqual(self.store.total_price, 25000)

    def test_update_unknown_key_is_noop(self):
        self.store.add_item(item_a())
        before = self.store.items

        self.assertFalse(self.store.update_quantity("1-99-novar-noaddons-noflavor", 3))
        self.assertEqual(self.store.items, before)

    def test_invalid_quantities_raise(self):
        with self.assertRaises(InvalidQuantity):
            self.store.add_item(item_a(), 0)
        with self.assertRaises(InvalidQuantity):
            self.store.add_item(item_a(), "2")
        key = self.store.add_item(item_a())
        with self.assertRaises(InvalidQuantity):
            self.store.update_quantity(key, 1.5)
        self.assertEqual(self.store.get(key).quantity, 1)

    def test_add_requires_selection(self):
        with self.assertRaises(InvalidCartItem):
            self.store.add_item({"item_id": 10})

    def test_new_lines_append_and_merges_keep_position(self):
        a = self.store.add_item(item_a())
        b = self.store.add_item(item_b())
        ax = self.store.add_item(item_a(addons=[ADDON_X]))
        self.store.add_item(item_a())

        self.assertEqual(self.store.keys(), [a, b, ax])

        self.store.remove_item(a)
        self.store.add_item(item_a())
        self.assertEqual(self.store.keys(), [b, ax, a])

    def test_notes_do_not_split_lines_and_latest_wins(self):
        key = self.store.add_item(item_a(notes="no onions"))
        self.store.add_item(item_a(notes="extra sauce"))
        self.assertEqual(len(self.store), 1)
        self.assertEqual(self.store.get(key).notes, "extra sauce")

        # Re-adding without notes keeps what is there
        self.store.add_item(item_a())
        self.assertEqual(self.store.get(key).notes, "extra sauce")

        self.assertTrue(self.store.update_notes(key, "  less rice "))
        self.assertEqual(self.store.get(key).notes, "less rice")
        self.assertEqual(self.store.get(key).quantity, 3)

    def test_non_text_notes_raise(self):
        key = self.store.add_item(item_a(notes="no onions"))
        calls = []
        self.store.subscribe(lambda items: calls.append(items))

        with self.assertRaises(InvalidCartItem):
            self.store.update_notes(key, 7)
        with self.assertRaises(InvalidCartItem):
            self.store.update_notes(key, ["extra"])

        self.assertEqual(self.store.get(key).notes, "no onions")
        self.assertEqual(calls, [])

    def test_id_and_price_validators(self):
        self.assertEqual(require_id(0, "item_id"), 0)
        self.assertEqual(require_price(1500, "base_price"), 1500)
        for bad in (True, -1, 1.0, "3"):
            with self.assertRaises(InvalidCartItem):
                require_id(bad, "item_id")
            with self.assertRaises(InvalidCartItem):
                require_price(bad, "base_price")

    def test_flavor_and_variant_are_identity(self):
        plain = self.store.add_item(item_b(variant=None))
        large = self.store.add_item(item_b())
        taro = self.store.add_item(item_b(flavor=Flavor(4, "Taro")))
        zero = self.store.add_item(item_b(variant=Variant(0, "Small", 0)))

        self.assertEqual(len({plain, large, taro, zero}), 4)
        self.assertEqual(len(self.store), 4)

    def test_snapshot_is_detached(self):
        key = self.store.add_item(item_a())
        snapshot = self.store.items
        snapshot[0].quantity = 99

        self.assertEqual(self.store.get(key).quantity, 1)
        self.assertEqual(self.store.total_items, 1)

    def test_listeners_notified_on_change_only(self):
        calls = []
        unsubscribe = self.store.subscribe(lambda items: calls.append(items))

        key = self.store.add_item(item_a())
        self.store.update_quantity(key, 4)
        self.store.remove_item("missing")
        self.store.update_quantity("missing", 2)

        self.assertEqual(len(calls), 2)
        self.assertEqual(calls[-1][0].quantity, 4)

        self.store.clear_cart()
        self.store.clear_cart()
        self.assertEqual(len(calls), 3)
        self.assertEqual(calls[-1], ())

        unsubscribe()
        self.store.add_item(item_a())
        self.assertEqual(len(calls), 3)

    def test_totals_are_current_inside_listener(self):
        seen = []
        self.store.subscribe(lambda items: seen.append(self.store.total_price))

        self.store.add_item(item_a())
        self.store.add_item(item_a(addons=[ADDON_X]))

        self.assertEqual(seen, [5000, 11000])

    def test_replace_items_merges_duplicates(self):
        other = CartStore()
        key = other.add_item(item_a(), 2)
        other.add_item(item_b())
        lines = list(other.items) + [other.get(key)]

        self.store.replace_items(lines)

        self.assertEqual(self.store.keys(), other.keys())
        self.assertEqual(self.store.get(key).quantity, 4)


if __name__ == '__main__':
    unittest.main()
