"""
Tests for CartProvider and the per-session registry
"""
import json
import os
import tempfile
import threading
import unittest

from core.cart_persistence import CartPersistence
from core.cart_provider import CartProvider, CartSessions
from database.connection import DatabaseConnection
from database.repository import StorageRepository
from models.cart import LineSelection
from models.modifiers import Addon, ModifierSet, Variant

PORK_BBQ = LineSelection(1, 2, "Kuya's Grill", "Pork BBQ", 5000)


def large_coffee(addons):
    return LineSelection(
        shop_id=2, item_id=3, shop_name="Brew Corner", name="Iced Coffee", base_price=2000,
        modifiers=ModifierSet.of(variant=Variant(2, "Large", 2000), addons=addons)
    )


class TestCartProvider(unittest.TestCase):
    """Test cases for CartProvider"""

    def setUp(self):
        """Set up test database"""
        self.test_db = tempfile.NamedTemporaryFile(delete=False, suffix='.db')
        self.test_db.close()
        self.storage = StorageRepository(DatabaseConnection(self.test_db.name))
        self.key = "wildeats_cart_v1:test_session"

    def tearDown(self):
        """Clean up test database"""
        os.unlink(self.test_db.name)

    def new_provider(self):
        return CartProvider(CartPersistence(self.storage, self.key))

    def stored_items(self):
        return json.loads(self.storage.get(self.key))["items"]

    def test_starts_empty(self):
        provider = self.new_provider()
        self.assertTrue(provider.is_empty)
        self.assertEqual(provider.total_items, 0)
        self.assertEqual(provider.total_price, 0)
        self.assertIsNone(self.storage.get(self.key))

    def test_every_mutation_is_written_through(self):
        provider = self.new_provider()

        key = provider.add_item(PORK_BBQ)
        self.assertEqual(self.stored_items()[0]["quantity"], 1)

        provider.update_quantity(key, 4)
        self.assertEqual(self.stored_items()[0]["quantity"], 4)

        provider.update_notes(key, "extra sauce")
        self.assertEqual(self.stored_items()[0]["notes"], "extra sauce")

        provider.remove_item(key)
        self.assertEqual(self.stored_items(), [])

    def test_reload_restores_merged_line(self):
        x = Addon(1, "X", 1000)
        y = Addon(2, "Y", 500)
        provider = self.new_provider()
        provider.add_item(large_coffee([x, y]))
        provider.add_item(large_coffee([y, x]))

        reloaded = self.new_provider()

        self.assertEqual(len(reloaded.items), 1)
        self.assertEqual(reloaded.items[0].quantity, 2)
        self.assertEqual(reloaded.total_price, 11000)
        self.assertEqual(reloaded.items, provider.items)

    def test_clear_cart_persists_empty_cart(self):
        provider = self.new_provider()
        provider.add_item(PORK_BBQ)
        provider.clear_cart()

        self.assertTrue(provider.is_empty)
        self.assertTrue(self.new_provider().is_empty)

    def test_reset_discards_slot(self):
        provider = self.new_provider()
        provider.add_item(PORK_BBQ)
        provider.reset()

        self.assertTrue(provider.is_empty)
        self.assertIsNone(self.storage.get(self.key))

    def test_corrupt_slot_does_not_block_startup(self):
        self.storage.set(self.key, "[[[")
        with self.assertLogs("core.cart_persistence", level="WARNING"):
            provider = self.new_provider()

        self.assertTrue(provider.is_empty)
        provider.add_item(PORK_BBQ)
        self.assertEqual(len(self.stored_items()), 1)

    def test_subscribers_see_changes(self):
        provider = self.new_provider()
        seen = []
        provider.subscribe(lambda items: seen.append(len(items)))

        provider.add_item(PORK_BBQ)
        provider.add_item(large_coffee([]))
        provider.clear_cart()

        self.assertEqual(seen, [1, 2, 0])


class TestCartSessions(unittest.TestCase):
    """Test cases for CartSessions"""

    def setUp(self):
        """Set up test database"""
        self.test_db = tempfile.NamedTemporaryFile(delete=False, suffix='.db')
        self.test_db.close()
        self.storage = StorageRepository(DatabaseConnection(self.test_db.name))
        self.sessions = CartSessions(self.storage, "wildeats_cart_v1")

    def tearDown(self):
        """Clean up test database"""
        os.unlink(self.test_db.name)

    def test_one_provider_per_session(self):
        first = self.sessions.get("alice")
        self.assertIs(self.sessions.get("alice"), first)
        self.assertIsNot(self.sessions.get("bob"), first)

    def test_sessions_do_not_share_carts(self):
        self.sessions.get("alice").add_item(PORK_BBQ)

        self.assertTrue(self.sessions.get("bob").is_empty)
        self.assertIsNotNone(self.storage.get("wildeats_cart_v1:alice"))
        self.assertIsNone(self.storage.get("wildeats_cart_v1:bob"))

    def test_cart_survives_process_restart(self):
        self.sessions.get("alice").add_item(PORK_BBQ, 2)

        restarted = CartSessions(self.storage, "wildeats_cart_v1")

        self.assertEqual(restarted.get("alice").total_items, 2)

    def test_end_resets_and_forgets(self):
        self.sessions.get("alice").add_item(PORK_BBQ)
        self.sessions.end("alice")

        self.assertNotIn("alice", self.sessions)
        self.assertIsNone(self.storage.get("wildeats_cart_v1:alice"))
        self.assertTrue(self.sessions.get("alice").is_empty)

    def test_end_unknown_session_clears_stored_cart(self):
        CartSessions(self.storage, "wildeats_cart_v1").get("carol").add_item(PORK_BBQ)

        self.sessions.end("carol")

        self.assertIsNone(self.storage.get("wildeats_cart_v1:carol"))

    def test_registry_is_bounded(self):
        sessions = CartSessions(self.storage, "wildeats_cart_v1", max_sessions=3)
        for n in range(50):
            sessions.get(f"visitor-{n}")

        self.assertEqual(len(sessions), 3)
        self.assertNotIn("visitor-0", sessions)
        self.assertIn("visitor-49", sessions)

    def test_recent_use_protects_from_eviction(self):
        sessions = CartSessions(self.storage, "wildeats_cart_v1", max_sessions=2)
        alice = sessions.get("alice")
        sessions.get("bob")
        sessions.get("alice")
        sessions.get("carol")

        self.assertIs(sessions.get("alice"), alice)
        self.assertNotIn("bob", sessions)

    def test_evicted_session_reloads_intact(self):
        sessions = CartSessions(self.storage, "wildeats_cart_v1", max_sessions=1)
        alice = sessions.get("alice")
        alice.add_item(PORK_BBQ, 2)
        alice.add_item(large_coffee([Addon(1, "X", 1000)]))
        before = alice.items

        sessions.get("bob")
        self.assertNotIn("alice", sessions)

        reloaded = sessions.get("alice")
        self.assertIsNot(reloaded, alice)
        self.assertEqual(reloaded.items, before)
        self.assertEqual(reloaded.total_price, 10000 + 5000)

    def test_max_sessions_must_be_positive(self):
        with self.assertRaises(ValueError):
            CartSessions(self.storage, max_sessions=0)

    def test_concurrent_first_requests_share_one_provider(self):
        barrier = threading.Barrier(8)
        seen = []

        def first_request():
            barrier.wait()
            provider = self.sessions.get("alice")
            seen.append(provider)
            provider.add_item(PORK_BBQ)

        threads = [threading.Thread(target=first_request) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len({id(p) for p in seen}), 1)
        self.assertEqual(self.sessions.get("alice").total_items, 8)
        restarted = CartSessions(self.storage, "wildeats_cart_v1")
        self.assertEqual(restarted.get("alice").total_items, 8)


if __name__ == '__main__':
    unittest.main()
