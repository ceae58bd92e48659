"""
CartProvider - wires cart persistence to the cart store for one session
"""
import logging
from collections import OrderedDict
from threading import RLock
from typing import Callable, Optional, Tuple

from database.repository import StorageRepository
from models.cart import CartItem, CartSummary, LineSelection
from .cart_persistence import CartPersistence
from .cart_store import CartStore, Listener

logger = logging.getLogger(__name__)


class CartProvider:
    # Public cart contract for catalog pages and checkout.
    # The persisted cart seeds the store once; afterwards every change is
    # written through to storage. One lock serializes writers of the session.

    def __init__(self, persistence: CartPersistence, store: Optional[CartStore] = None):
        self.persistence = persistence
        self.store = store if store is not None else CartStore()
        self.lock = RLock()

        loaded = persistence.load()
        if loaded:
            self.store.replace_items(loaded)
            logger.info("Restored %d cart line(s) from %s", len(self.store), persistence.storage_key)

        self._unsubscribe_save = self.store.subscribe(self._persist)

    def _persist(self, items: Tuple[CartItem, ...]):
        self.persistence.save(items)

    # === Mutations ===
    def add_item(self, selection: LineSelection, quantity: int = 1) -> str:
        with self.lock:
            return self.store.add_item(selection, quantity)

    def update_quantity(self, key: str, quantity: int) -> bool:
        with self.lock:
            return self.store.update_quantity(key, quantity)

    def update_notes(self, key: str, notes: Optional[str]) -> bool:
        with self.lock:
            return self.store.update_notes(key, notes)

    def remove_item(self, key: str) -> bool:
        with self.lock:
            return self.store.remove_item(key)

    def clear_cart(self):
        with self.lock:
            self.store.clear_cart()

    def reset(self):
        # Logout: forget the lines and the persisted slot
        with self.lock:
            self.store.clear_cart()
            self.persistence.discard()

    # === Read side ===
    @property
    def items(self) -> Tuple[CartItem, ...]:
        with self.lock:
            return self.store.items

    @property
    def total_items(self) -> int:
        return self.store.total_items

    @property
    def total_price(self) -> int:
        return self.store.total_price

    @property
    def summary(self) -> CartSummary:
        return self.store.summary

    @property
    def is_empty(self) -> bool:
        return self.store.is_empty

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self.store.subscribe(listener)


class CartSessions:
    # Process-wide registry: one CartProvider per shopping session.
    # Holds at most max_sessions providers, least recently used evicted first;
    # an evicted session is rebuilt from storage on its next request.

    def __init__(self, storage: StorageRepository, storage_prefix: str = "wildeats_cart_v1",
                 max_sessions: int = 1000):
        if max_sessions < 1:
            raise ValueError(f"max_sessions must be at least 1, got {max_sessions}")
        self.storage = storage
        self.storage_prefix = storage_prefix
        self.max_sessions = max_sessions
        self._providers: "OrderedDict[str, CartProvider]" = OrderedDict()
        self._lock = RLock()

    def storage_key(self, session_id: str) -> str:
        return f"{self.storage_prefix}:{session_id}"

    def get(self, session_id: str) -> CartProvider:
        # Provider for the session, created (and loaded) on first use
        with self._lock:
            provider = self._providers.get(session_id)
            if provider is not None:
                self._providers.move_to_end(session_id)
                return provider

            persistence = CartPersistence(self.storage, self.storage_key(session_id))
            provider = CartProvider(persistence)
            self._providers[session_id] = provider
            while len(self._providers) > self.max_sessions:
                self._evict_oldest()
            return provider

    def _evict_oldest(self):
        session_id, provider = self._providers.popitem(last=False)
        if provider.persistence.degraded and not provider.is_empty:
            logger.warning("Evicting in-memory cart of session %s; its lines are lost", session_id)
        else:
            logger.debug("Evicted cart provider of session %s", session_id)

    def end(self, session_id: str):
        # Logout: reset the session's cart and drop the provider
        with self._lock:
            provider = self._providers.pop(session_id, None)
            if provider is None:
                provider = CartProvider(CartPersistence(self.storage, self.storage_key(session_id)))
            provider.reset()

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._providers

    def __len__(self) -> int:
        with self._lock:
            return len(self._providers)
