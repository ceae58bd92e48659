"""
Cart store - ordered, deduplicated cart lines with change notification
"""
import logging
from collections import OrderedDict
from dataclasses import replace
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from models.cart import CartItem, CartSummary, LineSelection, clean_notes
from models.errors import InvalidCartItem, InvalidQuantity
from . import pricing

logger = logging.getLogger(__name__)

Listener = Callable[[Tuple[CartItem, ...]], None]


class CartStore:
    # Holds the lines of one shopping session.
    # Lines are keyed by their derived key and kept in insertion order;
    # a merge changes quantity in place and never moves the line.

    def __init__(self, items: Optional[Iterable[CartItem]] = None):
        self._lines: "OrderedDict[str, CartItem]" = OrderedDict()
        self._listeners: List[Listener] = []
        self._summary = CartSummary(0, 0, 0)
        if items:
            self._seed(items)
            self._recompute()

    # === Change notification ===
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        # Register a listener called with the item snapshot after every change.
        # Returns a function that removes the listener again.
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self):
        self._recompute()
        snapshot = self.items
        for listener in list(self._listeners):
            listener(snapshot)

    def _recompute(self):
        self._summary = pricing.summarize(self._lines.values())

    # === Mutations ===
    def add_item(self, selection: LineSelection, quantity: int = 1) -> str:
        # Merge into the line with the same key, or append a new one
        if not isinstance(selection, LineSelection):
            raise InvalidCartItem(f"add_item expects a LineSelection, got {selection!r}")
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InvalidQuantity(f"quantity must be an integer, got {quantity!r}")
        if quantity < 1:
            raise InvalidQuantity(f"quantity to add must be at least 1, got {quantity}")

        key = selection.key
        existing = self._lines.get(key)
        if existing is not None:
            existing.quantity += quantity
            # Notes are not identity; the latest one given wins
            if selection.notes is not None:
                existing.notes = selection.notes
            logger.debug("Merged %d into cart line %s (now %d)", quantity, key, existing.quantity)
        else:
            self._lines[key] = CartItem.from_selection(selection, quantity)
            logger.debug("Appended cart line %s x%d", key, quantity)

        self._changed()
        return key

    def update_quantity(self, key: str, quantity: int) -> bool:
        # Set quantity exactly; zero or less removes the line.
        # Unknown keys are ignored and reported with False.
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InvalidQuantity(f"quantity must be an integer, got {quantity!r}")
        if quantity <= 0:
            return self.remove_item(key)

        line = self._lines.get(key)
        if line is None:
            return False
        if line.quantity != quantity:
            line.quantity = quantity
            self._changed()
        return True

    def update_notes(self, key: str, notes: Optional[str]) -> bool:
        notes = clean_notes(notes)
        line = self._lines.get(key)
        if line is None:
            return False
        if line.notes != notes:
            line.notes = notes
            self._changed()
        return True

    def remove_item(self, key: str) -> bool:
        # Removing a key that is not in the cart is not an error
        if self._lines.pop(key, None) is None:
            return False
        self._changed()
        return True

    def clear_cart(self):
        if not self._lines:
            return
        self._lines.clear()
        self._changed()

    def replace_items(self, items: Iterable[CartItem]):
        # Replace all lines, e.g. with the persisted cart at startup
        self._lines.clear()
        self._seed(items)
        self._changed()

    def _seed(self, items: Iterable[CartItem]):
        for item in items:
            existing = self._lines.get(item.key)
            if existing is not None:
                existing.quantity += item.quantity
                if item.notes is not None:
                    existing.notes = item.notes
            else:
                self._lines[item.key] = replace(item)

    # === Read side ===
    @property
    def items(self) -> Tuple[CartItem, ...]:
        """Snapshot of the lines in cart order (copies, safe to hold on to)"""
        return tuple(replace(line) for line in self._lines.values())

    def get(self, key: str) -> Optional[CartItem]:
        line = self._lines.get(key)
        return replace(line) if line is not None else None

    @property
    def summary(self) -> CartSummary:
        return self._summary

    @property
    def total_items(self) -> int:
        return self._summary.total_items

    @property
    def total_price(self) -> int:
        return self._summary.total_price

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def keys(self) -> List[str]:
        return list(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, key: object) -> bool:
        return key in self._lines

    def __iter__(self) -> Iterator[CartItem]:
        return iter(self.items)
