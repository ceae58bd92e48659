"""
Cart service - handles cart operations per shopping session
"""
import logging
from typing import Any, Dict, Iterable, Optional

from core import pricing
from core.cart_provider import CartSessions
from models.cart import CartItem
from models.errors import CartError, ItemNotFound
from .catalog_service import CatalogService

logger = logging.getLogger(__name__)


class CartService:
    # Cart business logic behind the HTTP endpoints.
    # Returns {"success": ...} dicts; domain errors become error results.

    def __init__(self, sessions: CartSessions, catalog_service: CatalogService,
                 currency_symbol: str = "₱"):
        # Inject the session registry and the catalog
        self.sessions = sessions
        self.catalog = catalog_service
        self.currency_symbol = currency_symbol

    def add_to_cart(self, session_id: str, item_id: int, quantity: int = 1,
                    variant_id: Optional[int] = None, flavor_id: Optional[int] = None,
                    addon_ids: Optional[Iterable[int]] = None,
                    notes: Optional[str] = None) -> Dict[str, Any]:
        # Resolve the menu item and options, then merge it into the cart
        try:
            selection = self.catalog.build_selection(
                item_id, variant_id=variant_id, flavor_id=flavor_id,
                addon_ids=addon_ids or (), notes=notes
            )
        except ItemNotFound as e:
            return {
                "success": False,
                "error": str(e),
                "not_found": True
            }
        except CartError as e:
            return {
                "success": False,
                "error": str(e)
            }

        provider = self.sessions.get(session_id)
        with provider.lock:
            try:
                key = provider.add_item(selection, quantity)
            except CartError as e:
                return {
                    "success": False,
                    "error": str(e)
                }

            line = provider.store.get(key)
            return {
                "success": True,
                "cart_item_key": key,
                "message": f"{selection.name} was added to your cart.",
                "item_details": self._line_to_dict(line),
                "summary": self._summary_to_dict(provider.summary)
            }

    def get_cart_details(self, session_id: str) -> Dict[str, Any]:
        # Current lines of the session and the totals
        provider = self.sessions.get(session_id)
        items = provider.items

        if items:
            message = f"There are {len(items)} line(s) in your cart."
        else:
            message = "Your cart is empty."

        return {
            "success": True,
            "cart_items": [self._line_to_dict(item) for item in items],
            "summary": self._summary_to_dict(provider.summary),
            "message": message
        }

    def update_cart_item(self, session_id: str, key: str, new_quantity: Optional[int] = None,
                         notes: Optional[str] = None) -> Dict[str, Any]:
        # Change quantity (0 or less removes the line) and/or notes
        if new_quantity is None and notes is None:
            return {
                "success": False,
                "error": "Nothing to update."
            }

        provider = self.sessions.get(session_id)
        with provider.lock:
            if key not in provider.store:
                return {
                    "success": False,
                    "error": "That item is not in your cart.",
                    "not_found": True
                }

            try:
                if notes is not None:
                    provider.update_notes(key, notes)
                if new_quantity is not None:
                    provider.update_quantity(key, new_quantity)
            except CartError as e:
                return {
                    "success": False,
                    "error": str(e)
                }

            removed = key not in provider.store
            return {
                "success": True,
                "removed": removed,
                "message": "Item removed from your cart." if removed else "Cart item updated.",
                "summary": self._summary_to_dict(provider.summary)
            }

    def remove_cart_item(self, session_id: str, key: str) -> Dict[str, Any]:
        # Removing an item that is already gone still succeeds
        provider = self.sessions.get(session_id)
        removed = provider.remove_item(key)
        return {
            "success": True,
            "removed": removed,
            "summary": self._summary_to_dict(provider.summary),
            "message": "Item removed from your cart." if removed else "Item was not in your cart."
        }

    def clear_cart(self, session_id: str) -> Dict[str, Any]:
        provider = self.sessions.get(session_id)
        with provider.lock:
            removed_items = len(provider.items)
            provider.clear_cart()
        return {
            "success": True,
            "removed_items": removed_items,
            "summary": self._summary_to_dict(provider.summary),
            "message": "Your cart has been cleared."
        }

    def end_session(self, session_id: str) -> Dict[str, Any]:
        # Logout: drop the session cart including its persisted copy
        self.sessions.end(session_id)
        return {
            "success": True,
            "message": "Session cart reset."
        }

    def _line_to_dict(self, item: CartItem) -> Dict[str, Any]:
        unit_price = pricing.line_unit_price(item)
        total = pricing.line_total(item)
        return {
            **item.to_dict(),
            "unit_price": unit_price,
            "line_total": total,
            "line_total_display": pricing.format_price(total, self.currency_symbol)
        }

    def _summary_to_dict(self, summary) -> Dict[str, Any]:
        return {
            **summary.to_dict(),
            "total_price_display": pricing.format_price(summary.total_price, self.currency_symbol)
        }
