"""
Checkout service - turns the cart into backend orders
"""
import logging
from collections import OrderedDict
from typing import Any, Dict, List, Optional, Sequence

from core import pricing
from core.cart_provider import CartSessions
from models.cart import CartItem, clean_notes
from models.errors import CartError, EmptyCartCheckout, InvalidCartItem, OrderSubmissionFailed
from models.order import OrderLine, OrderSubmission
from .order_client import BackendOrderClient

logger = logging.getLogger(__name__)

# Longest order note the backend order endpoint accepts
MAX_ORDER_NOTES_LENGTH = 500


class CheckoutService:
    # Builds one order per shop from the cart and submits them.
    # The cart is only cleared for shops whose order the backend confirmed.

    def __init__(self, sessions: CartSessions, order_client: BackendOrderClient,
                 currency_symbol: str = "₱"):
        # Inject the session registry and the backend client
        self.sessions = sessions
        self.order_client = order_client
        self.currency_symbol = currency_symbol

    @staticmethod
    def clean_order_notes(notes: Any) -> Optional[str]:
        notes = clean_notes(notes)
        if notes is not None and len(notes) > MAX_ORDER_NOTES_LENGTH:
            raise InvalidCartItem(
                f"Order notes must be at most {MAX_ORDER_NOTES_LENGTH} characters, got {len(notes)}"
            )
        return notes

    @staticmethod
    def build_submissions(items: Sequence[CartItem], notes: Optional[str] = None) -> List[OrderSubmission]:
        # Group lines by shop in the order the shops first appear in the cart
        if not items:
            raise EmptyCartCheckout()

        by_shop: "OrderedDict[int, OrderSubmission]" = OrderedDict()
        for item in items:
            submission = by_shop.get(item.shop_id)
            if submission is None:
                submission = OrderSubmission(shop_id=item.shop_id, shop_name=item.shop_name, notes=notes)
                by_shop[item.shop_id] = submission
            submission.lines.append(OrderLine(
                cart_key=item.key,
                item_id=item.item_id,
                name=item.name,
                quantity=item.quantity,
                unit_price=pricing.line_unit_price(item),
                line_total=pricing.line_total(item),
                variant_id=item.modifiers.variant_id,
                flavor_id=item.modifiers.flavor_id,
                addon_ids=item.modifiers.addon_ids,
                notes=item.notes
            ))
        return list(by_shop.values())

    def process_order(self, session_id: str, notes: Optional[str] = None,
                      token: Optional[str] = None) -> Dict[str, Any]:
        # Submit the session cart; clear it only after confirmed success
        provider = self.sessions.get(session_id)

        # Held across the backend calls so one cart is never submitted twice
        with provider.lock:
            total_price = provider.total_price
            try:
                submissions = self.build_submissions(provider.items, self.clean_order_notes(notes))
            except CartError as e:
                return {
                    "success": False,
                    "error": str(e)
                }

            confirmations = []
            for submission in submissions:
                try:
                    confirmations.append(self.order_client.submit_order(submission, token=token))
                except OrderSubmissionFailed as e:
                    logger.error("Checkout failed for session %s: %s", session_id, e)
                    # Orders the backend already confirmed must not be placed twice
                    for placed in submissions[:len(confirmations)]:
                        for key in placed.cart_keys:
                            provider.remove_item(key)
                    return {
                        "success": False,
                        "error": str(e),
                        "backend_error": True,
                        "orders": [c.to_dict() for c in confirmations],
                        "remaining_total": provider.total_price
                    }

            provider.clear_cart()

        return {
            "success": True,
            "orders": [c.to_dict() for c in confirmations],
            "total_amount": total_price,
            "total_display": pricing.format_price(total_price, self.currency_symbol),
            "message": f"Placed {len(confirmations)} order(s)."
        }
