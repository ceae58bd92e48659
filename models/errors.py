"""
Cart error types
"""


class CartError(Exception):
    """Base class for cart and checkout errors"""


class ItemNotFound(CartError):
    """The catalog cannot resolve the requested menu item"""

    def __init__(self, item_id):
        super().__init__(f"Menu item not found: {item_id}")
        self.item_id = item_id


class InvalidCartItem(CartError, ValueError):
    """Malformed line data (missing fields, negative prices, unknown options)"""


class InvalidQuantity(CartError, ValueError):
    """Quantity that is not a usable integer for the requested operation"""


class PersistenceUnavailable(CartError):
    """The durable storage slot could not be read or written"""


class EmptyCartCheckout(CartError):
    """Checkout attempted with no lines in the cart"""

    def __init__(self):
        super().__init__("Cart is empty.")


class OrderSubmissionFailed(CartError):
    """The backend did not confirm an order submission"""

    def __init__(self, message: str, status_code=None):
        super().__init__(message)
        self.status_code = status_code
