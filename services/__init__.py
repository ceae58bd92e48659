"""
Services package for the WildEats cart
Contains catalog, cart and checkout business logic
"""

from .catalog_service import CatalogService
from .cart_service import CartService
from .order_client import BackendOrderClient
from .checkout_service import CheckoutService

__all__ = [
    'CatalogService', 'CartService', 'BackendOrderClient', 'CheckoutService'
]
