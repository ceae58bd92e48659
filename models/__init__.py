"""
Models package for the WildEats cart
Contains data models and error types
"""

from .errors import (
    CartError, ItemNotFound, InvalidCartItem, InvalidQuantity,
    PersistenceUnavailable, EmptyCartCheckout, OrderSubmissionFailed
)
from .modifiers import Variant, Flavor, Addon, ModifierSet
from .cart import LineSelection, CartItem, CartSummary
from .menu import MenuItem, MenuItemOptions
from .order import OrderLine, OrderSubmission, OrderConfirmation

__all__ = [
    'CartError', 'ItemNotFound', 'InvalidCartItem', 'InvalidQuantity',
    'PersistenceUnavailable', 'EmptyCartCheckout', 'OrderSubmissionFailed',
    'Variant', 'Flavor', 'Addon', 'ModifierSet',
    'LineSelection', 'CartItem', 'CartSummary',
    'MenuItem', 'MenuItemOptions',
    'OrderLine', 'OrderSubmission', 'OrderConfirmation'
]
