"""
Core package for the WildEats cart
Contains line identity, pricing, the cart store and its composition root

Submodules are imported directly (core.cart_store, core.cart_provider, ...)
because models.cart depends on core.line_key.
"""
