"""
Cart persistence - versioned cart snapshot in a durable storage slot
"""
import json
import logging
from typing import Any, Dict, List, Sequence

from models.cart import CartItem
from models.errors import CartError, PersistenceUnavailable
from models.modifiers import ModifierSet, Variant, Flavor, Addon
from database.repository import StorageRepository
from .pricing import to_minor_units

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class CartPersistence:
    # Loads and saves one cart under one namespaced storage key.
    # Nothing here raises: a bad or missing slot loads as an empty cart, and a
    # failing store turns the adapter into a no-op for the rest of the session.

    def __init__(self, storage: StorageRepository, storage_key: str):
        self.storage = storage
        self.storage_key = storage_key
        self.degraded = False

    def load(self) -> List[CartItem]:
        # Read the persisted cart; empty list on any problem
        if self.degraded:
            return []

        try:
            raw = self.storage.get(self.storage_key)
        except PersistenceUnavailable as e:
            self._degrade(e)
            return []

        if raw is None:
            return []

        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.warning("Discarding unreadable cart in %s: %s", self.storage_key, e)
            return []

        try:
            return self._decode(data)
        except (CartError, KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Discarding cart in %s with unexpected shape: %s", self.storage_key, e)
            return []

    def save(self, items: Sequence[CartItem]) -> bool:
        # Write the cart snapshot; False when running in memory only
        if self.degraded:
            return False

        envelope = {
            "version": SCHEMA_VERSION,
            "items": [item.to_dict() for item in items]
        }
        try:
            self.storage.set(self.storage_key, json.dumps(envelope, ensure_ascii=False))
        except PersistenceUnavailable as e:
            self._degrade(e)
            return False
        return True

    def discard(self) -> bool:
        # Delete the persisted cart (logout / reset)
        try:
            return self.storage.delete(self.storage_key)
        except PersistenceUnavailable as e:
            logger.warning("Could not discard cart in %s: %s", self.storage_key, e)
            return False

    def _degrade(self, error: Exception):
        self.degraded = True
        logger.warning("Cart storage unavailable, keeping cart in memory only: %s", error)

    def _decode(self, data: Any) -> List[CartItem]:
        if isinstance(data, list):
            # Unversioned array written by the old storefront
            logger.info("Upgrading unversioned cart in %s", self.storage_key)
            return [_upgrade_legacy_item(entry) for entry in data]

        if not isinstance(data, dict) or "version" not in data:
            raise ValueError("missing version tag")

        version = data["version"]
        if version != SCHEMA_VERSION:
            raise ValueError(f"unsupported cart schema version {version!r}")

        items = data.get("items")
        if not isinstance(items, list):
            raise ValueError("items is not a list")
        return [CartItem.from_dict(entry) for entry in items]


def _upgrade_legacy_item(entry: Dict[str, Any]) -> CartItem:
    # camelCase fields, prices in major units
    variant = entry.get("variant")
    flavor = entry.get("flavor")
    modifiers = ModifierSet(
        variant=Variant(variant["id"], variant["name"], to_minor_units(variant.get("additionalPrice") or 0)) if variant else None,
        flavor=Flavor(flavor["id"], flavor["name"]) if flavor else None,
        addons=tuple(Addon(a["id"], a["name"], to_minor_units(a.get("price") or 0)) for a in entry.get("addons") or [])
    )
    return CartItem(
        shop_id=entry["shopId"],
        item_id=entry["itemId"],
        shop_name=entry.get("shopName", ""),
        name=entry["name"],
        base_price=to_minor_units(entry["basePrice"]),
        modifiers=modifiers,
        quantity=entry["quantity"],
        notes=entry.get("notes")
    )
