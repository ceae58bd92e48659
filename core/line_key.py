"""
Line item key derivation - the merge identity of a cart line
"""
from typing import Iterable, Optional

NO_VARIANT = "novar"
NO_ADDONS = "noaddons"
NO_FLAVOR = "noflavor"


def derive_key(shop_id: int, item_id: int, variant_id: Optional[int],
               addon_ids: Iterable[int], flavor_id: Optional[int]) -> str:
    # Same shop/item/variant/add-on set/flavor always yields the same key,
    # whatever order the add-ons were picked in
    variant_part = NO_VARIANT if variant_id is None else str(variant_id)
    flavor_part = NO_FLAVOR if flavor_id is None else str(flavor_id)

    unique_addons = sorted(set(addon_ids))
    addons_part = "_".join(str(addon_id) for addon_id in unique_addons) if unique_addons else NO_ADDONS

    return f"{shop_id}-{item_id}-{variant_part}-{addons_part}-{flavor_part}"


def key_for(shop_id: int, item_id: int, modifiers) -> str:
    # Convenience wrapper over a ModifierSet
    return derive_key(shop_id, item_id, modifiers.variant_id, modifiers.addon_ids, modifiers.flavor_id)
