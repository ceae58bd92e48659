"""
Catalog service - resolves menu items and their options for the cart
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from models.cart import LineSelection, clean_notes
from models.errors import InvalidCartItem, ItemNotFound
from models.menu import MenuItem, MenuItemOptions
from models.modifiers import ModifierSet
from database.repository import MenuRepository

logger = logging.getLogger(__name__)


class CatalogService:
    # Menu lookups used before anything is put into the cart

    def __init__(self, menu_repository: MenuRepository):
        # Inject the MenuRepository instance
        self.menu_repo = menu_repository

    def get_item(self, item_id: int) -> MenuItem:
        # Menu item by id; ItemNotFound when the catalog does not know it
        item = self.menu_repo.get_menu_item(item_id)
        if item is None:
            raise ItemNotFound(item_id)
        return item

    def get_options(self, item_id: int) -> MenuItemOptions:
        # Variants / add-ons / flavors for an existing menu item
        self.get_item(item_id)
        return self.menu_repo.get_options(item_id)

    def list_items(self, shop_id: Optional[int] = None) -> List[Dict[str, Any]]:
        return [item.to_dict() for item in self.menu_repo.find_menu_items(shop_id)]

    def build_selection(self, item_id: int, variant_id: Optional[int] = None,
                        flavor_id: Optional[int] = None, addon_ids: Iterable[int] = (),
                        notes: Optional[str] = None) -> LineSelection:
        # Turn ids chosen by the shopper into a priced LineSelection.
        # Every option id must belong to this menu item.
        item = self.get_item(item_id)
        options = self.menu_repo.get_options(item_id)

        if not item.available:
            logger.debug("Menu item %s is unavailable but is added anyway", item_id)

        variant = None
        if variant_id is not None:
            variant = options.find_variant(variant_id)
            if variant is None:
                raise InvalidCartItem(f"Variant {variant_id} is not offered for item {item_id}")

        flavor = None
        if flavor_id is not None:
            flavor = options.find_flavor(flavor_id)
            if flavor is None:
                raise InvalidCartItem(f"Flavor {flavor_id} is not offered for item {item_id}")

        addons = []
        for addon_id in addon_ids or ():
            addon = options.find_addon(addon_id)
            if addon is None:
                raise InvalidCartItem(f"Add-on {addon_id} is not offered for item {item_id}")
            addons.append(addon)

        notes = clean_notes(notes)

        return LineSelection(
            shop_id=item.shop_id,
            item_id=item.item_id,
            shop_name=item.shop_name,
            name=item.name,
            base_price=item.price,
            modifiers=ModifierSet.of(variant=variant, flavor=flavor, addons=addons),
            notes=notes
        )
