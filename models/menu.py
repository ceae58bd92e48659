"""
Menu (catalog) data models
"""
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any

from .modifiers import Variant, Flavor, Addon


@dataclass
class MenuItem:
    """Menu item data model"""
    item_id: int
    shop_id: int
    shop_name: str
    name: str
    price: int
    available: bool = True
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "item_id": self.item_id,
            "shop_id": self.shop_id,
            "shop_name": self.shop_name,
            "name": self.name,
            "price": self.price,
            "available": self.available,
            "description": self.description
        }


@dataclass
class MenuItemOptions:
    """Variants, add-ons and flavors offered for one menu item"""
    variants: List[Variant] = field(default_factory=list)
    addons: List[Addon] = field(default_factory=list)
    flavors: List[Flavor] = field(default_factory=list)

    def find_variant(self, variant_id: int) -> Optional[Variant]:
        return next((v for v in self.variants if v.id == variant_id), None)

    def find_flavor(self, flavor_id: int) -> Optional[Flavor]:
        return next((f for f in self.flavors if f.id == flavor_id), None)

    def find_addon(self, addon_id: int) -> Optional[Addon]:
        return next((a for a in self.addons if a.id == addon_id), None)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "variants": [v.to_dict() for v in self.variants],
            "addons": [a.to_dict() for a in self.addons],
            "flavors": [f.to_dict() for f in self.flavors]
        }
