"""
Cart related data models
"""
from dataclasses import dataclass, field
from typing import Optional, Tuple, Dict, Any

from core.line_key import key_for
from .errors import InvalidCartItem, InvalidQuantity
from .modifiers import ModifierSet, Variant, Flavor, Addon, require_id, require_price


def _require_quantity(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidQuantity(f"quantity must be an integer, got {value!r}")
    if value < 1:
        raise InvalidQuantity(f"quantity must be at least 1, got {value}")
    return value


def clean_notes(value: Any) -> Optional[str]:
    # Free-text notes: stripped, blank becomes None
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidCartItem(f"notes must be text, got {value!r}")
    return value.strip() or None


@dataclass(frozen=True)
class LineSelection:
    """A catalog item plus chosen modifiers, before it becomes a cart line"""
    shop_id: int
    item_id: int
    shop_name: str
    name: str
    base_price: int
    modifiers: ModifierSet = field(default_factory=ModifierSet)
    notes: Optional[str] = None

    def __post_init__(self):
        require_id(self.shop_id, "shop_id")
        require_id(self.item_id, "item_id")
        require_price(self.base_price, "base_price")
        if not isinstance(self.modifiers, ModifierSet):
            raise InvalidCartItem(f"modifiers must be a ModifierSet, got {self.modifiers!r}")

    @property
    def key(self) -> str:
        return key_for(self.shop_id, self.item_id, self.modifiers)


@dataclass
class CartItem:
    """Cart line data model; key is derived from the identity fields"""
    shop_id: int
    item_id: int
    shop_name: str
    name: str
    base_price: int
    modifiers: ModifierSet = field(default_factory=ModifierSet)
    quantity: int = 1
    notes: Optional[str] = None
    key: str = field(init=False, default="")

    def __post_init__(self):
        require_id(self.shop_id, "shop_id")
        require_id(self.item_id, "item_id")
        require_price(self.base_price, "base_price")
        _require_quantity(self.quantity)
        if not isinstance(self.modifiers, ModifierSet):
            raise InvalidCartItem(f"modifiers must be a ModifierSet, got {self.modifiers!r}")
        self.key = key_for(self.shop_id, self.item_id, self.modifiers)

    @property
    def variant(self) -> Optional[Variant]:
        return self.modifiers.variant

    @property
    def flavor(self) -> Optional[Flavor]:
        return self.modifiers.flavor

    @property
    def addons(self) -> Tuple[Addon, ...]:
        return self.modifiers.addons

    @classmethod
    def from_selection(cls, selection: LineSelection, quantity: int = 1) -> "CartItem":
        """Create a new line from a selection"""
        return cls(
            shop_id=selection.shop_id,
            item_id=selection.item_id,
            shop_name=selection.shop_name,
            name=selection.name,
            base_price=selection.base_price,
            modifiers=selection.modifiers,
            quantity=quantity,
            notes=selection.notes
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "key": self.key,
            "shop_id": self.shop_id,
            "item_id": self.item_id,
            "shop_name": self.shop_name,
            "name": self.name,
            "base_price": self.base_price,
            **self.modifiers.to_dict(),
            "quantity": self.quantity,
            "notes": self.notes
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartItem":
        """Rebuild from to_dict() output; a stored key is ignored and re-derived"""
        return cls(
            shop_id=data["shop_id"],
            item_id=data["item_id"],
            shop_name=data.get("shop_name", ""),
            name=data["name"],
            base_price=data["base_price"],
            modifiers=ModifierSet.from_dict(data),
            quantity=data["quantity"],
            notes=data.get("notes")
        )


@dataclass(frozen=True)
class CartSummary:
    """Cart totals"""
    line_count: int
    total_items: int
    total_price: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "line_count": self.line_count,
            "total_items": self.total_items,
            "total_price": self.total_price
        }
