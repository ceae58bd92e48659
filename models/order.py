"""
Order related data models (cart -> backend order handoff)
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Dict, Any

from core import pricing


def _major(amount: int) -> float:
    # Backend expects two-decimal major units as a JSON number
    return float(pricing.to_major_units(amount))


@dataclass(frozen=True)
class OrderLine:
    """One ordered cart line, priced at submission time"""
    cart_key: str
    item_id: int
    name: str
    quantity: int
    unit_price: int
    line_total: int
    variant_id: Optional[int] = None
    flavor_id: Optional[int] = None
    addon_ids: Tuple[int, ...] = ()
    notes: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        return {
            "menuItemId": self.item_id,
            "quantity": self.quantity,
            "variantId": self.variant_id,
            "flavorId": self.flavor_id,
            "addonIds": list(self.addon_ids),
            "notes": self.notes,
            "unitPrice": _major(self.unit_price)
        }


@dataclass
class OrderSubmission:
    """Order for a single shop"""
    shop_id: int
    shop_name: str
    lines: List[OrderLine] = field(default_factory=list)
    notes: Optional[str] = None

    @property
    def total(self) -> int:
        return sum(line.line_total for line in self.lines)

    @property
    def cart_keys(self) -> List[str]:
        return [line.cart_key for line in self.lines]

    def to_payload(self) -> Dict[str, Any]:
        """Request body for the backend order endpoint"""
        return {
            "shopId": self.shop_id,
            "orderItems": [line.to_payload() for line in self.lines],
            "notes": self.notes,
            "total": _major(self.total)
        }


@dataclass
class OrderConfirmation:
    """Backend acknowledgement of one submission"""
    shop_id: int
    order_id: Optional[Any]
    total: int
    status: str = "PENDING"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "shop_id": self.shop_id,
            "order_id": self.order_id,
            "total": self.total,
            "status": self.status
        }
