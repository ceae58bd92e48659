"""
Modifier data models (variant, flavor, add-ons)
"""
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Dict, Any

from .errors import InvalidCartItem


def require_id(value: Any, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidCartItem(f"{label} must be a non-negative integer, got {value!r}")
    return value


def require_price(value: Any, label: str) -> int:
    # Prices are integer minor units (centavos)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidCartItem(f"{label} must be a non-negative integer amount, got {value!r}")
    return value


@dataclass(frozen=True)
class Variant:
    """Size / variant selection, at most one per line"""
    id: int
    name: str
    additional_price: int = 0

    def __post_init__(self):
        require_id(self.id, "variant id")
        require_price(self.additional_price, "variant additional_price")

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "additional_price": self.additional_price}


@dataclass(frozen=True)
class Flavor:
    """Flavor selection, no price effect"""
    id: int
    name: str

    def __post_init__(self):
        require_id(self.id, "flavor id")

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class Addon:
    """Paid extra, zero or more per line"""
    id: int
    name: str
    price: int = 0

    def __post_init__(self):
        require_id(self.id, "addon id")
        require_price(self.price, "addon price")

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "price": self.price}


@dataclass(frozen=True)
class ModifierSet:
    """
    Optional selections attached to one cart line.

    Add-ons behave as a set keyed by id: duplicates are dropped (first one
    wins) and the stored tuple is sorted by id, so selection order never
    affects equality.
    """
    variant: Optional[Variant] = None
    flavor: Optional[Flavor] = None
    addons: Tuple[Addon, ...] = ()

    def __post_init__(self):
        if self.variant is not None and not isinstance(self.variant, Variant):
            raise InvalidCartItem(f"variant must be a Variant, got {self.variant!r}")
        if self.flavor is not None and not isinstance(self.flavor, Flavor):
            raise InvalidCartItem(f"flavor must be a Flavor, got {self.flavor!r}")

        unique: Dict[int, Addon] = {}
        for addon in self.addons or ():
            if not isinstance(addon, Addon):
                raise InvalidCartItem(f"addons must contain Addon values, got {addon!r}")
            unique.setdefault(addon.id, addon)
        object.__setattr__(self, "addons", tuple(unique[i] for i in sorted(unique)))

    @property
    def variant_id(self) -> Optional[int]:
        return self.variant.id if self.variant is not None else None

    @property
    def flavor_id(self) -> Optional[int]:
        return self.flavor.id if self.flavor is not None else None

    @property
    def addon_ids(self) -> Tuple[int, ...]:
        return tuple(addon.id for addon in self.addons)

    @classmethod
    def of(cls, variant: Optional[Variant] = None, flavor: Optional[Flavor] = None,
           addons: Iterable[Addon] = ()) -> "ModifierSet":
        return cls(variant=variant, flavor=flavor, addons=tuple(addons))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "variant": self.variant.to_dict() if self.variant else None,
            "flavor": self.flavor.to_dict() if self.flavor else None,
            "addons": [addon.to_dict() for addon in self.addons]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModifierSet":
        variant = data.get("variant")
        flavor = data.get("flavor")
        return cls(
            variant=Variant(variant["id"], variant["name"], variant.get("additional_price", 0)) if variant else None,
            flavor=Flavor(flavor["id"], flavor["name"]) if flavor else None,
            addons=tuple(Addon(a["id"], a["name"], a.get("price", 0)) for a in data.get("addons") or [])
        )
