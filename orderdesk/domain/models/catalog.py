"""
Catalog domain models: product variations and customer price memory.

Both are read-only snapshots fetched when a customer is selected and
handed to the pricing resolver explicitly.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Iterable, Mapping


def _to_decimal(value: Any, default: str = "0") -> Decimal:
    if value is None or value == "":
        return Decimal(default)
    return Decimal(str(value))


@dataclass(frozen=True)
class ProductVariationDomain:
    """
    A sellable catalog variation (one bottle size of one product).

    Attributes:
        id: Variation ID
        product_id: Parent product ID
        code: Product code shown to staff
        name: Display name
        bottle_size: Unit size label (e.g. "250ml")
        default_price: Regular unit price
        discount_price: Optional promotional unit price
        stock: Units on hand, informational only
    """

    id: str
    product_id: str
    code: str
    name: str
    default_price: Decimal
    bottle_size: str = ""
    discount_price: Decimal | None = None
    stock: int = 0

    @property
    def has_discount_price(self) -> bool:
        """Check if variation defines a usable promotional price."""
        return self.discount_price is not None and self.discount_price > 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProductVariationDomain":
        """Create variation from dictionary."""
        discount_price = data.get("discount_price")
        return cls(
            id=str(data["id"]),
            product_id=str(data.get("product_id") or ""),
            code=data.get("code") or "",
            name=data.get("name") or "",
            bottle_size=data.get("bottle_size") or "",
            default_price=_to_decimal(data.get("default_price")),
            discount_price=_to_decimal(discount_price) if discount_price is not None else None,
            stock=int(data.get("stock") or 0),
        )


@dataclass(frozen=True)
class PriceMemoryEntry:
    """Last unit price and percent discount a customer paid for a variation."""

    unit_price: Decimal
    discount_percent: Decimal = Decimal("0")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PriceMemoryEntry":
        return cls(
            unit_price=_to_decimal(data.get("unit_price")),
            discount_percent=_to_decimal(data.get("discount_percent")),
        )


@dataclass(frozen=True)
class CatalogSnapshot:
    """
    Read-only catalog and price memory for one customer selection.

    Attributes:
        customer_id: Customer the price memory belongs to
        variations: Variations keyed by ID
        price_memory: Remembered prices keyed by variation ID
    """

    customer_id: str | None = None
    variations: Mapping[str, ProductVariationDomain] = field(default_factory=dict)
    price_memory: Mapping[str, PriceMemoryEntry] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "variations", MappingProxyType(dict(self.variations)))
        object.__setattr__(self, "price_memory", MappingProxyType(dict(self.price_memory)))

    def get_variation(self, variation_id: str) -> ProductVariationDomain | None:
        return self.variations.get(variation_id)

    def remembered_price(self, variation_id: str) -> PriceMemoryEntry | None:
        return self.price_memory.get(variation_id)

    @classmethod
    def build(
        cls,
        customer_id: str | None,
        variations: Iterable[ProductVariationDomain],
        price_memory: Mapping[str, PriceMemoryEntry] | None = None,
    ) -> "CatalogSnapshot":
        """Create a snapshot from a variation list and a price memory mapping."""
        return cls(
            customer_id=customer_id,
            variations={variation.id: variation for variation in variations},
            price_memory=dict(price_memory or {}),
        )
