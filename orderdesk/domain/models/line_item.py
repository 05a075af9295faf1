"""
Line item domain model (the line item ledger).

Represents one catalog line inside a branch with its own pricing rules.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from orderdesk.domain.value_objects.discount import Discount, DiscountMode
from orderdesk.domain.value_objects.money import Money

ZERO = Decimal("0")


@dataclass
class LineItemDomain:
    """
    Domain model representing one ordered variation within a branch.

    Setters clamp their input instead of raising, so a line item always
    satisfies quantity >= 1, unit price >= 0 and a discount inside the
    range its mode allows.

    Attributes:
        variation_id: Catalog variation ID
        product_id: Parent product ID (copied for display and audit)
        product_code: Product code (copied for display and audit)
        product_name: Product name (copied for display and audit)
        bottle_size: Unit size label
        quantity: Units ordered
        unit_price: Price per unit
        discount: Per-line discount value and mode
        currency: Currency of computed totals
    """

    variation_id: str
    product_id: str = ""
    product_code: str = ""
    product_name: str = ""
    bottle_size: str = ""
    quantity: int = 1
    unit_price: Decimal = ZERO
    discount: Discount = field(default_factory=Discount)
    currency: str = "THB"

    def __post_init__(self) -> None:
        """Normalize numeric input after initialization."""
        if not self.variation_id:
            raise ValueError("Variation ID is required")

        self.quantity = max(1, int(self.quantity))
        self.unit_price = max(ZERO, Decimal(str(self.unit_price)))
        self.discount = self.discount.clamped()

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def set_quantity(self, quantity: int) -> None:
        self.quantity = max(1, int(quantity))

    def increment(self, by: int = 1) -> None:
        """Add units, as when the same variation is picked again."""
        self.set_quantity(self.quantity + by)

    def set_unit_price(self, price: Decimal | int | str) -> None:
        self.unit_price = max(ZERO, Decimal(str(price)))

    def set_discount_value(self, value: Decimal | int | str) -> None:
        self.discount = Discount(value=Decimal(str(value)), mode=self.discount.mode).clamped()

    def toggle_discount_mode(self) -> None:
        self.discount = self.discount.toggled()

    @property
    def discount_value(self) -> Decimal:
        return self.discount.value

    @property
    def discount_mode(self) -> DiscountMode:
        return self.discount.mode

    # ------------------------------------------------------------------
    # Computed totals (full precision)
    # ------------------------------------------------------------------

    @property
    def subtotal(self) -> Money:
        """Quantity times unit price."""
        return Money(amount=self.unit_price * self.quantity, currency=self.currency)

    @property
    def discount_amount(self) -> Money:
        """Discount taken off the subtotal."""
        return Money(amount=self.discount.amount_for(self.subtotal.amount), currency=self.currency)

    @property
    def total(self) -> Money:
        """Subtotal minus discount. Not floored at zero."""
        return self.subtotal - self.discount_amount

    @property
    def has_discount(self) -> bool:
        return not self.discount.is_zero

    def to_dict(self) -> dict[str, Any]:
        """Convert line item to dictionary for display."""
        return {
            "variation_id": self.variation_id,
            "product_id": self.product_id,
            "product_code": self.product_code,
            "product_name": self.product_name,
            "bottle_size": self.bottle_size,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "discount_value": self.discount.value,
            "discount_mode": self.discount.mode.value,
            "subtotal": self.subtotal.rounded().amount,
            "total": self.total.rounded().amount,
        }
