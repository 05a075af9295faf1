"""
Branch (fulfillment group) domain model.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from orderdesk.domain.value_objects.money import Money

from .line_item import LineItemDomain

ZERO = Decimal("0")


@dataclass
class BranchDomain:
    """
    One delivery address of an order with the line items shipped to it.

    Attributes:
        shipping_address_id: Address this branch delivers to (unique per order)
        address_name: Address label shown on the branch tab
        delivery_notes: Free-text note for the driver
        shipping_fee: Delivery fee charged for this branch
        items: Line items in display order
        currency: Currency of computed totals
    """

    shipping_address_id: str
    address_name: str = ""
    delivery_notes: str = ""
    shipping_fee: Decimal = ZERO
    items: list[LineItemDomain] = field(default_factory=list)
    currency: str = "THB"

    def __post_init__(self) -> None:
        self.shipping_fee = max(ZERO, Decimal(str(self.shipping_fee)))

    def find_item(self, variation_id: str) -> LineItemDomain | None:
        """Return the line item for a variation, if this branch has one."""
        return next((item for item in self.items if item.variation_id == variation_id), None)

    def set_shipping_fee(self, fee: Decimal | int | str) -> None:
        self.shipping_fee = max(ZERO, Decimal(str(fee)))

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def total(self) -> Money:
        """Sum of line item totals, without shipping."""
        return Money.sum((item.total for item in self.items), currency=self.currency)

    @property
    def shipping_fee_money(self) -> Money:
        return Money(amount=self.shipping_fee, currency=self.currency)

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)
