"""
Order draft domain model (Aggregate Root).

Represents the in-memory order an operator is composing, grouped by
delivery branch.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from orderdesk.domain.value_objects.discount import Discount, DiscountMode

from .branch import BranchDomain
from .customer import CustomerDomain


class OrderStatus(str, Enum):
    """Lifecycle status of a persisted order."""

    NEW = "new"
    SHIPPING = "shipping"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    """Payment status of a persisted order."""

    PENDING = "pending"
    VERIFYING = "verifying"
    PAID = "paid"
    CANCELLED = "cancelled"


@dataclass
class OrderDraft:
    """
    Domain model representing an order being composed (Aggregate Root).

    A draft is created when a customer is selected and discarded when a
    different customer is picked. When it was loaded from an existing
    order, ``order_id`` and the status fields describe that source order.

    Attributes:
        customer: Selected customer (None until one is picked)
        delivery_date: Requested delivery date
        notes: Notes printed on the order
        internal_notes: Staff-only notes
        order_discount: Order level discount value and mode (amount until toggled)
        branches: Delivery branches in tab order
        active_branch_index: Branch currently focused in the form
        order_id: Source order ID in edit mode
        order_number: Source order number in edit mode
        order_status: Source order status in edit mode (raw value)
        payment_status: Source payment status in edit mode (raw value)
        currency: Currency of computed totals
    """

    customer: CustomerDomain | None = None
    delivery_date: date | None = None
    notes: str = ""
    internal_notes: str = ""
    order_discount: Discount = field(default_factory=lambda: Discount(mode=DiscountMode.AMOUNT))
    branches: list[BranchDomain] = field(default_factory=list)
    active_branch_index: int = 0
    order_id: str | None = None
    order_number: str | None = None
    order_status: str | None = None
    payment_status: str | None = None
    currency: str = "THB"

    @property
    def customer_id(self) -> str | None:
        return self.customer.id if self.customer else None

    @property
    def is_edit(self) -> bool:
        """Check if draft edits an already persisted order."""
        return self.order_id is not None

    @property
    def active_branch(self) -> BranchDomain | None:
        if not self.branches:
            return None
        return self.branches[self.active_branch_index]

    @property
    def used_address_ids(self) -> set[str]:
        return {branch.shipping_address_id for branch in self.branches}

    @property
    def items_count(self) -> int:
        """Get total number of line items across branches."""
        return sum(len(branch.items) for branch in self.branches)

    def find_branch(self, shipping_address_id: str) -> BranchDomain | None:
        return next(
            (branch for branch in self.branches if branch.shipping_address_id == shipping_address_id),
            None,
        )

    def set_order_discount_value(self, value) -> None:
        self.order_discount = Discount(value=value, mode=self.order_discount.mode).clamped()

    def toggle_order_discount_mode(self) -> None:
        self.order_discount = self.order_discount.toggled()

    def reset(self, customer: CustomerDomain | None = None) -> None:
        """Discard everything entered so far, optionally switching customer."""
        self.customer = customer
        self.delivery_date = None
        self.notes = ""
        self.internal_notes = ""
        self.order_discount = Discount(mode=DiscountMode.AMOUNT)
        self.branches = []
        self.active_branch_index = 0
        self.order_id = None
        self.order_number = None
        self.order_status = None
        self.payment_status = None
