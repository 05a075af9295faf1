"""
OrderTotalsEngine - aggregates branch totals, discounts, shipping and VAT.

Every intermediate value keeps full Decimal precision; rounding to two
decimals (half-up) happens once, when the totals snapshot is built.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable

from orderdesk.api.schemas.order_schemas import OrderRead
from orderdesk.core.config import get_settings
from orderdesk.domain.models import BranchDomain, OrderDraft
from orderdesk.domain.value_objects import Discount, Money, round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderTotals:
    """
    Rounded totals of an order, ready for display or persistence.

    ``grand_total`` includes VAT; ``pre_vat + vat == grand_total`` holds exactly.
    """

    items_total: Money
    order_discount_amount: Money
    shipping_total: Money
    grand_total: Money
    pre_vat: Money
    vat: Money
    branch_totals: dict[str, Money] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "items_total": self.items_total.amount,
            "order_discount_amount": self.order_discount_amount.amount,
            "shipping_total": self.shipping_total.amount,
            "grand_total": self.grand_total.amount,
            "pre_vat": self.pre_vat.amount,
            "vat": self.vat.amount,
            "branch_totals": {key: value.amount for key, value in self.branch_totals.items()},
        }


class OrderTotalsEngine:
    """Computes order totals (SRP: Arithmetic only)."""

    def __init__(self, vat_rate: Decimal | None = None, currency: str | None = None):
        """
        Initialize with the VAT rate and currency.

        Args:
            vat_rate: VAT fraction included in the grand total (defaults to settings.VAT_RATE)
            currency: Currency of computed totals (defaults to settings.CURRENCY)
        """
        settings = get_settings()
        self.vat_rate = Decimal(str(vat_rate)) if vat_rate is not None else settings.VAT_RATE
        self.currency = currency or settings.CURRENCY

    def branch_total(self, branch: BranchDomain) -> Money:
        """Sum of the branch's line item totals."""
        return Money.sum((item.total for item in branch.items), currency=self.currency)

    def items_total(self, branches: Iterable[BranchDomain]) -> Money:
        return Money.sum((self.branch_total(branch) for branch in branches), currency=self.currency)

    def shipping_total(self, branches: Iterable[BranchDomain]) -> Money:
        return Money.sum((branch.shipping_fee_money for branch in branches), currency=self.currency)

    def order_discount_amount(self, items_total: Money, discount: Discount) -> Money:
        """Order discount computed on the items total (before shipping)."""
        return Money(amount=discount.amount_for(items_total.amount), currency=self.currency)

    def extract_vat(self, grand_total: Money) -> tuple[Money, Money]:
        """
        Split a VAT-inclusive total into its pre-VAT part and the VAT.

        The unrounded total is divided, the pre-VAT part is rounded half-up to
        two decimals and the VAT is the rounded remainder. Since the pre-VAT
        part is a whole number of cents, both add back up to the rounded
        grand total.

        Example:
            >>> engine = OrderTotalsEngine(vat_rate=Decimal("0.07"), currency="THB")
            >>> pre_vat, vat = engine.extract_vat(Money(Decimal("276.50")))
            >>> pre_vat.amount, vat.amount
            (Decimal('258.41'), Decimal('18.09'))
        """
        pre_vat = round_half_up(grand_total.amount / (Decimal("1") + self.vat_rate))
        vat = round_half_up(grand_total.amount - pre_vat)
        return Money(pre_vat, self.currency), Money(vat, self.currency)

    def calculate(self, draft: OrderDraft) -> OrderTotals:
        """
        Compute the totals of a draft order.

        Args:
            draft: Draft order

        Returns:
            OrderTotals: Rounded totals
        """
        branch_totals = {branch.shipping_address_id: self.branch_total(branch) for branch in draft.branches}
        items_total = Money.sum(branch_totals.values(), currency=self.currency)
        shipping_total = self.shipping_total(draft.branches)
        discount = self.order_discount_amount(items_total, draft.order_discount)

        return self._build(items_total, discount, shipping_total, branch_totals)

    def calculate_persisted(self, order: OrderRead) -> OrderTotals:
        """
        Compute the totals of a persisted order.

        The store repeats a branch's fee on every shipment to that address,
        so each address's fee is counted once (first shipment wins).

        Args:
            order: Persisted order

        Returns:
            OrderTotals: Rounded totals
        """
        items_total = Money.zero(self.currency)
        fees: dict[str, Decimal] = {}

        for item in order.items:
            subtotal = item.unit_price * item.quantity
            item_discount = Discount(value=item.discount_value, mode=item.discount_mode).amount_for(subtotal)
            items_total = items_total + Money(subtotal - item_discount, self.currency)

            for shipment in item.shipments:
                fees.setdefault(shipment.shipping_address_id, shipment.shipping_fee)

        shipping_total = Money.sum((Money(fee, self.currency) for fee in fees.values()), currency=self.currency)
        discount = self.order_discount_amount(
            items_total, Discount(value=order.order_discount_amount, mode=order.order_discount_mode)
        )
        return self._build(items_total, discount, shipping_total, {})

    def _build(
        self,
        items_total: Money,
        discount: Money,
        shipping_total: Money,
        branch_totals: dict[str, Money],
    ) -> OrderTotals:
        grand_total = items_total - discount + shipping_total
        if grand_total.is_negative:
            # Discounts are not capped at the amount they apply to
            logger.warning(
                f"Order grand total is negative ({grand_total.amount}): "
                f"items={items_total.amount}, discount={discount.amount}, shipping={shipping_total.amount}"
            )

        pre_vat, vat = self.extract_vat(grand_total)
        return OrderTotals(
            items_total=items_total.rounded(),
            order_discount_amount=discount.rounded(),
            shipping_total=shipping_total.rounded(),
            grand_total=pre_vat + vat,
            pre_vat=pre_vat,
            vat=vat,
            branch_totals={key: value.rounded() for key, value in branch_totals.items()},
        )
