"""
MutabilityGate - decides whether a persisted order may still be edited.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from orderdesk.domain.models import OrderStatus, PaymentStatus

logger = logging.getLogger(__name__)

ORDER_STATUS_LABELS = {
    OrderStatus.NEW.value: "New",
    OrderStatus.SHIPPING.value: "Shipping",
    OrderStatus.COMPLETED.value: "Completed",
    OrderStatus.CANCELLED.value: "Cancelled",
}

PAYMENT_STATUS_LABELS = {
    PaymentStatus.PENDING.value: "Pending payment",
    PaymentStatus.VERIFYING.value: "Verifying payment",
    PaymentStatus.PAID.value: "Paid",
    PaymentStatus.CANCELLED.value: "Cancelled",
}


class ReadOnlyReason(str, Enum):
    """Which condition locked the order."""

    ORDER_STATUS = "order status"
    PAYMENT_STATUS = "payment status"


@dataclass(frozen=True)
class MutabilityDecision:
    """
    Result of the mutability check.

    Attributes:
        editable: True when inputs and submission are allowed
        reason: Failing condition, None when editable
        message: Human readable explanation, empty when editable
    """

    editable: bool
    reason: ReadOnlyReason | None = None
    message: str = ""

    @property
    def read_only(self) -> bool:
        return not self.editable


class MutabilityGate:
    """
    An order is editable only while it is ``new`` and its payment is ``pending``.

    This is a pure predicate: status changes happen in the order lifecycle
    system, never here. Unknown status values are treated as locking and
    reported verbatim.
    """

    def evaluate(
        self,
        order_status: OrderStatus | str | None,
        payment_status: PaymentStatus | str | None,
        order_number: str | None = None,
    ) -> MutabilityDecision:
        """
        Decide whether an order may be edited.

        Args:
            order_status: Order lifecycle status
            payment_status: Payment status (missing means pending)
            order_number: Used in the message when given

        Returns:
            MutabilityDecision: Editable flag with the reason it is not
        """
        status = self._raw(order_status)
        payment = self._raw(payment_status) or PaymentStatus.PENDING.value
        subject = f"Order {order_number}" if order_number else "Order"

        if status != OrderStatus.NEW.value:
            label = ORDER_STATUS_LABELS.get(status, status)
            decision = MutabilityDecision(
                editable=False,
                reason=ReadOnlyReason.ORDER_STATUS,
                message=f'{subject} cannot be edited (order status "{label}")',
            )
        elif payment != PaymentStatus.PENDING.value:
            label = PAYMENT_STATUS_LABELS.get(payment, payment)
            decision = MutabilityDecision(
                editable=False,
                reason=ReadOnlyReason.PAYMENT_STATUS,
                message=f'{subject} cannot be edited (payment status "{label}")',
            )
        else:
            decision = MutabilityDecision(editable=True)

        if decision.read_only:
            logger.debug(decision.message)
        return decision

    @staticmethod
    def _raw(status: Enum | str | None) -> str:
        if isinstance(status, Enum):
            return str(status.value)
        return status or ""
