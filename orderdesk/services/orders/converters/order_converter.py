"""OrderConverter service - converts between draft orders and store records (SRP)."""

import logging

from orderdesk.api.schemas.order_schemas import (
    OrderItemWrite,
    OrderRead,
    OrderWritePayload,
    ShipmentRecord,
)
from orderdesk.core.config import get_settings
from orderdesk.domain.models import BranchDomain, CustomerDomain, LineItemDomain, OrderDraft
from orderdesk.domain.value_objects import Discount
from orderdesk.services.orders.factories import OrderFactory
from orderdesk.utils.error_handler import ValidationException

logger = logging.getLogger(__name__)


class OrderConverter:
    """
    Two-way mapping between the grouped draft and the flat persisted order.

    ``to_persisted`` writes one order item per line item, each with a single
    shipment to its branch. ``from_persisted`` groups shipments back into
    branches by address. Both directions are pure: no I/O, no mutation of
    their input.
    """

    def to_persisted(self, draft: OrderDraft) -> OrderWritePayload:
        """
        Flatten a draft into the store's write shape.

        Args:
            draft: Draft order (should already have passed validation)

        Returns:
            OrderWritePayload: Order body for create, or update when the draft edits an order

        Raises:
            ValidationException: If the draft has no customer
        """
        if draft.customer is None:
            raise ValidationException(message="Customer is required", field="customer")

        items = [
            self._to_item(branch, item)
            for branch in draft.branches
            for item in branch.items
        ]

        return OrderWritePayload(
            id=draft.order_id,
            customer_id=draft.customer.id,
            delivery_date=draft.delivery_date,
            notes=draft.notes or None,
            internal_notes=draft.internal_notes or None,
            order_discount_amount=draft.order_discount.value,
            order_discount_mode=draft.order_discount.mode,
            items=items,
        )

    def _to_item(self, branch: BranchDomain, item: LineItemDomain) -> OrderItemWrite:
        return OrderItemWrite(
            variation_id=item.variation_id,
            product_id=item.product_id or None,
            product_code=item.product_code or None,
            product_name=item.product_name or None,
            bottle_size=item.bottle_size or None,
            quantity=item.quantity,
            unit_price=item.unit_price,
            discount_value=item.discount.value,
            discount_mode=item.discount.mode,
            shipments=[
                ShipmentRecord(
                    shipping_address_id=branch.shipping_address_id,
                    quantity=item.quantity,
                    shipping_fee=branch.shipping_fee,
                    delivery_notes=branch.delivery_notes,
                )
            ],
        )

    def from_persisted(self, order: OrderRead) -> OrderDraft:
        """
        Group a persisted order's shipments back into branches.

        Branches appear in the order their address is first seen. A branch
        takes its name, fee and delivery note from that first shipment. When
        a variation shows up again for an address that already has it, the
        later shipment is dropped: the first one wins.

        Args:
            order: Persisted order

        Returns:
            OrderDraft: Draft carrying the source order's identity and status.
                It has no branches when the order had nothing to rebuild.
        """
        branches: dict[str, BranchDomain] = {}

        for item in order.items:
            for shipment in item.shipments:
                branch = branches.get(shipment.shipping_address_id)
                if branch is None:
                    address_name = shipment.shipping_address.address_name if shipment.shipping_address else None
                    branch = OrderFactory.create_branch_from_shipment(
                        shipping_address_id=shipment.shipping_address_id,
                        address_name=address_name,
                        shipping_fee=shipment.shipping_fee,
                        delivery_notes=shipment.delivery_notes,
                    )
                    branches[shipment.shipping_address_id] = branch

                if branch.find_item(item.variation_id) is not None:
                    logger.debug(
                        f"Order {order.id}: dropping repeated shipment of variation {item.variation_id} "
                        f"to address {shipment.shipping_address_id} (qty {shipment.quantity})"
                    )
                    continue

                branch.items.append(
                    OrderFactory.create_line_item_from_record(
                        variation_id=item.variation_id,
                        quantity=shipment.quantity,
                        unit_price=item.unit_price,
                        discount_value=item.discount_value,
                        discount_mode=item.discount_mode,
                        product_id=item.product_id,
                        product_code=item.product_code,
                        product_name=item.product_name,
                        bottle_size=item.bottle_size,
                    )
                )

        return OrderDraft(
            customer=self._customer_of(order),
            delivery_date=order.delivery_date,
            notes=order.notes or "",
            internal_notes=order.internal_notes or "",
            order_discount=Discount(value=order.order_discount_amount, mode=order.order_discount_mode),
            branches=list(branches.values()),
            order_id=order.id,
            order_number=order.order_number,
            order_status=order.order_status,
            payment_status=order.payment_status,
            currency=get_settings().CURRENCY,
        )

    @staticmethod
    def _customer_of(order: OrderRead) -> CustomerDomain | None:
        if order.customer and order.customer.get("id"):
            return CustomerDomain.from_dict(order.customer)
        if order.customer_id:
            return CustomerDomain(id=order.customer_id, name="")
        return None
