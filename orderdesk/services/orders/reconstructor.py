"""OrderReconstructor service - rebuilds drafts from stored orders (SRP)."""

import logging

from orderdesk.api.schemas.order_schemas import OrderRead
from orderdesk.domain.models import OrderDraft
from orderdesk.services.orders.interfaces import IOrderConverter, IOrderStore
from orderdesk.utils.error_handler import EmptyResultException, NotFoundException

logger = logging.getLogger(__name__)


class OrderReconstructor:
    """
    Loads a stored order and turns it into an editable draft.

    Two flavours:
    - duplicate: the customer's latest order becomes the start of a new one
    - edit: a specific order is opened keeping its identity and status
    """

    def __init__(self, store: IOrderStore, converter: IOrderConverter):
        self.store = store
        self.converter = converter

    async def duplicate_latest(self, customer_id: str) -> OrderDraft:
        """
        Build a new draft from the customer's most recent order.

        The draft has no order identity, so submitting it creates a new
        order. Notes, discounts and the delivery date are copied as stored.

        Raises:
            NotFoundException: If the customer has no order
            EmptyResultException: If that order has nothing to copy
        """
        order = await self.store.get_latest_order(customer_id)
        if order is None:
            raise NotFoundException(
                message=f"Customer {customer_id} has no previous order",
                resource="order",
                resource_id=customer_id,
            )

        draft = self._rebuild(order)
        draft.order_id = None
        draft.order_number = None
        draft.order_status = None
        draft.payment_status = None

        logger.info(
            f"Duplicated order {order.order_number or order.id} for customer {customer_id}: "
            f"{len(draft.branches)} branch(es), {draft.items_count} item(s)"
        )
        return draft

    async def load_for_edit(self, order_id: str) -> OrderDraft:
        """
        Build a draft that edits an existing order.

        Raises:
            NotFoundException: If the order does not exist
            EmptyResultException: If the order has nothing to rebuild
        """
        order = await self.store.get_order(order_id)
        if order is None:
            raise NotFoundException(message=f"Order {order_id} not found", resource="order", resource_id=order_id)

        draft = self._rebuild(order)
        logger.info(f"Loaded order {order.order_number or order.id} for editing ({order.order_status})")
        return draft

    def _rebuild(self, order: OrderRead) -> OrderDraft:
        draft = self.converter.from_persisted(order)
        if not draft.branches:
            raise EmptyResultException(order_id=order.id)
        return draft
