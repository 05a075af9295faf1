"""
OrderEntryOrchestrator - Main coordinator of one order entry session (SOLID compliant).

This orchestrator follows:
- SRP: Only coordinates the entry flow (select, rebuild, submit)
- OCP: Open for extension via new services
- DIP: Depends on abstractions (interfaces), not concrete implementations
"""

import asyncio
import logging

from orderdesk.api.schemas.order_schemas import OrderRead
from orderdesk.core.logging_config import LogContext
from orderdesk.domain.models import CatalogSnapshot, CustomerDomain, OrderDraft, ShippingAddressDomain
from orderdesk.services.orders.converters import OrderConverter
from orderdesk.services.orders.interfaces import IOrderConverter, IOrderStore, IOrderValidator
from orderdesk.services.orders.managers import FulfillmentAllocator
from orderdesk.services.orders.reconstructor import OrderReconstructor
from orderdesk.services.orders.resolvers.price_resolver import PriceResolver
from orderdesk.services.orders.totals import OrderTotals, OrderTotalsEngine
from orderdesk.services.orders.validators import MutabilityDecision, MutabilityGate, OrderValidator
from orderdesk.utils.error_handler import (
    OrderStoreException,
    ReadOnlyOrderException,
    SubmissionFailedException,
    SubmissionInProgressException,
    ValidationException,
    log_error,
)

logger = logging.getLogger(__name__)


class OrderEntryOrchestrator:
    """
    Owns the draft of one editing session and coordinates the services around it.

    The draft is mutated synchronously through ``allocator``; the only
    suspension points are the store calls made while selecting a customer,
    rebuilding an order and submitting. Submission is serialized by an
    in-progress flag, and every failure leaves the draft untouched.
    """

    def __init__(
        self,
        store: IOrderStore,
        validator: IOrderValidator,
        converter: IOrderConverter,
        totals_engine: OrderTotalsEngine,
        gate: MutabilityGate,
        price_resolver: PriceResolver | None = None,
    ):
        """
        Initialize orchestrator with service dependencies (DIP).

        Args:
            store: External order storage service
            validator: Service for draft validation
            converter: Service for draft <-> record conversion
            totals_engine: Service computing order totals
            gate: Service deciding whether a loaded order is editable
            price_resolver: Service proposing opening prices
        """
        self.store = store
        self.validator = validator
        self.converter = converter
        self.totals_engine = totals_engine
        self.gate = gate
        self.price_resolver = price_resolver or PriceResolver()
        self.reconstructor = OrderReconstructor(store=store, converter=converter)

        self.draft = OrderDraft(currency=totals_engine.currency)
        self.addresses: list[ShippingAddressDomain] = []
        self.snapshot = CatalogSnapshot()
        self.allocator = self._new_allocator()
        self.decision = MutabilityDecision(editable=True)
        self._submitting = False

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    @property
    def is_read_only(self) -> bool:
        return self.decision.read_only

    def _new_allocator(self) -> FulfillmentAllocator:
        return FulfillmentAllocator(
            draft=self.draft,
            addresses=self.addresses,
            snapshot=self.snapshot,
            price_resolver=self.price_resolver,
        )

    async def _load_customer_context(self, customer_id: str) -> tuple[list[ShippingAddressDomain], CatalogSnapshot]:
        """Fetch addresses, catalog and price memory of a customer concurrently."""
        addresses, variations, price_memory = await asyncio.gather(
            self.store.fetch_shipping_addresses(customer_id),
            self.store.fetch_variations(),
            self.store.fetch_price_memory(customer_id),
        )
        snapshot = CatalogSnapshot.build(customer_id, variations, price_memory)
        logger.debug(
            f"Loaded context for customer {customer_id}: {len(addresses)} address(es), "
            f"{len(snapshot.variations)} variation(s), {len(snapshot.price_memory)} remembered price(s)"
        )
        return addresses, snapshot

    def _adopt(self, draft: OrderDraft, addresses: list[ShippingAddressDomain], snapshot: CatalogSnapshot) -> None:
        self.draft = draft
        self.addresses = addresses
        self.snapshot = snapshot
        self.allocator = self._new_allocator()

    async def select_customer(self, customer: CustomerDomain) -> OrderDraft:
        """
        Start a fresh draft for a customer.

        Anything entered for the previous customer is discarded. The draft
        starts with one branch on the customer's earliest address.

        Returns:
            OrderDraft: The new draft
        """
        addresses, snapshot = await self._load_customer_context(customer.id)

        draft = OrderDraft(customer=customer, currency=self.totals_engine.currency)
        self._adopt(draft, addresses, snapshot)
        self.allocator.initialize()
        self.decision = MutabilityDecision(editable=True)

        logger.info(f"Started draft for customer {customer.display_name} ({customer.id})")
        return self.draft

    async def duplicate_latest(self) -> OrderDraft:
        """
        Replace the draft with a copy of the selected customer's latest order.

        Raises:
            ValidationException: If no customer is selected
            NotFoundException: If the customer has no order
            EmptyResultException: If that order has nothing to copy
        """
        customer = self.draft.customer
        if customer is None:
            raise ValidationException(message="Select a customer before copying an order", field="customer")

        draft = await self.reconstructor.duplicate_latest(customer.id)
        draft.customer = customer
        self._adopt(draft, self.addresses, self.snapshot)
        self.decision = MutabilityDecision(editable=True)
        return self.draft

    async def load_order(self, order_id: str) -> OrderDraft:
        """
        Replace the draft with an existing order opened for editing.

        The mutability decision is recomputed from the order's statuses; a
        locked order can be viewed but neither changed through the allocator
        nor submitted.

        Raises:
            NotFoundException: If the order does not exist
            EmptyResultException: If the order has nothing to rebuild
        """
        draft = await self.reconstructor.load_for_edit(order_id)

        addresses, snapshot = self.addresses, self.snapshot
        if draft.customer_id and draft.customer_id != self.snapshot.customer_id:
            addresses, snapshot = await self._load_customer_context(draft.customer_id)

        self._adopt(draft, addresses, snapshot)
        self.decision = self.gate.evaluate(draft.order_status, draft.payment_status, draft.order_number)
        self.allocator.read_only = self.decision.read_only
        if self.decision.read_only:
            logger.info(self.decision.message)
        return self.draft

    def totals(self) -> OrderTotals:
        """Compute the totals of the current draft."""
        return self.totals_engine.calculate(self.draft)

    async def submit(self) -> OrderRead:
        """
        Validate, flatten and store the draft.

        Creates a new order, or replaces the source order when the draft
        edits one. On success the draft takes over the stored identity so a
        later submit updates instead of creating a second order.

        Returns:
            OrderRead: The stored order

        Raises:
            SubmissionInProgressException: If a submit is already running
            ReadOnlyOrderException: If the loaded order is locked
            OrderValidationException: If the draft is not submittable
            SubmissionFailedException: If the store call fails
        """
        if self._submitting:
            raise SubmissionInProgressException()

        self._submitting = True
        try:
            if self.decision.read_only:
                raise ReadOnlyOrderException(message=self.decision.message, reason=self.decision.reason.value)

            draft = self.validator.validate(self.draft)
            payload = self.converter.to_persisted(draft)
            operation = "update_order" if draft.is_edit else "create_order"

            with LogContext(customer_id=draft.customer_id, order_id=draft.order_id, operation=operation):
                try:
                    if draft.is_edit:
                        stored = await self.store.update_order(draft.order_id, payload)
                    else:
                        stored = await self.store.create_order(payload)
                except OrderStoreException as e:
                    log_error(e, context={"endpoint": e.endpoint})
                    raise SubmissionFailedException(
                        message=f"Could not save the order: {e.message}",
                        operation=operation,
                        order_id=draft.order_id,
                    ) from e

            draft.order_id = stored.id
            draft.order_number = stored.order_number
            draft.order_status = stored.order_status
            draft.payment_status = stored.payment_status

            totals = self.totals_engine.calculate(draft)
            logger.info(
                f"Submitted order {stored.order_number or stored.id} ({operation}) for customer "
                f"{draft.customer_id}: {len(payload.items)} item(s), grand total {totals.grand_total}"
            )
            return stored
        finally:
            self._submitting = False


# Factory function to create orchestrator with all dependencies
def create_orchestrator(store: IOrderStore) -> OrderEntryOrchestrator:
    """
    Factory function to create a fully initialized orchestrator.

    Args:
        store: Order store client (usually an initialized OrderStoreClient)

    Returns:
        OrderEntryOrchestrator: Fully configured orchestrator
    """
    return OrderEntryOrchestrator(
        store=store,
        validator=OrderValidator(),
        converter=OrderConverter(),
        totals_engine=OrderTotalsEngine(),
        gate=MutabilityGate(),
    )
