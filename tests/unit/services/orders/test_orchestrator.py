"""Unit tests for the order entry session."""

import asyncio
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from orderdesk.api.schemas.order_schemas import OrderRead
from orderdesk.services.orders.orchestrator import OrderEntryOrchestrator, create_orchestrator
from orderdesk.utils.error_handler import (
    NotFoundException,
    OrderStoreException,
    OrderValidationException,
    ReadOnlyOrderException,
    SubmissionFailedException,
    SubmissionInProgressException,
)


@pytest.fixture
def orchestrator(mock_store):
    return create_orchestrator(mock_store)


@pytest_asyncio.fixture
async def ready(orchestrator, customer, variation):
    """Session with a customer selected and one item in the default branch."""
    await orchestrator.select_customer(customer)
    orchestrator.draft.delivery_date = date(2026, 11, 2)
    orchestrator.allocator.add_item(orchestrator.draft.branches[0], variation)
    return orchestrator


def stored_from(payload, order_id="ord-1", order_number="SO-1"):
    return OrderRead.from_write(payload, order_id=order_id, order_number=order_number)


class TestSelectCustomer:
    """Tests for starting a draft."""

    @pytest.mark.asyncio
    async def test_select_customer_builds_default_branch(self, orchestrator, mock_store, customer):
        draft = await orchestrator.select_customer(customer)

        mock_store.fetch_shipping_addresses.assert_awaited_once_with("cust-1")
        mock_store.fetch_price_memory.assert_awaited_once_with("cust-1")
        assert isinstance(orchestrator, OrderEntryOrchestrator)
        assert draft.customer is customer
        assert [branch.shipping_address_id for branch in draft.branches] == ["addr-1"]
        assert orchestrator.snapshot.customer_id == "cust-1"
        assert orchestrator.is_read_only is False

    @pytest.mark.asyncio
    async def test_selecting_again_discards_previous_entry(self, ready, customer):
        await ready.select_customer(customer)

        assert ready.draft.items_count == 0
        assert ready.draft.delivery_date is None

    @pytest.mark.asyncio
    async def test_price_memory_is_used(self, orchestrator, customer, variations):
        await orchestrator.select_customer(customer)

        item = orchestrator.allocator.add_item(orchestrator.draft.branches[0], variations[2])

        assert item.unit_price == Decimal("75")


class TestTotals:
    """Tests for session totals."""

    @pytest.mark.asyncio
    async def test_totals_of_current_draft(self, ready):
        ready.allocator.set_shipping_fee(ready.draft.branches[0], "20")

        totals = ready.totals()

        assert totals.grand_total.amount == Decimal("120.00")
        assert totals.pre_vat.amount + totals.vat.amount == Decimal("120.00")


class TestSubmit:
    """Tests for submitting the draft."""

    @pytest.mark.asyncio
    async def test_submit_creates_order_and_adopts_identity(self, ready, mock_store):
        mock_store.create_order.side_effect = lambda payload: stored_from(payload)

        stored = await ready.submit()

        mock_store.create_order.assert_awaited_once()
        mock_store.update_order.assert_not_called()
        assert stored.id == "ord-1"
        assert ready.draft.order_id == "ord-1"
        assert ready.draft.is_edit is True
        assert ready.is_submitting is False

    @pytest.mark.asyncio
    async def test_second_submit_updates(self, ready, mock_store):
        mock_store.create_order.side_effect = lambda payload: stored_from(payload)
        mock_store.update_order.side_effect = lambda order_id, payload: stored_from(payload, order_id=order_id)

        await ready.submit()
        await ready.submit()

        mock_store.create_order.assert_awaited_once()
        assert mock_store.update_order.await_args.args[0] == "ord-1"

    @pytest.mark.asyncio
    async def test_invalid_draft_is_not_sent(self, ready, mock_store):
        ready.draft.delivery_date = None

        with pytest.raises(OrderValidationException) as exc_info:
            await ready.submit()

        assert "delivery_date" in exc_info.value.field_errors
        mock_store.create_order.assert_not_called()
        assert ready.is_submitting is False

    @pytest.mark.asyncio
    async def test_store_failure_keeps_draft(self, ready, mock_store):
        """A failed submit leaves everything in place for a retry."""
        mock_store.create_order.side_effect = OrderStoreException("HTTP 503", status_code=503, endpoint="/orders")
        branches_before = list(ready.draft.branches)
        quantity_before = ready.draft.branches[0].items[0].quantity

        with pytest.raises(SubmissionFailedException) as exc_info:
            await ready.submit()

        assert exc_info.value.is_retryable is True
        assert exc_info.value.operation == "create_order"
        assert isinstance(exc_info.value.__cause__, OrderStoreException)
        assert ready.draft.branches == branches_before
        assert ready.draft.branches[0].items[0].quantity == quantity_before
        assert ready.draft.order_id is None
        assert ready.is_submitting is False

    @pytest.mark.asyncio
    async def test_concurrent_submit_is_rejected(self, ready, mock_store):
        release = asyncio.Event()

        async def slow_create(payload):
            await release.wait()
            return stored_from(payload)

        mock_store.create_order = AsyncMock(side_effect=slow_create)

        first = asyncio.create_task(ready.submit())
        await asyncio.sleep(0)
        assert ready.is_submitting is True

        with pytest.raises(SubmissionInProgressException):
            await ready.submit()

        release.set()
        await first
        mock_store.create_order.assert_awaited_once()
        assert ready.is_submitting is False


class TestLoadAndDuplicate:
    """Tests for rebuilding the draft from stored orders."""

    @pytest.mark.asyncio
    async def test_load_shipping_order_is_read_only(self, orchestrator, mock_store, persisted_order):
        mock_store.get_order.return_value = persisted_order.model_copy(update={"order_status": "shipping"})

        draft = await orchestrator.load_order("ord-100")

        assert draft.order_id == "ord-100"
        assert orchestrator.is_read_only is True
        assert orchestrator.decision.reason.value == "order status"
        assert orchestrator.allocator.add_branch() is None
        assert orchestrator.allocator.remove_branch(draft.branches[0]) is False

        with pytest.raises(ReadOnlyOrderException):
            await orchestrator.submit()
        mock_store.update_order.assert_not_called()

    @pytest.mark.asyncio
    async def test_load_fetches_customer_context(self, orchestrator, mock_store, persisted_order):
        mock_store.get_order.return_value = persisted_order

        await orchestrator.load_order("ord-100")

        mock_store.fetch_shipping_addresses.assert_awaited_once_with("cust-1")
        assert orchestrator.is_read_only is False
        assert orchestrator.allocator.draft is orchestrator.draft
        assert orchestrator.allocator.read_only is False

    @pytest.mark.asyncio
    async def test_load_editable_order_submits_as_update(self, orchestrator, mock_store, persisted_order):
        mock_store.get_order.return_value = persisted_order
        mock_store.update_order.side_effect = lambda order_id, payload: stored_from(payload, order_id=order_id)

        await orchestrator.load_order("ord-100")
        await orchestrator.submit()

        assert mock_store.update_order.await_args.args[0] == "ord-100"

    @pytest.mark.asyncio
    async def test_missing_order_leaves_draft_unchanged(self, ready):
        draft_before = ready.draft

        with pytest.raises(NotFoundException):
            await ready.load_order("ord-404")

        assert ready.draft is draft_before
        assert ready.draft.items_count == 1

    @pytest.mark.asyncio
    async def test_duplicate_latest_for_selected_customer(self, ready, mock_store, persisted_order, customer):
        mock_store.get_latest_order.return_value = persisted_order

        draft = await ready.duplicate_latest()

        assert draft.customer is customer
        assert draft.order_id is None
        assert draft.delivery_date == date(2026, 10, 20)
        assert ready.allocator.draft is draft
        assert ready.is_read_only is False
