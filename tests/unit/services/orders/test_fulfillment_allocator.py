"""Unit tests for distributing items over delivery branches."""

from decimal import Decimal

import pytest

from orderdesk.domain.models import BranchDomain, OrderDraft
from orderdesk.services.orders.managers import FulfillmentAllocator


class TestInitialize:
    """Tests for the default branch."""

    def test_default_branch_uses_earliest_address(self, allocator, draft):
        assert len(draft.branches) == 1
        assert draft.branches[0].shipping_address_id == "addr-1"
        assert draft.branches[0].address_name == "Head office"
        assert draft.active_branch_index == 0

    def test_no_addresses_means_no_branch(self, customer, snapshot):
        draft = OrderDraft(customer=customer)
        allocator = FulfillmentAllocator(draft=draft, addresses=[], snapshot=snapshot)

        assert allocator.initialize() is None
        assert draft.branches == []
        assert allocator.add_branch() is None


class TestBranches:
    """Tests for adding, removing and re-addressing branches."""

    def test_add_branch_picks_first_unused_address_by_creation(self, allocator, draft):
        branch = allocator.add_branch()

        assert branch.shipping_address_id == "addr-2"
        assert draft.active_branch_index == 1

    def test_add_branch_is_noop_when_every_address_is_used(self, allocator, draft):
        allocator.add_branch()
        allocator.add_branch()
        before = list(draft.branches)

        assert allocator.can_add_branch is False
        assert allocator.add_branch() is None
        assert draft.branches == before

    def test_remove_last_branch_is_rejected(self, allocator, draft):
        only = draft.branches[0]

        assert allocator.remove_branch(only) is False
        assert draft.branches == [only]

    def test_remove_branch_before_active_shifts_pointer(self, allocator, draft):
        first = draft.branches[0]
        allocator.add_branch()
        third = allocator.add_branch()

        assert allocator.remove_branch(first) is True
        assert draft.active_branch is third
        assert draft.active_branch_index == 1

    def test_remove_active_last_branch_clamps_pointer(self, allocator, draft):
        second = allocator.add_branch()

        assert allocator.remove_branch(second) is True
        assert draft.active_branch_index == 0

    def test_set_branch_address_rejects_used_address(self, allocator, draft, addresses):
        """Two branches may never deliver to the same address."""
        second = allocator.add_branch()
        head_office = next(address for address in addresses if address.id == "addr-1")

        assert allocator.set_branch_address(second, head_office) is False
        assert second.shipping_address_id == "addr-2"
        assert draft.branches[0].shipping_address_id == "addr-1"

    def test_set_branch_address_to_free_address(self, allocator, draft, addresses):
        kiosk = next(address for address in addresses if address.id == "addr-3")

        assert allocator.set_branch_address(draft.branches[0], kiosk) is True
        assert draft.branches[0].shipping_address_id == "addr-3"
        assert draft.branches[0].address_name == "Airport kiosk"

    def test_set_branch_address_to_own_address_is_allowed(self, allocator, draft, addresses):
        head_office = next(address for address in addresses if address.id == "addr-1")

        assert allocator.set_branch_address(draft.branches[0], head_office) is True

    def test_foreign_branch_raises(self, allocator):
        with pytest.raises(ValueError):
            allocator.remove_branch(BranchDomain(shipping_address_id="addr-9"))

    def test_set_active_branch_bounds(self, allocator, draft):
        allocator.add_branch()

        assert allocator.set_active_branch(0) is True
        assert draft.active_branch_index == 0
        assert allocator.set_active_branch(5) is False
        assert draft.active_branch_index == 0

    def test_branch_fee_and_notes(self, allocator, draft):
        branch = draft.branches[0]
        allocator.set_shipping_fee(branch, "-10")
        allocator.set_delivery_notes(branch, "Gate 2")

        assert branch.shipping_fee == Decimal("0")
        assert branch.delivery_notes == "Gate 2"


class TestItems:
    """Tests for adding and removing line items."""

    def test_same_variation_twice_merges_into_quantity(self, allocator, draft, variation):
        branch = draft.branches[0]
        first = allocator.add_item(branch, variation)
        second = allocator.add_item(branch, variation)

        assert first is second
        assert len(branch.items) == 1
        assert branch.items[0].quantity == 2

    def test_new_item_uses_resolved_price(self, allocator, draft, variation):
        item = allocator.add_item(draft.branches[0], variation)

        assert item.unit_price == Decimal("100")
        assert item.discount_value == Decimal("0")
        assert item.product_name == "Orange juice"

    def test_new_item_uses_price_memory(self, allocator, draft, variations):
        lime = variations[2]
        item = allocator.add_item(draft.branches[0], lime)

        assert item.unit_price == Decimal("75")
        assert item.discount_value == Decimal("5")

    def test_same_variation_in_two_branches_is_two_items(self, allocator, draft, variation):
        second = allocator.add_branch()
        allocator.add_item(draft.branches[0], variation)
        allocator.add_item(second, variation)

        assert draft.items_count == 2

    def test_remove_item(self, allocator, draft, variation, variations):
        branch = draft.branches[0]
        orange = allocator.add_item(branch, variation)
        mango = allocator.add_item(branch, variations[1])

        assert allocator.remove_item(branch, orange) is True
        assert branch.items == [mango]
        assert allocator.remove_item(branch, orange) is False


class TestReadOnly:
    """Tests for a draft loaded from a locked order."""

    def test_every_change_is_rejected(self, allocator, draft, variation, addresses):
        branch = draft.branches[0]
        item = allocator.add_item(branch, variation)
        allocator.read_only = True

        assert allocator.add_branch() is None
        assert allocator.remove_branch(branch) is False
        assert allocator.set_branch_address(branch, addresses[0]) is False
        assert allocator.set_shipping_fee(branch, "50") is False
        assert allocator.set_delivery_notes(branch, "Side gate") is False
        assert allocator.add_item(branch, variation) is None
        assert allocator.remove_item(branch, item) is False

        assert len(draft.branches) == 1
        assert branch.items == [item]
        assert item.quantity == 1
        assert branch.shipping_fee == Decimal("0")
        assert branch.delivery_notes == ""

    def test_switching_branches_stays_allowed(self, allocator, draft):
        allocator.add_branch()
        allocator.read_only = True

        assert allocator.set_active_branch(0) is True
        assert draft.active_branch_index == 0
