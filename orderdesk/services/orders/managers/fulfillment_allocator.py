"""FulfillmentAllocator service - SRP compliance."""

import logging
from decimal import Decimal
from typing import Iterable

from orderdesk.domain.models import (
    BranchDomain,
    CatalogSnapshot,
    LineItemDomain,
    OrderDraft,
    ProductVariationDomain,
    ShippingAddressDomain,
)
from orderdesk.services.orders.factories import OrderFactory
from orderdesk.services.orders.resolvers.price_resolver import PriceResolver

logger = logging.getLogger(__name__)


class FulfillmentAllocator:
    """
    Distributes catalog items over the delivery branches of a draft order.

    Responsibilities:
    - Keep one branch per delivery address, never two on the same address
    - Merge repeated additions of a variation into a quantity increment
    - Add, remove and re-address branches while keeping at least one

    Rejected operations leave the draft unchanged and are reported through
    the return value; nothing here raises for a user mistake or does I/O.
    While ``read_only`` is set (a locked order was loaded) every mutation is
    rejected; switching the active branch stays allowed for viewing.
    """

    def __init__(
        self,
        draft: OrderDraft,
        addresses: Iterable[ShippingAddressDomain],
        snapshot: CatalogSnapshot,
        price_resolver: PriceResolver | None = None,
        read_only: bool = False,
    ):
        """
        Initialize with the draft and the customer's read-only data (DIP).

        Args:
            draft: Draft order whose branches are managed
            addresses: Known shipping addresses of the selected customer
            snapshot: Catalog and price memory of the selected customer
            price_resolver: Service proposing opening prices
            read_only: Reject every change to the draft
        """
        self.draft = draft
        self.addresses = ShippingAddressDomain.by_creation(addresses)
        self.snapshot = snapshot
        self.price_resolver = price_resolver or PriceResolver()
        self.read_only = read_only

    # ------------------------------------------------------------------
    # Branches
    # ------------------------------------------------------------------

    def initialize(self) -> BranchDomain | None:
        """
        Start the draft with a single branch on the earliest created address.

        Returns:
            BranchDomain | None: The default branch, or None if the customer has no address
        """
        self.draft.branches = []
        self.draft.active_branch_index = 0

        if not self.addresses:
            logger.warning(f"Customer {self.draft.customer_id} has no shipping address; draft has no branch")
            return None

        branch = OrderFactory.create_branch(self.addresses[0])
        self.draft.branches.append(branch)
        logger.debug(f"Initialized draft with default branch {branch.shipping_address_id}")
        return branch

    @property
    def can_add_branch(self) -> bool:
        return len(self.addresses) > len(self.draft.branches)

    def add_branch(self) -> BranchDomain | None:
        """
        Add a branch on the first address no other branch uses.

        Returns:
            BranchDomain | None: New branch (now active), or None when every address is taken
        """
        if self._locked("add branch"):
            return None
        if not self.can_add_branch:
            logger.info(
                f"Cannot add branch: {len(self.draft.branches)} branches for {len(self.addresses)} addresses"
            )
            return None

        used = self.draft.used_address_ids
        address = next((address for address in self.addresses if address.id not in used), None)
        if address is None:
            # Branches loaded from an older order may point at addresses no longer listed
            logger.info("Cannot add branch: every known address is already used")
            return None

        branch = OrderFactory.create_branch(address)
        self.draft.branches.append(branch)
        self.draft.active_branch_index = len(self.draft.branches) - 1
        logger.debug(f"Added branch for address {address.id}")
        return branch

    def remove_branch(self, branch: BranchDomain) -> bool:
        """
        Remove a branch unless it is the last one.

        Returns:
            bool: True if the branch was removed
        """
        if self._locked("remove branch"):
            return False
        index = self._index_of(branch)
        if len(self.draft.branches) == 1:
            logger.info("Cannot remove the last branch of an order")
            return False

        del self.draft.branches[index]

        active = self.draft.active_branch_index
        if index < active:
            active -= 1
        self.draft.active_branch_index = min(active, len(self.draft.branches) - 1)

        logger.debug(f"Removed branch for address {branch.shipping_address_id}")
        return True

    def set_branch_address(self, branch: BranchDomain, address: ShippingAddressDomain) -> bool:
        """
        Point a branch at another address.

        Returns:
            bool: False if another branch already delivers to that address
        """
        if self._locked("change branch address"):
            return False
        self._index_of(branch)
        if any(other is not branch and other.shipping_address_id == address.id for other in self.draft.branches):
            logger.info(f"Address {address.id} is already used by another branch")
            return False

        branch.shipping_address_id = address.id
        branch.address_name = address.address_name
        return True

    def set_active_branch(self, index: int) -> bool:
        if not 0 <= index < len(self.draft.branches):
            return False
        self.draft.active_branch_index = index
        return True

    def set_shipping_fee(self, branch: BranchDomain, fee: Decimal | int | str) -> bool:
        self._index_of(branch)
        if self._locked("set shipping fee"):
            return False
        branch.set_shipping_fee(fee)
        return True

    def set_delivery_notes(self, branch: BranchDomain, notes: str) -> bool:
        self._index_of(branch)
        if self._locked("set delivery notes"):
            return False
        branch.delivery_notes = notes or ""
        return True

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def add_item(self, branch: BranchDomain, variation: ProductVariationDomain) -> LineItemDomain | None:
        """
        Add one unit of a variation to a branch.

        A variation already in the branch gets its quantity increased by one;
        otherwise a new line item is priced by the resolver and appended.

        Returns:
            LineItemDomain | None: The line item holding the variation, or None if the order is locked
        """
        self._index_of(branch)
        if self._locked("add item"):
            return None

        existing = branch.find_item(variation.id)
        if existing is not None:
            existing.increment()
            logger.debug(f"Variation {variation.id} already in branch; quantity now {existing.quantity}")
            return existing

        price = self.price_resolver.resolve(variation, self.snapshot)
        item = OrderFactory.create_line_item(variation, price)
        branch.items.append(item)
        logger.debug(f"Added variation {variation.id} to branch at {price.unit_price} ({price.source})")
        return item

    def remove_item(self, branch: BranchDomain, item: LineItemDomain) -> bool:
        """
        Remove a line item from a branch.

        Returns:
            bool: True if the item was in the branch
        """
        self._index_of(branch)
        if self._locked("remove item"):
            return False
        for position, candidate in enumerate(branch.items):
            if candidate is item:
                del branch.items[position]
                return True
        return False

    def _locked(self, operation: str) -> bool:
        if self.read_only:
            logger.info(f"Cannot {operation}: order {self.draft.order_number or self.draft.order_id} is read-only")
        return self.read_only

    def _index_of(self, branch: BranchDomain) -> int:
        for index, candidate in enumerate(self.draft.branches):
            if candidate is branch:
                return index
        raise ValueError(f"Branch {branch.shipping_address_id} does not belong to this order")
