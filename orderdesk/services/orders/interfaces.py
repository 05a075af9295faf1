"""
Interfaces/Protocols for order services (Dependency Inversion Principle).

These protocols define contracts that services must implement,
allowing for loose coupling and easy testing.
"""

from typing import Protocol

from orderdesk.api.schemas.order_schemas import OrderRead, OrderWritePayload
from orderdesk.domain.models import (
    OrderDraft,
    PriceMemoryEntry,
    ProductVariationDomain,
    ShippingAddressDomain,
)


class IOrderStore(Protocol):
    """Protocol for the external order storage service."""

    async def fetch_variations(self) -> list[ProductVariationDomain]:
        """Fetch the product catalog."""
        ...

    async def fetch_price_memory(self, customer_id: str) -> dict[str, PriceMemoryEntry]:
        """Fetch remembered prices keyed by variation ID."""
        ...

    async def fetch_shipping_addresses(self, customer_id: str) -> list[ShippingAddressDomain]:
        """Fetch a customer's shipping addresses."""
        ...

    async def get_order(self, order_id: str) -> OrderRead | None:
        """Fetch one order, None when it does not exist."""
        ...

    async def get_latest_order(self, customer_id: str) -> OrderRead | None:
        """Fetch a customer's most recent order, None when there is none."""
        ...

    async def create_order(self, payload: OrderWritePayload) -> OrderRead:
        """Create an order, return the stored record."""
        ...

    async def update_order(self, order_id: str, payload: OrderWritePayload) -> OrderRead:
        """Replace an order, return the stored record."""
        ...


class IOrderValidator(Protocol):
    """Protocol for draft validation services."""

    def validate(self, draft: OrderDraft) -> OrderDraft:
        """Validate a draft, raise OrderValidationException on failure."""
        ...


class IOrderConverter(Protocol):
    """Protocol for draft/record conversion services."""

    def to_persisted(self, draft: OrderDraft) -> OrderWritePayload:
        """Flatten a draft into the store's write shape."""
        ...

    def from_persisted(self, order: OrderRead) -> OrderDraft:
        """Group a stored order back into a draft."""
        ...
