"""
Domain models for business entities.

These models represent core business concepts and contain
business logic and invariants.
"""

from .branch import BranchDomain
from .catalog import CatalogSnapshot, PriceMemoryEntry, ProductVariationDomain
from .customer import CustomerDomain, ShippingAddressDomain
from .line_item import LineItemDomain
from .order import OrderDraft, OrderStatus, PaymentStatus

__all__ = [
    "BranchDomain",
    "CatalogSnapshot",
    "CustomerDomain",
    "LineItemDomain",
    "OrderDraft",
    "OrderStatus",
    "PaymentStatus",
    "PriceMemoryEntry",
    "ProductVariationDomain",
    "ShippingAddressDomain",
]
