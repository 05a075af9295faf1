"""Manager services for business operations."""

from .fulfillment_allocator import FulfillmentAllocator

__all__ = ["FulfillmentAllocator"]
