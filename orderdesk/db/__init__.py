"""
Access to the external order storage service.

- OrderStoreClient: HTTP client for catalog, price memory, address and order endpoints
"""

from orderdesk.db.order_store_client import OrderStoreClient

__all__ = ["OrderStoreClient"]
