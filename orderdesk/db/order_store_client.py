"""
HTTP client for the external order storage service.

This module provides connection management, retrying request execution and
the typed endpoint methods the order entry services depend on.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import aiohttp
from aiohttp import ClientTimeout
from pydantic import ValidationError

from orderdesk.api.schemas.order_schemas import OrderRead, OrderWritePayload
from orderdesk.core.config import get_settings
from orderdesk.domain.models import PriceMemoryEntry, ProductVariationDomain, ShippingAddressDomain
from orderdesk.utils.error_handler import OrderStoreException

logger = logging.getLogger(__name__)

RETRYABLE_STATUSES = {429, 500, 502, 503, 504}


class OrderStoreClient:
    """
    Client for the order storage REST API.

    Reads the catalog, price memory, shipping addresses and orders, and
    writes orders. Transport failures and non-success responses surface as
    OrderStoreException after the configured retries.
    """

    def __init__(self, base_url: Optional[str] = None, session: Optional[aiohttp.ClientSession] = None):
        """Initialize the client from settings."""
        self.settings = get_settings()
        self.base_url = (base_url or self.settings.ORDER_STORE_URL).rstrip("/")
        self.max_retries = max(1, self.settings.ORDER_STORE_MAX_RETRIES)
        self.session = session
        self._owns_session = session is None

        logger.info(f"Initialized order store client for {self.base_url}")

    async def initialize(self):
        """
        Open the HTTP session.

        Raises:
            OrderStoreException: If the session cannot be created
        """
        if self.session:
            return

        try:
            timeout = ClientTimeout(total=self.settings.ORDER_STORE_TIMEOUT, connect=10)
            connector = aiohttp.TCPConnector(limit=20, limit_per_host=10)
            self.session = aiohttp.ClientSession(
                timeout=timeout,
                connector=connector,
                headers=self.settings.get_order_store_headers(),
            )
            self._owns_session = True
            logger.info("✅ Order store client initialized")
        except Exception as e:
            logger.error(f"❌ Failed to initialize order store client: {e}")
            raise OrderStoreException(f"Client initialization failed: {str(e)}") from e

    async def close(self):
        """Close the HTTP session and clean up resources."""
        if self.session and self._owns_session:
            await self.session.close()
            logger.info("Order store client closed")
        self.session = None

    async def __aenter__(self) -> "OrderStoreClient":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        allow_not_found: bool = False,
    ) -> Any:
        """
        Execute a request with retries and exponential backoff.

        Args:
            method: HTTP method
            path: Path below the base URL
            params: Query parameters
            json: JSON body
            allow_not_found: Return None on 404 instead of raising

        Returns:
            Decoded JSON body (None for empty bodies or an allowed 404)

        Raises:
            OrderStoreException: If the request fails after retries
        """
        if not self.session:
            raise OrderStoreException("Client not initialized. Call initialize() first.", endpoint=path)

        url = f"{self.base_url}{path}"
        last_exception: Optional[OrderStoreException] = None

        for attempt in range(self.max_retries):
            try:
                async with self.session.request(method, url, params=params, json=json) as response:
                    if response.status == 404 and allow_not_found:
                        return None

                    if response.status in RETRYABLE_STATUSES:
                        last_exception = OrderStoreException(
                            f"HTTP {response.status} from {method} {path}",
                            status_code=response.status,
                            endpoint=path,
                        )
                        if attempt < self.max_retries - 1:
                            wait_time = self._retry_delay(attempt, response.headers.get("Retry-After"))
                            logger.warning(
                                f"{method} {path} returned {response.status}, retrying in {wait_time}s "
                                f"(attempt {attempt + 1})"
                            )
                            await asyncio.sleep(wait_time)
                        continue

                    if response.status >= 400:
                        body = await response.text()
                        raise OrderStoreException(
                            f"HTTP {response.status} from {method} {path}: {body[:200]}",
                            status_code=response.status,
                            endpoint=path,
                        )

                    if response.status == 204:
                        return None
                    try:
                        return await response.json(content_type=None)
                    except ValueError as e:
                        raise OrderStoreException(
                            f"Malformed response from {method} {path}: {str(e)}",
                            status_code=response.status,
                            endpoint=path,
                        ) from e

            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_exception = OrderStoreException(f"Network error: {str(e)}", endpoint=path)
                if attempt < self.max_retries - 1:
                    wait_time = self._retry_delay(attempt)
                    logger.warning(f"Network error on {method} {path}, retrying in {wait_time}s (attempt {attempt + 1})")
                    await asyncio.sleep(wait_time)

        logger.error(f"{method} {path} failed after {self.max_retries} attempt(s)")
        raise last_exception or OrderStoreException(f"{method} {path} failed after retries", endpoint=path)

    @staticmethod
    def _retry_delay(attempt: int, retry_after: Optional[str] = None) -> float:
        if retry_after and retry_after.isdigit():
            return float(retry_after)
        return float(min(2**attempt, 10))  # Exponential backoff, max 10s

    @staticmethod
    def _records(body: Any, key: str) -> List[Dict[str, Any]]:
        """Accept both a bare list and a ``{key: [...]}`` / ``{"data": [...]}`` envelope."""
        if body is None:
            return []
        if isinstance(body, list):
            return body
        records = body.get(key, body.get("data", []))
        return records or []

    def _parse_order(self, data: Dict[str, Any], endpoint: str) -> OrderRead:
        try:
            return OrderRead.model_validate(data)
        except ValidationError as e:
            raise OrderStoreException(f"Malformed order record: {e.error_count()} error(s)", endpoint=endpoint) from e

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def fetch_variations(self) -> List[ProductVariationDomain]:
        """
        Get the product catalog.

        Returns:
            List of product variations
        """
        body = await self._request("GET", "/catalog/variations")
        variations = [ProductVariationDomain.from_dict(record) for record in self._records(body, "variations")]
        logger.debug(f"Fetched {len(variations)} catalog variations")
        return variations

    async def fetch_price_memory(self, customer_id: str) -> Dict[str, PriceMemoryEntry]:
        """
        Get the prices last used for a customer, keyed by variation ID.
        """
        body = await self._request("GET", f"/customers/{customer_id}/prices") or {}
        if isinstance(body, list):
            body = {record["variation_id"]: record for record in body if record.get("variation_id")}
        elif "prices" in body:
            body = body["prices"] or {}
        return {str(variation_id): PriceMemoryEntry.from_dict(entry) for variation_id, entry in body.items()}

    async def fetch_shipping_addresses(self, customer_id: str) -> List[ShippingAddressDomain]:
        body = await self._request("GET", f"/customers/{customer_id}/shipping-addresses")
        return [ShippingAddressDomain.from_dict(record) for record in self._records(body, "addresses")]

    async def get_order(self, order_id: str) -> Optional[OrderRead]:
        """
        Get one order with its items and shipments.

        Returns:
            OrderRead or None if the order does not exist
        """
        path = f"/orders/{order_id}"
        body = await self._request("GET", path, allow_not_found=True)
        if not body:
            return None
        if "order" in body:
            body = body["order"]
        return self._parse_order(body, path)

    async def get_latest_order(self, customer_id: str) -> Optional[OrderRead]:
        """
        Get the most recent order of a customer.

        Returns:
            OrderRead or None if the customer has never ordered
        """
        body = await self._request("GET", "/orders", params={"customer_id": customer_id, "limit": 1})
        records = self._records(body, "orders")
        if not records:
            return None
        return self._parse_order(records[0], "/orders")

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_order(self, payload: OrderWritePayload) -> OrderRead:
        """
        Create an order.

        Returns:
            OrderRead: The stored order as echoed by the service
        """
        body = await self._request("POST", "/orders", json=payload.to_wire())
        return self._stored(body, payload, "/orders")

    async def update_order(self, order_id: str, payload: OrderWritePayload) -> OrderRead:
        """
        Replace an existing order.

        Returns:
            OrderRead: The stored order as echoed by the service
        """
        path = f"/orders/{order_id}"
        body = await self._request("PUT", path, json=payload.to_wire())
        return self._stored(body, payload, path, order_id=order_id)

    def _stored(
        self, body: Any, payload: OrderWritePayload, endpoint: str, order_id: Optional[str] = None
    ) -> OrderRead:
        """Parse a write response; a bare ``{id, order_number}`` is completed from the payload."""
        if isinstance(body, dict) and "order" in body:
            body = body["order"]
        if isinstance(body, dict) and body.get("items"):
            return self._parse_order(body, endpoint)

        body = body if isinstance(body, dict) else {}
        stored_id = body.get("id") or order_id
        if not stored_id:
            raise OrderStoreException("Order store did not return an order ID", endpoint=endpoint)
        return OrderRead.from_write(payload, order_id=str(stored_id), order_number=body.get("order_number"))

    def __repr__(self):
        return f"OrderStoreClient(base_url='{self.base_url}', initialized={self.session is not None})"
