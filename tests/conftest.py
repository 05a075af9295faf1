"""Shared fixtures for order entry tests."""

from datetime import UTC, date, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from orderdesk.api.schemas.order_schemas import OrderRead
from orderdesk.domain.models import (
    CatalogSnapshot,
    CustomerDomain,
    OrderDraft,
    PriceMemoryEntry,
    ProductVariationDomain,
    ShippingAddressDomain,
)
from orderdesk.services.orders.managers import FulfillmentAllocator


@pytest.fixture
def customer():
    return CustomerDomain(id="cust-1", name="Baan Suan Cafe", customer_code="BSC01")


@pytest.fixture
def addresses():
    """Three addresses listed out of creation order."""
    return [
        ShippingAddressDomain(
            id="addr-2",
            customer_id="cust-1",
            address_name="Nimman branch",
            created_at=datetime(2024, 3, 1, tzinfo=UTC),
        ),
        ShippingAddressDomain(
            id="addr-1",
            customer_id="cust-1",
            address_name="Head office",
            created_at=datetime(2024, 1, 1, tzinfo=UTC),
        ),
        ShippingAddressDomain(
            id="addr-3",
            customer_id="cust-1",
            address_name="Airport kiosk",
            created_at=datetime(2024, 6, 1, tzinfo=UTC),
        ),
    ]


@pytest.fixture
def variations():
    return [
        ProductVariationDomain(
            id="var-orange-250",
            product_id="prod-orange",
            code="OJ",
            name="Orange juice",
            bottle_size="250ml",
            default_price=Decimal("100"),
            discount_price=Decimal("0"),
        ),
        ProductVariationDomain(
            id="var-mango-1l",
            product_id="prod-mango",
            code="MJ",
            name="Mango juice",
            bottle_size="1L",
            default_price=Decimal("250"),
            discount_price=Decimal("220"),
        ),
        ProductVariationDomain(
            id="var-lime-250",
            product_id="prod-lime",
            code="LJ",
            name="Lime juice",
            bottle_size="250ml",
            default_price=Decimal("80"),
        ),
    ]


@pytest.fixture
def variation(variations):
    """Variation with default price 100 and no promotional price."""
    return variations[0]


@pytest.fixture
def snapshot(customer, variations):
    return CatalogSnapshot.build(
        customer.id,
        variations,
        {"var-lime-250": PriceMemoryEntry(unit_price=Decimal("75"), discount_percent=Decimal("5"))},
    )


@pytest.fixture
def draft(customer):
    return OrderDraft(customer=customer, delivery_date=date(2026, 11, 2))


@pytest.fixture
def allocator(draft, addresses, snapshot):
    allocator = FulfillmentAllocator(draft=draft, addresses=addresses, snapshot=snapshot)
    allocator.initialize()
    return allocator


@pytest.fixture
def persisted_order_data():
    """Order as the store returns it: two branches, one item shipped to both."""
    return {
        "id": "ord-100",
        "order_number": "SO-2026-0100",
        "customer_id": "cust-1",
        "customer": {"id": "cust-1", "name": "Baan Suan Cafe", "customer_code": "BSC01"},
        "delivery_date": "2026-10-20T00:00:00Z",
        "notes": "Call before delivery",
        "internal_notes": "VIP",
        "order_discount_amount": 50,
        "order_discount_type": "amount",
        "order_status": "new",
        "payment_status": "pending",
        "items": [
            {
                "variation_id": "var-orange-250",
                "product_id": "prod-orange",
                "product_code": "OJ",
                "product_name": "Orange juice",
                "bottle_size": "250ml",
                "quantity": 5,
                "unit_price": 100,
                "discount_type": "percent",
                "discount_percent": 10,
                "discount_amount": 50,
                "shipments": [
                    {
                        "shipping_address_id": "addr-1",
                        "quantity": 2,
                        "shipping_fee": 20,
                        "delivery_notes": "Back door",
                        "shipping_address": {"id": "addr-1", "address_name": "Head office"},
                    },
                    {
                        "shipping_address_id": "addr-2",
                        "quantity": 3,
                        "shipping_fee": 30,
                        "shipping_address": {"id": "addr-2", "address_name": "Nimman branch"},
                    },
                ],
            },
            {
                "variation_id": "var-mango-1l",
                "product_id": "prod-mango",
                "product_name": "Mango juice",
                "quantity": 1,
                "unit_price": 220,
                "discount_type": "amount",
                "discount_amount": 15,
                "shipments": [
                    {
                        "shipping_address_id": "addr-1",
                        "quantity": 1,
                        "shipping_fee": 20,
                        "delivery_notes": "Back door",
                    },
                ],
            },
        ],
    }


@pytest.fixture
def persisted_order(persisted_order_data):
    return OrderRead.model_validate(persisted_order_data)


@pytest.fixture
def mock_store(addresses, variations):
    """Order store double with every protocol method as an AsyncMock."""
    store = MagicMock()
    store.fetch_shipping_addresses = AsyncMock(return_value=addresses)
    store.fetch_variations = AsyncMock(return_value=variations)
    store.fetch_price_memory = AsyncMock(
        return_value={"var-lime-250": PriceMemoryEntry(unit_price=Decimal("75"), discount_percent=Decimal("5"))}
    )
    store.get_order = AsyncMock(return_value=None)
    store.get_latest_order = AsyncMock(return_value=None)
    store.create_order = AsyncMock()
    store.update_order = AsyncMock()
    return store
