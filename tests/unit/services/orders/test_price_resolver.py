"""Unit tests for the opening price of new line items."""

from decimal import Decimal

import pytest

from orderdesk.domain.models import CatalogSnapshot, PriceMemoryEntry, ProductVariationDomain
from orderdesk.domain.value_objects import DiscountMode
from orderdesk.services.orders.resolvers.price_resolver import PriceResolver


class TestPriceResolver:
    """Tests for price resolution priority."""

    def test_default_price_without_memory_or_promotion(self, variation):
        """No price memory and a zero promotional price means the default price."""
        price = PriceResolver().resolve(variation, CatalogSnapshot.build("cust-1", [variation]))

        assert price.unit_price == Decimal("100")
        assert price.discount_value == Decimal("0")
        assert price.discount_mode is DiscountMode.PERCENT
        assert price.source == "default"

    def test_promotional_price_beats_default(self, variations):
        mango = variations[1]
        price = PriceResolver().resolve(mango, CatalogSnapshot.build("cust-1", variations))

        assert price.unit_price == Decimal("220")
        assert price.discount_value == Decimal("0")
        assert price.source == "discount_price"

    def test_price_memory_beats_everything(self, variations):
        mango = variations[1]
        snapshot = CatalogSnapshot.build(
            "cust-1",
            variations,
            {mango.id: PriceMemoryEntry(unit_price=Decimal("199"), discount_percent=Decimal("3"))},
        )

        price = PriceResolver().resolve(mango, snapshot)

        assert price.unit_price == Decimal("199")
        assert price.discount_value == Decimal("3")
        assert price.discount_mode is DiscountMode.PERCENT
        assert price.source == "price_memory"

    def test_memory_of_other_variation_is_ignored(self, snapshot, variation):
        assert PriceResolver().resolve(variation, snapshot).source == "default"

    def test_missing_prices_degrade_to_zero(self):
        """Incomplete catalog records never make resolution fail."""
        bare = ProductVariationDomain.from_dict({"id": 9, "default_price": None})

        price = PriceResolver().resolve(bare, CatalogSnapshot())

        assert bare.id == "9"
        assert price.unit_price == Decimal("0")


class TestCatalogSnapshot:
    """Tests for the read-only snapshot."""

    def test_snapshot_is_read_only(self, snapshot):
        with pytest.raises(TypeError):
            snapshot.price_memory["var-orange-250"] = PriceMemoryEntry(unit_price=Decimal("1"))

    def test_lookup(self, snapshot):
        assert snapshot.get_variation("var-mango-1l").name == "Mango juice"
        assert snapshot.remembered_price("var-lime-250").unit_price == Decimal("75")
        assert snapshot.get_variation("missing") is None
