"""
OrderFactory - Factory pattern for creating domain objects (OCP).

This factory encapsulates object creation logic, making it easier
to modify without changing client code.
"""

from decimal import Decimal

from orderdesk.core.config import get_settings
from orderdesk.domain.models import BranchDomain, LineItemDomain, ProductVariationDomain, ShippingAddressDomain
from orderdesk.domain.value_objects import Discount, DiscountMode
from orderdesk.services.orders.resolvers.price_resolver import ResolvedPrice


class OrderFactory:
    """Factory for creating branches and line items with proper defaults."""

    @staticmethod
    def create_branch(address: ShippingAddressDomain) -> BranchDomain:
        """Create an empty branch delivering to ``address``."""
        return BranchDomain(
            shipping_address_id=address.id,
            address_name=address.address_name,
            currency=get_settings().CURRENCY,
        )

    @staticmethod
    def create_branch_from_shipment(
        shipping_address_id: str,
        address_name: str | None,
        shipping_fee: Decimal,
        delivery_notes: str = "",
    ) -> BranchDomain:
        """Create a branch from the first shipment seen for an address."""
        settings = get_settings()
        return BranchDomain(
            shipping_address_id=shipping_address_id,
            address_name=address_name or settings.DEFAULT_ADDRESS_NAME,
            delivery_notes=delivery_notes,
            shipping_fee=shipping_fee,
            currency=settings.CURRENCY,
        )

    @staticmethod
    def create_line_item(variation: ProductVariationDomain, price: ResolvedPrice) -> LineItemDomain:
        """
        Create a line item for a catalog variation.

        Args:
            variation: Catalog variation
            price: Opening price from the pricing resolver

        Returns:
            LineItemDomain: New line item with quantity 1
        """
        return LineItemDomain(
            variation_id=variation.id,
            product_id=variation.product_id,
            product_code=variation.code,
            product_name=variation.name,
            bottle_size=variation.bottle_size,
            quantity=1,
            unit_price=price.unit_price,
            discount=price.discount,
            currency=get_settings().CURRENCY,
        )

    @staticmethod
    def create_line_item_from_record(
        variation_id: str,
        quantity: int,
        unit_price: Decimal,
        discount_value: Decimal,
        discount_mode: DiscountMode,
        product_id: str | None = None,
        product_code: str | None = None,
        product_name: str | None = None,
        bottle_size: str | None = None,
    ) -> LineItemDomain:
        """Create a line item from a persisted order item."""
        return LineItemDomain(
            variation_id=variation_id,
            product_id=product_id or "",
            product_code=product_code or "",
            product_name=product_name or "",
            bottle_size=bottle_size or "",
            quantity=quantity,
            unit_price=unit_price,
            discount=Discount(value=discount_value, mode=discount_mode),
            currency=get_settings().CURRENCY,
        )
