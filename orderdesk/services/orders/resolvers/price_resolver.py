"""PriceResolver service - SRP compliance."""

import logging
from dataclasses import dataclass
from decimal import Decimal

from orderdesk.domain.models import CatalogSnapshot, ProductVariationDomain
from orderdesk.domain.value_objects import Discount, DiscountMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedPrice:
    """Initial price and discount proposed for a newly added line item."""

    unit_price: Decimal
    discount_value: Decimal = Decimal("0")
    discount_mode: DiscountMode = DiscountMode.PERCENT
    source: str = "default"

    @property
    def discount(self) -> Discount:
        return Discount(value=self.discount_value, mode=self.discount_mode)


class PriceResolver:
    """Proposes the opening price of a line item (SRP: Pricing only)."""

    def resolve(self, variation: ProductVariationDomain, snapshot: CatalogSnapshot) -> ResolvedPrice:
        """
        Resolve unit price and discount for a customer and variation.

        Priority:
        1. The price and percent discount this customer last paid
        2. The variation's promotional price, with no discount
        3. The variation's default price, with no discount

        Never fails; missing data degrades to the default price.

        Args:
            variation: Variation being added
            snapshot: Catalog and price memory of the selected customer

        Returns:
            ResolvedPrice: Proposed unit price and percent discount
        """
        remembered = snapshot.remembered_price(variation.id)
        if remembered is not None:
            logger.debug(
                f"Using remembered price for customer {snapshot.customer_id}, variation {variation.id}: "
                f"{remembered.unit_price} ({remembered.discount_percent}%)"
            )
            return ResolvedPrice(
                unit_price=remembered.unit_price,
                discount_value=remembered.discount_percent,
                source="price_memory",
            )

        if variation.has_discount_price:
            return ResolvedPrice(unit_price=variation.discount_price, source="discount_price")

        return ResolvedPrice(unit_price=variation.default_price, source="default")
