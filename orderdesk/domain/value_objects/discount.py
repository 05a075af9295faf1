"""
Discount value object shared by line items and whole orders.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

HUNDRED = Decimal("100")
ZERO = Decimal("0")


class DiscountMode(str, Enum):
    """How a discount value is interpreted."""

    PERCENT = "percent"
    AMOUNT = "amount"

    @classmethod
    def parse(cls, raw: "str | DiscountMode | None", default: "DiscountMode | None" = None) -> "DiscountMode":
        """
        Parse a persisted discount type.

        Rows stored before the type column existed carry no type at all; line
        items read those as percent, order discounts pass ``default=AMOUNT``.
        """
        if isinstance(raw, cls):
            return raw
        if not raw:
            return default or cls.PERCENT
        return cls(str(raw).lower())


@dataclass(frozen=True)
class Discount:
    """
    A discount value together with its mode.

    Attributes:
        value: Percentage (0-100) or absolute amount, depending on ``mode``
        mode: Interpretation of ``value``
    """

    value: Decimal = ZERO
    mode: DiscountMode = DiscountMode.PERCENT

    def __post_init__(self) -> None:
        if not isinstance(self.value, Decimal):
            object.__setattr__(self, "value", Decimal(str(self.value)))
        object.__setattr__(self, "mode", DiscountMode.parse(self.mode))

    def clamped(self) -> "Discount":
        """Return a copy with the value forced into the range its mode allows."""
        if self.mode is DiscountMode.PERCENT:
            value = max(ZERO, min(HUNDRED, self.value))
        else:
            value = max(ZERO, self.value)
        return Discount(value=value, mode=self.mode)

    def toggled(self) -> "Discount":
        """Switch mode and reset the value so a stale figure never changes meaning."""
        mode = DiscountMode.AMOUNT if self.mode is DiscountMode.PERCENT else DiscountMode.PERCENT
        return Discount(value=ZERO, mode=mode)

    def amount_for(self, base: Decimal) -> Decimal:
        """
        Discount amount taken off ``base``.

        Amount-mode discounts are not capped at ``base``.
        """
        if self.mode is DiscountMode.PERCENT:
            return base * self.value / HUNDRED
        return self.value

    @property
    def is_zero(self) -> bool:
        return self.value == ZERO
