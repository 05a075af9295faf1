"""
Money value object for handling monetary amounts with currency.

This value object ensures type safety and provides clear semantics
for monetary operations in the domain.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def round_half_up(value: Decimal, places: Decimal = CENT) -> Decimal:
    """
    Round a Decimal using commercial rounding (half away from zero).

    Examples:
        >>> round_half_up(Decimal("258.4112"))
        Decimal('258.41')
        >>> round_half_up(Decimal("0.125"))
        Decimal('0.13')
    """
    return value.quantize(places, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Money:
    """
    Immutable value object representing a monetary amount with currency.

    Amounts keep full precision; rounding to satang happens only when a
    value is displayed or persisted, through ``rounded()``. Negative amounts
    are allowed because an oversized discount can push a total below zero.

    Attributes:
        amount: The monetary amount as Decimal for precision
        currency: Currency code (e.g., "THB")

    Example:
        >>> price = Money(amount=Decimal("99.99"))
        >>> fee = Money(amount=Decimal("20.00"))
        >>> (price + fee).amount
        Decimal('119.99')
    """

    amount: Decimal
    currency: str = "THB"

    def __post_init__(self) -> None:
        """Validate money object after initialization."""
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", Decimal(str(self.amount)))

        if not self.currency or len(self.currency) != 3:
            raise ValueError(f"Invalid currency code: {self.currency}")

    def __add__(self, other: "Money") -> "Money":
        """Add two Money objects with the same currency."""
        if not isinstance(other, Money):
            raise TypeError(f"Cannot add Money with {type(other)}")

        if self.currency != other.currency:
            raise ValueError(f"Cannot add different currencies: {self.currency} and {other.currency}")

        return Money(amount=self.amount + other.amount, currency=self.currency)

    def __sub__(self, other: "Money") -> "Money":
        """Subtract two Money objects with the same currency."""
        if not isinstance(other, Money):
            raise TypeError(f"Cannot subtract Money with {type(other)}")

        if self.currency != other.currency:
            raise ValueError(f"Cannot subtract different currencies: {self.currency} and {other.currency}")

        return Money(amount=self.amount - other.amount, currency=self.currency)

    def __mul__(self, multiplier: int | Decimal) -> "Money":
        """Multiply money by a scalar value."""
        if isinstance(multiplier, bool) or not isinstance(multiplier, (int, Decimal)):
            raise TypeError(f"Cannot multiply Money by {type(multiplier)}")

        return Money(amount=self.amount * Decimal(multiplier), currency=self.currency)

    def __neg__(self) -> "Money":
        return Money(amount=-self.amount, currency=self.currency)

    def __str__(self) -> str:
        """String representation of Money."""
        return f"{self.currency} {self.rounded().amount:,.2f}"

    def __repr__(self) -> str:
        return f"Money(amount=Decimal('{self.amount}'), currency='{self.currency}')"

    def rounded(self) -> "Money":
        """Return this amount rounded half-up to two decimal places."""
        return Money(amount=round_half_up(self.amount), currency=self.currency)

    @property
    def is_zero(self) -> bool:
        """Check if amount is zero."""
        return self.amount == Decimal("0")

    @property
    def is_positive(self) -> bool:
        """Check if amount is positive."""
        return self.amount > Decimal("0")

    @property
    def is_negative(self) -> bool:
        """Check if amount is negative."""
        return self.amount < Decimal("0")

    @classmethod
    def zero(cls, currency: str = "THB") -> "Money":
        """Create a zero Money object."""
        return cls(amount=Decimal("0"), currency=currency)

    @classmethod
    def from_string(cls, amount: str, currency: str = "THB") -> "Money":
        """Create Money from string representation."""
        return cls(amount=Decimal(amount), currency=currency)

    @classmethod
    def sum(cls, values, currency: str = "THB") -> "Money":
        """Add up an iterable of Money objects, starting from zero."""
        total = cls.zero(currency)
        for value in values:
            total = total + value
        return total
