"""Unit tests for the Money and Discount value objects."""

from decimal import Decimal

import pytest

from orderdesk.domain.value_objects import Discount, DiscountMode, Money, round_half_up


class TestRoundHalfUp:
    """Tests for commercial rounding."""

    def test_rounds_half_away_from_zero(self):
        """A trailing 5 must round up, unlike banker's rounding."""
        assert round_half_up(Decimal("0.125")) == Decimal("0.13")
        assert round_half_up(Decimal("2.675")) == Decimal("2.68")

    def test_rounds_negative_half_away_from_zero(self):
        assert round_half_up(Decimal("-0.125")) == Decimal("-0.13")

    def test_extraction_example(self):
        assert round_half_up(Decimal("276.50") / Decimal("1.07")) == Decimal("258.41")


class TestMoney:
    """Tests for Money arithmetic."""

    def test_keeps_full_precision_until_rounded(self):
        """Arithmetic must not round intermediate values."""
        third = Money(Decimal("10")) * Decimal("0.3333")

        assert third.amount == Decimal("3.3330")
        assert third.rounded().amount == Decimal("3.33")

    def test_add_and_subtract(self):
        total = Money(Decimal("100")) + Money(Decimal("20.50")) - Money(Decimal("0.50"))

        assert total.amount == Decimal("120.00")

    def test_allows_negative_amounts(self):
        """An oversized discount can push a total below zero."""
        result = Money(Decimal("10")) - Money(Decimal("25"))

        assert result.is_negative
        assert result.amount == Decimal("-15")

    def test_rejects_mixed_currencies(self):
        with pytest.raises(ValueError):
            Money(Decimal("1"), "THB") + Money(Decimal("1"), "USD")

    def test_rejects_float_multiplier(self):
        with pytest.raises(TypeError):
            Money(Decimal("1")) * 1.5

    def test_converts_non_decimal_amount(self):
        assert Money(5).amount == Decimal("5")

    def test_sum_of_empty_iterable_is_zero(self):
        assert Money.sum([]).is_zero

    def test_str_is_rounded_and_grouped(self):
        assert str(Money(Decimal("1234.565"))) == "THB 1,234.57"


class TestDiscount:
    """Tests for Discount clamping and application."""

    def test_parse_defaults_to_percent(self):
        """Records without a discount type are percent discounts."""
        assert DiscountMode.parse(None) is DiscountMode.PERCENT
        assert DiscountMode.parse("") is DiscountMode.PERCENT
        assert DiscountMode.parse("AMOUNT") is DiscountMode.AMOUNT

    def test_parse_rejects_unknown_mode(self):
        with pytest.raises(ValueError):
            DiscountMode.parse("coupon")

    def test_percent_is_clamped_to_hundred(self):
        assert Discount(Decimal("150"), DiscountMode.PERCENT).clamped().value == Decimal("100")

    def test_amount_has_no_upper_bound(self):
        assert Discount(Decimal("150"), DiscountMode.AMOUNT).clamped().value == Decimal("150")

    def test_negative_values_are_clamped_to_zero(self):
        assert Discount(Decimal("-5"), DiscountMode.AMOUNT).clamped().value == Decimal("0")

    def test_toggle_resets_value(self):
        """Switching mode must not reinterpret the old figure."""
        toggled = Discount(Decimal("10"), DiscountMode.PERCENT).toggled()

        assert toggled.mode is DiscountMode.AMOUNT
        assert toggled.value == Decimal("0")

    def test_amount_for_percent(self):
        assert Discount(Decimal("10")).amount_for(Decimal("300")) == Decimal("30")

    def test_amount_for_amount_is_not_capped(self):
        assert Discount(Decimal("500"), DiscountMode.AMOUNT).amount_for(Decimal("300")) == Decimal("500")
