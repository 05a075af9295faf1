"""
Value objects for the domain layer.

Value objects are immutable objects that represent concepts
with no conceptual identity, only defined by their attributes.
"""

from .discount import Discount, DiscountMode
from .money import Money, round_half_up

__all__ = ["Discount", "DiscountMode", "Money", "round_half_up"]
