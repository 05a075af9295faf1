"""
Validator services for validating business rules and data integrity.
"""

from .mutability_gate import MutabilityDecision, MutabilityGate, ReadOnlyReason
from .order_validator import OrderValidator

__all__ = ["MutabilityDecision", "MutabilityGate", "OrderValidator", "ReadOnlyReason"]
