"""
Converter services for transforming between draft orders and store records.
"""

from .order_converter import OrderConverter

__all__ = ["OrderConverter"]
