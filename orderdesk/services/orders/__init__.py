"""
Order entry services package.

This package contains the services that compose, price, allocate, total,
validate, rebuild and submit draft orders, following SOLID principles for
better maintainability.
"""
