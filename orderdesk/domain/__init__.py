"""
Domain layer for the order entry engine.

This layer contains business entities, value objects, and domain logic
following Domain-Driven Design principles.
"""
