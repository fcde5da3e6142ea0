"""Core business logic layer.

Subpackages:
- reporting: nutrition aggregation for the overview page
"""
__all__ = ["reporting"]
