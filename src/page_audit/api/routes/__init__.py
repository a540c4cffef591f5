"""API route modules."""

from . import audit, health

__all__ = ["audit", "health"]
