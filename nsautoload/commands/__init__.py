"""CLI command groups."""

from .namespace import namespace

__all__ = ["namespace"]
