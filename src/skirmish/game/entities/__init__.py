"""Entities that live on the battlefield."""

from .unit import Unit

__all__ = [
    "Unit",
]
