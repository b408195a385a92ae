"""Capability providers registered on each session."""

from .categories import CategoriesProvider

__all__ = ["CategoriesProvider"]
