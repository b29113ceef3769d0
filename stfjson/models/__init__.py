"""Data models for stfjson."""

from .document import AssignmentOptions, Block, Category, CategoryLink, Item, LinkType

__all__ = [
    "AssignmentOptions",
    "Block",
    "Category",
    "CategoryLink",
    "Item",
    "LinkType",
]
