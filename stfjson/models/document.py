"""
Document models for stfjson.

This module defines the tree that the document builder fills in while it
walks an STF export. Every model dumps straight to the JSON layout written
by the converter: unset optional fields are left out of the output.
"""

from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class LinkType(str, Enum):
    """Category type symbols an item link can end with."""

    STANDARD = "standard"
    EXCLUSIVE = "exclusive"
    UNINDEXED = "unindexed"
    DATE = "date"
    NUMERIC = "numeric"


class CategoryLink(BaseModel):
    """
    An item's reference to a category, parsed from the value of a {C} tag
    inside an item specification.
    """

    type: LinkType = Field(
        ...,
        description="The category type derived from the trailing type symbol"
    )

    name: str = Field(
        ...,
        description="The category name (first ';'-separated token)"
    )

    shortname: Optional[str] = Field(
        default=None,
        description="The category short name (second token), if present"
    )

    alsomatch: Optional[List[str]] = Field(
        default=None,
        description="Any further tokens, in source order"
    )

    value: Optional[str] = Field(
        default=None,
        description="ISO-8601 labelled timestamp, only set for date links"
    )


class AssignmentOptions(BaseModel):
    """Include/exclude lists for category assignment conditions or actions."""

    include: List[str] = Field(default_factory=list)
    exclude: List[str] = Field(default_factory=list)


class Category(BaseModel):
    """
    A category definition from a {C} ... {.} span at block level.
    """

    name: str = Field(
        ...,
        description="The raw category name, including any type symbols"
    )

    attributes: List[str] = Field(
        default_factory=list,
        description="Values of {r} attribute tags, in source order"
    )

    note: Optional[str] = Field(
        default=None,
        description="The category note from a {F} tag"
    )

    conditions: Optional[AssignmentOptions] = Field(
        default=None,
        description="Assignment conditions from a {p} section"
    )

    actions: Optional[AssignmentOptions] = Field(
        default=None,
        description="Assignment actions from an {a} section"
    )


class Item(BaseModel):
    """
    An item specification from an {I} ... {!} span.
    """

    categories: List[CategoryLink] = Field(
        default_factory=list,
        description="Category links assigned to this item, in source order"
    )

    text: Optional[str] = Field(
        default=None,
        description="The item text from a {T} tag"
    )

    note: Optional[str] = Field(
        default=None,
        description="The item note from a {N} tag"
    )


class Block(BaseModel):
    """
    One structured file: everything between an {STF} header and the next.
    """

    timestamp: str = Field(
        ...,
        description="Export time from the header, formatted as YYYY-MM-DDTHH:MM:SSZ"
    )

    categories: List[Category] = Field(default_factory=list)

    items: List[Item] = Field(default_factory=list)

    def to_json_dict(self) -> Dict[str, Any]:
        """Return the block as plain JSON data with unset optional keys dropped."""
        return self.model_dump(mode="json", exclude_none=True)
