"""
stfjson: Converts Lotus Agenda STF exports to JSON.

Reads the tag-delimited structured file format and builds a tree of
blocks, categories and items that serializes directly to JSON.
"""

__version__ = "0.1.0"
__author__ = "stfjson Project"

# Import main components
from .builder import BuilderState, DocumentBuilder, Tag
from .errors import (
    DateParseError,
    InvalidDateFormatError,
    InvalidLinkSyntaxError,
    LookaheadMismatchError,
    STFError,
    UnexpectedTagError,
)
from .importers import BaseImporter, STFImporter, dump_blocks
from .lexer import Chunk, ChunkLexer
from .links import parse_link
from .models import AssignmentOptions, Block, Category, CategoryLink, Item, LinkType

__all__ = [
    "AssignmentOptions",
    "BaseImporter",
    "Block",
    "BuilderState",
    "Category",
    "CategoryLink",
    "Chunk",
    "ChunkLexer",
    "DateParseError",
    "DocumentBuilder",
    "InvalidDateFormatError",
    "InvalidLinkSyntaxError",
    "Item",
    "LinkType",
    "LookaheadMismatchError",
    "STFError",
    "STFImporter",
    "Tag",
    "UnexpectedTagError",
    "dump_blocks",
    "parse_link",
]
