"""
Document builder for STF exports.

The builder is a state machine driven by the chunk lexer. Each {STF}
header opens a new Block; category and item specifications are nested
inside it. Two tags make the builder read one more chunk on the spot:
an {r} attribute must be followed by {;}, and a {C} reference inside a
conditions/actions section must be followed by {+} or {-}.
"""

import logging
from enum import Enum
from typing import Callable, Dict, List, Optional

from .dates import DEFAULT_DATE_FORMAT, parse_date_format_selector, parse_header_timestamp, validate_date_format
from .errors import LookaheadMismatchError, UnexpectedTagError
from .lexer import COMMENT_TAG, Chunk, ChunkLexer
from .links import parse_link
from .models import AssignmentOptions, Block, Category, Item


class Tag(str, Enum):
    """Tags the builder understands (Appendix B-4 plus undocumented ones)."""

    HEADER = "STF"
    DATE_FORMAT = "d"
    CATEGORY = "C"
    ITEM = "I"
    ATTRIBUTE = "r"
    END_ATTRIBUTE = ";"
    END_CATEGORY = "."
    CATEGORY_NOTE = "F"
    CONDITIONS = "p"
    ACTIONS = "a"
    INCLUDE = "+"
    EXCLUDE = "-"
    TEXT = "T"
    ITEM_NOTE = "N"
    END_ITEM = "!"
    COMMENT = COMMENT_TAG


class BuilderState(Enum):
    NONE = "none"
    ROOT = "root"
    CATEGORY = "category"
    CATEGORY_COND = "category-conditions"
    CATEGORY_ACTIONS = "category-actions"
    ITEM = "item"


Handler = Callable[[Chunk], None]


class DocumentBuilder:
    """
    Builds a list of Blocks from a ChunkLexer.

    The date format selected with {d} is kept on the builder and is not
    reset when a new {STF} header starts another block.
    """

    def __init__(self, lexer: ChunkLexer, date_format: int = DEFAULT_DATE_FORMAT):
        """
        Initialize the builder.

        Args:
            lexer: Source of chunks
            date_format: Initial date table index used for date links
        """
        self.lexer = lexer
        self.date_format = validate_date_format(date_format)
        self.state = BuilderState.NONE
        self.blocks: List[Block] = []

        self._block: Optional[Block] = None
        self._category: Optional[Category] = None
        self._assignment: Optional[AssignmentOptions] = None
        self._item: Optional[Item] = None

        assignment_handlers: Dict[Tag, Handler] = {
            Tag.CATEGORY: self._assign_category,
            Tag.END_ATTRIBUTE: self._end_assignment,
        }
        self._transitions: Dict[BuilderState, Dict[Tag, Handler]] = {
            BuilderState.NONE: {
                Tag.HEADER: self._start_block,
            },
            BuilderState.ROOT: {
                Tag.DATE_FORMAT: self._set_date_format,
                Tag.CATEGORY: self._start_category,
                Tag.ITEM: self._start_item,
                Tag.HEADER: self._restart_block,
            },
            BuilderState.CATEGORY: {
                Tag.ATTRIBUTE: self._add_attribute,
                Tag.END_CATEGORY: self._end_category,
                Tag.CATEGORY_NOTE: self._set_category_note,
                Tag.CONDITIONS: self._start_conditions,
                Tag.ACTIONS: self._start_actions,
            },
            BuilderState.CATEGORY_COND: assignment_handlers,
            BuilderState.CATEGORY_ACTIONS: assignment_handlers,
            BuilderState.ITEM: {
                Tag.TEXT: self._set_item_text,
                Tag.ITEM_NOTE: self._set_item_note,
                Tag.CATEGORY: self._add_item_link,
                Tag.END_CATEGORY: self._ignore,
                Tag.END_ITEM: self._end_item,
            },
        }

    def build(self) -> List[Block]:
        """
        Consume the lexer and return every block found.

        Raises:
            STFError: On the first fatal problem in the input
        """
        for chunk in self.lexer:
            if chunk.tag == Tag.COMMENT:
                if chunk.value is not None:
                    logging.info(f"Comment: {chunk.value}")
                continue
            self.feed(chunk)

        item_count = sum(len(block.items) for block in self.blocks)
        logging.info(f"Built {len(self.blocks)} blocks with {item_count} items.")
        return self.blocks

    def feed(self, chunk: Chunk) -> None:
        """Apply a single chunk in the current state."""
        try:
            tag = Tag(chunk.tag)
        except ValueError:
            tag = None
        handler = self._transitions[self.state].get(tag)
        if handler is None:
            raise UnexpectedTagError(self.state.value, chunk.tag, self.lexer.offset)
        handler(chunk)

    def _read_lookahead(self, purpose: str) -> Chunk:
        chunk = self.lexer.next_chunk()
        if chunk is None:
            raise LookaheadMismatchError(f"input ended while looking for {purpose}")
        return chunk

    # NONE

    def _start_block(self, chunk: Chunk) -> None:
        self._block = Block(timestamp=parse_header_timestamp(chunk.value))
        self.blocks.append(self._block)
        self.state = BuilderState.ROOT

    # ROOT

    def _set_date_format(self, chunk: Chunk) -> None:
        self.date_format = parse_date_format_selector(chunk.value)
        logging.debug(f"Date format set to {self.date_format}")

    def _start_category(self, chunk: Chunk) -> None:
        # The name is kept raw, type symbols included.
        self._category = Category(name=chunk.value or "")
        self._block.categories.append(self._category)
        self.state = BuilderState.CATEGORY

    def _start_item(self, chunk: Chunk) -> None:
        self._item = Item()
        self._block.items.append(self._item)
        self.state = BuilderState.ITEM

    def _restart_block(self, chunk: Chunk) -> None:
        # End of the current file, a new one begins with this same header.
        self.state = BuilderState.NONE
        self.feed(chunk)

    # CATEGORY

    def _add_attribute(self, chunk: Chunk) -> None:
        self._category.attributes.append(chunk.value or "")

        closer = self._read_lookahead("end-attribute tag")
        if closer.tag != Tag.END_ATTRIBUTE or closer.value is not None:
            raise LookaheadMismatchError(f"invalid end-attribute tag {{{closer.tag}}}")

    def _end_category(self, chunk: Chunk) -> None:
        self._category = None
        self.state = BuilderState.ROOT

    def _set_category_note(self, chunk: Chunk) -> None:
        self._category.note = chunk.value

    def _start_conditions(self, chunk: Chunk) -> None:
        self._assignment = AssignmentOptions()
        self._category.conditions = self._assignment
        self.state = BuilderState.CATEGORY_COND

    def _start_actions(self, chunk: Chunk) -> None:
        self._assignment = AssignmentOptions()
        self._category.actions = self._assignment
        self.state = BuilderState.CATEGORY_ACTIONS

    # CATEGORY_COND / CATEGORY_ACTIONS

    def _assign_category(self, chunk: Chunk) -> None:
        direction = self._read_lookahead("assignment type")
        if direction.tag == Tag.INCLUDE:
            self._assignment.include.append(chunk.value or "")
        elif direction.tag == Tag.EXCLUDE:
            self._assignment.exclude.append(chunk.value or "")
        else:
            raise LookaheadMismatchError(f"failed to find assignment type, got {{{direction.tag}}}")

    def _end_assignment(self, chunk: Chunk) -> None:
        self._assignment = None
        self.state = BuilderState.CATEGORY

    # ITEM

    def _set_item_text(self, chunk: Chunk) -> None:
        self._item.text = chunk.value

    def _set_item_note(self, chunk: Chunk) -> None:
        self._item.note = chunk.value

    def _add_item_link(self, chunk: Chunk) -> None:
        self._item.categories.append(parse_link(chunk.value, self.date_format))

    def _ignore(self, chunk: Chunk) -> None:
        pass

    def _end_item(self, chunk: Chunk) -> None:
        self._item = None
        self.state = BuilderState.ROOT
