"""
Chunk lexer for Agenda STF exports.

An STF file is a flat run of {tag}value pairs. The lexer turns the
character stream into Chunk tuples and knows nothing about how those
chunks nest; that is the document builder's job.

Lexing rules:
- Whitespace before the first tag is skipped. Any other text there is
  reported as a comment chunk with the synthetic tag "S".
- "{ " inside a value is an escaped brace: the space is dropped and a
  literal "{" is kept.
- The tags ; + - . ! never carry a value.
- Leading and trailing whitespace is trimmed from values.
"""

import logging
from enum import Enum
from typing import Iterator, List, NamedTuple, Optional, TextIO


OPEN_TAG = "{"
CLOSE_TAG = "}"
ESCAPE_TAG = " "

COMMENT_TAG = "S"

# Undocumented ; + - and the documented end-of-category/end-of-item marks.
VALUELESS_TAGS = frozenset({";", "+", "-", ".", "!"})

# The C locale isspace() set.
WHITESPACE = " \t\n\v\f\r"


class Chunk(NamedTuple):
    """A single {tag}value pair. value is None for tags without data."""

    tag: str
    value: Optional[str] = None


class _LexState(Enum):
    COMMENT = "comment"
    TAG = "tag"
    DATA = "data"
    END = "end"


class ChunkLexer:
    """
    Pulls Chunk tuples off a text stream one character at a time.

    The lexer can be iterated, and next_chunk() can be called directly in
    between to read ahead.
    """

    def __init__(self, stream: TextIO):
        """
        Initialize the lexer.

        Args:
            stream: A text stream positioned at the start of the export
        """
        self.stream = stream
        self.offset = 0
        self._pushback: List[str] = []

    def __iter__(self) -> Iterator[Chunk]:
        while True:
            chunk = self.next_chunk()
            if chunk is None:
                return
            yield chunk

    def _read(self) -> str:
        if self._pushback:
            c = self._pushback.pop()
        else:
            c = self.stream.read(1)
        if c:
            self.offset += 1
        return c

    def _unread(self, c: str) -> None:
        if c:
            self._pushback.append(c)
            self.offset -= 1

    def next_chunk(self) -> Optional[Chunk]:
        """
        Read the next chunk from the stream.

        Returns:
            The next Chunk, or None once the input is exhausted. A chunk that
            is cut off by the end of input is dropped.
        """
        state = _LexState.COMMENT
        tag_chars: List[str] = []
        value_chars: List[str] = []
        tag: Optional[str] = None

        while state is not _LexState.END:
            c = self._read()
            if not c:
                break

            if state is _LexState.COMMENT:
                if c in WHITESPACE:
                    continue
                if c == OPEN_TAG:
                    state = _LexState.TAG
                    continue
                # Text before any tag, treat it as a comment.
                tag = COMMENT_TAG
                state = _LexState.DATA

            if state is _LexState.DATA:
                if c == OPEN_TAG:
                    following = self._read()
                    if following != ESCAPE_TAG:
                        self._unread(following)
                        self._unread(c)
                        state = _LexState.END
                        break
                if c in WHITESPACE and not value_chars:
                    continue
                value_chars.append(c)
                continue

            # _LexState.TAG
            if c == CLOSE_TAG:
                tag = "".join(tag_chars)
                state = _LexState.DATA
                if not tag:
                    logging.warning(f"found an empty tag at offset {self.offset}, data may be malformed")
                elif tag in VALUELESS_TAGS:
                    state = _LexState.END
                continue
            tag_chars.append(c)

        if state is not _LexState.END:
            if tag is not None or tag_chars or value_chars:
                logging.warning(f"input ended inside a chunk, discarding {{{tag if tag is not None else ''.join(tag_chars)}}}")
            return None

        value = "".join(value_chars).rstrip(WHITESPACE) if value_chars else None
        return Chunk(tag or "", value)
