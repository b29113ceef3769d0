"""
STF importer for stfjson.

This module reads a Lotus Agenda structured file (STF) export and converts
it into Block objects, which can then be rendered as JSON.
"""

import io
import json
import logging
from pathlib import Path
from typing import BinaryIO, List, Optional, TextIO, Union

from ..builder import DocumentBuilder
from ..dates import DEFAULT_DATE_FORMAT
from ..lexer import ChunkLexer
from ..models import Block
from .base import BaseImporter


class STFImporter(BaseImporter):
    """
    Importer for Agenda STF exports.

    The source can be a file path or an already open stream. Binary
    streams are decoded with the configured encoding.
    """

    def __init__(
        self,
        source: Union[str, Path, BinaryIO, TextIO],
        encoding: str = "latin-1",
        date_format: int = DEFAULT_DATE_FORMAT,
    ):
        """
        Initialize the STF importer.

        Args:
            source: Path to an STF file, or a binary/text stream
            encoding: Encoding used for paths and binary streams
            date_format: Date table index in effect before any {d} tag
        """
        self.source = source
        self.encoding = encoding
        self.date_format = date_format

    def get_all_blocks(self) -> List[Block]:
        """
        Parse the whole source.

        Returns:
            Every block in the export, in input order

        Raises:
            STFError: If the input is malformed
            OSError: If the source cannot be read
        """
        if isinstance(self.source, (str, Path)):
            logging.info(f"Parsing STF file: {self.source}")
            with open(self.source, 'r', encoding=self.encoding, newline='') as f:
                return self._parse_stream(f)

        return self._parse_stream(self._as_text(self.source))

    def _as_text(self, stream: Union[BinaryIO, TextIO]) -> TextIO:
        if isinstance(stream, io.TextIOBase):
            return stream
        return io.TextIOWrapper(stream, encoding=self.encoding, newline='')

    def _parse_stream(self, stream: TextIO) -> List[Block]:
        builder = DocumentBuilder(ChunkLexer(stream), date_format=self.date_format)
        return builder.build()

    def to_json(self, indent: int = 2, ensure_ascii: bool = False) -> str:
        """Parse the source and render it as a JSON document."""
        return dump_blocks(self.get_all_blocks(), indent=indent, ensure_ascii=ensure_ascii)


def dump_blocks(blocks: List[Block], indent: Optional[int] = 2, ensure_ascii: bool = False) -> str:
    """
    Render blocks as a JSON array.

    Args:
        blocks: Blocks to serialize
        indent: Indentation width, None for compact output
        ensure_ascii: Escape non-ASCII characters

    Returns:
        The JSON text, without a trailing newline
    """
    serializable_blocks = [block.to_json_dict() for block in blocks]
    return json.dumps(serializable_blocks, indent=indent, ensure_ascii=ensure_ascii)
