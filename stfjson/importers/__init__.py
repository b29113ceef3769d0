"""Data importers for various source formats."""

from .base import BaseImporter
from .stf import STFImporter, dump_blocks

__all__ = ["BaseImporter", "STFImporter", "dump_blocks"]
