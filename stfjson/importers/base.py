"""
Base importer interface for stfjson.

This module defines the abstract interface that all data importers must implement.
"""

from abc import ABC, abstractmethod
from typing import List

from ..models import Block


class BaseImporter(ABC):
    """
    Abstract base class for all data importers.

    Each importer converts data from a specific export format into the
    Block model.
    """

    @abstractmethod
    def get_all_blocks(self) -> List[Block]:
        """
        Retrieve all blocks from the data source.

        Returns:
            List of Block objects in source order
        """
        pass
