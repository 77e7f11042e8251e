"""
Base importer interface for schemasync.

This module defines the abstract interface that all project importers must implement.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import Block, SchemaDocument


class BaseImporter(ABC):
    """
    Abstract base class for all project importers.

    Each importer converts a saved project (current or legacy layout) into
    the block list and schema document the sync controller works with.
    """

    @abstractmethod
    def get_blocks(self) -> List[Block]:
        """
        Retrieve the blocks stored in the project.

        Returns:
            List of Block objects, in saved order
        """
        pass

    @abstractmethod
    def get_document(self) -> Optional[SchemaDocument]:
        """
        Retrieve the stored schema document.

        Returns:
            The schema document, or None when the project has no schema
        """
        pass
