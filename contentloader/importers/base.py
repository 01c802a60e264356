"""
Base importer interface for contentloader.

This module defines the abstract interface that all input importers implement.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from ..errors import ParseError
from ..models import Row


class BaseImporter(ABC):
    """
    Abstract base class for all input importers.

    Each importer converts one source format (CSV, JSON) into an ordered list
    of Row objects annotated with their source line.
    """

    extension = ""

    def __init__(self, input_path: str):
        """
        Initialize the importer.

        Args:
            input_path: Path to the input file
        """
        self.input_path = Path(input_path).resolve()

    def read_text(self) -> str:
        """
        Read the input file as UTF-8.

        Raises:
            ParseError: If the file cannot be read
        """
        try:
            return self.input_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ParseError(f"Cannot read input file {self.input_path}: {e}")

    @abstractmethod
    def parse(self, text: str) -> List[Row]:
        """
        Convert raw file contents into rows.

        Args:
            text: The complete file contents

        Returns:
            Rows in source order
        """
        pass

    def get_all_rows(self) -> List[Row]:
        """
        Read and parse the whole input file.

        Returns:
            Rows in source order
        """
        return self.parse(self.read_text())
