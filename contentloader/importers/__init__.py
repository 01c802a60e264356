"""Input importers for CSV and JSON seed files."""

from pathlib import Path
from typing import Dict, List, Type

from ..errors import ParseError
from ..models import Row
from .base import BaseImporter
from .csv_table import CsvImporter, parse_csv
from .json_rows import JsonImporter, parse_json_rows

IMPORTERS: Dict[str, Type[BaseImporter]] = {
    CsvImporter.extension: CsvImporter,
    JsonImporter.extension: JsonImporter,
}


def get_importer(input_path: str) -> BaseImporter:
    """
    Pick the importer matching the file extension.

    Raises:
        ParseError: If the extension is not supported
    """
    extension = Path(input_path).suffix.lower()
    importer_class = IMPORTERS.get(extension)
    if importer_class is None:
        raise ParseError("Unsupported file format. Use .json or .csv")
    return importer_class(input_path)


def load_rows(input_path: str) -> List[Row]:
    """Read and parse an input file into rows."""
    return get_importer(input_path).get_all_rows()


__all__ = [
    "BaseImporter",
    "CsvImporter",
    "JsonImporter",
    "parse_csv",
    "parse_json_rows",
    "get_importer",
    "load_rows",
]
