"""
JSON importer for contentloader.

The input must be a JSON array of objects. Each element becomes a Row whose
line number is its 1-based position in the array.
"""

import json
import logging
from typing import List

from ..errors import ParseError
from ..models import Row
from .base import BaseImporter


def parse_json_rows(text: str) -> List[Row]:
    """
    Parse a JSON array of objects into Row objects.

    Args:
        text: Raw JSON contents

    Returns:
        One Row per array element

    Raises:
        ParseError: If the text is not valid JSON or not an array of objects
    """
    try:
        parsed = json.loads(text.lstrip("\ufeff"))
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON input: {e}")

    if not isinstance(parsed, list):
        raise ParseError("JSON input must be an array of objects.")

    rows: List[Row] = []
    for index, element in enumerate(parsed, 1):
        if not isinstance(element, dict):
            raise ParseError(f"JSON element {index} is not an object.")
        rows.append(Row(fields=element, line=index))
    return rows


class JsonImporter(BaseImporter):
    """
    Importer for JSON seed files.
    """

    extension = ".json"

    def parse(self, text: str) -> List[Row]:
        rows = parse_json_rows(text)
        logging.info(f"Loaded {len(rows)} JSON rows from {self.input_path}")
        return rows
