"""
CSV importer for contentloader.

A small hand-written scanner rather than the csv module: rows must remember
the line they started on, where line breaks inside quoted fields do not
advance the count, and bare ``\\r`` must end a record just like ``\\n``.
"""

import logging
from typing import List, Tuple

from ..errors import ParseError
from ..models import Row
from .base import BaseImporter

DELIMITER = ","
QUOTE = '"'
BOM = "\ufeff"


def _scan_records(source: str) -> Tuple[List[List[str]], List[int]]:
    """
    Split CSV text into records of raw cells.

    Returns:
        The records and, in parallel, the line each record began on
    """
    records: List[List[str]] = []
    start_lines: List[int] = []
    row: List[str] = []
    cell: List[str] = []
    in_quotes = False
    line = 1
    row_start = 1

    i = 0
    length = len(source)
    while i < length:
        char = source[i]
        following = source[i + 1] if i + 1 < length else ""

        if char == QUOTE:
            if in_quotes and following == QUOTE:
                cell.append(QUOTE)
                i += 2
                continue
            in_quotes = not in_quotes
            i += 1
            continue

        if not in_quotes and char == DELIMITER:
            row.append("".join(cell))
            cell = []
            i += 1
            continue

        if not in_quotes and char in "\r\n":
            if char == "\r" and following == "\n":
                i += 1
            row.append("".join(cell))
            records.append(row)
            start_lines.append(row_start)
            row, cell = [], []
            line += 1
            row_start = line
            i += 1
            continue

        cell.append(char)
        i += 1

    if in_quotes:
        raise ParseError("Invalid CSV: unmatched quote in input file.")

    # Final record without a trailing newline
    if cell or row:
        row.append("".join(cell))
        records.append(row)
        start_lines.append(row_start)

    return records, start_lines


def parse_csv(text: str) -> List[Row]:
    """
    Parse CSV text with a header row into Row objects.

    Args:
        text: Raw CSV contents, optionally starting with a byte-order mark

    Returns:
        One Row per non-blank data record, in source order

    Raises:
        ParseError: If the input ends inside a quoted field
    """
    source = text[1:] if text.startswith(BOM) else text
    records, start_lines = _scan_records(source)

    if len(records) < 2:
        return []

    headers = [header.strip() for header in records[0]]
    rows: List[Row] = []

    for cells, line in zip(records[1:], start_lines[1:]):
        if not any(value.strip() for value in cells):
            continue
        fields = {
            header: cells[index] if index < len(cells) else ""
            for index, header in enumerate(headers)
        }
        rows.append(Row(fields=fields, line=line))

    return rows


class CsvImporter(BaseImporter):
    """
    Importer for comma-separated files with a header row.
    """

    extension = ".csv"

    def parse(self, text: str) -> List[Row]:
        rows = parse_csv(text)
        logging.info(f"Parsed {len(rows)} CSV rows from {self.input_path}")
        return rows
