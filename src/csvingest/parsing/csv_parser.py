"""Quote-aware CSV parsing with header detection."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .base import Table, is_number
from .sniffer import sniff

logger = logging.getLogger(__name__)

QUOTE = '"'


def normalize_newlines(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def non_blank_lines(text: str) -> list[str]:
    return [line for line in text.split("\n") if line.strip()]


def looks_like_header(cells: Iterable[str]) -> bool:
    """A row is a header when at least one of its cells is not numeric."""
    return any(not is_number(cell) for cell in cells)


def clean_cell(cell: str) -> str:
    """Trim whitespace, then drop one leading and one trailing double quote."""
    cell = cell.strip()
    if cell.startswith(QUOTE):
        cell = cell[1:]
    if cell.endswith(QUOTE):
        cell = cell[:-1]
    return cell


def split_row(line: str, delimiter: str) -> list[str]:
    """
    Split ``line`` on ``delimiter`` without splitting inside double quotes.

    A delimiter is a split point only when the text after it holds an even
    number of quote characters. The scanner walks the line from its end and
    toggles between the outside and inside states on every quote, so the
    state at each delimiter is exactly that parity, balanced quotes or not.
    Cells are returned raw; see ``clean_cell``.
    """
    cells: list[str] = []
    inside_quotes = False
    end = len(line)
    for pos in range(len(line) - 1, -1, -1):
        char = line[pos]
        if char == QUOTE:
            inside_quotes = not inside_quotes
        elif char == delimiter and not inside_quotes:
            cells.append(line[pos + 1 : end])
            end = pos
    cells.append(line[:end])
    cells.reverse()
    return cells


def parse(text: str, delimiter: str | None = None) -> Table:
    """
    Parse CSV text into a ``Table``.

    Never fails on malformed input: empty text gives an empty table and
    ragged rows are passed through as they are. The delimiter is sniffed
    from the text unless given explicitly.
    """
    text = normalize_newlines(text)
    lines = non_blank_lines(text)
    if not lines:
        return Table(headers=None, rows=[])

    if delimiter is None:
        delimiter = sniff(text)

    first_cells = [cell.strip() for cell in lines[0].split(delimiter)]
    headers: list[str] | None = None
    data_lines = lines
    if looks_like_header(first_cells):
        headers = first_cells
        data_lines = lines[1:]
    logger.debug("Header row %s, %d data line(s)", "found" if headers else "absent", len(data_lines))

    rows = [[clean_cell(cell) for cell in split_row(line, delimiter)] for line in data_lines]
    return Table(headers=headers, rows=rows)
