"""Delimiter sniffing and CSV parsing."""

from .base import DEFAULT_DELIMITER, DELIMITERS, Table, is_number, parse_number
from .csv_parser import clean_cell, looks_like_header, parse, split_row
from .sniffer import sniff

__all__ = [
    "DEFAULT_DELIMITER",
    "DELIMITERS",
    "Table",
    "clean_cell",
    "is_number",
    "looks_like_header",
    "parse",
    "parse_number",
    "sniff",
    "split_row",
]
