"""Field delimiter detection from the first line of a text."""

from __future__ import annotations

import logging

from .base import DEFAULT_DELIMITER, DELIMITERS

logger = logging.getLogger(__name__)


def first_line(text: str) -> str:
    """Return ``text`` up to, not including, its first newline."""
    end = text.find("\n")
    return text if end == -1 else text[:end]


def sniff(text: str) -> str:
    """Infer the field delimiter: the candidate yielding the most fields on the first line."""
    sample = first_line(text)
    best = DEFAULT_DELIMITER
    best_fields = 0
    for candidate in DELIMITERS:
        fields = sample.count(candidate) + 1
        # Only a strictly larger count replaces the current choice
        if fields > best_fields:
            best, best_fields = candidate, fields
    logger.debug("Sniffed delimiter %r (%d fields)", best, best_fields)
    return best
