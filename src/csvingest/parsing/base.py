"""Data models shared by the sniffer, the parser and the report builder."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field

# Candidate field separators in tie-break order
DELIMITERS: tuple[str, ...] = (",", ";", "\t")
DEFAULT_DELIMITER = DELIMITERS[0]

# Leading numeric prefix, read the way a lenient float parser reads it
_NUMBER_PREFIX = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


@dataclass
class Table:
    """Parsed CSV content. Rows may be ragged relative to the headers."""

    headers: list[str] | None
    rows: list[list[str]] = field(default_factory=list)

    @property
    def has_headers(self) -> bool:
        return self.headers is not None

    def to_text(self, delimiter: str = DEFAULT_DELIMITER) -> str:
        """Rebuild delimited text from the table (no quoting is applied)."""
        lines = [delimiter.join(row) for row in self.rows]
        if self.headers is not None:
            lines.insert(0, delimiter.join(self.headers))
        return "\n".join(lines)


def parse_number(text: str) -> float | None:
    """
    Parse the numeric prefix of ``text``.

    Leading and trailing whitespace is ignored, as is anything after the
    number itself ("12 pcs" reads as 12.0). Returns None when the text does
    not start with a number.
    """
    match = _NUMBER_PREFIX.match(text.strip())
    if match is None:
        return None
    token = match.group(0)
    if token.lstrip("+-") == "Infinity":
        return -math.inf if token.startswith("-") else math.inf
    return float(token)


def is_number(text: str) -> bool:
    return parse_number(text) is not None
