"""Sales aggregation over a parsed table and rendering to row sinks."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Protocol

import yaml

from csvingest.models.config import IngestConfig
from csvingest.parsing.base import Table, parse_number

logger = logging.getLogger(__name__)


@dataclass
class SalesRow:
    """One display row: a label and its numeric value."""

    label: str
    value: float


@dataclass
class SalesReport:
    """Total and per-row values of the value column."""

    value_column: int
    label_column: int
    rows: list[SalesRow] = field(default_factory=list)
    total: float = 0.0
    skipped: int = 0


def format_amount(value: float, places: int = 2) -> str:
    """Fixed-point text with ``places`` decimals, exact ties rounded away from zero."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        value = 0.0
    with localcontext() as ctx:
        # Wide enough for every finite float at any configured precision
        ctx.prec = 400
        return str(Decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP))


def find_column(headers: Sequence[str] | None, keywords: Sequence[str], default: int) -> int:
    """Index of the first header containing any keyword (case-insensitive), else ``default``."""
    if headers:
        lowered = [k.lower() for k in keywords]
        for idx, header in enumerate(headers):
            name = header.lower()
            if any(k in name for k in lowered):
                return idx
    return default


def infer_columns(table: Table, config: IngestConfig | None = None) -> tuple[int, int]:
    """Return ``(value_index, label_index)`` for the table."""
    config = config or IngestConfig()
    value_index = find_column(table.headers, config.value_keywords, config.default_value_column)
    label_index = find_column(table.headers, config.label_keywords, config.default_label_column)
    return value_index, label_index


def summarize(table: Table, config: IngestConfig | None = None) -> SalesReport:
    """
    Sum the value column and collect (label, value) rows.

    Rows too short to hold both columns and rows whose value cell is not
    numeric are skipped.
    """
    value_index, label_index = infer_columns(table, config)
    report = SalesReport(value_column=value_index, label_column=label_index)
    needed = max(value_index, label_index)
    for row in table.rows:
        if len(row) <= needed:
            report.skipped += 1
            continue
        value = parse_number(row[value_index])
        if value is None:
            report.skipped += 1
            continue
        report.total += value
        report.rows.append(SalesRow(label=row[label_index], value=value))
    logger.debug(
        "Summarized %d row(s), skipped %d (value column %d, label column %d)",
        len(report.rows),
        report.skipped,
        value_index,
        label_index,
    )
    return report


class RowSink(Protocol):
    """Display surface receiving report rows, the total, or an error message."""

    def add_row(self, label: str, amount: str) -> None: ...

    def set_total(self, amount: str) -> None: ...

    def show_error(self, message: str) -> None: ...


class ListRowSink:
    """Collects rendered output in memory."""

    def __init__(self) -> None:
        self.rows: list[tuple[str, str]] = []
        self.total: str | None = None
        self.error: str | None = None

    def add_row(self, label: str, amount: str) -> None:
        self.rows.append((label, amount))

    def set_total(self, amount: str) -> None:
        self.total = amount

    def show_error(self, message: str) -> None:
        self.error = message


class MarkdownRowSink:
    """Renders the report as a Markdown table with YAML frontmatter."""

    def __init__(self, title: str = "Sales", label_header: str = "Product", amount_header: str = "Sales") -> None:
        self.title = title
        self.label_header = label_header
        self.amount_header = amount_header
        self._rows: list[tuple[str, str]] = []
        self._total: str | None = None
        self._error: str | None = None

    def add_row(self, label: str, amount: str) -> None:
        self._rows.append((label, amount))

    def set_total(self, amount: str) -> None:
        self._total = amount

    def show_error(self, message: str) -> None:
        self._error = message

    def _frontmatter(self) -> str:
        meta = {
            "title": self.title,
            "rows": len(self._rows),
            "total": self._total if self._total is not None else "",
            "generated": datetime.now().isoformat(timespec="seconds"),
        }
        if self._error:
            meta["error"] = self._error
        return "---\n" + yaml.dump(meta, allow_unicode=True, sort_keys=False) + "---"

    def render(self) -> str:
        lines = [self._frontmatter(), "", f"# {self.title}", ""]
        if self._error:
            lines.append(f"> {self._error}")
            return "\n".join(lines) + "\n"
        lines.append(f"| {self.label_header} | {self.amount_header} |")
        lines.append("| --- | ---: |")
        for label, amount in self._rows:
            cell = label.replace("|", "\\|")
            lines.append(f"| {cell} | {amount} |")
        lines.append("")
        lines.append(f"**Total:** {self._total if self._total is not None else ''}")
        return "\n".join(lines) + "\n"


def render_report(report: SalesReport, sink: RowSink, places: int = 2) -> None:
    """Write each row and then the total to ``sink``."""
    for row in report.rows:
        sink.add_row(row.label, format_amount(row.value, places))
    sink.set_total(format_amount(report.total, places))
