"""Tests for sales aggregation and row sinks."""

import math

import pytest
import yaml

from csvingest.models.config import IngestConfig
from csvingest.parsing.base import Table
from csvingest.parsing.csv_parser import parse
from csvingest.services.report import (
    ListRowSink,
    MarkdownRowSink,
    SalesReport,
    SalesRow,
    find_column,
    format_amount,
    infer_columns,
    render_report,
    summarize,
)

WORKED_TEXT = "Products,Sales\nPhones,1000\nBooks,123.45\nNotebooks,111.11\n"


class TestColumnInference:
    """Value and label columns from header text."""

    def test_worked_example(self):
        assert infer_columns(parse(WORKED_TEXT)) == (1, 0)

    def test_case_insensitive_substring(self):
        table = Table(headers=["Region", "Total SALES", "Product Name"], rows=[])
        assert infer_columns(table) == (1, 2)

    def test_defaults_without_headers(self):
        assert infer_columns(Table(headers=None, rows=[["a", "1"]])) == (1, 0)

    def test_defaults_when_not_found(self):
        assert infer_columns(Table(headers=["x", "y", "z"], rows=[])) == (1, 0)

    def test_first_match_wins(self):
        assert find_column(["sale_date", "sales"], ["sale"], 1) == 0

    def test_configured_keywords(self):
        config = IngestConfig(value_keywords=["revenue"], label_keywords=["item"])
        table = Table(headers=["Revenue", "Item"], rows=[])
        assert infer_columns(table, config) == (0, 1)


class TestSummarize:
    """Totals over the value column."""

    def test_worked_example_total(self):
        report = summarize(parse(WORKED_TEXT))
        assert report.total == pytest.approx(1234.56)
        assert [row.label for row in report.rows] == ["Phones", "Books", "Notebooks"]
        assert format_amount(report.total) == "1234.56"

    def test_short_rows_skipped(self):
        table = Table(headers=["Product", "Sales"], rows=[["A", "1"], ["B"], ["C", "2"]])
        report = summarize(table)
        assert report.total == 3
        assert report.skipped == 1
        assert [row.label for row in report.rows] == ["A", "C"]

    def test_non_numeric_values_skipped(self):
        table = Table(headers=["Product", "Sales"], rows=[["A", "n/a"], ["B", "5"], ["C", ""]])
        report = summarize(table)
        assert report.rows == [SalesRow(label="B", value=5.0)]
        assert report.skipped == 2

    def test_no_headers_uses_default_columns(self):
        report = summarize(parse("1,10\n2,20"))
        assert report.total == 30
        assert [row.label for row in report.rows] == ["1", "2"]

    def test_empty_table(self):
        report = summarize(Table(headers=None, rows=[]))
        assert report.total == 0
        assert report.rows == []


class TestFormatAmount:
    """Fixed-point display text."""

    def test_pads_and_rounds(self):
        assert format_amount(1000) == "1000.00"
        assert format_amount(123.456) == "123.46"

    def test_exact_ties_round_away_from_zero(self):
        assert format_amount(0.125) == "0.13"
        assert format_amount(-0.125) == "-0.13"
        assert format_amount(2.5, places=0) == "3"

    def test_binary_value_decides_near_ties(self):
        # 1.005 is stored slightly below the tie
        assert format_amount(1.005) == "1.00"

    def test_negative_zero(self):
        assert format_amount(-0.0) == "0.00"

    def test_large_value(self):
        assert format_amount(1e22) == "10000000000000000000000.00"

    def test_non_finite(self):
        assert format_amount(math.inf) == "Infinity"
        assert format_amount(-math.inf) == "-Infinity"
        assert format_amount(math.nan) == "NaN"


def test_infinite_sales_value_is_displayed():
    sink = ListRowSink()
    render_report(summarize(parse("Product,Sales\nA,Infinity")), sink)
    assert sink.rows == [("A", "Infinity")]
    assert sink.total == "Infinity"


def test_render_report_to_list_sink():
    sink = ListRowSink()
    render_report(summarize(parse(WORKED_TEXT)), sink)
    assert sink.rows == [("Phones", "1000.00"), ("Books", "123.45"), ("Notebooks", "111.11")]
    assert sink.total == "1234.56"
    assert sink.error is None


class TestMarkdownRowSink:
    """Markdown rendering with YAML frontmatter."""

    def test_renders_table_and_total(self):
        sink = MarkdownRowSink(title="Q1")
        render_report(summarize(parse(WORKED_TEXT)), sink)
        markdown = sink.render()
        assert markdown.startswith("---\n")
        assert "# Q1" in markdown
        assert "| Phones | 1000.00 |" in markdown
        assert "**Total:** 1234.56" in markdown

    def test_frontmatter_is_valid_yaml(self):
        sink = MarkdownRowSink()
        render_report(SalesReport(value_column=1, label_column=0, rows=[SalesRow("A", 1.0)], total=1.0), sink)
        front = sink.render().split("---\n")[1]
        meta = yaml.safe_load(front)
        assert meta["rows"] == 1
        assert meta["total"] == "1.00"

    def test_pipe_in_label_is_escaped(self):
        sink = MarkdownRowSink()
        sink.add_row("A|B", "1.00")
        assert "| A\\|B | 1.00 |" in sink.render()

    def test_error_replaces_table(self):
        sink = MarkdownRowSink()
        sink.show_error("Error: boom")
        markdown = sink.render()
        assert "> Error: boom" in markdown
        assert "| Product |" not in markdown
