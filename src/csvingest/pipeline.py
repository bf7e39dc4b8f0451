"""Decode or fetch a source, parse it, and render its sales summary."""

from __future__ import annotations

import logging

from csvingest.exceptions import IngestError
from csvingest.models.config import IngestConfig
from csvingest.parsing.base import Table
from csvingest.parsing.csv_parser import parse
from csvingest.services.decoder import decode, ensure_mime, is_data_url
from csvingest.services.fetcher import HttpTextSource, TextSource, fetch_text
from csvingest.services.report import RowSink, SalesReport, render_report, summarize
from csvingest.utils.storage import load_config

logger = logging.getLogger(__name__)


async def load_text(source: str, text_source: TextSource | None = None, config: IngestConfig | None = None) -> str:
    """
    Return the CSV text behind ``source``: decoded for data URLs, fetched otherwise.

    Without an explicit ``config`` the stored configuration is used.
    """
    config = config or load_config()
    if is_data_url(source):
        payload = decode(source, config.fallback_encoding)
        ensure_mime(payload, config.required_mime)
        return payload.text

    if text_source is None:
        text_source = HttpTextSource(timeout=config.fetch_timeout)
    logger.debug("Fetching external reference %s", source)
    return await fetch_text(source, text_source)


async def load_table(source: str, text_source: TextSource | None = None, config: IngestConfig | None = None) -> Table:
    """Load ``source`` and parse it into a ``Table``."""
    return parse(await load_text(source, text_source, config))


async def process(
    source: str,
    sink: RowSink,
    text_source: TextSource | None = None,
    config: IngestConfig | None = None,
) -> SalesReport | None:
    """
    Load, summarize and render ``source`` into ``sink``.

    Ingestion errors are reported through ``sink.show_error`` and result in
    None; nothing else is written to the sink in that case.
    """
    config = config or load_config()
    try:
        table = await load_table(source, text_source, config)
    except IngestError as e:
        logger.error("Error processing sales data: %s", e)
        sink.show_error(f"Error: {e}")
        return None

    report = summarize(table, config)
    render_report(report, sink, config.decimal_places)
    logger.info("Rendered %d row(s), total %s", len(report.rows), report.total)
    return report
