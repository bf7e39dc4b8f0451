"""CSV ingestion: payload decoding, delimiter sniffing and quote-aware parsing."""

from .exceptions import FetchError, FormatError, IngestError
from .parsing import Table, looks_like_header, parse, sniff
from .pipeline import load_table, load_text, process
from .services.decoder import DecodedPayload, EncodedSource, decode, decode_source

__all__ = [
    "DecodedPayload",
    "EncodedSource",
    "FetchError",
    "FormatError",
    "IngestError",
    "Table",
    "decode",
    "decode_source",
    "load_table",
    "load_text",
    "looks_like_header",
    "parse",
    "process",
    "sniff",
]
