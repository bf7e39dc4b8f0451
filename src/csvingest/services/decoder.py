"""Payload decoding for data URLs, bare base64 and percent-encoded text."""

from __future__ import annotations

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from urllib.parse import unquote

import chardet

from csvingest.exceptions import FormatError

logger = logging.getLogger(__name__)

DATA_URL_PREFIX = "data:"
DEFAULT_MIME = "text/plain"
BASE64_TOKEN = "base64"

SCHEME_DATA_URL = "data-url"
SCHEME_RAW_BASE64 = "raw-base64"
SCHEME_PERCENT_ENCODED = "percent-encoded"
SCHEMES = (SCHEME_DATA_URL, SCHEME_RAW_BASE64, SCHEME_PERCENT_ENCODED)

_BASE64_WHITESPACE = re.compile(r"[\t\n\f\r ]")
_BAD_PERCENT_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


@dataclass(frozen=True)
class EncodedSource:
    """An encoded input tagged with how it is encoded."""

    scheme: str
    mime_hint: str
    payload: str

    def __post_init__(self) -> None:
        if self.scheme not in SCHEMES:
            raise ValueError(f"Unknown encoding scheme: {self.scheme}")

    @classmethod
    def from_string(cls, source: str) -> EncodedSource:
        """Tag a ``data:`` URL. Anything else is an external reference, not an encoded source."""
        if not is_data_url(source):
            raise FormatError("not a data URL")
        return cls(scheme=SCHEME_DATA_URL, mime_hint="", payload=source)


@dataclass(frozen=True)
class DecodedPayload:
    """Decoded text together with the MIME type it was declared with."""

    mime: str
    is_base64: bool
    text: str


def is_data_url(source: str) -> bool:
    return source.startswith(DATA_URL_PREFIX)


def decode_bytes(raw: bytes, fallback_encoding: str = "latin-1") -> str:
    """Decode bytes as UTF-8 (dropping a BOM), falling back to chardet detection."""
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        encoding = chardet.detect(raw)["encoding"] or fallback_encoding
        logger.warning("Payload is not valid UTF-8, decoding as %s", encoding)
        try:
            return raw.decode(encoding, errors="replace")
        except LookupError:
            logger.warning("Unknown encoding %s, decoding as %s", encoding, fallback_encoding)
            return raw.decode(fallback_encoding, errors="replace")


def decode_base64_text(payload: str, fallback_encoding: str = "latin-1") -> str:
    """
    Decode standard base64 into text.

    Whitespace is ignored and missing ``=`` padding is accepted; anything
    outside the alphabet, misplaced padding or an impossible length raises
    ``FormatError``.
    """
    data = _BASE64_WHITESPACE.sub("", payload)
    # Padding is only legal as one or two trailing characters of a full quantum
    if len(data) % 4 == 0:
        if data.endswith("=="):
            data = data[:-2]
        elif data.endswith("="):
            data = data[:-1]
    if "=" in data or len(data) % 4 == 1:
        raise FormatError("bad base64")
    data += "=" * (-len(data) % 4)
    try:
        raw = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise FormatError("bad base64") from e
    return decode_bytes(raw, fallback_encoding)


def decode_percent_text(payload: str) -> str:
    """Percent-decode a URL component. ``+`` is kept as a literal plus sign."""
    if _BAD_PERCENT_ESCAPE.search(payload):
        raise FormatError("bad percent-encoding")
    try:
        return unquote(payload, errors="strict")
    except UnicodeDecodeError as e:
        raise FormatError("bad percent-encoding") from e


def parse_data_url(source: str) -> tuple[str, bool, str]:
    """Split a data URL into ``(mime, is_base64, payload)``."""
    if not is_data_url(source):
        raise FormatError("not a data URL")
    comma = source.find(",")
    if comma == -1:
        raise FormatError("missing comma separator")

    header = source[len(DATA_URL_PREFIX) : comma]
    payload = source[comma + 1 :]
    parts = header.split(";")
    mime = parts[0] or DEFAULT_MIME
    return mime, BASE64_TOKEN in parts, payload


def decode(source: str, fallback_encoding: str = "latin-1") -> DecodedPayload:
    """Decode a ``data:`` URL into its MIME type and text."""
    mime, is_base64, payload = parse_data_url(source)
    logger.debug("Decoding data URL (mime=%s, base64=%s, %d chars)", mime, is_base64, len(payload))
    if is_base64:
        text = decode_base64_text(payload, fallback_encoding)
    else:
        text = decode_percent_text(payload)
    return DecodedPayload(mime=mime, is_base64=is_base64, text=text)


def decode_source(source: EncodedSource, fallback_encoding: str = "latin-1") -> DecodedPayload:
    """Decode any tagged source."""
    if source.scheme == SCHEME_DATA_URL:
        return decode(source.payload, fallback_encoding)

    mime = source.mime_hint or DEFAULT_MIME
    if source.scheme == SCHEME_RAW_BASE64:
        return DecodedPayload(mime=mime, is_base64=True, text=decode_base64_text(source.payload, fallback_encoding))
    return DecodedPayload(mime=mime, is_base64=False, text=decode_percent_text(source.payload))


def ensure_mime(payload: DecodedPayload, required: str) -> None:
    """Reject payloads whose MIME type does not contain ``required``."""
    if required and required not in payload.mime:
        raise FormatError(f"unsupported MIME type {payload.mime!r}, expected {required!r}")
