"""Base types and utilities for metadata parsers."""

import re
from typing import Any

from doimeta.errors import MalformedDocument

SUPPORTED_EXTENSIONS: dict[str, str] = {
    ".json": "csl_json",
    ".csl": "csl_json",
    ".xml": "unixref_xml",
    ".unixref": "unixref_xml",
}

PAGE_DASH_RE = re.compile(r"\s*[–—‐-]\s*")
WHITESPACE_RE = re.compile(r"\s+")


def decode_source(source: str | bytes, source_format: str | None = None) -> str:
    """Decode raw document bytes as UTF-8, tolerating a BOM.

    Parameters
    ----------
    source : str | bytes
        Document as received.
    source_format : str | None, optional
        Format reported on a decoding failure.

    Returns
    -------
    str
        Document text.

    Raises
    ------
    MalformedDocument
        If the bytes are not valid UTF-8.
    """
    if not isinstance(source, bytes):
        return source
    try:
        return source.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise MalformedDocument(f"Document is not valid UTF-8: {e}", source_format) from e


def clean_text(value: Any) -> str | None:
    """Coerce a scalar to stripped text.

    Strings are stripped and have internal whitespace collapsed; numbers are
    rendered with ``str``. Empty strings and any other type yield None.

    Parameters
    ----------
    value : Any
        Raw value from the parsed document.

    Returns
    -------
    str | None
        Text or None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return str(value)
    if not isinstance(value, str):
        return None
    text = WHITESPACE_RE.sub(" ", value).strip()
    return text or None


def sniff_content_type(content_type: str | None) -> str:
    """Map a declared MIME type to a format name.

    MIME parameters and case are ignored. Vendor aliases such as
    ``application/citeproc+json`` and ``application/unixref+xml`` are accepted.

    Parameters
    ----------
    content_type : str | None
        Content-Type header value.

    Returns
    -------
    str
        Format identifier (csl_json|unixref_xml|unknown).
    """
    mime = (content_type or "").split(";", 1)[0].strip().lower()

    if "json" in mime and ("citationstyles" in mime or "citeproc" in mime):
        return "csl_json"

    if "xml" in mime and "unixref" in mime:
        return "unixref_xml"

    return "unknown"
