"""Content-type based selection of a metadata parser."""

from collections.abc import Callable
from pathlib import Path

from doimeta.errors import UnsupportedFormat
from doimeta.models import FieldExtractor, MetadataRecord
from doimeta.parse.base import SUPPORTED_EXTENSIONS, sniff_content_type
from doimeta.parse.csl_json import CslJsonParser
from doimeta.parse.unixref_xml import UnixrefXmlParser

ParserFactory = Callable[[str | bytes], FieldExtractor]

_PARSER_MAP: dict[str, ParserFactory] = {
    "csl_json": CslJsonParser,
    "unixref_xml": UnixrefXmlParser,
}


def get_parser_for_format(format_name: str) -> ParserFactory | None:
    """Get parser class for format.

    Parameters
    ----------
    format_name : str
        Format name (csl_json|unixref_xml).

    Returns
    -------
    ParserFactory | None
        Parser class or None if format not supported.
    """
    return _PARSER_MAP.get(format_name)


def parser_for_content_type(content_type: str | None) -> ParserFactory:
    """Select the parser for a declared content type.

    Parameters
    ----------
    content_type : str | None
        MIME type as reported by the resolver.

    Returns
    -------
    ParserFactory
        ``CslJsonParser`` or ``UnixrefXmlParser``.

    Raises
    ------
    UnsupportedFormat
        If the content type matches neither format.
    """
    parser = get_parser_for_format(sniff_content_type(content_type))
    if parser is None:
        raise UnsupportedFormat(content_type)
    return parser


def parse_document(body: str | bytes, content_type: str | None) -> MetadataRecord:
    """Parse a metadata document into a record.

    Parameters
    ----------
    body : str | bytes
        Document text.
    content_type : str | None
        Declared MIME type.

    Returns
    -------
    MetadataRecord
        Lazily evaluated record over the parsed document.

    Raises
    ------
    UnsupportedFormat
        If no parser handles the content type.
    MalformedDocument
        If the document is not well-formed for its format.
    """
    parser = parser_for_content_type(content_type)
    return MetadataRecord(parser(body))


def parse_file(path: Path, format_name: str | None = None) -> MetadataRecord:
    """Parse a metadata document stored on disk.

    The format is taken from ``format_name`` when given, otherwise guessed
    from the file extension.

    Parameters
    ----------
    path : Path
        Document path.
    format_name : str | None
        Format name (csl_json|unixref_xml).

    Returns
    -------
    MetadataRecord
        Parsed record.

    Raises
    ------
    UnsupportedFormat
        If the format is neither given nor recognizable from the extension.
    OSError
        If the file cannot be read.
    """
    fmt = format_name or SUPPORTED_EXTENSIONS.get(path.suffix.lower(), "unknown")
    parser = get_parser_for_format(fmt)
    if parser is None:
        raise UnsupportedFormat(fmt)
    return MetadataRecord(parser(path.read_bytes()))
