"""Metadata document parsing.

Supported formats:
- CSL-JSON (application/vnd.citationstyles.csl+json)
- Crossref UnixRef XML (application/vnd.crossref.unixref+xml)

Main entry points:
- parse_document: Parse a document given its content type
- parse_file: Parse a document stored on disk
"""

from doimeta.parse.csl_json import CslJsonParser
from doimeta.parse.dispatch import (
    get_parser_for_format,
    parse_document,
    parse_file,
    parser_for_content_type,
)
from doimeta.parse.unixref_xml import UnixrefXmlParser

__all__ = [
    "CslJsonParser",
    "UnixrefXmlParser",
    "get_parser_for_format",
    "parse_document",
    "parse_file",
    "parser_for_content_type",
]
