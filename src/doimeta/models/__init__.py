"""Shared data types for doimeta.

This package contains the uniform metadata record and the value types the
format-specific parsers produce.
"""

from doimeta.models.record import FIELDS, MetadataRecord
from doimeta.models.types import (
    AUTHOR,
    EDITOR,
    Classification,
    Contributor,
    DocumentKind,
    FieldExtractor,
    PartialDate,
)

__all__ = [
    # Record
    "FIELDS",
    "MetadataRecord",
    # Value types
    "AUTHOR",
    "EDITOR",
    "Classification",
    "Contributor",
    "DocumentKind",
    "FieldExtractor",
    "PartialDate",
]
