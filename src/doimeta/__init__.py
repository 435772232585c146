"""DOI normalization and bibliographic metadata resolution.

This package provides:
- Identifiers (doimeta.identifier): DOI recognition and canonicalization
- Retrieval (doimeta.retrieve): content-negotiated metadata lookups
- Parsing (doimeta.parse): CSL-JSON and UnixRef XML extractors
- Data models (doimeta.models): the uniform MetadataRecord
- Audit (doimeta.audit): JSONL event logging
- CLI (doimeta.cli): command-line interface
- Public API (doimeta.api): high-level convenience functions
"""

__version__ = "0.1.0"
__license__ = "MIT"

from doimeta.api import (
    fetch_many,
    fetch_metadata,
    parse_document,
    parse_file,
    write_jsonl,
)
from doimeta.config import ResolverConfig
from doimeta.errors import (
    ContentTypeMismatch,
    DoiMetaError,
    InvalidIdentifier,
    MalformedDocument,
    NoBackendConfigured,
    TransportError,
    UnsupportedFormat,
)
from doimeta.identifier import Doi, extract_all, is_valid, normalize
from doimeta.models import DocumentKind, MetadataRecord
from doimeta.retrieve import Retriever

__all__ = [
    "__version__",
    "__license__",
    # API
    "fetch_many",
    "fetch_metadata",
    "parse_document",
    "parse_file",
    "write_jsonl",
    # Core types
    "Doi",
    "DocumentKind",
    "MetadataRecord",
    "ResolverConfig",
    "Retriever",
    # Identifiers
    "extract_all",
    "is_valid",
    "normalize",
    # Errors
    "ContentTypeMismatch",
    "DoiMetaError",
    "InvalidIdentifier",
    "MalformedDocument",
    "NoBackendConfigured",
    "TransportError",
    "UnsupportedFormat",
]
