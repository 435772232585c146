"""DOI metadata retrieval over HTTP.

Main entry points:
- Retriever: content-negotiated lookups and redirect-target resolution
- RequestsTransport: default requests-based transport
"""

from doimeta.retrieve.retriever import REDIRECT_CODES, RetrievalResult, Retriever
from doimeta.retrieve.transport import (
    BACKENDS,
    RequestsTransport,
    Transport,
    TransportResponse,
)

__all__ = [
    "BACKENDS",
    "REDIRECT_CODES",
    "RequestsTransport",
    "RetrievalResult",
    "Retriever",
    "Transport",
    "TransportResponse",
]
