"""Exception taxonomy for doimeta.

Missing metadata fields are never errors; they resolve to ``None``. The
exceptions below cover fatal conditions only.
"""

__all__ = [
    "DoiMetaError",
    "InvalidIdentifier",
    "MalformedDocument",
    "UnsupportedFormat",
    "ContentTypeMismatch",
    "NoBackendConfigured",
    "TransportError",
]


class DoiMetaError(Exception):
    """Base class for all doimeta errors."""


class InvalidIdentifier(DoiMetaError, ValueError):
    """Raised when a string does not normalize to a valid DOI."""

    def __init__(self, raw: str) -> None:
        """Initialize invalid identifier error.

        Parameters
        ----------
        raw : str
            The rejected input string.
        """
        super().__init__(f"Supplied string does not appear to be a valid DOI: {raw!r}")
        self.raw = raw


class MalformedDocument(DoiMetaError):
    """Raised when a source document is not syntactically valid JSON or XML."""

    def __init__(self, message: str, source_format: str | None = None) -> None:
        """Initialize malformed document error.

        Parameters
        ----------
        message : str
            Error message.
        source_format : str | None, optional
            Format the document was parsed as.
        """
        super().__init__(message)
        self.source_format = source_format


class UnsupportedFormat(DoiMetaError):
    """Raised when no parser matches a declared content type."""

    def __init__(self, content_type: str | None) -> None:
        """Initialize unsupported format error.

        Parameters
        ----------
        content_type : str | None
            The declared content type.
        """
        super().__init__(f"No metadata parser available for content type: {content_type!r}")
        self.content_type = content_type


class ContentTypeMismatch(DoiMetaError):
    """Raised when a 200 response carries neither JSON nor XML."""

    def __init__(self, content_type: str | None, url: str | None = None) -> None:
        """Initialize content type mismatch error.

        Parameters
        ----------
        content_type : str | None
            Content type of the final response.
        url : str | None, optional
            Final URL after redirects.
        """
        super().__init__(
            f"Expected a JSON or XML metadata document, got content type {content_type!r}"
            + (f" from {url}" if url else "")
        )
        self.content_type = content_type
        self.url = url


class NoBackendConfigured(DoiMetaError):
    """Raised when retrieval is attempted before a transport backend is selected."""

    def __init__(self, message: str | None = None) -> None:
        """Initialize missing backend error.

        Parameters
        ----------
        message : str | None, optional
            Override for the default message.
        """
        super().__init__(
            message or "No transport backend selected. Call use_backend() or pass a transport."
        )


class TransportError(DoiMetaError):
    """Raised when the HTTP transport fails before a response is received."""
