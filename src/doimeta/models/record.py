"""Uniform metadata record produced by every parser.

A record wraps a format-specific ``FieldExtractor`` and resolves each field
lazily on first access. Resolved values are memoized per field for the
lifetime of the record; the cache is the only state that ever changes.
"""

import datetime
import threading
from typing import Any

from doimeta.models.types import (
    AUTHOR,
    EDITOR,
    Classification,
    Contributor,
    DocumentKind,
    FieldExtractor,
    PartialDate,
)

__all__ = ["FIELDS", "MetadataRecord"]

# Fields exposed through to_dict(), in output order.
FIELDS: tuple[str, ...] = (
    "doi",
    "url",
    "fulltext_url",
    "journal_title",
    "journal_isoabbrev_title",
    "book_title",
    "book_series_title",
    "conference_title",
    "conference_series_title",
    "article_title",
    "chapter_title",
    "chapter_number",
    "issn",
    "eissn",
    "isbn",
    "eisbn",
    "publisher",
    "volume",
    "issue",
    "pagination",
    "publication_date",
    "publication_date_parts",
    "contributors",
)

_CLASSIFICATION = "_classification"


class MetadataRecord:
    """Bibliographic metadata for one parsed document.

    Attributes
    ----------
    source_format : str
        Format the document was parsed from.
    source : str
        Raw document text.
    """

    def __init__(self, extractor: FieldExtractor) -> None:
        """Initialize record over an extraction strategy.

        Parameters
        ----------
        extractor : FieldExtractor
            Parsed document and its field lookups.
        """
        self._extractor = extractor
        self._cache: dict[str, Any] = {}
        # Re-entrant: composite fields resolve their parts through get().
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"<MetadataRecord {self.source_format} doi={self.doi!r} kind={self.kind.value}>"

    @property
    def source_format(self) -> str:
        return self._extractor.source_format

    @property
    def source(self) -> str:
        return self._extractor.source

    def get(self, field: str) -> Any:
        """Resolve a field by name, computing it at most once.

        Parameters
        ----------
        field : str
            Field name, e.g. ``"journal_title"``.

        Returns
        -------
        Any
            The field value, or None when the document lacks it.
        """
        try:
            return self._cache[field]
        except KeyError:
            pass
        with self._lock:
            if field not in self._cache:
                self._cache[field] = self._resolve(field)
            return self._cache[field]

    def _resolve(self, field: str) -> Any:
        if field == _CLASSIFICATION:
            return self._extractor.classify()

        if field == "publisher":
            return _compose_publisher(self.get("publisher_name"), self.get("publisher_place"))

        if field == "publication_date":
            parts = self.get("publication_date_parts")
            return parts.to_date() if parts else None

        by_role = self._extractor.contributors_by_role
        if field == "contributors" and by_role:
            return self.get("authors") + self.get("editors")
        if field == "authors" and not by_role:
            return tuple(c for c in self.get("contributors") if c.role == AUTHOR)
        if field == "editors" and not by_role:
            return tuple(c for c in self.get("contributors") if c.role == EDITOR)

        return self._extractor.extract(field, self.classification)

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    @property
    def classification(self) -> Classification:
        return self.get(_CLASSIFICATION)

    @property
    def kind(self) -> DocumentKind:
        return self.classification.kind

    def is_journal(self) -> bool:
        return self.classification.journal

    def is_journal_article(self) -> bool:
        return self.classification.journal_article

    def is_book(self) -> bool:
        return self.classification.book

    def is_book_series(self) -> bool:
        return self.classification.book_series

    def is_book_chapter(self) -> bool:
        return self.classification.book_chapter

    def is_conference_proceeding(self) -> bool:
        return self.classification.conference_proceeding

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def doi(self) -> str | None:
        return self.get("doi")

    @property
    def url(self) -> str | None:
        return self.get("url")

    @property
    def fulltext_url(self) -> str | None:
        return self.get("fulltext_url")

    # ------------------------------------------------------------------
    # Titles
    # ------------------------------------------------------------------

    @property
    def journal_title(self) -> str | None:
        return self.get("journal_title")

    @property
    def journal_isoabbrev_title(self) -> str | None:
        return self.get("journal_isoabbrev_title")

    @property
    def book_title(self) -> str | None:
        return self.get("book_title")

    @property
    def book_series_title(self) -> str | None:
        return self.get("book_series_title")

    @property
    def conference_title(self) -> str | None:
        return self.get("conference_title")

    @property
    def conference_series_title(self) -> str | None:
        return self.get("conference_series_title")

    @property
    def article_title(self) -> str | None:
        return self.get("article_title")

    @property
    def chapter_title(self) -> str | None:
        return self.get("chapter_title")

    @property
    def chapter_number(self) -> str | None:
        return self.get("chapter_number")

    # ------------------------------------------------------------------
    # Identifiers
    # ------------------------------------------------------------------

    @property
    def issn(self) -> str | None:
        return self.get("issn")

    @property
    def eissn(self) -> str | None:
        return self.get("eissn")

    @property
    def isbn(self) -> str | None:
        return self.get("isbn")

    @property
    def eisbn(self) -> str | None:
        return self.get("eisbn")

    @property
    def issns(self) -> tuple[str, ...]:
        """Every ISSN in document order, regardless of media type."""
        return self.get("issns")

    @property
    def isbns(self) -> tuple[str, ...]:
        """Every ISBN in document order, regardless of media type."""
        return self.get("isbns")

    # ------------------------------------------------------------------
    # Publication facts
    # ------------------------------------------------------------------

    @property
    def publisher(self) -> str | None:
        """Publisher name, with ``"; {place}"`` appended when the place is known.

        None whenever the name is absent, even if a place exists.
        """
        return self.get("publisher")

    @property
    def publisher_name(self) -> str | None:
        return self.get("publisher_name")

    @property
    def publisher_place(self) -> str | None:
        return self.get("publisher_place")

    @property
    def volume(self) -> str | None:
        return self.get("volume")

    @property
    def issue(self) -> str | None:
        return self.get("issue")

    @property
    def pagination(self) -> str | None:
        return self.get("pagination")

    @property
    def publication_date(self) -> datetime.date | None:
        return self.get("publication_date")

    @property
    def publication_date_parts(self) -> PartialDate | None:
        return self.get("publication_date_parts")

    # ------------------------------------------------------------------
    # Contributors
    # ------------------------------------------------------------------

    @property
    def contributors(self) -> tuple[Contributor, ...]:
        return self.get("contributors")

    @property
    def authors(self) -> tuple[Contributor, ...]:
        return self.get("authors")

    @property
    def editors(self) -> tuple[Contributor, ...]:
        return self.get("editors")

    def to_dict(self) -> dict[str, Any]:
        """Flatten the record into a JSON-serializable mapping.

        Contributors become a list of per-contributor dicts, the full date an
        ISO-8601 string and the partial date a ``{"year", "month", "day"}``
        dict. The document kind is included under ``"kind"``.

        Returns
        -------
        dict[str, Any]
            Mapping from field name to value.
        """
        data: dict[str, Any] = {"kind": self.kind.value}
        for field in FIELDS:
            value = self.get(field)
            if field == "contributors":
                value = [c.to_dict() for c in value]
            elif isinstance(value, datetime.date):
                value = value.isoformat()
            elif isinstance(value, PartialDate):
                value = value.to_dict()
            data[field] = value
        return data


def _compose_publisher(name: str | None, place: str | None) -> str | None:
    if not name:
        return None
    return f"{name}; {place}" if place else name
