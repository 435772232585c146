"""CSL-JSON metadata parser.

Format reference: https://citeproc-js.readthedocs.io/en/latest/csl-json/markup.html

Publication type comes from the open-ended ``type`` string, so the predicates
below are substring heuristics. ``is_journal`` requires the exact
type ``journal``: a type mentioning "journal" without "article" classifies as
neither journal nor journal article.
"""

import json
from typing import Any

from doimeta.errors import MalformedDocument
from doimeta.models import AUTHOR, EDITOR, Classification, Contributor, DocumentKind, PartialDate
from doimeta.parse.base import PAGE_DASH_RE, clean_text, decode_source

PARSER_NAME = "csl_json"

KIND_PRIORITY: tuple[DocumentKind, ...] = (
    DocumentKind.JOURNAL_ARTICLE,
    DocumentKind.JOURNAL,
    DocumentKind.BOOK_CHAPTER,
    DocumentKind.BOOK_SERIES,
    DocumentKind.BOOK,
    DocumentKind.CONFERENCE_PROCEEDING,
)

# link[].intended-application value Crossref uses for the plagiarism-check crawl.
SIMILARITY_CHECKING = "similarity-checking"


class CslJsonParser:
    """Field extractor over a CSL-JSON document.

    Attributes
    ----------
    source : str
        Raw JSON text.
    source_format : str
        Always ``"csl_json"``.
    contributors_by_role : bool
        True: ``author`` and ``editor`` are separate arrays.
    """

    source_format = PARSER_NAME
    contributors_by_role = True

    def __init__(self, source: str | bytes) -> None:
        """Parse the JSON text.

        Parameters
        ----------
        source : str | bytes
            CSL-JSON document.

        Raises
        ------
        MalformedDocument
            If the text is not JSON or its root is not an object.
        """
        self.source = decode_source(source, PARSER_NAME)
        try:
            data = json.loads(self.source)
        except json.JSONDecodeError as e:
            raise MalformedDocument(f"Invalid CSL-JSON: {e}", PARSER_NAME) from e

        if not isinstance(data, dict):
            raise MalformedDocument(
                f"CSL-JSON root must be an object, got {type(data).__name__}", PARSER_NAME
            )
        self._data: dict[str, Any] = data

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def classify(self) -> Classification:
        doc_type = (clean_text(self._data.get("type")) or "").lower()
        book_like = "book" in doc_type
        has_container = self._container_title() is not None

        return Classification(
            journal=doc_type == "journal",
            journal_article="journal" in doc_type and "article" in doc_type,
            book=book_like and not has_container,
            book_series=book_like and has_container,
            book_chapter="chapter" in doc_type,
            conference_proceeding="proceedings" in doc_type or "conference" in doc_type,
            priority=KIND_PRIORITY,
        )

    # ------------------------------------------------------------------
    # Field dispatch
    # ------------------------------------------------------------------

    def extract(self, field: str, classification: Classification) -> Any:
        """Resolve one field.

        Parameters
        ----------
        field : str
            Field name.
        classification : Classification
            Cached predicates for this document.

        Returns
        -------
        Any
            Field value or None.

        Raises
        ------
        KeyError
            If the field is unknown to this parser.
        """
        resolver = getattr(self, f"_field_{field}", None)
        if resolver is None:
            raise KeyError(f"Unknown metadata field: {field}")
        return resolver(classification)

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def _field_doi(self, c: Classification) -> str | None:
        return clean_text(self._data.get("DOI"))

    def _field_url(self, c: Classification) -> str | None:
        return clean_text(self._data.get("URL"))

    def _field_fulltext_url(self, c: Classification) -> str | None:
        links = self._data.get("link")
        if not isinstance(links, list):
            return None
        for link in links:
            if isinstance(link, dict) and link.get("intended-application") == SIMILARITY_CHECKING:
                return clean_text(link.get("URL"))
        return None

    # ------------------------------------------------------------------
    # Titles
    # ------------------------------------------------------------------

    def _field_journal_title(self, c: Classification) -> str | None:
        if c.journal_article:
            return self._container_title()
        if c.journal:
            return self._title()
        return None

    def _field_journal_isoabbrev_title(self, c: Classification) -> str | None:
        if c.journal_article:
            return _scalar(self._data.get("container-title-short"))
        if c.journal:
            return _scalar(self._data.get("short-title"))
        return None

    def _field_book_title(self, c: Classification) -> str | None:
        if c.book or c.book_series:
            return self._title()
        if c.book_chapter or c.conference_proceeding:
            return self._container_title()
        return None

    def _field_book_series_title(self, c: Classification) -> str | None:
        if c.book_series or c.conference_proceeding:
            return self._container_title()
        return None

    def _field_conference_title(self, c: Classification) -> str | None:
        if not c.conference_proceeding:
            return None
        event = self._data.get("event")
        if isinstance(event, dict):
            event = event.get("name")
        return _scalar(event)

    def _field_conference_series_title(self, c: Classification) -> str | None:
        if not c.conference_proceeding:
            return None
        return _scalar(self._data.get("collection-title"))

    def _field_article_title(self, c: Classification) -> str | None:
        if c.journal_article or c.book_chapter or c.conference_proceeding:
            return self._title()
        return None

    def _field_chapter_title(self, c: Classification) -> str | None:
        return self._title() if c.book_chapter else None

    def _field_chapter_number(self, c: Classification) -> str | None:
        return clean_text(self._data.get("chapter-number")) if c.book_chapter else None

    # ------------------------------------------------------------------
    # Identifiers
    # ------------------------------------------------------------------

    # CSL-JSON carries no print/electronic distinction: the first value is
    # reported as the print identifier and the electronic one is always None.

    def _field_issn(self, c: Classification) -> str | None:
        return _first_identifier(self._data.get("ISSN"))

    def _field_eissn(self, c: Classification) -> None:
        return None

    def _field_isbn(self, c: Classification) -> str | None:
        return _first_identifier(self._data.get("ISBN"))

    def _field_eisbn(self, c: Classification) -> None:
        return None

    def _field_issns(self, c: Classification) -> tuple[str, ...]:
        return _all_identifiers(self._data.get("ISSN"))

    def _field_isbns(self, c: Classification) -> tuple[str, ...]:
        return _all_identifiers(self._data.get("ISBN"))

    # ------------------------------------------------------------------
    # Publication facts
    # ------------------------------------------------------------------

    def _field_publisher_name(self, c: Classification) -> str | None:
        return clean_text(self._data.get("publisher"))

    def _field_publisher_place(self, c: Classification) -> str | None:
        return clean_text(self._data.get("publisher-location"))

    def _field_volume(self, c: Classification) -> str | None:
        return clean_text(self._data.get("volume"))

    def _field_issue(self, c: Classification) -> str | None:
        return clean_text(self._data.get("issue"))

    def _field_pagination(self, c: Classification) -> str | None:
        page = clean_text(self._data.get("page"))
        return PAGE_DASH_RE.sub("-", page) if page else None

    def _field_publication_date_parts(self, c: Classification) -> PartialDate | None:
        issued = self._data.get("issued")
        if not isinstance(issued, dict):
            return None
        date_parts = issued.get("date-parts")
        if not isinstance(date_parts, list) or not date_parts:
            return None
        first = date_parts[0]
        return PartialDate.from_parts(first) if isinstance(first, list) else None

    # ------------------------------------------------------------------
    # Contributors
    # ------------------------------------------------------------------

    def _field_authors(self, c: Classification) -> tuple[Contributor, ...]:
        return _contributors(self._data.get("author"), AUTHOR)

    def _field_editors(self, c: Classification) -> tuple[Contributor, ...]:
        return _contributors(self._data.get("editor"), EDITOR)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _title(self) -> str | None:
        return _scalar(self._data.get("title"))

    def _container_title(self) -> str | None:
        return _scalar(self._data.get("container-title"))


def _scalar(value: Any) -> str | None:
    """Take the first element of a list-valued field and clean it."""
    if isinstance(value, list):
        value = value[0] if value else None
    return clean_text(value)


def _identifier(value: Any) -> str | None:
    """Unwrap ``http://id.crossref.org/isbn/<value>`` style URLs."""
    text = clean_text(value)
    if text and text.lower().startswith("http"):
        text = text.rstrip("/").rsplit("/", 1)[-1] or None
    return text


def _first_identifier(values: Any) -> str | None:
    if isinstance(values, list):
        return _identifier(values[0]) if values else None
    return _identifier(values)


def _all_identifiers(values: Any) -> tuple[str, ...]:
    if not isinstance(values, list):
        values = [values]
    return tuple(ident for ident in (_identifier(v) for v in values) if ident)


def _contributors(entries: Any, role: str) -> tuple[Contributor, ...]:
    """Build contributors numbered by position within their own array."""
    if not isinstance(entries, list):
        return ()

    contributors: list[Contributor] = []
    kept = [entry for entry in entries if isinstance(entry, dict)]
    for sequence, entry in enumerate(kept, start=1):
        contributors.append(
            Contributor(
                given_name=clean_text(entry.get("given")),
                surname=clean_text(entry.get("family")) or clean_text(entry.get("literal")),
                role=role,
                sequence=sequence,
            )
        )
    return tuple(contributors)
