"""Value types shared by the metadata parsers and the record."""

import datetime
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from enum import StrEnum
from typing import Any, Protocol, runtime_checkable

__all__ = [
    "AUTHOR",
    "EDITOR",
    "Contributor",
    "PartialDate",
    "DocumentKind",
    "Classification",
    "FieldExtractor",
]

AUTHOR = "author"
EDITOR = "editor"


@dataclass(frozen=True)
class Contributor:
    """A person credited on a work.

    Attributes
    ----------
    given_name : str | None
        Given name(s).
    surname : str | None
        Family name, or the literal name for organizations.
    role : str | None
        ``author``, ``editor``, or the source's own role literal.
    sequence : int
        1-based position among contributors sharing the same role.
    """

    given_name: str | None
    surname: str | None
    role: str | None
    sequence: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict."""
        return asdict(self)


@dataclass(frozen=True)
class PartialDate:
    """Publication date with optional month and day.

    Attributes
    ----------
    year : int
        Four-digit year.
    month : int | None
        Month (1-12) or None when unspecified.
    day : int | None
        Day of month or None when unspecified.
    """

    year: int
    month: int | None = None
    day: int | None = None

    @classmethod
    def from_parts(cls, parts: Sequence[Any] | None) -> "PartialDate | None":
        """Build from a ``[year, month?, day?]`` sequence.

        Each part is coerced to ``int``; a missing or non-numeric year yields
        None, a missing or non-numeric month or day stays None.

        Parameters
        ----------
        parts : Sequence[Any] | None
            Date parts, e.g. ``[2007]`` or ``["2007", "3", None]``.

        Returns
        -------
        PartialDate | None
            Partial date, or None without a usable year.
        """
        if not parts:
            return None
        padded = list(parts[:3]) + [None] * (3 - len(parts[:3]))
        year, month, day = (_to_int(p) for p in padded)
        if year is None:
            return None
        return cls(year=year, month=month, day=day)

    def to_date(self) -> datetime.date | None:
        """Full calendar date, substituting 1 for an absent month or day.

        Returns
        -------
        datetime.date | None
            The date, or None if the parts do not form a real date.
        """
        try:
            return datetime.date(self.year, self.month or 1, self.day or 1)
        except ValueError:
            return None

    def to_dict(self) -> dict[str, int | None]:
        """Convert to ``{"year", "month", "day"}``."""
        return asdict(self)


def _to_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value.strip())
    return None


class DocumentKind(StrEnum):
    """Closed set of publication kinds a document is classified as.

    Attributes
    ----------
    JOURNAL_ARTICLE : str
        An article within a journal.
    JOURNAL : str
        Journal-level record without an article.
    BOOK_CHAPTER : str
        A chapter within a book.
    BOOK_SERIES : str
        A book belonging to a series.
    BOOK : str
        A standalone book.
    CONFERENCE_PROCEEDING : str
        A conference paper or proceedings volume.
    UNKNOWN : str
        None of the above matched.
    """

    JOURNAL_ARTICLE = "journal_article"
    JOURNAL = "journal"
    BOOK_CHAPTER = "book_chapter"
    BOOK_SERIES = "book_series"
    BOOK = "book"
    CONFERENCE_PROCEEDING = "conference_proceeding"
    UNKNOWN = "unknown"


# Order in which predicates decide the single kind of a document.
DEFAULT_KIND_PRIORITY: tuple[DocumentKind, ...] = (
    DocumentKind.JOURNAL_ARTICLE,
    DocumentKind.JOURNAL,
    DocumentKind.BOOK_CHAPTER,
    DocumentKind.BOOK_SERIES,
    DocumentKind.BOOK,
    DocumentKind.CONFERENCE_PROCEEDING,
)


@dataclass(frozen=True)
class Classification:
    """Publication-type predicates evaluated once per document.

    The predicates are format-specific heuristics and are not guaranteed to be
    exclusive: conference proceedings may co-occur with book predicates.

    Attributes
    ----------
    journal : bool
        Journal-level record.
    journal_article : bool
        Article within a journal.
    book : bool
        Standalone book.
    book_series : bool
        Book in a series.
    book_chapter : bool
        Chapter within a book.
    conference_proceeding : bool
        Conference paper or proceedings.
    priority : tuple[DocumentKind, ...]
        Order used to resolve ``kind``.
    """

    journal: bool = False
    journal_article: bool = False
    book: bool = False
    book_series: bool = False
    book_chapter: bool = False
    conference_proceeding: bool = False
    priority: tuple[DocumentKind, ...] = DEFAULT_KIND_PRIORITY

    @property
    def kind(self) -> DocumentKind:
        """First kind in priority order whose predicate holds."""
        for kind in self.priority:
            if getattr(self, kind.value):
                return kind
        return DocumentKind.UNKNOWN


@runtime_checkable
class FieldExtractor(Protocol):
    """Format-specific extraction strategy behind a MetadataRecord.

    Attributes
    ----------
    source_format : str
        Stable format name (``csl_json`` or ``unixref_xml``).
    source : str
        The raw document text.
    contributors_by_role : bool
        True when the format stores authors and editors in separate lists,
        so ``authors`` and ``editors`` are extracted independently and
        ``contributors`` is their concatenation.
    """

    source_format: str
    source: str
    contributors_by_role: bool

    def classify(self) -> Classification:
        """Evaluate the publication-type predicates."""
        ...

    def extract(self, field: str, classification: Classification) -> Any:
        """Resolve one field, returning None when the source lacks it."""
        ...
