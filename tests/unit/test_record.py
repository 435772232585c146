"""Tests for MetadataRecord caching, composition and value types."""

import datetime
import threading
from typing import Any

import pytest

from doimeta.models import (
    AUTHOR,
    EDITOR,
    FIELDS,
    Classification,
    Contributor,
    DocumentKind,
    FieldExtractor,
    MetadataRecord,
    PartialDate,
)


class CountingExtractor:
    """Extractor stub returning canned values and counting lookups."""

    source_format = "stub"
    source = "{}"

    def __init__(self, values: dict[str, Any], by_role: bool = True, **predicates: bool) -> None:
        self.values = values
        self.contributors_by_role = by_role
        self.predicates = predicates
        self.calls: dict[str, int] = {}
        self.classify_calls = 0

    def classify(self) -> Classification:
        self.classify_calls += 1
        return Classification(**self.predicates)

    def extract(self, field: str, classification: Classification) -> Any:
        self.calls[field] = self.calls.get(field, 0) + 1
        return self.values.get(field)


def _person(surname: str, role: str, sequence: int) -> Contributor:
    return Contributor(given_name=None, surname=surname, role=role, sequence=sequence)


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_stub_satisfies_field_extractor_protocol() -> None:
    """Test runtime protocol check accepts a structural extractor."""
    assert isinstance(CountingExtractor({}), FieldExtractor)


# ---------------------------------------------------------------------------
# Caching
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_field_resolved_once() -> None:
    """Test repeated access hits the extractor only once."""
    extractor = CountingExtractor({"doi": "10.1234/abc"})
    record = MetadataRecord(extractor)

    assert record.doi == "10.1234/abc"
    assert record.doi == "10.1234/abc"
    assert extractor.calls["doi"] == 1


@pytest.mark.unit
def test_absent_field_cached_as_none() -> None:
    """Test a None result is memoized too."""
    extractor = CountingExtractor({})
    record = MetadataRecord(extractor)

    assert record.volume is None
    assert record.volume is None
    assert extractor.calls["volume"] == 1


@pytest.mark.unit
def test_classification_computed_once() -> None:
    """Test every predicate reads the same cached classification."""
    extractor = CountingExtractor({}, journal_article=True)
    record = MetadataRecord(extractor)

    assert record.is_journal_article()
    assert not record.is_journal()
    assert record.kind is DocumentKind.JOURNAL_ARTICLE
    assert extractor.classify_calls == 1


@pytest.mark.unit
def test_concurrent_access_resolves_once() -> None:
    """Test many threads reading one field trigger a single extraction."""
    extractor = CountingExtractor({"journal_title": "Journal"})
    record = MetadataRecord(extractor)
    barrier = threading.Barrier(8)
    results: list[str | None] = []

    def read() -> None:
        barrier.wait()
        results.append(record.journal_title)

    threads = [threading.Thread(target=read) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results == ["Journal"] * 8
    assert extractor.calls["journal_title"] == 1


# ---------------------------------------------------------------------------
# Composite fields
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize(
    ("name", "place", "expected"),
    [
        ("Springer US", "Boston, MA", "Springer US; Boston, MA"),
        ("IEEE", None, "IEEE"),
        (None, "London", None),
        (None, None, None),
    ],
)
def test_publisher_composition(name: str | None, place: str | None, expected: str | None) -> None:
    """Test place is appended only when a publisher name exists."""
    record = MetadataRecord(
        CountingExtractor({"publisher_name": name, "publisher_place": place})
    )

    assert record.publisher == expected


@pytest.mark.unit
def test_publication_date_derived_from_parts() -> None:
    """Test the full date is built from the cached partial date."""
    extractor = CountingExtractor({"publication_date_parts": PartialDate(2010, 2)})
    record = MetadataRecord(extractor)

    assert record.publication_date == datetime.date(2010, 2, 1)
    assert record.publication_date_parts == PartialDate(2010, 2, None)
    assert extractor.calls["publication_date_parts"] == 1
    assert "publication_date" not in extractor.calls


@pytest.mark.unit
def test_contributors_concatenated_by_role() -> None:
    """Test role-split formats list authors before editors."""
    authors = (_person("A", AUTHOR, 1),)
    editors = (_person("E", EDITOR, 1),)
    record = MetadataRecord(CountingExtractor({"authors": authors, "editors": editors}))

    assert record.contributors == authors + editors


@pytest.mark.unit
def test_authors_filtered_from_shared_list() -> None:
    """Test single-list formats filter authors and editors by role."""
    people = (
        _person("E", EDITOR, 1),
        _person("A", AUTHOR, 1),
        _person("T", "translator", 1),
        _person("B", AUTHOR, 2),
    )
    extractor = CountingExtractor({"contributors": people}, by_role=False)
    record = MetadataRecord(extractor)

    assert [a.surname for a in record.authors] == ["A", "B"]
    assert [e.surname for e in record.editors] == ["E"]
    assert len(record.contributors) == 4
    assert extractor.calls == {"contributors": 1}


# ---------------------------------------------------------------------------
# to_dict
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_to_dict_shape() -> None:
    """Test to_dict exposes kind plus every field with JSON-ready values."""
    extractor = CountingExtractor(
        {
            "doi": "10.1234/abc",
            "publication_date_parts": PartialDate(2007, 6, 31),
            "authors": (_person("A", AUTHOR, 1),),
            "editors": (),
        },
        book_chapter=True,
    )
    data = MetadataRecord(extractor).to_dict()

    assert list(data) == ["kind", *FIELDS]
    assert data["kind"] == "book_chapter"
    assert data["doi"] == "10.1234/abc"
    assert data["publication_date"] is None
    assert data["publication_date_parts"] == {"year": 2007, "month": 6, "day": 31}
    assert data["contributors"] == [
        {"given_name": None, "surname": "A", "role": "author", "sequence": 1}
    ]


@pytest.mark.unit
def test_to_dict_iso_date() -> None:
    """Test a valid date is serialized as ISO-8601."""
    record = MetadataRecord(CountingExtractor({"publication_date_parts": PartialDate(2008)}))

    assert record.to_dict()["publication_date"] == "2008-01-01"


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize(
    ("parts", "expected"),
    [
        ([2007], PartialDate(2007)),
        (["2007", "3"], PartialDate(2007, 3)),
        ([2007, 3, 4, 99], PartialDate(2007, 3, 4)),
        ([2007, "x", 4], PartialDate(2007, None, 4)),
        (["abc"], None),
        (["\u00b2\u2070\u2070\u2077"], None),
        (["2007", "\u00b2"], PartialDate(2007)),
        ([None, 3], None),
        ([], None),
        (None, None),
    ],
)
def test_partial_date_from_parts(parts: list[Any] | None, expected: PartialDate | None) -> None:
    """Test coercion of raw date parts."""
    assert PartialDate.from_parts(parts) == expected


@pytest.mark.unit
def test_partial_date_invalid_calendar_day() -> None:
    """Test impossible dates give no calendar date."""
    assert PartialDate(2007, 2, 30).to_date() is None
    assert PartialDate(2007, 13).to_date() is None


@pytest.mark.unit
def test_classification_priority() -> None:
    """Test kind picks the first holding predicate in priority order."""
    both = Classification(book=True, conference_proceeding=True)
    empty = Classification()

    assert both.kind is DocumentKind.BOOK
    assert both.conference_proceeding
    assert empty.kind is DocumentKind.UNKNOWN


@pytest.mark.unit
def test_classification_custom_priority() -> None:
    """Test a format may reorder kind resolution."""
    classification = Classification(
        book=True,
        conference_proceeding=True,
        priority=(DocumentKind.CONFERENCE_PROCEEDING, DocumentKind.BOOK),
    )

    assert classification.kind is DocumentKind.CONFERENCE_PROCEEDING
