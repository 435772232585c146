"""Tests for DOI normalization, validation and extraction."""

import pytest

from doimeta.errors import InvalidIdentifier
from doimeta.identifier import Doi, extract_all, is_valid, issn_from_suffix, normalize

CANONICAL_DOIS = [
    "10.1037/0090-5550.52.1.74",
    "10.1080/10476210903420072",
    "10.1007/978-0-387-72804-9_32",
    "10.1021/bk-2008-0997",
    "10.1109/icec.2009.62",
    "10.1016/S0140-6736(10)60317-6",
    "10.1111/j.1540-4560.2009.01600.x",
    "10.1000.10/xyz",
]

BASE = "10.1111/j.1540-4560.2009.01600.x"

# ---------------------------------------------------------------------------
# normalize / is_valid
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize("doi", CANONICAL_DOIS)
def test_canonical_doi_is_fixed_point(doi: str) -> None:
    """Test normalizing an already canonical DOI changes nothing."""
    assert normalize(doi) == doi
    assert is_valid(normalize(doi))


@pytest.mark.unit
@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("doi:10.1234/abc", "10.1234/abc"),
        ("DOI:10.1234/abc", "10.1234/abc"),
        ("https://dx.doi.org/10.1234/abc", "10.1234/abc"),
        ("http://doi.org/10.1234/abc", "10.1234/abc"),
        ("HTTPS://DX.DOI.ORG/10.1234/abc", "10.1234/abc"),
        ("https://dx.doi.org/10.1234/abc?nosfx=y", "10.1234/abc"),
        ("10.1234/abc/", "10.1234/abc"),
        ("  10.1234/abc \n", "10.1234/abc"),
        ("10.1234%2Fabcd.321", "10.1234/abcd.321"),
    ],
)
def test_normalize_strips_scheme_resolver_and_query(raw: str, expected: str) -> None:
    """Test scheme, resolver prefix, query string and trailing slash removal."""
    assert normalize(raw) == expected
    assert is_valid(raw)


@pytest.mark.unit
def test_normalize_keeps_bare_question_mark() -> None:
    """Test a '?' without key=value is treated as part of the suffix."""
    assert normalize("10.1234/what?") == "10.1234/what?"


@pytest.mark.unit
@pytest.mark.parametrize(
    "noise",
    [
        "/abstract",
        "/abstract/more/stuff",
        "/asset/image.png",
        "/issuetoc",
        ".pdf",
        "/standard",
        "/pdf/standard",
        "/fulltext.html",
        "/pdf",
        "/epdf",
        "/meta",
        "/full",
        "/dynaTraceMonitor",
        "/references",
        "/issues",
        "/cite/bibtex",
        ";jsessionid=0A1B2C3D4E",
    ],
)
def test_publisher_noise_suffix_removed_exactly(noise: str) -> None:
    """Test each known landing-page suffix is stripped back to the DOI."""
    assert normalize(BASE + noise) == BASE


@pytest.mark.unit
def test_extra_resolver_domain() -> None:
    """Test a configured resolver domain is stripped like the built-in ones."""
    url = "https://resolver.example.org/10.1234/abc"

    assert normalize(url, resolver_domain="resolver.example.org") == "10.1234/abc"
    assert is_valid(url, resolver_domain="resolver.example.org")
    assert not is_valid(url)


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw",
    ["", "not a doi", "11.1234/abc", "10.abc/def", "10.1234/", "10.1234", "10.1234/a b"],
)
def test_invalid_strings_rejected(raw: str) -> None:
    """Test malformed identifiers fail validation."""
    assert not is_valid(raw)


# ---------------------------------------------------------------------------
# extract_all
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_extract_all_returns_each_occurrence() -> None:
    """Test a DOI cited twice is returned twice."""
    text = "See 10.1234/abc and also http://dx.doi.org/10.1234/abc?nosfx=y for details"

    assert extract_all(text) == ["10.1234/abc", "10.1234/abc"]


@pytest.mark.unit
def test_extract_all_from_html_attributes() -> None:
    """Test DOIs end at quotes and ampersands."""
    html = (
        '<a href="https://doi.org/10.1037/a0017000">link</a>'
        "<a href='https://example.org/?id=10.1021/bk-2008-0997&x=1'>x</a>"
    )

    assert extract_all(html) == ["10.1037/a0017000", "10.1021/bk-2008-0997"]


@pytest.mark.unit
def test_extract_all_unescapes_percent_encoding() -> None:
    """Test percent-encoded slashes are decoded before matching."""
    assert extract_all("https://example.org/lookup?doi=10.1234%2Fabcd.321") == [
        "10.1234/abcd.321"
    ]


@pytest.mark.unit
def test_extract_all_normalizes_matches() -> None:
    """Test landing-page noise is removed from extracted DOIs."""
    text = "PDF: https://onlinelibrary.wiley.com/doi/10.1111/j.1540-4560.2009.01600.x/pdf"

    assert extract_all(text) == [BASE]


@pytest.mark.unit
def test_extract_all_without_doi() -> None:
    """Test text without DOIs yields an empty list."""
    assert extract_all("nothing to see here, 10.12 is a number") == []


# ---------------------------------------------------------------------------
# ISSN heuristics
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize(
    ("suffix", "expected"),
    [
        ("j.1234-1234.abcd", "1234-1234"),
        ("ISSN.1234-123X", "1234-123X"),
        ("1234-123X(STUFF)", "1234-123X"),
        ("S1234-123X(STUFF)", "1234-123X"),
        ("(ISSN)1234-123X.STUFF", "1234-123X"),
    ],
)
def test_issn_from_suffix_recognized(suffix: str, expected: str) -> None:
    """Test vendor ISSN conventions in DOI suffixes."""
    assert issn_from_suffix(f"10.1234/{suffix}") == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "suffix",
    [
        "j.12345-1234",
        "no.issn-here",
        "j.1234-123Z",
        "issn.1234-123z",
        "1234-1234noboundary",
        "1234-123tooshort",
        "XYZS1234-123X(STUFF)",
    ],
)
def test_issn_from_suffix_rejected(suffix: str) -> None:
    """Test near-miss suffixes yield no ISSN."""
    assert issn_from_suffix(f"10.1234/{suffix}") is None


# ---------------------------------------------------------------------------
# Doi value object
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_doi_parse_and_accessors() -> None:
    """Test parsed DOI exposes prefix, suffix and ISSN."""
    doi = Doi.parse("https://dx.doi.org/10.1016/S0140-6736(10)60317-6")

    assert str(doi) == "10.1016/S0140-6736(10)60317-6"
    assert doi.prefix == "10.1016"
    assert doi.suffix == "S0140-6736(10)60317-6"
    assert doi.issn == "0140-6736"


@pytest.mark.unit
def test_doi_suffix_may_contain_slashes() -> None:
    """Test only the first slash separates prefix from suffix."""
    doi = Doi.parse("10.1000/a/b/c")

    assert doi.prefix == "10.1000"
    assert doi.suffix == "a/b/c"


@pytest.mark.unit
def test_doi_parse_rejects_invalid() -> None:
    """Test invalid input raises InvalidIdentifier, which is a ValueError."""
    with pytest.raises(InvalidIdentifier) as exc_info:
        Doi.parse("not a doi")

    assert isinstance(exc_info.value, ValueError)
    assert exc_info.value.raw == "not a doi"


@pytest.mark.unit
def test_resolver_url_percent_encodes() -> None:
    """Test the resolver URL encodes the whole DOI as one path segment."""
    doi = Doi.parse("10.1016/S0140-6736(10)60317-6")

    assert doi.resolver_url("doi.org") == "https://doi.org/10.1016%2FS0140-6736%2810%2960317-6"


@pytest.mark.unit
def test_doi_is_hashable_value() -> None:
    """Test equal DOIs compare and hash equal."""
    assert Doi.parse("doi:10.1234/abc") == Doi.parse("https://doi.org/10.1234/abc")
    assert len({Doi.parse("10.1234/abc"), Doi("10.1234/abc")}) == 1
