"""DOI recognition, validation and canonicalization."""

from dataclasses import dataclass
from urllib.parse import quote, unquote

from doimeta.errors import InvalidIdentifier

from .patterns import (
    DEFAULT_RESOLVER_PREFIX_RE,
    DOI_FULL_RE,
    DOI_RE,
    DOI_SCHEME_RE,
    ISSN_SUFFIX_RE,
    QUERY_STRING_RE,
    STRIP_PATTERNS,
    resolver_prefix_re,
)

__all__ = ["Doi", "normalize", "is_valid", "extract_all", "issn_from_suffix"]


def normalize(raw: str, resolver_domain: str | None = None) -> str:
    """Strip resolver, scheme and publisher noise from a DOI string.

    Parameters
    ----------
    raw : str
        DOI string, ``doi:`` URI, or resolver / landing-page URL.
    resolver_domain : str | None, optional
        Additional resolver domain whose URL prefix is removed.

    Returns
    -------
    str
        The canonical DOI candidate. Not guaranteed valid; see ``is_valid``.

    Examples
    --------
        >>> normalize("https://dx.doi.org/10.1234/abc.5?nosfx=y")
        '10.1234/abc.5'
    """
    doi = raw.strip()

    if "%" in doi:
        doi = unquote(doi)

    doi = DOI_SCHEME_RE.sub("", doi, count=1)

    prefix_re = resolver_prefix_re(resolver_domain) if resolver_domain else DEFAULT_RESOLVER_PREFIX_RE
    doi = prefix_re.sub("", doi, count=1)

    doi = QUERY_STRING_RE.sub("", doi, count=1)

    if doi.endswith("/"):
        doi = doi[:-1]

    for pattern in STRIP_PATTERNS:
        doi = pattern.sub("", doi, count=1)

    return doi


def is_valid(raw: str, resolver_domain: str | None = None) -> bool:
    """Check whether a string normalizes to a well-formed DOI.

    Parameters
    ----------
    raw : str
        Candidate string.
    resolver_domain : str | None, optional
        Additional resolver domain accepted as a URL prefix.

    Returns
    -------
    bool
        True if the normalized string matches the DOI pattern end to end.
    """
    return DOI_FULL_RE.fullmatch(normalize(raw, resolver_domain)) is not None


def extract_all(text: str) -> list[str]:
    """Find every DOI in free text.

    Each match is normalized and kept only if it still validates, so a match
    reduced to nothing useful by normalization is silently dropped.
    Repeated DOIs are returned once per occurrence.

    Parameters
    ----------
    text : str
        Arbitrary text, HTML or URL list.

    Returns
    -------
    list[str]
        Normalized DOIs in order of appearance.
    """
    if "%" in text:
        text = unquote(text)

    found: list[str] = []
    for match in DOI_RE.finditer(text):
        doi = normalize(match.group(1))
        if DOI_FULL_RE.fullmatch(doi):
            found.append(doi)
    return found


def issn_from_suffix(doi: str) -> str | None:
    """Recover an ISSN embedded in a DOI suffix by vendor convention.

    Recognized shapes: ``j.NNNN-NNNX``, ``issn.NNNN-NNNX``, bare
    ``NNNN-NNNX``, ScienceDirect ``SNNNN-NNNX(...)`` and Wiley
    ``(ISSN)NNNN-NNNX``.

    Parameters
    ----------
    doi : str
        Normalized DOI.

    Returns
    -------
    str | None
        The ISSN as it appears in the suffix, or None.
    """
    _, _, suffix = doi.partition("/")
    match = ISSN_SUFFIX_RE.match(suffix)
    return match.group(1) if match else None


@dataclass(frozen=True)
class Doi:
    """Validated, normalized DOI.

    Attributes
    ----------
    value : str
        Canonical DOI string (``10.<prefix>/<suffix>``).
    """

    value: str

    @classmethod
    def parse(cls, raw: str, resolver_domain: str | None = None) -> "Doi":
        """Normalize and validate a DOI string.

        Parameters
        ----------
        raw : str
            DOI string or URL.
        resolver_domain : str | None, optional
            Additional resolver domain accepted as a URL prefix.

        Returns
        -------
        Doi
            The validated identifier.

        Raises
        ------
        InvalidIdentifier
            If the normalized string is not a DOI.
        """
        doi = normalize(raw, resolver_domain)
        if not DOI_FULL_RE.fullmatch(doi):
            raise InvalidIdentifier(raw)
        return cls(doi)

    def __str__(self) -> str:
        return self.value

    @property
    def prefix(self) -> str:
        """Registrant prefix, e.g. ``10.1234``."""
        return self.value.split("/", 1)[0]

    @property
    def suffix(self) -> str:
        """Everything after the first slash."""
        return self.value.split("/", 1)[1]

    @property
    def issn(self) -> str | None:
        """ISSN recovered from the suffix, if any."""
        return issn_from_suffix(self.value)

    def resolver_url(self, domain: str) -> str:
        """Build the content-negotiation URL for this DOI.

        Parameters
        ----------
        domain : str
            Resolver domain, e.g. ``doi.org``.

        Returns
        -------
        str
            ``https://{domain}/{percent-encoded DOI}``.
        """
        return f"https://{domain}/{quote(self.value, safe='')}"
