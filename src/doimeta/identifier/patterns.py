"""Pre-compiled regex patterns for DOI recognition and clean-up."""

import re

# Characters allowed in a DOI suffix: visible, non-whitespace, minus the
# three that terminate DOIs embedded in HTML attributes and query strings.
_DOI_BODY = r"10\.\d+(?:\.\d+)*/[^\s\"&'\x00-\x1f\x7f]+"

DOI_RE = re.compile(r"\b(" + _DOI_BODY + ")")
DOI_FULL_RE = re.compile(_DOI_BODY)

DOI_SCHEME_RE = re.compile(r"^doi:", re.IGNORECASE)

# A query string is only stripped when it looks like key=value; a bare "?"
# may legitimately appear inside a DOI suffix.
QUERY_STRING_RE = re.compile(r"\?[^=]+=.*")

# Publisher landing-page noise, applied in order, each at most once.
STRIP_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"/(?:abstract|asset|issuetoc).*$"),
    re.compile(r"\.pdf$"),
    re.compile(
        r"/(?:standard|pdf/standard|fulltext\.html|pdf|epdf|meta|full"
        r"|dynaTraceMonitor|references|issues)$"
    ),
    re.compile(r"/cite/[a-z]+$"),
    re.compile(r";jsessionid.+$"),
)

# j.1234-567X, issn.1234-567X, 1234-567X, S1234-567X(...), (ISSN)1234-567X
ISSN_SUFFIX_RE = re.compile(r"^(?:j\.|issn\.|S|\(ISSN\))?(\d{4}-\d{3}[\dx])\b", re.IGNORECASE)

KNOWN_RESOLVER_DOMAINS: tuple[str, ...] = ("dx.doi.org", "doi.org")


def resolver_prefix_re(extra_domain: str | None = None) -> re.Pattern[str]:
    """Build the pattern matching a leading resolver URL.

    Parameters
    ----------
    extra_domain : str | None, optional
        Configured resolver domain to accept besides the well-known ones.

    Returns
    -------
    re.Pattern[str]
        Case-insensitive pattern anchored at the start of the string.
    """
    domains = list(KNOWN_RESOLVER_DOMAINS)
    if extra_domain and extra_domain not in domains:
        domains.append(extra_domain)
    alternatives = "|".join(re.escape(d) for d in domains)
    return re.compile(rf"^https?://(?:{alternatives})/", re.IGNORECASE)


DEFAULT_RESOLVER_PREFIX_RE = resolver_prefix_re()
