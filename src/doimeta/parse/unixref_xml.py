"""Crossref UnixRef XML metadata parser.

Documents are rooted at ``/doi_records/doi_record/crossref`` and hold one of
``journal``, ``book`` or ``conference``. The publication type is inferred
from which structural nodes exist, and most lookups are routed to the node
that carries item-level metadata for that type.
"""

from typing import Any

from lxml import etree

from doimeta.errors import MalformedDocument
from doimeta.models import Classification, Contributor, DocumentKind, PartialDate
from doimeta.parse.base import clean_text, decode_source

PARSER_NAME = "unixref_xml"

XPATH_ROOT = "/doi_records/doi_record/crossref"

JOURNAL = f"{XPATH_ROOT}/journal"
JOURNAL_METADATA = f"{JOURNAL}/journal_metadata"
JOURNAL_ISSUE = f"{JOURNAL}/journal_issue"
JOURNAL_ARTICLE = f"{JOURNAL}/journal_article"
BOOK = f"{XPATH_ROOT}/book"
BOOK_METADATA = f"{BOOK}/book_metadata"
BOOK_SERIES_METADATA = f"{BOOK}/book_series_metadata"
BOOK_CONTAINER = f"{BOOK}/*[self::book_metadata or self::book_series_metadata]"
CHAPTER = f"{BOOK}/content_item[@component_type='chapter']"
CONFERENCE = f"{XPATH_ROOT}/conference"
PROCEEDINGS = f"{CONFERENCE}/*[starts-with(local-name(), 'proceedings')]"
CONFERENCE_PAPER = f"{CONFERENCE}/conference_paper"

CRAWLER_RESOURCE = (
    "doi_data/collection[@property='crawler-based']/item[@crawler='iParadigms']/resource"
)

KIND_PRIORITY: tuple[DocumentKind, ...] = (
    DocumentKind.JOURNAL_ARTICLE,
    DocumentKind.JOURNAL,
    DocumentKind.BOOK_CHAPTER,
    DocumentKind.BOOK_SERIES,
    DocumentKind.BOOK,
    DocumentKind.CONFERENCE_PROCEEDING,
)

# Node(s) holding doi_data, pages, dates and contributors for each kind.
_ITEM_PATHS: dict[DocumentKind, tuple[str, ...]] = {
    DocumentKind.JOURNAL_ARTICLE: (JOURNAL_ARTICLE,),
    DocumentKind.JOURNAL: (JOURNAL_METADATA,),
    DocumentKind.BOOK_CHAPTER: (CHAPTER,),
    DocumentKind.BOOK_SERIES: (BOOK_SERIES_METADATA,),
    DocumentKind.BOOK: (BOOK_METADATA,),
    DocumentKind.CONFERENCE_PROCEEDING: (CONFERENCE_PAPER, PROCEEDINGS),
}

# Enclosing node whose dates apply when the item carries none.
_CONTAINER_PATHS: dict[DocumentKind, tuple[str, ...]] = {
    DocumentKind.JOURNAL_ARTICLE: (JOURNAL_ISSUE,),
    DocumentKind.BOOK_CHAPTER: (BOOK_CONTAINER,),
    DocumentKind.CONFERENCE_PROCEEDING: (PROCEEDINGS,),
}

_CONTRIBUTOR_PATHS: dict[DocumentKind, tuple[str, ...]] = {
    DocumentKind.JOURNAL_ARTICLE: (f"{JOURNAL_ARTICLE}/contributors/person_name",),
    # Book-level editors first, then the chapter's own authors.
    DocumentKind.BOOK_CHAPTER: (
        f"{BOOK_CONTAINER}/contributors/person_name",
        f"{CHAPTER}/contributors/person_name",
    ),
    DocumentKind.BOOK_SERIES: (f"{BOOK_SERIES_METADATA}/contributors/person_name",),
    DocumentKind.BOOK: (f"{BOOK_METADATA}/contributors/person_name",),
    DocumentKind.CONFERENCE_PROCEEDING: (f"{CONFERENCE_PAPER}/contributors/person_name",),
}
_GENERIC_CONTRIBUTORS = f"{XPATH_ROOT}//contributors/person_name"


class UnixrefXmlParser:
    """Field extractor over a UnixRef XML document.

    Attributes
    ----------
    source : str
        Raw XML text.
    source_format : str
        Always ``"unixref_xml"``.
    contributors_by_role : bool
        False: all roles share one ``person_name`` node list.
    """

    source_format = PARSER_NAME
    contributors_by_role = False

    def __init__(self, source: str | bytes) -> None:
        """Parse the XML text.

        Parameters
        ----------
        source : str | bytes
            UnixRef document. Bytes are decoded per the XML declaration;
            text is taken as already decoded and its declaration ignored.

        Raises
        ------
        MalformedDocument
            If the text is not well-formed XML.
        """
        if isinstance(source, bytes):
            raw = source
            parser = etree.XMLParser(resolve_entities=False, no_network=True)
        else:
            raw = source.encode("utf-8")
            parser = etree.XMLParser(resolve_entities=False, no_network=True, encoding="utf-8")

        try:
            root = etree.fromstring(raw, parser=parser)
        except etree.XMLSyntaxError as e:
            raise MalformedDocument(f"Invalid UnixRef XML: {e}", PARSER_NAME) from e

        self.source = source if isinstance(source, str) else _document_text(source, root)
        _strip_namespaces(root)
        self._root = root

    # ------------------------------------------------------------------
    # XPath helpers
    # ------------------------------------------------------------------

    def _exists(self, path: str) -> bool:
        return bool(self._root.xpath(path))

    def _text(self, *paths: str) -> str | None:
        """Text of the first node matched by the first path that matches."""
        for path in paths:
            nodes = self._root.xpath(path)
            if nodes:
                return _node_text(nodes[0])
        return None

    def _texts(self, path: str) -> tuple[str, ...]:
        return tuple(text for text in (_node_text(n) for n in self._root.xpath(path)) if text)

    def _item_paths(self, c: Classification) -> tuple[str, ...]:
        return _ITEM_PATHS.get(c.kind, ())

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def classify(self) -> Classification:
        journal_article = self._exists(JOURNAL_ARTICLE)
        book_chapter = self._exists(CHAPTER)

        return Classification(
            journal=self._exists(JOURNAL) and not journal_article,
            journal_article=journal_article,
            book=self._exists(BOOK_METADATA) and not book_chapter,
            book_series=self._exists(BOOK_SERIES_METADATA),
            book_chapter=book_chapter,
            conference_proceeding=self._exists(PROCEEDINGS),
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
        paths = [f"{p}/doi_data/doi" for p in self._item_paths(c)]
        return self._text(*paths, "//doi_data/doi")

    def _field_url(self, c: Classification) -> str | None:
        paths = [f"{p}/doi_data/resource" for p in self._item_paths(c)]
        return self._text(*paths, "//doi_data/resource")

    def _field_fulltext_url(self, c: Classification) -> str | None:
        paths = [f"{p}/{CRAWLER_RESOURCE}" for p in self._item_paths(c)]
        return self._text(*paths, f"//{CRAWLER_RESOURCE}")

    # ------------------------------------------------------------------
    # Titles
    # ------------------------------------------------------------------

    def _field_journal_title(self, c: Classification) -> str | None:
        return self._text(f"{JOURNAL_METADATA}/full_title")

    def _field_journal_isoabbrev_title(self, c: Classification) -> str | None:
        return self._text(f"{JOURNAL_METADATA}/abbrev_title")

    def _field_book_title(self, c: Classification) -> str | None:
        if c.book_series:
            return self._text(f"{BOOK_SERIES_METADATA}/titles/title")
        if c.conference_proceeding:
            return self._text(f"{PROCEEDINGS}/proceedings_title")
        return self._text(f"{BOOK_METADATA}/titles/title")

    def _field_book_series_title(self, c: Classification) -> str | None:
        return self._text(f"{BOOK}//series_metadata/titles/title")

    def _field_conference_title(self, c: Classification) -> str | None:
        return self._text(f"{CONFERENCE}//event_metadata/conference_name")

    def _field_conference_series_title(self, c: Classification) -> str | None:
        return self._text(f"{CONFERENCE}//series_metadata/titles/title")

    def _field_article_title(self, c: Classification) -> str | None:
        if c.conference_proceeding:
            return self._text(f"{CONFERENCE_PAPER}/titles/title")
        if c.book_chapter:
            return self._text(f"{CHAPTER}/titles/title")
        return self._text(f"{JOURNAL_ARTICLE}/titles/title")

    def _field_chapter_title(self, c: Classification) -> str | None:
        return self._text(f"{CHAPTER}/titles/title") if c.book_chapter else None

    def _field_chapter_number(self, c: Classification) -> str | None:
        return self._text(f"{CHAPTER}/component_number") if c.book_chapter else None

    # ------------------------------------------------------------------
    # Identifiers
    # ------------------------------------------------------------------

    # Usually media_type="print", but some vendors supply no attribute at all.

    def _field_issn(self, c: Classification) -> str | None:
        return self._text(f"{XPATH_ROOT}//issn[not(@media_type) or @media_type='print']")

    def _field_eissn(self, c: Classification) -> str | None:
        return self._text(f"{XPATH_ROOT}//issn[@media_type='electronic']")

    def _field_isbn(self, c: Classification) -> str | None:
        return self._text(f"{XPATH_ROOT}//isbn[not(@media_type) or @media_type='print']")

    def _field_eisbn(self, c: Classification) -> str | None:
        return self._text(f"{XPATH_ROOT}//isbn[@media_type='electronic']")

    def _field_issns(self, c: Classification) -> tuple[str, ...]:
        return self._texts(f"{XPATH_ROOT}//issn")

    def _field_isbns(self, c: Classification) -> tuple[str, ...]:
        return self._texts(f"{XPATH_ROOT}//isbn")

    # ------------------------------------------------------------------
    # Publication facts
    # ------------------------------------------------------------------

    def _field_publisher_name(self, c: Classification) -> str | None:
        return self._text(f"{XPATH_ROOT}//publisher/publisher_name")

    def _field_publisher_place(self, c: Classification) -> str | None:
        return self._text(f"{XPATH_ROOT}//publisher/publisher_place")

    def _field_volume(self, c: Classification) -> str | None:
        if c.journal_article or c.journal:
            return self._text(f"{JOURNAL_ISSUE}/journal_volume/volume")
        if c.book or c.book_series or c.book_chapter:
            return self._text(f"{BOOK}/*/volume", f"{BOOK}//series_metadata/volume")
        if c.conference_proceeding:
            return self._text(f"{PROCEEDINGS}/volume", f"{CONFERENCE}//series_metadata/volume")
        return None

    def _field_issue(self, c: Classification) -> str | None:
        if c.journal_article or c.journal:
            return self._text(f"{JOURNAL_ISSUE}/issue")
        return None

    def _field_pagination(self, c: Classification) -> str | None:
        for path in self._item_paths(c):
            if not self._exists(path):
                continue
            first = self._text(f"{path}/pages/first_page")
            last = self._text(f"{path}/pages/last_page")
            return f"{first}-{last}" if first and last else None
        return None

    def _field_publication_date_parts(self, c: Classification) -> PartialDate | None:
        paths = self._item_paths(c) + _CONTAINER_PATHS.get(c.kind, ())
        for path in paths:
            nodes = self._root.xpath(f"{path}/publication_date")
            if nodes:
                return _partial_date(nodes[0])
        return None

    # ------------------------------------------------------------------
    # Contributors
    # ------------------------------------------------------------------

    def _field_contributors(self, c: Classification) -> tuple[Contributor, ...]:
        paths = _CONTRIBUTOR_PATHS.get(c.kind, (_GENERIC_CONTRIBUTORS,))
        nodes = [node for path in paths for node in self._root.xpath(path)]

        # Sequence numbers restart for each distinct contributor_role.
        counters: dict[str | None, int] = {}
        contributors: list[Contributor] = []
        for node in nodes:
            role = clean_text(node.get("contributor_role"))
            counters[role] = counters.get(role, 0) + 1
            contributors.append(
                Contributor(
                    given_name=_child_text(node, "given_name"),
                    surname=_child_text(node, "surname"),
                    role=role,
                    sequence=counters[role],
                )
            )
        return tuple(contributors)


def _strip_namespaces(root: etree._Element) -> None:
    """Rename namespaced elements to their local names so plain paths match."""
    for element in root.iter():
        if isinstance(element.tag, str) and element.tag.startswith("{"):
            element.tag = etree.QName(element).localname
    etree.cleanup_namespaces(root)


def _document_text(raw: bytes, root: etree._Element) -> str:
    """Decode *raw* with the encoding lxml read from its declaration."""
    encoding = root.getroottree().docinfo.encoding or "utf-8"
    if encoding.lower().replace("_", "-") in ("utf-8", "utf8"):
        return decode_source(raw, PARSER_NAME)
    try:
        return raw.decode(encoding)
    except (LookupError, UnicodeDecodeError) as e:
        raise MalformedDocument(f"Cannot decode UnixRef XML as {encoding}: {e}", PARSER_NAME) from e


def _node_text(node: Any) -> str | None:
    if isinstance(node, etree._Element):
        return clean_text("".join(node.itertext()))
    return clean_text(str(node))


def _child_text(node: etree._Element, name: str) -> str | None:
    child = node.find(name)
    return _node_text(child) if child is not None else None


def _partial_date(node: etree._Element) -> PartialDate | None:
    """Read year/month/day children; any non-numeric part voids the date."""
    parts: list[int | None] = []
    for name in ("year", "month", "day"):
        text = _child_text(node, name)
        if text is None:
            parts.append(None)
        elif text.isdecimal():
            parts.append(int(text))
        else:
            return None
    return PartialDate.from_parts(parts)
