"""Public API for resolving DOIs to metadata records.

This module provides the main public API for doimeta, enabling:
- Parsing CSL-JSON / UnixRef documents into MetadataRecord objects
- Fetching and parsing metadata for one or many DOIs
- Exporting records to JSONL format
"""

import json
import time
from collections.abc import Iterable, Sequence
from pathlib import Path

from doimeta.audit import AuditLogger
from doimeta.config import ResolverConfig
from doimeta.errors import DoiMetaError
from doimeta.models import MetadataRecord
from doimeta.parse import parse_document
from doimeta.parse import parse_file as _parse_file
from doimeta.retrieve import Retriever

__all__ = [
    "parse_document",
    "parse_file",
    "fetch_metadata",
    "fetch_many",
    "write_jsonl",
]


def parse_file(path: str | Path, *, format_name: str | None = None) -> MetadataRecord:
    """Parse a metadata document stored on disk.

    Parameters
    ----------
    path : str | Path
        Path to a CSL-JSON or UnixRef XML document.
    format_name : str | None, optional
        Format name (csl_json|unixref_xml). Guessed from the extension
        when omitted.

    Returns
    -------
    MetadataRecord
        Parsed record.

    Raises
    ------
    FileNotFoundError
        If file does not exist.
    UnsupportedFormat
        If the format cannot be determined.
    MalformedDocument
        If the document is not well-formed.

    Examples
    --------
        >>> from doimeta import parse_file
        >>> record = parse_file("10.1037_a0017.json")
        >>> record.journal_title
        'Rehabilitation Psychology'
    """
    file_path = Path(path)

    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    return _parse_file(file_path, format_name)


def fetch_metadata(
    doi: str,
    *,
    config: ResolverConfig | None = None,
    retriever: Retriever | None = None,
    accept: Sequence[str] | None = None,
    logger: AuditLogger | None = None,
) -> MetadataRecord | None:
    """Retrieve and parse the metadata record for one DOI.

    Parameters
    ----------
    doi : str
        DOI, ``doi:`` URI or resolver URL.
    config : ResolverConfig | None, optional
        Resolver settings, used when no retriever is given.
    retriever : Retriever | None, optional
        Retriever to reuse across calls.
    accept : Sequence[str] | None, optional
        Content types in preference order; the config default when omitted.
    logger : AuditLogger | None, optional
        Receives ``doi_resolved``, ``doi_not_found`` and ``error`` events.

    Returns
    -------
    MetadataRecord | None
        The record, or None when the resolver does not know the DOI.

    Raises
    ------
    DoiMetaError
        Any retrieval or parse failure (InvalidIdentifier,
        ContentTypeMismatch, UnsupportedFormat, MalformedDocument,
        TransportError, NoBackendConfigured).

    Examples
    --------
        >>> from doimeta import fetch_metadata
        >>> record = fetch_metadata("https://doi.org/10.1109/icec.2009.62")
        >>> record.kind
        <DocumentKind.CONFERENCE_PROCEEDING: 'conference_proceeding'>
    """
    if retriever is None:
        with Retriever(config) as owned:
            return fetch_metadata(doi, retriever=owned, accept=accept, logger=logger)

    try:
        if logger is not None:
            logger.set_stage("retrieve")
        result = retriever.retrieve(doi, accept)

        if not result.found:
            if logger is not None:
                logger.doi_not_found(result.doi, result.status_code)
            return None

        if logger is not None:
            logger.set_stage("parse")
        record = parse_document(result.body, result.content_type)

        if logger is not None:
            logger.doi_resolved(
                result.doi,
                result.content_type,
                url=result.url,
                kind=record.kind.value,
            )
        return record

    except DoiMetaError as e:
        if logger is not None:
            logger.error(type(e).__name__, str(e), doi=doi)
        raise
    finally:
        if logger is not None:
            logger.set_stage(None)


def fetch_many(
    dois: Iterable[str],
    *,
    config: ResolverConfig | None = None,
    retriever: Retriever | None = None,
    accept: Sequence[str] | None = None,
    logger: AuditLogger | None = None,
    strict: bool = False,
) -> list[MetadataRecord]:
    """Retrieve and parse metadata for several DOIs, one request at a time.

    Parameters
    ----------
    dois : Iterable[str]
        DOIs to resolve.
    config : ResolverConfig | None, optional
        Resolver settings, used when no retriever is given.
    retriever : Retriever | None, optional
        Retriever shared by every lookup.
    accept : Sequence[str] | None, optional
        Content types in preference order.
    logger : AuditLogger | None, optional
        Receives per-DOI events plus ``run_started`` / ``run_finished``.
    strict : bool, optional
        If True, the first failure is raised. If False, failures are logged
        and skipped, by default False.

    Returns
    -------
    list[MetadataRecord]
        Records for the DOIs that resolved, in input order.

    Raises
    ------
    DoiMetaError
        On the first failure when strict=True.
    """
    if retriever is None:
        with Retriever(config) as owned:
            return fetch_many(
                dois, retriever=owned, accept=accept, logger=logger, strict=strict
            )

    doi_list = list(dois)
    started = time.perf_counter()
    if logger is not None:
        parameters = retriever.config.to_dict()
        parameters["strict"] = strict
        logger.run_started(command=["fetch_many", *doi_list], parameters=parameters)

    records: list[MetadataRecord] = []
    failures = 0
    status = "failed"
    try:
        for doi in doi_list:
            try:
                record = fetch_metadata(doi, retriever=retriever, accept=accept, logger=logger)
            except DoiMetaError:
                failures += 1
                if strict:
                    raise
                continue
            if record is not None:
                records.append(record)
        status = "partial" if failures else "success"
    finally:
        if logger is not None:
            logger.run_finished(
                status,
                duration_seconds=round(time.perf_counter() - started, 6),
                dois_processed=len(doi_list),
            )

    return records


def write_jsonl(
    records: Iterable[MetadataRecord],
    path: str | Path,
    *,
    sort_keys: bool = True,
) -> None:
    """Write records to JSONL file (one JSON object per line).

    Output is deterministic with consistent field ordering and UTF-8 encoding.

    Parameters
    ----------
    records : Iterable[MetadataRecord]
        Records to write.
    path : str | Path
        Output file path.
    sort_keys : bool, optional
        Whether to sort dictionary keys for deterministic output,
        by default True.

    Examples
    --------
        >>> from doimeta import fetch_many, write_jsonl
        >>> records = fetch_many(["10.1037/a0017000", "10.1021/bk-2008-0997"])
        >>> write_jsonl(records, "output.jsonl")
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    with file_path.open("w", encoding="utf-8", newline="\n") as f:
        for record in records:
            json_str = json.dumps(
                record.to_dict(),
                ensure_ascii=False,
                sort_keys=sort_keys,
            )
            f.write(json_str + "\n")
