"""Command-line interface for doimeta.

Provides CLI commands for DOI extraction, resolution and metadata parsing.
"""

import json
import os
import sys
import time
from pathlib import Path

import click

from doimeta import __version__
from doimeta.content_types import CSL_JSON, UNIXREF_XML

__all__ = ["cli"]

PREFERENCES = {
    "xml": (UNIXREF_XML, CSL_JSON),
    "json": (CSL_JSON, UNIXREF_XML),
}


@click.group()
@click.version_option(version=__version__, prog_name="doimeta")
def cli() -> None:
    """Resolve DOIs to normalized bibliographic metadata.

    Use 'doimeta COMMAND --help' for command-specific help.
    """


@cli.command()
@click.argument("source")
def extract(source: str) -> None:
    """Print every valid DOI found in SOURCE, one per line.

    SOURCE is a path to a text file, or the text itself.

    Examples
    --------
        doimeta extract references.html
        doimeta extract "see https://doi.org/10.1037/a0017000 for details"
    """
    from doimeta.identifier import extract_all

    try:
        text = Path(source).read_text(encoding="utf-8") if os.path.isfile(source) else source
    except (OSError, UnicodeDecodeError) as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    for doi in extract_all(text):
        click.echo(doi)


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--content-type",
    "-t",
    type=str,
    default=None,
    help="MIME type of the document (default: guessed from the extension)",
)
def parse(input_path: str, content_type: str | None) -> None:
    """Parse a local CSL-JSON or UnixRef XML document and print it as JSON.

    Examples
    --------
        doimeta parse record.json
        doimeta parse record.txt -t application/vnd.crossref.unixref+xml
    """
    from doimeta.api import parse_document, parse_file
    from doimeta.errors import DoiMetaError

    try:
        if content_type:
            record = parse_document(Path(input_path).read_bytes(), content_type)
        else:
            record = parse_file(input_path)
    except (DoiMetaError, OSError) as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    click.echo(json.dumps(record.to_dict(), indent=2, ensure_ascii=False))


@cli.command()
@click.argument("dois", nargs=-1, required=True)
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    required=True,
    help="Output JSONL file path",
)
@click.option(
    "--prefer",
    type=click.Choice(["xml", "json"]),
    default="xml",
    help="Preferred metadata format (default: xml)",
)
@click.option(
    "--log",
    "log_path",
    type=click.Path(),
    default=None,
    help="Write JSONL audit events to this path",
)
@click.option(
    "--timeout",
    type=float,
    default=10.0,
    help="Read timeout in seconds (default: 10)",
)
@click.option(
    "--resolver-domain",
    type=str,
    default="doi.org",
    help="DOI resolver domain (default: doi.org)",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Stop at the first DOI that fails",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def resolve(
    dois: tuple[str, ...],
    output: str,
    prefer: str,
    log_path: str | None,
    timeout: float,
    resolver_domain: str,
    strict: bool,
    verbose: bool,
) -> None:
    """Retrieve and parse metadata for each DOI and write JSONL.

    Examples
    --------
        doimeta resolve 10.1037/a0017000 -o records.jsonl
        doimeta resolve doi:10.1021/bk-2008-0997 -o out.jsonl --prefer json --log events.jsonl
    """
    from doimeta.api import fetch_many, write_jsonl
    from doimeta.audit import AuditLogger, generate_run_id
    from doimeta.config import ResolverConfig
    from doimeta.errors import DoiMetaError

    started = time.perf_counter()
    logger = None
    try:
        config = ResolverConfig(
            resolver_domain=resolver_domain,
            read_timeout=timeout,
            accept=PREFERENCES[prefer],
        )
        if log_path:
            logger = AuditLogger(generate_run_id(), Path(log_path))

        if verbose:
            click.echo(f"Resolving {len(dois)} DOI(s) via {config.resolver_domain}", err=True)

        records = fetch_many(dois, config=config, logger=logger, strict=strict)
        write_jsonl(records, output)

    except (DoiMetaError, OSError, ValueError) as e:
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        sys.exit(1)
    finally:
        if logger is not None:
            logger.close()

    if verbose:
        click.echo(f"Finished in {time.perf_counter() - started:.2f}s", err=True)

    click.secho(f"✓ Wrote {len(records)} of {len(dois)} records to {output}", fg="green")


@cli.command()
@click.argument("doi")
@click.option(
    "--resolver-domain",
    type=str,
    default="doi.org",
    help="DOI resolver domain (default: doi.org)",
)
def target(doi: str, resolver_domain: str) -> None:
    """Print the URL the resolver redirects DOI to.

    Examples
    --------
        doimeta target 10.1109/icec.2009.62
    """
    from doimeta.config import ResolverConfig
    from doimeta.errors import DoiMetaError
    from doimeta.retrieve import Retriever

    try:
        with Retriever(ResolverConfig(resolver_domain=resolver_domain)) as retriever:
            location = retriever.resolve_target(doi)
    except (DoiMetaError, ValueError) as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    if location is None:
        click.secho(f"Error: resolver did not redirect {doi}", fg="red", err=True)
        sys.exit(1)

    click.echo(location)


if __name__ == "__main__":
    cli()
