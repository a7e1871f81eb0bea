"""Command-line interface for dupguard.

Provides CLI commands for resolving, looking up and deleting records in a
JSONL store.
"""

import importlib.metadata
import json
import sys
from contextlib import nullcontext
from pathlib import Path

import click

__all__ = ["cli"]

try:
    __version__ = importlib.metadata.version("dupguard")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"  # Fallback for development


def _logger_context(log: str | None):  # type: ignore[no-untyped-def]
    from dupguard.api import open_logger

    return open_logger(log) if log else nullcontext()


@click.group()
@click.version_option(version=__version__, prog_name="dupguard")
def cli() -> None:
    """Duplicate resolution for newly created bibliographic records.

    Use 'dupguard COMMAND --help' for command-specific help.
    """


@cli.command()
@click.argument("store_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("keys", nargs=-1, required=True)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the resulting store here instead of updating STORE_PATH",
)
@click.option(
    "--log",
    type=click.Path(dir_okay=False),
    default=None,
    help="Append JSONL audit events to this file",
)
@click.option(
    "--auto-merge-threshold",
    type=click.IntRange(0, 100),
    default=85,
    help="Minimum score for automatic merge (default: 85)",
)
@click.option(
    "--flag-threshold",
    type=click.IntRange(0, 100),
    default=70,
    help="Minimum score for a possible-duplicate warning (default: 70)",
)
@click.option(
    "--delete-timeout",
    type=float,
    default=5.0,
    help="Per-deletion time budget in seconds (default: 5.0)",
)
@click.option(
    "--strategies",
    type=str,
    default=None,
    help="Comma-separated strategy names (default: all)",
)
@click.option(
    "--parallel",
    is_flag=True,
    help="Run the search strategies of a record concurrently",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Report duplicates without deleting anything",
)
def resolve(
    store_path: str,
    keys: tuple[str, ...],
    output: str | None,
    log: str | None,
    auto_merge_threshold: int,
    flag_threshold: int,
    delete_timeout: float,
    strategies: str | None,
    parallel: bool,
    dry_run: bool,
) -> None:
    """Resolve newly created records KEYS against STORE_PATH.

    STORE_PATH is a JSONL store holding both the new and the existing
    records. The processing result is printed as JSON.

    Examples
    --------
        dupguard resolve library.jsonl NEW1 NEW2
        dupguard resolve library.jsonl NEW1 --dry-run --log events.jsonl
    """
    from dupguard.api import resolve_file
    from dupguard.engine import ResolverConfig

    try:
        config_kwargs: dict = {
            "auto_merge_threshold": auto_merge_threshold,
            "flag_threshold": flag_threshold,
            "delete_timeout": delete_timeout,
            "parallel_search": parallel,
        }
        if strategies:
            config_kwargs["strategies"] = [s.strip() for s in strategies.split(",") if s.strip()]
        config = ResolverConfig(**config_kwargs)

        with _logger_context(log) as logger:
            result = resolve_file(
                store_path,
                list(keys),
                config=config,
                output_path=Path(output) if output else None,
                dry_run=dry_run,
                logger=logger,
            )
    except Exception as e:
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        sys.exit(1)

    click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    for error in result.errors:
        click.secho(f"! {error}", fg="yellow", err=True)


@cli.command()
@click.argument("store_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--url", type=str, default=None, help="Find records saved for this URL")
@click.option("--doi", type=str, default=None, help="Find records with this DOI")
@click.option("--isbn", type=str, default=None, help="Find records with this ISBN")
@click.option("--pmid", type=str, default=None, help="Find records with this PubMed ID")
@click.option("--pmcid", type=str, default=None, help="Find records with this PMC ID")
@click.option("--arxiv", type=str, default=None, help="Find records with this ArXiv ID")
def lookup(
    store_path: str,
    url: str | None,
    doi: str | None,
    isbn: str | None,
    pmid: str | None,
    pmcid: str | None,
    arxiv: str | None,
) -> None:
    """Print the keys of records in STORE_PATH matching a URL or identifier.

    Exactly one of the lookup options must be given. Exits with status 1
    when nothing matches.

    Examples
    --------
        dupguard lookup library.jsonl --url https://example.org/paper
        dupguard lookup library.jsonl --doi 10.1000/xyz123
    """
    from dupguard.api import lookup_identifier, lookup_url

    given = {
        name: value
        for name, value in (
            ("url", url),
            ("doi", doi),
            ("isbn", isbn),
            ("pmid", pmid),
            ("pmcid", pmcid),
            ("arxiv", arxiv),
        )
        if value
    }
    if len(given) != 1:
        raise click.UsageError("Give exactly one of --url, --doi, --isbn, --pmid, --pmcid, --arxiv")

    kind, value = next(iter(given.items()))
    try:
        if kind == "url":
            keys = lookup_url(store_path, value)
        else:
            keys = lookup_identifier(store_path, kind, value)
    except Exception as e:
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        sys.exit(1)

    if not keys:
        click.secho(f"No record found for {kind} {value}", fg="yellow", err=True)
        sys.exit(1)
    for key in keys:
        click.echo(key)


@cli.command()
@click.argument("store_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("key")
@click.option(
    "--timeout",
    type=float,
    default=10.0,
    help="Deletion time budget in seconds (default: 10.0)",
)
@click.option(
    "--log",
    type=click.Path(dir_okay=False),
    default=None,
    help="Append JSONL audit events to this file",
)
def delete(store_path: str, key: str, timeout: float, log: str | None) -> None:
    """Delete the record KEY from STORE_PATH.

    Examples
    --------
        dupguard delete library.jsonl ABCD1234
    """
    from dupguard.api import delete_key

    try:
        with _logger_context(log) as logger:
            result = delete_key(store_path, key, timeout=timeout, logger=logger)
    except Exception as e:
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        sys.exit(1)

    if not result.success:
        click.secho(f"✗ Failed to delete {key} [{result.category}]: {result.message}", fg="red", err=True)
        sys.exit(1)
    click.secho(f"✓ Deleted record {key}", fg="green")


if __name__ == "__main__":
    cli()
