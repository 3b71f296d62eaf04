"""Command line interface for bibfinder."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bibfinder.metadata.resolver import MetadataResolver
from bibfinder.models import LookupResult
from bibfinder.web.app import app as web_app


console = Console()
app = typer.Typer(help="bibfinder - resolve bibliography metadata for local files")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _render(result: LookupResult, raw: bool) -> None:
    if raw:
        console.print_json(json.dumps(result.to_dict(), default=str))
        if not result.success:
            raise typer.Exit(code=1)
        return

    if not result.success:
        console.print("[red]No bibliography metadata found.[/red]")
        for error in result.errors:
            console.print(f"  - {escape(error)}")
        raise typer.Exit(code=1)

    descriptor = result.descriptor
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("Source", result.source)
    table.add_row("Match", f"{result.match_type} ({result.matched_field or '-'})")
    table.add_row("Citation key", escape(descriptor.citation_key or ""))
    table.add_row("External id", escape(descriptor.external_id or ""))
    table.add_row("Title", escape(descriptor.title or ""))
    table.add_row("Attachments", escape("\n".join(descriptor.attachment_paths)))
    table.add_row("Metadata file", escape(result.metadata_file))
    console.print(table)


@app.command()
def path(
    finder_path: str = typer.Argument(..., help="Local path of the attachment."),
    json_export: Optional[Path] = typer.Option(None, "--json-export", help="JSON export path"),
    bib_export: Optional[Path] = typer.Option(None, "--bib-export", help="BibTeX export path"),
    raw: bool = typer.Option(False, "--raw", help="Print the result as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Find the entry whose attachment matches a local file."""
    _setup_logging(verbose)
    resolver = MetadataResolver()
    result = asyncio.run(
        resolver.lookup_by_path(finder_path, json_path=json_export, bib_path=bib_export)
    )
    _render(result, raw)


@app.command()
def cite(
    citation_key: str = typer.Argument(..., help="Citation key to resolve."),
    json_export: Optional[Path] = typer.Option(None, "--json-export", help="JSON export path"),
    bib_export: Optional[Path] = typer.Option(None, "--bib-export", help="BibTeX export path"),
    raw: bool = typer.Option(False, "--raw", help="Print the result as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Find the entry with a citation key."""
    _setup_logging(verbose)
    resolver = MetadataResolver()
    result = asyncio.run(
        resolver.lookup_by_citation_key(citation_key, json_path=json_export, bib_path=bib_export)
    )
    _render(result, raw)


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
) -> None:
    """Start the HTTP API."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    console.print(f"Starting bibfinder API on http://{host}:{port}")
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
