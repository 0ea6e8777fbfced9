"""CLI interface for the literature-review assistant."""

import asyncio
import json
import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ....application.services.create_card import CreateCardService
from ....composition.container import (
    get_card_repository,
    get_create_card_service,
    get_retrieval_service,
)
from ....config.logging import setup_logging
from ....config.settings import settings
from ....core.services.segmenter import segment_text
from ...common.exception_handler import (
    format_exception_json,
    get_error_code,
    get_exit_code,
    log_exception,
)
from ...outbound.documents.document_loader import load_document

app = typer.Typer(
    name="litreview",
    help="Literature-review assistant: evidence cards, segmentation and retrieval",
    add_completion=False,
)

console = Console(force_terminal=True, legacy_windows=False)

# Determine if we're in debug mode (shows full stack traces)
DEBUG_MODE = os.getenv("DEBUG", "false").lower() == "true"


def handle_cli_error(exc: Exception) -> None:
    """Handle and display errors in CLI with structured format.

    In debug mode, shows full JSON error details.
    In normal mode, shows a user-friendly message with error code.
    """
    log_exception(exc, level=logging.DEBUG)
    error_data = format_exception_json(exc, include_trace=DEBUG_MODE)

    if DEBUG_MODE:
        console.print(
            Panel(
                json.dumps(error_data, indent=2, ensure_ascii=False),
                title="[bold red]Error Details[/]",
                border_style="red",
            )
        )
        return

    error_code = get_error_code(exc)
    console.print(f"\n[red]Error [{error_code}]:[/] {escape(error_data['error']['message'])}")
    console.print(f"[dim]Type: {error_data['error']['type']}[/]")
    console.print("[dim]Set DEBUG=true for full details[/]")


@app.callback()
def main() -> None:
    """Configure logging before any command runs."""
    setup_logging(settings.log_level, log_file=settings.log_file, json_format=settings.log_json)


@app.command()
def segment(
    file: Path = typer.Argument(..., help="Text or PDF document to segment"),
    max_chunk_size: int = typer.Option(
        settings.segment_chunk_size, help="Target chunk size in characters"
    ),
) -> None:
    """Print the retrieval chunks of a document."""
    try:
        text = load_document(file)
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(get_exit_code(exc))

    chunks = segment_text(text, max_chunk_size, settings.segment_overlap)
    for index, chunk in enumerate(chunks, start=1):
        console.print(
            Panel(
                escape(chunk),
                title=f"Chunk {index}/{len(chunks)} ({len(chunk)} chars)",
                style="dim",
            )
        )
    console.print(f"\n[green]{len(chunks)} chunks[/]")


@app.command()
def ingest(
    files: list[Path] = typer.Argument(..., help="Text or PDF documents to turn into cards"),
) -> None:
    """Extract an evidence card from each document and store it."""
    settings.ensure_directories()
    service = get_create_card_service()
    # One event loop for every file: the Gemini client is bound to the loop it first ran on
    asyncio.run(_ingest_files(service, files))


async def _ingest_files(service: CreateCardService, files: list[Path]) -> None:
    for file in files:
        console.print(f"[bold]{file.name}[/]")
        try:
            text = load_document(file)
            with console.status("[bold green]Analizando documento...[/]") as spinner:
                card = await service.create(text, on_progress=spinner.update)
        except Exception as exc:
            handle_cli_error(exc)
            raise typer.Exit(get_exit_code(exc))

        label = escape(card.source or file.name)
        console.print(f"  [green]OK[/] {label} ({len(card.chunks)} chunks)")
        if card.tags:
            console.print(f"  [dim]Tags: {escape(', '.join(card.tags))}[/]")


@app.command()
def search(
    query: str = typer.Argument(..., help="Free-text query"),
    top_k: int = typer.Option(settings.retrieval_top_k, help="Maximum number of results"),
    context: bool = typer.Option(False, help="Print the assembled prompt context instead"),
) -> None:
    """Rank the stored card chunks for a query."""
    try:
        cards = get_card_repository().list_cards()
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(get_exit_code(exc))

    retriever = get_retrieval_service()
    if context:
        console.print(retriever.build_context(query, cards, top_k=top_k), markup=False)
        return

    results = retriever.retrieve(query, cards, top_k=top_k)
    if not results:
        console.print("[yellow]No matching chunks.[/]")
        return

    table = Table(title=f"Results for {query!r}")
    table.add_column("Score", justify="right", style="cyan")
    table.add_column("Source", style="magenta")
    table.add_column("Text")
    for result in results:
        snippet = result.text if len(result.text) <= 200 else result.text[:200] + "..."
        table.add_row(f"{result.score:g}", escape(result.source), escape(snippet))
    console.print(table)


@app.command()
def status() -> None:
    """Show configuration and card store status."""
    console.print("[bold]litreview status[/]\n")

    if settings.google_api_key:
        console.print("[green]OK[/] Google API key configured")
    else:
        console.print("[red]--[/] Google API key not set (set GOOGLE_API_KEY in .env)")

    console.print(f"[dim]Model: {settings.llm_model}[/]")
    console.print(f"[dim]Card store: {settings.cards_file}[/]")

    try:
        cards = get_card_repository().list_cards()
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(get_exit_code(exc))

    chunk_total = sum(len(card.chunks) for card in cards)
    if cards:
        console.print(f"\n[green]{len(cards)} cards, {chunk_total} chunks[/]")
    else:
        console.print("\n[yellow]No cards yet. Run 'litreview ingest FILE' to add one.[/]")


if __name__ == "__main__":
    app()
