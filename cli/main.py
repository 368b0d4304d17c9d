# cli/main.py
# ============================================================
# pagebinder — Command Line Interface
# ============================================================
# Typer-based CLI that binds a directory of images into a PDF.
#
# Usage:
#   pagebinder bind                       # current directory
#   pagebinder bind ./chapter1 --output book.pdf --quality 85
#   pagebinder bind ./scans --ordering lexical --quiet
#   pagebinder order ./chapter1           # preview page order
#
#   python -m cli.main bind ./chapter1
# ============================================================

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from config.settings import Ordering, settings
from pagebinder.errors import PageBinderError
from pagebinder.imaging.normalizer import ImageNormalizer
from pagebinder.pipeline.assembler import BindResult, DocumentAssembler, default_output_path

# ============================================================
# CLI App Setup
# ============================================================

app = typer.Typer(
    name="pagebinder",
    help=(
        "📚 pagebinder — Bind a directory of images into one PDF\n\n"
        "Images are sorted in natural order (page2 before page10), re-encoded\n"
        "as JPEG and placed one per page, each page sized to its image."
    ),
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()


# ============================================================
# Commands
# ============================================================

@app.command()
def bind(
    directory: Path = typer.Argument(
        Path("."),
        help="Directory holding the page images (not searched recursively).",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Output PDF path. Default: <directory>/<directory-name>.pdf.",
    ),
    quality: Optional[int] = typer.Option(
        None,
        "--quality", "-q",
        min=0,
        max=100,
        help=f"JPEG quality 0-100 (default {settings.jpeg_quality}).",
    ),
    ordering: Optional[Ordering] = typer.Option(
        None,
        "--ordering",
        case_sensitive=False,
        help="Page ordering: natural | lexical.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        help="Only log skipped files and the final result.",
    ),
    report: Optional[Path] = typer.Option(
        None,
        "--report",
        help="Also write a JSON run report to this path.",
    ),
):
    """
    📄 Bind the images of a directory into a single PDF.

    Files that cannot be decoded are skipped and listed in the summary.

    Examples:
        bind
        bind ./chapter1 --output ./out/chapter1.pdf
        bind ./scans --quality 90 --ordering lexical
    """
    output_path = output or default_output_path(directory)

    console.print(Panel(
        f"[bold blue]pagebinder[/bold blue] — Image to PDF\n"
        f"Input:    {escape(str(directory))}\n"
        f"Ordering: {(ordering or settings.ordering).value}\n"
        f"Output:   {escape(str(output_path))}",
        title="📚 Bind",
        border_style="blue",
    ))

    assembler = DocumentAssembler(
        normalizer=ImageNormalizer(quality=quality),
        ordering=ordering,
        verbose=False if quiet else None,
    )

    try:
        result = assembler.bind(directory, output_path=output_path)
    except PageBinderError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    _print_results_table(result)

    if report:
        try:
            result.save_json(report)
        except OSError as e:
            console.print(f"[red]Error:[/red] cannot write report: {escape(str(e))}")
            raise typer.Exit(code=1)

    console.print(f"\n[bold green]PDF written:[/bold green] {escape(str(result.output_path))}")


@app.command()
def order(
    directory: Path = typer.Argument(
        Path("."),
        help="Directory holding the page images.",
    ),
    ordering: Optional[Ordering] = typer.Option(
        None,
        "--ordering",
        case_sensitive=False,
        help="Page ordering: natural | lexical.",
    ),
):
    """
    🔢 Show the order images would be bound in, without decoding them.
    """
    assembler = DocumentAssembler(ordering=ordering)

    try:
        candidates = assembler.order(assembler.discover(directory))
    except PageBinderError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    if not candidates:
        console.print("[yellow]No image files found.[/yellow]")
        return

    table = Table(title=f"Page order ({assembler.ordering.value})")
    table.add_column("Page", justify="right")
    table.add_column("File")

    for num, candidate in enumerate(candidates, start=1):
        table.add_row(str(num), escape(candidate.name))

    console.print(table)


# ============================================================
# Helper Functions
# ============================================================

def _print_results_table(result: BindResult) -> None:
    """Print a summary table of bound pages and skipped files."""
    table = Table(title="Binding Summary")
    table.add_column("Page", justify="center")
    table.add_column("File")
    table.add_column("Pixels", justify="right")
    table.add_column("Page (mm)", justify="right")
    table.add_column("Status", justify="center")

    for num, page in enumerate(result.pages, start=1):
        table.add_row(
            str(num),
            escape(page.name),
            f"{page.width_px}x{page.height_px}",
            f"{page.width_mm:.1f}x{page.height_mm:.1f}",
            "[green]✅[/green]",
        )

    for skipped in result.skipped:
        table.add_row("-", escape(skipped.name), "-", "-", f"[red]❌ {escape(skipped.reason)}[/red]")

    # Summary row
    table.add_section()
    table.add_row(
        "[bold]Total[/bold]",
        f"[bold]{result.page_count}/{result.total_candidates}[/bold]",
        "",
        f"[bold]{result.pdf_size_bytes / 1024:.0f} KB[/bold]",
        f"[bold]{result.total_latency_ms:.0f}ms[/bold]",
    )

    console.print(table)


# ============================================================
# Entry Point
# ============================================================

if __name__ == "__main__":
    app()
