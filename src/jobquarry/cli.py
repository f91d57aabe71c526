"""Command-line interface for jobquarry."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Optional

import click
import structlog
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from jobquarry import __version__
from jobquarry.config.config import Config, load_config
from jobquarry.driver.page_driver import BrowserSession
from jobquarry.extractor.catalog import catalog_from_settings
from jobquarry.extractor.models import ExtractionError, ExtractionResult
from jobquarry.extractor.orchestrator import StaticSnapshotSource
from jobquarry.intake.postings import IntakeError, read_text_file
from jobquarry.observability.logging import configure_logging
from jobquarry.pipeline import build_orchestrator, run_batch
from jobquarry.snapshot import HtmlSnapshot

console = Console()
logger = structlog.get_logger(__name__)


def _config(ctx: click.Context) -> Config:
    return ctx.obj["config"]


def _show_result(result: ExtractionResult, url: Optional[str]) -> None:
    if result.is_accepted:
        subtitle = f"strategy={result.strategy} length={result.length_chars} passes={result.passes}"
        console.print(Panel(Text(result.text), title=url or "description", subtitle=subtitle, border_style="green"))
    else:
        console.print(
            Panel(Text(result.text), title=url or "description", subtitle=f"passes={result.passes}", border_style="red")
        )


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Configuration file path")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level (overrides the configuration file)",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], log_level: Optional[str]) -> None:
    """jobquarry - job description extraction and resume tailoring."""
    ctx.ensure_object(dict)
    try:
        loaded = load_config(config)
    except ValidationError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        sys.exit(1)

    if log_level:
        loaded.monitoring = loaded.monitoring.model_copy(update={"log_level": log_level})
    configure_logging(loaded.monitoring)
    ctx.obj["config"] = loaded


@cli.command()
@click.argument("postings", type=click.Path(path_type=Path))
@click.option("--resume", "resume_path", type=click.Path(path_type=Path), help="Resume text file to tailor")
@click.option("--output", "-o", type=click.Path(file_okay=False, path_type=Path), help="Directory for all output files")
@click.option("--prompt", "prompt_path", type=click.Path(path_type=Path), help="Custom rewrite instructions file")
@click.option("--no-rewrite", is_flag=True, help="Only extract descriptions")
@click.option("--headful", is_flag=True, help="Show the browser window")
@click.pass_context
def run(
    ctx: click.Context,
    postings: Path,
    resume_path: Optional[Path],
    output: Optional[Path],
    prompt_path: Optional[Path],
    no_rewrite: bool,
    headful: bool,
) -> None:
    """Extract every posting in a CSV file and tailor the resume to each."""
    config = _config(ctx)
    if output is not None:
        config.output = config.output.model_copy(
            update={
                "descriptions_dir": output / "descriptions",
                "resumes_dir": output / "optimized_resumes",
                "summary_path": output / "run_summary.json",
            }
        )
    if headful:
        config.driver = config.driver.model_copy(update={"headless": False})
    if resume_path is None and not no_rewrite:
        console.print("[yellow]No --resume given; only descriptions will be extracted.[/yellow]")

    try:
        summary = asyncio.run(
            run_batch(
                config,
                postings,
                resume_path=resume_path,
                prompt_path=prompt_path,
                rewrite=not no_rewrite,
            )
        )
    except IntakeError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    table = Table(title="Batch Summary")
    table.add_column("Status", style="cyan")
    table.add_column("Postings", style="magenta", justify="right")
    for status, count in summary.counts().items():
        table.add_row(status, str(count))
    console.print(table)
    console.print(f"[green]Descriptions saved in {config.output.descriptions_dir}[/green]")
    if not no_rewrite and resume_path is not None:
        console.print(f"[green]Resumes saved in {config.output.resumes_dir}[/green]")


@cli.command()
@click.argument("url")
@click.option("--html", "html_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Use a saved page instead of a browser")
@click.pass_context
def extract(ctx: click.Context, url: str, html_path: Optional[Path]) -> None:
    """Extract the description of a single posting and print it."""
    config = _config(ctx)

    async def _extract() -> ExtractionResult:
        if html_path is not None:
            # A saved page never changes, so the re-scan needs no settle delay.
            config.extraction = config.extraction.model_copy(update={"retry_settle_delay": 0.0})
            orchestrator = build_orchestrator(config)
            snapshot = HtmlSnapshot.from_file(html_path, url=url)
            return await orchestrator.extract(StaticSnapshotSource(snapshot), url=url)

        orchestrator = build_orchestrator(config)
        async with BrowserSession(config.driver) as session:
            async with session.posting(url) as driver:
                return await orchestrator.extract(driver, url=driver.url)

    try:
        result = asyncio.run(_extract())
    except ExtractionError as e:
        console.print(f"[red]Extraction failed: {e}[/red]")
        sys.exit(1)

    _show_result(result, url)
    if not result.is_accepted:
        sys.exit(2)


@cli.command()
@click.argument("text_file", type=click.Path(path_type=Path))
@click.option("--min-length", type=int, default=None, help="Length floor (defaults to the catalog floor)")
@click.option("--require-positive", is_flag=True, help="Also require a positive description keyword")
@click.pass_context
def classify(ctx: click.Context, text_file: Path, min_length: Optional[int], require_positive: bool) -> None:
    """Classify the text of a file as a job description or not."""
    config = _config(ctx)
    try:
        text = read_text_file(text_file, "text")
    except IntakeError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    relevance = build_orchestrator(config).relevance
    reason = relevance.rejection_reason(text, min_length=min_length, require_positive=require_positive)
    if reason is None:
        console.print(f"[green]RELEVANT[/green] ({len(text)} characters)")
    else:
        console.print(f"[red]REJECTED[/red]: {reason} ({len(text)} characters)")


@cli.command()
@click.pass_context
def catalog(ctx: click.Context) -> None:
    """Print the selector catalog in the order it is tried."""
    rules = catalog_from_settings(_config(ctx).extraction.selectors)

    table = Table(title="Selector Catalog")
    table.add_column("Priority", style="cyan", justify="right")
    table.add_column("Kind", style="magenta")
    table.add_column("Pattern")
    table.add_column("CSS", style="green")
    for rule in rules:
        table.add_row(str(rule.priority), rule.kind.value, rule.pattern, rule.to_css())
    console.print(table)


def main() -> None:
    """Main entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
