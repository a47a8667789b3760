"""Main CLI entry point for YouTube URL Validator."""

import os
import sys
import json
import logging
from pathlib import Path
from typing import Optional, List

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TimeElapsedColumn

from youtube_validator import __version__
from youtube_validator.core.errors import ErrorKind, URLValidationError, get_error_severity
from youtube_validator.core.normalizer import BatchNormalizer, normalize
from youtube_validator.core.registry import VideoRegistry
from youtube_validator.core.video_info import create_fetcher
from youtube_validator.i18n.language import get_supported_languages, resolve_language
from youtube_validator.i18n.messages import generate_help_message, get_formatted_message
from youtube_validator.utils.config import Config
from youtube_validator.workflows.validation import VideoValidationWorkflow

# Configure logging
logging.basicConfig(level=logging.WARNING)
logger = logging.getLogger(__name__)

console = Console()

LANGUAGE_OPTION_HELP = "Response language (ja, en). Defaults to the configured language."


def get_api_key() -> Optional[str]:
    """Get YouTube API key from environment or config.

    Returns:
        API key if found, None otherwise
    """
    # Try environment variable first
    api_key = os.getenv('YOUTUBE_API_KEY')
    if api_key:
        return api_key

    # Try config file
    try:
        config = Config()
        return config.get('youtube_api_key')
    except Exception:
        return None


def setup_config(config_path: Optional[Path] = None) -> Config:
    """Setup and return configuration instance.

    Args:
        config_path: Optional path to config file

    Returns:
        Configuration instance
    """
    return Config(config_path)


def pick_language(lang: Optional[str], accept_language: Optional[str] = None) -> str:
    """Resolve the output language from options and configuration."""
    config = setup_config()
    return resolve_language(
        lang,
        os.getenv('YOUTUBE_VALIDATOR_LANGUAGE'),
        accept_language,
        default=config.get('default_language', 'ja')
    )


def read_urls(path: Path) -> List[str]:
    """Read one URL per line, skipping blanks and # comments."""
    lines = path.read_text(encoding='utf-8').splitlines()
    return [line.strip() for line in lines if line.strip() and not line.strip().startswith('#')]


def build_workflow() -> VideoValidationWorkflow:
    """Create a validation workflow from configuration."""
    config = setup_config()
    fetcher = create_fetcher(get_api_key(), config.get('fetcher', 'auto'))
    registry_file = config.get('registry_file')
    registry = VideoRegistry(Path(registry_file) if registry_file else None)
    return VideoValidationWorkflow(fetcher=fetcher, registry=registry)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def main(verbose: bool) -> None:
    """YouTube URL Validator - normalize YouTube URLs and explain what is wrong with them."""
    if verbose:
        console.print(f"[bold green]YouTube URL Validator v{__version__}[/bold green]")
        console.print("Verbose mode enabled")
        logging.getLogger().setLevel(logging.INFO)


@main.command("normalize")
@click.argument("url")
@click.option("--lang", "-l", help=LANGUAGE_OPTION_HELP)
@click.option("--json", "as_json", is_flag=True, help="Print result as JSON")
def normalize_command(url: str, lang: Optional[str], as_json: bool) -> None:
    """Normalize a YouTube URL or video ID."""
    language = pick_language(lang)

    try:
        result = normalize(url, language)
    except URLValidationError as e:
        if as_json:
            click.echo(json.dumps({
                "kind": e.kind.value,
                "severity": get_error_severity(e.kind).value,
                "message": get_formatted_message(e.kind, language)
            }, ensure_ascii=False, indent=2))
        else:
            console.print(f"[red]{get_formatted_message(e.kind, language)}[/red]")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return

    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")
    table.add_row("Video ID", result.video_id)
    table.add_row("Canonical", result.canonical)
    if result.metadata:
        for key, value in result.metadata.to_dict().items():
            table.add_row(key.capitalize(), str(value))
    console.print(table)


@main.command("batch")
@click.argument("url_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--workers", default=None, type=int, help="Number of parallel workers (default: 4)")
@click.option("--lang", "-l", help=LANGUAGE_OPTION_HELP)
@click.option("--output", "-o", type=click.Path(), help="Save results to JSON file")
def batch_command(url_file: str, workers: Optional[int], lang: Optional[str], output: Optional[str]) -> None:
    """Normalize every URL in a file (one per line)."""
    try:
        config = setup_config()
        if workers is None:
            workers = config.get('batch_workers', 4)
        language = pick_language(lang)

        urls = read_urls(Path(url_file))
        if not urls:
            console.print("[yellow]No URLs found in file.[/yellow]")
            return

        normalizer = BatchNormalizer(max_workers=workers, language=language)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
            console=console
        ) as progress:
            task = progress.add_task("Normalizing URLs...", total=len(urls))

            def progress_callback(processed: int, total: int, current_url: str):
                progress.update(task, completed=processed)

            results = normalizer.normalize_all(urls, progress_callback=progress_callback)

        stats = normalizer.last_stats
        errors = dict(stats.errors) if stats else {}

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Input", style="cyan", no_wrap=False, max_width=50)
        table.add_column("Video ID", justify="center")
        table.add_column("Status")

        for result in results:
            if result.is_valid:
                table.add_row(result.original, result.video_id, "[green]valid[/green]")
            else:
                kind = errors.get(result.original)
                label = kind.value if kind else "invalid"
                table.add_row(result.original, "-", f"[red]{label}[/red]")

        valid_count = sum(1 for r in results if r.is_valid)
        console.print(f"\n[bold green]{valid_count}/{len(results)} URLs valid[/bold green]")
        console.print(table)

        if output:
            output_path = Path(output)
            data = {
                "results": [r.to_dict() for r in results],
                "summary": stats.get_summary() if stats else {}
            }
            output_path.write_text(json.dumps(data, indent=2, ensure_ascii=False, default=str))
            console.print(f"\n[green]Results saved to {output_path}[/green]")

    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user.[/yellow]")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Error: {str(e)}[/red]")
        sys.exit(1)


@main.command("explain")
@click.argument("kind", type=click.Choice([k.value for k in ErrorKind], case_sensitive=False))
@click.option("--lang", "-l", help=LANGUAGE_OPTION_HELP)
@click.option("--example/--no-example", default=True, help="Include an example URL")
def explain_command(kind: str, lang: Optional[str], example: bool) -> None:
    """Show the user-facing message for an error kind."""
    language = pick_language(lang)
    error_kind = ErrorKind(kind.upper())
    help_message = generate_help_message(error_kind, language)

    body = get_formatted_message(error_kind, language, include_example=example)
    if help_message.get("userAction"):
        body += f"\n\n{help_message['userAction']}"
    body += f"\n\n[dim]severity: {get_error_severity(error_kind).value}[/dim]"

    console.print(Panel(body, title=help_message["title"], border_style="yellow"))


@main.command("languages")
def languages_command() -> None:
    """List supported languages."""
    for language in get_supported_languages():
        console.print(language)


@main.command("check")
@click.argument("url")
@click.option("--lang", "-l", help=LANGUAGE_OPTION_HELP)
@click.option("--accept-language", help="Accept-Language value to negotiate from")
def check_command(url: str, lang: Optional[str], accept_language: Optional[str]) -> None:
    """Run the full registration check for a URL and print the response."""
    try:
        workflow = build_workflow()
        outcome = workflow.validate(url, lang=lang, accept_language=accept_language)
    except Exception as e:
        console.print(f"[red]Error: {str(e)}[/red]")
        sys.exit(1)

    click.echo(json.dumps({"status": outcome.status, **outcome.body}, ensure_ascii=False, indent=2, default=str))
    if not outcome.success:
        sys.exit(1)


@main.command("register")
@click.argument("url")
@click.option("--lang", "-l", help=LANGUAGE_OPTION_HELP)
def register_command(url: str, lang: Optional[str]) -> None:
    """Validate a URL and add the video to the registry."""
    try:
        workflow = build_workflow()
        outcome = workflow.register(url, lang=lang)
    except Exception as e:
        console.print(f"[red]Error: {str(e)}[/red]")
        sys.exit(1)

    if outcome.success:
        console.print(f"[green]✓[/green] Registered {outcome.normalized.video_id}: {outcome.video.title}")
        return

    error = outcome.body["error"]
    console.print(f"[red]{error['message']}[/red]")
    if error.get("suggestion"):
        console.print(error["suggestion"])
    sys.exit(1)


if __name__ == "__main__":
    main()
