"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from dj_automation import __version__
from dj_automation.api.client import YouTubeAPIClient
from dj_automation.core.pipeline import PipelineOrchestrator
from dj_automation.core.runner import QueryRunner
from dj_automation.exceptions import DjAutomationError
from dj_automation.media import AudioDownloader, Tagger
from dj_automation.models.config import AppConfig
from dj_automation.models.outcome import Matched, PipelineStage
from dj_automation.models.stats import RunStats
from dj_automation.scraping import BrowserSessionManager, TunebatClient
from dj_automation.storage.config_manager import ConfigManager

from .formatters import (
    print_config,
    print_match_panel,
    print_summary_panel,
    print_validation_table,
)

console = Console()

logging.basicConfig(
    level="WARNING",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("dj_automation")

app = typer.Typer(
    name="dj-automation",
    help=(
        "Find a song's key and BPM on Tunebat, match it on YouTube and save it"
        " as a tagged MP3. Use 'dj-automation <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)

STAGE_MESSAGES = {
    PipelineStage.FETCHING_METADATA: "Searching for [bold]{label}[/bold] on Tunebat",
    PipelineStage.SEARCHING_CANDIDATES: "Searching for [bold]{label}[/bold] on YouTube",
    PipelineStage.MATCHING: "Picking the best match for [bold]{label}[/bold]",
    PipelineStage.DELEGATING: "Downloading [bold]{label}[/bold] from YouTube",
}


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "dj-automation"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
):
    """DJ automation CLI"""
    if version:
        console.print(f"[bold]dj-automation[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "WARNING"
    if verbose == 1:
        log_level = "INFO"
    elif verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("dj_automation").setLevel(log_level)

    if show_config:
        if not CONFIG_FILE.is_file():
            console.print(
                "[red]✗ Config file not found.[/] Run [cyan]dj-automation init[/cyan]"
                " first."
            )
            raise typer.Exit(code=1)
        print_config(CONFIG_FILE, ConfigManager(CONFIG_FILE).read_file_values())
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    token: str = typer.Argument(..., help="YouTube Data API v3 key."),
    output_dir: str | None = typer.Option(
        None, "-o", "--output-dir", help="Where downloaded songs are saved."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration without asking."
    ),
):
    """Initialize configuration with a YouTube API key."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    settings = {"youtube_token": token.strip()}
    if output_dir:
        settings["output_dir"] = output_dir

    config_manager = ConfigManager(CONFIG_FILE)
    config_manager.save_new_config(settings)
    console.print(f"\n[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]")
    console.print('Ready! Try: [cyan]dj-automation search "curbi vertigo"[/cyan]')


def _read_terms_from_stdin() -> list[str]:
    """Reads search terms from stdin, one per line."""
    if sys.stdin.isatty():
        console.print(
            "[yellow]⚠️  No input detected on stdin. Please pipe search terms or"
            " redirect a file.[/yellow]"
        )
        raise typer.Exit(code=1)

    terms = [
        line.strip()
        for line in sys.stdin
        if line.strip() and not line.lstrip().startswith("#")
    ]
    if not terms:
        console.print("[yellow]⚠️  No search terms found in stdin.[/yellow]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓ Read {len(terms)} search terms from stdin.[/green]")
    return terms


def build_runner(config: AppConfig, api_client: YouTubeAPIClient) -> QueryRunner:
    """Wires the pipeline's collaborators from a validated config."""
    session_manager = BrowserSessionManager(
        headless=config.headless,
        navigation_timeout_ms=config.navigation_timeout_ms,
    )
    downloader = AudioDownloader(
        output_dir=Path(config.output_dir),
        audio_format=config.audio_format,
        audio_quality=config.audio_quality,
        tagger=Tagger() if config.write_tags else None,
    )
    orchestrator = PipelineOrchestrator(
        metadata_client=TunebatClient(config.tunebat_base_url, session_manager),
        search_client=api_client,
        downloader=downloader,
        fetch_details=config.fetch_details,
    )
    return QueryRunner(orchestrator, RunStats())


@app.command(name="search")
def search_command(
    terms: list[str] | None = typer.Argument(  # noqa: B008
        None, help='One or more search terms, e.g. "curbi vertigo".'
    ),
    output_dir: str | None = typer.Option(
        None, "-o", "--output-dir", help="Where downloaded songs are saved."
    ),
    audio_format: str | None = typer.Option(
        None, "--format", help="Audio format: mp3, m4a, opus, wav or flac."
    ),
    write_tags: bool | None = typer.Option(
        None, "--tags/--no-tags", help="Write key/BPM tags to downloaded MP3s."
    ),
    headless: bool | None = typer.Option(
        None, "--headless/--headful", help="Run the scraping browser without a window."
    ),
    fetch_details: bool | None = typer.Option(
        None, "--details/--no-details", help="Look up video details (duration)."
    ),
    stdin: bool = typer.Option(
        False, "--stdin", help="Read search terms from standard input, one per line."
    ),
):
    """Search, match and download one or more songs."""
    if stdin:
        terms = _read_terms_from_stdin()
    elif not terms:
        console.print(
            "[red]✗ No search terms provided.[/red] "
            'Use: [cyan]dj-automation search "curbi vertigo"[/cyan] or [cyan]--stdin[/cyan]'
        )
        raise typer.Exit(code=1)

    cli_options = {
        key: value
        for key, value in {
            "output_dir": output_dir,
            "audio_format": audio_format,
            "write_tags": write_tags,
            "headless": headless,
            "fetch_details": fetch_details,
        }.items()
        if value is not None
    }

    try:
        config = ConfigManager(CONFIG_FILE).load_config(cli_options)
    except DjAutomationError as e:
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=1) from e

    async def _search_async():
        async with YouTubeAPIClient(
            config.youtube_token, config.youtube_base_url
        ) as api_client:
            runner = build_runner(config, api_client)

            with console.status("Starting...") as status:

                def on_stage(stage: PipelineStage, label: str) -> None:
                    if stage == PipelineStage.DONE:
                        console.print(f"[green]✓[/green] {escape(label)}")
                    elif message := STAGE_MESSAGES.get(stage):
                        status.update(message.format(label=escape(label)))

                outcomes = await runner.run_all(terms, observer=on_stage)

        for outcome in outcomes:
            if isinstance(outcome, Matched):
                print_match_panel(console, outcome)
        print_summary_panel(runner.stats, outcomes, console)
        return runner.stats

    stats = asyncio.run(_search_async())
    if stats.has_failures:
        raise typer.Exit(code=1)


@app.command()
def validate():
    """Validate the current configuration."""
    try:
        config_manager = ConfigManager(CONFIG_FILE)
        config = config_manager.load_config()
        print_validation_table(config)
    except DjAutomationError as e:
        console.print(f"[red]✗ Configuration is invalid: {e}[/red]")
        raise typer.Exit(code=1) from e
