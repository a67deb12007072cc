"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from dj_automation.exceptions import ApiError, ConfigurationError, DownloadError
from dj_automation.models.config import AppConfig
from dj_automation.models.outcome import Matched, NoMatch, PipelineOutcome, SourceFailure
from dj_automation.models.stats import RunStats
from dj_automation.utils.formatting import format_duration, parse_iso_duration

METADATA_LABELS = {
    "artist": "Artist",
    "title": "Title",
    "key": "Key",
    "bpm": "BPM",
    "camelotKey": "Camelot",
    "popularity": "Popularity",
}


_SUGGESTIONS: list[tuple[type[BaseException], list[str]]] = [
    (
        ApiError,
        [
            "Check that the YouTube Data API v3 is enabled for your key.",
            "A 403 usually means the daily quota is used up.",
            "Replace the key with `dj-automation init <TOKEN> --force`.",
        ],
    ),
    (
        ConfigurationError,
        [
            "Create a configuration with `dj-automation init <TOKEN>`,",
            "or export YOUTUBE_TOKEN for this shell.",
        ],
    ),
    (
        DownloadError,
        [
            "yt-dlp needs ffmpeg on your PATH to extract audio.",
            "The video may be removed or region-locked.",
        ],
    ),
    (TimeoutError, ["Check your connection or raise navigation_timeout_ms."]),
]


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Builds the error panel shown when a command aborts."""
    suggestions = next(
        (tips for error_cls, tips in _SUGGESTIONS if isinstance(error, error_cls)),
        ["Run the command again with -vv for the full log."],
    )

    body = Text()
    body.append(type(error).__name__, style="bold red")
    body.append(f": {error}\n")
    if context:
        details = ", ".join(f"{k}={v}" for k, v in context.items() if v is not None)
        body.append(f"({details})\n", style="dim")
    body.append("\nWhat to try:\n", style="bold yellow")
    body.append("\n".join(f"  • {tip}" for tip in suggestions))

    return Panel(body, title="[bold red]dj-automation failed[/bold red]", border_style="red", expand=False)


def print_config(config_path: Path, config_data: dict[str, Any]):
    """Displays the current configuration, hiding the API token."""
    console = Console()
    content = ""
    for key, value in sorted(config_data.items()):
        if key == "youtube_token":
            value = "[hidden]" if value else "[not set]"
        content += f"{key} = {escape(str(value))}\n"

    console.print(
        Panel(
            content.strip(),
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_validation_table(config: AppConfig):
    """Displays a summary of the current settings."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    table.add_row("YouTube API:", f"[dim]{config.youtube_base_url}[/dim]")
    table.add_row("API Token:", "[green]✓ Set[/green]")
    table.add_row("Tunebat Search:", f"[dim]{config.tunebat_base_url}[/dim]")
    table.add_row("Output Directory:", config.output_dir)
    table.add_row("Audio:", f"{config.audio_format} ({config.audio_quality})")
    table.add_row("Write Tags:", "✓ Enabled" if config.write_tags else "✗ Disabled")
    table.add_row("Headless Browser:", "✓ Yes" if config.headless else "✗ No")
    table.add_row("Video Details:", "✓ Fetched" if config.fetch_details else "✗ Skipped")

    console.print(
        Panel(
            table,
            title="[bold green]✓ Validated Settings[/bold green]",
            border_style="green",
        )
    )


def print_match_panel(console: Console, outcome: Matched):
    """Displays the matched video together with its Tunebat metadata."""
    result = outcome.result

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan", justify="right")
    table.add_column()

    table.add_row("URL:", result.resource_url)
    if seconds := parse_iso_duration(result.duration):
        table.add_row("Duration:", format_duration(seconds))
    if result.metadata:
        for key, value in result.metadata.items():
            table.add_row(f"{METADATA_LABELS.get(key, key)}:", escape(value))
    else:
        table.add_row("Tunebat:", "[yellow]No metadata found[/yellow]")
    if outcome.path:
        table.add_row("Saved To:", f"[green]{escape(str(outcome.path))}[/green]")

    console.print(
        Panel(
            table,
            title=f"[bold]{escape(result.decoded_name)}[/bold]",
            border_style="green",
            expand=False,
        )
    )


def print_summary_panel(
    stats: RunStats, outcomes: Sequence[PipelineOutcome], console: Console | None = None
):
    """Displays the final summary of the run."""
    console = console or Console()

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=16)
    stats_table.add_column(style="white", justify="left")

    stats_table.add_row("✓ Downloaded:", f"[bold green]{stats.matched}[/bold green]")
    if stats.no_match > 0:
        stats_table.add_row("○ No Match:", f"[yellow]{stats.no_match}[/yellow]")
    if stats.failed > 0:
        stats_table.add_row("✗ Failed:", f"[bold red]{stats.failed}[/bold red]")
    if stats.duplicates_skipped > 0:
        stats_table.add_row(
            "Duplicates:", f"[dim]{stats.duplicates_skipped} skipped[/dim]"
        )
    stats_table.add_row(
        "Time Elapsed:", f"[blue]{format_duration(stats.elapsed_seconds)}[/blue]"
    )

    problems = [o for o in outcomes if not isinstance(o, Matched)]
    if problems:
        stats_table.add_row("", "")
        for outcome in problems:
            if isinstance(outcome, NoMatch):
                detail = "[yellow]no YouTube result[/yellow]"
            elif isinstance(outcome, SourceFailure):
                detail = (
                    f"[red]{outcome.stage.value}: {escape(outcome.reason)}[/red]"
                )
            else:
                continue
            stats_table.add_row(escape(outcome.query), detail)

    if stats.has_failures:
        title = "⚠ [bold]Finished With Errors[/bold]"
        border_color = "red"
    else:
        title = "🎵 [bold]Run Complete![/bold]"
        border_color = "green"

    console.print()
    console.print(
        Panel(
            stats_table,
            title=title,
            border_style=border_color,
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )
