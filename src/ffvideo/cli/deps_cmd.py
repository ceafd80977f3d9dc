"""Dependency check for the external tools ffvideo shells out to."""

import sys

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..system_tools import get_available_tools, parse_version


@click.command("deps")
def deps() -> None:
    """Check that ffmpeg is installed and report its version."""
    console = Console()
    tools = get_available_tools()

    table = Table(title="📦 External Tools", show_header=True, header_style="bold magenta")
    table.add_column("Tool", style="cyan", no_wrap=True)
    table.add_column("Status", justify="center")
    table.add_column("Binary", style="dim")
    table.add_column("Version", style="dim")

    for key, info in tools.items():
        status = "[green]✅ Available[/green]" if info.available else "[red]❌ Missing[/red]"
        table.add_row(key, status, info.name, info.version or "-")

    console.print(table)

    missing = [key for key, info in tools.items() if not info.available]
    if missing:
        console.print(
            Panel(
                f"⚠️  [yellow]Missing: {', '.join(missing)}[/yellow]\n"
                "Install ffmpeg (apt-get install ffmpeg / brew install ffmpeg) "
                "or set FFVIDEO_FFMPEG_PATH.",
                title="System Status",
                border_style="yellow",
            )
        )
        sys.exit(1)

    ffmpeg = tools["ffmpeg"]
    if parse_version(ffmpeg.version) is None:
        detail = "snapshot build, using current stream syntax"
    else:
        detail = f"release {ffmpeg.version}"
    console.print(
        Panel(
            f"✅ [green]ffmpeg ready[/green] ({detail})",
            title="System Status",
            border_style="green",
        )
    )
