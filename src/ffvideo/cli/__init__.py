"""CLI module for ffvideo commands.

This module re-exports all command functions so the entry point can register
them while keeping commands organized in separate modules.
"""

from pathlib import Path

import click

from .. import __version__
from ..io import setup_logging
from .deps_cmd import deps
from .export_cmd import clear, convert, dump
from .extract_cmd import extract
from .play_cmd import play, youtube3d


@click.group()
@click.version_option(version=__version__, prog_name="ffvideo")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
    help="Logging verbosity",
)
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Also write a timestamped log file into this directory",
)
def main(log_level: str, log_dir: Path | None) -> None:
    """🎞️ ffvideo: decode, play and re-encode videos through ffmpeg."""
    setup_logging(log_dir, log_level)


# Register all commands from the modular CLI structure
main.add_command(extract)
main.add_command(play)
main.add_command(youtube3d)
main.add_command(convert)
main.add_command(dump)
main.add_command(clear)
main.add_command(deps)

__all__ = [
    "clear",
    "convert",
    "deps",
    "dump",
    "extract",
    "main",
    "play",
    "youtube3d",
]
