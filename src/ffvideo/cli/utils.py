"""Shared utilities for CLI commands."""

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from ..config import DEFAULT_VIDEO_CONFIG, VideoConfig


def handle_generic_error(command_name: str, error: Exception) -> None:
    """Handle generic command errors with consistent formatting."""
    click.echo(f"❌ {command_name} failed: {error}", err=True)
    sys.exit(1)


def handle_keyboard_interrupt(command_name: str) -> None:
    """Handle keyboard interrupt with consistent formatting."""
    click.echo(f"\n⏹️  {command_name} interrupted by user", err=True)
    sys.exit(1)


def display_path_info(label: str, path: Path, emoji: str = "📁") -> None:
    """Display path information with consistent formatting."""
    click.echo(f"{emoji} {label}: {path}")


def video_options(func: Callable) -> Callable:
    """Attach the decoding options shared by every command that opens a video."""
    defaults = DEFAULT_VIDEO_CONFIG
    options = [
        click.option("--width", type=int, default=defaults.width, show_default=True, help="Frame width"),
        click.option("--height", type=int, default=defaults.height, show_default=True, help="Frame height"),
        click.option("--fps", type=float, default=defaults.fps, show_default=True, help="Frames per second to decode"),
        click.option("--length", type=float, default=defaults.length, show_default=True, help="Seconds to decode"),
        click.option("--seek", type=float, default=defaults.seek, show_default=True, help="Start position in seconds"),
        click.option(
            "--channel",
            "-c",
            type=int,
            multiple=True,
            help="Video stream index (repeat for several streams, default: 0)",
        ),
        click.option(
            "--encoding",
            default=defaults.encoding,
            show_default=True,
            help="Image format of the decoded frames",
        ),
        click.option(
            "--dest",
            type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
            default=None,
            help=f"Scratch folder for decoded frames (default: {defaults.dest_folder})",
        ),
        click.option("--silent", is_flag=True, help="Suppress progress messages"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def video_kwargs(params: dict[str, Any], default_channels: list[int] | None = None) -> dict[str, Any]:
    """Translate the values of :func:`video_options` into Video keyword arguments."""
    channels = list(params.get("channel") or default_channels or [DEFAULT_VIDEO_CONFIG.channel])
    kwargs: dict[str, Any] = {
        "width": params["width"],
        "height": params["height"],
        "fps": params["fps"],
        "length": params["length"],
        "seek": params["seek"],
        "channel": channels[0] if len(channels) == 1 else channels,
        "encoding": params["encoding"],
        "silent": params["silent"],
    }
    if params.get("dest") is not None:
        kwargs["dest_folder"] = str(params["dest"])
    return kwargs


def video_config(params: dict[str, Any], **overrides: Any) -> VideoConfig:
    """Build a validated VideoConfig from CLI parameters."""
    try:
        return VideoConfig(**{**video_kwargs(params), **overrides})
    except ValueError as e:
        raise click.BadParameter(str(e)) from e
