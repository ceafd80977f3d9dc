"""Extract command: decode frames into the scratch folder."""

from pathlib import Path

import click

from .utils import (
    display_path_info,
    handle_generic_error,
    handle_keyboard_interrupt,
    video_kwargs,
    video_options,
)


@click.command()
@click.argument("video", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@video_options
def extract(video: Path, **params) -> None:
    """Decode VIDEO into numbered images and keep them on disk.

    Re-running with the same settings reuses the frames unless VIDEO has
    changed since they were decoded.
    """
    try:
        from ..video import Video

        display_path_info("Source", video, "🎞️ ")
        result = Video(video, load=False, delete=False, **video_kwargs(params))

        click.echo(f"✅ {result.nframes} frames at {result.width}x{result.height}")
        for channel in result.channels:
            display_path_info(f"Stream {channel.stream}", channel.path)

    except KeyboardInterrupt:
        handle_keyboard_interrupt("Extraction")
    except Exception as e:
        handle_generic_error("Extraction", e)
