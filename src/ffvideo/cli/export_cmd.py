"""Export commands: re-encode, dump frames and clear the scratch folder."""

from pathlib import Path

import click

from .utils import (
    display_path_info,
    handle_generic_error,
    handle_keyboard_interrupt,
    video_config,
    video_kwargs,
    video_options,
)


@click.command()
@click.argument("video", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@video_options
@click.option("--zoom", type=float, default=1, show_default=True, help="Scale factor applied when encoding")
@click.option("--keep", is_flag=True, help="Keep the intermediate PNG frames")
def convert(video: Path, output: Path, zoom: float, keep: bool, **params) -> None:
    """Decode VIDEO and re-encode it as OUTPUT.avi (MJPEG, one stream per channel)."""
    try:
        from ..video import Video

        clip = Video(video, zoom=zoom, **video_kwargs(params))
        written = clip.save(output, keep=keep)
        display_path_info("Saved", written, "💾")

    except KeyboardInterrupt:
        handle_keyboard_interrupt("Conversion")
    except Exception as e:
        handle_generic_error("Conversion", e)


@click.command()
@click.argument("video", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("dest", type=click.Path(file_okay=False, dir_okay=True, path_type=Path))
@video_options
def dump(video: Path, dest: Path, **params) -> None:
    """Decode VIDEO and write its frames as PNG files under DEST."""
    try:
        from ..video import Video

        clip = Video(video, **video_kwargs(params))
        for directory in clip.dump(dest):
            display_path_info("Frames", directory)

    except KeyboardInterrupt:
        handle_keyboard_interrupt("Dump")
    except Exception as e:
        handle_generic_error("Dump", e)


@click.command()
@click.argument("video", type=click.Path(dir_okay=False, path_type=Path))
@video_options
def clear(video: Path, **params) -> None:
    """Remove the scratch frames decoded from VIDEO with these settings."""
    try:
        from ..cache import cache_path, clear_cache_dir

        config = video_config(params)
        removed = 0
        for stream in config.channels:
            directory = cache_path(
                config.dest_folder,
                video.expanduser(),
                fps=config.fps,
                width=config.width // 2 * 2,
                height=config.height // 2 * 2,
                length=config.length,
                channel=stream,
                seek=config.seek,
                encoding=config.encoding,
            )
            if clear_cache_dir(directory):
                removed += 1
                display_path_info("Removed", directory, "🧹")

        if removed == 0:
            click.echo("ℹ️  Nothing to clear")

    except click.BadParameter:
        raise
    except Exception as e:
        handle_generic_error("Clear", e)
