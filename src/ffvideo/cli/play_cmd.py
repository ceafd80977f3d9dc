"""Playback commands."""

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
@click.option("--zoom", type=float, default=1, show_default=True, help="Display zoom factor")
@click.option("--loop", is_flag=True, help="Start with looping enabled")
@click.option("--play-fps", type=float, default=None, help="Playback rate (default: decoding fps)")
@click.option("--3d", "stereo", is_flag=True, help="Play streams 0/1 as a red/cyan anaglyph")
def play(video: Path, zoom: float, loop: bool, play_fps: float | None, stereo: bool, **params) -> None:
    """Decode VIDEO and play it in a window.

    Keys: [space] pause/resume/restart, [L] loop, [right,left] step,
    [q/esc/ctrl+w] close. Clicking the window toggles pause.
    """
    try:
        from ..video import Video

        kwargs = video_kwargs(params, default_channels=[0, 1] if stereo else None)
        clip = Video(video, **kwargs)

        if stereo:
            clip.play_3d(zoom=zoom, loop=loop, fps=play_fps)
        else:
            clip.play(zoom=zoom, loop=loop, fps=play_fps)

    except KeyboardInterrupt:
        handle_keyboard_interrupt("Playback")
    except Exception as e:
        handle_generic_error("Playback", e)


@click.command("youtube3d")
@click.argument("video", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@video_options
@click.option("--zoom", type=float, default=1, show_default=True, help="Display zoom factor")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Save the side-by-side sequence to OUTPUT.avi",
)
def youtube3d(video: Path, zoom: float, output: Path | None, **params) -> None:
    """Show streams 0/1 of VIDEO side by side in a 16:9 frame."""
    try:
        from ..video import Video

        clip = Video(video, **video_kwargs(params, default_channels=[0, 1]))
        written = clip.play_youtube_3d(zoom=zoom, save_path=output)
        if written is not None:
            display_path_info("Saved", written, "💾")

    except KeyboardInterrupt:
        handle_keyboard_interrupt("3D playback")
    except Exception as e:
        handle_generic_error("3D playback", e)
