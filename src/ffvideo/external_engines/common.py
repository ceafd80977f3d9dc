from __future__ import annotations

import logging
import os
import subprocess
import time
from pathlib import Path
from typing import Any

from ..error_handling import EngineError

__all__ = [
    "run_command",
]

logger = logging.getLogger(__name__)


def run_command(
    cmd: list[str], *, engine: str, output_path: Path, timeout: int | None = None
) -> dict[str, Any]:
    """Execute *cmd* and return ffvideo-style metadata.

    The helper blocks until *cmd* completes, raises *EngineError* on non-zero
    exit status and captures the elapsed wall-clock time in milliseconds.

    Parameters
    ----------
    cmd
        Full command as a list of strings (never passed through a shell).
    engine
        Human-readable engine key, e.g. "ffmpeg".
    output_path
        Path expected to be produced by the command - used to calculate the
        final file size in kilobytes.  Frame patterns yield 0.
    timeout
        Optional hard timeout (seconds) - *None* disables the limit.

    Returns
    -------
    dict
        Metadata dict with the keys ``render_ms``, ``engine``, ``command``,
        ``kilobytes``.
    """
    logger.debug(f"Running {engine}: {' '.join(cmd)}")

    start = time.perf_counter()
    try:
        completed = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except subprocess.TimeoutExpired as e:
        raise EngineError(
            f"{engine} command timed out after {timeout}s",
            cause=e,
            context={"command": " ".join(cmd)},
        ) from e
    except OSError as e:
        raise EngineError(
            f"{engine} could not be started", cause=e, context={"command": " ".join(cmd)}
        ) from e
    duration_ms = int((time.perf_counter() - start) * 1000)

    if completed.returncode != 0:
        raise EngineError(
            f"{engine} command failed (exit {completed.returncode}).\n\n"
            f"STDERR:\n{completed.stderr.strip()}",
            context={"command": " ".join(cmd), "returncode": completed.returncode},
        )

    try:
        size_kb = int(os.path.getsize(output_path) / 1024)
    except OSError:
        # Output may be a frame pattern rather than a single file
        size_kb = 0

    return {
        "render_ms": duration_ms,
        "engine": engine,
        "command": " ".join(cmd),
        "kilobytes": size_kb,
    }
