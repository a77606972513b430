# ytt/output/destination.py
"""
Output destination resolution.

Responsibility:
- Decide whether a transcript goes to stdout or to which file
- Derive filenames from titles or video ids
- Keep derived filenames filesystem-safe

No I/O beyond checking whether a path is an existing directory.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ytt.output.formatters import extension_for
from ytt.transcripts.errors import YouTubeDataUnparsable


MAX_FILENAME_LENGTH = 200


@dataclass(frozen=True)
class OutputDestination:
    """Where rendered output goes. path None means stdout."""
    path: Optional[Path] = None

    @property
    def is_stdout(self) -> bool:
        return self.path is None

    def __str__(self) -> str:
        return "<stdout>" if self.path is None else str(self.path)


STDOUT = OutputDestination()


def sanitize_filename(title: str) -> str:
    """
    Make a title safe to use as a file basename.

    Keeps alphanumerics, space, '-', '_' and '.'; everything else becomes '_'.
    Space runs become one '_', '_' runs collapse, the result is capped at
    200 characters and loses trailing underscores.
    """
    mapped = "".join(c if c.isalnum() or c in " -_." else "_" for c in title)
    joined = "_".join(mapped.split())
    collapsed = re.sub(r"_+", "_", joined)
    return collapsed[:MAX_FILENAME_LENGTH].rstrip("_")


def _looks_like_directory(output: str) -> bool:
    path = Path(output)
    if path.exists():
        return path.is_dir()
    return output.endswith(os.sep) or output.endswith("/")


def _title_filename(title: Optional[str], extension: str) -> str:
    if not title:
        raise YouTubeDataUnparsable("Failed to extract video title")
    return f"{sanitize_filename(title)}.{extension}"


def resolve_destination(
    output: Optional[str],
    *,
    format_name: str,
    video_id: str,
    title: Optional[str] = None,
    use_title: bool = False,
    playlist_mode: bool = False,
) -> OutputDestination:
    """
    Resolve the destination for one video's transcript.

    Rules, first match wins:
    - directory + use_title           -> <dir>/<sanitized title>.<ext>
    - directory in playlist mode      -> <dir>/<video id>.<ext>
    - file path in playlist mode      -> <parent>/<stem>_<video id>.<suffix>
    - file path                       -> the path as given
    - use_title without a path        -> <sanitized title>.<ext>
    - playlist mode without a path    -> <video id>.<ext>
    - otherwise                       -> stdout

    Raises YouTubeDataUnparsable when a title is needed but unknown.
    """
    extension = extension_for(format_name)

    if output:
        if _looks_like_directory(output):
            if use_title:
                return OutputDestination(Path(output) / _title_filename(title, extension))
            if playlist_mode:
                return OutputDestination(Path(output) / f"{video_id}.{extension}")

        if playlist_mode:
            path = Path(output)
            stem = path.stem or "output"
            suffix = path.suffix.lstrip(".") or "txt"
            return OutputDestination(path.parent / f"{stem}_{video_id}.{suffix}")

        return OutputDestination(Path(output))

    if use_title:
        return OutputDestination(Path(_title_filename(title, extension)))

    if playlist_mode:
        return OutputDestination(Path(f"{video_id}.{extension}"))

    return STDOUT
