# ytt/output/writer.py
"""
Output writer.
Single responsibility: deliver rendered text to its destination.

Filesystem failures surface as IoError.
"""

from __future__ import annotations

import typer

from ytt.output.destination import OutputDestination
from ytt.transcripts.errors import IoError


def write_output(text: str, destination: OutputDestination) -> None:
    if destination.path is None:
        typer.echo(text, nl=False)
        return

    try:
        destination.path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise IoError(f"Failed to create file {destination.path}: {exc}") from exc
