# ytt/output/formatters.py
"""
Transcript renderers.
Single responsibility: turn TranscriptItems into the text of one output format.

Renderers are pure; writing the result is ytt.output.writer's job.
"""

from __future__ import annotations

import json
from typing import Callable, Dict, List, Optional, Sequence

from ytt.transcripts.schema import TranscriptItem


DEFAULT_FORMAT = "text"

# Accepted spellings -> canonical format
FORMAT_ALIASES: Dict[str, str] = {
    "json": "json",
    "text": "text",
    "txt": "text",
    "srt": "srt",
    "markdown": "markdown",
    "md": "markdown",
}

EXTENSIONS: Dict[str, str] = {
    "json": "json",
    "text": "txt",
    "srt": "srt",
    "markdown": "md",
}

SUPPORTED_FORMATS = "json, text, txt, srt, markdown, md"

# Markers that identify already-formatted markdown (LLM cleanup output)
MARKDOWN_MARKERS = ("**", "##", "*")


def normalize_format(name: str) -> Optional[str]:
    """Canonical format name, or None when the name is not recognised."""
    return FORMAT_ALIASES.get(name.strip().lower())


def extension_for(format_name: str) -> str:
    return EXTENSIONS.get(normalize_format(format_name) or DEFAULT_FORMAT, "txt")


def format_srt_time(seconds: float) -> str:
    """Format seconds as an SRT timestamp HH:MM:SS,mmm, truncating sub-milliseconds."""
    hours = int(seconds / 3600)
    minutes = int((seconds % 3600) / 60)
    secs = seconds % 60
    whole_secs = int(secs)
    millis = int((secs - whole_secs) * 1000)
    return f"{hours:02d}:{minutes:02d}:{whole_secs:02d},{millis:03d}"


def render_json(items: Sequence[TranscriptItem], **_: object) -> str:
    payload = [item.model_dump() for item in items]
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def render_srt(items: Sequence[TranscriptItem], **_: object) -> str:
    lines: List[str] = []
    for index, item in enumerate(items, start=1):
        lines.append(str(index))
        lines.append(f"{format_srt_time(item.start)} --> {format_srt_time(item.start + item.duration)}")
        lines.append(item.text)
        lines.append("")  # Blank line between entries
    return "".join(f"{line}\n" for line in lines)


def render_text(
    items: Sequence[TranscriptItem],
    *,
    timestamps: bool = False,
    url: Optional[str] = None,
    title: Optional[str] = None,
) -> str:
    lines: List[str] = []
    if url and title:
        lines.extend([f"{title}: {url}", ""])

    for item in items:
        lines.append(f"[{item.start:.2f}s] {item.text}" if timestamps else item.text)

    return "".join(f"{line}\n" for line in lines)


def render_markdown(
    items: Sequence[TranscriptItem],
    *,
    timestamps: bool = False,
    url: Optional[str] = None,
    title: Optional[str] = None,
) -> str:
    """
    Render a markdown document under a `# Transcript` heading.

    A single item that already contains markdown (cleanup output) is passed
    through; the heading is only added if it does not start with one.
    """
    parts: List[str] = []
    if url and title:
        parts.append(f"![{title}]({url})\n\n")

    if len(items) == 1 and any(marker in items[0].text for marker in MARKDOWN_MARKERS):
        if not items[0].text.lstrip().startswith("#"):
            parts.append("# Transcript\n\n")
        parts.append(f"{items[0].text}\n")
        return "".join(parts)

    parts.append("# Transcript\n\n")
    for item in items:
        line = f"**[{item.start:.2f}s]** {item.text}" if timestamps else item.text
        parts.append(f"{line}\n\n")
    return "".join(parts)


RENDERERS: Dict[str, Callable[..., str]] = {
    "json": render_json,
    "text": render_text,
    "srt": render_srt,
    "markdown": render_markdown,
}


def render(
    format_name: str,
    items: Sequence[TranscriptItem],
    *,
    timestamps: bool = False,
    url: Optional[str] = None,
    title: Optional[str] = None,
) -> str:
    """Render with the named format; unknown names fall back to text."""
    renderer = RENDERERS[normalize_format(format_name) or DEFAULT_FORMAT]
    return renderer(items, timestamps=timestamps, url=url, title=title)
