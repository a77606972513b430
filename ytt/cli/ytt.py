# ytt/cli/ytt.py
"""
CLI entrypoint for transcript extraction.

Thin adapter, no extraction logic.
Responsibilities:
- Parse arguments into a FetchConfig and output options
- Drive the core for one video or a whole playlist
- Render and deliver each transcript
- Report errors as one line on stderr

stdout carries transcript output only; progress, errors and JSON logs go to stderr.
"""

from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass
from typing import List, Optional

import typer

from ytt.batch.runner import run_playlist
from ytt.cleanup import TranscriptCleaner
from ytt.logging_core.logger import DEFAULT_LOG_LEVEL, set_log_level
from ytt.output.destination import resolve_destination
from ytt.output.formatters import SUPPORTED_FORMATS, normalize_format, render
from ytt.output.writer import write_output
from ytt.transcripts.core import YouTubeTranscript
from ytt.transcripts.errors import TranscriptError
from ytt.transcripts.schema import DEFAULT_DELAY_MS, DEFAULT_LANGUAGES, FetchConfig, Transcript, TranscriptItem

import logging


WATCH_URL_TEMPLATE = "https://www.youtube.com/watch?v={video_id}"

app = typer.Typer(
    name="ytt",
    help="YouTube Transcript API - Fetch transcripts from YouTube videos",
    no_args_is_help=True,
    add_completion=False,
)


@dataclass
class OutputOptions:
    """Per-run presentation settings shared by every processed video."""
    format_name: str = "text"
    timestamps: bool = False
    list_only: bool = False
    cleanup: bool = False
    openai_key: Optional[str] = None
    output: Optional[str] = None
    use_title: bool = False
    include_url: bool = False

    @property
    def markdown_cleanup(self) -> bool:
        return self.cleanup and normalize_format(self.format_name) == "markdown"


def _echo_err(message: str) -> None:
    typer.echo(message, err=True)


def _print_listing(listing: str, video_id: str, index: Optional[int], total: Optional[int]) -> None:
    if index is not None and total is not None:
        typer.echo(f"[{index}/{total}] Available transcripts for video: {video_id}")
    else:
        typer.echo(f"Available transcripts for video: {video_id}")
    typer.echo("")
    typer.echo(listing)


async def _cleaned_items(
    transcript: Transcript,
    options: OutputOptions,
    logger: logging.Logger,
    quiet: bool,
) -> List[TranscriptItem]:
    """Collapse the transcript into one cleaned item spanning the whole video."""
    if not quiet:
        _echo_err("Cleaning up transcript with ChatGPT...")

    cleaner = TranscriptCleaner(options.openai_key, logger=logger)
    cleaned = await cleaner.cleanup(transcript.text(), markdown=options.markdown_cleanup)

    items = transcript.items
    return [
        TranscriptItem(
            text=cleaned,
            start=items[0].start if items else 0.0,
            duration=sum(item.duration for item in items),
        )
    ]


async def process_video(
    api: YouTubeTranscript,
    options: OutputOptions,
    video_id: str,
    index: Optional[int] = None,
    total: Optional[int] = None,
) -> None:
    """Fetch, optionally clean, render and deliver one video's transcript."""
    playlist_mode = index is not None

    if options.list_only:
        transcript_list = await api.list_transcripts(video_id)
        _print_listing(str(transcript_list), video_id, index, total)
        return

    if not playlist_mode:
        _echo_err(f"Fetching transcript for video: {video_id}")

    transcript = await api.fetch(video_id)
    items = transcript.items
    if options.cleanup:
        items = await _cleaned_items(transcript, options, api.logger, quiet=playlist_mode)

    destination = resolve_destination(
        options.output,
        format_name=options.format_name,
        video_id=video_id,
        title=transcript.title,
        use_title=options.use_title,
        playlist_mode=playlist_mode,
    )

    url = WATCH_URL_TEMPLATE.format(video_id=video_id) if options.include_url else None
    title = transcript.title if options.include_url else None

    if normalize_format(options.format_name) is None:
        _echo_err(f"Unknown format: '{options.format_name}'. Using 'text' format.")
        _echo_err(f"Supported formats: {SUPPORTED_FORMATS}")

    text = render(options.format_name, items, timestamps=options.timestamps, url=url, title=title)
    write_output(text, destination)

    if not destination.is_stdout:
        _echo_err(f"Transcript written to: {destination}")


async def run_single(config: FetchConfig, options: OutputOptions, video: str) -> int:
    async with YouTubeTranscript(config) as api:
        try:
            video_id = api.extract_video_id(video)
            await process_video(api, options, video_id)
        except TranscriptError as exc:
            _echo_err(f"Error: {exc}")
            return 1
    return 0


async def run_playlist_mode(
    config: FetchConfig,
    options: OutputOptions,
    playlist: str,
    max_videos: Optional[int],
) -> int:
    async with YouTubeTranscript(config) as api:

        async def handle(video_id: str, index: int, total: int) -> None:
            _echo_err(f"\n[{index}/{total}] Processing video: {video_id}")
            try:
                await process_video(api, options, video_id, index, total)
            except TranscriptError as exc:
                _echo_err(f"Error processing video {video_id}: {exc}")
                raise

        try:
            _echo_err(f"Fetching video IDs from playlist: {api.extract_playlist_id(playlist)}")
            report = await run_playlist(api, playlist, handle, max_videos=max_videos)
        except TranscriptError as exc:
            _echo_err(f"Error: {exc}")
            return 1

    if report.total < report.discovered:
        _echo_err(f"Found {report.discovered} videos in playlist, processed first {report.total} (limited by --max)")
    _echo_err(f"\nProcessed {report.total} videos: {report.succeeded} succeeded, {report.failed} failed")
    for fix in report.suggested_fixes():
        _echo_err(f"  - {fix}")
    return 0


@app.command()
def main(
    video: str = typer.Argument(..., help="YouTube video URL or video ID"),
    languages: Optional[List[str]] = typer.Option(
        None,
        "--languages",
        "-l",
        envvar="YTT_LANGUAGES",
        help="Language codes (e.g., en, es, fr). Repeat for multiple, in preference order.",
    ),
    translate: Optional[str] = typer.Option(None, "--translate", "-t", help="Translate transcript to this language code"),
    format_name: str = typer.Option("text", "--format", "-f", help="Output format: json, text, txt, srt, markdown, md"),
    timestamps: bool = typer.Option(False, "--timestamps", help="Show transcript text with timestamps"),
    list_only: bool = typer.Option(False, "--list", help="List available transcripts instead of fetching"),
    delay: int = typer.Option(
        DEFAULT_DELAY_MS, "--delay", min=0, envvar="YTT_DELAY_MS", help="Delay before each request in milliseconds"
    ),
    cleanup: bool = typer.Option(
        False, "--cleanup", help="Clean up transcript using ChatGPT (requires OPENAI_API_KEY or --openai-key)"
    ),
    openai_key: Optional[str] = typer.Option(
        None, "--openai-key", envvar="OPENAI_API_KEY", show_envvar=False, help="OpenAI API key"
    ),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output file or directory (default: stdout)"),
    name: bool = typer.Option(False, "--name", "-n", help="Use video title as the basename for the output file"),
    url: bool = typer.Option(False, "--url", "-u", help="Include the video URL at the start of text/markdown output"),
    playlist: bool = typer.Option(False, "--playlist", "-p", help="Treat the input as a playlist and process every video"),
    max_videos: Optional[int] = typer.Option(
        None, "--max", "-m", min=0, help="Maximum number of videos to process in playlist mode"
    ),
    log_level: str = typer.Option(DEFAULT_LOG_LEVEL, "--log-level", envvar="YTT_LOG_LEVEL", help="Structured log level"),
) -> None:
    """
    Fetch the transcript of a YouTube video, or of every video in a playlist.
    """
    try:
        set_log_level(log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc

    config = FetchConfig(
        delay_ms=delay,
        languages=list(languages) if languages else list(DEFAULT_LANGUAGES),
        translate_to=translate,
    )
    options = OutputOptions(
        format_name=format_name,
        timestamps=timestamps,
        list_only=list_only,
        cleanup=cleanup,
        openai_key=openai_key,
        output=output,
        use_title=name,
        include_url=url,
    )

    try:
        if playlist:
            code = asyncio.run(run_playlist_mode(config, options, video, max_videos))
        else:
            code = asyncio.run(run_single(config, options, video))
    except KeyboardInterrupt:
        _echo_err("\nInterrupted by user.")
        sys.exit(1)

    raise typer.Exit(code=code)


if __name__ == "__main__":
    app()
