# ytt/batch/runner.py
"""
Orchestration runner for playlist mode.

Responsibilities:
- Resolve the playlist and enumerate its video ids
- Hand each video to the caller's handler, in discovery order
- Contain per-video failures so one bad video does not stop the run
- Return the aggregated BatchReport

No fetching or formatting logic lives here, only orchestration.
"""

from __future__ import annotations

from typing import Optional

from ytt.batch.base import VideoHandler, timer
from ytt.batch.collector import BatchCollector
from ytt.batch.schema import BatchReport, VideoResult, failure_from_error
from ytt.logging_core.logger import log_event
from ytt.transcripts.core import YouTubeTranscript
from ytt.transcripts.errors import TranscriptError

import logging


async def run_playlist(
    api: YouTubeTranscript,
    playlist_input: str,
    handler: VideoHandler,
    *,
    max_videos: Optional[int] = None,
    allow_partial: bool = False,
) -> BatchReport:
    """
    Process every video of a playlist with `handler`.

    Args:
        api: open YouTubeTranscript facade (its run_id tags the report)
        playlist_input: playlist URL or bare playlist id
        handler: awaited once per video with (video_id, index, total)
        max_videos: process at most this many videos from the start
        allow_partial: keep the ids gathered so far if a continuation page fails

    Raises:
        TranscriptError when the playlist itself cannot be resolved or enumerated.
    """
    if max_videos is not None and max_videos < 0:
        raise ValueError(f"max_videos must be non-negative, got {max_videos}")

    logger = api.logger
    playlist_id = api.extract_playlist_id(playlist_input)
    video_ids = await api.get_playlist_video_ids(playlist_id, allow_partial=allow_partial)

    collector = BatchCollector(playlist_id, api.run_id)
    collector.discovered = len(video_ids)
    if max_videos is not None:
        video_ids = video_ids[:max_videos]
    total = len(video_ids)

    log_event(
        logger,
        logging.INFO,
        "Starting playlist batch",
        stage_name="batch",
        event_type="start",
        metadata={"playlist_id": playlist_id, "discovered": collector.discovered, "total": total},
    )

    for index, video_id in enumerate(video_ids, start=1):
        with timer() as end:
            try:
                await handler(video_id, index, total)
            except TranscriptError as exc:
                failure = failure_from_error(video_id, exc)
                result = VideoResult(
                    video_id=video_id,
                    index=index,
                    success=False,
                    failure=failure,
                    execution_time_ms=end(),
                )
                log_event(
                    logger,
                    logging.WARNING,
                    "Video failed, continuing with the next one",
                    stage_name="batch",
                    event_type="failure",
                    metadata={"video_id": video_id, "index": index, "type": failure.type.value, "cause": failure.cause},
                )
            else:
                result = VideoResult(video_id=video_id, index=index, success=True, execution_time_ms=end())
        collector.add_result(result)

    report = collector.build_report()
    log_event(
        logger,
        logging.INFO if not report.has_failures else logging.WARNING,
        "Playlist batch completed",
        stage_name="batch",
        event_type="success",
        metadata={"playlist_id": playlist_id, "succeeded": report.succeeded, "failed": report.failed},
    )
    return report
