# ytt/transcripts/core.py
"""
Public facade of the transcript engine.
Single responsibility: sequence resolver, page client, extractor, negotiator
and parser into the operations callers use.

    async with YouTubeTranscript(FetchConfig(languages=["de", "en"])) as ytt:
        transcript = await ytt.fetch(YouTubeTranscript.extract_video_id(url))

Every operation either returns a complete result or raises a TranscriptError.
"""

from __future__ import annotations

from typing import Any, List, Optional, Sequence
from uuid import uuid4

import httpx

from ytt.logging_core.logger import get_logger, log_event
from ytt.transcripts.errors import PoTokenRequired
from ytt.transcripts.http_client import PageClient
from ytt.transcripts.identifiers import extract_playlist_id, extract_video_id
from ytt.transcripts.negotiator import select_track
from ytt.transcripts.parser import TranscriptParser
from ytt.transcripts.playlist import PlaylistTraverser
from ytt.transcripts.schema import CaptionTrack, FetchConfig, PlaylistId, Transcript, VideoId
from ytt.transcripts.transcript_list import TranscriptList
from ytt.transcripts.watch_page import WatchPageExtractor

import logging


class YouTubeTranscript:
    """
    Entry point for transcript and playlist extraction.

    Owns one PageClient for its lifetime; use as an async context manager
    or call aclose() when done.
    """

    def __init__(
        self,
        config: Optional[FetchConfig] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        run_id: Optional[str] = None,
    ) -> None:
        self.config = config or FetchConfig()
        self.run_id = run_id or str(uuid4())
        self._logger = get_logger(self.run_id)
        self._client = PageClient(
            self._logger,
            self.config.delay_ms,
            http_client=http_client,
            timeout_seconds=self.config.timeout_seconds,
        )
        self._extractor = WatchPageExtractor(self._client, self._logger)
        self._traverser = PlaylistTraverser(self._client, self._logger)
        self._parser = TranscriptParser(preserve_formatting=self.config.preserve_formatting)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "YouTubeTranscript":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    @staticmethod
    def extract_video_id(value: str) -> VideoId:
        return extract_video_id(value)

    @staticmethod
    def extract_playlist_id(value: str) -> PlaylistId:
        return extract_playlist_id(value)

    async def list_transcripts(self, video_id: str) -> TranscriptList:
        return await self._extractor.fetch_transcript_list(video_id)

    async def fetch_transcript(self, video_id: str, languages: Optional[Sequence[str]] = None) -> Transcript:
        """Fetch the best track for the language preference (defaults to the configured list)."""
        transcript_list = await self.list_transcripts(video_id)
        track = select_track(transcript_list, list(languages or self.config.languages))
        return await self.fetch_track(track, title=transcript_list.title)

    async def translate_transcript(
        self,
        video_id: str,
        source_languages: Sequence[str],
        target_language: str,
    ) -> Transcript:
        transcript_list = await self.list_transcripts(video_id)
        track = select_track(transcript_list, list(source_languages), target_language)
        return await self.fetch_track(track, title=transcript_list.title)

    async def fetch(self, video_id: str) -> Transcript:
        """Fetch using the configured languages and translation target."""
        transcript_list = await self.list_transcripts(video_id)
        track = select_track(transcript_list, self.config.languages, self.config.translate_to)
        return await self.fetch_track(track, title=transcript_list.title)

    async def fetch_track(self, track: CaptionTrack, *, title: Optional[str] = None) -> Transcript:
        """Download and parse one caption track."""
        if track.requires_po_token:
            raise PoTokenRequired(track.video_id)

        log_event(
            self._logger,
            logging.INFO,
            "Fetching caption document",
            stage_name="fetch_track",
            event_type="start",
            metadata={
                "video_id": track.video_id,
                "language_code": track.language_code,
                "is_generated": track.is_generated,
                "translated_from": track.translated_from,
            },
        )

        xml = await self._client.get_text(track.base_url, video_id=track.video_id)
        items = self._parser.parse(xml)

        log_event(
            self._logger,
            logging.INFO,
            "Caption document parsed",
            stage_name="fetch_track",
            event_type="success",
            metadata={"video_id": track.video_id, "item_count": len(items)},
        )

        return Transcript(
            video_id=track.video_id,
            title=title,
            language=track.language,
            language_code=track.language_code,
            is_generated=track.is_generated,
            items=items,
        )

    async def get_playlist_video_ids(self, playlist_id: str, allow_partial: bool = False) -> List[VideoId]:
        return await self._traverser.get_video_ids(playlist_id, allow_partial=allow_partial)
