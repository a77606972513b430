# ytt/transcripts/playlist.py
"""
Playlist traversal.
Single responsibility: enumerate every video id of a playlist, in order.

The first batch comes from the playlist page; further batches are fetched
from the InnerTube `browse` endpoint until a response carries no
continuation token. Duplicate ids are kept as listed.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Set

from ytt.logging_core.logger import log_event
from ytt.transcripts.errors import TranscriptError, YouTubeDataUnparsable
from ytt.transcripts.http_client import PageClient
from ytt.transcripts.page_state import PageState, parse_continuation_response, parse_playlist_page
from ytt.transcripts.schema import VideoId

import logging


PLAYLIST_URL = "https://www.youtube.com/playlist"
BROWSE_URL = "https://www.youtube.com/youtubei/v1/browse"

DEFAULT_CLIENT_NAME = "WEB"
DEFAULT_CLIENT_VERSION = "2.20240101.00.00"


def build_browse_payload(token: str, client_version: Optional[str]) -> Dict[str, Any]:
    return {
        "context": {
            "client": {
                "clientName": DEFAULT_CLIENT_NAME,
                "clientVersion": client_version or DEFAULT_CLIENT_VERSION,
                "hl": "en",
                "gl": "US",
            }
        },
        "continuation": token,
    }


class PlaylistTraverser:
    def __init__(self, client: PageClient, logger: logging.Logger) -> None:
        self._client = client
        self._logger = logger

    async def get_video_ids(self, playlist_id: str, allow_partial: bool = False) -> List[VideoId]:
        """
        Return the playlist's video ids in listing order.

        A failure on the first page always propagates. A failure on a later
        page propagates unless allow_partial is set, in which case the ids
        gathered so far are returned.
        """
        log_event(
            self._logger,
            logging.INFO,
            "Enumerating playlist",
            stage_name="playlist",
            event_type="start",
            metadata={"playlist_id": playlist_id},
        )

        html = await self._client.get_text(PLAYLIST_URL, video_id=playlist_id, params={"list": playlist_id})
        first = parse_playlist_page(html, playlist_id)

        video_ids: List[VideoId] = [VideoId(v) for v in first.video_ids]
        pages = 1
        try:
            pages += await self._follow_continuations(playlist_id, first, video_ids)
        except TranscriptError as exc:
            if not allow_partial:
                raise
            log_event(
                self._logger,
                logging.WARNING,
                "Playlist continuation failed, returning partial result",
                stage_name="playlist",
                event_type="failure",
                metadata={
                    "playlist_id": playlist_id,
                    "video_count": len(video_ids),
                    "error": str(exc),
                },
            )
            return video_ids

        log_event(
            self._logger,
            logging.INFO,
            "Playlist enumerated",
            stage_name="playlist",
            event_type="success",
            metadata={"playlist_id": playlist_id, "pages": pages, "video_count": len(video_ids)},
        )
        return video_ids

    async def _follow_continuations(self, playlist_id: str, first: PageState, video_ids: List[VideoId]) -> int:
        """Append every continuation batch to video_ids; return the number of pages fetched."""
        params = {"key": first.api_key, "prettyPrint": "false"} if first.api_key else {"prettyPrint": "false"}
        seen_tokens: Set[str] = set()
        token = first.continuation
        pages = 0

        while token:
            if token in seen_tokens:
                raise YouTubeDataUnparsable(playlist_id)
            seen_tokens.add(token)

            data = await self._client.post_json(
                BROWSE_URL,
                build_browse_payload(token, first.client_version),
                video_id=playlist_id,
                params=params,
            )
            state = parse_continuation_response(data, playlist_id)
            video_ids.extend(VideoId(v) for v in state.video_ids)
            pages += 1
            token = state.continuation

            log_event(
                self._logger,
                logging.DEBUG,
                "Continuation page fetched",
                stage_name="playlist",
                event_type="progress",
                metadata={"playlist_id": playlist_id, "page": pages + 1, "batch_size": len(state.video_ids)},
            )

        return pages
