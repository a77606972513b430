# ytt/transcripts/watch_page.py
"""
Watch-page extraction.

Responsibility:
- Fetch a video's watch page, passing the EU consent interstitial if served
- Validate playability and map failures onto the error taxonomy
- Build the TranscriptList from the embedded caption metadata

Does NOT download caption documents. That is the core's job.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from ytt.logging_core.logger import log_event
from ytt.transcripts.errors import (
    AgeRestricted,
    FailedToCreateConsentCookie,
    RequestBlocked,
    TranscriptsDisabled,
    VideoUnavailable,
    VideoUnplayable,
    YouTubeDataUnparsable,
)
from ytt.transcripts.http_client import PageClient
from ytt.transcripts.page_state import PageState, parse_watch_page
from ytt.transcripts.schema import CaptionTrack, TranslationLanguage
from ytt.transcripts.transcript_list import TranscriptList

import logging


WATCH_URL = "https://www.youtube.com/watch"

CONSENT_FORM_MARKER = 'action="https://consent.youtube.com/s"'
CONSENT_VALUE_REGEX = re.compile(r'name="v" value="(.*?)"')

STATUS_OK = "OK"
STATUS_LOGIN_REQUIRED = "LOGIN_REQUIRED"
STATUS_ERROR = "ERROR"
AGE_GATE_STATUSES = frozenset({"AGE_CHECK_REQUIRED", "AGE_VERIFICATION_REQUIRED", "CONTENT_CHECK_REQUIRED"})

BOT_CHECK_MARKERS = ("not a bot",)
PRIVATE_MARKERS = ("private",)
UNAVAILABLE_MARKERS = ("unavailable", "removed", "private", "does not exist", "no longer available")


def _reason_has(reason: Optional[str], markers: tuple) -> bool:
    lowered = (reason or "").lower()
    return any(marker in lowered for marker in markers)


def assert_playability(state: PageState, video_id: str) -> None:
    """Raise the typed error for a non-OK playability status; return on OK."""
    status = state.playability_status
    if status is None or status == STATUS_OK:
        return

    reason = state.playability_reason
    if status == STATUS_LOGIN_REQUIRED:
        if _reason_has(reason, BOT_CHECK_MARKERS):
            raise RequestBlocked(video_id)
        if _reason_has(reason, PRIVATE_MARKERS):
            raise VideoUnavailable(video_id)
        raise AgeRestricted(video_id)

    if status in AGE_GATE_STATUSES:
        raise AgeRestricted(video_id)

    if status == STATUS_ERROR and _reason_has(reason, UNAVAILABLE_MARKERS):
        raise VideoUnavailable(video_id)

    raise VideoUnplayable(video_id, reason, state.playability_subreasons)


def _display_name(node: Any) -> Optional[str]:
    if not isinstance(node, dict):
        return None
    if isinstance(node.get("simpleText"), str):
        return node["simpleText"]
    runs = node.get("runs")
    if isinstance(runs, list) and runs and isinstance(runs[0], dict):
        return runs[0].get("text")
    return None


def build_transcript_list(video_id: str, state: PageState) -> TranscriptList:
    """
    Partition the caption tracks into manual and generated.

    Tracks are keyed by language code; a later duplicate replaces an earlier one.
    """
    captions = state.captions
    if not captions or not isinstance(captions.get("captionTracks"), list):
        raise TranscriptsDisabled(video_id)

    translation_languages: List[TranslationLanguage] = []
    for entry in captions.get("translationLanguages") or []:
        code = entry.get("languageCode") if isinstance(entry, dict) else None
        if not code:
            continue
        translation_languages.append(
            TranslationLanguage(language=_display_name(entry.get("languageName")) or code, language_code=code)
        )
    translation_codes = tuple(lang.language_code for lang in translation_languages)

    manually_created: Dict[str, CaptionTrack] = {}
    generated: Dict[str, CaptionTrack] = {}
    for caption in captions["captionTracks"]:
        if not isinstance(caption, dict):
            raise YouTubeDataUnparsable(video_id)
        code = caption.get("languageCode")
        base_url = caption.get("baseUrl")
        if not code or not base_url:
            raise YouTubeDataUnparsable(video_id)

        is_generated = caption.get("kind") == "asr"
        track = CaptionTrack(
            video_id=video_id,
            language=_display_name(caption.get("name")) or code,
            language_code=code,
            is_generated=is_generated,
            base_url=base_url,
            translation_language_codes=translation_codes if caption.get("isTranslatable") else (),
        )
        (generated if is_generated else manually_created)[code] = track

    return TranscriptList(
        video_id=video_id,
        title=state.title,
        manually_created=manually_created,
        generated=generated,
        translation_languages=tuple(translation_languages),
    )


class WatchPageExtractor:
    """Turns a video id into its TranscriptList via the watch page."""

    def __init__(self, client: PageClient, logger: logging.Logger) -> None:
        self._client = client
        self._logger = logger

    async def fetch_transcript_list(self, video_id: str) -> TranscriptList:
        log_event(
            self._logger,
            logging.INFO,
            "Fetching watch page",
            stage_name="watch_page",
            event_type="start",
            metadata={"video_id": video_id},
        )

        html = await self._fetch_html(video_id)
        state = parse_watch_page(html, video_id)

        assert_playability(state, video_id)
        transcript_list = build_transcript_list(video_id, state)

        log_event(
            self._logger,
            logging.INFO,
            "Transcript list built",
            stage_name="watch_page",
            event_type="success",
            metadata={
                "video_id": video_id,
                "manual": len(transcript_list.manually_created),
                "generated": len(transcript_list.generated),
                "translation_languages": len(transcript_list.translation_languages),
            },
        )
        return transcript_list

    async def _fetch_html(self, video_id: str) -> str:
        html = await self._client.get_text(WATCH_URL, video_id=video_id, params={"v": video_id})
        if CONSENT_FORM_MARKER not in html:
            return html

        match = CONSENT_VALUE_REGEX.search(html)
        if match is None:
            raise FailedToCreateConsentCookie(video_id)

        log_event(
            self._logger,
            logging.DEBUG,
            "Consent interstitial served, retrying with derived cookie",
            stage_name="watch_page",
            event_type="retry",
            metadata={"video_id": video_id},
        )
        self._client.set_consent_cookie(f"YES+{match.group(1)}", video_id=video_id)

        html = await self._client.get_text(WATCH_URL, video_id=video_id, params={"v": video_id})
        if CONSENT_FORM_MARKER in html:
            raise FailedToCreateConsentCookie(video_id)
        return html
