# ytt/transcripts/errors.py
"""
Closed error taxonomy for transcript and playlist extraction.

Every failure the core can produce is one of the classes below.
Each renders as a single human-readable line via str().
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence


class TranscriptError(Exception):
    """Base class for all ytt failures."""

    message_template = "{detail}"

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(self.message_template.format(detail=detail))

    @property
    def video_id(self) -> str:
        """Identifier (or free-form detail) the error refers to."""
        return self.detail


class VideoUnavailable(TranscriptError):
    message_template = "Video unavailable: {detail}"


class TranscriptsDisabled(TranscriptError):
    message_template = "Transcripts disabled for video: {detail}"


class NoTranscriptFound(TranscriptError):
    """None of the requested language codes has a caption track."""

    def __init__(
        self,
        video_id: str,
        requested_language_codes: Iterable[str],
        available_language_codes: Optional[Sequence[str]] = None,
    ) -> None:
        self.requested_language_codes: List[str] = list(requested_language_codes)
        self.available_language_codes: List[str] = list(available_language_codes or [])
        self.detail = video_id
        message = f"No transcript found for video {video_id} in languages: {self.requested_language_codes}"
        if self.available_language_codes:
            message += f" (available: {self.available_language_codes})"
        Exception.__init__(self, message)


class AgeRestricted(TranscriptError):
    message_template = "Age restricted video: {detail}"


class IpBlocked(TranscriptError):
    message_template = "IP blocked for video: {detail}"


class RequestBlocked(TranscriptError):
    message_template = "Request blocked (bot detected) for video: {detail}"


class VideoUnplayable(TranscriptError):
    """Playability status is not OK and no more specific class applies."""

    def __init__(self, video_id: str, reason: Optional[str], subreasons: Sequence[str] = ()) -> None:
        self.reason = reason or "unknown reason"
        self.subreasons: List[str] = [s for s in subreasons if s]
        self.detail = video_id
        message = f"Video unplayable: {video_id} - {self.reason}"
        if self.subreasons:
            message += f" ({'; '.join(self.subreasons)})"
        Exception.__init__(self, message)


class FailedToCreateConsentCookie(TranscriptError):
    message_template = "Failed to create consent cookie for video: {detail}"


class YouTubeDataUnparsable(TranscriptError):
    message_template = "YouTube data unparsable for video: {detail}"


class PoTokenRequired(TranscriptError):
    message_template = "Protected video requires token: {detail}"


class InvalidVideoId(TranscriptError):
    message_template = "Invalid video ID: {detail}"


class InvalidPlaylistId(InvalidVideoId):
    message_template = "Invalid playlist ID: {detail}"


class HttpError(TranscriptError):
    """Transport failure or an unexpected HTTP status."""

    message_template = "HTTP request failed: {detail}"

    def __init__(self, detail: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(detail)


class XmlParseError(TranscriptError):
    message_template = "Failed to parse XML: {detail}"


class JsonParseError(TranscriptError):
    message_template = "Failed to parse JSON: {detail}"


class NotTranslatable(TranscriptError):
    message_template = "Translation not available: {detail}"


class TranslationLanguageNotAvailable(TranscriptError):
    """The requested target language is not offered for this video."""

    message_template = "Translation language not available: {detail}"

    def __init__(self, video_id: str, language_code: Optional[str] = None) -> None:
        self.language_code = language_code
        detail = video_id if language_code is None else f"{language_code} for video {video_id}"
        super().__init__(detail)
        self.detail = video_id


class IoError(TranscriptError):
    message_template = "IO error: {detail}"


__all__ = [
    "TranscriptError",
    "VideoUnavailable",
    "TranscriptsDisabled",
    "NoTranscriptFound",
    "AgeRestricted",
    "IpBlocked",
    "RequestBlocked",
    "VideoUnplayable",
    "FailedToCreateConsentCookie",
    "YouTubeDataUnparsable",
    "PoTokenRequired",
    "InvalidVideoId",
    "InvalidPlaylistId",
    "HttpError",
    "XmlParseError",
    "JsonParseError",
    "NotTranslatable",
    "TranslationLanguageNotAvailable",
    "IoError",
]
