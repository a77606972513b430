# ytt/batch/schema.py
"""
Result contracts for playlist batch runs.

This module defines:
- Typed failure categories for per-video diagnostics
- The VideoResult contract recorded for every processed video
- The BatchReport returned by run_playlist()
- The mapping from TranscriptError classes to categories and suggested fixes
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field

from ytt.transcripts.errors import (
    AgeRestricted,
    FailedToCreateConsentCookie,
    HttpError,
    InvalidVideoId,
    IoError,
    IpBlocked,
    JsonParseError,
    NoTranscriptFound,
    NotTranslatable,
    PoTokenRequired,
    RequestBlocked,
    TranscriptError,
    TranscriptsDisabled,
    TranslationLanguageNotAvailable,
    VideoUnavailable,
    VideoUnplayable,
    XmlParseError,
    YouTubeDataUnparsable,
)


class FailureType(str, Enum):
    """Typed failure categories for machine-parsable diagnostics."""
    INPUT_ERROR = "input_error"
    SOURCE_ERROR = "source_error"
    AVAILABILITY_ERROR = "availability_error"
    EXTRACTION_ERROR = "extraction_error"
    OUTPUT_ERROR = "output_error"


class VideoFailure(BaseModel):
    """Structured representation of one video's failure."""
    video_id: str
    type: FailureType
    error_class: str
    cause: str
    suggested_fixes: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class VideoResult(BaseModel):
    """
    Outcome of handling one playlist entry.

    failure is set exactly when success is False.
    """
    video_id: str
    index: int = Field(ge=1)
    success: bool
    failure: Optional[VideoFailure] = None
    execution_time_ms: Optional[float] = None

    model_config = ConfigDict(frozen=True)


class BatchReport(BaseModel):
    """Aggregated outcome of a playlist run, in processing order."""
    playlist_id: str
    run_id: str
    discovered: int = 0  # ids enumerated before any max_videos cap
    results: List[VideoResult] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def has_failures(self) -> bool:
        return self.failed > 0

    def suggested_fixes(self) -> List[str]:
        """Distinct suggested fixes across every failure, first-seen order."""
        fixes: List[str] = []
        for result in self.results:
            if result.failure is None:
                continue
            for fix in result.failure.suggested_fixes:
                if fix not in fixes:
                    fixes.append(fix)
        return fixes


# Ordered most specific first; the first isinstance match wins
_CLASSIFICATION: List[Tuple[Type[TranscriptError], FailureType, List[str]]] = [
    (InvalidVideoId, FailureType.INPUT_ERROR, ["Check the video or playlist URL/ID"]),
    (IpBlocked, FailureType.SOURCE_ERROR, ["Increase --delay", "Retry later or from another network"]),
    (RequestBlocked, FailureType.SOURCE_ERROR, ["Increase --delay", "Retry later or from another network"]),
    (PoTokenRequired, FailureType.SOURCE_ERROR, ["This video's captions are protected; no workaround available"]),
    (FailedToCreateConsentCookie, FailureType.SOURCE_ERROR, ["Retry; the consent page layout may have changed"]),
    (HttpError, FailureType.SOURCE_ERROR, ["Check network connectivity", "Retry later"]),
    (NoTranscriptFound, FailureType.AVAILABILITY_ERROR, ["Run with --list to see available languages"]),
    (TranscriptsDisabled, FailureType.AVAILABILITY_ERROR, ["The uploader disabled captions for this video"]),
    (NotTranslatable, FailureType.AVAILABILITY_ERROR, ["Drop --translate or pick another source language"]),
    (TranslationLanguageNotAvailable, FailureType.AVAILABILITY_ERROR, ["Run with --list to see translation languages"]),
    (AgeRestricted, FailureType.AVAILABILITY_ERROR, ["Age-restricted videos need a signed-in session"]),
    (VideoUnavailable, FailureType.AVAILABILITY_ERROR, ["Verify the video is public and still online"]),
    (VideoUnplayable, FailureType.AVAILABILITY_ERROR, ["Verify the video plays in a browser"]),
    (XmlParseError, FailureType.EXTRACTION_ERROR, ["YouTube may have changed its caption format; update ytt"]),
    (JsonParseError, FailureType.EXTRACTION_ERROR, ["YouTube may have changed its page format; update ytt"]),
    (YouTubeDataUnparsable, FailureType.EXTRACTION_ERROR, ["YouTube may have changed its page format; update ytt"]),
    (IoError, FailureType.OUTPUT_ERROR, ["Check the output path exists and is writable"]),
]

DEFAULT_FIXES = ["Review logs (--log-level DEBUG)"]


def classify_error(exc: TranscriptError) -> Tuple[FailureType, List[str]]:
    """Map an error onto its failure category and suggested fixes."""
    for error_class, failure_type, fixes in _CLASSIFICATION:
        if isinstance(exc, error_class):
            return failure_type, list(fixes)
    return FailureType.SOURCE_ERROR, list(DEFAULT_FIXES)


def failure_from_error(video_id: str, exc: TranscriptError) -> VideoFailure:
    failure_type, fixes = classify_error(exc)
    return VideoFailure(
        video_id=video_id,
        type=failure_type,
        error_class=type(exc).__name__,
        cause=str(exc),
        suggested_fixes=fixes,
    )
