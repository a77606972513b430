# ytt/transcripts/schema.py
"""
Shared contracts for the transcript subsystem.
Single responsibility: define value types and the fetch configuration.

All models are immutable; each fetch produces a fresh, independently owned graph.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, NewType, Optional, Tuple
from urllib.parse import parse_qs, urlsplit

from pydantic import BaseModel, ConfigDict, Field


VideoId = NewType("VideoId", str)
PlaylistId = NewType("PlaylistId", str)

DEFAULT_DELAY_MS = 500
DEFAULT_LANGUAGES: Tuple[str, ...] = ("en",)
DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass
class FetchConfig:
    """Configuration consumed by the core."""
    delay_ms: int = DEFAULT_DELAY_MS  # Sleep before every request
    languages: List[str] = field(default_factory=lambda: list(DEFAULT_LANGUAGES))  # Preference order
    translate_to: Optional[str] = None  # Server-side translation target
    preserve_formatting: bool = False  # Reserved, parser ignores it for now
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        if self.delay_ms < 0:
            raise ValueError(f"delay_ms must be non-negative, got {self.delay_ms}")
        if not self.languages:
            raise ValueError("languages must contain at least one language code")


class TranscriptItem(BaseModel):
    """One caption cue. Times are seconds."""
    text: str
    start: float = Field(ge=0.0)
    duration: float = Field(ge=0.0)

    model_config = ConfigDict(frozen=True)


class TranslationLanguage(BaseModel):
    """A language the server can translate captions into."""
    language: str
    language_code: str

    model_config = ConfigDict(frozen=True)


class CaptionTrack(BaseModel):
    """
    One available caption stream for a video.

    translation_language_codes is empty when the track cannot be server-translated.
    translated_from is set only on tracks derived by TranscriptList.translate().
    """
    video_id: str
    language: str
    language_code: str
    is_generated: bool = False
    base_url: str
    translation_language_codes: Tuple[str, ...] = ()
    translated_from: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def kind(self) -> str:
        return "asr" if self.is_generated else "manual"

    @property
    def requires_po_token(self) -> bool:
        """True when the fetch URL demands a proof-of-origin token."""
        query = parse_qs(urlsplit(self.base_url).query)
        return "xpe" in query.get("exp", [])

    def __str__(self) -> str:
        suffix = " [TRANSLATABLE]" if self.translation_language_codes else ""
        return f'{self.language_code} ("{self.language}"){suffix}'


class Transcript(BaseModel):
    """The artifact returned to callers: ordered cues plus optional title."""
    video_id: str
    title: Optional[str] = None
    language: str
    language_code: str
    is_generated: bool = False
    items: List[TranscriptItem] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def text(self, separator: str = " ") -> str:
        return separator.join(item.text for item in self.items)

    def to_raw_data(self) -> List[Dict[str, Any]]:
        return [item.model_dump() for item in self.items]
