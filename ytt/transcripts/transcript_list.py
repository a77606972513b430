# ytt/transcripts/transcript_list.py
"""
Transcript list model.

Responsibility:
- Hold every caption track a video offers, partitioned into manual and generated
- Resolve a language preference list to one track
- Derive server-side translated tracks

Immutable once built. Translated tracks are derived on demand and never stored.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from pydantic import BaseModel, ConfigDict

from ytt.transcripts.errors import (
    NoTranscriptFound,
    NotTranslatable,
    TranslationLanguageNotAvailable,
)
from ytt.transcripts.schema import CaptionTrack, TranslationLanguage


def _with_query_param(url: str, key: str, value: str) -> str:
    parts = urlsplit(url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != key]
    query.append((key, value))
    return urlunsplit(parts._replace(query=urlencode(query)))


class TranscriptList(BaseModel):
    video_id: str
    title: Optional[str] = None
    manually_created: Dict[str, CaptionTrack] = {}
    generated: Dict[str, CaptionTrack] = {}
    translation_languages: Tuple[TranslationLanguage, ...] = ()

    model_config = ConfigDict(frozen=True)

    def tracks(self) -> List[CaptionTrack]:
        """All tracks, manual first, each group in discovery order."""
        return [*self.manually_created.values(), *self.generated.values()]

    def available_language_codes(self) -> List[str]:
        codes: List[str] = []
        for track in self.tracks():
            if track.language_code not in codes:
                codes.append(track.language_code)
        return codes

    def find_transcript(self, language_codes: Iterable[str]) -> CaptionTrack:
        """
        First track matching the preference order.
        For each code, a manual track wins over a generated one.
        """
        return self._find(language_codes, (self.manually_created, self.generated))

    def find_manually_created_transcript(self, language_codes: Iterable[str]) -> CaptionTrack:
        return self._find(language_codes, (self.manually_created,))

    def find_generated_transcript(self, language_codes: Iterable[str]) -> CaptionTrack:
        return self._find(language_codes, (self.generated,))

    def _find(self, language_codes: Iterable[str], groups: Tuple[Dict[str, CaptionTrack], ...]) -> CaptionTrack:
        codes = list(language_codes)
        for code in codes:
            for group in groups:
                if code in group:
                    return group[code]
        raise NoTranscriptFound(self.video_id, codes, self.available_language_codes())

    def is_translatable(self, track: CaptionTrack) -> bool:
        """
        True only when the video offers translation languages AND the track
        itself is flagged translatable (`isTranslatable` on the watch page).
        """
        return bool(self.translation_languages) and bool(track.translation_language_codes)

    def translate(self, track: CaptionTrack, language_code: str) -> CaptionTrack:
        """
        Derive a track the server renders in `language_code`.

        Raises NotTranslatable when the video offers no translation languages
        or the track is not flagged translatable. An unflagged track therefore
        raises NotTranslatable even when the video does offer the target.
        Raises TranslationLanguageNotAvailable when the target is not offered.
        """
        if not self.is_translatable(track):
            raise NotTranslatable(self.video_id)

        offered = {lang.language_code: lang for lang in self.translation_languages}
        target = offered.get(language_code)
        if target is None or language_code not in track.translation_language_codes:
            raise TranslationLanguageNotAvailable(self.video_id, language_code)

        return track.model_copy(
            update={
                "language": target.language,
                "language_code": target.language_code,
                "base_url": _with_query_param(track.base_url, "tlang", language_code),
                "translation_language_codes": (),
                "translated_from": track.language_code,
            }
        )

    def __str__(self) -> str:
        def block(lines: List[str]) -> str:
            return "\n".join(f" - {line}" for line in lines) if lines else "None"

        manual = [str(track) for track in self.manually_created.values()]
        generated = [str(track) for track in self.generated.values()]
        languages = [f'{lang.language_code} ("{lang.language}")' for lang in self.translation_languages]
        return (
            f"For this video ({self.video_id}) transcripts are available in the following languages:\n\n"
            f"(MANUALLY CREATED)\n{block(manual)}\n\n"
            f"(GENERATED)\n{block(generated)}\n\n"
            f"(TRANSLATION LANGUAGES)\n{block(languages)}"
        )
